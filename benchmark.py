#!/usr/bin/env python3
"""
Performance benchmark for htmliterator against the stdlib html.parser.
Reads .html files from a directory (or single files) into memory and times
a full event walk over each of them.
"""

# ruff: noqa: PERF203, PLC0415, BLE001
from __future__ import annotations

import argparse
import multiprocessing
import os
import pathlib
import sys
import threading
import time

# MEMORY: optional dependency for RSS sampling
try:
    import psutil

    _PSUTIL_AVAILABLE = True
except ImportError:
    psutil = None
    _PSUTIL_AVAILABLE = False


# MEMORY: lightweight RSS monitor using psutil
class MemoryMonitor:
    def __init__(self, pid: int | None = None, sample_interval: float = 0.01):
        """
        pid: process ID to monitor (default: current process).
        sample_interval: seconds between samples (default 10ms).
        """
        self.sample_interval = sample_interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        target_pid = pid if pid is not None else os.getpid()
        self._proc = psutil.Process(target_pid) if _PSUTIL_AVAILABLE else None
        self.start_rss = None
        self.end_rss = None
        self.peak_rss = None
        self.last_rss = None
        self.samples = 0

    def _get_rss(self) -> int | None:
        if not self._proc:
            return None
        try:
            return self._proc.memory_info().rss
        except psutil.Error:
            return None

    def start(self):
        if not _PSUTIL_AVAILABLE:
            return
        self.start_rss = self._get_rss()
        self.peak_rss = self.start_rss
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self):
        while not self._stop.is_set():
            rss = self._get_rss()
            if rss is not None:
                self.last_rss = rss
                if self.peak_rss is None or rss > self.peak_rss:
                    self.peak_rss = rss
                self.samples += 1
            self._stop.wait(self.sample_interval)

    def stop(self):
        if not _PSUTIL_AVAILABLE:
            return
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=1.0)

        # The child may already be gone; fall back to the last sample
        current = self._get_rss()
        self.end_rss = current if current else self.last_rss

    def to_dict(self) -> dict:
        if not _PSUTIL_AVAILABLE:
            return {"memory_note": "psutil not installed; memory metrics skipped"}

        def mb(x):
            return (x or 0) / (1024 * 1024)

        delta_mb = mb(self.end_rss) - mb(self.start_rss) if self.end_rss and self.start_rss else 0.0
        return {
            "rss_start_mb": mb(self.start_rss),
            "rss_end_mb": mb(self.end_rss),
            "rss_delta_mb": delta_mb,
            "rss_peak_mb": mb(self.peak_rss),
            "mem_samples": self.samples,
        }


def load_html_files(paths: list[pathlib.Path], limit: int | None) -> list[tuple[str, str]]:
    """Collect ``(name, html)`` pairs from files and directories."""
    files = []
    for path in paths:
        candidates = sorted(path.rglob("*.html")) if path.is_dir() else [path]
        for candidate in candidates:
            files.append((str(candidate), candidate.read_text(errors="replace")))
            if limit and len(files) >= limit:
                return files
    return files


class CountingObserver:
    __slots__ = ("events",)

    def __init__(self):
        self.events = 0

    def on_content_text(self, text):
        self.events += 1

    def on_single_tag(self, tag):
        self.events += 1

    def on_script(self, tag):
        self.events += 1

    def on_pair_tag(self, tag, opening_start, opening_end, closing_start, closing_end):
        self.events += 1
        return True

    def on_leaving_pair_tag(self, tag):
        self.events += 1


def _timed(html_files: list, iterations: int, run_one) -> dict:
    times = []
    errors = 0
    error_files = []
    # Warm up
    if html_files:
        run_one(html_files[0][1])
    for _ in range(iterations):
        for filename, html in html_files:
            try:
                start = time.perf_counter()
                run_one(html)
                times.append(time.perf_counter() - start)
            except Exception as e:
                errors += 1
                error_files.append((filename, str(e)))
    return {
        "total_time": sum(times),
        "mean_time": sum(times) / len(times) if times else 0,
        "min_time": min(times) if times else 0,
        "max_time": max(times) if times else 0,
        "errors": errors,
        "success_count": len(times),
        "error_files": error_files,
    }


def benchmark_htmliterator(html_files: list, iterations: int = 1) -> dict:
    """Benchmark iterate() with literal text."""
    from htmliterator import HtmlIterator

    iterator = HtmlIterator(CountingObserver())

    def run_one(html):
        iterator.set_content(html)
        iterator.iterate()

    return _timed(html_files, iterations, run_one)


def benchmark_htmliterator_steps(html_files: list, iterations: int = 1) -> dict:
    """Benchmark driving the same walk with iterate_single_step()."""
    from htmliterator import HtmlIterator

    iterator = HtmlIterator(CountingObserver())

    def run_one(html):
        iterator.set_content(html)
        while iterator.iterate_single_step():
            pass

    return _timed(html_files, iterations, run_one)


def benchmark_htmliterator_collapse(html_files: list, iterations: int = 1) -> dict:
    """Benchmark iterate() with whitespace collapsing and closing lookahead."""
    from htmliterator import HtmlIterator, IteratorOpts

    opts = IteratorOpts(collapse_whitespace=True, resolve_closing_indices=True)
    iterator = HtmlIterator(CountingObserver(), opts=opts)

    def run_one(html):
        iterator.set_content(html)
        iterator.iterate()

    return _timed(html_files, iterations, run_one)


def benchmark_html_parser(html_files: list, iterations: int = 1) -> dict:
    """Benchmark stdlib html.parser."""
    from html.parser import HTMLParser

    class SimpleHTMLParser(HTMLParser):
        def __init__(self):
            super().__init__()
            self.events = 0

        def handle_starttag(self, tag, attrs):
            self.events += 1

        def handle_endtag(self, tag):
            self.events += 1

        def handle_data(self, data):
            self.events += 1

    def run_one(html):
        parser = SimpleHTMLParser()
        parser.feed(html)
        parser.close()

    return _timed(html_files, iterations, run_one)


BENCHMARKS = {
    "htmliterator": benchmark_htmliterator,
    "htmliterator-steps": benchmark_htmliterator_steps,
    "htmliterator-collapse": benchmark_htmliterator_collapse,
    "html.parser": benchmark_html_parser,
}


def _benchmark_worker(bench_fn, html_files, iterations, queue):
    """Worker function to run benchmark in a separate process."""
    try:
        queue.put(bench_fn(html_files, iterations))
    except Exception as e:
        queue.put({"error": str(e)})


def run_benchmark_isolated(bench_fn, html_files, iterations, args):
    """Run benchmark in a separate process to isolate memory usage."""
    if args.no_mem or not _PSUTIL_AVAILABLE:
        return bench_fn(html_files, iterations)

    queue = multiprocessing.Queue()
    p = multiprocessing.Process(target=_benchmark_worker, args=(bench_fn, html_files, iterations, queue))
    p.start()

    # Monitor the child process
    mon = MemoryMonitor(pid=p.pid, sample_interval=max(0.0005, args.mem_sample_ms / 1000.0))
    mon.start()

    res = None
    try:
        res = queue.get()
    finally:
        mon.stop()
        p.join()

    if res and "error" not in res:
        res.update(mon.to_dict())
    return res


def print_results(results: dict, file_count: int, iterations: int = 1):
    """Pretty print benchmark results."""
    print("\n" + "=" * 90)
    if iterations > 1:
        print(f"BENCHMARK RESULTS ({file_count} HTML files x {iterations} iterations)")
    else:
        print(f"BENCHMARK RESULTS ({file_count} HTML files)")
    print("=" * 90)

    print(f"\n{'Benchmark':<24} {'Total (s)':<10} {'Mean (ms)':<10} {'Peak (MB)':<10} {'Delta (MB)':<10} {'Errors':<8}")
    print("-" * 90)

    baseline = results.get("htmliterator", {}).get("total_time", 0)
    for name, result in results.items():
        if "error" in result:
            print(f"{name:<24} {result['error']}")
            continue

        total = result["total_time"]
        if "rss_peak_mb" in result:
            mem_str = f"{result['rss_peak_mb']:>10.1f} {result['rss_delta_mb']:>10.1f}"
        else:
            mem_str = f"{'n/a':>10} {'n/a':>10}"
        ratio = f" ({total / baseline:.2f}x)" if name != "htmliterator" and baseline > 0 and total > 0 else ""
        print(f"{name:<24} {total:<10.3f} {result['mean_time'] * 1000:<10.3f} {mem_str} {result['errors']:<8}{ratio}")

    print("\n" + "=" * 90)

    for name, result in results.items():
        error_files = result.get("error_files", [])
        if error_files:
            print(f"\nErrors for {name}:")
            for filename, error_msg in error_files:
                print(f"  {filename}: {error_msg}")


def main():
    parser = argparse.ArgumentParser(
        description="Benchmark htmliterator on local HTML files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "paths",
        nargs="*",
        type=pathlib.Path,
        default=[pathlib.Path("tests/fixtures")],
        help="HTML files or directories to read (default: tests/fixtures)",
    )
    parser.add_argument("--limit", type=int, default=100, help="Limit number of files (default: 100, 0 for all)")
    parser.add_argument("--iterations", type=int, default=5, help="Iterations to run for averaging (default: 5)")
    parser.add_argument(
        "--benchmarks",
        nargs="+",
        choices=list(BENCHMARKS),
        default=list(BENCHMARKS),
        help="Benchmarks to run (default: all)",
    )
    # MEMORY: options
    parser.add_argument("--no-mem", action="store_true", help="Disable memory measurement (RSS sampling)")
    parser.add_argument(
        "--mem-sample-ms", type=float, default=10.0, help="Memory sampling interval in milliseconds (default: 10ms)",
    )
    args = parser.parse_args()

    html_files = load_html_files(args.paths, args.limit if args.limit > 0 else None)
    if not html_files:
        print("ERROR: No HTML files loaded")
        sys.exit(1)
    total_bytes = sum(len(html) for _, html in html_files)
    print(f"Loaded {len(html_files)} HTML files ({total_bytes / 1024 / 1024:.2f} MB)")

    if not _PSUTIL_AVAILABLE and not args.no_mem:
        print("Note: psutil not installed; memory metrics will be skipped. Install with: pip install psutil")

    results = {}
    for name in args.benchmarks:
        print(f"\nBenchmarking {name}...", end="", flush=True)
        res = run_benchmark_isolated(BENCHMARKS[name], html_files, args.iterations, args)
        results[name] = res
        if "error" in res:
            print(f" FAILED ({res['error']})")
        else:
            print(f" DONE ({res['total_time']:.3f}s)")

    print_results(results, len(html_files), args.iterations)


if __name__ == "__main__":
    main()
