#!/usr/bin/env python3
"""
Random fuzzer for the HTML tag iterator.
Generates invalid/malformed HTML and checks that iteration never crashes,
always balances enter/leave events, and gives the same events whether it
is driven by iterate() or by single steps.
"""

import argparse
import random
import string
import sys
import time
import traceback

from htmliterator import HtmlIterator, IteratorOpts, RecordingObserver

TAGS = [
    "div", "span", "p", "a", "img", "table", "tr", "td", "ul", "li",
    "input", "textarea", "script", "style", "head", "body", "html", "title",
    "meta", "link", "br", "hr", "h1", "pre", "code", "section", "nav",
    "template", "svg", "math", "custom-element", "x:y",
]

ATTRIBUTES = [
    "id", "class", "style", "href", "src", "alt", "title", "data-x",
    "disabled", "checked", "hidden",
]

SPECIAL_CHARS = ["\x00", "\x0b", "\x0c", "�", " ", " ", "﻿"]


def random_string(min_len=0, max_len=20):
    """Generate random ASCII string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def random_whitespace():
    ws = [" ", "\t", "\n", "\r", "\f", ""]
    return "".join(random.choices(ws, k=random.randint(0, 5)))


def fuzz_tag_name():
    """Generate malformed tag names."""
    strategies = [
        lambda: random.choice(TAGS),
        lambda: random.choice(TAGS).upper(),
        lambda: random.choice(TAGS) + random_string(1, 5),
        lambda: "",
        lambda: "0" + random.choice(TAGS),
        lambda: " " + random.choice(TAGS),
        lambda: random.choice(TAGS) + random.choice(SPECIAL_CHARS),
    ]
    return random.choice(strategies)()


def fuzz_attribute():
    """Generate malformed attributes."""
    name = random.choice([random.choice(ATTRIBUTES), random_string(1, 10), "=", '"', "'", "<"])
    value = random.choice([random_string(0, 30), "a > b", "</div>", "", "x" * 500])
    quote_start, quote_end = random.choice([
        ('="', '"'),
        ("='", "'"),
        ("=", ""),
        ("", ""),
        ('="', ""),  # Unclosed quote
        ("==", ""),
    ])
    return f"{name}{quote_start}{value}{quote_end}"


def fuzz_open_tag():
    tag = fuzz_tag_name()
    attrs = " ".join(fuzz_attribute() for _ in range(random.randint(0, 4)))
    closing = random.choice([">", "/>", " >", "/ >", "", ">>"])
    opening = random.choice(["<", "< ", "<<", "<!", "<?", "</"]) if random.random() < 0.2 else "<"
    return f"{opening}{tag}{random_whitespace()}{attrs}{random_whitespace()}{closing}"


def fuzz_close_tag():
    tag = fuzz_tag_name()
    return random.choice([
        f"</{tag}>",
        f"</ {tag}>",
        f"</{tag}{random_whitespace()}>",
        f"</{tag}",  # Unclosed
        f"</{tag}/>",
        f"</{tag} {fuzz_attribute()}>",
    ])


def fuzz_comment():
    content = random_string(0, 40)
    return random.choice([
        f"<!--{content}-->",
        f"<!--{content}",
        f"<!-->{content}",
        f"<!--{content}--!>",
        f"<!{content}>",
        f"<?{content}?>",
        f"<![CDATA[{content}]]>",
        "<!DOCTYPE html>",
        "<!doctype",
    ])


def fuzz_raw_text():
    name = random.choice(["script", "style", "SCRIPT"])
    content = random.choice([random_string(0, 30), "a < b && c > d", "</div>", "<!-- </" + name + "> -->"])
    return random.choice([
        f"<{name}>{content}</{name}>",
        f"<{name}>{content}",
        f"<{name}>{content}</{name}",
        f"<{name}>{content}</{name}s>",
        f"<{name} src='x'/>{content}",
    ])


def fuzz_text():
    return random.choice([
        lambda: random_string(1, 50),
        lambda: "<" + random_string(1, 5),
        lambda: random_string() + ">" + random_string(),
        lambda: " " * random.randint(1, 50),
        lambda: "\r\n" * random.randint(1, 5),
        lambda: "".join(random.choices(SPECIAL_CHARS, k=random.randint(1, 5))),
    ])()


def fuzz_nested_structure(depth=0, max_depth=10):
    """Generate nested (possibly invalid) structure."""
    if depth >= max_depth or random.random() < 0.3:
        return fuzz_text()

    tag = random.choice(TAGS)
    content = "".join(fuzz_nested_structure(depth + 1, max_depth) for _ in range(random.randint(0, 3)))

    # Sometimes don't close tags
    if random.random() < 0.2:
        return f"<{tag}>{content}"
    # Sometimes mismatch tags
    if random.random() < 0.1:
        return f"<{tag}>{content}</{random.choice(TAGS)}>"
    return f"<{tag}>{content}</{tag}>"


def generate_fuzzed_html():
    """Generate a complete fuzzed HTML document."""
    parts = []
    for _ in range(random.randint(1, 20)):
        element_type = random.choices(
            [fuzz_open_tag, fuzz_close_tag, fuzz_comment, fuzz_raw_text, fuzz_text, fuzz_nested_structure],
            weights=[20, 10, 6, 4, 15, 8],
        )[0]
        parts.append(element_type())
    return "".join(parts)


def random_opts():
    return IteratorOpts(
        collapse_whitespace=random.random() < 0.5,
        resolve_closing_indices=random.random() < 0.5,
    )


def random_descend():
    skipped = set(random.sample(TAGS, random.randint(0, 3)))
    return lambda tag: tag.tag not in skipped


def signature(events):
    return [(kind, getattr(payload, "body", payload)) for kind, payload in events]


def check_html(html, opts, descend):
    """Iterate ``html`` both ways and return a failure description or None."""
    full = RecordingObserver(descend)
    iterator = HtmlIterator(full, opts=opts)
    iterator.set_content(html)
    iterator.iterate()

    open_tags = []
    for kind, payload in full.events:
        if kind == "enter":
            open_tags.append(payload)
        elif kind == "leave":
            if not open_tags or open_tags.pop() is not payload:
                return "leave event without matching enter"
    if open_tags:
        return f"{len(open_tags)} entered tags never left"

    stepped = RecordingObserver(descend)
    iterator = HtmlIterator(stepped, opts=opts)
    iterator.set_content(html)
    while iterator.iterate_single_step():
        pass
    if signature(stepped.events) != signature(full.events):
        return "single-step events differ from iterate()"
    return None


def run_fuzzer(num_tests, seed=None, verbose=False, save_failures=False):
    """Run the fuzzer against the iterator."""
    if seed is not None:
        random.seed(seed)

    failures = []
    hangs = []
    successes = 0

    print(f"Fuzzing htmliterator with {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        html = generate_fuzzed_html()

        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        try:
            start = time.perf_counter()
            problem = check_html(html, random_opts(), random_descend())
            elapsed = time.perf_counter() - start
        except Exception as e:
            failures.append({"test_num": i, "html": html, "error": str(e), "traceback": traceback.format_exc()})
            if verbose:
                print(f"  CRASH: Test {i}: {e}")
            continue

        if problem is not None:
            failures.append({"test_num": i, "html": html, "error": problem, "traceback": ""})
            if verbose:
                print(f"  FAIL: Test {i}: {problem}")
        elif elapsed > 5.0:
            hangs.append({"test_num": i, "html": html, "time": elapsed})
            if verbose:
                print(f"  HANG: Test {i} took {elapsed:.2f}s")
        else:
            successes += 1

    elapsed_total = time.time() - start_time

    print(f"\n{'='*60}")
    print("FUZZING RESULTS: htmliterator")
    print(f"{'='*60}")
    print(f"Total tests:    {num_tests}")
    print(f"Successes:      {successes}")
    print(f"Failures:       {len(failures)}")
    print(f"Hangs (>5s):    {len(hangs)}")
    print(f"Total time:     {elapsed_total:.2f}s")
    print(f"Tests/second:   {num_tests/elapsed_total:.1f}")

    for failure in failures[:10]:
        print(f"\nTest #{failure['test_num']}:")
        print(f"  HTML: {failure['html'][:200]!r}...")
        print(f"  Error: {failure['error']}")
    if len(failures) > 10:
        print(f"\n... and {len(failures) - 10} more failures")

    if save_failures and (failures or hangs):
        filename = f"fuzz_failures_{int(time.time())}.txt"
        with open(filename, "w") as f:
            f.write(f"Seed: {seed}\n\n")
            for failure in failures:
                f.write(f"=== FAILURE #{failure['test_num']} ===\n")
                f.write(f"HTML:\n{failure['html']}\n")
                f.write(f"Error: {failure['error']}\n{failure['traceback']}\n\n")
            for hang in hangs:
                f.write(f"=== HANG #{hang['test_num']} ({hang['time']:.2f}s) ===\n")
                f.write(f"HTML:\n{hang['html']}\n\n")
        print(f"\nFailures saved to {filename}")

    return not failures and not hangs


def main():
    parser = argparse.ArgumentParser(description="Fuzz the HTML tag iterator with invalid input")
    parser.add_argument("--num-tests", "-n", type=int, default=1000, help="Number of test cases (default: 1000)")
    parser.add_argument("--seed", "-s", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--save-failures", action="store_true", help="Save failures to a file")
    parser.add_argument("--sample", type=int, metavar="N", help="Just print N sample fuzzed documents")
    args = parser.parse_args()

    if args.sample:
        if args.seed:
            random.seed(args.seed)
        for i in range(args.sample):
            print(f"=== Sample {i+1} ===")
            print(generate_fuzzed_html())
            print()
        return

    success = run_fuzzer(args.num_tests, seed=args.seed, verbose=args.verbose, save_failures=args.save_failures)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
