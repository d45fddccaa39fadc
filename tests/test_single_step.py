from __future__ import annotations

import unittest
from pathlib import Path

from htmliterator import HtmlIterator, IteratorOpts, RecordingObserver

FIXTURES = Path(__file__).parent / "fixtures"

SAMPLES = [
    "<div><p>Hi<br>there</p><img src='a.png'></div>",
    "<div><span><b>x</div>after",
    "<p>hello <b class='x' ",
    "<ul><li>1<li>2</ul><script>if (a < b) {}</script>tail",
    "a < b and </ c> d<",
    "<div><p>unclosed",
    "",
]


def _signature(events):
    return [(kind, getattr(payload, "body", payload)) for kind, payload in events]


def _iterate(html, opts=None, descend=None):
    sink = RecordingObserver(descend)
    iterator = HtmlIterator(sink, opts=opts)
    iterator.set_content(html)
    iterator.iterate()
    return _signature(sink.events)


def _step(html, opts=None, descend=None):
    sink = RecordingObserver(descend)
    iterator = HtmlIterator(sink, opts=opts)
    iterator.set_content(html)
    while iterator.iterate_single_step():
        pass
    return _signature(sink.events)


class TestSingleStep(unittest.TestCase):
    def test_step_results(self) -> None:
        sink = RecordingObserver()
        iterator = HtmlIterator(sink)
        iterator.set_content("<p>x</p>")
        assert [iterator.iterate_single_step() for _ in range(4)] == [True, True, False, False]
        assert [kind for kind, _ in sink.events] == ["enter", "text", "leave"]

    def test_draining_takes_one_step_per_tag(self) -> None:
        sink = RecordingObserver()
        iterator = HtmlIterator(sink)
        iterator.set_content("<div><p>x")
        results = []
        while True:
            results.append(iterator.iterate_single_step())
            if not results[-1]:
                break
        assert results == [True, True, True, True, False]
        assert [kind for kind, _ in sink.events] == ["enter", "enter", "text", "leave", "leave"]

    def test_empty_content_finishes_immediately(self) -> None:
        sink = RecordingObserver()
        iterator = HtmlIterator(sink)
        iterator.set_content("")
        assert iterator.iterate_single_step() is False
        assert sink.events == []

    def test_matches_iterate(self) -> None:
        for html in SAMPLES:
            assert _step(html) == _iterate(html), html

    def test_matches_iterate_with_options(self) -> None:
        html = (FIXTURES / "integration.html").read_text()
        opts = IteratorOpts(collapse_whitespace=True, resolve_closing_indices=True)

        def descend(tag):
            return tag.tag != "ul"

        assert _step(html, opts, descend) == _iterate(html, opts, descend)

    def test_mixed_driving(self) -> None:
        html = SAMPLES[0]
        sink = RecordingObserver()
        iterator = HtmlIterator(sink)
        iterator.set_content(html)
        iterator.iterate_single_step()
        iterator.iterate_single_step()
        iterator.iterate()
        assert _signature(sink.events) == _iterate(html)

    def test_set_content_abandons_run(self) -> None:
        sink = RecordingObserver()
        iterator = HtmlIterator(sink)
        iterator.set_content("<div><p>x</p></div>")
        iterator.iterate_single_step()
        assert iterator.depth == 1

        iterator.set_content("<span>y</span>")
        assert iterator.depth == 0
        sink.drain()
        iterator.iterate()
        assert [(kind, payload if kind == "text" else payload.tag) for kind, payload in sink.events] == [
            ("enter", "span"),
            ("text", "y"),
            ("leave", "span"),
        ]

    def test_reset_replays_same_events(self) -> None:
        sink = RecordingObserver()
        iterator = HtmlIterator(sink)
        iterator.set_content(SAMPLES[1])
        iterator.iterate()
        first = sink.drain()
        iterator.reset()
        iterator.iterate()
        assert _signature(sink.events) == _signature(first)

    def test_independent_iterators_interleave(self) -> None:
        first = RecordingObserver()
        second = RecordingObserver()
        a = HtmlIterator(first)
        b = HtmlIterator(second)
        a.set_content(SAMPLES[0])
        b.set_content(SAMPLES[3])
        more_a = more_b = True
        while more_a or more_b:
            if more_a:
                more_a = a.iterate_single_step()
            if more_b:
                more_b = b.iterate_single_step()
        assert _signature(first.events) == _iterate(SAMPLES[0])
        assert _signature(second.events) == _iterate(SAMPLES[3])


if __name__ == "__main__":
    unittest.main()
