from __future__ import annotations

from collections.abc import Generator

from .iterator import HtmlIterator, IteratorOpts
from .observer import DescendPredicate, ObserverEvent, RecordingObserver


def stream(
    html: str,
    *,
    descend: DescendPredicate | None = None,
    opts: IteratorOpts | None = None,
) -> Generator[ObserverEvent, None, None]:
    """
    Stream iterator events for the given HTML string.
    Yields ``(event, payload)`` tuples as described by `RecordingObserver`.

    Events are produced one engine step at a time, so stopping the generator
    early leaves the rest of the content unscanned.
    """
    sink = RecordingObserver(descend)
    iterator = HtmlIterator(sink, opts=opts)
    iterator.set_content(html)

    while True:
        has_more = iterator.iterate_single_step()

        # Yield any events produced by this step
        if sink.events:
            yield from sink.drain()

        if not has_more:
            break
