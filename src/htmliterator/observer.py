"""Observer protocol and ready-made observers.

An observer receives the iterator's events synchronously, in document
order. Every method of `HtmlIteratorObserver` is required; there is no base
class with no-op defaults. The adapters below cover the common cases of
recording, logging and tracking the currently open tag.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from .taginfo import TagInfo

logger = logging.getLogger(__name__)

ObserverEvent = tuple[str, Any]
DescendPredicate = Callable[[TagInfo], bool]


@runtime_checkable
class HtmlIteratorObserver(Protocol):
    def on_content_text(self, text: str) -> None: ...

    def on_single_tag(self, tag: TagInfo) -> None: ...

    def on_script(self, tag: TagInfo) -> None: ...

    def on_pair_tag(
        self,
        tag: TagInfo,
        opening_start: int,
        opening_end: int,
        closing_start: int,
        closing_end: int,
    ) -> bool:
        """Called when a pair tag opens.

        ``opening_start``/``opening_end`` are the offsets of the opening
        tag's ``<`` and ``>``. The closing offsets are -1 unless the
        iterator resolves them up front. Return True to descend into the
        tag's children, False to skip the whole subtree.
        """
        ...

    def on_leaving_pair_tag(self, tag: TagInfo) -> None: ...


class RecordingObserver:
    """Buffers events as ``(event, payload)`` tuples.

    Events: ``("text", str)``, ``("single", TagInfo)``, ``("script", TagInfo)``,
    ``("enter", TagInfo)``, ``("skip", TagInfo)`` and ``("leave", TagInfo)``.
    ``descend`` decides whether a pair tag is entered; by default every one is.
    """

    __slots__ = ("descend", "events")

    descend: DescendPredicate | None
    events: list[ObserverEvent]

    def __init__(self, descend: DescendPredicate | None = None) -> None:
        self.descend = descend
        self.events = []

    def on_content_text(self, text: str) -> None:
        self.events.append(("text", text))

    def on_single_tag(self, tag: TagInfo) -> None:
        self.events.append(("single", tag))

    def on_script(self, tag: TagInfo) -> None:
        self.events.append(("script", tag))

    def on_pair_tag(
        self,
        tag: TagInfo,
        opening_start: int,
        opening_end: int,
        closing_start: int,
        closing_end: int,
    ) -> bool:
        entered = True if self.descend is None else bool(self.descend(tag))
        self.events.append(("enter" if entered else "skip", tag))
        return entered

    def on_leaving_pair_tag(self, tag: TagInfo) -> None:
        self.events.append(("leave", tag))

    def drain(self) -> list[ObserverEvent]:
        events = self.events
        self.events = []
        return events


class DebugLogObserver:
    """Logs every event at DEBUG level and descends into every pair tag."""

    __slots__ = ("log",)

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logger

    def on_content_text(self, text: str) -> None:
        self.log.debug("on_content_text() -- text: %r", text)

    def on_single_tag(self, tag: TagInfo) -> None:
        self.log.debug("on_single_tag() -- tag: %s", tag.tag)

    def on_script(self, tag: TagInfo) -> None:
        self.log.debug("on_script() -- tag: %s", tag.tag)

    def on_pair_tag(
        self,
        tag: TagInfo,
        opening_start: int,
        opening_end: int,
        closing_start: int,
        closing_end: int,
    ) -> bool:
        self.log.debug("on_pair_tag() -- tag: %s at %d:%d", tag.tag, opening_start, opening_end)
        return True

    def on_leaving_pair_tag(self, tag: TagInfo) -> None:
        self.log.debug("on_leaving_pair_tag() -- tag: %s", tag.tag)


class OpenTagTracker:
    """Forwards events to ``observer`` while tracking the open pair tags.

    The tracking is rebuilt from enter/leave events alone, so it never
    disagrees with what the wrapped observer has been told.
    """

    __slots__ = ("_open", "observer")

    def __init__(self, observer: HtmlIteratorObserver) -> None:
        self.observer = observer
        self._open: list[TagInfo] = []

    @property
    def current(self) -> TagInfo | None:
        return self._open[-1] if self._open else None

    @property
    def depth(self) -> int:
        return len(self._open)

    @property
    def path(self) -> tuple[str, ...]:
        return tuple(tag.tag for tag in self._open)

    def on_content_text(self, text: str) -> None:
        self.observer.on_content_text(text)

    def on_single_tag(self, tag: TagInfo) -> None:
        self.observer.on_single_tag(tag)

    def on_script(self, tag: TagInfo) -> None:
        self.observer.on_script(tag)

    def on_pair_tag(
        self,
        tag: TagInfo,
        opening_start: int,
        opening_end: int,
        closing_start: int,
        closing_end: int,
    ) -> bool:
        entered = self.observer.on_pair_tag(tag, opening_start, opening_end, closing_start, closing_end)
        if entered:
            self._open.append(tag)
        return entered

    def on_leaving_pair_tag(self, tag: TagInfo) -> None:
        self.observer.on_leaving_pair_tag(tag)
        if self._open:
            self._open.pop()
