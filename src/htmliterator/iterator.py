"""The iteration engine.

`HtmlIterator` walks a content buffer left to right and reports what it
finds to an observer. All progress lives in explicit fields (cursor, nesting
stack, state) so a run can be driven to completion with `iterate()` or one
transition at a time with `iterate_single_step()`; both produce the same
event sequence.

Usual flow::

    iterator = HtmlIterator(observer)
    iterator.set_content(html)
    iterator.iterate()
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from .classifier import is_full_document
from .constants import (
    BYTE_ORDER_MARK,
    INLINE_ELEMENT_SET,
    PREFORMATTED_ELEMENT_SET,
    RAW_TEXT_ELEMENT_SET,
    VOID_ELEMENT_SET,
)
from .errors import IteratorStateError, ParseError
from .observer import DebugLogObserver, HtmlIteratorObserver
from .scanner import Scanner
from .stack import NestingStack, OpenTag
from .taginfo import ParsedTag, parse_tag
from .text import WhitespaceNormalizer
from .tokens import CommentToken, DoctypeToken, TagCandidate, TextToken, Token

logger = logging.getLogger(__name__)


class IteratorOpts:
    """Options controlling how content is reported.

    - ``collapse_whitespace``: collapse and contextually trim text outside
      preformatted elements instead of delivering it literally.
    - ``resolve_closing_indices``: look ahead for each pair tag's closing tag
      so `on_pair_tag` receives real closing offsets instead of -1.
    - ``void_elements`` / ``raw_text_elements`` / ``inline_elements``:
      override the element sets from `htmliterator.constants`.
    - ``discard_bom``: start iterating after a leading byte order mark.
      Offsets still refer to the content as given.
    """

    __slots__ = (
        "collapse_whitespace",
        "discard_bom",
        "inline_elements",
        "raw_text_elements",
        "resolve_closing_indices",
        "void_elements",
    )

    collapse_whitespace: bool
    discard_bom: bool
    resolve_closing_indices: bool
    void_elements: frozenset[str]
    raw_text_elements: frozenset[str]
    inline_elements: frozenset[str]

    def __init__(
        self,
        collapse_whitespace: bool = False,
        resolve_closing_indices: bool = False,
        void_elements: Iterable[str] | None = None,
        raw_text_elements: Iterable[str] | None = None,
        inline_elements: Iterable[str] | None = None,
        discard_bom: bool = True,
    ) -> None:
        self.collapse_whitespace = bool(collapse_whitespace)
        self.resolve_closing_indices = bool(resolve_closing_indices)
        self.void_elements = VOID_ELEMENT_SET if void_elements is None else frozenset(void_elements)
        self.raw_text_elements = RAW_TEXT_ELEMENT_SET if raw_text_elements is None else frozenset(raw_text_elements)
        self.inline_elements = INLINE_ELEMENT_SET if inline_elements is None else frozenset(inline_elements)
        self.discard_bom = bool(discard_bom)


class HtmlIterator:
    IDLE = 0
    SCANNING = 1
    IN_SCRIPT = 2
    DRAINING = 3
    FINISHED = 4

    __slots__ = (
        "_content",
        "_dispatching",
        "_full_document",
        "_last_entered",
        "_normalizer",
        "_raw_text_tag",
        "_scanner",
        "collect_errors",
        "cursor",
        "debug",
        "errors",
        "observer",
        "opts",
        "stack",
        "state",
    )

    _content: str | None
    _full_document: bool | None
    _last_entered: str | None
    _raw_text_tag: str | None
    _scanner: Scanner | None
    collect_errors: bool
    cursor: int
    debug: bool
    errors: list[ParseError]
    observer: HtmlIteratorObserver | None
    opts: IteratorOpts
    stack: NestingStack
    state: int

    def __init__(
        self,
        observer: HtmlIteratorObserver | None = None,
        *,
        opts: IteratorOpts | None = None,
        debug: bool = False,
        collect_errors: bool = False,
    ) -> None:
        self.opts = opts or IteratorOpts()
        self.debug = bool(debug)
        self.collect_errors = bool(collect_errors)
        self.observer = None
        self.stack = NestingStack()
        self.errors = []
        self._normalizer = WhitespaceNormalizer(self.opts.inline_elements)
        self._dispatching = False
        self._reset_content(None)
        if observer is not None:
            self.set_observer(observer)

    # Public API

    @property
    def content(self) -> str | None:
        return self._content

    @property
    def has_content(self) -> bool:
        return self._content is not None

    @property
    def is_finished(self) -> bool:
        return self.state == self.FINISHED

    @property
    def depth(self) -> int:
        return len(self.stack)

    @property
    def is_full_html_document(self) -> bool:
        """True when the current content is a whole document, not a fragment."""
        if self._full_document is None:
            if self._content is None:
                return False
            self._full_document = is_full_document(self._content, self._scanner)
        return self._full_document

    def set_observer(self, observer: HtmlIteratorObserver) -> None:
        self._check_not_dispatching("set_observer")
        if not isinstance(observer, HtmlIteratorObserver):
            raise TypeError(f"{type(observer).__name__} does not implement HtmlIteratorObserver")
        self.observer = observer

    def set_content(self, content: str) -> None:
        """Replace the content and reset all iteration state.

        Calling this between single steps abandons the unfinished run; no
        leave events are delivered for tags that were still open.
        """
        self._check_not_dispatching("set_content")
        if not isinstance(content, str):
            raise TypeError(f"content must be str, not {type(content).__name__}")
        self._reset_content(content)
        if self.debug:
            self._debug(f"set_content() -- {len(content)} characters")

    def reset(self) -> None:
        """Restart iteration over the current content from the beginning."""
        self._check_not_dispatching("reset")
        if self._content is None:
            raise IteratorStateError("reset() called before set_content()")
        self._restart()

    def clear(self) -> None:
        """Drop the content and all iteration state."""
        self._check_not_dispatching("clear")
        self._reset_content(None)

    def iterate(self) -> None:
        """Run the iteration to completion."""
        self._check_ready("iterate")
        if self.debug:
            self._debug("iterate()")
        while self._step():
            pass
        if self.debug:
            self._debug("iterate() -- done")

    def iterate_single_step(self) -> bool:
        """Perform one transition. Returns True while more steps remain."""
        self._check_ready("iterate_single_step")
        return self._step()

    # State management

    def _reset_content(self, content: str | None) -> None:
        self._content = content
        self._scanner = None if content is None else Scanner(content, self.opts.raw_text_elements)
        self._full_document = None
        self._restart()

    def _restart(self) -> None:
        content = self._content
        if content and self.opts.discard_bom and content[0] == BYTE_ORDER_MARK:
            self.cursor = 1
        else:
            self.cursor = 0
        self.stack.clear()
        self.errors = []
        self._raw_text_tag = None
        self._last_entered = None
        self._normalizer.reset()
        if content is None:
            self.state = self.IDLE
        elif self.cursor < len(content):
            self.state = self.SCANNING
        else:
            self.state = self.FINISHED

    def _check_not_dispatching(self, name: str) -> None:
        if self._dispatching:
            raise IteratorStateError(f"{name}() called from inside an observer callback")

    def _check_ready(self, name: str) -> None:
        self._check_not_dispatching(name)
        if self._content is None:
            raise IteratorStateError(f"{name}() called before set_content()")
        if self.observer is None:
            raise IteratorStateError(f"{name}() called before set_observer()")

    # Transitions

    def _step(self) -> bool:
        state = self.state
        if state == self.SCANNING:
            self._step_scanning()
        elif state == self.IN_SCRIPT:
            self._step_raw_text()
        elif state == self.DRAINING:
            self._step_draining()

        state = self.state
        if state == self.SCANNING and self.cursor >= len(self._content):
            state = self.DRAINING if self.stack else self.FINISHED
        elif state == self.DRAINING and not self.stack:
            state = self.FINISHED
        if state != self.state:
            if self.debug:
                self._debug(f"state {self.state} -> {state} at {self.cursor}")
            self.state = state
        return state != self.FINISHED

    def _step_scanning(self) -> None:
        content = self._content
        token = self._scanner.next_token(self.cursor)
        if token is None:
            self.cursor = len(content)
            return

        kind = type(token)
        if kind is TagCandidate:
            parsed = parse_tag(content, token.start, token.end, self.opts.void_elements)
            if parsed is not None:
                self.cursor = token.end
                for code in parsed.errors:
                    self._error(code, token.start, parsed.name)
                if parsed.is_closing:
                    self._on_closing_tag(parsed)
                else:
                    self._on_opening_tag(parsed)
                return
        elif kind is CommentToken or kind is DoctypeToken:
            self.cursor = token.end
            return

        self._on_text(token)

    def _step_raw_text(self) -> None:
        name = self._raw_text_tag
        start = self.cursor
        closing = self._scanner.find_raw_text_end(name, start)
        if closing is None:
            self._error("eof-in-raw-text", start, name)
            end = len(self._content)
            self.cursor = end
        else:
            end = closing.start
            self.cursor = closing.end
        self._raw_text_tag = None
        self.state = self.SCANNING
        if end > start:
            self._dispatch(self.observer.on_content_text, self._content[start:end])

    def _step_draining(self) -> None:
        entry = self.stack.pop()
        if entry is None:
            return
        self._error("unclosed-element", entry.start, entry.info.tag)
        self._dispatch(self.observer.on_leaving_pair_tag, entry.info)

    # Token handlers

    def _on_text(self, token: Token) -> None:
        """Deliver one text run, merged with any literal pieces that follow it.

        Invalid tag candidates and unterminated markup read as text, so they
        are folded into the surrounding run rather than split out.
        """
        content = self._content
        scanner = self._scanner
        self._literal_error(token)
        pos = token.end
        boundary_tag = None
        while True:
            following = scanner.next_token(pos)
            if following is None:
                break
            kind = type(following)
            if kind is TagCandidate:
                parsed = parse_tag(content, following.start, following.end, self.opts.void_elements)
                if parsed is not None:
                    boundary_tag = parsed.name
                    break
            elif kind is not TextToken:
                break
            self._literal_error(following)
            pos = following.end

        text = content[token.start : pos]
        self.cursor = pos
        if self.opts.collapse_whitespace:
            text = self._normalizer.normalize(
                text,
                self._last_entered,
                boundary_tag,
                preformatted=self._in_preformatted(),
            )
            if text is None:
                return
        self._dispatch(self.observer.on_content_text, text)

    def _on_opening_tag(self, parsed: ParsedTag) -> None:
        info = parsed.info
        name = parsed.name
        observer = self.observer

        if name in self.opts.raw_text_elements:
            self._dispatch(observer.on_script, info)
            if not parsed.self_closing:
                self._raw_text_tag = name
                self.state = self.IN_SCRIPT
            return

        if info.is_single:
            self._dispatch(observer.on_single_tag, info)
            return

        resolved = self.opts.resolve_closing_indices
        closing = self._scanner.find_closing_tag(name, parsed.end) if resolved else None
        if closing is None:
            closing_start = closing_end = -1
        else:
            closing_start = closing.start
            closing_end = closing.end - 1

        entered = self._dispatch(
            observer.on_pair_tag,
            info,
            parsed.start,
            parsed.end - 1,
            closing_start,
            closing_end,
        )
        if entered:
            self.stack.push(OpenTag(info, parsed.start, parsed.end - 1))
            self._last_entered = name
            return

        if not resolved:
            closing = self._scanner.find_closing_tag(name, parsed.end)
        if closing is None:
            # Nothing to skip to; only the opening tag is dropped
            self._error("missing-closing-tag", parsed.start, name)
            self.cursor = parsed.end
        else:
            self.cursor = closing.end
        if self.debug:
            self._debug(f"skipped <{name}> subtree, resuming at {self.cursor}")

    def _on_closing_tag(self, parsed: ParsedTag) -> None:
        name = parsed.name
        depth = self.stack.find(name)
        if depth == -1:
            self._error("unexpected-end-tag", parsed.start, name)
            return
        if depth > 0:
            self._error("misnested-end-tag", parsed.start, name)
        leave = self.observer.on_leaving_pair_tag
        for _ in range(depth + 1):
            entry = self.stack.pop()
            self._dispatch(leave, entry.info)

    # Helpers

    def _dispatch(self, callback: Callable[..., Any], *args: Any) -> Any:
        self._dispatching = True
        try:
            return callback(*args)
        finally:
            self._dispatching = False

    def _in_preformatted(self) -> bool:
        return any(entry.info.tag in PREFORMATTED_ELEMENT_SET for entry in self.stack)

    def _literal_error(self, token: Token) -> None:
        if type(token) is TagCandidate:
            self._error("invalid-tag-name", token.start)
        elif token.error:
            self._error(token.error, token.start)

    def _error(self, code: str, offset: int, tag_name: str | None = None) -> None:
        if self.collect_errors:
            self.errors.append(ParseError.at(self._content, code, offset, tag_name))
        if self.debug:
            self._debug(f"recovered from {code} at {offset}" + (f" <{tag_name}>" if tag_name else ""))

    def _debug(self, message: str) -> None:
        logger.debug("HtmlIterator: %s", message)


def debug_iterate(content: str, *, opts: IteratorOpts | None = None) -> list[ParseError]:
    """Iterate ``content`` with a `DebugLogObserver` and return the parse errors."""
    iterator = HtmlIterator(DebugLogObserver(), opts=opts, debug=True, collect_errors=True)
    iterator.set_content(content)
    iterator.iterate()
    return iterator.errors
