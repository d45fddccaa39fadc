"""Error records and messages for malformed markup and API misuse.

Malformed markup never raises: the iterator recovers and, when error
collection is enabled, records a `ParseError` describing what it absorbed.
Only programmer misuse raises, as `IteratorStateError`.
"""

from __future__ import annotations


class IteratorStateError(RuntimeError):
    """Raised when the iterator is driven in a way its state does not allow."""


def generate_error_message(code: str, tag_name: str | None = None) -> str:
    """Generate a human-readable message for a parse error code.

    Args:
        code: The error code string (kebab-case format)
        tag_name: Optional tag name to include in the message for context

    Returns:
        Human-readable error message string
    """
    messages = {
        # Scanner errors
        "eof-in-tag": "Unexpected end of file in tag, treated as text",
        "eof-in-comment": "Unexpected end of file in comment, treated as text",
        # Tag errors
        "invalid-tag-name": "Tag has no recognizable name, treated as text",
        "duplicate-attribute": "Duplicate attribute name, first value kept",
        # Nesting errors
        "unexpected-end-tag": "Unexpected </{tag_name}> end tag, ignored",
        "misnested-end-tag": "</{tag_name}> closes elements that are still open",
        "unclosed-element": "<{tag_name}> is still open at end of file",
        "missing-closing-tag": "No closing tag for skipped <{tag_name}>, only the tag was skipped",
        # Raw text errors
        "eof-in-raw-text": "Unexpected end of file in <{tag_name}> content",
    }

    message = messages.get(code)
    if message is None:
        return code
    if "{tag_name}" in message:
        return message.format(tag_name=tag_name or "?")
    return message


class ParseError:
    """A malformed-markup condition the iterator recovered from."""

    __slots__ = ("code", "column", "line", "message", "offset", "tag_name")

    def __init__(
        self,
        code: str,
        offset: int,
        line: int | None = None,
        column: int | None = None,
        tag_name: str | None = None,
        message: str | None = None,
    ) -> None:
        self.code = code
        self.offset = offset
        self.line = line
        self.column = column
        self.tag_name = tag_name
        self.message = message or generate_error_message(code, tag_name)

    @classmethod
    def at(cls, content: str, code: str, offset: int, tag_name: str | None = None) -> ParseError:
        """Build an error for ``offset`` in ``content`` with 1-based line/column."""
        line = content.count("\n", 0, offset) + 1
        line_start = content.rfind("\n", 0, offset) + 1
        return cls(code, offset, line=line, column=offset - line_start + 1, tag_name=tag_name)

    def __repr__(self) -> str:
        if self.line is not None and self.column is not None:
            return f"ParseError({self.code!r}, line={self.line}, column={self.column})"
        return f"ParseError({self.code!r}, offset={self.offset})"

    def __str__(self) -> str:
        if self.line is not None and self.column is not None:
            return f"({self.line},{self.column}): {self.code} - {self.message}"
        return f"{self.code} - {self.message}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParseError):
            return NotImplemented
        return self.code == other.code and self.offset == other.offset and self.tag_name == other.tag_name

    __hash__ = None  # type: ignore[assignment]
