"""Tag metadata extraction.

`parse_tag` turns a tag candidate span produced by the scanner into a
`ParsedTag`, building the immutable `TagInfo` that observers receive.

Normalization rules:
- tag and attribute names are ASCII-lowercased
- attribute values are kept verbatim, minus their quote delimiters
- a repeated attribute keeps its first value (later ones are reported as
  ``duplicate-attribute``)
- ``classes`` is derived from the ``class`` attribute by `split_classes`
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .constants import ASCII_WHITESPACE, VOID_ELEMENT_SET
from .scanner import ATTRIBUTE_PATTERN, TAG_NAME_PATTERN, ends_self_closing, lower_ascii

_WHITESPACE_TO_SPACE = str.maketrans(dict.fromkeys(ASCII_WHITESPACE, " "))


def split_classes(value: str) -> tuple[str, ...]:
    """Split a raw ``class`` attribute value into lower-case class tokens.

    Only ASCII whitespace separates tokens and only ASCII letters are
    lowered, matching how tag and attribute names are normalized.
    """
    return tuple(lower_ascii(token) for token in value.translate(_WHITESPACE_TO_SPACE).split(" ") if token)


@dataclass(frozen=True, slots=True)
class TagInfo:
    """Structured view of a single HTML tag.

    ``body`` is the raw tag source including the angle brackets. It is kept
    for diagnostics and never rewritten.
    """

    tag: str
    body: str = field(repr=False)
    attributes: Mapping[str, str] = field(default_factory=dict, hash=False)
    is_single: bool = False
    classes: tuple[str, ...] = field(init=False)

    def __post_init__(self) -> None:
        if not self.tag:
            raise ValueError("TagInfo.tag must not be empty")
        # Copy so later changes to the caller's dict cannot leak in.
        attributes = MappingProxyType(dict(self.attributes))
        object.__setattr__(self, "attributes", attributes)
        object.__setattr__(self, "classes", split_classes(attributes.get("class", "")))

    @property
    def id(self) -> str | None:
        return self.attributes.get("id")

    def get_attribute(self, name: str, default: str = "") -> str:
        return self.attributes.get(lower_ascii(name), default)

    def has_class(self, name: str) -> bool:
        return lower_ascii(name) in self.classes


class ParsedTag:
    __slots__ = ("end", "errors", "info", "is_closing", "name", "self_closing", "start")

    def __init__(self, name, info, start, end, is_closing=False, self_closing=False, errors=()):
        self.name = name
        self.info = info
        self.start = start
        self.end = end
        self.is_closing = is_closing
        self.self_closing = self_closing
        self.errors = errors

    def __repr__(self):
        kind = "end" if self.is_closing else "start"
        closing = " /" if self.self_closing else ""
        return f"<ParsedTag {kind}:{self.name}{closing} {self.start}:{self.end}>"


def parse_tag(content, start, end, void_elements=VOID_ELEMENT_SET):
    """Parse the tag occupying ``content[start:end]``.

    Returns None when the span has no recognizable tag name; callers treat
    such spans as literal text.
    """
    pos = start + 1
    is_closing = content[pos] == "/"
    if is_closing:
        pos += 1
    match = TAG_NAME_PATTERN.match(content, pos, end)
    if match is None:
        return None
    name = lower_ascii(match.group())
    if is_closing:
        return ParsedTag(name, None, start, end, is_closing=True)

    attributes, self_closing, errors = parse_attributes(content, match.end(), end - 1)
    info = TagInfo(
        name,
        content[start:end],
        attributes,
        is_single=self_closing or name in void_elements,
    )
    return ParsedTag(name, info, start, end, self_closing=self_closing, errors=errors)


def parse_attributes(content, start, end):
    """Scan ``name[=value]`` pairs in ``content[start:end]``.

    Returns ``(attributes, self_closing, errors)`` where ``self_closing`` is
    True when a "/" trails the last attribute.
    """
    attributes = {}
    errors = []
    consumed = start
    for match in ATTRIBUTE_PATTERN.finditer(content, start, end):
        name = lower_ascii(match.group(1))
        value = match.group(2)
        if value is None:
            value = match.group(3)
            if value is None:
                value = match.group(4) or ""
        if name in attributes:
            errors.append("duplicate-attribute")
        else:
            attributes[name] = value
        consumed = match.end()

    return attributes, ends_self_closing(content, consumed, end), errors
