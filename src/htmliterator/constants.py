"""HTML element constants used by the tag iterator.

Elements are kept in lists so iteration order stays stable; the matching
frozensets are what the hot paths use for membership checks.

Usage:
    from htmliterator.constants import VOID_ELEMENTS, RAW_TEXT_ELEMENTS

References:
    - https://html.spec.whatwg.org/multipage/syntax.html#void-elements
    - https://html.spec.whatwg.org/multipage/syntax.html#raw-text-elements
"""

# Elements that never have a closing tag
VOID_ELEMENTS = [
    "area",
    "base",
    "basefont",
    "bgsound",
    "br",
    "col",
    "embed",
    "hr",
    "img",
    "input",
    "keygen",
    "link",
    "meta",
    "param",
    "source",
    "track",
    "wbr",
]

# Elements whose body is surfaced as one opaque run instead of being tokenized
RAW_TEXT_ELEMENTS = [
    "script",
    "style",
]

# Phrasing elements; text between two of these keeps its separating space
# when whitespace collapsing is enabled.
INLINE_ELEMENTS = [
    "a",
    "abbr",
    "b",
    "bdi",
    "bdo",
    "big",
    "cite",
    "code",
    "data",
    "del",
    "dfn",
    "em",
    "font",
    "i",
    "ins",
    "kbd",
    "label",
    "mark",
    "nobr",
    "q",
    "s",
    "samp",
    "small",
    "span",
    "strike",
    "strong",
    "sub",
    "sup",
    "time",
    "tt",
    "u",
    "var",
]

# Whitespace is significant inside these
PREFORMATTED_ELEMENTS = [
    "pre",
    "textarea",
    "listing",
]

VOID_ELEMENT_SET = frozenset(VOID_ELEMENTS)
RAW_TEXT_ELEMENT_SET = frozenset(RAW_TEXT_ELEMENTS)
INLINE_ELEMENT_SET = frozenset(INLINE_ELEMENTS)
PREFORMATTED_ELEMENT_SET = frozenset(PREFORMATTED_ELEMENTS)

# ASCII whitespace as defined by the HTML standard
ASCII_WHITESPACE = " \t\n\f\r"

# Skipped at the start of content
BYTE_ORDER_MARK = "\ufeff"
