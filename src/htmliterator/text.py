"""Whitespace handling for content text runs."""

import re

from .constants import INLINE_ELEMENT_SET

_WHITESPACE_RUN_PATTERN = re.compile(r"[ \t\n\f\r]+")


def collapse_whitespace(text):
    return _WHITESPACE_RUN_PATTERN.sub(" ", text)


class WhitespaceNormalizer:
    """Collapses whitespace the way a renderer would show it.

    Outside preformatted context every whitespace run becomes one space. A
    leading space is then kept only when it separates two inline elements
    and the previously delivered text did not already end with a space.
    The first text of a content (nothing entered or delivered yet) loses its
    leading space.
    """

    __slots__ = ("inline_elements", "last_text")

    def __init__(self, inline_elements=INLINE_ELEMENT_SET):
        self.inline_elements = inline_elements
        self.last_text = None

    def reset(self):
        self.last_text = None

    def normalize(self, text, previous_tag, boundary_tag, preformatted=False):
        """Return the text to deliver, or None when nothing is left."""
        if not text:
            return None
        if preformatted:
            self.last_text = text
            return text

        text = collapse_whitespace(text)
        if previous_tag is None or self.last_text is None:
            text = text.lstrip(" ")
        else:
            inline = self.inline_elements
            keeps_space = (
                previous_tag in inline
                and boundary_tag in inline
                and not self.last_text.endswith(" ")
            )
            if not keeps_space and text.startswith(" "):
                text = text[1:]
        if not text:
            return None
        self.last_text = text
        return text
