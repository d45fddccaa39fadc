import re

from .constants import ASCII_WHITESPACE, RAW_TEXT_ELEMENT_SET
from .tokens import CommentToken, DoctypeToken, TagCandidate, TextToken

ASCII_LOWER_TABLE = str.maketrans({chr(code): chr(code + 32) for code in range(65, 91)})

# Identifier run that forms a tag name after "<" or "</"
TAG_NAME_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9_:.\-]*")

# "<" only opens markup when followed by one of these; otherwise it is text
_MARKUP_START_PATTERN = re.compile(r"<[A-Za-z/!?]")

# Quoted attribute values are consumed whole so a ">" inside them is skipped
_TAG_END_PATTERN = re.compile(r"""=[ \t\n\f\r]*(?:"[^"]*"|'[^']*')|>""")

_TAG_HEAD_PATTERN = re.compile(r"<(/?)([A-Za-z][A-Za-z0-9_:.\-]*)")

# One name[=value] pair; an unquoted value runs to whitespace or ">" and may end in "/"
ATTRIBUTE_PATTERN = re.compile(
    r"""([^ \t\n\f\r"'<>/=]+)"""
    r"""(?:[ \t\n\f\r]*=[ \t\n\f\r]*(?:"([^"]*)"|'([^']*)'|([^ \t\n\f\r>]+)))?"""
)

_RAW_TEXT_END_PATTERNS = {}


def lower_ascii(value):
    return value.translate(ASCII_LOWER_TABLE)


def attributes_end(buffer, pos, end):
    """Offset just past the last attribute in ``buffer[pos:end]``."""
    for match in ATTRIBUTE_PATTERN.finditer(buffer, pos, end):
        pos = match.end()
    return pos


def ends_self_closing(buffer, pos, end):
    """True when what follows the last attribute ends with "/"."""
    return buffer[pos:end].rstrip(ASCII_WHITESPACE).endswith("/")


def _raw_text_end_pattern(name):
    pattern = _RAW_TEXT_END_PATTERNS.get(name)
    if pattern is None:
        pattern = re.compile(r"</" + re.escape(name) + r"(?=[ \t\n\f\r/>])", re.IGNORECASE)
        _RAW_TEXT_END_PATTERNS[name] = pattern
    return pattern


class Scanner:
    """Splits a content buffer into text runs and tag-boundary spans.

    The scanner keeps no cursor of its own: every call takes the offset to
    scan from, so the iteration engine can peek ahead and resume freely.
    """

    __slots__ = ("buffer", "length", "raw_text_elements")

    def __init__(self, buffer, raw_text_elements=RAW_TEXT_ELEMENT_SET):
        self.buffer = buffer or ""
        self.length = len(self.buffer)
        self.raw_text_elements = raw_text_elements

    def next_token(self, pos):
        """Return the token starting at ``pos`` or None at end of input."""
        buffer = self.buffer
        length = self.length
        if pos >= length:
            return None

        if buffer[pos] != "<" or not self.starts_markup(pos):
            match = _MARKUP_START_PATTERN.search(buffer, pos + 1)
            return TextToken(pos, match.start() if match else length)

        marker = buffer[pos + 1]
        if marker == "!":
            if buffer.startswith("<!--", pos):
                # Searching from the second dash lets "<!-->" close itself
                close = buffer.find("-->", pos + 2)
                if close == -1:
                    return TextToken(pos, length, "eof-in-comment")
                return CommentToken(pos, close + 3)
            if lower_ascii(buffer[pos + 2 : pos + 9]) == "doctype":
                close = buffer.find(">", pos + 9)
                if close == -1:
                    return TextToken(pos, length, "eof-in-tag")
                return DoctypeToken(pos, close + 1)
            return self._bogus_comment(pos)
        if marker == "?":
            return self._bogus_comment(pos)

        close = self.find_tag_end(pos)
        if close == -1:
            return TextToken(pos, length, "eof-in-tag")
        return TagCandidate(pos, close + 1)

    def starts_markup(self, pos):
        if pos + 1 >= self.length:
            return False
        return _MARKUP_START_PATTERN.match(self.buffer, pos) is not None

    def find_tag_end(self, pos):
        """Index of the ">" closing the tag opened at ``pos``, or -1."""
        buffer = self.buffer
        for match in _TAG_END_PATTERN.finditer(buffer, pos + 1):
            index = match.start()
            if buffer[index] == ">":
                return index
        return -1

    def find_raw_text_end(self, name, pos):
        """Find the literal closing tag of a script/style region.

        Returns the closing tag as a TagCandidate, or None when the region
        runs to end of input.
        """
        match = _raw_text_end_pattern(name).search(self.buffer, pos)
        if match is None:
            return None
        close = self.buffer.find(">", match.end())
        if close == -1:
            return None
        return TagCandidate(match.start(), close + 1)

    def find_closing_tag(self, name, pos):
        """Find the closing tag matching an already opened ``name``.

        Same-name pair tags opened in between are counted so that
        ``<p><p></p></p>`` resolves to the outer ``</p>``. Comments and
        script/style bodies are stepped over without being inspected.
        Returns a TagCandidate or None.
        """
        buffer = self.buffer
        depth = 0
        while True:
            token = self.next_token(pos)
            if token is None:
                return None
            pos = token.end
            if type(token) is not TagCandidate:
                continue
            head = _TAG_HEAD_PATTERN.match(buffer, token.start)
            if head is None:
                continue
            tag_name = lower_ascii(head.group(2))
            if head.group(1):
                if tag_name == name:
                    if depth == 0:
                        return token
                    depth -= 1
                continue
            if tag_name != name and tag_name not in self.raw_text_elements:
                continue
            close = token.end - 1
            if ends_self_closing(buffer, attributes_end(buffer, head.end(), close), close):
                continue
            if tag_name == name:
                depth += 1
            else:
                closing = self.find_raw_text_end(tag_name, pos)
                if closing is None:
                    return None
                pos = closing.end

    def _bogus_comment(self, pos):
        close = self.buffer.find(">", pos + 2)
        if close == -1:
            return TextToken(pos, self.length, "eof-in-tag")
        return CommentToken(pos, close + 1)
