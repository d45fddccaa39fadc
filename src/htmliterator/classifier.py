"""Full-document versus fragment detection."""

from .constants import ASCII_WHITESPACE, BYTE_ORDER_MARK
from .scanner import TAG_NAME_PATTERN, Scanner, lower_ascii
from .tokens import CommentToken, DoctypeToken, TagCandidate


def is_full_document(content, scanner=None):
    """Return True when ``content`` is a complete HTML document.

    Only the prefix is inspected: a byte order mark, leading whitespace,
    comments and bogus declarations are skipped, then the first structural
    token decides. A doctype or an ``<html>`` start tag means a full
    document; any other tag or visible text means a fragment.
    """
    if scanner is None:
        scanner = Scanner(content)
    buffer = scanner.buffer
    pos = 1 if buffer.startswith(BYTE_ORDER_MARK) else 0
    while True:
        token = scanner.next_token(pos)
        if token is None:
            return False
        pos = token.end
        kind = type(token)
        if kind is CommentToken:
            continue
        if kind is DoctypeToken:
            return True
        if kind is TagCandidate:
            if buffer[token.start + 1] == "/":
                return False
            match = TAG_NAME_PATTERN.match(buffer, token.start + 1, token.end)
            return match is not None and lower_ascii(match.group()) == "html"
        if buffer[token.start : token.end].strip(ASCII_WHITESPACE):
            return False
