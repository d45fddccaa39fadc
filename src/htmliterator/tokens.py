class Token:
    """A span of the content buffer produced by the scanner.

    ``start`` is the offset of the first character, ``end`` is exclusive.
    ``error`` holds a parse error code when the span was produced by
    malformed-markup recovery.
    """

    __slots__ = ("end", "error", "start")

    def __init__(self, start, end, error=None):
        self.start = start
        self.end = end
        self.error = error

    def text(self, content):
        return content[self.start : self.end]

    def __repr__(self):
        kind = self.__class__.__name__
        if self.error:
            return f"<{kind} {self.start}:{self.end} error={self.error}>"
        return f"<{kind} {self.start}:{self.end}>"

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.start == other.start and self.end == other.end and self.error == other.error

    __hash__ = None


class TextToken(Token):
    __slots__ = ()


class TagCandidate(Token):
    __slots__ = ()


class CommentToken(Token):
    __slots__ = ()


class DoctypeToken(Token):
    __slots__ = ()
