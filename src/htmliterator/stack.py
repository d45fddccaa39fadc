class OpenTag:
    """A pair tag that has been entered and not yet left.

    ``start`` is the offset of the opening ``<`` and ``end`` the offset of
    its ``>``.
    """

    __slots__ = ("end", "info", "start")

    def __init__(self, info, start, end):
        self.info = info
        self.start = start
        self.end = end

    @property
    def tag(self):
        return self.info.tag

    def __repr__(self):
        return f"<OpenTag {self.info.tag} {self.start}:{self.end}>"


class NestingStack:
    """LIFO stack of the pair tags an iteration is currently inside."""

    __slots__ = ("_entries", "pops", "pushes")

    def __init__(self):
        self._entries = []
        self.pushes = 0
        self.pops = 0

    def push(self, entry):
        self._entries.append(entry)
        self.pushes += 1

    def pop(self):
        if not self._entries:
            return None
        self.pops += 1
        return self._entries.pop()

    def peek(self):
        if not self._entries:
            return None
        return self._entries[-1]

    def find(self, tag):
        """Distance from the top to the nearest entry named ``tag``, or -1."""
        entries = self._entries
        for depth in range(len(entries)):
            if entries[-1 - depth].info.tag == tag:
                return depth
        return -1

    def contains(self, tag):
        return self.find(tag) != -1

    def clear(self):
        self._entries.clear()
        self.pushes = 0
        self.pops = 0

    def __len__(self):
        return len(self._entries)

    def __bool__(self):
        return bool(self._entries)

    def __iter__(self):
        return reversed(self._entries)

    def __repr__(self):
        return f"NestingStack({[entry.info.tag for entry in self._entries]})"
