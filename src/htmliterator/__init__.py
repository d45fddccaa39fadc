from .classifier import is_full_document
from .errors import IteratorStateError, ParseError
from .iterator import HtmlIterator, IteratorOpts, debug_iterate
from .observer import DebugLogObserver, HtmlIteratorObserver, OpenTagTracker, RecordingObserver
from .stream import stream
from .taginfo import TagInfo, parse_tag, split_classes

__all__ = [
    "DebugLogObserver",
    "HtmlIterator",
    "HtmlIteratorObserver",
    "IteratorOpts",
    "IteratorStateError",
    "OpenTagTracker",
    "ParseError",
    "RecordingObserver",
    "TagInfo",
    "debug_iterate",
    "is_full_document",
    "parse_tag",
    "split_classes",
    "stream",
]
