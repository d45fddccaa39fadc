"""Tests for parse error records and messages."""

import unittest

from htmliterator import HtmlIterator, ParseError, RecordingObserver
from htmliterator.errors import generate_error_message


class TestParseError(unittest.TestCase):
    def test_line_and_column_from_offset(self):
        """Offsets are converted to 1-based line and column."""
        content = "one\ntwo\nthree"
        error = ParseError.at(content, "unexpected-end-tag", content.index("three") + 2, "p")
        assert (error.line, error.column) == (3, 3)
        assert error.message == "Unexpected </p> end tag, ignored"

    def test_first_character(self):
        error = ParseError.at("<p>", "unclosed-element", 0, "p")
        assert (error.line, error.column) == (1, 1)
        assert str(error) == "(1,1): unclosed-element - <p> is still open at end of file"

    def test_without_position(self):
        error = ParseError("eof-in-tag", 4)
        assert error.line is None
        assert str(error) == "eof-in-tag - Unexpected end of file in tag, treated as text"
        assert repr(error) == "ParseError('eof-in-tag', offset=4)"

    def test_equality(self):
        assert ParseError("eof-in-tag", 4) == ParseError.at("abcd<p", "eof-in-tag", 4)
        assert ParseError("eof-in-tag", 4) != ParseError("eof-in-tag", 5)
        assert ParseError("eof-in-tag", 4) != "eof-in-tag"

    def test_explicit_message_wins(self):
        assert ParseError("custom", 0, message="Custom").message == "Custom"


class TestErrorMessages(unittest.TestCase):
    def test_unknown_code_falls_back_to_code(self):
        assert generate_error_message("no-such-code") == "no-such-code"

    def test_missing_tag_name(self):
        assert generate_error_message("unclosed-element") == "<?> is still open at end of file"


class TestCollectedErrors(unittest.TestCase):
    def _errors(self, html):
        iterator = HtmlIterator(RecordingObserver(), collect_errors=True)
        iterator.set_content(html)
        iterator.iterate()
        return iterator.errors

    def test_well_formed_has_no_errors(self):
        assert self._errors("<!DOCTYPE html><html><head></head><body><p>x</p></body></html>") == []

    def test_multiline_positions(self):
        errors = self._errors("<!DOCTYPE html>\n<html>\n<body>\n<p><b></p>")
        assert [(e.code, e.tag_name, e.line) for e in errors] == [
            ("misnested-end-tag", "p", 4),
            ("unclosed-element", "body", 3),
            ("unclosed-element", "html", 2),
        ]

    def test_duplicate_attribute(self):
        errors = self._errors('<img src="a" SRC="b">')
        assert [(e.code, e.tag_name, e.offset) for e in errors] == [("duplicate-attribute", "img", 0)]

    def test_errors_reset_with_content(self):
        iterator = HtmlIterator(RecordingObserver(), collect_errors=True)
        iterator.set_content("<div>")
        iterator.iterate()
        assert len(iterator.errors) == 1
        iterator.set_content("<p></p>")
        assert iterator.errors == []


if __name__ == "__main__":
    unittest.main()
