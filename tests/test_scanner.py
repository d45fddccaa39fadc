from __future__ import annotations

import unittest

from htmliterator.scanner import Scanner, lower_ascii
from htmliterator.tokens import CommentToken, DoctypeToken, TagCandidate, TextToken


class TestScannerTokens(unittest.TestCase):
    def test_text_and_tags_alternate(self) -> None:
        scanner = Scanner("ab<p>c")
        assert scanner.next_token(0) == TextToken(0, 2)
        assert scanner.next_token(2) == TagCandidate(2, 5)
        assert scanner.next_token(5) == TextToken(5, 6)
        assert scanner.next_token(6) is None

    def test_empty_buffer_has_no_tokens(self) -> None:
        assert Scanner("").next_token(0) is None
        assert Scanner(None).next_token(0) is None

    def test_lone_angle_brackets_stay_text(self) -> None:
        html = "a < b <= c >"
        assert Scanner(html).next_token(0) == TextToken(0, len(html))

    def test_trailing_angle_bracket_is_text(self) -> None:
        scanner = Scanner("x<")
        assert scanner.next_token(0) == TextToken(0, 2)
        assert scanner.starts_markup(1) is False

    def test_quoted_greater_than_does_not_end_tag(self) -> None:
        html = '<a title="x>y">t'
        assert Scanner(html).next_token(0) == TagCandidate(0, html.index('">') + 2)

        html = "<a title='x>y' class=z>t"
        assert Scanner(html).next_token(0) == TagCandidate(0, len(html) - 1)

    def test_unterminated_tag_is_text_to_end(self) -> None:
        html = "text<div class"
        token = Scanner(html).next_token(4)
        assert token == TextToken(4, len(html), "eof-in-tag")

    def test_comments(self) -> None:
        assert Scanner("<!-- x -->y").next_token(0) == CommentToken(0, 10)
        assert Scanner("<!-->y").next_token(0) == CommentToken(0, 5)

    def test_unterminated_comment_is_text(self) -> None:
        html = "<!-- never closed"
        assert Scanner(html).next_token(0) == TextToken(0, len(html), "eof-in-comment")

    def test_doctype_any_case(self) -> None:
        assert Scanner("<!DOCTYPE html><html>").next_token(0) == DoctypeToken(0, 15)
        assert Scanner("<!doctype html>").next_token(0) == DoctypeToken(0, 15)

    def test_bogus_declarations_are_comments(self) -> None:
        html = "<?xml version='1.0'?><root>"
        assert Scanner(html).next_token(0) == CommentToken(0, html.index(">") + 1)

        html = "<![CDATA[x]]><p>"
        assert Scanner(html).next_token(0) == CommentToken(0, html.index("<p>"))

    def test_lower_ascii_only_touches_ascii(self) -> None:
        assert lower_ascii("DIV") == "div"
        assert lower_ascii("ÄB") == "Äb"


class TestScannerLookahead(unittest.TestCase):
    def test_raw_text_end_is_case_insensitive(self) -> None:
        html = "<script>if (a < b) {}</SCRIPT >rest"
        closing = Scanner(html).find_raw_text_end("script", 8)
        assert closing == TagCandidate(html.index("</SCRIPT"), html.index("rest"))

    def test_raw_text_end_needs_exact_name(self) -> None:
        html = "<script>x</scripts></script>"
        closing = Scanner(html).find_raw_text_end("script", 8)
        assert closing == TagCandidate(html.rindex("</script>"), len(html))

    def test_raw_text_end_missing(self) -> None:
        assert Scanner("<script>never closed").find_raw_text_end("script", 8) is None

    def test_closing_tag_counts_nested_same_name(self) -> None:
        html = "<p><p>in</p>out</p>after"
        closing = Scanner(html).find_closing_tag("p", 3)
        assert closing == TagCandidate(html.rindex("</p>"), html.index("after"))

    def test_closing_tag_ignores_comments_and_self_closing(self) -> None:
        html = "<div><!-- </div> --><div/></div>"
        closing = Scanner(html).find_closing_tag("div", 5)
        assert closing == TagCandidate(html.rindex("</div>"), len(html))

    def test_closing_tag_keeps_slash_of_unquoted_value(self) -> None:
        html = "<div><div class=a/>x</div></div>"
        closing = Scanner(html).find_closing_tag("div", 5)
        assert closing == TagCandidate(html.rindex("</div>"), len(html))

        html = "<div><div class=\"a\" / ></div>"
        closing = Scanner(html).find_closing_tag("div", 5)
        assert closing == TagCandidate(html.index("</div>"), len(html))

    def test_closing_tag_steps_over_script_bodies(self) -> None:
        html = "<div><script>'</div>'</script></div>"
        closing = Scanner(html).find_closing_tag("div", 5)
        assert closing == TagCandidate(html.rindex("</div>"), len(html))

    def test_closing_tag_missing(self) -> None:
        assert Scanner("<div><span></span>").find_closing_tag("div", 5) is None
