from __future__ import annotations

import dataclasses
import unittest
from pathlib import Path

from htmliterator import HtmlIterator, RecordingObserver, TagInfo, parse_tag, split_classes

FIXTURES = Path(__file__).parent / "fixtures"


def _parse(html: str):
    return parse_tag(html, 0, len(html))


class TestParseTag(unittest.TestCase):
    def test_main_content_div(self) -> None:
        html = '<div id="main-content" class=" main container  holder " align="center">'
        parsed = _parse(html)
        info = parsed.info
        assert parsed.is_closing is False
        assert info.tag == "div"
        assert info.id == "main-content"
        assert info.classes == ("main", "container", "holder")
        assert info.attributes["align"] == "center"
        assert info.attributes["class"] == " main container  holder "
        assert info.is_single is False
        assert info.body == html

    def test_attribute_value_forms(self) -> None:
        info = _parse("<a href=/path/ target='_blank' data-x=\"1\" disabled>").info
        assert dict(info.attributes) == {
            "href": "/path/",
            "target": "_blank",
            "data-x": "1",
            "disabled": "",
        }

    def test_values_kept_verbatim(self) -> None:
        info = _parse('<input value="  a  b  " title=\'x > y\'>').info
        assert info.get_attribute("value") == "  a  b  "
        assert info.get_attribute("title") == "x > y"
        assert info.is_single is True

    def test_names_are_lowercased(self) -> None:
        info = _parse('<DIV ID="Keep" Class="A b">').info
        assert info.tag == "div"
        assert info.id == "Keep"
        assert info.classes == ("a", "b")
        assert info.get_attribute("CLASS") == "A b"
        assert info.has_class("A")

    def test_duplicate_attribute_first_wins(self) -> None:
        parsed = _parse('<p id="a" ID="b">')
        assert parsed.info.id == "a"
        assert parsed.errors == ["duplicate-attribute"]

    def test_self_closing_marks_single(self) -> None:
        for html in ("<div/>", "<custom-el />", '<x-icon name="a"/>'):
            parsed = _parse(html)
            assert parsed.self_closing is True, html
            assert parsed.info.is_single is True, html

    def test_void_elements_are_single(self) -> None:
        parsed = _parse("<br>")
        assert parsed.info.is_single is True
        assert parsed.self_closing is False

    def test_custom_void_set(self) -> None:
        html = "<br>"
        assert parse_tag(html, 0, len(html), void_elements=frozenset()).info.is_single is False

    def test_unquoted_trailing_slash_belongs_to_value(self) -> None:
        parsed = _parse("<a href=/x/>")
        assert parsed.info.get_attribute("href") == "/x/"
        assert parsed.self_closing is False

        parsed = _parse("<div class=a/>")
        assert parsed.info.get_attribute("class") == "a/"
        assert parsed.info.is_single is False

    def test_closing_tag(self) -> None:
        parsed = _parse("</DIV >")
        assert parsed.is_closing is True
        assert parsed.name == "div"
        assert parsed.info is None

    def test_missing_name_is_not_a_tag(self) -> None:
        assert _parse("</>") is None
        assert _parse("</ div>") is None

    def test_tag_name_characters(self) -> None:
        assert _parse("<my-widget>").name == "my-widget"
        assert _parse("<svg:rect>").name == "svg:rect"


class TestTagInfo(unittest.TestCase):
    def test_is_immutable(self) -> None:
        info = TagInfo("div", "<div>", {"id": "a"})
        with self.assertRaises(dataclasses.FrozenInstanceError):
            info.tag = "span"  # type: ignore[misc]
        with self.assertRaises(TypeError):
            info.attributes["id"] = "b"  # type: ignore[index]

    def test_attributes_are_copied(self) -> None:
        source = {"class": "a"}
        info = TagInfo("p", "<p class=a>", source)
        source["class"] = "b"
        assert info.classes == ("a",)

    def test_empty_tag_rejected(self) -> None:
        with self.assertRaises(ValueError):
            TagInfo("", "<>")

    def test_no_class_attribute(self) -> None:
        info = TagInfo("p", "<p>")
        assert info.classes == ()
        assert info.id is None
        assert info.get_attribute("missing") == ""
        assert info.get_attribute("missing", None) is None

    def test_classes_derive_from_class_attribute(self) -> None:
        for value in ("", "   ", "A", " a\tB\nc ", "x  x"):
            info = TagInfo("p", "<p>", {"class": value})
            assert info.classes == split_classes(value)
            for name in info.classes:
                assert name
                assert name == name.lower()
                assert name.split() == [name]

    def test_split_classes_keeps_duplicates_in_order(self) -> None:
        assert split_classes("b a b") == ("b", "a", "b")

    def test_split_classes_is_ascii_only(self) -> None:
        assert split_classes("a\u00a0b C") == ("a\u00a0b", "c")
        assert split_classes("\u00c4B\x0cx") == ("\u00c4b", "x")
        assert TagInfo("p", "<p>", {"class": "\u00c4B"}).has_class("\u00e4b") is False
        assert TagInfo("p", "<p>", {"class": "\u00c4B"}).has_class("\u00c4B") is True


class TestTagInfoFixture(unittest.TestCase):
    def _tags_by_id(self) -> tuple[dict[str, TagInfo], list[TagInfo]]:
        sink = RecordingObserver()
        iterator = HtmlIterator(sink)
        iterator.set_content((FIXTURES / "tag_info.html").read_text())
        iterator.iterate()
        tags = [payload for kind, payload in sink.events if kind in ("enter", "single")]
        return {tag.id: tag for tag in tags if tag.id}, tags

    def test_fixture_tags(self) -> None:
        by_id, tags = self._tags_by_id()
        assert [tag.tag for tag in tags] == ["div", "div", "div", "a", "img"]

        main = by_id["main-content"]
        assert main.classes == ("main", "container", "holder")
        assert main.get_attribute("align") == "center"

        assert by_id["header"].classes == ("header", "container")
        assert by_id["content"].classes == ("content", "container", "holder", "content-body")

        link = tags[3]
        assert link.id is None
        assert link.get_attribute("href") == "https://www.example.com"
        assert link.classes == ("image-link",)

        image = by_id["content-image"]
        assert image.is_single is True
        assert image.get_attribute("alt") == "Alternative text for image"
        assert image.classes == ("image",)


if __name__ == "__main__":
    unittest.main()
