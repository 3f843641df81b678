"""Tests for the Lexical JSON shape produced by ghostify.converter.nodes."""

from __future__ import annotations

import pytest

from ghostify.converter.nodes import (
    DocumentRoot,
    Heading,
    HorizontalRule,
    ImageNode,
    LinkNode,
    ListItem,
    ListKind,
    ListNode,
    Paragraph,
    Quote,
    TextNode,
    TextStyle,
    plain_text,
)

_STRUCTURAL = {"direction": "ltr", "format": 0, "indent": 0, "version": 1}


class TestTextNode:
    def test_shape(self):
        assert TextNode("hi", TextStyle.BOLD).to_lexical() == {
            "type": "text",
            "text": "hi",
            "format": 1,
            "detail": 0,
            "mode": "normal",
            "style": "",
            "version": 1,
        }

    def test_default_style_is_plain(self):
        assert TextNode("x").to_lexical()["format"] == 0


class TestElements:
    def test_paragraph(self):
        assert Paragraph((TextNode("a"),)).to_lexical() == {
            "type": "paragraph",
            "children": [TextNode("a").to_lexical()],
            **_STRUCTURAL,
        }

    def test_heading_tag(self):
        assert Heading(3, (TextNode("h"),)).to_lexical()["tag"] == "h3"

    @pytest.mark.parametrize("level", [0, 7, -1])
    def test_heading_level_bounds(self, level):
        with pytest.raises(ValueError):
            Heading(level)

    def test_quote_wraps_paragraph(self):
        data = Quote(Paragraph((TextNode("q"),))).to_lexical()
        assert data["type"] == "quote"
        assert [child["type"] for child in data["children"]] == ["paragraph"]

    def test_list_shape(self):
        data = ListNode(ListKind.NUMBER, (ListItem(Paragraph((TextNode("i"),))),)).to_lexical()
        assert data["listType"] == "number"
        assert data["start"] == 1
        item = data["children"][0]
        assert item["type"] == "listitem"
        assert item["value"] == 1
        assert item["children"][0]["type"] == "paragraph"
        for key, value in _STRUCTURAL.items():
            assert data[key] == value
            assert item[key] == value

    def test_empty_list_rejected(self):
        with pytest.raises(ValueError):
            ListNode(ListKind.BULLET, ())

    def test_link_shape(self):
        data = LinkNode("https://l.test", (TextNode("go"),)).to_lexical()
        assert data["type"] == "link"
        assert data["url"] == "https://l.test"
        assert data["children"] == [TextNode("go").to_lexical()]

    def test_image_shape(self):
        assert ImageNode("https://i.test/a.png", "alt").to_lexical() == {
            "type": "image",
            "src": "https://i.test/a.png",
            "altText": "alt",
            "maxWidth": "100%",
            "showCaption": False,
            **_STRUCTURAL,
        }

    def test_image_requires_src(self):
        with pytest.raises(ValueError):
            ImageNode("")

    def test_horizontal_rule_is_a_leaf(self):
        assert HorizontalRule().to_lexical() == {"type": "horizontalrule", "version": 1}


class TestDocumentRoot:
    def test_root_wrapper(self):
        data = DocumentRoot((HorizontalRule(),)).to_lexical()
        assert list(data) == ["root"]
        assert data["root"]["type"] == "root"
        assert data["root"]["children"] == [{"type": "horizontalrule", "version": 1}]

    def test_empty_root(self):
        assert DocumentRoot().to_lexical()["root"]["children"] == []

    def test_nodes_are_frozen(self):
        node = TextNode("a")
        with pytest.raises(AttributeError):
            node.content = "b"  # type: ignore[misc]


def test_plain_text_concatenates_link_labels():
    inline = (TextNode("a "), LinkNode("u", (TextNode("b", TextStyle.BOLD),)))
    assert plain_text(inline) == "a b"
