"""Tests for ghostify.note.frontmatter."""

from __future__ import annotations

import pytest

from ghostify.models import FrontMatter, PostStatus, Visibility
from ghostify.note.frontmatter import parse_front_matter, split_front_matter


def _note(*lines: str, body: str = "Body text") -> str:
    return "---\n" + "\n".join(lines) + "\n---\n" + body


class TestSplit:
    def test_no_front_matter(self):
        assert split_front_matter("# Title") == (None, "# Title")

    def test_unclosed_block_keeps_content(self):
        content = "---\ntitle: x\nno end"
        assert split_front_matter(content) == (None, content)

    def test_body_is_trimmed(self):
        lines, body = split_front_matter("---\na: b\n---\n\n  text  \n\n")
        assert lines == ["a: b"]
        assert body == "text"


class TestParse:
    def test_defaults_without_block(self):
        front_matter, body = parse_front_matter("Just text")
        assert front_matter == FrontMatter()
        assert front_matter.status is PostStatus.DRAFT
        assert front_matter.visibility is Visibility.PUBLIC
        assert front_matter.tags == []
        assert front_matter.featured is False
        assert body == "Just text"

    def test_title(self):
        front_matter, body = parse_front_matter(_note("title: A story"))
        assert front_matter.title == "A story"
        assert body == "Body text"

    def test_quoted_title_loses_its_quotes(self):
        front_matter, _ = parse_front_matter(_note('title: "Hello: world"'))
        assert front_matter.title == "Hello: world"

    def test_numeric_title_becomes_text(self):
        front_matter, _ = parse_front_matter(_note("title: 2026"))
        assert front_matter.title == "2026"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("post", PostStatus.PUBLISHED),
            ("Published", PostStatus.PUBLISHED),
            ("scheduled", PostStatus.SCHEDULED),
            ("draft", PostStatus.DRAFT),
            ("whatever", PostStatus.DRAFT),
        ],
    )
    def test_status_aliases(self, raw, expected):
        front_matter, _ = parse_front_matter(_note(f"status: {raw}"))
        assert front_matter.status is expected

    def test_quoted_time_is_kept_verbatim(self):
        front_matter, _ = parse_front_matter(_note('time: "2026-03-01T09:30:00Z"'))
        assert front_matter.time == "2026-03-01T09:30:00Z"

    def test_timestamp_time_is_iso_formatted(self):
        front_matter, _ = parse_front_matter(_note("time: 2026-03-01T09:30:00Z"))
        assert front_matter.time == "2026-03-01T09:30:00+00:00"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("true", True), ("TRUE", True), ("false", False), ('"true"', True), ("maybe", False)],
    )
    def test_featured(self, raw, expected):
        front_matter, _ = parse_front_matter(_note(f"featured: {raw}"))
        assert front_matter.featured is expected

    def test_visibility(self):
        front_matter, _ = parse_front_matter(_note("visibility: Members"))
        assert front_matter.visibility is Visibility.MEMBERS

    def test_unknown_visibility_is_ignored(self):
        front_matter, _ = parse_front_matter(_note("visibility: secret"))
        assert front_matter.visibility is Visibility.PUBLIC

    def test_inline_tags(self):
        front_matter, _ = parse_front_matter(_note("tags: one, two ,, three"))
        assert front_matter.tags == ["one", "two", "three"]

    def test_list_tags(self):
        front_matter, _ = parse_front_matter(
            _note("tags:", "  - alpha", "  - beta", "title: After")
        )
        assert front_matter.tags == ["alpha", "beta"]
        assert front_matter.title == "After"

    def test_flow_list_tags(self):
        front_matter, _ = parse_front_matter(_note("tags: [a, b]"))
        assert front_matter.tags == ["a", "b"]

    def test_list_tags_become_text(self):
        front_matter, _ = parse_front_matter(_note("tags: [2026, null, ' spaced ']"))
        assert front_matter.tags == ["2026", "spaced"]

    def test_empty_tags(self):
        front_matter, _ = parse_front_matter(_note("tags:"))
        assert front_matter.tags == []

    def test_keys_are_case_insensitive(self):
        front_matter, _ = parse_front_matter(_note("Title: Caps", "STATUS: published"))
        assert front_matter.title == "Caps"
        assert front_matter.status is PostStatus.PUBLISHED

    def test_unknown_keys_ignored(self):
        front_matter, _ = parse_front_matter(_note("aliases: x", "cssclass: wide"))
        assert front_matter == FrontMatter()

    def test_dashes_inside_a_line_do_not_close_the_block(self):
        front_matter, body = parse_front_matter(_note("title: a---b"))
        assert front_matter.title == "a---b"
        assert body == "Body text"

    def test_invalid_yaml_keeps_defaults(self):
        front_matter, body = parse_front_matter(_note("title: Hello: a story", "status: published"))
        assert front_matter == FrontMatter()
        assert body == "Body text"

    def test_non_mapping_block_keeps_defaults(self):
        front_matter, body = parse_front_matter(_note("- just", "- a list"))
        assert front_matter == FrontMatter()
        assert body == "Body text"
