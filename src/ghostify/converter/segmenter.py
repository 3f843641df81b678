"""Split Markdown into top-level Lexical block nodes.

The segmenter works line by line.  The input is split on blank-line
boundaries into blocks and each block into its non-blank, trimmed lines.
Every line is classified by the first rule that matches:

1. list item (``- x``, ``* x`` or ``1. x``) -- appended to the open list,
   closing it first when the list kind changes
2. any other line closes the open list, then:
3. horizontal rule -- three or more dashes
4. heading -- ``#`` to ``######`` followed by whitespace
5. block quote -- leading ``>``
6. block image -- the whole line is exactly one ``![alt](src)``
7. paragraph

The open list survives blank lines, so ``- a\\n\\n- b`` is one list.  Text
of headings, quotes, list items and paragraphs goes through
:func:`resolve_inline`; image lines do not.

The segmenter never raises: anything it does not recognise becomes a
paragraph.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from ghostify.converter.inline import resolve_inline
from ghostify.converter.nodes import (
    BlockNode,
    DocumentRoot,
    Heading,
    HorizontalRule,
    ImageNode,
    ListItem,
    ListKind,
    ListNode,
    Paragraph,
    Quote,
)

# ---------------------------------------------------------------------------
# Line patterns
# ---------------------------------------------------------------------------

_BULLET_RE = re.compile(r"^[-*]\s+(.+)$")
_ORDERED_RE = re.compile(r"^(\d+)\.\s+(.+)$")
_RULE_RE = re.compile(r"^-{3,}$")
_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
_IMAGE_RE = re.compile(r"^!\[(.*?)\]\((.*?)\)$")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def segment(markdown: str) -> DocumentRoot:
    """Convert Markdown text into a :class:`DocumentRoot`.

    Parameters
    ----------
    markdown:
        Note body with front matter and any leading feature-image line
        already removed.

    Returns
    -------
    DocumentRoot
        The ordered top-level blocks.
    """
    state = _SegmentState()
    for line in iter_lines(markdown):
        _process_line(line, state)
    state.close_list()
    return DocumentRoot(children=tuple(state.blocks))


def iter_lines(markdown: str) -> list[str]:
    """Return the trimmed, non-blank lines of *markdown* in order."""
    text = markdown.replace("\r\n", "\n").replace("\r", "\n")
    lines: list[str] = []
    for block in text.split("\n\n"):
        lines.extend(line.strip() for line in block.split("\n") if line.strip())
    return lines


class _SegmentState:
    """Accumulator for one :func:`segment` call."""

    __slots__ = ("blocks", "list_items", "list_kind")

    def __init__(self) -> None:
        self.blocks: list[BlockNode] = []
        self.list_kind: ListKind | None = None
        self.list_items: list[ListItem] = []

    def add_item(self, kind: ListKind, item: ListItem) -> None:
        if self.list_kind is not kind:
            self.close_list()
            self.list_kind = kind
        self.list_items.append(item)

    def close_list(self) -> None:
        """Append the open list (if any) to the block sequence."""
        if self.list_kind is not None and self.list_items:
            self.blocks.append(ListNode(self.list_kind, tuple(self.list_items)))
        self.list_kind = None
        self.list_items = []


# ---------------------------------------------------------------------------
# Line dispatch
# ---------------------------------------------------------------------------

def _process_line(line: str, state: _SegmentState) -> None:
    bullet = _BULLET_RE.match(line)
    if bullet is not None:
        state.add_item(ListKind.BULLET, _list_item(bullet.group(1)))
        return
    ordered = _ORDERED_RE.match(line)
    if ordered is not None:
        state.add_item(ListKind.NUMBER, _list_item(ordered.group(2)))
        return

    state.close_list()
    for build in _LINE_BUILDERS:
        block = build(line)
        if block is not None:
            state.blocks.append(block)
            return
    state.blocks.append(Paragraph(tuple(resolve_inline(line))))


def _list_item(text: str) -> ListItem:
    return ListItem(Paragraph(tuple(resolve_inline(text))))


def _build_rule(line: str) -> BlockNode | None:
    if _RULE_RE.match(line):
        return HorizontalRule()
    return None


def _build_heading(line: str) -> BlockNode | None:
    match = _HEADING_RE.match(line)
    if match is None:
        return None
    level = len(match.group(1))
    return Heading(level, tuple(resolve_inline(match.group(2).strip())))


def _build_quote(line: str) -> BlockNode | None:
    if not line.startswith(">"):
        return None
    text = line[1:].strip()
    return Quote(Paragraph(tuple(resolve_inline(text))))


def _balanced(text: str) -> bool:
    depth = 0
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def parse_image_line(line: str) -> tuple[str, str] | None:
    """Return ``(alt, src)`` when *line* is exactly one Markdown image.

    The alt text may contain brackets and the source may contain balanced
    parentheses (``![Tux](wiki/Tux_(mascot).png)``).  A line holding two
    images, or an image with a blank source, is not an image line.
    """
    match = _IMAGE_RE.match(line)
    if match is None:
        return None
    alt, src = match.group(1), match.group(2).strip()
    if not src or "](" in src or not _balanced(src):
        return None
    return alt, src


def _build_image(line: str) -> BlockNode | None:
    parsed = parse_image_line(line)
    if parsed is None:
        return None
    alt, src = parsed
    return ImageNode(src=src, alt_text=alt)


_LineBuilder = Callable[[str], "BlockNode | None"]

_LINE_BUILDERS: tuple[_LineBuilder, ...] = (
    _build_rule,
    _build_heading,
    _build_quote,
    _build_image,
)
