"""Typed Lexical document nodes.

Ghost stores post bodies as a serialized Lexical editor state.  The node
records in this module form a closed set of tagged variants; each knows how
to serialize itself into the exact JSON shape the Ghost Admin API accepts.

Element nodes (root, paragraph, heading, quote, list, listitem, link,
image) carry the structural fields::

    "direction": "ltr", "format": 0, "indent": 0, "version": 1

Text nodes carry the Lexical text-leaf fields instead::

    {"type": "text", "text": "hello", "format": 1, "detail": 0,
     "mode": "normal", "style": "", "version": 1}

``format`` on a text node is the style code from :class:`TextStyle`.

All records are frozen; a document is built once per conversion and never
mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Union

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class TextStyle(IntEnum):
    """Style of a text run, valued by the Lexical ``format`` code."""

    PLAIN = 0
    BOLD = 1
    ITALIC = 2
    CODE = 16


class ListKind(str, Enum):
    """Lexical ``listType`` of a list node."""

    BULLET = "bullet"
    NUMBER = "number"


_LEXICAL_VERSION = 1


def _element(node_type: str, children: list[dict[str, Any]], **fields: Any) -> dict[str, Any]:
    """Build an element-node dict with the fixed structural fields."""
    node: dict[str, Any] = {
        "type": node_type,
        "children": children,
        "direction": "ltr",
        "format": 0,
        "indent": 0,
        "version": _LEXICAL_VERSION,
    }
    node.update(fields)
    return node


# ---------------------------------------------------------------------------
# Inline nodes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TextNode:
    """A run of text with a single style."""

    content: str
    style: TextStyle = TextStyle.PLAIN

    @property
    def plain_text(self) -> str:
        return self.content

    def to_lexical(self) -> dict[str, Any]:
        return {
            "type": "text",
            "text": self.content,
            "format": int(self.style),
            "detail": 0,
            "mode": "normal",
            "style": "",
            "version": _LEXICAL_VERSION,
        }


@dataclass(frozen=True)
class LinkNode:
    """A hyperlink whose label is a sequence of styled text runs."""

    url: str
    label: tuple[TextNode, ...] = ()

    @property
    def plain_text(self) -> str:
        return "".join(node.content for node in self.label)

    def to_lexical(self) -> dict[str, Any]:
        return _element(
            "link",
            [node.to_lexical() for node in self.label],
            url=self.url,
        )


InlineNode = Union[TextNode, LinkNode]


def plain_text(inline: tuple[InlineNode, ...] | list[InlineNode]) -> str:
    """Concatenate the visible text of an inline sequence."""
    return "".join(node.plain_text for node in inline)


# ---------------------------------------------------------------------------
# Block nodes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Paragraph:
    """A block of inline runs; also the body of quotes and list items."""

    inline: tuple[InlineNode, ...] = ()

    def to_lexical(self) -> dict[str, Any]:
        return _element("paragraph", [node.to_lexical() for node in self.inline])


@dataclass(frozen=True)
class Heading:
    """A heading; ``level`` is 1-6 and serializes as ``tag: "h<level>"``."""

    level: int
    inline: tuple[InlineNode, ...] = ()

    def __post_init__(self) -> None:
        if not 1 <= self.level <= 6:
            raise ValueError(f"heading level must be 1-6, got {self.level}")

    def to_lexical(self) -> dict[str, Any]:
        return _element(
            "heading",
            [node.to_lexical() for node in self.inline],
            tag=f"h{self.level}",
        )


@dataclass(frozen=True)
class Quote:
    """A block quote wrapping exactly one paragraph."""

    paragraph: Paragraph

    def to_lexical(self) -> dict[str, Any]:
        return _element("quote", [self.paragraph.to_lexical()])


@dataclass(frozen=True)
class ListItem:
    """One entry of a list, holding a single paragraph."""

    paragraph: Paragraph

    def to_lexical(self) -> dict[str, Any]:
        return _element("listitem", [self.paragraph.to_lexical()], value=1)


@dataclass(frozen=True)
class ListNode:
    """A bullet or numbered list.  Never empty."""

    kind: ListKind
    items: tuple[ListItem, ...]

    def __post_init__(self) -> None:
        if not self.items:
            raise ValueError("a list must contain at least one item")

    def to_lexical(self) -> dict[str, Any]:
        return _element(
            "list",
            [item.to_lexical() for item in self.items],
            listType=self.kind.value,
            start=1,
        )


@dataclass(frozen=True)
class ImageNode:
    """A block image card.  ``src`` is whatever URL or path the note used."""

    src: str
    alt_text: str = ""

    def __post_init__(self) -> None:
        if not self.src:
            raise ValueError("image src must not be empty")

    def to_lexical(self) -> dict[str, Any]:
        return {
            "type": "image",
            "src": self.src,
            "altText": self.alt_text,
            "maxWidth": "100%",
            "showCaption": False,
            "direction": "ltr",
            "format": 0,
            "indent": 0,
            "version": _LEXICAL_VERSION,
        }


@dataclass(frozen=True)
class HorizontalRule:
    """A thematic break written as three or more dashes."""

    def to_lexical(self) -> dict[str, Any]:
        return {"type": "horizontalrule", "version": _LEXICAL_VERSION}


BlockNode = Union[Paragraph, Heading, Quote, ListNode, ImageNode, HorizontalRule]


# ---------------------------------------------------------------------------
# Document root
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DocumentRoot:
    """Top-level container; children are in document order."""

    children: tuple[BlockNode, ...] = ()

    def to_lexical(self) -> dict[str, Any]:
        """Return the full ``{"root": {...}}`` Lexical editor state."""
        return {
            "root": _element(
                "root",
                [block.to_lexical() for block in self.children],
            ),
        }
