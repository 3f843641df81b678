"""Resolve inline Markdown markup into Lexical text and link nodes.

The resolver makes a single left-to-right pass.  At every position where
markup could start it tries an explicit, ordered list of matchers and the
first one that matches wins:

1. ``link``   -- ``[label](url)``
2. ``bold``   -- ``**text**`` or ``__text__``
3. ``italic`` -- ``*text*`` (a lone asterisk, never half of ``**``)
4. ``code``   -- `` `text` ``

Because positions are visited in order, the earliest-starting span always
wins; the matcher order only breaks ties at a shared start.  Spans never
overlap and styles never nest: the content of a bold, italic or code span
is taken literally.  A link label is resolved again with every matcher
except ``link``.

Two constructs are recognised only to be kept as literal text: inline
images (``![alt](src)``) and triple-backtick spans.  Their characters stay
in the surrounding plain run.

Unmatched text is emitted as plain :class:`TextNode` runs, one per gap
between spans.  The resolver never raises.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import NamedTuple

from ghostify.converter.nodes import InlineNode, LinkNode, TextNode, TextStyle

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_BOLD_RE = re.compile(r"\*\*([^*]+)\*\*|__([^_]+)__")
_ITALIC_RE = re.compile(r"(?<!\*)\*([^*]+)\*(?!\*)")
_CODE_RE = re.compile(r"`([^`]+)`")

_LITERAL_RES: tuple[re.Pattern[str], ...] = (
    re.compile(r"!\[(?:[^\[\]]|\[[^\[\]]*\])*\]\((?:[^()]|\([^()]*\))*\)"),
    re.compile(r"```.*?```", re.DOTALL),
)

# Characters at which a matcher or literal guard can start.
_TRIGGER_RE = re.compile(r"[\[*_`!]")


class _Matcher(NamedTuple):
    name: str
    pattern: re.Pattern[str]
    build: Callable[[re.Match[str]], InlineNode]


def _build_link(match: re.Match[str]) -> InlineNode:
    label, url = match.group(1), match.group(2)
    return LinkNode(url=url, label=tuple(resolve_label(label)))


def _build_bold(match: re.Match[str]) -> InlineNode:
    content = match.group(1) if match.group(1) is not None else match.group(2)
    return TextNode(content, TextStyle.BOLD)


def _build_italic(match: re.Match[str]) -> InlineNode:
    return TextNode(match.group(1), TextStyle.ITALIC)


def _build_code(match: re.Match[str]) -> InlineNode:
    return TextNode(match.group(1), TextStyle.CODE)


_LINK = _Matcher("link", _LINK_RE, _build_link)
_BOLD = _Matcher("bold", _BOLD_RE, _build_bold)
_ITALIC = _Matcher("italic", _ITALIC_RE, _build_italic)
_CODE = _Matcher("code", _CODE_RE, _build_code)

INLINE_MATCHERS: tuple[_Matcher, ...] = (_LINK, _BOLD, _ITALIC, _CODE)
"""Matchers tried at each position, highest priority first."""

LABEL_MATCHERS: tuple[_Matcher, ...] = (_BOLD, _ITALIC, _CODE)
"""Matchers used inside a link label (links do not nest)."""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def resolve_inline(text: str) -> list[InlineNode]:
    """Resolve the inline markup of one block's text.

    Parameters
    ----------
    text:
        The text content of a single block (heading text, list item text,
        a paragraph line, ...).

    Returns
    -------
    list[InlineNode]
        Ordered text and link nodes.  An empty *text* yields ``[]``; text
        without markup yields exactly one plain :class:`TextNode`.
    """
    return _scan(text, INLINE_MATCHERS)


def resolve_label(text: str) -> list[TextNode]:
    """Resolve a link label: styles are recognised, links are not."""
    return _scan(text, LABEL_MATCHERS)  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------

def _match_literal(text: str, pos: int) -> re.Match[str] | None:
    for pattern in _LITERAL_RES:
        match = pattern.match(text, pos)
        if match is not None:
            return match
    return None


def _match_span(
    text: str, pos: int, matchers: tuple[_Matcher, ...],
) -> tuple[_Matcher, re.Match[str]] | None:
    for matcher in matchers:
        match = matcher.pattern.match(text, pos)
        if match is not None:
            return matcher, match
    return None


def _scan(text: str, matchers: tuple[_Matcher, ...]) -> list[InlineNode]:
    nodes: list[InlineNode] = []
    plain_start = 0
    pos = 0
    length = len(text)

    while pos < length:
        trigger = _TRIGGER_RE.search(text, pos)
        if trigger is None:
            break
        pos = trigger.start()

        literal = _match_literal(text, pos)
        if literal is not None:
            # Literal markup stays inside the current plain run.
            pos = literal.end()
            continue

        found = _match_span(text, pos, matchers)
        if found is None:
            pos += 1
            continue

        matcher, match = found
        if plain_start < pos:
            nodes.append(TextNode(text[plain_start:pos]))
        nodes.append(matcher.build(match))
        pos = plain_start = match.end()

    if plain_start < length:
        nodes.append(TextNode(text[plain_start:]))
    return nodes
