"""Markdown to Ghost Lexical conversion pipeline.

Public API:

- :func:`segment` -- Markdown to :class:`DocumentRoot` of block nodes.
- :func:`resolve_inline` -- one block's text to text and link nodes.
- :class:`MarkdownToLexicalConverter` -- segment + serialize + warnings.
- :func:`markdown_to_lexical` -- Markdown to Lexical JSON string.
- :func:`render_preview` -- Markdown to standalone HTML preview page.
"""

from ghostify.converter.inline import resolve_inline
from ghostify.converter.md_to_lexical import (
    MarkdownToLexicalConverter,
    markdown_to_lexical,
    serialize,
)
from ghostify.converter.nodes import (
    BlockNode,
    DocumentRoot,
    Heading,
    HorizontalRule,
    ImageNode,
    InlineNode,
    LinkNode,
    ListItem,
    ListKind,
    ListNode,
    Paragraph,
    Quote,
    TextNode,
    TextStyle,
)
from ghostify.converter.preview import render_preview
from ghostify.converter.segmenter import segment

__all__ = [
    "BlockNode",
    "DocumentRoot",
    "Heading",
    "HorizontalRule",
    "ImageNode",
    "InlineNode",
    "LinkNode",
    "ListItem",
    "ListKind",
    "ListNode",
    "MarkdownToLexicalConverter",
    "Paragraph",
    "Quote",
    "TextNode",
    "TextStyle",
    "markdown_to_lexical",
    "render_preview",
    "resolve_inline",
    "segment",
    "serialize",
]
