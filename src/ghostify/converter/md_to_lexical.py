"""Full Markdown-to-Lexical conversion pipeline.

:class:`MarkdownToLexicalConverter` runs the two stages:

1. **Segment** -- :func:`segment` splits Markdown into block nodes,
   calling :func:`resolve_inline` for each text-bearing block.
2. **Serialize** -- the :class:`DocumentRoot` is dumped to the JSON string
   Ghost stores in a post's ``lexical`` field.

The result is a :class:`ConversionResult` with the typed document, its
serialization, and any non-fatal warnings.
"""

from __future__ import annotations

import json
import sys

from ghostify.config import GhostifyConfig
from ghostify.converter.nodes import DocumentRoot, ImageNode
from ghostify.converter.segmenter import segment
from ghostify.image.detect import detect_image_source
from ghostify.models import ConversionResult, ConversionWarning, ImageSourceType


def serialize(document: DocumentRoot) -> str:
    """Serialize *document* to a Lexical JSON string."""
    return json.dumps(document.to_lexical(), ensure_ascii=False)


def markdown_to_lexical(markdown: str) -> str:
    """Convert Markdown straight to a Lexical JSON string."""
    return serialize(segment(markdown))


class MarkdownToLexicalConverter:
    """Convert Markdown text to a Ghost Lexical document.

    Parameters
    ----------
    config:
        Configuration; only the debug flags are consulted.

    Examples
    --------
    >>> converter = MarkdownToLexicalConverter(GhostifyConfig())
    >>> result = converter.convert("# Hello\\n\\nWorld")
    >>> [block.to_lexical()["type"] for block in result.document.children]
    ['heading', 'paragraph']
    """

    def __init__(self, config: GhostifyConfig) -> None:
        self._config = config

    def convert(self, markdown: str) -> ConversionResult:
        """Segment, serialize and collect warnings.

        Parameters
        ----------
        markdown:
            Note body with front matter and the leading feature image
            already removed.

        Returns
        -------
        ConversionResult
        """
        document = segment(markdown)
        lexical = serialize(document)

        if self._config.debug_dump_lexical:
            print(
                "[ghostify] Lexical document:",
                json.dumps(document.to_lexical(), indent=2, ensure_ascii=False),
                file=sys.stderr,
            )

        return ConversionResult(
            document=document,
            lexical=lexical,
            warnings=_collect_warnings(document),
        )


def _collect_warnings(document: DocumentRoot) -> list[ConversionWarning]:
    warnings: list[ConversionWarning] = []
    for index, block in enumerate(document.children):
        if not isinstance(block, ImageNode):
            continue
        if detect_image_source(block.src) is not ImageSourceType.EXTERNAL_URL:
            warnings.append(ConversionWarning(
                code="IMAGE_LOCAL_SRC",
                message=f"Image source is not an absolute URL: {block.src}",
                context={"src": block.src, "block_index": index},
            ))
    return warnings
