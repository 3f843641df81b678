"""HTML preview of a note before it is published.

The preview is rendered with mistune rather than the Lexical converter, so
it shows the note as written.  Raw HTML in the note is escaped.
"""

from __future__ import annotations

import html

import mistune

_PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
<h1>{title}</h1>
{body}</body>
</html>
"""


class PreviewRenderer:
    """Render Markdown to a standalone HTML page."""

    def __init__(self) -> None:
        self._markdown = mistune.create_markdown(
            escape=True,
            plugins=["strikethrough", "table", "url"],
        )

    def render_body(self, markdown: str) -> str:
        rendered = self._markdown(markdown)
        return rendered if isinstance(rendered, str) else ""

    def render(self, title: str, markdown: str) -> str:
        return _PAGE_TEMPLATE.format(
            title=html.escape(title),
            body=self.render_body(markdown),
        )


def render_preview(title: str, markdown: str) -> str:
    """Render *markdown* under *title* as a standalone HTML page."""
    return PreviewRenderer().render(title, markdown)
