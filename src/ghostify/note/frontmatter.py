"""Front matter parsing for notes.

A note may start with a YAML block fenced by ``---``::

    ---
    title: "Shipping the new theme: part 2"
    status: published
    tags: [design, ghost]
    featured: true
    ---

Only the publishing keys are read (``title``, ``status``, ``time``,
``featured``, ``visibility``, ``tags``); everything else is ignored.  A
block that is not valid YAML, or not a mapping, yields the default
metadata and the note still publishes.
"""

from __future__ import annotations

from datetime import date
from typing import Any

import yaml

from ghostify.models import FrontMatter, PostStatus, Visibility
from ghostify.observability import get_logger

_FENCE = "---"

_STATUS_ALIASES: dict[str, PostStatus] = {
    "post": PostStatus.PUBLISHED,
    "published": PostStatus.PUBLISHED,
    "scheduled": PostStatus.SCHEDULED,
}

log = get_logger("ghostify.note")


def split_front_matter(content: str) -> tuple[list[str] | None, str]:
    """Split *content* into its front matter lines and the body.

    Returns ``(None, content)`` when the note does not open with ``---`` or
    the block is never closed by a line holding only ``---``.
    """
    if not content.startswith(_FENCE):
        return None, content

    lines = content.splitlines()
    for index in range(1, len(lines)):
        if lines[index].strip() == _FENCE:
            body = "\n".join(lines[index + 1:])
            return lines[1:index], body.strip()
    return None, content


def _load_block(lines: list[str]) -> dict[str, Any]:
    try:
        data = yaml.safe_load("\n".join(lines))
    except yaml.YAMLError as exc:
        log.warning(
            "Front matter is not valid YAML; using defaults",
            extra={"extra_fields": {"op": "parse_front_matter", "error": str(exc)}},
        )
        return {}
    if not isinstance(data, dict):
        return {}
    return {str(key).lower(): value for key, value in data.items()}


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _parse_status(value: Any) -> PostStatus:
    return _STATUS_ALIASES.get(str(value).lower(), PostStatus.DRAFT)


def _parse_featured(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).lower() == "true"


def _parse_tags(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        items = [str(item) for item in value if item is not None]
    else:
        items = str(value).split(",")
    return [tag.strip() for tag in items if tag.strip()]


def parse_front_matter(content: str) -> tuple[FrontMatter, str]:
    """Read publishing metadata from the top of a note.

    Parameters
    ----------
    content:
        Full note text.

    Returns
    -------
    tuple[FrontMatter, str]
        The metadata (defaults when there is no block) and the note body
        with the block removed.  The body is stripped of surrounding
        whitespace when a block was found, and returned untouched
        otherwise.

    Notes
    -----
    The block is loaded with :func:`yaml.safe_load`; keys match
    case-insensitively.  ``status`` maps ``post`` and ``published`` to
    published and ``scheduled`` to scheduled; any other value means draft.
    ``visibility`` values other than ``public``, ``members`` or ``paid``
    are ignored.  ``tags`` is either a YAML list or a comma-separated
    string.  A ``time`` YAML reads as a timestamp is kept in ISO-8601
    form.
    """
    front_matter = FrontMatter()
    lines, body = split_front_matter(content)
    if lines is None:
        return front_matter, body

    data = _load_block(lines)
    if "title" in data:
        front_matter.title = _as_text(data["title"])
    if "status" in data:
        front_matter.status = _parse_status(data["status"])
    if "time" in data:
        front_matter.time = _as_text(data["time"])
    if "featured" in data:
        front_matter.featured = _parse_featured(data["featured"])
    if "visibility" in data:
        try:
            front_matter.visibility = Visibility(str(data["visibility"]).lower())
        except ValueError:
            pass
    if "tags" in data:
        front_matter.tags = _parse_tags(data["tags"])

    return front_matter, body
