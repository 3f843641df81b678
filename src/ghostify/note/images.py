"""Embedded image handling for notes.

Notes embed vault images as wiki links (``![[diagram.png]]``).  Before a
note is converted those references are uploaded to Ghost and rewritten to
standard Markdown images pointing at the uploaded URL; references that
could not be uploaded are still rewritten so they surface as image blocks
with a local ``src``.
"""

from __future__ import annotations

import re
from pathlib import Path

from ghostify.converter.segmenter import parse_image_line

_WIKI_IMAGE_RE = re.compile(r"!\[\[(.*?)\]\]")


def find_wiki_images(content: str) -> list[str]:
    """Return every ``![[ref]]`` target in *content*, in document order."""
    return _WIKI_IMAGE_RE.findall(content)


def convert_wiki_images(content: str) -> str:
    """Rewrite ``![[ref]]`` embeds as ``![](ref)``."""
    return _WIKI_IMAGE_RE.sub(r"![](\1)", content)


def replace_image_references(content: str, mapping: dict[str, str]) -> str:
    """Replace the embeds named in *mapping* with images of the mapped URL.

    Embeds whose target is not a key of *mapping* are left untouched.
    """
    def _swap(match: re.Match[str]) -> str:
        url = mapping.get(match.group(1))
        return match.group(0) if url is None else f"![]({url})"

    return _WIKI_IMAGE_RE.sub(_swap, content)


def resolve_image_path(
    ref: str,
    note_dir: Path,
    vault_root: Path,
    images_directory: str,
) -> Path:
    """Locate the file an embed points at.

    1. ``/path`` is taken from the vault root.
    2. Otherwise the path is tried relative to the note's directory.
    3. Failing that, it is looked up in *images_directory* under the vault
       root.

    The returned path may not exist; callers check.
    """
    if ref.startswith("/"):
        return vault_root / ref.lstrip("/")

    beside_note = note_dir / ref
    if beside_note.is_file():
        return beside_note

    return vault_root / images_directory / ref


def extract_feature_image(markdown: str) -> tuple[str | None, str]:
    """Pull a leading standalone image out of *markdown*.

    If the first line (after trimming) is exactly one ``![alt](src)``
    image, its ``src`` becomes the feature image and the line is dropped.

    Returns
    -------
    tuple[str | None, str]
        The feature image source (or ``None``) and the remaining Markdown,
        trimmed.
    """
    cleaned = markdown.strip()
    first, _, rest = cleaned.partition("\n")
    parsed = parse_image_line(first.strip())
    if parsed is None:
        return None, cleaned
    return parsed[1], rest.strip()
