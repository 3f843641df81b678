"""Note handling: front matter, embedded images, and post-publish moves."""

from __future__ import annotations

from .frontmatter import parse_front_matter, split_front_matter
from .images import (
    convert_wiki_images,
    extract_feature_image,
    find_wiki_images,
    replace_image_references,
    resolve_image_path,
)
from .move import move_to_published

__all__ = [
    "convert_wiki_images",
    "extract_feature_image",
    "find_wiki_images",
    "move_to_published",
    "parse_front_matter",
    "replace_image_references",
    "resolve_image_path",
    "split_front_matter",
]
