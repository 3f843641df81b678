"""Public data models for ghostify.

This module contains every result type, warning type, enum, and
supporting dataclass referenced by the public API surface.  All types
are plain dataclasses with no behaviour beyond what is needed for
structural equality.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ghostify.converter.nodes import DocumentRoot

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ImageSourceType(str, Enum):
    """Classification of an image ``src`` attribute."""

    EXTERNAL_URL = "external_url"
    """The image is referenced by an ``http://`` or ``https://`` URL."""

    LOCAL_FILE = "local_file"
    """The image is a path to a file in the vault."""

    DATA_URI = "data_uri"
    """The image is encoded inline as a ``data:`` URI."""

    UNKNOWN = "unknown"
    """The source could not be classified."""


class PostStatus(str, Enum):
    """Ghost post status."""

    DRAFT = "draft"
    PUBLISHED = "published"
    SCHEDULED = "scheduled"


class Visibility(str, Enum):
    """Who can read a Ghost post."""

    PUBLIC = "public"
    MEMBERS = "members"
    PAID = "paid"


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------

@dataclass
class ConversionWarning:
    """A non-fatal issue encountered while preparing a post.

    Attributes
    ----------
    code:
        A machine-readable warning code (e.g. ``"IMAGE_UPLOAD_FAILED"``).
    message:
        A human-readable description of the issue.
    context:
        Arbitrary structured data for diagnostics.
    """

    code: str
    message: str
    context: dict = field(default_factory=dict)


@dataclass
class ConversionResult:
    """Output of the Markdown-to-Lexical conversion.

    Attributes
    ----------
    document:
        The typed document tree.
    lexical:
        ``document`` serialized as the JSON string Ghost stores in a post's
        ``lexical`` field.
    warnings:
        Non-fatal issues discovered during conversion.
    """

    document: DocumentRoot
    lexical: str
    warnings: list[ConversionWarning] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Note metadata
# ---------------------------------------------------------------------------

@dataclass
class FrontMatter:
    """Publishing metadata read from a note's front matter block.

    Attributes
    ----------
    title:
        Post title; ``None`` means "use the note's file name".
    status:
        Requested post status.
    time:
        Raw scheduled publication time (ISO-8601) for scheduled posts.
    tags:
        Tag names, in order.
    featured:
        Whether the post is featured.
    visibility:
        Who can read the post.
    """

    title: str | None = None
    status: PostStatus = PostStatus.DRAFT
    time: str | None = None
    tags: list[str] = field(default_factory=list)
    featured: bool = False
    visibility: Visibility = Visibility.PUBLIC


# ---------------------------------------------------------------------------
# Public result types (returned from client methods)
# ---------------------------------------------------------------------------

@dataclass
class PublishResult:
    """Result of :meth:`GhostifyClient.publish_markdown` and
    :meth:`GhostifyClient.publish_note`.

    Attributes
    ----------
    post_id:
        The ID of the created Ghost post.
    url:
        Public URL of the post as reported by Ghost (may be a preview URL
        for drafts, or empty).
    editor_url:
        URL of the post in the Ghost admin editor.
    status:
        Status the post was created with.
    images_uploaded:
        Number of embedded images uploaded to Ghost.
    moved_to:
        New location of the note when it was moved after publishing.
    warnings:
        Non-fatal issues encountered during conversion or upload.
    """

    post_id: str
    url: str
    editor_url: str
    status: PostStatus
    images_uploaded: int = 0
    moved_to: str | None = None
    warnings: list[ConversionWarning] = field(default_factory=list)
