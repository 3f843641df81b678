"""Synchronous ghostify client.

:class:`GhostifyClient` is the main entry point: it converts Markdown to
Lexical, uploads embedded images, and creates Ghost posts.

Usage::

    from ghostify import GhostifyClient

    with GhostifyClient(
        ghost_url="https://blog.example.com",
        admin_api_key="6489...:c0ffee...",
    ) as client:
        result = client.publish_note("vault/Drafts/Launch notes.md")
        print(result.editor_url)
"""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Any

from ghostify.config import GhostifyConfig
from ghostify.converter.md_to_lexical import MarkdownToLexicalConverter
from ghostify.errors import (
    GhostifyError,
    GhostifyImageError,
    GhostifyImageNotFoundError,
    GhostifyNoteMoveError,
    GhostifyUploadError,
    GhostifyValidationError,
)
from ghostify.ghost_api.images import ImageAPI
from ghostify.ghost_api.posts import PostAPI
from ghostify.ghost_api.site import SiteAPI
from ghostify.ghost_api.transport import GhostTransport
from ghostify.image import detect_image_source, upload_image
from ghostify.models import (
    ConversionResult,
    ConversionWarning,
    FrontMatter,
    ImageSourceType,
    PostStatus,
    PublishResult,
    Visibility,
)
from ghostify.note import (
    convert_wiki_images,
    extract_feature_image,
    find_wiki_images,
    move_to_published,
    parse_front_matter,
    replace_image_references,
    resolve_image_path,
)
from ghostify.observability import NoopMetricsHook, get_logger
from ghostify.post import build_post_payload, editor_url

log = get_logger("ghostify.client")

# Errors that cost one image, not the whole post.
UPLOAD_RECOVERABLE_ERRORS: tuple[type[GhostifyError], ...] = (
    GhostifyImageError,
    GhostifyUploadError,
    GhostifyValidationError,
)


# ---------------------------------------------------------------------------
# Helpers shared with the async client
# ---------------------------------------------------------------------------

def require_site(config: GhostifyConfig) -> None:
    """Raise :class:`GhostifyValidationError` unless the site is configured."""
    if not config.ghost_url or not config.admin_api_key:
        raise GhostifyValidationError(
            message="ghost_url and admin_api_key are required to publish",
            context={"ghost_url": config.ghost_url},
        )


def apply_overrides(front_matter: FrontMatter, overrides: dict[str, Any] | None) -> FrontMatter:
    """Return *front_matter* with the keys of *overrides* replaced.

    ``status`` and ``visibility`` accept plain strings.
    """
    if not overrides:
        return front_matter
    changes = dict(overrides)
    if "status" in changes:
        changes["status"] = PostStatus(changes["status"])
    if "visibility" in changes:
        changes["visibility"] = Visibility(changes["visibility"])
    if "tags" in changes:
        changes["tags"] = list(changes["tags"])
    return dataclasses.replace(front_matter, **changes)


def note_title(front_matter: FrontMatter, note_path: Path) -> str:
    return front_matter.title or note_path.stem


def read_image_file(path: Path) -> bytes:
    """Read an image from disk, raising :class:`GhostifyImageNotFoundError`."""
    if not path.is_file():
        raise GhostifyImageNotFoundError(
            message=f"Image file not found: {path}",
            context={"src": path.name, "resolved_path": str(path)},
        )
    try:
        return path.read_bytes()
    except OSError as exc:
        raise GhostifyImageNotFoundError(
            message=f"Image file could not be read: {path}",
            context={"src": path.name, "resolved_path": str(path)},
            cause=exc,
        ) from exc


def upload_failed_warning(ref: str, exc: GhostifyError) -> ConversionWarning:
    return ConversionWarning(
        code="IMAGE_UPLOAD_FAILED",
        message=f"Image upload failed: {exc.message}",
        context={"src": ref, "error_code": exc.code},
    )


def prepare_body(
    markdown: str, metrics: Any
) -> tuple[str | None, str, list[ConversionWarning]]:
    """Split off the feature image and rewrite leftover wiki embeds.

    Returns ``(feature_image, body, warnings)``.  A leading image whose
    source is not an absolute URL is dropped from the post rather than
    sent as ``feature_image``.
    """
    warnings: list[ConversionWarning] = []
    feature_image, body = extract_feature_image(convert_wiki_images(markdown))
    if feature_image is not None and (
        detect_image_source(feature_image) is not ImageSourceType.EXTERNAL_URL
    ):
        warnings.append(ConversionWarning(
            code="FEATURE_IMAGE_LOCAL_SRC",
            message=f"Feature image is not an absolute URL: {feature_image}",
            context={"src": feature_image},
        ))
        feature_image = None
    for warning in warnings:
        metrics.increment("ghostify.conversion_warnings_total", tags={"code": warning.code})
    return feature_image, body, warnings


def published_result(
    config: GhostifyConfig,
    response: dict[str, Any],
    front_matter: FrontMatter,
    warnings: list[ConversionWarning],
    images_uploaded: int,
    metrics: Any,
) -> PublishResult:
    post_id = response.get("id", "")
    metrics.increment(
        "ghostify.posts_published_total", tags={"status": front_matter.status.value}
    )
    log.info(
        "Post created",
        extra={"extra_fields": {
            "op": "publish",
            "post_id": post_id,
            "status": front_matter.status.value,
            "images_uploaded": images_uploaded,
            "warnings": len(warnings),
        }},
    )
    return PublishResult(
        post_id=post_id,
        url=response.get("url") or "",
        editor_url=editor_url(config.ghost_url, post_id),
        status=front_matter.status,
        images_uploaded=images_uploaded,
        warnings=warnings,
    )


def move_note(
    config: GhostifyConfig,
    note_path: Path,
    vault_root: Path,
    result: PublishResult,
) -> None:
    """Move the note after publishing, recording a failure as a warning."""
    if not config.move_notes_after_publish:
        return
    target_dir = vault_root / config.published_notes_directory
    try:
        result.moved_to = str(move_to_published(note_path, target_dir))
    except GhostifyNoteMoveError as exc:
        log.warning(
            "Could not move published note",
            extra={"extra_fields": {"op": "move_note", "note": str(note_path), "error": exc.message}},
        )
        result.warnings.append(ConversionWarning(
            code="NOTE_MOVE_FAILED",
            message=exc.message,
            context=exc.context,
        ))


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class GhostifyClient:
    """Synchronous Ghost publishing client.

    Parameters
    ----------
    ghost_url:
        Root URL of the Ghost site.
    admin_api_key:
        Admin API key (``<id>:<secret>``) of a custom integration.
    **kwargs:
        Remaining keyword arguments are forwarded to
        :class:`GhostifyConfig`.
    """

    def __init__(self, ghost_url: str = "", admin_api_key: str = "", **kwargs: Any) -> None:
        self._config = GhostifyConfig(ghost_url=ghost_url, admin_api_key=admin_api_key, **kwargs)
        self._metrics = self._config.metrics if self._config.metrics is not None else NoopMetricsHook()
        self._transport = GhostTransport(self._config)
        self._posts = PostAPI(self._transport)
        self._images = ImageAPI(self._transport)
        self._site = SiteAPI(self._transport)
        self._converter = MarkdownToLexicalConverter(self._config)

    @property
    def config(self) -> GhostifyConfig:
        return self._config

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def convert(self, markdown: str) -> ConversionResult:
        """Convert Markdown to a Lexical document without touching the API."""
        result = self._converter.convert(markdown)
        for warning in result.warnings:
            self._metrics.increment(
                "ghostify.conversion_warnings_total", tags={"code": warning.code}
            )
        return result

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def upload_image(self, path: str | Path) -> str:
        """Validate and upload an image file; return its Ghost URL.

        Raises
        ------
        GhostifyImageNotFoundError
            If *path* is not a readable file.
        GhostifyImageTypeError, GhostifyImageSizeError
            If the file fails validation.
        GhostifyUploadError
            If Ghost does not answer with a URL.
        """
        require_site(self._config)
        path = Path(path)
        try:
            data = read_image_file(path)
            url = upload_image(self._images, path.name, data, self._config)
        except GhostifyError:
            self._metrics.increment("ghostify.upload_failure_total")
            raise
        self._metrics.increment("ghostify.upload_success_total")
        log.debug(
            "Image uploaded",
            extra={"extra_fields": {"op": "upload_image", "name": path.name, "url": url}},
        )
        return url

    def _upload_note_images(
        self, body: str, note_path: Path, vault_root: Path
    ) -> tuple[dict[str, str], list[ConversionWarning]]:
        uploaded: dict[str, str] = {}
        warnings: list[ConversionWarning] = []
        for ref in dict.fromkeys(find_wiki_images(body)):
            path = resolve_image_path(
                ref, note_path.parent, vault_root, self._config.images_directory
            )
            try:
                uploaded[ref] = self.upload_image(path)
            except UPLOAD_RECOVERABLE_ERRORS as exc:
                log.warning(
                    "Image upload failed",
                    extra={"extra_fields": {"op": "upload_image", "src": ref, "error": exc.message}},
                )
                warnings.append(upload_failed_warning(ref, exc))
        return uploaded, warnings

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    def publish_markdown(
        self,
        title: str,
        markdown: str,
        front_matter: FrontMatter | None = None,
    ) -> PublishResult:
        """Create a post from Markdown.

        A standalone image on the first line becomes the feature image.

        Parameters
        ----------
        title:
            Post title.
        markdown:
            Post body (without front matter).
        front_matter:
            Status, tags and other post settings; draft defaults if omitted.
        """
        return self._publish(title, markdown, front_matter or FrontMatter(), [], 0)

    def publish_note(
        self,
        note_path: str | Path,
        vault_root: str | Path | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> PublishResult:
        """Publish a note file from an Obsidian-style vault.

        1. Parse the front matter and apply *overrides*.
        2. Upload every ``![[embed]]`` and point it at its Ghost URL.
        3. Convert and create the post.
        4. Move the note to the published directory if configured.

        Parameters
        ----------
        note_path:
            Path of the Markdown note.
        vault_root:
            Root of the vault; image lookups and the published directory
            are relative to it.  Defaults to the note's directory.
        overrides:
            Front matter fields to replace (``title``, ``status``, ``tags``,
            ``featured``, ``visibility``, ``time``).
        """
        require_site(self._config)
        note_path = Path(note_path)
        vault = Path(vault_root) if vault_root is not None else note_path.parent

        front_matter, body = parse_front_matter(note_path.read_text(encoding="utf-8"))
        front_matter = apply_overrides(front_matter, overrides)

        uploaded: dict[str, str] = {}
        warnings: list[ConversionWarning] = []
        if self._config.image_upload:
            uploaded, warnings = self._upload_note_images(body, note_path, vault)
            body = replace_image_references(body, uploaded)

        result = self._publish(
            note_title(front_matter, note_path), body, front_matter, warnings, len(uploaded)
        )
        move_note(self._config, note_path, vault, result)
        return result

    def _publish(
        self,
        title: str,
        markdown: str,
        front_matter: FrontMatter,
        warnings: list[ConversionWarning],
        images_uploaded: int,
    ) -> PublishResult:
        require_site(self._config)
        feature_image, body, body_warnings = prepare_body(markdown, self._metrics)
        conversion = self.convert(body)
        payload = build_post_payload(title, conversion.lexical, front_matter, feature_image)
        response = self._posts.create(payload)
        return published_result(
            self._config,
            response,
            front_matter,
            [*warnings, *body_warnings, *conversion.warnings],
            images_uploaded,
            self._metrics,
        )

    # ------------------------------------------------------------------
    # Site
    # ------------------------------------------------------------------

    def test_connection(self) -> bool:
        """Return ``True`` if the site answers an authenticated request."""
        require_site(self._config)
        try:
            site = self._site.retrieve()
        except GhostifyError as exc:
            log.warning(
                "Connection check failed",
                extra={"extra_fields": {"op": "test_connection", "code": exc.code, "error": exc.message}},
            )
            return False
        log.info(
            "Connected",
            extra={"extra_fields": {"op": "test_connection", "site": site.get("title"), "version": site.get("version")}},
        )
        return True

    # ------------------------------------------------------------------
    # Resource management
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the HTTP transport."""
        self._transport.close()

    def __enter__(self) -> GhostifyClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
