"""Asynchronous ghostify client.

:class:`AsyncGhostifyClient` mirrors :class:`GhostifyClient`; every method
that talks to Ghost is a coroutine, and file reads run in the default
executor so they do not block the event loop.

Usage::

    import asyncio
    from ghostify import AsyncGhostifyClient

    async def main():
        async with AsyncGhostifyClient(
            ghost_url="https://blog.example.com",
            admin_api_key="6489...:c0ffee...",
        ) as client:
            result = await client.publish_note("vault/Drafts/Launch notes.md")
            print(result.editor_url)

    asyncio.run(main())
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from ghostify.client import (
    UPLOAD_RECOVERABLE_ERRORS,
    apply_overrides,
    move_note,
    note_title,
    prepare_body,
    published_result,
    read_image_file,
    require_site,
    upload_failed_warning,
)
from ghostify.config import GhostifyConfig
from ghostify.converter.md_to_lexical import MarkdownToLexicalConverter
from ghostify.errors import GhostifyError
from ghostify.ghost_api.images import AsyncImageAPI
from ghostify.ghost_api.posts import AsyncPostAPI
from ghostify.ghost_api.site import AsyncSiteAPI
from ghostify.ghost_api.transport import AsyncGhostTransport
from ghostify.image import async_upload_image
from ghostify.models import ConversionResult, ConversionWarning, FrontMatter, PublishResult
from ghostify.note import (
    find_wiki_images,
    parse_front_matter,
    replace_image_references,
    resolve_image_path,
)
from ghostify.observability import NoopMetricsHook, get_logger
from ghostify.post import build_post_payload

log = get_logger("ghostify.client")


class AsyncGhostifyClient:
    """Asynchronous Ghost publishing client.

    Parameters
    ----------
    ghost_url:
        Root URL of the Ghost site.
    admin_api_key:
        Admin API key (``<id>:<secret>``).
    **kwargs:
        Forwarded to :class:`GhostifyConfig`.
    """

    def __init__(self, ghost_url: str = "", admin_api_key: str = "", **kwargs: Any) -> None:
        self._config = GhostifyConfig(ghost_url=ghost_url, admin_api_key=admin_api_key, **kwargs)
        self._metrics = self._config.metrics if self._config.metrics is not None else NoopMetricsHook()
        self._transport = AsyncGhostTransport(self._config)
        self._posts = AsyncPostAPI(self._transport)
        self._images = AsyncImageAPI(self._transport)
        self._site = AsyncSiteAPI(self._transport)
        self._converter = MarkdownToLexicalConverter(self._config)

    @property
    def config(self) -> GhostifyConfig:
        return self._config

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def convert(self, markdown: str) -> ConversionResult:
        """Convert Markdown to Lexical.  Pure CPU work, so not a coroutine."""
        result = self._converter.convert(markdown)
        for warning in result.warnings:
            self._metrics.increment(
                "ghostify.conversion_warnings_total", tags={"code": warning.code}
            )
        return result

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    async def upload_image(self, path: str | Path) -> str:
        """Validate and upload an image file (async).

        See :meth:`GhostifyClient.upload_image`.
        """
        require_site(self._config)
        path = Path(path)
        loop = asyncio.get_running_loop()
        try:
            data = await loop.run_in_executor(None, read_image_file, path)
            url = await async_upload_image(self._images, path.name, data, self._config)
        except GhostifyError:
            self._metrics.increment("ghostify.upload_failure_total")
            raise
        self._metrics.increment("ghostify.upload_success_total")
        return url

    async def _upload_note_images(
        self, body: str, note_path: Path, vault_root: Path
    ) -> tuple[dict[str, str], list[ConversionWarning]]:
        refs = list(dict.fromkeys(find_wiki_images(body)))
        paths = [
            resolve_image_path(ref, note_path.parent, vault_root, self._config.images_directory)
            for ref in refs
        ]
        # All uploads draw from the transport's token bucket.
        outcomes = await asyncio.gather(
            *(self.upload_image(path) for path in paths),
            return_exceptions=True,
        )

        uploaded: dict[str, str] = {}
        warnings: list[ConversionWarning] = []
        for ref, outcome in zip(refs, outcomes):
            if isinstance(outcome, UPLOAD_RECOVERABLE_ERRORS):
                log.warning(
                    "Image upload failed",
                    extra={"extra_fields": {"op": "upload_image", "src": ref, "error": outcome.message}},
                )
                warnings.append(upload_failed_warning(ref, outcome))
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                uploaded[ref] = outcome
        return uploaded, warnings

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    async def publish_markdown(
        self,
        title: str,
        markdown: str,
        front_matter: FrontMatter | None = None,
    ) -> PublishResult:
        """Create a post from Markdown (async).

        See :meth:`GhostifyClient.publish_markdown`.
        """
        return await self._publish(title, markdown, front_matter or FrontMatter(), [], 0)

    async def publish_note(
        self,
        note_path: str | Path,
        vault_root: str | Path | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> PublishResult:
        """Publish a vault note (async).

        See :meth:`GhostifyClient.publish_note`.  Embedded images are
        uploaded concurrently.
        """
        require_site(self._config)
        note_path = Path(note_path)
        vault = Path(vault_root) if vault_root is not None else note_path.parent

        loop = asyncio.get_running_loop()
        content = await loop.run_in_executor(None, note_path.read_text, "utf-8")
        front_matter, body = parse_front_matter(content)
        front_matter = apply_overrides(front_matter, overrides)

        uploaded: dict[str, str] = {}
        warnings: list[ConversionWarning] = []
        if self._config.image_upload:
            uploaded, warnings = await self._upload_note_images(body, note_path, vault)
            body = replace_image_references(body, uploaded)

        result = await self._publish(
            note_title(front_matter, note_path), body, front_matter, warnings, len(uploaded)
        )
        await loop.run_in_executor(None, move_note, self._config, note_path, vault, result)
        return result

    async def _publish(
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
        response = await self._posts.create(payload)
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

    async def test_connection(self) -> bool:
        """Return ``True`` if the site answers an authenticated request."""
        require_site(self._config)
        try:
            await self._site.retrieve()
        except GhostifyError as exc:
            log.warning(
                "Connection check failed",
                extra={"extra_fields": {"op": "test_connection", "code": exc.code, "error": exc.message}},
            )
            return False
        return True

    # ------------------------------------------------------------------
    # Resource management
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the HTTP transport."""
        await self._transport.close()

    async def __aenter__(self) -> AsyncGhostifyClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
