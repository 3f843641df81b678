"""Shared test fixtures for the ghostify test suite."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from ghostify.config import GhostifyConfig
from ghostify.converter.md_to_lexical import MarkdownToLexicalConverter

# A syntactically valid Admin API key: 24-char id, 64-char hex secret.
TEST_KEY_ID = "6489f0a1b2c3d4e5f6a7b8c9"
TEST_SECRET = "c0ffee" * 10 + "beef"
TEST_API_KEY = f"{TEST_KEY_ID}:{TEST_SECRET}"
TEST_URL = "https://blog.example.com"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def make_config(**overrides) -> GhostifyConfig:
    """Return a GhostifyConfig tuned for fast, deterministic tests."""
    defaults = dict(
        ghost_url=TEST_URL,
        admin_api_key=TEST_API_KEY,
        retry_max_attempts=3,
        retry_base_delay=0.0,
        retry_max_delay=0.0,
        retry_jitter=False,
        # High RPS so the token bucket never blocks.
        rate_limit_rps=10_000.0,
    )
    defaults.update(overrides)
    return GhostifyConfig(**defaults)


def make_response(
    status_code: int = 200,
    body: dict | None = None,
    headers: dict | None = None,
    text: str | None = None,
) -> httpx.Response:
    """Build an httpx.Response with a request attached so ``.url`` works."""
    if body is not None:
        content = json.dumps(body).encode()
    elif text is not None:
        content = text.encode()
    else:
        content = b""
    resp = httpx.Response(status_code, content=content, headers=headers or {})
    resp.request = httpx.Request("GET", f"{TEST_URL}/ghost/api/admin/test/")
    return resp


@pytest.fixture
def config() -> GhostifyConfig:
    """Default test configuration with a dummy site and key."""
    return make_config()


@pytest.fixture
def converter(config: GhostifyConfig) -> MarkdownToLexicalConverter:
    return MarkdownToLexicalConverter(config)


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    """A tiny vault: a draft note, one image beside it, one in assets/files."""
    (tmp_path / "Drafts").mkdir()
    (tmp_path / "assets" / "files").mkdir(parents=True)
    (tmp_path / "Drafts" / "beside.png").write_bytes(PNG_BYTES)
    (tmp_path / "assets" / "files" / "shared.png").write_bytes(PNG_BYTES)
    (tmp_path / "Drafts" / "Launch notes.md").write_text(
        "---\n"
        "title: Launch notes\n"
        "status: published\n"
        "tags: release, ghost\n"
        "---\n"
        "![[beside.png]]\n"
        "\n"
        "We shipped **today**.\n"
        "\n"
        "![[shared.png]]\n",
        encoding="utf-8",
    )
    return tmp_path
