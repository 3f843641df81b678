"""Command-line interface for ghostify.

Subcommands
-----------
``convert``
    Print the Lexical JSON for a note.
``preview``
    Write an HTML preview of a note.
``publish``
    Upload a note's images and create a Ghost post.
``check``
    Verify the site URL and Admin API key.

Site settings come from flags or from ``GHOSTIFY_*`` environment
variables; flags win::

    $ export GHOSTIFY_URL=https://blog.example.com
    $ export GHOSTIFY_ADMIN_API_KEY=6489...:c0ffee...
    $ ghostify publish "Drafts/Launch notes.md" --vault . --status published
"""

from __future__ import annotations

import argparse
import json
import os
import sys
import webbrowser
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from ghostify.client import GhostifyClient
from ghostify.config import GhostifyConfig
from ghostify.converter.md_to_lexical import MarkdownToLexicalConverter
from ghostify.converter.preview import render_preview
from ghostify.errors import GhostifyError, GhostifyValidationError
from ghostify.models import PostStatus, Visibility
from ghostify.note import convert_wiki_images, parse_front_matter
from ghostify.observability import get_logger, set_level

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4

_ENV_PREFIX = "GHOSTIFY_"
_TRUE_VALUES = ("true", "1", "yes", "on")

log = get_logger("ghostify.cli")


def _env(name: str, default: str | None = None) -> str | None:
    return os.environ.get(f"{_ENV_PREFIX}{name.upper()}", default)


def _env_flag(name: str) -> bool:
    return (_env(name) or "").lower() in _TRUE_VALUES


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ghostify",
        description="Convert Markdown notes to Ghost Lexical posts and publish them.",
    )
    parser.add_argument(
        "--url",
        default=_env("url", ""),
        help="Ghost site URL (env: GHOSTIFY_URL)",
    )
    parser.add_argument(
        "--admin-api-key",
        default=_env("admin_api_key", ""),
        help="Admin API key ID:SECRET (env: GHOSTIFY_ADMIN_API_KEY)",
    )
    parser.add_argument(
        "--api-version",
        default=_env("api_version", "v5.0"),
        help="Accept-Version header (env: GHOSTIFY_API_VERSION)",
    )
    parser.add_argument(
        "--images-directory",
        default=_env("images_directory", "assets/files"),
        help="Vault directory holding embedded images (env: GHOSTIFY_IMAGES_DIRECTORY)",
    )
    parser.add_argument(
        "--log-level",
        default=_env("log_level", "warning"),
        choices=["debug", "info", "warning", "error"],
        help="Log threshold (env: GHOSTIFY_LOG_LEVEL)",
    )
    parser.add_argument(
        "--debug-dump-payload",
        action="store_true",
        default=_env_flag("debug_dump_payload"),
        help="Print redacted API requests and responses to stderr",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    convert = sub.add_parser("convert", help="Print the Lexical JSON for a note")
    convert.add_argument("note", type=Path)
    convert.add_argument("-o", "--out", type=Path, help="Write to a file instead of stdout")
    convert.add_argument("--pretty", action="store_true", help="Indent the JSON output")

    preview = sub.add_parser("preview", help="Render an HTML preview of a note")
    preview.add_argument("note", type=Path)
    preview.add_argument("-o", "--out", type=Path, help="HTML file (default: <note>.html)")
    preview.add_argument("--open", action="store_true", help="Open the preview in a browser")

    publish = sub.add_parser("publish", help="Publish a note to Ghost")
    publish.add_argument("note", type=Path)
    publish.add_argument("--vault", type=Path, help="Vault root (default: the note's directory)")
    publish.add_argument("--title", help="Override the post title")
    publish.add_argument("--status", choices=[s.value for s in PostStatus])
    publish.add_argument("--time", help="Publication time for scheduled posts (ISO-8601)")
    publish.add_argument("--tag", action="append", dest="tags", help="Post tag; repeatable")
    publish.add_argument("--featured", action="store_true", default=None)
    publish.add_argument("--visibility", choices=[v.value for v in Visibility])
    publish.add_argument(
        "--no-images",
        action="store_true",
        help="Leave embedded images as local references",
    )
    publish.add_argument(
        "--move",
        action="store_true",
        default=_env_flag("move_notes_after_publish"),
        help="Move the note to the published directory afterwards",
    )
    publish.add_argument(
        "--published-dir",
        default=_env("published_notes_directory", "Published Notes"),
        help="Vault directory for published notes",
    )
    publish.add_argument(
        "--open-editor",
        action="store_true",
        default=_env_flag("open_editor_after_publish"),
        help="Open the Ghost editor for the new post",
    )

    sub.add_parser("check", help="Test the connection to the Ghost site")
    return parser


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def _config_kwargs(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "ghost_url": args.url,
        "admin_api_key": args.admin_api_key,
        "api_version": args.api_version,
        "images_directory": args.images_directory,
        "debug_dump_payload": args.debug_dump_payload,
    }


def _read_note(path: Path) -> tuple[str, str]:
    """Return ``(title, body)`` for the note at *path*."""
    front_matter, body = parse_front_matter(path.read_text(encoding="utf-8"))
    return front_matter.title or path.stem, convert_wiki_images(body)


def _cmd_convert(args: argparse.Namespace) -> int:
    _, body = _read_note(args.note)
    result = MarkdownToLexicalConverter(GhostifyConfig()).convert(body)
    for warning in result.warnings:
        print(f"warning: {warning.message}", file=sys.stderr)

    output = result.lexical
    if args.pretty:
        output = json.dumps(json.loads(output), indent=2, ensure_ascii=False)
    if args.out:
        args.out.write_text(output + "\n", encoding="utf-8")
    else:
        print(output)
    return EXIT_SUCCESS


def _cmd_preview(args: argparse.Namespace) -> int:
    title, body = _read_note(args.note)
    out = args.out or args.note.with_suffix(".html")
    out.write_text(render_preview(title, body), encoding="utf-8")
    print(out)
    if args.open:
        webbrowser.open(out.resolve().as_uri())
    return EXIT_SUCCESS


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for name in ("title", "status", "time", "tags", "featured", "visibility"):
        value = getattr(args, name)
        if value is not None:
            overrides[name] = value
    return overrides


def _cmd_publish(args: argparse.Namespace) -> int:
    with GhostifyClient(
        **_config_kwargs(args),
        image_upload=not args.no_images,
        move_notes_after_publish=args.move,
        published_notes_directory=args.published_dir,
        open_editor_after_publish=args.open_editor,
    ) as client:
        result = client.publish_note(args.note, vault_root=args.vault, overrides=_overrides(args))

    for warning in result.warnings:
        print(f"warning: {warning.message}", file=sys.stderr)
    print(f"Published {args.note.stem!r} as {result.status.value}")
    if result.url:
        print(f"  url:    {result.url}")
    print(f"  editor: {result.editor_url}")
    if result.moved_to:
        print(f"  moved:  {result.moved_to}")

    if args.open_editor:
        webbrowser.open(result.editor_url)
    return EXIT_SUCCESS


def _cmd_check(args: argparse.Namespace) -> int:
    with GhostifyClient(**_config_kwargs(args)) as client:
        ok = client.test_connection()
    print("Connection OK" if ok else "Connection failed; check the site URL and Admin API key")
    return EXIT_SUCCESS if ok else EXIT_ERROR


_COMMANDS = {
    "convert": _cmd_convert,
    "preview": _cmd_preview,
    "publish": _cmd_publish,
    "check": _cmd_check,
}


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return its exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)
    set_level(args.log_level)
    log.debug("Running command", extra={"extra_fields": {"op": args.command}})

    try:
        return _COMMANDS[args.command](args)
    except (GhostifyValidationError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR
    except GhostifyError as exc:
        print(f"error: [{exc.code}] {exc.message}", file=sys.stderr)
        return EXIT_ERROR
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_FILE_ERROR


if __name__ == "__main__":
    sys.exit(main())
