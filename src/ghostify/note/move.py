"""Move published notes out of the drafting area."""

from __future__ import annotations

from pathlib import Path

from ghostify.errors import GhostifyNoteMoveError
from ghostify.observability import get_logger

log = get_logger("ghostify.note")


def move_to_published(note_path: Path, target_dir: Path) -> Path:
    """Move *note_path* into *target_dir*, creating the directory if needed.

    Returns
    -------
    Path
        The note's new location.

    Raises
    ------
    GhostifyNoteMoveError
        If *target_dir* exists but is not a directory, a file with the same
        name already exists there, or the filesystem refuses the move.
    """
    note_path = Path(note_path)
    target_dir = Path(target_dir)

    if target_dir.exists() and not target_dir.is_dir():
        raise GhostifyNoteMoveError(
            message=f"{target_dir} exists and is not a directory",
            context={"note": str(note_path), "target": str(target_dir), "reason": "not_a_directory"},
        )

    destination = target_dir / note_path.name
    if destination.exists():
        raise GhostifyNoteMoveError(
            message=f"A note named {note_path.name!r} already exists in {target_dir}",
            context={"note": str(note_path), "target": str(destination), "reason": "exists"},
        )

    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        note_path.rename(destination)
    except OSError as exc:
        raise GhostifyNoteMoveError(
            message=f"Could not move {note_path} to {target_dir}: {exc}",
            context={"note": str(note_path), "target": str(destination), "reason": "os_error"},
            cause=exc,
        ) from exc

    log.info(
        "Moved published note",
        extra={"extra_fields": {"op": "move_note", "from": str(note_path), "to": str(destination)}},
    )
    return destination
