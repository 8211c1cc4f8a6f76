"""JSON storage for preset libraries and saved adjustment snapshots.

Files are replaced atomically so an interrupted save never leaves a half
written preset library behind.
"""

from __future__ import annotations

import json
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..errors import SettingsInvalidError


def read_json(path: Path) -> Any:
    """Decode the preset or settings file at *path*.

    Missing and malformed files both raise :class:`SettingsInvalidError`; the
    caller decides whether a missing library simply means "no user presets".
    """

    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError as exc:
        raise SettingsInvalidError(f"Settings file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise SettingsInvalidError(f"Settings file {path} is not valid JSON") from exc


def atomic_write_text(path: Path, data: str) -> None:
    """Write *data* to a sibling ``.tmp`` file and swap it over *path*."""

    tmp_path = path.with_suffix(path.suffix + ".tmp")
    path.parent.mkdir(parents=True, exist_ok=True)
    with tmp_path.open("w", encoding="utf-8") as handle:
        handle.write(data)
        handle.flush()
        os.fsync(handle.fileno())
    # Windows may hold either file briefly; retry the swap with a short back-off.
    for attempt in range(5):
        try:
            tmp_path.replace(path)
            return
        except PermissionError:
            if attempt == 4:
                tmp_path.unlink(missing_ok=True)
                raise
            time.sleep(0.05 * (attempt + 1))


def _backup_previous(path: Path, backup_dir: Path) -> None:
    """Copy the current *path* into *backup_dir* as ``<stem>-<utc stamp><suffix>``."""

    if not path.exists():
        return
    backup_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    (backup_dir / f"{path.stem}-{stamp}{path.suffix}").write_bytes(path.read_bytes())


def write_json(path: Path, data: Any, *, backup_dir: Path | None = None) -> None:
    """Save a preset library or settings snapshot to *path*.

    Keys are sorted so saved presets diff cleanly.  When *backup_dir* is given
    the previous version of *path*, if any, is kept there first.
    """

    if backup_dir is not None:
        _backup_previous(path, backup_dir)
    payload = json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True)
    atomic_write_text(path, payload)
