"""Filesystem helpers."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


def atomic_write_text(path: Path, content: str, *, mode: int = 0o644) -> None:
    """Write ``content`` to ``path`` via a temp file in the same dir + ``os.replace``.

    The replaced file keeps the permissions of the file it overwrites
    (``mode`` for a new file); readers never see a half-written file.
    """
    if path.exists():
        mode = path.stat().st_mode & 0o777
    fd, tmp_path = tempfile.mkstemp(prefix=path.name + ".", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        Path(tmp_path).unlink(missing_ok=True)
        raise


def missing_root_error(root: Path | None) -> str | None:
    """Return why ``root`` is unusable as a store root, or None if it is fine."""
    if root is None:
        return "SUPABASE_FUNCTIONS_DIR not set in environment"
    if not root.is_dir():
        return f"Functions directory not found: {root}"
    return None
