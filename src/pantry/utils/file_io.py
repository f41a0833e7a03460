"""Small file helpers shared by the settings and storage layers."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

__all__ = ["read_text_if_exists", "write_text_atomic"]


def read_text_if_exists(path: Path | str) -> str | None:
    """Return the UTF-8 contents of ``path``, or ``None`` if it is missing or blank."""

    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    return text if text.strip() else None


def write_text_atomic(path: Path | str, content: str) -> Path:
    """Replace ``path`` with ``content`` so readers never see a partial file."""

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    descriptor, tmp_name = tempfile.mkstemp(
        dir=str(target.parent), prefix=f".{target.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(descriptor, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, target)
    finally:
        if os.path.exists(tmp_name):  # pragma: no cover - only after a failed replace
            os.unlink(tmp_name)
    return target
