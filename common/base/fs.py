"""Filesystem helper utilities shared across common modules."""

from __future__ import annotations

import os
from pathlib import Path


def ensure_dir(path: Path | str) -> Path:
    p = Path(path).expanduser()
    p.mkdir(parents=True, exist_ok=True)
    return p


def absolute_path(path: Path | str) -> Path:
    """Expand ``~``, make ``path`` absolute and collapse ``.``/``..`` segments.

    Symlinks are not resolved, so GOROOT keeps the spelling the walker emits.
    """
    return Path(os.path.abspath(os.path.expanduser(str(path))))
