"""Path helpers for output locations."""
from __future__ import annotations

import os
from pathlib import Path


def resolve_output_path(path: str | os.PathLike[str]) -> Path:
    return Path(path).expanduser()


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path
