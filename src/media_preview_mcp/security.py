"""Filesystem safety helpers for synthetic downloads."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable


class PathValidator:
    """Keep written files inside the configured download directories."""

    def __init__(self, allowed_base_dirs: Iterable[Path]) -> None:
        self._allowed_base_dirs = tuple(
            base_dir.expanduser().resolve() for base_dir in allowed_base_dirs
        )

    @property
    def allowed_base_dirs(self) -> tuple[Path, ...]:
        return self._allowed_base_dirs

    def ensure_within_allowed(self, path: Path) -> Path:
        """Resolve path and ensure it is within one of allowed base dirs."""

        resolved = path.expanduser().resolve()
        for base_dir in self._allowed_base_dirs:
            if resolved == base_dir or base_dir in resolved.parents:
                return resolved
        raise ValueError("Path is outside allowed directories.")

    def write_bytes(self, path: Path, data: bytes) -> Path:
        """Write data to path after checking containment."""

        resolved = self.ensure_within_allowed(path)
        resolved.parent.mkdir(parents=True, exist_ok=True)
        resolved.write_bytes(data)
        return resolved


_FILENAME_SAFE_RE = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_filename(filename: str, max_length: int = 128) -> str:
    """Return a filesystem-safe filename without path separators."""

    cleaned = filename.replace("/", "_").replace("\\", "_")
    cleaned = _FILENAME_SAFE_RE.sub("_", cleaned).strip(" ._")
    if not cleaned:
        cleaned = "download"
    return cleaned[:max_length]
