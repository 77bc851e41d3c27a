"""Data models for resolved media metadata."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from media_preview_mcp.platforms import Platform, QualityTier

SOURCE_PRIMARY = "primary"
SOURCE_FALLBACK = "fallback"

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


def format_duration(seconds: float) -> str:
    """Format seconds as ``m:ss``."""

    total = max(0, int(seconds))
    minutes, remaining = divmod(total, 60)
    return f"{minutes}:{remaining:02d}"


def format_file_size(size_bytes: int) -> str:
    """Format a byte count with a binary unit, e.g. ``25 MB``."""

    if size_bytes <= 0:
        return "0 Bytes"

    value = float(size_bytes)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[unit]}"


def megabytes(size_mb: int) -> int:
    return int(size_mb) * 1024 * 1024


@dataclass(frozen=True)
class MetadataRecord:
    """Resolved description of one piece of content."""

    platform: Platform
    identifier: str
    title: str
    thumbnail_url: str
    duration: str
    file_size: str
    available_qualities: Tuple[QualityTier, ...]
    author: Optional[str] = None
    source: str = SOURCE_FALLBACK

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable payload."""

        return {
            "platform": self.platform.value,
            "id": self.identifier,
            "title": self.title,
            "thumbnail": self.thumbnail_url,
            "duration": self.duration,
            "file_size": self.file_size,
            "author": self.author,
            "available_qualities": [q.value for q in self.available_qualities],
            "source": self.source,
        }
