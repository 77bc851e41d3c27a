"""Deterministic synthetic metadata derived from the identifier."""

from __future__ import annotations

from typing import Tuple, Union

from media_preview_mcp.models import (
    SOURCE_FALLBACK,
    MetadataRecord,
    format_duration,
    format_file_size,
    megabytes,
)
from media_preview_mcp.platforms import Platform, get_profile


def identifier_seed(identifier: str) -> int:
    """Sum of the identifier's character codes."""

    return sum(ord(char) for char in identifier)


def pick_in_range(seed: int, bounds: Tuple[int, int]) -> int:
    """Map a seed onto the inclusive range ``bounds``."""

    low, high = bounds
    return low + seed % (high - low + 1)


def synthesize_fallback(
    identifier: str,
    platform: Union[Platform, str],
) -> MetadataRecord:
    """Build a stable placeholder record for an identifier.

    Equal (identifier, platform) pairs always yield equal records, so the
    preview does not change between repeated views of the same content.
    """

    profile = get_profile(platform)
    seed = identifier_seed(identifier)

    titles = profile.title_candidates
    duration_seconds = pick_in_range(seed, profile.duration_range)
    size_mb = pick_in_range(seed, profile.size_range_mb)

    author = None
    if identifier:
        author = f"@{identifier[: profile.author_prefix_length]}"

    return MetadataRecord(
        platform=profile.platform,
        identifier=identifier,
        title=titles[seed % len(titles)],
        thumbnail_url=profile.placeholder_thumbnail(identifier),
        duration=format_duration(duration_seconds),
        file_size=format_file_size(megabytes(size_mb)),
        author=author,
        available_qualities=profile.qualities,
        source=SOURCE_FALLBACK,
    )
