"""Supported platforms, quality tiers and the per-platform profile table."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union
from urllib.parse import urlparse

from media_preview_mcp.errors import UnsupportedPlatformError, UnsupportedQualityError


class Platform(str, Enum):
    """Closed set of content platforms."""

    YOUTUBE = "youtube"
    INSTAGRAM = "instagram"
    TIKTOK = "tiktok"


class QualityTier(str, Enum):
    """Output quality options offered to the user."""

    UHD_4K = "4k"
    FHD_1080P = "1080p"
    HD_720P = "720p"
    SD_480P = "480p"
    LOW_360P = "360p"
    AUDIO = "audio"

    @property
    def is_audio(self) -> bool:
        return self is QualityTier.AUDIO

    @property
    def extension(self) -> str:
        return "mp3" if self.is_audio else "mp4"

    @property
    def mime_type(self) -> str:
        return "audio/mpeg" if self.is_audio else "video/mp4"


QUALITY_DESCRIPTIONS = {
    QualityTier.UHD_4K: "Ultra HD (3840x2160)",
    QualityTier.FHD_1080P: "Full HD (1920x1080)",
    QualityTier.HD_720P: "HD (1280x720)",
    QualityTier.SD_480P: "SD (854x480)",
    QualityTier.LOW_360P: "Low (640x360)",
    QualityTier.AUDIO: "MP3 audio only",
}


@dataclass(frozen=True)
class PlatformProfile:
    """Static description of how one platform is parsed and synthesized."""

    platform: Platform
    label: str
    url_patterns: Tuple[re.Pattern, ...]
    hosts: Tuple[str, ...]
    title_candidates: Tuple[str, ...]
    duration_range: Tuple[int, int]
    size_range_mb: Tuple[int, int]
    qualities: Tuple[QualityTier, ...]
    thumbnail_template: str
    canonical_url_template: str
    author_prefix_length: int = 8

    def placeholder_thumbnail(self, identifier: str) -> str:
        """Thumbnail URL that embeds the identifier."""

        return self.thumbnail_template.format(id=identifier)

    def canonical_url(self, identifier: str) -> str:
        return self.canonical_url_template.format(id=identifier)


# Optional scheme and subdomains, anchored at the start of the URL.
_HOST_PREFIX = r"^(?:https?://)?(?:[\w-]+\.)*"


def _patterns(*expressions: str) -> Tuple[re.Pattern, ...]:
    # Literal scheme/host tokens are case-insensitive; captured ids are
    # character classes so their case is preserved as-is.
    return tuple(
        re.compile(_HOST_PREFIX + expr, re.IGNORECASE) for expr in expressions
    )


PLATFORM_PROFILES = {
    Platform.YOUTUBE: PlatformProfile(
        platform=Platform.YOUTUBE,
        label="YouTube",
        url_patterns=_patterns(
            r"youtube\.com/watch\?(?:[^#\s]*?&)?v=([^&?#/\s]+)",
            r"youtu\.be/([^&?#/\s]+)",
            r"youtube\.com/(?:shorts|embed)/([^&?#/\s]+)",
        ),
        hosts=("youtube.com", "youtu.be"),
        title_candidates=(
            "Amazing Nature Documentary",
            "Top 10 Travel Destinations",
            "Cooking Masterclass: Pasta From Scratch",
            "Live Concert Highlights",
            "Beginner Guitar Lesson",
            "Tech Review: Latest Gadgets",
        ),
        duration_range=(60, 900),
        size_range_mb=(10, 120),
        qualities=(
            QualityTier.UHD_4K,
            QualityTier.FHD_1080P,
            QualityTier.HD_720P,
            QualityTier.SD_480P,
            QualityTier.LOW_360P,
            QualityTier.AUDIO,
        ),
        thumbnail_template="https://img.youtube.com/vi/{id}/maxresdefault.jpg",
        canonical_url_template="https://www.youtube.com/watch?v={id}",
    ),
    Platform.INSTAGRAM: PlatformProfile(
        platform=Platform.INSTAGRAM,
        label="Instagram",
        url_patterns=_patterns(
            r"instagram\.com/(?:p|reel|tv)/([^/?#\s]+)",
        ),
        hosts=("instagram.com",),
        title_candidates=(
            "Sunset at the Beach",
            "Morning Coffee Routine",
            "City Lights Timelapse",
            "Weekend Hiking Adventure",
            "Street Food Tour",
        ),
        duration_range=(15, 90),
        size_range_mb=(5, 30),
        qualities=(
            QualityTier.FHD_1080P,
            QualityTier.HD_720P,
            QualityTier.SD_480P,
        ),
        thumbnail_template=(
            "https://source.unsplash.com/featured/1080x1080?instagram&sig={id}"
        ),
        canonical_url_template="https://www.instagram.com/p/{id}/",
    ),
    Platform.TIKTOK: PlatformProfile(
        platform=Platform.TIKTOK,
        label="TikTok",
        url_patterns=_patterns(
            r"tiktok\.com/@[^/\s]+/video/(\d+)",
            r"tiktok\.com/v/(\d+)",
        ),
        hosts=("tiktok.com",),
        title_candidates=(
            "Dance Challenge",
            "Life Hack You Need to Know",
            "Funny Pet Moments",
            "Quick Recipe in 30 Seconds",
            "Outfit Transition",
        ),
        duration_range=(10, 60),
        size_range_mb=(2, 15),
        qualities=(
            QualityTier.HD_720P,
            QualityTier.SD_480P,
            QualityTier.LOW_360P,
        ),
        thumbnail_template=(
            "https://source.unsplash.com/featured/540x960?tiktok&sig={id}"
        ),
        canonical_url_template="https://www.tiktok.com/video/{id}",
    ),
}


def parse_platform(value: Union[Platform, str]) -> Platform:
    """Coerce a platform tag into a Platform member."""

    if isinstance(value, Platform):
        return value
    if isinstance(value, str):
        try:
            return Platform(value.strip().lower())
        except ValueError:
            pass
    raise UnsupportedPlatformError(value)


def get_profile(platform: Union[Platform, str]) -> PlatformProfile:
    """Return the static profile for a platform."""

    return PLATFORM_PROFILES[parse_platform(platform)]


def parse_quality(
    value: Union[QualityTier, str],
    platform: Union[Platform, str],
) -> QualityTier:
    """Coerce a quality tag and check the platform offers it."""

    profile = get_profile(platform)
    quality: Optional[QualityTier] = None
    if isinstance(value, QualityTier):
        quality = value
    elif isinstance(value, str):
        try:
            quality = QualityTier(value.strip().lower())
        except ValueError:
            quality = None

    if quality is None or quality not in profile.qualities:
        raise UnsupportedQualityError(value, profile.platform.value)
    return quality


def default_quality(qualities: Tuple[QualityTier, ...]) -> QualityTier:
    """Prefer 1080p, otherwise the first (highest) tier offered."""

    if QualityTier.FHD_1080P in qualities:
        return QualityTier.FHD_1080P
    return qualities[0]


def detect_platform(url: str) -> Optional[Platform]:
    """Best-effort platform detection from URL host."""

    candidate = url.strip()
    if "://" not in candidate:
        candidate = f"https://{candidate}"

    host = (urlparse(candidate).netloc or "").lower()
    host = host.split("@")[-1].split(":")[0]
    for profile in PLATFORM_PROFILES.values():
        for known in profile.hosts:
            if host == known or host.endswith(f".{known}"):
                return profile.platform
    return None
