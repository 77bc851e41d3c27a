"""Public metadata endpoints per platform."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional
from urllib.parse import quote

from media_preview_mcp.models import megabytes
from media_preview_mcp.platforms import Platform, get_profile
from media_preview_mcp.resolver.base import (
    JsonFetcher,
    MetadataSource,
    PrimaryMetadata,
    PrimaryResult,
    SourceUnavailable,
    require_fields,
)

logger = logging.getLogger(__name__)

# Rough size estimate for 720p output.
MB_PER_MINUTE = 10


def estimate_size_bytes(duration_seconds: int) -> int:
    """Estimate a file size from a duration."""

    size_mb = max(1, round(duration_seconds / 60 * MB_PER_MINUTE))
    return megabytes(size_mb)


def _optional_str(payload: Mapping[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


class YouTubeSource(MetadataSource):
    """YouTube oEmbed for title/thumbnail/author, Invidious for duration."""

    platform = Platform.YOUTUBE

    def __init__(
        self,
        fetch_json: JsonFetcher,
        *,
        oembed_url: str,
        invidious_url: Optional[str] = None,
    ) -> None:
        super().__init__(fetch_json)
        self._oembed_url = oembed_url
        self._invidious_url = invidious_url.rstrip("/") if invidious_url else None

    async def fetch(self, identifier: str) -> PrimaryResult:
        watch_url = get_profile(self.platform).canonical_url(identifier)
        try:
            payload = await self._get(
                self._oembed_url,
                {"url": watch_url, "format": "json"},
            )
        except Exception as exc:
            logger.warning("YouTube oEmbed failed for %s: %s", identifier, exc)
            return SourceUnavailable(f"oEmbed request failed: {exc}")

        checked = require_fields(payload, "title", "thumbnail_url")
        if isinstance(checked, SourceUnavailable):
            logger.warning("YouTube oEmbed unusable for %s: %s", identifier, checked.reason)
            return checked

        thumbnail = checked["thumbnail_url"].replace("hqdefault", "maxresdefault")
        duration_seconds = await self._fetch_duration(identifier)
        size_bytes = None
        if duration_seconds is not None:
            size_bytes = estimate_size_bytes(duration_seconds)

        return PrimaryMetadata(
            title=checked["title"].strip(),
            thumbnail_url=thumbnail,
            author=_optional_str(checked, "author_name"),
            duration_seconds=duration_seconds,
            size_bytes=size_bytes,
        )

    async def _fetch_duration(self, identifier: str) -> Optional[int]:
        if not self._invidious_url:
            return None

        url = f"{self._invidious_url}/api/v1/videos/{quote(identifier, safe='')}"
        try:
            payload = await self._get(url)
        except Exception as exc:
            logger.info("Invidious lookup failed for %s: %s", identifier, exc)
            return None

        if not isinstance(payload, Mapping):
            return None
        length = payload.get("lengthSeconds")
        if isinstance(length, bool) or not isinstance(length, (int, float)):
            return None
        if length <= 0:
            return None
        return int(length)


class OEmbedSource(MetadataSource):
    """Generic oEmbed endpoint keyed by the content's canonical URL."""

    def __init__(
        self,
        fetch_json: JsonFetcher,
        *,
        platform: Platform,
        endpoint: str,
    ) -> None:
        super().__init__(fetch_json)
        self.platform = platform
        self._endpoint = endpoint

    async def fetch(self, identifier: str) -> PrimaryResult:
        content_url = get_profile(self.platform).canonical_url(identifier)
        try:
            payload = await self._get(self._endpoint, {"url": content_url})
        except Exception as exc:
            logger.warning(
                "%s oEmbed failed for %s: %s",
                self.platform.value,
                identifier,
                exc,
            )
            return SourceUnavailable(f"oEmbed request failed: {exc}")

        checked = require_fields(payload, "title", "thumbnail_url")
        if isinstance(checked, SourceUnavailable):
            return checked

        return PrimaryMetadata(
            title=checked["title"].strip(),
            thumbnail_url=checked["thumbnail_url"].strip(),
            author=_optional_str(checked, "author_name"),
        )
