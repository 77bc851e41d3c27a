"""Metadata resolution: primary source attempt, then deterministic fallback."""

from __future__ import annotations

import dataclasses
import logging
from typing import Dict, Iterable, Optional, Union

from media_preview_mcp.config import Settings
from media_preview_mcp.models import (
    SOURCE_PRIMARY,
    MetadataRecord,
    format_duration,
    format_file_size,
)
from media_preview_mcp.platforms import Platform, get_profile, parse_platform
from media_preview_mcp.resolver.base import (
    HttpJsonClient,
    JsonFetcher,
    MetadataSource,
    PrimaryMetadata,
    PrimaryResult,
    SourceUnavailable,
)
from media_preview_mcp.resolver.fallback import synthesize_fallback
from media_preview_mcp.resolver.sources import OEmbedSource, YouTubeSource

logger = logging.getLogger(__name__)


def merge_metadata(
    fallback: MetadataRecord,
    primary: PrimaryMetadata,
) -> MetadataRecord:
    """Overlay primary fields onto a fallback record."""

    duration = fallback.duration
    if primary.duration_seconds is not None:
        duration = format_duration(primary.duration_seconds)

    file_size = fallback.file_size
    if primary.size_bytes is not None:
        file_size = format_file_size(primary.size_bytes)

    return dataclasses.replace(
        fallback,
        title=primary.title or fallback.title,
        thumbnail_url=primary.thumbnail_url or fallback.thumbnail_url,
        author=primary.author or fallback.author,
        duration=duration,
        file_size=file_size,
        source=SOURCE_PRIMARY,
    )


class MetadataResolver:
    """Resolve identifiers into metadata records without ever failing."""

    def __init__(self, sources: Iterable[MetadataSource] = ()) -> None:
        self._sources: Dict[Platform, MetadataSource] = {}
        for source in sources:
            self._sources[source.platform] = source

    @property
    def primary_platforms(self) -> tuple[Platform, ...]:
        """Platforms with a primary source attached."""

        return tuple(self._sources)

    async def attempt_primary(
        self,
        identifier: str,
        platform: Union[Platform, str],
    ) -> PrimaryResult:
        """Query the platform's public endpoint, if it has one."""

        source = self._sources.get(parse_platform(platform))
        if source is None:
            return SourceUnavailable("no public endpoint")

        try:
            return await source.fetch(identifier)
        except Exception as exc:
            logger.warning(
                "Primary source for %s raised on %s: %s",
                source.platform.value,
                identifier,
                exc,
            )
            return SourceUnavailable(str(exc) or exc.__class__.__name__)

    async def resolve(
        self,
        identifier: str,
        platform: Union[Platform, str],
    ) -> MetadataRecord:
        """Return metadata for an identifier, degrading to synthetic data."""

        profile = get_profile(platform)
        primary = await self.attempt_primary(identifier, profile.platform)
        fallback = synthesize_fallback(identifier, profile.platform)

        if isinstance(primary, SourceUnavailable):
            logger.info(
                "Using fallback metadata for %s %s (%s)",
                profile.platform.value,
                identifier,
                primary.reason,
            )
            return fallback

        return merge_metadata(fallback, primary)


def build_resolver(
    settings: Settings,
    fetch_json: Optional[JsonFetcher] = None,
) -> MetadataResolver:
    """Create a resolver with the sources enabled in settings."""

    if fetch_json is None:
        client = HttpJsonClient(
            timeout=settings.request_timeout,
            user_agent=settings.user_agent,
        )
        fetch_json = client.get_json

    enabled = {parse_platform(name) for name in settings.primary_platforms}
    sources: list[MetadataSource] = []
    if Platform.YOUTUBE in enabled:
        sources.append(
            YouTubeSource(
                fetch_json,
                oembed_url=settings.youtube_oembed_url,
                invidious_url=settings.invidious_url or None,
            )
        )
    if Platform.INSTAGRAM in enabled:
        sources.append(
            OEmbedSource(
                fetch_json,
                platform=Platform.INSTAGRAM,
                endpoint=settings.instagram_oembed_url,
            )
        )
    if Platform.TIKTOK in enabled:
        sources.append(
            OEmbedSource(
                fetch_json,
                platform=Platform.TIKTOK,
                endpoint=settings.tiktok_oembed_url,
            )
        )
    return MetadataResolver(sources)
