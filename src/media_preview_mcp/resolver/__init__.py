"""Metadata resolution with a deterministic fallback chain."""

from media_preview_mcp.resolver.base import (
    HttpJsonClient,
    MetadataSource,
    PrimaryMetadata,
    SourceUnavailable,
)
from media_preview_mcp.resolver.fallback import synthesize_fallback
from media_preview_mcp.resolver.metadata import (
    MetadataResolver,
    build_resolver,
    merge_metadata,
)
from media_preview_mcp.resolver.sources import OEmbedSource, YouTubeSource

__all__ = [
    "HttpJsonClient",
    "MetadataResolver",
    "MetadataSource",
    "OEmbedSource",
    "PrimaryMetadata",
    "SourceUnavailable",
    "YouTubeSource",
    "build_resolver",
    "merge_metadata",
    "synthesize_fallback",
]
