"""FastMCP server entrypoint for media_preview_mcp."""

from __future__ import annotations

from typing import Any, Dict, Optional

from media_preview_mcp.config import Settings
from media_preview_mcp.download import DownloadTrigger
from media_preview_mcp.errors import (
    InvalidFormatError,
    UnsupportedPlatformError,
    UnsupportedQualityError,
)
from media_preview_mcp.extractor import extract
from media_preview_mcp.logging_utils import setup_logging
from media_preview_mcp.platforms import (
    PLATFORM_PROFILES,
    QUALITY_DESCRIPTIONS,
    detect_platform as detect_url_platform,
)
from media_preview_mcp.resolver import MetadataResolver, build_resolver


def error_payload(exc: Exception, **extra: Any) -> Dict[str, Any]:
    """Map a caller-facing exception to a tool result."""

    if isinstance(exc, InvalidFormatError):
        error_type = "invalid_format"
    elif isinstance(exc, UnsupportedPlatformError):
        error_type = "unsupported_platform"
    elif isinstance(exc, UnsupportedQualityError):
        error_type = "unsupported_quality"
    else:
        error_type = "error"
    payload: Dict[str, Any] = dict(extra)
    payload.update({"error": str(exc), "error_type": error_type})
    return payload


def list_platform_profiles() -> Dict[str, Any]:
    """Describe the supported platforms and their quality tiers."""

    return {
        "platforms": [
            {
                "platform": profile.platform.value,
                "label": profile.label,
                "qualities": [
                    {
                        "value": quality.value,
                        "description": QUALITY_DESCRIPTIONS[quality],
                    }
                    for quality in profile.qualities
                ],
            }
            for profile in PLATFORM_PROFILES.values()
        ]
    }


async def get_metadata_payload(
    resolver: MetadataResolver,
    url: str,
    platform: str,
) -> Dict[str, Any]:
    """Extract an identifier and resolve its metadata as a tool result."""

    try:
        identifier = extract(url, platform)
    except (InvalidFormatError, UnsupportedPlatformError) as exc:
        return error_payload(exc, url=url)

    record = await resolver.resolve(identifier, platform)
    payload = record.to_dict()
    payload["url"] = url
    return payload


def download_payload(
    trigger: DownloadTrigger,
    url: str,
    platform: str,
    quality: str,
) -> Dict[str, Any]:
    """Extract an identifier and run the download trigger as a tool result."""

    try:
        identifier = extract(url, platform)
        result = trigger.download(identifier, platform, quality)
    except (
        InvalidFormatError,
        UnsupportedPlatformError,
        UnsupportedQualityError,
    ) as exc:
        return error_payload(exc, url=url)

    payload = result.to_dict()
    payload["url"] = url
    return payload


def create_server(settings: Optional[Settings] = None) -> Any:
    """Create and configure the FastMCP server instance."""

    try:
        from mcp.server.fastmcp import FastMCP
    except ImportError as exc:  # pragma: no cover
        raise ImportError(
            "mcp is required. Install dependencies with `uv sync`."
        ) from exc

    settings = settings or Settings()
    resolver = build_resolver(settings)
    trigger = DownloadTrigger(
        strategy=settings.download_strategy,
        download_dir=settings.download_dir,
        redirect_templates=settings.redirect_templates,
        synthetic_file_bytes=settings.synthetic_file_bytes,
    )

    mcp = FastMCP("media-preview")

    @mcp.tool()
    def list_platforms() -> Dict[str, Any]:
        """List supported platforms and the quality tiers each offers."""

        return list_platform_profiles()

    @mcp.tool()
    def detect_platform(url: str) -> Dict[str, Any]:
        """Guess the platform of a URL from its host."""

        platform = detect_url_platform(url)
        return {"url": url, "platform": platform.value if platform else None}

    @mcp.tool()
    def extract_identifier(url: str, platform: str) -> Dict[str, Any]:
        """Extract the content identifier from a platform URL."""

        try:
            identifier = extract(url, platform)
        except (InvalidFormatError, UnsupportedPlatformError) as exc:
            return error_payload(exc, url=url)
        return {"url": url, "platform": platform, "id": identifier}

    @mcp.tool()
    async def get_metadata(url: str, platform: str) -> Dict[str, Any]:
        """Preview title, thumbnail, duration, size and qualities for a URL.

        Falls back to stable synthetic metadata when the platform's public
        endpoint is unavailable, so a valid URL always gets a preview.
        """

        return await get_metadata_payload(resolver, url, platform)

    @mcp.tool()
    def download(url: str, platform: str, quality: str = "720p") -> Dict[str, Any]:
        """Trigger a placeholder download (local file or redirect link)."""

        return download_payload(trigger, url, platform, quality)

    return mcp


def run() -> None:
    """Run the MCP server with stdio transport."""

    settings = Settings()
    setup_logging(settings.log_level)
    mcp = create_server(settings)
    mcp.run()
