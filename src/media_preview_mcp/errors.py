"""Exceptions surfaced to callers of media_preview_mcp."""

from __future__ import annotations


class InvalidFormatError(ValueError):
    """Raised when a URL does not match any known shape for its platform."""

    def __init__(self, url: str, platform: str) -> None:
        super().__init__(f"Invalid {platform} URL format: {url!r}")
        self.url = url
        self.platform = platform


class UnsupportedPlatformError(ValueError):
    """Raised when a platform tag is outside the supported set."""

    def __init__(self, platform: object) -> None:
        super().__init__(f"Unsupported platform: {platform!r}")
        self.platform = platform


class UnsupportedQualityError(ValueError):
    """Raised when a quality tier is not offered for a platform."""

    def __init__(self, quality: object, platform: str) -> None:
        super().__init__(f"Quality {quality!r} is not available for {platform}.")
        self.quality = quality
        self.platform = platform


class StaleResultError(RuntimeError):
    """Raised when a preview request was superseded by a newer one."""
