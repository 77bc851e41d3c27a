"""Content identifier extraction from platform URLs."""

from __future__ import annotations

from typing import Union

from media_preview_mcp.errors import InvalidFormatError
from media_preview_mcp.platforms import Platform, get_profile


def extract(url: str, platform: Union[Platform, str]) -> str:
    """Return the content identifier embedded in a URL.

    Patterns are anchored on the scheme and host and tried in the order the
    platform profile lists them. The first capture is returned verbatim,
    without decoding or normalization.
    Raises InvalidFormatError when no shape matches and
    UnsupportedPlatformError for an unknown platform tag.
    """

    profile = get_profile(platform)
    for pattern in profile.url_patterns:
        match = pattern.match((url or "").strip())
        if match:
            return match.group(1)
    raise InvalidFormatError(url, profile.platform.value)


def is_valid_url(url: str, platform: Union[Platform, str]) -> bool:
    """Return True if the URL yields an identifier for the platform."""

    try:
        extract(url, platform)
    except InvalidFormatError:
        return False
    return True
