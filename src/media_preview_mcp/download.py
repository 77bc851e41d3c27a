"""Placeholder download trigger: local synthetic file or external redirect."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union
from urllib.parse import quote

from media_preview_mcp.platforms import (
    Platform,
    QualityTier,
    get_profile,
    parse_quality,
)
from media_preview_mcp.security import PathValidator, sanitize_filename

logger = logging.getLogger(__name__)

STRATEGY_LOCAL = "local"
STRATEGY_REDIRECT = "redirect"

SUPPORTED_STRATEGIES = (STRATEGY_LOCAL, STRATEGY_REDIRECT)


@dataclass(frozen=True)
class DownloadResult:
    """Outcome of a download request."""

    strategy: str
    platform: Platform
    identifier: str
    quality: QualityTier
    file_name: str
    mime_type: str
    file_path: Optional[str] = None
    file_size: Optional[int] = None
    redirect_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable payload."""

        return {
            "strategy": self.strategy,
            "platform": self.platform.value,
            "id": self.identifier,
            "quality": self.quality.value,
            "file_name": self.file_name,
            "mime_type": self.mime_type,
            "file_path": self.file_path,
            "file_size": self.file_size,
            "redirect_url": self.redirect_url,
        }


def build_file_name(
    identifier: str,
    platform: Platform,
    quality: QualityTier,
) -> str:
    """Return ``{platform}_{id}_{quality}.{ext}`` made filesystem-safe."""

    stem = sanitize_filename(f"{platform.value}_{identifier}_{quality.value}")
    return f"{stem}.{quality.extension}"


class DownloadTrigger:
    """Produce a placeholder download for a resolved identifier."""

    def __init__(
        self,
        *,
        strategy: str,
        download_dir: Path,
        redirect_templates: Mapping[str, str],
        synthetic_file_bytes: int = 1024,
        random_bytes: Callable[[int], bytes] = os.urandom,
    ) -> None:
        normalized = (strategy or STRATEGY_LOCAL).strip().lower()
        if normalized not in SUPPORTED_STRATEGIES:
            raise ValueError(
                "Unsupported download strategy. Expected one of: "
                f"{', '.join(SUPPORTED_STRATEGIES)}"
            )
        self._strategy = normalized
        self._download_dir = download_dir.expanduser()
        self._path_validator = PathValidator([self._download_dir])
        self._redirect_templates = dict(redirect_templates)
        self._synthetic_file_bytes = synthetic_file_bytes
        self._random_bytes = random_bytes

    @property
    def strategy(self) -> str:
        return self._strategy

    def download(
        self,
        identifier: str,
        platform: Union[Platform, str],
        quality: Union[QualityTier, str],
    ) -> DownloadResult:
        """Run the configured strategy for one identifier and quality."""

        profile = get_profile(platform)
        tier = parse_quality(quality, profile.platform)
        file_name = build_file_name(identifier, profile.platform, tier)
        logger.info(
            "Download %s %s in %s via %s",
            profile.platform.value,
            identifier,
            tier.value,
            self._strategy,
        )

        if self._strategy == STRATEGY_REDIRECT:
            return DownloadResult(
                strategy=STRATEGY_REDIRECT,
                platform=profile.platform,
                identifier=identifier,
                quality=tier,
                file_name=file_name,
                mime_type=tier.mime_type,
                redirect_url=self.redirect_url(identifier, profile.platform),
            )

        data = self._random_bytes(self._synthetic_file_bytes)
        path = self._path_validator.write_bytes(self._download_dir / file_name, data)
        return DownloadResult(
            strategy=STRATEGY_LOCAL,
            platform=profile.platform,
            identifier=identifier,
            quality=tier,
            file_name=file_name,
            mime_type=tier.mime_type,
            file_path=str(path),
            file_size=len(data),
        )

    def redirect_url(self, identifier: str, platform: Platform) -> str:
        """Third-party downloader URL for the content's canonical URL."""

        template = self._redirect_templates.get(platform.value)
        if not template:
            raise ValueError(f"No redirect target configured for {platform.value}.")
        content_url = get_profile(platform).canonical_url(identifier)
        return template.format(url=quote(content_url, safe=""), id=identifier)
