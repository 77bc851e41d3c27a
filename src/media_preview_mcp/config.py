"""Application configuration for media_preview_mcp."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Literal

try:
    from dotenv import load_dotenv
except ImportError:  # pragma: no cover
    load_dotenv = None

if load_dotenv is not None:
    load_dotenv()

try:
    from pydantic import Field
    from pydantic_settings import BaseSettings, SettingsConfigDict
except ImportError as exc:  # pragma: no cover
    raise ImportError(
        "Missing dependencies. Install with `uv sync` before running."
    ) from exc


class Settings(BaseSettings):
    """Settings loaded from environment variables and optional .env file."""

    model_config = SettingsConfigDict(
        env_prefix="MEDIA_PREVIEW_",
        env_file=".env",
        extra="ignore",
    )

    download_dir: Path = Field(
        default_factory=lambda: (
            Path.home() / "Downloads" / "media_preview_mcp"
        )
    )

    request_timeout: float = 5.0
    user_agent: str = "media-preview-mcp/0.1"

    youtube_oembed_url: str = "https://www.youtube.com/oembed"
    invidious_url: str = "https://invidious.snopyta.org"
    instagram_oembed_url: str = "https://api.instagram.com/oembed/"
    tiktok_oembed_url: str = "https://www.tiktok.com/oembed"

    # Platforms whose public metadata endpoint is attempted before fallback.
    primary_platforms: List[str] = Field(default_factory=lambda: ["youtube"])

    download_strategy: Literal["local", "redirect"] = "local"
    synthetic_file_bytes: int = 1024
    redirect_templates: Dict[str, str] = Field(
        default_factory=lambda: {
            "youtube": "https://en.savefrom.net/#url={url}",
            "instagram": "https://snapinsta.app/?url={url}",
            "tiktok": "https://snaptik.app/?url={url}",
        }
    )

    log_level: str = "INFO"
