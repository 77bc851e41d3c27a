"""Caller-side preview state: one active request, newest submission wins."""

from __future__ import annotations

import asyncio
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from media_preview_mcp.download import DownloadResult, DownloadTrigger
from media_preview_mcp.errors import InvalidFormatError, StaleResultError
from media_preview_mcp.extractor import extract
from media_preview_mcp.models import MetadataRecord
from media_preview_mcp.platforms import (
    Platform,
    QualityTier,
    default_quality,
    parse_platform,
    parse_quality,
)
from media_preview_mcp.resolver.metadata import MetadataResolver

logger = logging.getLogger(__name__)

STATUS_RESOLVING = "resolving"
STATUS_COMPLETED = "completed"
STATUS_CANCELED = "canceled"
STATUS_SUPERSEDED = "superseded"

_DONE_STATUSES = (STATUS_COMPLETED, STATUS_CANCELED, STATUS_SUPERSEDED)


def utc_now() -> datetime:
    """Return a timezone-aware datetime in UTC."""

    return datetime.now(timezone.utc)


class Notifier(ABC):
    """User-facing notification sink. Subclass to route messages to a UI."""

    @abstractmethod
    def success(self, message: str) -> None:
        ...

    @abstractmethod
    def error(self, message: str) -> None:
        ...


class LoggingNotifier(Notifier):
    """Notifier that writes messages to a logger."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._log = log or logger

    def success(self, message: str) -> None:
        self._log.info(message)

    def error(self, message: str) -> None:
        self._log.error(message)


@dataclass
class PreviewRequest:
    """One submitted (url, platform) pair and its resolution state."""

    request_id: str
    url: str
    platform: Platform
    identifier: str
    status: str = STATUS_RESOLVING
    record: Optional[MetadataRecord] = None
    started_at: datetime = field(default_factory=utc_now)
    completed_at: Optional[datetime] = None
    task: Optional[asyncio.Task] = None

    def to_status_dict(self) -> Dict[str, Any]:
        return {
            "request_id": self.request_id,
            "url": self.url,
            "platform": self.platform.value,
            "id": self.identifier,
            "status": self.status,
            "is_done": self.status in _DONE_STATUSES,
            "metadata": self.record.to_dict() if self.record else None,
            "started_at": self.started_at.isoformat(),
            "completed_at": (
                self.completed_at.isoformat() if self.completed_at else None
            ),
        }


class PreviewSession:
    """Track the preview for the currently selected platform and URL.

    Submitting a new URL cancels any resolution still in flight, and a
    result that arrives for a superseded request is never stored.
    """

    def __init__(
        self,
        resolver: MetadataResolver,
        *,
        download_trigger: Optional[DownloadTrigger] = None,
        notifier: Optional[Notifier] = None,
        platform: Union[Platform, str] = Platform.YOUTUBE,
    ) -> None:
        self._resolver = resolver
        self._download_trigger = download_trigger
        self._notifier = notifier or LoggingNotifier()
        self._platform = parse_platform(platform)
        self._current: Optional[PreviewRequest] = None
        self._selected_quality: Optional[QualityTier] = None

    @property
    def platform(self) -> Platform:
        return self._platform

    @property
    def current(self) -> Optional[PreviewRequest]:
        return self._current

    @property
    def record(self) -> Optional[MetadataRecord]:
        """Metadata of the latest completed request, if any."""

        if self._current is None or self._current.status != STATUS_COMPLETED:
            return None
        return self._current.record

    @property
    def selected_quality(self) -> Optional[QualityTier]:
        return self._selected_quality

    def select_platform(self, platform: Union[Platform, str]) -> None:
        """Switch platform; any preview for the old platform is dropped."""

        new_platform = parse_platform(platform)
        if new_platform is self._platform:
            return
        self.cancel()
        self._platform = new_platform
        self._current = None
        self._selected_quality = None

    def select_quality(self, quality: Union[QualityTier, str]) -> QualityTier:
        """Choose one of the current record's qualities."""

        record = self.record
        if record is None:
            raise RuntimeError("No resolved preview to choose a quality for.")
        tier = parse_quality(quality, record.platform)
        self._selected_quality = tier
        return tier

    async def submit(self, url: str) -> MetadataRecord:
        """Extract and resolve a URL for the selected platform.

        Any previous preview is dropped first. Raises InvalidFormatError
        before any network activity when the URL has no identifier, and
        StaleResultError when a newer submission
        replaced this one while it was resolving.
        """

        try:
            identifier = extract(url, self._platform)
        except InvalidFormatError as exc:
            self._supersede_current()
            self._current = None
            self._selected_quality = None
            self._notifier.error(str(exc))
            raise

        self._supersede_current()
        request = PreviewRequest(
            request_id=uuid.uuid4().hex,
            url=url,
            platform=self._platform,
            identifier=identifier,
        )
        request.task = asyncio.create_task(
            self._resolver.resolve(identifier, self._platform)
        )
        self._current = request
        self._selected_quality = None

        try:
            record = await request.task
        except asyncio.CancelledError:
            if request.status in (STATUS_SUPERSEDED, STATUS_CANCELED):
                raise StaleResultError(
                    f"Request {request.request_id} was {request.status}."
                ) from None
            request.status = STATUS_CANCELED
            request.completed_at = utc_now()
            raise

        if self._current is not request or request.status != STATUS_RESOLVING:
            raise StaleResultError(f"Request {request.request_id} was superseded.")

        request.record = record
        request.status = STATUS_COMPLETED
        request.completed_at = utc_now()
        self._selected_quality = default_quality(record.available_qualities)
        self._notifier.success("Video information retrieved successfully")
        return record

    def cancel(self) -> bool:
        """Cancel the in-flight request. Returns True if one was running."""

        request = self._current
        if request is None or request.status != STATUS_RESOLVING:
            return False
        request.status = STATUS_CANCELED
        request.completed_at = utc_now()
        if request.task is not None:
            request.task.cancel()
        return True

    def download(
        self,
        quality: Optional[Union[QualityTier, str]] = None,
    ) -> DownloadResult:
        """Trigger a download of the current preview."""

        if self._download_trigger is None:
            raise RuntimeError("No download trigger configured.")
        record = self.record
        if record is None:
            raise RuntimeError("Nothing to download; submit a URL first.")

        tier = self.select_quality(quality) if quality else self._selected_quality
        if tier is None:
            tier = default_quality(record.available_qualities)

        try:
            result = self._download_trigger.download(
                record.identifier,
                record.platform,
                tier,
            )
        except (OSError, ValueError):
            logger.exception("Download failed for %s", record.identifier)
            self._notifier.error("Error during download. Please try again.")
            raise
        self._notifier.success("Download completed successfully!")
        return result

    def _supersede_current(self) -> None:
        request = self._current
        if request is None or request.status != STATUS_RESOLVING:
            return
        request.status = STATUS_SUPERSEDED
        request.completed_at = utc_now()
        if request.task is not None:
            request.task.cancel()
