"""Common HTTP and result types for metadata sources."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from media_preview_mcp.platforms import Platform

JsonFetcher = Callable[[str, Optional[Mapping[str, Any]]], Any]


@dataclass(frozen=True)
class PrimaryMetadata:
    """Fields recovered from a platform's public metadata endpoint."""

    title: str
    thumbnail_url: str
    author: Optional[str] = None
    duration_seconds: Optional[int] = None
    size_bytes: Optional[int] = None


@dataclass(frozen=True)
class SourceUnavailable:
    """A primary source could not produce usable metadata."""

    reason: str


PrimaryResult = Union[PrimaryMetadata, SourceUnavailable]


class HttpJsonClient:
    """Blocking JSON GET client with a short retry policy."""

    def __init__(
        self,
        *,
        timeout: float,
        user_agent: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._timeout = timeout
        self._session = session or requests.Session()
        retries = Retry(
            total=2,
            backoff_factor=0.5,
            status_forcelist=[500, 502, 503, 504],
        )
        self._session.mount("https://", HTTPAdapter(max_retries=retries))
        self._session.mount("http://", HTTPAdapter(max_retries=retries))
        if user_agent:
            self._session.headers.update({"User-Agent": user_agent})

    def get_json(
        self,
        url: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """GET a URL and decode its JSON body, raising on any failure."""

        response = self._session.get(url, params=params, timeout=self._timeout)
        response.raise_for_status()
        return response.json()


class MetadataSource(ABC):
    """A public metadata endpoint for one platform."""

    platform: Platform

    def __init__(self, fetch_json: JsonFetcher) -> None:
        self._fetch_json = fetch_json

    @abstractmethod
    async def fetch(self, identifier: str) -> PrimaryResult:
        """Query the endpoint for one identifier."""

    async def _get(
        self,
        url: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        # requests blocks; keep the event loop free while it runs.
        return await asyncio.to_thread(self._fetch_json, url, params)


def require_fields(
    payload: Any,
    *fields: str,
) -> Union[Mapping[str, Any], SourceUnavailable]:
    """Return the payload if it is a mapping with non-empty string fields."""

    if not isinstance(payload, Mapping):
        return SourceUnavailable("payload is not a JSON object")

    missing = [
        name
        for name in fields
        if not isinstance(payload.get(name), str) or not payload[name].strip()
    ]
    if missing:
        return SourceUnavailable(f"payload missing {', '.join(missing)}")
    return payload
