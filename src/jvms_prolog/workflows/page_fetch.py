from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

import aiohttp
import requests

from .extractor_config import DEFAULT_ACCEPT_LANGUAGE, DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)


@dataclass
class FetchConfig:
    """Configuration parameters for fetching JVMS pages."""

    user_agent: str = DEFAULT_USER_AGENT
    accept_language: str = DEFAULT_ACCEPT_LANGUAGE
    # None keeps the HTTP client's own default timeout.
    timeout: Optional[float] = None

    def headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Accept-Language": self.accept_language,
        }


@dataclass(frozen=True)
class PageResult:
    """Outcome of one page request; ``error`` is set when the page is unusable."""

    url: str
    status: int
    html: str
    fetched_at: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _now() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _failed(url: str, status: int, error: str) -> PageResult:
    logger.warning("fetch failed for %s: %s", url, error)
    return PageResult(url=url, status=status, html="", fetched_at=_now(), error=error)


class PageFetcher:
    """Async page fetcher; every URL of a batch may be in flight at once."""

    def __init__(self, config: Optional[FetchConfig] = None) -> None:
        self.config = config or FetchConfig()

    async def fetch_many(self, urls: Sequence[str]) -> List[PageResult]:
        """Fetch every URL concurrently and return results in input order."""

        if not urls:
            return []
        limit = len(urls)
        semaphore = asyncio.Semaphore(limit)
        connector = aiohttp.TCPConnector(limit=limit)
        async with aiohttp.ClientSession(connector=connector, headers=self.config.headers()) as session:

            async def _bounded(url: str) -> PageResult:
                async with semaphore:
                    return await self.fetch(session, url)

            return list(await asyncio.gather(*(_bounded(url) for url in urls)))

    async def fetch(self, session: aiohttp.ClientSession, url: str) -> PageResult:
        request_kwargs = {}
        if self.config.timeout is not None:
            request_kwargs["timeout"] = aiohttp.ClientTimeout(total=self.config.timeout)
        try:
            async with session.get(url, **request_kwargs) as resp:
                status = resp.status
                if status >= 400:
                    return _failed(url, status, f"http_{status}")
                html = await resp.text(errors="replace")
        except asyncio.TimeoutError:
            return _failed(url, -1, "timeout")
        except aiohttp.ClientError as exc:
            return _failed(url, -1, f"{type(exc).__name__}: {exc}")
        logger.debug("fetched %s (%d chars)", url, len(html))
        return PageResult(url=url, status=status, html=html, fetched_at=_now())


def fetch_page(url: str, config: Optional[FetchConfig] = None) -> PageResult:
    """Blocking single-page fetch with the same failure semantics as PageFetcher."""

    config = config or FetchConfig()
    try:
        resp = requests.get(url, headers=config.headers(), timeout=config.timeout)
    except requests.RequestException as exc:
        return _failed(url, -1, f"{type(exc).__name__}: {exc}")
    if resp.status_code >= 400:
        return _failed(url, resp.status_code, f"http_{resp.status_code}")
    return PageResult(url=url, status=resp.status_code, html=resp.text, fetched_at=_now())


__all__ = [
    "FetchConfig",
    "PageFetcher",
    "PageResult",
    "fetch_page",
]
