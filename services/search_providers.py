"""
Web search provider integrations (Serper, Brave) behind SearchProviderPort.
"""
from __future__ import annotations

import logging
import random
import threading
import time
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional, TypeVar

import requests
from bs4 import BeautifulSoup

from config.settings import Settings
from models.discovery_result import HealthStatus
from models.search import RawSearchResult


T = TypeVar("T")

RATE_LIMIT_STATUSES = (429, 503)
_MIN_RETRY_DELAY = 0.25
_DEFAULT_RETRY_DELAY = 1.0
_MAX_JITTER = 0.25
BRAVE_MAX_COUNT = 20


class ProviderError(RuntimeError):
    """A search provider call failed (network, HTTP status, or credentials)."""

    def __init__(self, message: str, status: Optional[int] = None, retry_after: Optional[float] = None):
        super().__init__(message)
        self.status = status
        self.retry_after = retry_after


class RateLimitError(ProviderError):
    pass


# Process-wide limiter per provider; smooths bursty fan-out across sources
_limiters: Dict[str, threading.BoundedSemaphore] = {}
_limiters_lock = threading.Lock()


def get_limiter(provider: str, concurrency: int = 2) -> threading.BoundedSemaphore:
    with _limiters_lock:
        limiter = _limiters.get(provider)
        if limiter is None:
            limiter = threading.BoundedSemaphore(max(1, concurrency))
            _limiters[provider] = limiter
        return limiter


def reset_limiters() -> None:
    with _limiters_lock:
        _limiters.clear()


@contextmanager
def limited(provider: str, concurrency: int = 2) -> Iterator[None]:
    limiter = get_limiter(provider, concurrency)
    with limiter:
        yield


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        seconds = float(str(value).strip())
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


def retry_delay(error: ProviderError) -> float:
    if error.retry_after is not None:
        return max(_MIN_RETRY_DELAY, error.retry_after)
    return _DEFAULT_RETRY_DELAY + random.uniform(0, _MAX_JITTER)


def call_with_rate_limit_retry(
    provider: str,
    call: Callable[[], T],
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run ``call``; on a rate-limit error wait once and retry. A second failure propagates."""
    try:
        return call()
    except RateLimitError as e:
        delay = retry_delay(e)
        logging.warning(
            f"{provider} rate limited (status={e.status}), retrying once in {delay:.2f}s",
            extra={"provider": provider, "status": e.status},
        )
        sleep(delay)
        return call()


def _raise_for_status(provider: str, response) -> None:
    status = response.status_code
    if status == 200:
        return
    retry_after = parse_retry_after(response.headers.get("Retry-After"))
    body = (response.text or "")[:200]
    if status in RATE_LIMIT_STATUSES:
        raise RateLimitError(f"{provider} rate limit: HTTP {status}", status=status, retry_after=retry_after)
    raise ProviderError(f"{provider} request failed with status {status}: {body}", status=status)


def strip_html(text: Optional[str]) -> str:
    if not text:
        return ""
    return BeautifulSoup(text, "html.parser").get_text(" ", strip=True)


class _HttpProvider:
    name = "base"

    def __init__(
        self,
        api_key: Optional[str],
        url: str,
        timeout: float = 8.0,
        concurrency: int = 2,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.api_key = api_key
        self.url = url
        self.timeout = timeout
        self.concurrency = concurrency
        self.session = session or requests.Session()
        self.sleep = sleep
        self.api_calls_made = 0

    def _request(self, query: str, max_results: int):
        raise NotImplementedError

    def _parse(self, data: dict) -> List[RawSearchResult]:
        raise NotImplementedError

    def _fetch(self, query: str, max_results: int) -> List[RawSearchResult]:
        try:
            with limited(self.name, self.concurrency):
                self.api_calls_made += 1
                response = self._request(query, max_results)
        except requests.exceptions.RequestException as e:
            raise ProviderError(f"{self.name} request error: {e}") from e
        _raise_for_status(self.name, response)
        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(f"{self.name} returned invalid JSON") from e
        return self._parse(data or {})[:max_results]

    def search_raw(self, query: str, max_results: int) -> List[RawSearchResult]:
        if not self.api_key:
            raise ProviderError(f"{self.name} API key is not configured")
        logging.debug(f"{self.name} search: {query!r} (max {max_results})", extra={"provider": self.name})
        return call_with_rate_limit_retry(self.name, lambda: self._fetch(query, max_results), sleep=self.sleep)

    def health_check(self) -> HealthStatus:
        if not self.api_key:
            return HealthStatus(healthy=False, error=f"{self.name} API key is not configured")
        started = time.monotonic()
        try:
            self._fetch("test", 1)
        except ProviderError as e:
            return HealthStatus(healthy=False, latency_ms=int((time.monotonic() - started) * 1000), error=str(e))
        return HealthStatus(healthy=True, latency_ms=int((time.monotonic() - started) * 1000))


class SerperProvider(_HttpProvider):
    """Google results through serper.dev."""

    name = "serper"

    def _request(self, query: str, max_results: int):
        return self.session.post(
            self.url,
            json={"q": query, "num": max_results, "page": 1},
            headers={"X-API-KEY": self.api_key or "", "Content-Type": "application/json"},
            timeout=self.timeout,
        )

    def _parse(self, data: dict) -> List[RawSearchResult]:
        results: List[RawSearchResult] = []
        for i, item in enumerate(data.get("organic") or []):
            link = item.get("link")
            if not link:
                continue
            results.append(
                RawSearchResult(
                    url=link,
                    title=item.get("title") or "",
                    snippet=item.get("snippet") or "",
                    position=int(item.get("position") or i + 1),
                )
            )
        return results


class BraveProvider(_HttpProvider):
    """Brave Search web API. Snippets arrive with inline HTML markup."""

    name = "brave"

    def _request(self, query: str, max_results: int):
        return self.session.get(
            self.url,
            params={"q": query, "count": min(max_results, BRAVE_MAX_COUNT)},
            headers={"X-Subscription-Token": self.api_key or "", "Accept": "application/json"},
            timeout=self.timeout,
        )

    def _parse(self, data: dict) -> List[RawSearchResult]:
        web = data.get("web") or {}
        results: List[RawSearchResult] = []
        for i, item in enumerate(web.get("results") or []):
            url = item.get("url")
            if not url:
                continue
            results.append(
                RawSearchResult(
                    url=url,
                    title=strip_html(item.get("title")),
                    snippet=strip_html(item.get("description")),
                    position=i + 1,
                )
            )
        return results


PROVIDERS = {"serper": SerperProvider, "brave": BraveProvider}


def build_provider(name: str, settings: Settings, session: Optional[requests.Session] = None):
    key = (name or "").strip().lower()
    if key == "serper":
        api_key, url = settings.serper_api_key, settings.serper_url
    elif key == "brave":
        api_key, url = settings.brave_api_key, settings.brave_url
    else:
        raise ValueError(f"Unknown search provider: {name}")
    return PROVIDERS[key](
        api_key,
        url,
        timeout=settings.request_timeout_seconds,
        concurrency=settings.provider_concurrency,
        session=session,
    )
