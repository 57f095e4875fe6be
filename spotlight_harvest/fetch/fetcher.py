"""
HTTP page fetching with domain allow-listing and per-domain politeness.

Each source collector owns one PageFetcher. The fetcher never raises for
network or HTTP problems; failures are reported through FetchResult so a
single bad page cannot abort collection of the remaining pages.
"""

from __future__ import annotations

from dataclasses import dataclass
import random
import threading
import time
from typing import Callable
from urllib.parse import urlparse

import httpx

from ..errors import DomainNotAllowedError


MAX_REDIRECTS = 10


@dataclass
class FetchResult:
    """Result of an HTTP fetch operation.

    Either text will be populated (success) or error will be populated (failure),
    but never both. status_code may be None for network-level failures.

    Attributes:
        url: The URL that was fetched
        status_code: HTTP status code, or None if request failed before getting response
        text: The response body text, or None on error
        error: Error message if fetch failed, None on success
        error_category: Coarse failure class used for logging
    """

    url: str
    status_code: int | None
    text: str | None
    error: str | None
    error_category: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.text is not None


def categorize_error(error: str | None, status_code: int | None) -> str:
    """Categorize fetch errors for better logging.

    Args:
        error: Error message from fetch attempt
        status_code: HTTP status code if available

    Returns:
        Error category: "timeout", "blocked", "http_error", "network_failed", "unknown"
    """
    if not error:
        return "unknown"
    error_lower = error.lower()
    if "timeout" in error_lower or "timed out" in error_lower:
        return "timeout"
    if status_code in (401, 403, 429) or "blocked" in error_lower:
        return "blocked"
    if status_code is not None and status_code >= 400:
        return "http_error"
    if "connect" in error_lower or "connection" in error_lower:
        return "network_failed"
    return "unknown"


def host_of(url: str) -> str:
    return (urlparse(url).hostname or "").lower()


class PageFetcher:
    """Fetches pages from a fixed set of hosts, pausing between requests.

    Before every request to a host the fetcher waits until at least
    delay + uniform(0, random_delay) seconds have passed since the previous
    request to that host.
    """

    def __init__(
        self,
        allowed_domains: list[str],
        *,
        user_agent: str,
        timeout: float = 20.0,
        delay: float = 0.0,
        random_delay: float = 0.0,
        trust_env: bool = True,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.allowed_domains = [d.lower() for d in allowed_domains]
        self.user_agent = user_agent
        self.timeout = timeout
        self.delay = delay
        self.random_delay = random_delay
        self.trust_env = trust_env
        self._transport = transport
        self._sleep = sleep
        self._clock = clock
        self._last_request: dict[str, float] = {}
        self._lock = threading.Lock()

    def is_allowed(self, url: str) -> bool:
        """Return True if url uses http(s) and its host is allow-listed.

        An empty allow-list permits every host.
        """
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https"):
            return False
        if not self.allowed_domains:
            return True
        return host_of(url) in self.allowed_domains

    def fetch(self, url: str, headers: dict[str, str] | None = None) -> FetchResult:
        """Fetch one page.

        Args:
            url: Absolute URL on an allow-listed host
            headers: Extra request headers

        Returns:
            FetchResult with text on a 2xx response, otherwise with error set
        """
        if not self.is_allowed(url):
            return self._not_allowed(url)

        self._wait_for_turn(host_of(url))

        request_headers = {"User-Agent": self.user_agent}
        request_headers.update(headers or {})
        try:
            with httpx.Client(
                timeout=self.timeout,
                headers=request_headers,
                follow_redirects=False,
                trust_env=self.trust_env,
                transport=self._transport,
            ) as client:
                request = client.build_request("GET", url)
                for _ in range(MAX_REDIRECTS + 1):
                    resp = client.send(request)
                    if resp.next_request is None:
                        break
                    # Every redirect hop must stay on the allow-list.
                    if not self.is_allowed(str(resp.next_request.url)):
                        return self._not_allowed(str(resp.next_request.url))
                    request = resp.next_request
                else:
                    raise httpx.TooManyRedirects(
                        f"Exceeded {MAX_REDIRECTS} redirects", request=request
                    )
        except httpx.HTTPError as exc:
            error = f"{type(exc).__name__}: {exc}"
            return FetchResult(
                url=url,
                status_code=None,
                text=None,
                error=error,
                error_category=categorize_error(error, None),
            )

        if not resp.is_success:
            error = f"HTTP {resp.status_code}"
            return FetchResult(
                url=url,
                status_code=resp.status_code,
                text=None,
                error=error,
                error_category=categorize_error(error, resp.status_code),
            )
        return FetchResult(url=str(resp.url), status_code=resp.status_code, text=resp.text, error=None)

    def _not_allowed(self, url: str) -> FetchResult:
        exc = DomainNotAllowedError(url, self.allowed_domains)
        return FetchResult(url=url, status_code=None, text=None, error=str(exc), error_category="not_allowed")

    def next_delay(self) -> float:
        jitter = random.uniform(0, self.random_delay) if self.random_delay > 0 else 0.0
        return self.delay + jitter

    def _wait_for_turn(self, host: str) -> None:
        with self._lock:
            last = self._last_request.get(host)
            if last is not None:
                remaining = self.next_delay() - (self._clock() - last)
                if remaining > 0:
                    self._sleep(remaining)
            self._last_request[host] = self._clock()
