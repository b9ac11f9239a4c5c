"""HTTP GET with rotating browser identity, status classification and backoff.

A fetch never raises for network problems: callers get ``None`` (or a
``FetchResult`` without text) and treat it as "no data for this query".
"""
from __future__ import annotations

import random
import time
from typing import Callable

import requests

from jobscraper.log import get_logger
from jobscraper.models import FetchResult
from jobscraper.retry import backoff_delay, is_retryable_status

log = get_logger(__name__)

USER_AGENTS: tuple[str, ...] = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Safari/605.1.15",
)

BASE_HEADERS: dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Sec-Fetch-User": "?1",
    "Cache-Control": "max-age=0",
}


def random_user_agent(rng: random.Random | None = None) -> str:
    return (rng or random).choice(USER_AGENTS)


def build_headers(extra: dict[str, str] | None = None, rng: random.Random | None = None) -> dict[str, str]:
    headers = {"User-Agent": random_user_agent(rng), **BASE_HEADERS}
    if extra:
        headers.update(extra)
    return headers


class Fetcher:
    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        timeout: float = 20.0,
        max_retries: int = 3,
        retry_delay: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
        rng: random.Random | None = None,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._sleep = sleep
        self._rng = rng

    def fetch(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        max_retries: int | None = None,
        retry_delay: float | None = None,
    ) -> str | None:
        return self.fetch_page(url, headers, max_retries, retry_delay).text

    def fetch_page(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        max_retries: int | None = None,
        retry_delay: float | None = None,
    ) -> FetchResult:
        max_retries = self.max_retries if max_retries is None else max_retries
        retry_delay = self.retry_delay if retry_delay is None else retry_delay
        result = FetchResult(url=url)

        for attempt in range(1, max_retries + 1):
            result.attempts = attempt
            try:
                r = self.session.get(
                    url, headers=build_headers(headers, self._rng), timeout=self.timeout
                )
            except requests.RequestException as exc:
                result.status = None
                delay = backoff_delay(attempt, retry_delay)
                log.warning(
                    "Request error for %s (attempt %d/%d): %s",
                    url, attempt, max_retries, exc,
                )
            else:
                result.status = r.status_code
                if 200 <= r.status_code < 300:
                    result.text = r.text
                    log.info("Fetched %s (%d chars)", url, len(result.text))
                    return result
                if not is_retryable_status(r.status_code):
                    log.warning("HTTP %d for %s, not retrying", r.status_code, url)
                    return result
                delay = backoff_delay(attempt, retry_delay, r.status_code)
                log.warning(
                    "HTTP %d for %s (attempt %d/%d)",
                    r.status_code, url, attempt, max_retries,
                )

            if attempt < max_retries:
                log.debug("Backing off %.1fs before retrying %s", delay, url)
                self._sleep(delay)

        log.error("Giving up on %s after %d attempts", url, max_retries)
        return result
