from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Sequence
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from jobscraper.fetcher import Fetcher
from jobscraper.log import get_logger
from jobscraper.models import JobListing, Source
from jobscraper.pacing import Deadline, RateLimiter

log = get_logger(__name__)


@dataclass(frozen=True)
class SelectorStrategy:
    """One entry of an ordered selector try-list."""

    name: str
    selector: str
    extract: Callable[[Tag], Any] = lambda el: el.get_text(" ", strip=True)


def first_match(root: BeautifulSoup | Tag, strategies: Sequence[SelectorStrategy]) -> tuple[str, Any] | None:
    """Apply strategies in order; the first selector that matches and
    yields a non-empty value wins."""
    for strategy in strategies:
        el = root.select_one(strategy.selector)
        if el is None:
            continue
        value = strategy.extract(el)
        if value:
            return strategy.name, value
    return None


def select_cards(soup: BeautifulSoup, selectors: Sequence[str]) -> tuple[str, list[Tag]]:
    """Cards from the first selector with at least one match."""
    for selector in selectors:
        cards = soup.select(selector)
        if cards:
            return selector, cards
    return "", []


def card_text(card: Tag) -> str:
    return card.get_text("\n")


def absolute_url(href: str | None, base: str, default: str) -> str:
    if not href:
        return default
    return href if href.startswith("http") else urljoin(base, href)


class Extractor(ABC):
    source: Source
    request_interval: float = 2.0

    def __init__(self, fetcher: Fetcher, *, limiter: RateLimiter | None = None) -> None:
        self.fetcher = fetcher
        self.limiter = limiter or RateLimiter(self.request_interval, label=self.__class__.__name__)
        self.stopped = False

    @abstractmethod
    def extract(self, query: Any) -> list[JobListing]:
        """Listings for one search query; empty when the page yields nothing."""

    def run(self, queries: Iterable[Any], deadline: Deadline | None = None) -> list[JobListing]:
        """Extract each query in turn, pacing requests.

        A failing query is logged and skipped. The loop ends early when the
        deadline expires or the extractor marks itself stopped.
        """
        name = self.__class__.__name__
        listings: list[JobListing] = []
        for query in queries:
            if self.stopped:
                log.warning("[%s] stopped early, skipping remaining queries", name)
                break
            if deadline is not None and deadline.expired:
                log.warning("[%s] time budget exhausted, skipping remaining queries", name)
                break
            self.limiter.wait()
            try:
                batch = self.extract(query)
            except Exception as exc:
                log.warning("[%s] query %r failed: %s", name, query, exc)
                continue
            log.info("[%s] %r returned %d jobs", name, query, len(batch))
            listings.extend(batch)
        log.info("[%s] total: %d jobs", name, len(listings))
        return listings
