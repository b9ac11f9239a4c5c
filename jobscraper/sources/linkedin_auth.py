"""LinkedIn job search with the user's own session.

Logged-in result pages vary with account state, so every field is read
through an ordered selector try-list. A 403/429 means LinkedIn is pushing
back: the account is reported ``locked`` and the source stops for this run.
"""
from __future__ import annotations

from bs4 import BeautifulSoup, Tag

from jobscraper.dates import parse_posting_date
from jobscraper.log import get_logger
from jobscraper.models import JobListing, LoginStatus, Session, Source, clean_description
from jobscraper.pacing import RateLimiter
from jobscraper.scorer import keyword_match_score
from jobscraper.sources.base import Extractor, SelectorStrategy, absolute_url, first_match, select_cards
from jobscraper.sources.linkedin import BASE_URL, search_url

log = get_logger(__name__)

MAX_KEYWORDS = 5
MAX_JOBS_PER_QUERY = 15
SNIPPET_LEN = 500
BLOCKED_STATUSES = (403, 429)

CLIENT_HINTS: dict[str, str] = {
    "sec-ch-ua": '"Chromium";v="120", "Not A(Brand";v="99", "Google Chrome";v="120"',
    "sec-ch-ua-mobile": "?0",
    "sec-ch-ua-platform": '"macOS"',
}

CARD_SELECTORS: tuple[str, ...] = (
    ".base-card",
    ".job-search-card",
    ".jobs-search__results-list .result-card",
    '[data-entity-urn*="job"]',
    ".jobs-search-results-list .result-card__contents",
)


def _text(el: Tag) -> str:
    return el.get_text(" ", strip=True)


def _title_and_href(el: Tag) -> tuple[str, str] | None:
    title = _text(el)
    return (title, el.get("href") or "") if title else None


def _posting_date(el: Tag):
    return parse_posting_date(_text(el))


TITLE_STRATEGIES: tuple[SelectorStrategy, ...] = tuple(
    SelectorStrategy(name, selector, _title_and_href)
    for name, selector in (
        ("base-card", ".base-search-card__title a"),
        ("job-search-card", ".job-search-card__title a"),
        ("result-card", ".result-card__title a"),
        ("control-name", '[data-control-name="job_search_card_title"] a'),
        ("h3", "h3 a"),
        ("job-title", ".job-title a"),
    )
)

COMPANY_STRATEGIES: tuple[SelectorStrategy, ...] = tuple(
    SelectorStrategy(name, selector)
    for name, selector in (
        ("base-card", ".base-search-card__subtitle a"),
        ("job-search-card", ".job-search-card__subtitle-link"),
        ("result-card", ".result-card__subtitle a"),
        ("control-name", '[data-control-name="job_search_card_subtitle"] a'),
        ("h4", "h4 a"),
        ("company-name", ".company-name a"),
    )
)

LOCATION_STRATEGIES: tuple[SelectorStrategy, ...] = tuple(
    SelectorStrategy(name, selector)
    for name, selector in (
        ("job-search-card", ".job-search-card__location"),
        ("result-card", ".result-card__location"),
        ("metadata", ".base-search-card__metadata .job-result-card__location"),
        ("data-test", '[data-test="job-location"]'),
    )
)

DATE_STRATEGIES: tuple[SelectorStrategy, ...] = tuple(
    SelectorStrategy(name, selector, _posting_date)
    for name, selector in (
        ("job-search-card", ".job-search-card__listdate"),
        ("result-card", ".result-card__listdate"),
        ("metadata", ".base-search-card__metadata time"),
        ("data-test", '[data-test="job-posting-date"]'),
    )
)


def _value(root: Tag, strategies) -> object | None:
    hit = first_match(root, strategies)
    return hit[1] if hit else None


def _job_url(href: str, title: str) -> str:
    if not href:
        return search_url(title)
    if href.startswith("http"):
        return href
    return absolute_url(href if href.startswith("/") else f"/jobs/{href}", BASE_URL, BASE_URL)


def parse_authenticated_card(card: Tag, keyword: str) -> JobListing | None:
    title_hit = _value(card, TITLE_STRATEGIES)
    company = _value(card, COMPANY_STRATEGIES)
    if not title_hit or not company:
        return None
    title, href = title_hit

    description = clean_description(_text(card), SNIPPET_LEN)
    listing = JobListing(
        title=title,
        company=str(company),
        location=str(_value(card, LOCATION_STRATEGIES) or ""),
        source=Source.LINKEDIN,
        url=_job_url(href, title),
        description=description,
        search_keyword=keyword,
        linkedin_enhanced=True,
        match_score=keyword_match_score(title, description, keyword),
    )
    posted = _value(card, DATE_STRATEGIES)
    if posted:
        listing.posting_date_text = posted.text
        listing.posting_days = posted.days
    return listing


def parse_authenticated_cards(html: str, keyword: str) -> list[JobListing]:
    soup = BeautifulSoup(html, "html.parser")
    selector, cards = select_cards(soup, CARD_SELECTORS)
    if not cards:
        log.warning("No job cards found for %r with authenticated scraping", keyword)
        return []
    log.info("Found %d LinkedIn jobs using selector %s", len(cards), selector)

    jobs: list[JobListing] = []
    for i, card in enumerate(cards[:MAX_JOBS_PER_QUERY]):
        try:
            listing = parse_authenticated_card(card, keyword)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            log.warning("Error extracting LinkedIn job %d: %s", i, exc)
            continue
        if listing is not None:
            jobs.append(listing)
            log.debug("Authenticated LinkedIn: %s at %s", listing.title, listing.company)
    return jobs


class LinkedInAuthExtractor(Extractor):
    source = Source.LINKEDIN
    request_interval = 2.0

    def __init__(self, fetcher, session: Session, credentials, *, limiter: RateLimiter | None = None) -> None:
        super().__init__(fetcher, limiter=limiter)
        self.session = session
        self.credentials = credentials

    def run(self, queries, deadline=None) -> list[JobListing]:
        return super().run(list(queries)[:MAX_KEYWORDS], deadline)

    def extract(self, keyword: str) -> list[JobListing]:
        log.info("LinkedIn authenticated search: %r", keyword)
        headers = {**CLIENT_HINTS, "Cookie": self.session.cookie_header}
        page = self.fetcher.fetch_page(search_url(keyword, easy_apply=True), headers=headers)
        if page.text is None:
            if page.status in BLOCKED_STATUSES:
                log.warning("LinkedIn returned %d — marking account locked", page.status)
                self.credentials.update_login_status(self.session.user_id, LoginStatus.LOCKED)
                self.stopped = True
            return []
        return parse_authenticated_cards(page.text, keyword)
