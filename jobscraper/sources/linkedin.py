"""LinkedIn public job search (no login).

Reads the guest results page and parses each ``.base-card`` from its text.
"""
from __future__ import annotations

from urllib.parse import urlencode

from bs4 import BeautifulSoup, Tag

from jobscraper.heuristics import parse_card_text
from jobscraper.log import get_logger
from jobscraper.models import JobListing, Source
from jobscraper.sources.base import Extractor, absolute_url, card_text

log = get_logger(__name__)

BASE_URL = "https://www.linkedin.com"
SEARCH_URL = BASE_URL + "/jobs/search"
ISRAEL_GEO_ID = "101620260"
PAST_WEEK = "r604800"
MAX_JOBS_PER_QUERY = 10

SEEN_STATES: tuple[str, ...] = ("applied", "viewed", "saved")
FOOTER_STATE_SELECTOR = ".job-card-container__footer-job-state"


def search_url(keyword: str, *, easy_apply: bool = False) -> str:
    params = {
        "keywords": keyword,
        "location": "Israel",
        "geoId": ISRAEL_GEO_ID,
        "f_TPR": PAST_WEEK,
    }
    if easy_apply:
        params["f_AL"] = "true"
    params.update({"position": "1", "pageNum": "0"})
    return f"{SEARCH_URL}?{urlencode(params)}"


def seen_state(card: Tag) -> str | None:
    """'applied' / 'viewed' / 'saved' when the card footer says so."""
    footer = card.select_one(FOOTER_STATE_SELECTOR)
    if footer is None:
        return None
    text = footer.get_text(" ", strip=True).lower()
    for state in SEEN_STATES:
        if state in text:
            return state
    return None


def job_url(card: Tag) -> str:
    link = card.select_one('a[href*="/jobs/view/"]')
    return absolute_url(link.get("href") if link else None, BASE_URL, "https://linkedin.com/jobs")


def parse_public_cards(html: str, keyword: str) -> list[JobListing]:
    soup = BeautifulSoup(html, "html.parser")
    cards = soup.select(".base-card")
    if not cards:
        log.warning("No LinkedIn cards found for %r", keyword)
        return []
    log.info("Found %d LinkedIn cards for %r", len(cards), keyword)

    jobs: list[JobListing] = []
    for i, card in enumerate(cards[:MAX_JOBS_PER_QUERY]):
        state = seen_state(card)
        if state:
            log.info("Skipping LinkedIn card %d: already %s", i, state)
            continue
        try:
            text = card_text(card)
            fields = parse_card_text(text, Source.LINKEDIN)
            if fields is None:
                continue
            jobs.append(
                JobListing(
                    title=fields.title,
                    company=fields.company,
                    location=fields.location,
                    posting_date_text=fields.posting_date_text,
                    posting_days=fields.posting_days,
                    source=Source.LINKEDIN,
                    url=job_url(card),
                    description=text,
                    search_keyword=keyword,
                )
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            log.warning("Error extracting LinkedIn card %d: %s", i, exc)
    return jobs


class LinkedInPublicExtractor(Extractor):
    source = Source.LINKEDIN
    request_interval = 3.0

    def extract(self, keyword: str) -> list[JobListing]:
        log.info("LinkedIn search: %r", keyword)
        html = self.fetcher.fetch(search_url(keyword))
        if html is None:
            return []
        return parse_public_cards(html, keyword)
