"""Drushim.co.il — Israeli job board, scraped from its public search pages.

The search page embeds its results in a ``window.__NUXT__`` state blob; when
that blob is missing or is not plain JSON, job cards are read from the HTML.
"""
from __future__ import annotations

import json
import re
from typing import Any
from urllib.parse import quote

from bs4 import BeautifulSoup

from jobscraper.dates import days_since, hebrew_age_text, parse_iso_datetime
from jobscraper.heuristics import parse_card_text
from jobscraper.log import get_logger
from jobscraper.models import DEFAULT_LOCATION, UNKNOWN_DAYS, DrushimQuery, JobListing, Source
from jobscraper.sources.base import Extractor, absolute_url, card_text, select_cards

log = get_logger(__name__)

BASE_URL = "https://www.drushim.co.il"
SEARCH_URL = BASE_URL + "/jobs/search/{position}/?experience={experience}&ssaen=1"
MAX_JOBS_PER_QUERY = 15
MAX_SEARCH_DEPTH = 12

JOB_MARKERS: tuple[str, ...] = ("JobContent", "Name", "Company")

CARD_SELECTORS: tuple[str, ...] = (
    ".JobItem",
    ".job-item",
    ".search-results .item",
    ".job-card",
    ".position-card",
    'article[class*="job"]',
    'div[class*="job"]',
    ".result-item",
)

_NUXT_BLOB = re.compile(r"<script[^>]*>\s*window\.__NUXT__\s*=\s*([\s\S]+?)</script>")
_JOB_CONTENT_FRAGMENT = re.compile(r'"JobContent":\s*\{[^}]+\}')

PARSE_ERRORS = (KeyError, TypeError, ValueError, AttributeError)


def search_url(query: DrushimQuery) -> str:
    return SEARCH_URL.format(
        position=quote(query.position, safe=""),
        experience=quote(query.experience, safe=""),
    )


def _looks_like_job(value: Any) -> bool:
    return isinstance(value, dict) and any(value.get(k) for k in JOB_MARKERS)


def find_job_array(value: Any, depth: int = 0, max_depth: int = MAX_SEARCH_DEPTH) -> list | None:
    """First list (depth-first) whose first element looks like a job record."""
    if depth > max_depth:
        return None
    if isinstance(value, list):
        if value and _looks_like_job(value[0]):
            return value
        children = value
    elif isinstance(value, dict):
        children = list(value.values())
    else:
        return None
    for child in children:
        found = find_job_array(child, depth + 1, max_depth)
        if found:
            return found
    return None


def extract_embedded_jobs(html: str) -> list[dict]:
    """Raw job dicts from the page's embedded state; empty when none found."""
    m = _NUXT_BLOB.search(html)
    if m:
        blob = m.group(1).strip().rstrip(";")
        try:
            state = json.loads(blob)
        except json.JSONDecodeError:
            # Nuxt sometimes serializes its state as a function call, not data
            log.debug("Drushim state blob is not JSON (%d chars)", len(blob))
        else:
            root = state
            if isinstance(state, dict) and isinstance(state.get("data"), list) and state["data"]:
                root = state["data"][0]
            jobs = find_job_array(root)
            if jobs:
                return [j for j in jobs if isinstance(j, dict)]

    fragments: list[dict] = []
    for fragment in _JOB_CONTENT_FRAGMENT.findall(html):
        try:
            fragments.append(json.loads("{" + fragment + "}"))
        except json.JSONDecodeError:
            continue
    return fragments


def _address(value: Any) -> str:
    if isinstance(value, list) and value:
        value = value[0]
    if isinstance(value, dict):
        value = value.get("City") or value.get("CityEnglish") or value.get("Name")
    return value if isinstance(value, str) and value.strip() else DEFAULT_LOCATION


def _company_name(value: Any) -> str:
    if isinstance(value, dict):
        return value.get("CompanyDisplayName") or value.get("Name") or ""
    return value if isinstance(value, str) else ""


def parse_drushim_json_job(item: dict, keyword: str) -> JobListing | None:
    content = item.get("JobContent")
    posting_text, days = "Unknown", UNKNOWN_DAYS

    if isinstance(content, dict):
        title = content.get("Name") or ""
        company = _company_name(content.get("Company") or item.get("Company"))
        location = _address(content.get("Addresses"))
        description = content.get("Description") or ""
        job_id = content.get("Id") or item.get("Code") or ""
        url = f"{BASE_URL}/job/{job_id}"
        published = parse_iso_datetime(content.get("PublishDate") or "")
        if published is not None:
            days = days_since(published)
            posting_text = hebrew_age_text(days)
    else:
        title = item.get("Name") or item.get("title") or ""
        company = _company_name(item.get("Company")) or item.get("company") or ""
        location = item.get("location") or DEFAULT_LOCATION
        description = item.get("Description") or item.get("description") or ""
        url = item.get("url") or f"{BASE_URL}/jobs/search/{quote(str(title), safe='')}"

    if not str(title).strip() or not str(company).strip():
        return None
    return JobListing(
        title=str(title),
        company=str(company),
        location=str(location),
        posting_date_text=posting_text,
        posting_days=days,
        source=Source.DRUSHIM,
        url=str(url),
        description=str(description),
        search_keyword=keyword,
    )


def parse_drushim_cards(html: str, keyword: str) -> list[JobListing]:
    soup = BeautifulSoup(html, "html.parser")
    selector, cards = select_cards(soup, CARD_SELECTORS)
    if not cards:
        log.warning("No Drushim job cards found for %r", keyword)
        return []
    log.info("Found %d Drushim cards using selector %s", len(cards), selector)

    jobs: list[JobListing] = []
    for i, card in enumerate(cards[:MAX_JOBS_PER_QUERY]):
        try:
            text = card_text(card)
            fields = parse_card_text(text, Source.DRUSHIM)
            if fields is None:
                continue
            link = card.select_one('a[href*="/job/"], a[href*="/jobs/"]')
            url = absolute_url(link.get("href") if link else None, BASE_URL, BASE_URL)
            jobs.append(
                JobListing(
                    title=fields.title,
                    company=fields.company,
                    location=fields.location,
                    posting_date_text=fields.posting_date_text,
                    posting_days=fields.posting_days,
                    source=Source.DRUSHIM,
                    url=url,
                    description=text,
                    search_keyword=keyword,
                )
            )
        except PARSE_ERRORS as exc:
            log.debug("Skipping Drushim card %d: %s", i, exc)
    return jobs


class DrushimExtractor(Extractor):
    source = Source.DRUSHIM
    request_interval = 2.0

    def extract(self, query: DrushimQuery) -> list[JobListing]:
        log.info("Drushim search: %r (%s years experience)", query.position, query.experience)
        html = self.fetcher.fetch(search_url(query), headers={"Accept-Language": "en-US,he;q=0.5"})
        if html is None:
            return []
        return self.parse(html, query.label)

    def parse(self, html: str, keyword: str) -> list[JobListing]:
        raw_jobs = extract_embedded_jobs(html)
        if not raw_jobs:
            log.info("No embedded Drushim data, trying HTML cards")
            return parse_drushim_cards(html, keyword)

        jobs: list[JobListing] = []
        for item in raw_jobs[:MAX_JOBS_PER_QUERY]:
            try:
                listing = parse_drushim_json_job(item, keyword)
            except PARSE_ERRORS as exc:
                log.debug("Skipping malformed Drushim record: %s", exc)
                continue
            if listing is not None:
                jobs.append(listing)
                log.debug("Drushim: %s at %s (%s)", listing.title, listing.company, listing.posting_date_text)
        return jobs
