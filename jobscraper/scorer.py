"""Filter listings against user preferences and score their relevance."""
from __future__ import annotations

from dataclasses import replace

from jobscraper.log import get_logger
from jobscraper.models import JobListing, Source, UserPreferences

log = get_logger(__name__)

BASE_SCORE = 50
MIN_SCORE, MAX_SCORE = 0, 100
RICH_DESCRIPTION_LEN = 500

REMOTE_MARKERS: tuple[str, ...] = ("remote", "מרחוק", "עבודה מהבית")

JOB_TYPE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "full-time": ("full-time", "full time", "fulltime", "משרה מלאה"),
    "part-time": ("part-time", "part time", "parttime", "משרה חלקית"),
    "contract": ("contract", "contractor", "freelance", "פרילנס", "חוזה"),
    "temporary": ("temporary", "temp", "זמני", "זמנית"),
    "internship": ("internship", "intern", "סטודנט", "התמחות"),
}

SENIORITY_TERMS: tuple[str, ...] = ("senior", "lead", "principal", "manager", "director")


def _normalize(s: str) -> str:
    return (s or "").lower().strip()


def clamp(score: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, score))


def is_remote(listing: JobListing) -> bool:
    text = " ".join((listing.title, listing.description, listing.location)).lower()
    return any(marker in text for marker in REMOTE_MARKERS)


def matches_job_types(listing: JobListing, job_types: tuple[str, ...]) -> bool:
    text = (listing.title + " " + listing.description).lower()
    for job_type in job_types:
        keywords = JOB_TYPE_KEYWORDS.get(_normalize(job_type), (_normalize(job_type),))
        if any(kw in text for kw in keywords):
            return True
    return False


def matches_preferences(listing: JobListing, prefs: UserPreferences | None) -> bool:
    """Unset preference fields place no constraint."""
    if prefs is None:
        return True
    if prefs.remote_work is not None and is_remote(listing) != prefs.remote_work:
        return False
    if prefs.job_types and not matches_job_types(listing, prefs.job_types):
        return False
    return True


def keyword_bonus(title: str, description: str, keyword: str) -> int:
    title_norm, desc_norm, kw = _normalize(title), _normalize(description), _normalize(keyword)
    bonus = 0
    if kw and kw in title_norm:
        bonus += 30
    if kw and kw in desc_norm:
        bonus += 15
    if any(term in title_norm or term in desc_norm for term in SENIORITY_TERMS):
        bonus += 10
    return bonus


def keyword_match_score(title: str, description: str, keyword: str) -> int:
    """Relevance of one card to the keyword that found it."""
    return clamp(BASE_SCORE + keyword_bonus(title, description, keyword))


def score_listing(listing: JobListing) -> int:
    score = BASE_SCORE
    if listing.posting_days <= 1:
        score += 20
    elif listing.posting_days <= 7:
        score += 10
    if listing.source is Source.LINKEDIN:
        score += 15
    if len(listing.description) > RICH_DESCRIPTION_LEN:
        score += 10
    if listing.linkedin_enhanced:
        score += keyword_bonus(listing.title, listing.description, listing.search_keyword)
    return clamp(score)


def filter_and_score(listings: list[JobListing], prefs: UserPreferences | None = None) -> list[JobListing]:
    kept = [
        replace(j, match_score=score_listing(j))
        for j in listings
        if matches_preferences(j, prefs)
    ]
    log.info("Preference filter kept %d of %d jobs", len(kept), len(listings))
    return kept
