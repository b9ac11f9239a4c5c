"""Cross-source de-duplication and ordering of scraped listings."""
from __future__ import annotations

from jobscraper.log import get_logger
from jobscraper.models import JobListing, Source

log = get_logger(__name__)


def dedupe(listings: list[JobListing]) -> list[JobListing]:
    """Keep the first listing per natural key; arrival order decides ties."""
    seen: set[tuple[str, str]] = set()
    unique: list[JobListing] = []
    for job in listings:
        key = job.natural_key
        if key in seen:
            log.info("Removing duplicate: %s at %s (from %s)", job.title, job.company, job.source.value)
            continue
        seen.add(key)
        unique.append(job)
    return unique


def sort_by_date_and_source(listings: list[JobListing]) -> list[JobListing]:
    """Newest first; LinkedIn before Drushim when posted the same day."""
    return sorted(listings, key=lambda j: (j.posting_days, j.source is not Source.LINKEDIN))
