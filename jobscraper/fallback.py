"""Simplified-keyword Drushim search for runs that found nothing new.

Free-text LinkedIn queries such as "senior solution engineer Israel" are
cut down to their role words ("solution engineer", "engineer") and run
against Drushim only.
"""
from __future__ import annotations

import re

from jobscraper.dedupe import dedupe
from jobscraper.log import get_logger
from jobscraper.models import DrushimQuery, JobListing, SearchConfig
from jobscraper.pacing import Deadline

log = get_logger(__name__)

FALLBACK_EXPERIENCE = "0-5"
MAX_SOURCE_KEYWORDS = 3
MAX_VARIANTS = 2
DEFAULT_LIMIT = 20

LOCATION_WORDS: frozenset[str] = frozenset({
    "israel", "tel", "aviv", "tel-aviv", "jerusalem", "haifa", "herzliya",
    "remote", "hybrid", "ישראל", "תל", "אביב", "ירושלים", "חיפה",
})

FILLER_WORDS: frozenset[str] = frozenset({
    "senior", "junior", "jr", "sr", "lead", "principal", "staff", "entry",
    "level", "mid", "the", "a", "an", "and", "or", "of", "for", "in", "at",
    "with", "to", "role", "roles", "job", "jobs", "position", "positions",
    "opening", "openings", "hiring", "full", "time", "part",
})

ROLE_NOUNS: tuple[str, ...] = (
    "engineer", "developer", "manager", "analyst", "consultant",
    "designer", "architect", "specialist",
)

_WORD = re.compile(r"[\w\-]+", re.UNICODE)


def simplify_keyword(keyword: str) -> list[str]:
    """At most two simpler variants of *keyword*, most specific first."""
    words = [w for w in _WORD.findall((keyword or "").lower())
             if w not in LOCATION_WORDS and w not in FILLER_WORDS]
    if not words:
        return []
    variants = [" ".join(words)]
    role = next((w for w in words if w in ROLE_NOUNS), None)
    if role and role != variants[0]:
        variants.append(role)
    return variants[:MAX_VARIANTS]


def fallback_queries(config: SearchConfig) -> list[DrushimQuery]:
    queries: list[DrushimQuery] = []
    seen: set[str] = set()
    for keyword in config.linkedin[:MAX_SOURCE_KEYWORDS]:
        for variant in simplify_keyword(keyword):
            if variant in seen:
                continue
            seen.add(variant)
            queries.append(DrushimQuery(position=variant, experience=FALLBACK_EXPERIENCE))
    return queries


def run_fallback(
    config: SearchConfig,
    extractor,
    *,
    limit: int = DEFAULT_LIMIT,
    deadline: Deadline | None = None,
) -> list[JobListing]:
    """Drushim candidates for the simplified keywords, deduped, at most *limit*."""
    queries = fallback_queries(config)
    if not queries:
        log.info("Fallback search: no usable keywords")
        return []
    log.info("Fallback search with %d simplified keyword(s)", len(queries))

    candidates: list[JobListing] = []
    for query in queries:
        if len(candidates) >= limit:
            break
        candidates.extend(extractor.run([query], deadline))
    result = dedupe(candidates)[:limit]
    log.info("Fallback search found %d candidate(s)", len(result))
    return result
