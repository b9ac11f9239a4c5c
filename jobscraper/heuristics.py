"""Line-based parsing of job-card text scraped from result pages.

Cards are flattened to text, split into lines, stripped of noise (buttons,
relative dates) and read top-down: title first, company shortly after.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from jobscraper.dates import PostingDate, parse_posting_date
from jobscraper.models import DEFAULT_LOCATION, UNKNOWN_DAYS, Source

NOISE_MARKERS: tuple[str, ...] = (
    "with verification", "Apply", "Save", "ago",
    "שעות", "ימים", "אתמול", "היום",
)

_VERIFICATION_SUFFIX = re.compile(r"\s+with verification\s*$", re.I)

# Drushim cards list salary / position / region / experience as short lines
DRUSHIM_BOILERPLATE: tuple[str, ...] = ("שכר", "משרה", "אזור", "ניסיון")
LINKEDIN_BOILERPLATE: tuple[str, ...] = ("Israel", "Tel Aviv")

CITIES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("תל אביב", "Tel Aviv"), "תל אביב"),
    (("ירושלים", "Jerusalem"), "ירושלים"),
    (("חיפה", "Haifa"), "חיפה"),
)


@dataclass(frozen=True)
class CardRules:
    company_scan: int
    max_company_len: int
    boilerplate: tuple[str, ...]


RULES: dict[Source, CardRules] = {
    Source.DRUSHIM: CardRules(company_scan=4, max_company_len=50, boilerplate=DRUSHIM_BOILERPLATE),
    Source.LINKEDIN: CardRules(company_scan=5, max_company_len=60, boilerplate=LINKEDIN_BOILERPLATE),
}


@dataclass
class CardFields:
    title: str
    company: str
    location: str = DEFAULT_LOCATION
    posting_date_text: str = "Unknown"
    posting_days: int = UNKNOWN_DAYS


def split_lines(text: str) -> list[str]:
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


def is_noise(line: str) -> bool:
    return len(line) <= 2 or any(marker in line for marker in NOISE_MARKERS)


def strip_verification(line: str) -> str:
    return _VERIFICATION_SUFFIX.sub("", line).strip()


def find_posting_date(lines: list[str]) -> PostingDate | None:
    for line in lines:
        parsed = parse_posting_date(line)
        if parsed:
            return parsed
    return None


def find_city(lines: list[str]) -> str | None:
    for line in lines:
        for names, canonical in CITIES:
            if any(name in line for name in names):
                return canonical
    return None


def _find_company(clean: list[str], title: str, rules: CardRules) -> str:
    for line in clean[1:rules.company_scan]:
        if line == title or not 1 < len(line) < rules.max_company_len:
            continue
        if any(term in line for term in rules.boilerplate):
            continue
        return strip_verification(line)
    return ""


def _linkedin_location(lines: list[str]) -> str | None:
    for line in lines:
        if ("Israel" in line or "Tel Aviv" in line) and len(line) < 100:
            return line
    return None


def parse_card_text(text: str, source: Source) -> CardFields | None:
    """Title, company, location and posting date from raw card text.

    Returns ``None`` when either title or company cannot be found.
    """
    lines = split_lines(text)
    if not lines:
        return None
    rules = RULES[source]

    clean = [line for line in lines if not is_noise(line)]
    if not clean:
        return None
    title = strip_verification(clean[0])
    company = _find_company(clean, title, rules)
    if not title or not company:
        return None

    fields = CardFields(title=title, company=company)
    posted = find_posting_date(lines)
    if posted:
        fields.posting_date_text = posted.text
        fields.posting_days = posted.days

    if source is Source.DRUSHIM:
        location = find_city(clean)
    else:
        location = _linkedin_location(lines)
    if location:
        fields.location = location
    return fields
