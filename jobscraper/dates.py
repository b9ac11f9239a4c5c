"""Turn relative posting dates (English and Hebrew) into days since posting."""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone

from jobscraper.models import UNKNOWN_DAYS

# (pattern, days per unit, fixed days)
_ENGLISH: list[tuple[re.Pattern, int, int | None]] = [
    (re.compile(r"(\d+)\s+(?:day|days)\s+ago", re.I), 1, None),
    (re.compile(r"(\d+)\s+(?:hour|hours)\s+ago", re.I), 0, None),
    (re.compile(r"(\d+)\s+(?:week|weeks)\s+ago", re.I), 7, None),
    (re.compile(r"(\d+)\s+(?:month|months)\s+ago", re.I), 30, None),
    (re.compile(r"yesterday", re.I), 0, 1),
    (re.compile(r"today", re.I), 0, 0),
    (re.compile(r"just\s+now|moments?\s+ago", re.I), 0, 0),
]

_HEBREW: list[tuple[re.Pattern, int, int | None]] = [
    (re.compile(r"(\d+)\s*(?:ימים|יום)"), 1, None),
    (re.compile(r"(\d+)\s*(?:שעות|שעה)"), 0, None),
    (re.compile(r"(\d+)\s*(?:שבועות|שבוע)"), 7, None),
    (re.compile(r"אתמול"), 0, 1),
    (re.compile(r"היום"), 0, 0),
]


@dataclass(frozen=True)
class PostingDate:
    text: str
    days: int


def parse_posting_date(text: str | None) -> PostingDate | None:
    if not text:
        return None
    for pattern, per_unit, fixed in _ENGLISH + _HEBREW:
        m = pattern.search(text)
        if not m:
            continue
        days = fixed if fixed is not None else int(m.group(1)) * per_unit
        return PostingDate(text=m.group(0).strip(), days=days)
    return None


def posting_days(text: str | None) -> int:
    parsed = parse_posting_date(text)
    return parsed.days if parsed else UNKNOWN_DAYS


def days_since(moment: datetime, now: datetime | None = None) -> int:
    """Whole days elapsed since *moment*, rounded up."""
    now = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    seconds = abs((now - moment).total_seconds())
    return math.ceil(seconds / 86400)


def hebrew_age_text(days: int) -> str:
    if days == 0:
        return "היום"
    if days == 1:
        return "אתמול"
    return f"{days} ימים"


def parse_iso_datetime(value: str) -> datetime | None:
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return None
