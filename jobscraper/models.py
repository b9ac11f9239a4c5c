"""Data models for scraped listings, search input and run results."""
from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

UNKNOWN_DAYS = 999
DEFAULT_LOCATION = "Israel"

MAX_TITLE_LEN = 200
MAX_COMPANY_LEN = 100
MAX_LOCATION_LEN = 100
MAX_DESCRIPTION_LEN = 1000

_KEY_STRIP = re.compile(r"[\W_]+")
_WHITESPACE = re.compile(r"\s+")
_CURLY_QUOTES = re.compile(r"[“”„‟]")


class Source(str, Enum):
    LINKEDIN = "LinkedIn"
    DRUSHIM = "Drushim.il"


class LoginStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    INVALID = "invalid"
    LOCKED = "locked"


def normalize_key_part(value: str) -> str:
    """Lower-case and drop everything that is not a letter or digit (any script)."""
    return _KEY_STRIP.sub("", (value or "").lower())


def clean_description(text: str, limit: int = MAX_DESCRIPTION_LEN) -> str:
    if not isinstance(text, str):
        return ""
    text = _WHITESPACE.sub(" ", text)
    text = _CURLY_QUOTES.sub('"', text)
    return text.strip()[:limit]


@dataclass
class JobListing:
    title: str
    company: str
    source: Source
    url: str = ""
    location: str = DEFAULT_LOCATION
    posting_date_text: str = "Unknown"
    posting_days: int = UNKNOWN_DAYS
    description: str = ""
    search_keyword: str = ""
    scraped_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    linkedin_enhanced: bool | None = None
    match_score: int | None = None

    def __post_init__(self) -> None:
        self.title = (self.title or "").strip()[:MAX_TITLE_LEN]
        self.company = (self.company or "").strip()[:MAX_COMPANY_LEN]
        self.location = ((self.location or "").strip() or DEFAULT_LOCATION)[:MAX_LOCATION_LEN]
        self.posting_date_text = (self.posting_date_text or "Unknown").strip()
        self.posting_days = max(int(self.posting_days), 0)
        self.description = clean_description(self.description)
        self.source = Source(self.source)

    @property
    def natural_key(self) -> tuple[str, str]:
        return normalize_key_part(self.company), normalize_key_part(self.title)

    def to_record(self, user_id: str) -> dict[str, Any]:
        record = asdict(self)
        record["source"] = self.source.value
        record["scraped_at"] = self.scraped_at.isoformat()
        record["user"] = user_id
        return record


@dataclass(frozen=True)
class DrushimQuery:
    position: str
    experience: str = "0-5"

    @property
    def label(self) -> str:
        return f"{self.position} ({self.experience} years)"


@dataclass(frozen=True)
class SearchConfig:
    linkedin: tuple[str, ...] = ()
    drushim: tuple[DrushimQuery, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "SearchConfig":
        if not isinstance(data, dict):
            raise ValueError("Invalid search configuration")
        linkedin = data.get("linkedin")
        drushim = data.get("drushim")
        if not isinstance(linkedin, list) or not isinstance(drushim, list):
            raise ValueError("Invalid search configuration")

        queries: list[DrushimQuery] = []
        for item in drushim:
            if not isinstance(item, dict) or not item.get("position"):
                raise ValueError("Invalid search configuration")
            queries.append(
                DrushimQuery(
                    position=str(item["position"]).strip(),
                    experience=str(item.get("experience") or "0-5").strip(),
                )
            )
        keywords = tuple(str(k).strip() for k in linkedin if str(k).strip())
        return cls(linkedin=keywords, drushim=tuple(queries))

    def to_dict(self) -> dict[str, Any]:
        return {
            "linkedin": list(self.linkedin),
            "drushim": [
                {"position": q.position, "experience": q.experience}
                for q in self.drushim
            ],
        }


DEFAULT_SEARCH_CONFIG = SearchConfig(
    linkedin=(
        "solution engineer Israel",
        "technical consultant Israel",
        "product manager Israel",
    ),
    drushim=(
        DrushimQuery("Product Manager", "0-2"),
        DrushimQuery("Solution Engineer", "0-2"),
        DrushimQuery("Technical Consultant", "0-2"),
    ),
)


_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0"}


def _as_tuple(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


def _as_bool(value: Any) -> bool | None:
    """YAML or JSON flag; unrecognised strings count as unset."""
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        return None
    return bool(value)


@dataclass(frozen=True)
class UserPreferences:
    keywords: tuple[str, ...] = ()
    locations: tuple[str, ...] = ()
    experience_level: str | None = None
    job_types: tuple[str, ...] = ()
    remote_work: bool | None = None
    company_size: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "UserPreferences":
        data = data or {}
        remote = data.get("remote_work", data.get("remoteWork"))
        return cls(
            keywords=_as_tuple(data.get("keywords")),
            locations=_as_tuple(data.get("locations")),
            experience_level=data.get("experience_level") or data.get("experienceLevel"),
            job_types=_as_tuple(data.get("job_types") or data.get("jobTypes")),
            remote_work=_as_bool(remote),
            company_size=_as_tuple(data.get("company_size") or data.get("companySize")),
        )


@dataclass(frozen=True)
class User:
    id: str
    user_name: str
    email: str
    preferences: UserPreferences | None = None


@dataclass(frozen=True)
class Credentials:
    email: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class Session:
    session_id: str
    user_id: str
    cookie_header: str = field(repr=False)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class FetchResult:
    url: str
    status: int | None = None
    text: str | None = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.text is not None


@dataclass
class ScrapeResult:
    success: bool
    job_count: int = 0
    error: str | None = None
    used_fallback: bool = False

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"success": self.success, "jobCount": self.job_count}
        if self.error:
            out["error"] = self.error
        if self.used_fallback:
            out["usedFallback"] = True
        return out


@dataclass
class BatchResult:
    user_count: int = 0
    successful_users: int = 0
    failed_users: int = 0
    total_jobs: int = 0
    duration_ms: int = 0
    summary: list[dict[str, Any]] = field(default_factory=list)
    error: str | None = None
