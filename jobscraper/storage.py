"""Persist scraped jobs in a CSV table (with file locking) and read users from YAML."""
from __future__ import annotations

import csv
import fcntl
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from jobscraper.config import JOBS_CSV, USERS_PATH, read_yaml
from jobscraper.errors import ConfigError, StorageError
from jobscraper.log import get_logger
from jobscraper.models import JobListing, User, UserPreferences, normalize_key_part

log = get_logger(__name__)

HEADERS: list[str] = [
    "id", "user", "title", "company", "location", "posting_date_text",
    "posting_days", "source", "url", "description", "search_keyword",
    "scraped_at", "linkedin_enhanced", "match_score", "created_at",
]


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        op = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(f.fileno(), op)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


class JobStore:
    def __init__(self, path: Path | None = None) -> None:
        self.path = path or JOBS_CSV

    def ensure(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                with open(self.path, "w", newline="", encoding="utf-8") as f:
                    _lock(f)
                    csv.writer(f).writerow(HEADERS)
                    _unlock(f)
                log.info("Created job store → %s", self.path.name)
        except OSError as exc:
            raise StorageError(f"Job store unavailable: {exc}") from exc

    def all_jobs(self) -> list[dict[str, str]]:
        self.ensure()
        try:
            with open(self.path, "r", newline="", encoding="utf-8") as f:
                _lock(f, exclusive=False)
                rows = list(csv.DictReader(f))
                _unlock(f)
        except (OSError, csv.Error) as exc:
            raise StorageError(f"Job store unreadable: {exc}") from exc
        return rows

    def find_job(self, user_id: str, title: str, company: str) -> dict[str, str] | None:
        key = (normalize_key_part(company), normalize_key_part(title))
        for row in self.all_jobs():
            if row.get("user") != user_id:
                continue
            if (normalize_key_part(row.get("company", "")), normalize_key_part(row.get("title", ""))) == key:
                return row
        return None

    def insert_job(self, user_id: str, listing: JobListing) -> dict[str, Any]:
        self.ensure()
        row = listing.to_record(user_id)
        row["id"] = uuid.uuid4().hex
        row["created_at"] = datetime.now(timezone.utc).isoformat()
        row = {k: ("" if row.get(k) is None else row[k]) for k in HEADERS}
        try:
            with open(self.path, "a", newline="", encoding="utf-8") as f:
                _lock(f)
                csv.DictWriter(f, fieldnames=HEADERS).writerow(row)
                _unlock(f)
        except OSError as exc:
            raise StorageError(f"Could not write job: {exc}") from exc
        log.debug("Stored: %s @ %s for user %s", listing.title, listing.company, user_id)
        return row

    def jobs_for_user(self, user_id: str) -> list[dict[str, str]]:
        return [r for r in self.all_jobs() if r.get("user") == user_id]


class UserDirectory:
    """Users and their search preferences, read from ``config/users.yaml``.

    File shape::

        users:
          - id: dana
            user_name: Dana
            email: dana@example.com
            preferences: {keywords: [product manager], remote_work: false}
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or USERS_PATH

    def _load(self) -> list[User]:
        if not self.path.exists():
            raise StorageError(f"User directory not found: {self.path}")
        try:
            data = read_yaml(self.path) or {}
        except (OSError, ConfigError) as exc:
            raise StorageError(str(exc)) from exc

        users: list[User] = []
        for entry in data.get("users", []):
            if not entry.get("id") or not entry.get("email"):
                log.warning("Skipping user entry without id/email: %r", entry.get("id"))
                continue
            prefs = entry.get("preferences")
            users.append(
                User(
                    id=str(entry["id"]),
                    user_name=entry.get("user_name") or str(entry["id"]),
                    email=entry["email"],
                    preferences=UserPreferences.from_dict(prefs) if prefs else None,
                )
            )
        return users

    def list_users(self) -> list[User]:
        return self._load()

    def get_user(self, user_id: str) -> User | None:
        return next((u for u in self._load() if u.id == user_id), None)
