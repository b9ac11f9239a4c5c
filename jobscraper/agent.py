"""
Job scraping orchestrator.

Runs per user: enrich config → Drushim → LinkedIn (authenticated or public)
→ dedupe → filter/score → store new jobs → notify; when nothing new turns
up, a simplified-keyword Drushim search goes through the same path.
"""
from __future__ import annotations

import time
from typing import Callable

from jobscraper.config import Settings, load_settings
from jobscraper.dedupe import dedupe, sort_by_date_and_source
from jobscraper.errors import ScraperError, UserNotFoundError
from jobscraper.fallback import run_fallback
from jobscraper.fetcher import Fetcher
from jobscraper.log import get_logger
from jobscraper.models import (
    DEFAULT_SEARCH_CONFIG,
    BatchResult,
    DrushimQuery,
    JobListing,
    ScrapeResult,
    SearchConfig,
    User,
    UserPreferences,
)
from jobscraper.notifier import notify_new_jobs
from jobscraper.pacing import Deadline
from jobscraper.scorer import filter_and_score
from jobscraper.session import SessionStore
from jobscraper.sources import DrushimExtractor, get_linkedin_extractor

log = get_logger(__name__)

DEFAULT_EXPERIENCE = "0-5"
DEFAULT_REGION = "Israel"

EXPERIENCE_RANGES: dict[str, str] = {
    "entry": "0-2",
    "associate": "1-3",
    "mid": "2-5",
    "senior": "5-10",
    "director": "8-20",
    "executive": "10-30",
}


def experience_range(level: str | None) -> str:
    return EXPERIENCE_RANGES.get((level or "").lower(), DEFAULT_EXPERIENCE)


def enrich_config(config: SearchConfig, prefs: UserPreferences | None) -> SearchConfig:
    """A copy of *config* extended with the user's preferred keywords."""
    if prefs is None or not prefs.keywords:
        return config
    region = prefs.locations[0] if prefs.locations else DEFAULT_REGION
    experience = experience_range(prefs.experience_level)

    linkedin = list(config.linkedin)
    drushim = list(config.drushim)
    known_queries = {q.lower() for q in linkedin}
    known_positions = {q.position.lower() for q in drushim}
    for keyword in prefs.keywords:
        keyword = keyword.strip()
        if not keyword:
            continue
        query = f"{keyword} {region}"
        if query.lower() not in known_queries:
            linkedin.append(query)
            known_queries.add(query.lower())
        if keyword.lower() not in known_positions:
            drushim.append(DrushimQuery(keyword, experience))
            known_positions.add(keyword.lower())
    return SearchConfig(linkedin=tuple(linkedin), drushim=tuple(drushim))


def build_config_from_preferences(prefs: UserPreferences | None) -> SearchConfig:
    """Search config for scheduled runs: the user's keywords, else the default."""
    if prefs is None or not prefs.keywords:
        return DEFAULT_SEARCH_CONFIG
    keywords = [k.strip() for k in prefs.keywords if k.strip()]
    return SearchConfig(
        linkedin=tuple(f"{k} {DEFAULT_REGION}" for k in keywords),
        drushim=tuple(DrushimQuery(k, DEFAULT_EXPERIENCE) for k in keywords),
    )


class JobScraper:
    def __init__(
        self,
        users,
        store,
        credentials=None,
        *,
        notifier: Callable[[str, str, list[JobListing]], object] = notify_new_jobs,
        fetcher: Fetcher | None = None,
        settings: Settings | None = None,
        drushim_factory: Callable = DrushimExtractor,
        linkedin_factory: Callable = get_linkedin_extractor,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.users = users
        self.store = store
        self.credentials = credentials
        self.notifier = notifier
        self.settings = settings or load_settings()
        self.fetcher = fetcher or Fetcher(
            timeout=self.settings.request_timeout,
            max_retries=self.settings.max_retries,
            retry_delay=self.settings.retry_delay,
        )
        self.drushim_factory = drushim_factory
        self.linkedin_factory = linkedin_factory
        self._sleep = sleep

    def scrape_jobs_for_user(
        self,
        user_id: str,
        search_config: SearchConfig,
        deadline: Deadline | None = None,
    ) -> ScrapeResult:
        try:
            user = self.users.get_user(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            log.info("Starting job scraping for %s", user.user_name)

            config = enrich_config(search_config, user.preferences)
            candidates = self._extract(user, config, deadline)
            new_jobs = self._process(user, candidates)

            used_fallback = False
            if not new_jobs:
                log.info("No new jobs from primary search — running fallback")
                used_fallback = True
                fallback_jobs = run_fallback(
                    config,
                    self.drushim_factory(self.fetcher),
                    limit=self.settings.fallback_limit,
                    deadline=deadline,
                )
                new_jobs = self._process(user, fallback_jobs)

            log.info("Job scraping for %s complete — %d new job(s)", user.user_name, len(new_jobs))
            return ScrapeResult(success=True, job_count=len(new_jobs), used_fallback=used_fallback)

        except ScraperError as exc:
            log.error("Job scraping failed for user %s: %s", user_id, exc)
            return ScrapeResult(success=False, job_count=0, error=str(exc))
        except Exception as exc:
            log.exception("Unexpected error while scraping for user %s", user_id)
            return ScrapeResult(success=False, job_count=0, error=str(exc) or exc.__class__.__name__)

    def _extract(self, user: User, config: SearchConfig, deadline: Deadline | None) -> list[JobListing]:
        # Drushim first: dedupe keeps the first occurrence of a job
        jobs = self.drushim_factory(self.fetcher).run(config.drushim, deadline)
        with SessionStore() as sessions:
            linkedin = self.linkedin_factory(user.id, self.fetcher, self.credentials, sessions)
            jobs.extend(linkedin.run(config.linkedin, deadline))
        return jobs

    def _process(self, user: User, candidates: list[JobListing]) -> list[JobListing]:
        unique = dedupe(candidates)
        scored = sort_by_date_and_source(filter_and_score(unique, user.preferences))
        new_jobs = self._save_new(user.id, scored)
        self._notify(user, new_jobs)
        return new_jobs

    def _save_new(self, user_id: str, jobs: list[JobListing]) -> list[JobListing]:
        saved: list[JobListing] = []
        for job in jobs:
            if self.store.find_job(user_id, job.title, job.company):
                continue
            try:
                self.store.insert_job(user_id, job)
            except ScraperError as exc:
                log.error("Error saving %s at %s: %s", job.title, job.company, exc)
                continue
            saved.append(job)
        log.info("Saved %d new job(s) for user %s", len(saved), user_id)
        return saved

    def _notify(self, user: User, jobs: list[JobListing]) -> None:
        if not jobs:
            return
        try:
            self.notifier(user.email, user.user_name, jobs)
        except Exception as exc:
            log.error("Notification for %s failed: %s", user.user_name, str(exc)[:150])

    def scrape_all_users(
        self,
        user_ids: list[str] | None = None,
        *,
        user_delay: float | None = None,
        user_timeout: float | None = None,
    ) -> BatchResult:
        """Scrape for every user in turn, pausing between users."""
        started = time.monotonic()
        user_delay = self.settings.user_delay if user_delay is None else user_delay
        user_timeout = self.settings.user_timeout if user_timeout is None else user_timeout

        try:
            users = self.users.list_users()
        except ScraperError as exc:
            log.error("System job scraping failed: %s", exc)
            return BatchResult(error=str(exc))
        if user_ids is not None:
            wanted = set(user_ids)
            users = [u for u in users if u.id in wanted]

        batch = BatchResult(user_count=len(users))
        log.info("Scheduled scraping for %d user(s)", len(users))

        for i, user in enumerate(users):
            log.info("Processing user %s", user.user_name)
            try:
                result = self.scrape_jobs_for_user(
                    user.id,
                    build_config_from_preferences(user.preferences),
                    deadline=Deadline(user_timeout),
                )
            except Exception as exc:
                log.error("User scraping failed for %s: %s", user.user_name, exc)
                result = ScrapeResult(success=False, error=str(exc))

            batch.summary.append({
                "userId": user.id,
                "userName": user.user_name,
                "success": result.success,
                "jobCount": result.job_count,
                "error": result.error,
            })
            batch.total_jobs += result.job_count
            if result.success:
                batch.successful_users += 1
            else:
                batch.failed_users += 1

            if i < len(users) - 1:
                self._sleep(user_delay)

        batch.duration_ms = int((time.monotonic() - started) * 1000)
        log.info(
            "System job scraping completed — users=%d, ok=%d, failed=%d, new jobs=%d, %dms",
            batch.user_count, batch.successful_users, batch.failed_users,
            batch.total_jobs, batch.duration_ms,
        )
        return batch
