"""
Run the batch scrape every day at DAILY_RUN_HOUR (Israel time).

Usage:
  - Cron: 0 9 * * * TZ=Asia/Jerusalem cd /path/to/project && .venv/bin/python -m jobscraper.run_daily --once
  - Or keep this module running in the background: python -m jobscraper.run_daily
"""
from __future__ import annotations

import sys
import time
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from jobscraper.agent import JobScraper
from jobscraper.config import ensure_dirs, get_int
from jobscraper.credentials import CredentialVault
from jobscraper.log import get_logger
from jobscraper.models import BatchResult
from jobscraper.storage import JobStore, UserDirectory

log = get_logger(__name__)

IL_TZ = ZoneInfo("Asia/Jerusalem")
TARGET_HOUR = get_int("DAILY_RUN_HOUR", 9)
TARGET_MINUTE = 0


def run_once() -> BatchResult:
    ensure_dirs()
    scraper = JobScraper(UserDirectory(), JobStore(), CredentialVault())
    return scraper.scrape_all_users()


def next_run(now: datetime | None = None) -> datetime:
    now = now or datetime.now(IL_TZ)
    target = now.replace(hour=TARGET_HOUR, minute=TARGET_MINUTE, second=0, microsecond=0)
    if now >= target:
        target = target + timedelta(days=1)
    return target


def main() -> None:
    log.info("Scheduler: run daily at %d:%02d Israel time", TARGET_HOUR, TARGET_MINUTE)
    while True:
        target = next_run()
        wait_secs = (target - datetime.now(IL_TZ)).total_seconds()
        log.info("Next run at %s (in %.1f hours)", target, wait_secs / 3600)
        time.sleep(max(wait_secs, 0))
        log.info("Running batch scrape...")
        batch = run_once()
        log.info("Done — %d new job(s) across %d user(s)", batch.total_jobs, batch.user_count)


if __name__ == "__main__":
    if "--once" in sys.argv:
        result = run_once()
        sys.exit(0 if result.error is None else 1)
    main()
