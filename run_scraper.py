#!/usr/bin/env python3
"""Entry point: scrape jobs for one user or for every user in the directory.

Usage:
  python run_scraper.py --user dana            # one user, config/search.yaml
  python run_scraper.py --user dana --config my_search.yaml
  python run_scraper.py --all                  # every user in config/users.yaml
  python run_scraper.py --jobs dana            # jobs already stored for a user
"""
from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

from jobscraper.log import get_logger
from jobscraper.config import USERS_PATH, ensure_dirs, load_search_config
from jobscraper.errors import ConfigError, StorageError

log = get_logger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Scrape LinkedIn and Drushim for new jobs")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--user", help="user id from the user directory")
    target.add_argument("--all", action="store_true", help="scrape for every user")
    target.add_argument("--jobs", metavar="USER", help="print the jobs already stored for a user")
    parser.add_argument("--config", type=Path, help="search config YAML (default: config/search.yaml)")
    return parser.parse_args(argv)


def _check_setup() -> bool:
    """Return True if the user directory still has to be created."""
    if not USERS_PATH.exists():
        print()
        print(f"  No user directory found at {USERS_PATH}.")
        print("  Copy config/users.example.yaml to config/users.yaml and edit it.")
        print()
        return True
    return False


def _print_stored_jobs(user_id: str) -> int:
    from jobscraper.storage import JobStore

    try:
        rows = JobStore().jobs_for_user(user_id)
    except StorageError as exc:
        log.error("%s", exc)
        return 1
    print(json.dumps(rows, indent=2, ensure_ascii=False))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.jobs:
        return _print_stored_jobs(args.jobs)
    if _check_setup():
        return 1

    ensure_dirs()

    from jobscraper.agent import JobScraper
    from jobscraper.credentials import CredentialVault
    from jobscraper.storage import JobStore, UserDirectory

    scraper = JobScraper(UserDirectory(), JobStore(), CredentialVault())

    if args.all:
        batch = scraper.scrape_all_users()
        print(json.dumps(asdict(batch), indent=2, ensure_ascii=False))
        return 0 if batch.error is None and batch.failed_users == 0 else 1

    try:
        config = load_search_config(args.config)
    except ConfigError as exc:
        log.error("%s", exc)
        return 1
    result = scraper.scrape_jobs_for_user(args.user, config)
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
