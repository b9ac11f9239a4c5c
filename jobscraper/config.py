"""Load search configuration, user directory paths and env settings."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from jobscraper.errors import ConfigError
from jobscraper.log import get_logger
from jobscraper.models import DEFAULT_SEARCH_CONFIG, SearchConfig

log = get_logger(__name__)

load_dotenv()

PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = Path(os.environ.get("SCRAPER_CONFIG_DIR", PROJECT_ROOT / "config"))
DATA_DIR: Path = Path(os.environ.get("SCRAPER_DATA_DIR", PROJECT_ROOT / "data"))
SEARCH_CONFIG_PATH: Path = CONFIG_DIR / "search.yaml"
USERS_PATH: Path = CONFIG_DIR / "users.yaml"
JOBS_CSV: Path = DATA_DIR / "jobs.csv"
VAULT_PATH: Path = DATA_DIR / "credentials.json"


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def get_int(key: str, default: int) -> int:
    raw = get_env(key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        log.warning("Ignoring non-integer %s=%r, using %d", key, raw, default)
        return default


def get_float(key: str, default: float) -> float:
    raw = get_env(key)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        log.warning("Ignoring non-numeric %s=%r, using %s", key, raw, default)
        return default


@dataclass(frozen=True)
class Settings:
    max_retries: int = 3
    retry_delay: float = 2.0
    request_timeout: float = 20.0
    user_delay: float = 2.0
    user_timeout: float | None = 600.0
    fallback_limit: int = 20


def load_settings() -> Settings:
    timeout = get_float("SCRAPER_USER_TIMEOUT", 600.0)
    return Settings(
        max_retries=max(get_int("SCRAPER_MAX_RETRIES", 3), 1),
        retry_delay=get_float("SCRAPER_RETRY_DELAY", 2.0),
        request_timeout=get_float("SCRAPER_TIMEOUT", 20.0),
        user_delay=get_float("SCRAPER_USER_DELAY", 2.0),
        user_timeout=timeout if timeout > 0 else None,
        fallback_limit=get_int("SCRAPER_FALLBACK_LIMIT", 20),
    )


def read_yaml(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc


def load_search_config(path: Path | None = None) -> SearchConfig:
    """Search config from YAML; the built-in default when the file is absent."""
    path = path or SEARCH_CONFIG_PATH
    if not path.exists():
        log.info("No search config at %s, using defaults", path)
        return DEFAULT_SEARCH_CONFIG
    data = read_yaml(path)
    try:
        return SearchConfig.from_dict(data)
    except ValueError as exc:
        raise ConfigError(f"{path}: {exc}") from exc


def ensure_dirs() -> None:
    for d in (CONFIG_DIR, DATA_DIR):
        d.mkdir(parents=True, exist_ok=True)
