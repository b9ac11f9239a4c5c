"""Exception types raised across the scraper."""
from __future__ import annotations


class ScraperError(Exception):
    """Base class for scraper failures."""


class UserNotFoundError(ScraperError):
    def __init__(self, user_id: str) -> None:
        super().__init__("User not found")
        self.user_id = user_id


class StorageError(ScraperError):
    """The job store or user directory could not be read or written."""


class ConfigError(ScraperError):
    """A configuration file is missing required structure."""
