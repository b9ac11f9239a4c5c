import os

# Keep test runs from writing logs/ next to the package
os.environ.setdefault("SCRAPER_LOG_FILE", "false")

import pytest

from jobscraper.models import JobListing, Source


@pytest.fixture
def make_job():
    def _make(title="Product Manager", company="Acme", source=Source.DRUSHIM, **kwargs):
        return JobListing(title=title, company=company, source=source, **kwargs)
    return _make


@pytest.fixture
def sleeps():
    """Stand-in for time.sleep that records the requested delays."""
    return []
