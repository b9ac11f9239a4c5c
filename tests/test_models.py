"""Tests for listing normalization and result serialization."""
from jobscraper.agent import enrich_config
from jobscraper.errors import UserNotFoundError
from jobscraper.models import (
    DEFAULT_LOCATION,
    DrushimQuery,
    JobListing,
    ScrapeResult,
    SearchConfig,
    Source,
    UserPreferences,
)


def test_listing_fields_are_normalized():
    job = JobListing(
        title="  " + "T" * 250,
        company="Acme ",
        source="Drushim.il",
        location="   ",
        posting_days=-3,
        description="Line one\n\n  “quoted”   text",
    )
    assert len(job.title) == 200
    assert job.company == "Acme"
    assert job.source is Source.DRUSHIM
    assert job.location == DEFAULT_LOCATION
    assert job.posting_days == 0
    assert job.description == 'Line one "quoted" text'


def test_description_is_truncated():
    job = JobListing(title="A", company="B", source=Source.LINKEDIN, description="x" * 5000)
    assert len(job.description) == 1000


def test_natural_key_ignores_case_and_punctuation():
    a = JobListing(title="Sr. Data-Analyst", company="Wix.com", source=Source.LINKEDIN)
    b = JobListing(title="sr data analyst", company="WIX COM", source=Source.DRUSHIM)
    assert a.natural_key == b.natural_key == ("wixcom", "srdataanalyst")


def test_record_shape():
    job = JobListing(title="A", company="B", source=Source.LINKEDIN)
    record = job.to_record("dana")
    assert record["user"] == "dana"
    assert record["source"] == "LinkedIn"
    assert isinstance(record["scraped_at"], str)


def test_scrape_result_to_dict():
    assert ScrapeResult(success=True, job_count=3).to_dict() == {"success": True, "jobCount": 3}
    failed = ScrapeResult(success=False, error=str(UserNotFoundError("x")))
    assert failed.to_dict() == {"success": False, "jobCount": 0, "error": "User not found"}


def test_preferences_accept_camel_case():
    prefs = UserPreferences.from_dict({"jobTypes": ["contract"], "remoteWork": False, "experienceLevel": "mid"})
    assert prefs.job_types == ("contract",)
    assert prefs.remote_work is False
    assert prefs.experience_level == "mid"
    assert UserPreferences.from_dict(None) == UserPreferences()


def test_preferences_accept_scalar_values():
    prefs = UserPreferences.from_dict(
        {"keywords": "data analyst", "locations": "Haifa", "company_size": "startup", "remote_work": "false"}
    )
    assert prefs.keywords == ("data analyst",)
    assert prefs.locations == ("Haifa",)
    assert prefs.company_size == ("startup",)
    assert prefs.remote_work is False

    config = enrich_config(SearchConfig(), prefs)
    assert config.linkedin == ("data analyst Haifa",)
    assert config.drushim == (DrushimQuery("data analyst", "0-5"),)


def test_preferences_remote_flag_strings():
    assert UserPreferences.from_dict({"remote_work": "yes"}).remote_work is True
    assert UserPreferences.from_dict({"remoteWork": "Off"}).remote_work is False
    assert UserPreferences.from_dict({"remote_work": "maybe"}).remote_work is None
