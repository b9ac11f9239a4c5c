"""Tests for preference filtering and listing scores."""
from jobscraper.models import Source, UserPreferences
from jobscraper.scorer import (
    filter_and_score,
    is_remote,
    keyword_match_score,
    matches_preferences,
    score_listing,
)


def test_score_components(make_job):
    assert score_listing(make_job(source=Source.DRUSHIM)) == 50
    assert score_listing(make_job(source=Source.DRUSHIM, posting_days=5)) == 60
    assert score_listing(make_job(source=Source.LINKEDIN, posting_days=0)) == 85
    assert score_listing(make_job(source=Source.DRUSHIM, posting_days=0, description="x" * 600)) == 80


def test_fresher_never_scores_lower(make_job):
    scores = [
        score_listing(make_job(source=Source.LINKEDIN, posting_days=d))
        for d in (0, 1, 2, 7, 8, 30)
    ]
    assert scores == sorted(scores, reverse=True)


def test_enhanced_listing_gets_keyword_bonus(make_job):
    job = make_job(
        "Product Manager", "Acme", Source.LINKEDIN,
        search_keyword="product manager", linkedin_enhanced=True,
    )
    plain = make_job("Product Manager", "Acme", Source.LINKEDIN, search_keyword="product manager")
    assert score_listing(job) == 100
    assert score_listing(plain) == 65


def test_keyword_match_score():
    assert keyword_match_score("Data Analyst", "", "product manager") == 50
    assert keyword_match_score("Product Owner", "We need a product manager", "product manager") == 75


def test_remote_detection(make_job):
    assert is_remote(make_job(location="Remote"))
    assert is_remote(make_job(description="עבודה מהבית"))
    assert not is_remote(make_job(location="Tel Aviv"))


def test_no_preferences_keep_everything(make_job):
    assert matches_preferences(make_job(), None)
    assert matches_preferences(make_job(), UserPreferences())


def test_filter_by_remote_and_job_type(make_job):
    remote_full = make_job("Dev", "A", location="Remote", description="Full time role")
    office_full = make_job("Dev", "B", location="Haifa", description="full-time")
    remote_part = make_job("Dev", "C", location="Remote", description="part time")

    prefs = UserPreferences(remote_work=True, job_types=("full-time",))
    kept = filter_and_score([remote_full, office_full, remote_part], prefs)

    assert [j.company for j in kept] == ["A"]


def test_filter_and_score_sets_score_without_mutating(make_job):
    job = make_job(source=Source.LINKEDIN, posting_days=0)
    [scored] = filter_and_score([job])
    assert scored.match_score == 85
    assert job.match_score is None
