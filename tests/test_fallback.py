"""Tests for the simplified-keyword fallback search."""
from jobscraper.fallback import fallback_queries, run_fallback, simplify_keyword
from jobscraper.models import DrushimQuery, JobListing, SearchConfig, Source


class CountingExtractor:
    """Returns *per_call* fresh listings for every query it is asked to run."""

    def __init__(self, per_call):
        self.per_call = per_call
        self.queries = []

    def run(self, queries, deadline=None):
        jobs = []
        for query in queries:
            self.queries.append(query)
            n = len(self.queries)
            jobs.extend(
                JobListing(title=f"{query.position} {n}-{i}", company="Acme", source=Source.DRUSHIM)
                for i in range(self.per_call)
            )
        return jobs


def test_simplify_keyword():
    assert simplify_keyword("product manager Israel") == ["product manager", "manager"]
    assert simplify_keyword("senior solution engineer Tel Aviv") == ["solution engineer", "engineer"]
    assert simplify_keyword("engineer Israel") == ["engineer"]
    assert simplify_keyword("Israel") == []


def test_fallback_queries_dedupe_variants():
    config = SearchConfig(linkedin=("product manager Israel", "project manager Israel"))
    assert fallback_queries(config) == [
        DrushimQuery("product manager", "0-5"),
        DrushimQuery("manager", "0-5"),
        DrushimQuery("project manager", "0-5"),
    ]


def test_fallback_only_uses_first_three_keywords():
    config = SearchConfig(linkedin=("data analyst", "qa engineer", "ux designer", "devops engineer"))
    positions = [q.position for q in fallback_queries(config)]
    assert "devops engineer" not in positions


def test_run_fallback_stops_at_limit():
    extractor = CountingExtractor(per_call=15)
    config = SearchConfig(linkedin=("product manager Israel", "data analyst Israel"))

    jobs = run_fallback(config, extractor, limit=20)

    assert len(jobs) == 20
    assert len(extractor.queries) == 2


def test_run_fallback_without_usable_keywords():
    extractor = CountingExtractor(per_call=5)
    assert run_fallback(SearchConfig(linkedin=("Israel",)), extractor) == []
    assert extractor.queries == []
