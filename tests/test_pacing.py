"""Tests for request pacing and per-run deadlines."""
from jobscraper.models import JobListing, Source
from jobscraper.pacing import Deadline, RateLimiter
from jobscraper.sources.base import Extractor


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.now += seconds


def test_rate_limiter_waits_out_the_interval():
    clock = FakeClock()
    limiter = RateLimiter(2.0, clock=clock, sleep=clock.sleep)

    assert limiter.wait() == 0.0
    clock.now = 0.5
    assert limiter.wait() == 1.5
    assert clock.now == 2.0
    clock.now = 5.0
    assert limiter.wait() == 0.0


def test_deadline():
    clock = FakeClock(100.0)
    deadline = Deadline(10, clock=clock)
    assert deadline.remaining == 10
    assert not deadline.expired
    clock.now = 111.0
    assert deadline.expired
    assert deadline.remaining == 0.0


def test_unbounded_deadline():
    deadline = Deadline(None)
    assert deadline.remaining is None
    assert not deadline.expired


class ListExtractor(Extractor):
    source = Source.DRUSHIM

    def __init__(self, **kwargs):
        super().__init__(fetcher=None, limiter=RateLimiter(0), **kwargs)
        self.seen = []

    def extract(self, query):
        self.seen.append(query)
        if query == "bad":
            raise ValueError("broken page")
        return [JobListing(title=query, company="Acme", source=Source.DRUSHIM)]


def test_run_skips_failing_queries():
    extractor = ListExtractor()
    jobs = extractor.run(["a", "bad", "b"])
    assert [j.title for j in jobs] == ["a", "b"]
    assert extractor.seen == ["a", "bad", "b"]


def test_run_stops_when_deadline_expires():
    clock = FakeClock()
    deadline = Deadline(5, clock=clock)
    extractor = ListExtractor()

    clock.now = 6.0
    assert extractor.run(["a", "b"], deadline) == []
    assert extractor.seen == []
