"""
Tests for the HTTP fetcher: retry bound, backoff schedule and which
statuses are worth retrying.
"""
import random

import pytest
import requests

from jobscraper.fetcher import USER_AGENTS, Fetcher, build_headers
from jobscraper.retry import backoff_delay, is_retryable_status, retry


class FakeResponse:
    def __init__(self, status_code, text=""):
        self.status_code = status_code
        self.text = text


class FakeSession:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _fetcher(outcomes, sleeps, **kwargs):
    session = FakeSession(outcomes)
    fetcher = Fetcher(session=session, sleep=sleeps.append, retry_delay=2.0, **kwargs)
    return fetcher, session


def test_success_returns_body(sleeps):
    fetcher, session = _fetcher([FakeResponse(200, "<html>ok</html>")], sleeps)
    assert fetcher.fetch("https://example.com") == "<html>ok</html>"
    assert len(session.calls) == 1
    assert sleeps == []


def test_server_errors_give_up_after_max_retries(sleeps):
    fetcher, session = _fetcher([FakeResponse(500)] * 3, sleeps)
    page = fetcher.fetch_page("https://example.com")
    assert page.text is None
    assert page.status == 500
    assert page.attempts == 3
    assert len(session.calls) == 3
    # flat delay between server-error attempts, none after the last one
    assert sleeps == [2.0, 2.0]


def test_rate_limit_backs_off_linearly(sleeps):
    fetcher, session = _fetcher(
        [FakeResponse(429), FakeResponse(429), FakeResponse(200, "body")], sleeps
    )
    assert fetcher.fetch("https://example.com") == "body"
    assert len(session.calls) == 3
    assert sleeps == [2.0, 4.0]


def test_client_error_is_not_retried(sleeps):
    fetcher, session = _fetcher([FakeResponse(404)], sleeps)
    page = fetcher.fetch_page("https://example.com/missing")
    assert not page.ok
    assert page.status == 404
    assert len(session.calls) == 1
    assert sleeps == []


def test_transport_error_is_retried(sleeps):
    fetcher, session = _fetcher(
        [requests.ConnectionError("reset"), FakeResponse(200, "late")], sleeps
    )
    page = fetcher.fetch_page("https://example.com")
    assert page.text == "late"
    assert page.attempts == 2
    assert sleeps == [2.0]


def test_transport_errors_exhaust_retries(sleeps):
    fetcher, session = _fetcher([requests.Timeout("slow")] * 2, sleeps, max_retries=2)
    assert fetcher.fetch("https://example.com") is None
    assert len(session.calls) == 2
    assert sleeps == [2.0]


def test_per_call_retry_override(sleeps):
    fetcher, session = _fetcher([FakeResponse(503)], sleeps)
    assert fetcher.fetch("https://example.com", max_retries=1) is None
    assert len(session.calls) == 1


def test_request_carries_browser_headers(sleeps):
    fetcher, session = _fetcher([FakeResponse(200, "x")], sleeps, timeout=7)
    fetcher.fetch("https://example.com", headers={"Cookie": "li_at=abc"})
    sent = session.calls[0]
    assert sent["timeout"] == 7
    assert sent["headers"]["User-Agent"] in USER_AGENTS
    assert sent["headers"]["Cookie"] == "li_at=abc"
    assert "Accept-Language" in sent["headers"]


def test_build_headers_extra_overrides_base():
    headers = build_headers({"Accept-Language": "he"}, rng=random.Random(1))
    assert headers["Accept-Language"] == "he"
    assert headers["Connection"] == "keep-alive"


def test_backoff_delay():
    assert backoff_delay(1, 2.0) == 2.0
    assert backoff_delay(3, 2.0, 429) == 6.0
    assert backoff_delay(3, 2.0, 502) == 2.0


def test_retryable_statuses():
    assert is_retryable_status(429)
    assert is_retryable_status(500)
    assert is_retryable_status(503)
    assert not is_retryable_status(403)
    assert not is_retryable_status(404)


def test_retry_decorator_recovers(sleeps):
    calls = []

    @retry(max_attempts=3, base_delay=1.0, retryable=(OSError,), sleep=sleeps.append)
    def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise OSError("boom")
        return "done"

    assert flaky() == "done"
    assert sleeps == [1.0, 2.0]


def test_retry_decorator_reraises(sleeps):
    @retry(max_attempts=2, base_delay=1.0, retryable=(OSError,), sleep=sleeps.append)
    def broken():
        raise OSError("still down")

    with pytest.raises(OSError):
        broken()
    assert sleeps == [1.0]
