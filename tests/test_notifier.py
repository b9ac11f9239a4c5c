"""Tests for the new-jobs e-mail report."""
from jobscraper.models import Source
from jobscraper.notifier import _md_to_html, build_jobs_report, notify_new_jobs, send_report_email


def test_report_lists_jobs(make_job):
    jobs = [
        make_job("Product Manager", "Acme", Source.LINKEDIN, url="https://www.linkedin.com/jobs/view/1",
                 posting_date_text="2 days ago", posting_days=2, match_score=85),
        make_job("QA Engineer", "Beta", Source.DRUSHIM),
    ]
    report = build_jobs_report("Dana", jobs)

    assert report.startswith("# New jobs for Dana")
    assert "**2** new job(s) found" in report
    assert "| 1 | Product Manager | Acme | Israel | 2 days ago | LinkedIn | 85 | [Linkedin](https://www.linkedin.com/jobs/view/1) |" in report
    assert "| 2 | QA Engineer | Beta | Israel | unknown | Drushim.il |  | — |" in report


def test_html_rendering_escapes_text():
    html = _md_to_html("# Title\n\n| A | B |\n|---|---|\n| <b>x</b> | [go](https://x.io) |\n\nbye")
    assert "<h1" in html
    assert "<th" in html and "<td" in html
    assert "&lt;b&gt;x&lt;/b&gt;" in html
    assert '<a href="https://x.io"' in html
    assert html.count("<table") == 1


def test_pipes_in_fields_keep_the_table_shape(make_job):
    job = make_job("QA | Automation", "Beta | Labs", Source.DRUSHIM, location="Tel Aviv | Remote")
    report = build_jobs_report("Dana", [job])

    [row] = [line for line in report.split("\n") if line.startswith("| 1 |")]
    assert row.count("|") == 9
    assert "QA / Automation" in row
    assert "Beta / Labs" in row

    html = _md_to_html(report)
    assert html.count("<th") == 8
    assert html.count("<td") == 8


def test_send_without_smtp_config(monkeypatch):
    for key in ("SMTP_HOST", "SMTP_USER", "SMTP_PASSWORD"):
        monkeypatch.delenv(key, raising=False)
    ok, message = send_report_email("body", "subject", "dana@example.com")
    assert not ok
    assert "SMTP not configured" in message


def test_nothing_to_notify():
    assert notify_new_jobs("dana@example.com", "Dana", []) == (False, "No jobs to report")


def test_send_builds_multipart_message(monkeypatch):
    from jobscraper import notifier

    monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
    monkeypatch.setenv("SMTP_USER", "bot@example.com")
    monkeypatch.setenv("SMTP_PASSWORD", "pw")
    monkeypatch.delenv("FROM_EMAIL", raising=False)
    sent = []
    monkeypatch.setattr(notifier, "_deliver", lambda smtp, to, msg: sent.append((smtp, to, msg)))

    ok, message = send_report_email("# Hi\n\n**1** job", "1 new job", "dana@example.com")

    assert (ok, message) == (True, "Email sent")
    [(smtp, to, msg)] = sent
    assert smtp.port == 587
    assert smtp.from_addr == "bot@example.com"
    assert msg["To"] == "dana@example.com"
    assert [part.get_content_type() for part in msg.get_payload()] == ["text/plain", "text/html"]
