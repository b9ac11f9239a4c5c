"""E-mail users about newly found jobs (markdown body, HTML alternative)."""
from __future__ import annotations

import re
import smtplib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from urllib.parse import urlparse

from jobscraper.config import get_env, get_int
from jobscraper.log import get_logger
from jobscraper.models import JobListing, UNKNOWN_DAYS
from jobscraper.retry import retry

log = get_logger(__name__)

MAX_REPORTED = 25


def _short_url_label(url: str) -> str:
    host = (urlparse(url).hostname or "").replace("www.", "")
    parts = host.split(".")
    return parts[0].capitalize() if parts and parts[0] else "Link"


def _age(job: JobListing) -> str:
    if job.posting_days == UNKNOWN_DAYS:
        return "unknown"
    return job.posting_date_text


def _cell(text: str, limit: int | None = None) -> str:
    """One table cell: pipes would open a new column, newlines a new row."""
    text = " ".join(text.replace("|", "/").split())
    if limit is not None and len(text) > limit:
        return text[:limit] + "…"
    return text


def build_jobs_report(user_name: str, jobs: list[JobListing]) -> str:
    date = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    lines: list[str] = [f"# New jobs for {user_name} — {date}", ""]
    lines.append(f"**{len(jobs)}** new job(s) found")
    lines.append("")

    shown = jobs[:MAX_REPORTED]
    lines.append("| # | Role | Company | Location | Posted | Source | Score | Link |")
    lines.append("|--:|------|---------|----------|--------|--------|------:|------|")
    for i, job in enumerate(shown, 1):
        score = "" if job.match_score is None else str(job.match_score)
        url = job.url.replace("|", "%7C")
        link = f"[{_short_url_label(url)}]({url})" if url else "—"
        lines.append(
            f"| {i} | {_cell(job.title, 40)} | {_cell(job.company, 22)} | {_cell(job.location)[:18]} "
            f"| {_cell(_age(job))} "
            f"| {job.source.value} | {score} | {link} |"
        )
    lines.append("")
    if len(jobs) > len(shown):
        lines.append(f"_…and {len(jobs) - len(shown)} more._")
        lines.append("")
    return "\n".join(lines)


def _md_to_html(md: str) -> str:
    """Just enough markdown for the job report: headings, one table, paragraphs."""
    html_parts: list[str] = []
    in_table = False
    for line in md.split("\n"):
        stripped = line.strip()

        if stripped.startswith("|") and stripped.endswith("|"):
            cells = [c.strip() for c in stripped.split("|")[1:-1]]
            if all(set(c) <= {"-", " ", ":"} for c in cells):
                continue
            tag = "td" if in_table else "th"
            if not in_table:
                html_parts.append('<table style="border-collapse:collapse;width:100%;font-size:13px;margin:8px 0">')
                in_table = True
            html_parts.append("<tr>" + "".join(
                f'<{tag} style="border:1px solid #ddd;padding:5px 8px;text-align:left">{_inline(c)}</{tag}>'
                for c in cells
            ) + "</tr>")
            continue

        if in_table:
            html_parts.append("</table>")
            in_table = False
        if not stripped:
            continue
        if stripped.startswith("# "):
            html_parts.append(f'<h1 style="margin:0 0 8px;color:#2c3e50">{_inline(stripped[2:])}</h1>')
            continue
        html_parts.append(f"<p style='margin:4px 0'>{_inline(stripped)}</p>")

    if in_table:
        html_parts.append("</table>")
    return "\n".join(html_parts)


def _inline(text: str) -> str:
    """Bold, italic and links; everything else is escaped."""
    text = escape(text, quote=False)
    text = re.sub(r"\*\*(.+?)\*\*", r"<strong>\1</strong>", text)
    text = re.sub(r"(?<!\w)_(.+?)_(?!\w)", r"<em>\1</em>", text)
    text = re.sub(r"\[([^\]]+)\]\(([^)]+)\)", r'<a href="\2" style="color:#1a73e8">\1</a>', text)
    return text


HTML_WRAPPER = """<div style="font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,sans-serif;max-width:900px;margin:0 auto;padding:16px;color:#333">
{content}
<hr style="border:none;border-top:1px solid #e0e0e0;margin:20px 0 8px">
<p style="font-size:11px;color:#999">Sent by the job scraper</p>
</div>"""


@dataclass(frozen=True)
class SmtpSettings:
    host: str
    port: int
    user: str
    password: str = field(repr=False)
    from_addr: str

    @property
    def complete(self) -> bool:
        return bool(self.host and self.user and self.password)


def smtp_settings() -> SmtpSettings:
    user = get_env("SMTP_USER")
    return SmtpSettings(
        host=get_env("SMTP_HOST"),
        port=get_int("SMTP_PORT", 587),
        user=user,
        password=get_env("SMTP_PASSWORD"),
        from_addr=get_env("FROM_EMAIL", user) or user,
    )


def build_message(body: str, subject: str, from_addr: str, to_addr: str) -> MIMEMultipart:
    """Plain-text markdown body with an HTML alternative part."""
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = from_addr
    msg["To"] = to_addr
    msg.attach(MIMEText(body, "plain", "utf-8"))
    msg.attach(MIMEText(HTML_WRAPPER.format(content=_md_to_html(body)), "html", "utf-8"))
    return msg


@retry(max_attempts=3, base_delay=3.0, retryable=(smtplib.SMTPException, OSError))
def _deliver(smtp: SmtpSettings, to_addr: str, msg: MIMEMultipart) -> None:
    with smtplib.SMTP(smtp.host, smtp.port, timeout=30) as server:
        server.starttls()
        server.login(smtp.user, smtp.password)
        server.sendmail(smtp.from_addr, [to_addr], msg.as_string())


def send_report_email(body: str, subject: str, to_email: str) -> tuple[bool, str]:
    smtp = smtp_settings()
    if not smtp.complete or not to_email:
        return False, "SMTP not configured (set SMTP_HOST, SMTP_USER, SMTP_PASSWORD in .env)"

    try:
        _deliver(smtp, to_email, build_message(body, subject, smtp.from_addr, to_email))
    except (smtplib.SMTPException, OSError) as exc:
        log.error("Email to %s failed: %s", to_email, exc)
        return False, str(exc)[:150]
    log.info("Email sent to %s", to_email)
    return True, "Email sent"


def notify_new_jobs(user_email: str, user_name: str, jobs: list[JobListing]) -> tuple[bool, str]:
    if not jobs:
        return False, "No jobs to report"
    subject = f"{len(jobs)} new job(s) found – {datetime.now(timezone.utc).strftime('%Y-%m-%d')}"
    ok, message = send_report_email(build_jobs_report(user_name, jobs), subject, user_email)
    if not ok:
        log.warning("Job notification for %s not sent: %s", user_name, message)
    return ok, message
