"""Per-run LinkedIn sessions.

Authentication does not drive a real browser login: well-formed stored
credentials are exchanged for an opaque session id and cookie header that
live only for the current run.
"""
from __future__ import annotations

import secrets
import time

from jobscraper.credentials import validate_credentials
from jobscraper.log import get_logger
from jobscraper.models import LoginStatus, Session

log = get_logger(__name__)


class SessionStore:
    """Sessions for one scrape run, keyed by session id; cleared on close."""

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def __enter__(self) -> "SessionStore":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self._sessions)

    def add(self, session: Session) -> None:
        self._sessions[session.session_id] = session

    def close(self) -> None:
        if self._sessions:
            log.debug("Discarding %d LinkedIn session(s)", len(self._sessions))
        self._sessions.clear()


def _cookie_header() -> str:
    return f'li_at={secrets.token_hex(24)}; JSESSIONID="ajax:{secrets.token_hex(8)}"'


def authenticate(user_id: str, credentials, sessions: SessionStore) -> Session | None:
    """Open a session from stored credentials; reports the login status back
    through *credentials* (any object with ``get_credentials`` and
    ``update_login_status``, e.g. ``CredentialVault``)."""
    creds = credentials.get_credentials(user_id)
    if creds is None:
        log.warning("No LinkedIn credentials available for user %s", user_id)
        return None

    problem = validate_credentials(creds.email, creds.password)
    if problem:
        log.warning("LinkedIn credentials rejected for user %s: %s", user_id, problem)
        credentials.update_login_status(user_id, LoginStatus.INVALID)
        return None

    session_id = f"session_{user_id}_{int(time.time() * 1000)}"
    session = Session(session_id=session_id, user_id=user_id, cookie_header=_cookie_header())
    sessions.add(session)
    credentials.update_login_status(user_id, LoginStatus.ACTIVE)
    log.info("LinkedIn session opened for user %s", user_id)
    return session
