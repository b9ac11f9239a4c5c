"""Per-user LinkedIn credential vault (JSON file, values encrypted at rest).

Values are encrypted with a PBKDF2-HMAC-SHA256 derived key and an XOR
stream, keyed by a master password (``SCRAPER_VAULT_PASSWORD``). This
protects credentials from casual reading of the data directory.
"""
from __future__ import annotations

import argparse
import base64
import getpass
import hashlib
import json
import os
import re
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from jobscraper.config import VAULT_PATH, get_env
from jobscraper.log import get_logger
from jobscraper.models import Credentials, LoginStatus

log = get_logger(__name__)

_SALT_LEN = 16
_ITERATIONS = 200_000
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LEN = 6

_BLOCKED = {LoginStatus.INVALID.value, LoginStatus.LOCKED.value}
PROFILE_FIELDS = ("first_name", "last_name", "headline", "profile_picture", "location", "industry")


def _derive_key(password: str, salt: bytes, length: int = 32) -> bytes:
    return hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt, _ITERATIONS, dklen=length
    )


def _xor_bytes(data: bytes, key: bytes) -> bytes:
    kl = len(key)
    return bytes(d ^ key[i % kl] for i, d in enumerate(data))


def encrypt_value(value: str, password: str) -> str:
    salt = os.urandom(_SALT_LEN)
    key = _derive_key(password, salt, max(len(value.encode("utf-8")), 32))
    encrypted = _xor_bytes(value.encode("utf-8"), key)
    return base64.b64encode(salt + encrypted).decode("ascii")


def decrypt_value(token: str, password: str) -> str:
    payload = base64.b64decode(token)
    salt, encrypted = payload[:_SALT_LEN], payload[_SALT_LEN:]
    key = _derive_key(password, salt, max(len(encrypted), 32))
    return _xor_bytes(encrypted, key).decode("utf-8")


def validate_credentials(email: str, password: str) -> str | None:
    """Reason the pair is unusable, or ``None`` when it looks well-formed."""
    if not _EMAIL_RE.match(email or ""):
        return "Invalid email format"
    if len(password or "") < MIN_PASSWORD_LEN:
        return "Password too short"
    return None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class CredentialVault:
    def __init__(self, path: Path | None = None, master_password: str | None = None) -> None:
        self.path = path or VAULT_PATH
        self._master = master_password if master_password is not None else get_env("SCRAPER_VAULT_PASSWORD")

    def _load(self) -> dict[str, dict[str, Any]]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.warning("Credential vault %s unreadable, treating as empty: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            log.warning("Credential vault %s is not a JSON object, treating as empty", self.path)
            return {}
        return data

    def _save(self, data: dict[str, dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def store_credentials(self, user_id: str, credentials: Credentials) -> bool:
        if not self._master:
            log.error("SCRAPER_VAULT_PASSWORD not set — cannot store credentials")
            return False
        data = self._load()
        data[user_id] = {
            "is_connected": True,
            "email": encrypt_value(credentials.email, self._master),
            "password": encrypt_value(credentials.password, self._master),
            "connected_at": _now(),
            "login_status": LoginStatus.ACTIVE.value,
        }
        self._save(data)
        log.info("Stored LinkedIn credentials for user %s", user_id)
        return True

    def _usable_entry(self, user_id: str) -> dict[str, Any] | None:
        entry = self._load().get(user_id)
        if not entry or not entry.get("is_connected"):
            return None
        if not entry.get("email") or not entry.get("password"):
            return None
        if entry.get("login_status") in _BLOCKED:
            return None
        return entry

    def has_credentials(self, user_id: str) -> bool:
        return self._usable_entry(user_id) is not None

    def get_credentials(self, user_id: str) -> Credentials | None:
        entry = self._usable_entry(user_id)
        if entry is None:
            return None
        if not self._master:
            log.warning("SCRAPER_VAULT_PASSWORD not set — LinkedIn credentials unavailable")
            return None
        try:
            return Credentials(
                email=decrypt_value(entry["email"], self._master),
                password=decrypt_value(entry["password"], self._master),
            )
        except (ValueError, UnicodeDecodeError):
            log.warning("Failed to decrypt LinkedIn credentials for user %s — wrong password?", user_id)
            return None

    def update_login_status(
        self,
        user_id: str,
        status: LoginStatus | str,
        profile_data: dict[str, str] | None = None,
    ) -> bool:
        status = LoginStatus(status)
        data = self._load()
        entry = data.get(user_id)
        if entry is None:
            log.warning("No LinkedIn credentials on file for user %s", user_id)
            return False
        entry["login_status"] = status.value
        if status is LoginStatus.ACTIVE:
            entry["last_login_at"] = _now()
            if profile_data:
                entry["profile_data"] = {k: profile_data.get(k, "") for k in PROFILE_FIELDS}
        self._save(data)
        log.info("LinkedIn login status for user %s → %s", user_id, status.value)
        return True

    def remove_credentials(self, user_id: str) -> bool:
        data = self._load()
        if data.pop(user_id, None) is None:
            return False
        self._save(data)
        log.info("Removed LinkedIn credentials for user %s", user_id)
        return True

    def get_profile(self, user_id: str) -> dict[str, Any] | None:
        entry = self._load().get(user_id)
        if not entry or not entry.get("is_connected") or not entry.get("profile_data"):
            return None
        return {
            **entry["profile_data"],
            "connected_at": entry.get("connected_at"),
            "login_status": entry.get("login_status", LoginStatus.ACTIVE.value),
        }


def main(argv: list[str] | None = None) -> int:
    """``python -m jobscraper.credentials store|remove|status USER_ID``"""
    parser = argparse.ArgumentParser(description="Manage stored LinkedIn credentials")
    parser.add_argument("action", choices=("store", "remove", "status"))
    parser.add_argument("user_id")
    args = parser.parse_args(argv)

    vault = CredentialVault()
    if args.action == "remove":
        return 0 if vault.remove_credentials(args.user_id) else 1
    if args.action == "status":
        status = {
            "user": args.user_id,
            "connected": vault.has_credentials(args.user_id),
            "profile": vault.get_profile(args.user_id),
        }
        print(json.dumps(status, indent=2, ensure_ascii=False))
        return 0

    email = input("LinkedIn email: ").strip()
    password = getpass.getpass("LinkedIn password: ")
    problem = validate_credentials(email, password)
    if problem:
        print(problem)
        return 1
    return 0 if vault.store_credentials(args.user_id, Credentials(email, password)) else 1


if __name__ == "__main__":
    sys.exit(main())
