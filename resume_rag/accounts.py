"""Mock account API: users, settings, and saved jobs on a key-value store.

Every call is async and can simulate network latency, so callers treat it
like a remote service. Nothing here is meant to be secure.
"""
from __future__ import annotations

import asyncio
import hashlib
import os
import time
from dataclasses import asdict
from typing import Any, Callable, TypeVar

from resume_rag.errors import AccountError
from resume_rag.log import get_logger
from resume_rag.models import User, UserSettings
from resume_rag.store import KeyValueStore

log = get_logger(__name__)

T = TypeVar("T")

USERS_KEY = "resume-rag-users-db"
SETTINGS_KEY = "resume-rag-settings-db"
CURRENT_USER_KEY = "resume-rag-current-user"
SAVED_JOBS_PREFIX = "saved-job-ids-"

ADMIN_EMAIL = "admin@mail.com"
ADMIN_PASSWORD = "admin123"

_SALT_LEN = 16
_ITERATIONS = 100_000


def _hash_password(password: str, salt: bytes) -> str:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _ITERATIONS).hex()


def _new_credentials(password: str) -> dict[str, str]:
    salt = os.urandom(_SALT_LEN)
    return {"salt": salt.hex(), "password_hash": _hash_password(password, salt)}


def _check_password(record: dict[str, Any], password: str) -> bool:
    salt = bytes.fromhex(record.get("salt", ""))
    return _hash_password(password, salt) == record.get("password_hash")


def saved_jobs_key(email: str) -> str:
    return f"{SAVED_JOBS_PREFIX}{email}"


class AccountApi:
    def __init__(self, store: KeyValueStore, latency: float = 0.0, seed_admin: bool = True) -> None:
        self.store = store
        self.latency = latency
        if seed_admin:
            self._seed_admin()

    def _seed_admin(self) -> None:
        users = self._users()
        if ADMIN_EMAIL in users:
            return
        users[ADMIN_EMAIL] = {"name": "Admin User", **_new_credentials(ADMIN_PASSWORD)}
        self.store.set(USERS_KEY, users)
        settings = self._settings()
        settings[ADMIN_EMAIL] = asdict(UserSettings())
        self.store.set(SETTINGS_KEY, settings)

    async def _call(self, fn: Callable[[], T]) -> T:
        if self.latency:
            await asyncio.sleep(self.latency)
        return fn()

    def _users(self) -> dict[str, dict[str, Any]]:
        return self.store.get(USERS_KEY) or {}

    def _settings(self) -> dict[str, dict[str, Any]]:
        return self.store.get(SETTINGS_KEY) or {}

    def _login_as(self, email: str, name: str) -> User:
        user = User(id=str(int(time.time() * 1000)), email=email, name=name)
        self.store.set(CURRENT_USER_KEY, asdict(user))
        return user

    # ── Auth ────────────────────────────────────────────────────────────

    async def signup(self, name: str, email: str, password: str) -> User:
        def op() -> User:
            users = self._users()
            if email in users:
                raise AccountError("An account with this email already exists.")
            users[email] = {"name": name, **_new_credentials(password)}
            self.store.set(USERS_KEY, users)
            settings = self._settings()
            settings[email] = asdict(UserSettings())
            self.store.set(SETTINGS_KEY, settings)
            log.info("Created account %s", email)
            return self._login_as(email, name)

        return await self._call(op)

    async def login(self, email: str, password: str) -> User:
        def op() -> User:
            record = self._users().get(email)
            if record is None:
                raise AccountError("User not found.")
            if not _check_password(record, password):
                raise AccountError("Invalid password.")
            return self._login_as(email, record.get("name", ""))

        return await self._call(op)

    async def logout(self) -> None:
        await self._call(lambda: self.store.delete(CURRENT_USER_KEY))

    def current_user(self) -> User | None:
        """Synchronous: used once at startup to restore a previous login."""
        raw = self.store.get(CURRENT_USER_KEY)
        if not isinstance(raw, dict) or "email" not in raw:
            return None
        return User(id=str(raw.get("id", "")), email=raw["email"], name=raw.get("name", ""))

    async def reload_user(self, email: str) -> User | None:
        def op() -> User | None:
            record = self._users().get(email)
            if record is None:
                return None
            return self._login_as(email, record.get("name", ""))

        return await self._call(op)

    # ── Profile ─────────────────────────────────────────────────────────

    async def update_profile(self, email: str, name: str) -> None:
        def op() -> None:
            users = self._users()
            if email not in users:
                raise AccountError("User not found for profile update.")
            users[email]["name"] = name
            self.store.set(USERS_KEY, users)

        await self._call(op)

    async def change_password(self, email: str, old_password: str, new_password: str) -> None:
        def op() -> None:
            users = self._users()
            record = users.get(email)
            if record is None or not _check_password(record, old_password):
                raise AccountError("Incorrect current password.")
            record.update(_new_credentials(new_password))
            self.store.set(USERS_KEY, users)

        await self._call(op)

    async def delete_account(self, email: str) -> None:
        def op() -> None:
            users = self._users()
            users.pop(email, None)
            self.store.set(USERS_KEY, users)
            settings = self._settings()
            settings.pop(email, None)
            self.store.set(SETTINGS_KEY, settings)
            self.store.delete(saved_jobs_key(email))
            self.store.delete(CURRENT_USER_KEY)
            log.info("Deleted account %s", email)

        await self._call(op)

    # ── Settings ────────────────────────────────────────────────────────

    async def get_user_settings(self, email: str) -> UserSettings:
        def op() -> UserSettings:
            raw = self._settings().get(email) or {}
            return UserSettings(
                theme=raw.get("theme", "light"),
                job_alerts=bool(raw.get("job_alerts", False)),
            )

        return await self._call(op)

    async def update_user_settings(self, email: str, settings: UserSettings) -> None:
        if settings.theme not in ("light", "dark"):
            raise AccountError(f"Unknown theme: {settings.theme}")

        def op() -> None:
            all_settings = self._settings()
            all_settings[email] = asdict(settings)
            self.store.set(SETTINGS_KEY, all_settings)

        await self._call(op)

    # ── Saved jobs ──────────────────────────────────────────────────────

    async def get_saved_jobs(self, email: str) -> list[str]:
        def op() -> list[str]:
            raw = self.store.get(saved_jobs_key(email))
            if raw is None:
                return []
            if not isinstance(raw, list):
                log.error("Failed to parse saved jobs for %s", email)
                return []
            return [str(job_id) for job_id in raw]

        return await self._call(op)

    async def update_saved_jobs(self, email: str, job_ids: list[str]) -> None:
        await self._call(lambda: self.store.set(saved_jobs_key(email), list(job_ids)))
