"""Keep the user's saved job ids in memory and mirror changes to the account store.

The in-memory set is authoritative. Each toggle schedules one write of the
full set (last write wins). A failed write is logged and never retried or
rolled back.
"""
from __future__ import annotations

import asyncio

from resume_rag.accounts import AccountApi
from resume_rag.log import get_logger

log = get_logger(__name__)


class SavedJobsSynchronizer:
    def __init__(self, api: AccountApi) -> None:
        self.api = api
        self.user_key: str | None = None
        self._ids: set[str] = set()
        self._pending: set[asyncio.Task] = set()

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(self._ids)

    def __contains__(self, job_id: object) -> bool:
        return job_id in self._ids

    async def load(self, user_key: str) -> None:
        """Replace the set with what the store holds for *user_key*."""
        self.user_key = user_key
        self._ids = set()
        try:
            ids = await self.api.get_saved_jobs(user_key)
        except Exception as exc:
            log.error("Failed to load saved jobs for %s: %s", user_key, exc)
            return
        if self.user_key != user_key:
            log.debug("Dropping saved jobs loaded for %s (user changed)", user_key)
            return
        self._ids = set(ids)
        log.info("Loaded %d saved job(s) for %s", len(self._ids), user_key)

    def clear(self) -> None:
        """Forget the user and the set (logout / account deletion)."""
        self.user_key = None
        self._ids = set()

    def toggle(self, job_id: str) -> bool:
        """Flip *job_id*; returns True if it is now saved. No-op without a user."""
        if self.user_key is None:
            log.debug("Ignoring save toggle for %s: no user", job_id)
            return False
        if job_id in self._ids:
            self._ids.discard(job_id)
            saved = False
        else:
            self._ids.add(job_id)
            saved = True
        self._schedule_write(self.user_key, sorted(self._ids))
        return saved

    def _schedule_write(self, user_key: str, ids: list[str]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop (plain script): write inline
            asyncio.run(self._persist(user_key, ids))
            return
        task = loop.create_task(self._persist(user_key, ids))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _persist(self, user_key: str, ids: list[str]) -> None:
        try:
            await self.api.update_saved_jobs(user_key, ids)
            log.debug("Persisted %d saved job(s) for %s", len(ids), user_key)
        except Exception as exc:
            log.error("Failed to save job change for %s: %s", user_key, exc)

    async def flush(self) -> None:
        """Wait for outstanding writes."""
        while self._pending:
            await asyncio.gather(*list(self._pending))
