"""Résumé session: analyze → score → sort → filter, with a running event log.

One `ResumeSession` owns the state for one uploaded résumé at a time. Oracle
calls are awaited strictly in sequence; a reset while a call is in flight
bumps the session generation so the late result is discarded instead of
landing in the fresh session.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Sequence

from resume_rag.config import MIN_RESUME_CHARS
from resume_rag.errors import error_message
from resume_rag.extractor import extract_text, extract_upload, require_min_length
from resume_rag.filters import apply_filters
from resume_rag.highlight import matched_skills
from resume_rag.log import get_logger
from resume_rag.models import (
    DEFAULT_FILTERS,
    FilterOptions,
    Job,
    LogEntry,
    ResumeAnalysis,
    SmartProfile,
    User,
)
from resume_rag.oracle import ScoringOracle
from resume_rag.saved_jobs import SavedJobsSynchronizer

log = get_logger(__name__)

_LOG_LEVELS: dict[str, int] = {
    "info": logging.INFO,
    "success": logging.INFO,
    "summary": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass
class SessionState:
    resume_text: str = ""
    log_entries: list[LogEntry] = field(default_factory=list)
    is_processing: bool = False
    query_error: str | None = None
    jobs: list[Job] = field(default_factory=list)
    all_jobs: list[Job] = field(default_factory=list)
    filters: FilterOptions = DEFAULT_FILTERS
    analysis: ResumeAnalysis | None = None
    smart_profile: SmartProfile | None = None
    is_generating_profile: bool = False
    profile_error: str | None = None


class ResumeSession:
    def __init__(
        self,
        oracle: ScoringOracle,
        catalog: Sequence[Job],
        saved_jobs: SavedJobsSynchronizer,
        min_resume_chars: int = MIN_RESUME_CHARS,
    ) -> None:
        self.oracle = oracle
        self.catalog = tuple(catalog)
        self.saved_jobs = saved_jobs
        self.min_resume_chars = min_resume_chars
        self.state = SessionState()
        self.user: User | None = None
        self._generation = 0

    # ── Derived views ───────────────────────────────────────────────────

    @property
    def saved_job_ids(self) -> frozenset[str]:
        return self.saved_jobs.ids

    @property
    def status(self) -> str:
        if self.state.is_processing:
            return "processing"
        if self.state.query_error:
            return "error"
        if self.state.analysis is not None:
            return "ready"
        return "idle"

    def matched_skills(self, job: Job) -> list[str]:
        if self.state.analysis is None:
            return []
        return matched_skills(job.required_skills, self.state.analysis.skill_names())

    def available_locations(self) -> list[str]:
        return list(dict.fromkeys(j.location for j in self.state.all_jobs))

    def available_employment_types(self) -> list[str]:
        return list(dict.fromkeys(j.employment_type for j in self.state.all_jobs))

    # ── Internals ───────────────────────────────────────────────────────

    def _log(self, label: str, value: str, status: str = "info") -> None:
        entry = LogEntry(label=label, value=value, status=status)
        self.state.log_entries.append(entry)
        log.log(_LOG_LEVELS[status], "[%s] %s", label, value)

    def _is_stale(self, generation: int) -> bool:
        if generation != self._generation:
            log.info("Discarding result from a session that was reset")
            return True
        return False

    def _refilter(self) -> None:
        self.state.jobs = apply_filters(self.state.all_jobs, self.state.filters, self.saved_job_ids)

    # ── Pipeline ────────────────────────────────────────────────────────

    def reset_session(self) -> None:
        """Drop everything session-scoped; saved jobs and the catalog are kept."""
        self._generation += 1
        self.state = SessionState()
        log.debug("Session reset (generation %d)", self._generation)

    async def submit_resume(self, text: str) -> bool:
        """Run the analyze → score pipeline. Returns False if a run is already in flight."""
        if self.state.is_processing:
            log.warning("Ignoring resume submission: a resume is already being processed")
            return False

        self.reset_session()
        generation = self._generation
        self.state.resume_text = text
        self.state.is_processing = True

        try:
            self._log("Analysis", "Analyzing your resume...")
            analysis = await self.oracle.analyze(text)
            if self._is_stale(generation):
                return True
            self.state.analysis = analysis
            self._log("Analysis", "Successfully extracted skills and summary.", "success")

            self._log("Job Matching", "Searching for relevant jobs...")
            scored = await self.oracle.score(analysis, self.catalog)
            if self._is_stale(generation):
                return True

            # sorted() is stable: equal scores keep catalog order
            ranked = sorted(scored, key=lambda j: j.relevance_score, reverse=True)
            self.state.all_jobs = ranked
            self._refilter()
            self._log("SUMMARY", f"Found {len(ranked)} matching jobs.", "summary")
        except Exception as exc:
            if self._is_stale(generation):
                return True
            message = error_message(exc)
            self.state.query_error = message
            self.state.resume_text = ""
            self._log("ERROR", message, "error")
        finally:
            if generation == self._generation:
                self.state.is_processing = False
        return True

    async def submit_file(self, path: Path) -> bool:
        """Extract text from a résumé file, then submit it.

        Extraction problems raise ExtractionError (or UnsupportedFormatError)
        to the caller and the pipeline does not start.
        """
        text = require_min_length(extract_text(path), self.min_resume_chars)
        return await self.submit_resume(text)

    async def submit_upload(self, filename: str, data: bytes) -> bool:
        text = require_min_length(extract_upload(filename, data), self.min_resume_chars)
        return await self.submit_resume(text)

    async def generate_smart_profile(self) -> None:
        analysis = self.state.analysis
        if analysis is None or self.state.is_generating_profile:
            return
        generation = self._generation
        self.state.is_generating_profile = True
        self.state.profile_error = None
        self._log("Smart Profile", "Generating AI career advice...")
        try:
            profile = await self.oracle.generate_profile(analysis)
            if self._is_stale(generation):
                return
            self.state.smart_profile = profile
            self._log("Smart Profile", "Successfully generated insights.", "success")
        except Exception as exc:
            if self._is_stale(generation):
                return
            message = error_message(exc)
            self.state.profile_error = message
            self._log("ERROR", message, "error")
        finally:
            if generation == self._generation:
                self.state.is_generating_profile = False

    # ── Filters ─────────────────────────────────────────────────────────

    def update_filters(self, **changes: Any) -> None:
        self.state.filters = self.state.filters.merged(**changes)
        self._refilter()

    def reset_filters(self) -> None:
        self.state.filters = DEFAULT_FILTERS
        self._refilter()

    # ── Saved jobs & identity ───────────────────────────────────────────

    def toggle_save_job(self, job_id: str) -> None:
        if self.user is None:
            return
        self.saved_jobs.toggle(job_id)
        self._refilter()

    async def set_user(self, user: User | None) -> None:
        """Log a user in (load their saved jobs) or out (clear them)."""
        self.user = user
        if user is None:
            self.saved_jobs.clear()
        else:
            await self.saved_jobs.load(user.email)
        self._refilter()

    def snapshot(self) -> SessionState:
        """Shallow copy of the state with copied lists, safe to hand to a renderer."""
        return replace(
            self.state,
            log_entries=list(self.state.log_entries),
            jobs=list(self.state.jobs),
            all_jobs=list(self.state.all_jobs),
        )
