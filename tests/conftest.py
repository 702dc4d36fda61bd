"""Shared fixtures: sample jobs, a scriptable fake oracle, in-memory accounts."""
from __future__ import annotations

import asyncio
import os
from typing import Any, Sequence

import pytest

os.environ.setdefault("RESUME_RAG_LOG_FILE", "0")

from resume_rag.accounts import AccountApi
from resume_rag.models import Job, ResumeAnalysis, Skill, SmartProfile, User
from resume_rag.oracle.base import ScoringOracle
from resume_rag.saved_jobs import SavedJobsSynchronizer
from resume_rag.session import ResumeSession
from resume_rag.store import MemoryStore

RESUME_TEXT = (
    "Jane Doe. Backend engineer with 3 years of experience building Python services. "
    "Designed PostgreSQL schemas and wrote SQL reports for the finance team."
)


def make_job(job_id: str = "1", **overrides: Any) -> Job:
    fields: dict[str, Any] = dict(
        id=job_id,
        title=f"Engineer {job_id}",
        company="Acme",
        location="Remote",
        description="Build things with Python and SQL.",
        required_skills=("Python", "SQL"),
        url=f"https://example.com/jobs/{job_id}",
        employment_type="Full-time",
        posted_date="2 days ago",
        min_experience=3,
        min_salary=100_000,
        max_salary=150_000,
    )
    fields.update(overrides)
    return Job(**fields)


class FakeOracle(ScoringOracle):
    """Records calls; returns canned results or raises canned errors.

    Set `gate` to an asyncio.Event to hold `analyze` until the test releases it.
    """

    def __init__(
        self,
        analysis: ResumeAnalysis | None = None,
        scores: dict[str, float] | float = 50,
        profile: SmartProfile | None = None,
    ) -> None:
        self.analysis = analysis or ResumeAnalysis(
            summary="S", skills=(Skill("Python", "..."),), experience_years=3
        )
        self.scores = scores
        self.profile = profile or SmartProfile(enhanced_summary="Better S")
        self.analyze_error: Exception | None = None
        self.score_error: Exception | None = None
        self.profile_error: Exception | None = None
        self.gate: asyncio.Event | None = None
        self.analyze_calls: list[str] = []
        self.score_calls = 0
        self.profile_calls = 0

    async def analyze(self, resume_text: str) -> ResumeAnalysis:
        self.analyze_calls.append(resume_text)
        if self.gate is not None:
            await self.gate.wait()
        if self.analyze_error:
            raise self.analyze_error
        return self.analysis

    async def score(self, analysis: ResumeAnalysis, jobs: Sequence[Job]) -> list[Job]:
        self.score_calls += 1
        if self.score_error:
            raise self.score_error
        if isinstance(self.scores, dict):
            return [j.with_score(self.scores.get(j.id, 0)) for j in jobs]
        return [j.with_score(self.scores) for j in jobs]

    async def generate_profile(self, analysis: ResumeAnalysis) -> SmartProfile:
        self.profile_calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.profile_error:
            raise self.profile_error
        return self.profile


@pytest.fixture
def catalog() -> tuple[Job, ...]:
    return (
        make_job("1", location="Remote", posted_date="Just now"),
        make_job("2", location="New York, NY", employment_type="Contract", min_experience=1),
        make_job("3", location="Remote", posted_date="3 weeks ago", min_experience=6),
        make_job("4", location="Austin, TX", employment_type="Part-time", posted_date="recently"),
    )


@pytest.fixture
def oracle() -> FakeOracle:
    return FakeOracle()


@pytest.fixture
def api() -> AccountApi:
    return AccountApi(MemoryStore())


@pytest.fixture
def sync(api) -> SavedJobsSynchronizer:
    return SavedJobsSynchronizer(api)


@pytest.fixture
def session(oracle, catalog, sync) -> ResumeSession:
    return ResumeSession(oracle=oracle, catalog=catalog, saved_jobs=sync)


@pytest.fixture
def user() -> User:
    return User(id="1", email="jane@example.com", name="Jane")
