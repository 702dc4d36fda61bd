from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from resume_rag.models import Job, ResumeAnalysis, SmartProfile


class ScoringOracle(ABC):
    """Analyzes résumé text, scores jobs against the analysis, and writes smart profiles.

    Implementations raise AnalysisError, ScoringError and ProfileError
    respectively; any other exception is treated the same by the session.
    """

    @abstractmethod
    async def analyze(self, resume_text: str) -> ResumeAnalysis:
        pass

    @abstractmethod
    async def score(self, analysis: ResumeAnalysis, jobs: Sequence[Job]) -> list[Job]:
        """Return *jobs* in the same order with relevance_score set (0-100)."""

    @abstractmethod
    async def generate_profile(self, analysis: ResumeAnalysis) -> SmartProfile:
        pass


def clamp_score(value: Any) -> float:
    """Coerce an oracle score into 0-100; anything non-numeric becomes 0."""
    if isinstance(value, bool):
        return 0.0
    try:
        score = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(score):
        return 0.0
    return min(max(score, 0.0), 100.0)


def apply_scores(jobs: Sequence[Job], scores: Mapping[str, Any]) -> list[Job]:
    """Copy each job with its score from *scores*; ids without a score get 0."""
    return [job.with_score(clamp_score(scores.get(job.id, 0))) for job in jobs]
