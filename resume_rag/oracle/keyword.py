"""Offline oracle: vocabulary-based skill extraction and skill-overlap scoring.

Used when no LLM key is configured. Deterministic, so it also serves as a
stable oracle for demos.
"""
from __future__ import annotations

import re
from typing import Sequence

from resume_rag.errors import AnalysisError, ProfileError, ScoringError
from resume_rag.log import get_logger
from resume_rag.models import Job, ResumeAnalysis, Skill, SmartProfile, SuggestedSkill
from resume_rag.oracle.base import ScoringOracle

log = get_logger(__name__)

KNOWN_SKILLS: list[str] = [
    "Python", "Java", "JavaScript", "TypeScript", "React", "Node.js", "Angular",
    "Vue.js", "SQL", "NoSQL", "MongoDB", "PostgreSQL", "MySQL", "Redis",
    "Docker", "Kubernetes", "AWS", "GCP", "Azure", "Terraform", "Ansible",
    "Jenkins", "Git", "Linux", "CI/CD", "REST", "GraphQL", "Microservices",
    "FastAPI", "Django", "Flask", "Spring Boot", "Kafka", "Spark", "Airflow",
    "Agile", "Scrum", "Excel", "Power BI", "Tableau", "HTML", "CSS", "Jest",
    "Machine Learning", "Deep Learning", "NLP", "Data Science", "Pandas",
    "Statistics", "TensorFlow", "PyTorch", "Figma", "UI/UX", "User Research",
    "Prototyping", "Markdown", "Technical Writing", "Communication",
    "Leadership", "Project Management", "Stakeholder Management",
]

# skill (lower-case) -> complementary skills worth learning next
ADJACENT_SKILLS: dict[str, list[str]] = {
    "python": ["FastAPI", "Pandas", "Docker"],
    "javascript": ["TypeScript", "React", "Node.js"],
    "react": ["TypeScript", "Jest", "GraphQL"],
    "sql": ["PostgreSQL", "Airflow", "Spark"],
    "aws": ["Terraform", "Kubernetes", "Docker"],
    "docker": ["Kubernetes", "CI/CD", "Terraform"],
    "machine learning": ["PyTorch", "Statistics", "Spark"],
    "java": ["Spring Boot", "Kafka", "Microservices"],
    "leadership": ["Project Management", "Stakeholder Management", "Agile"],
}
_FALLBACK_SUGGESTIONS = ["Git", "SQL", "Docker"]

_YEARS_RE = re.compile(r"(\d{1,2})\+?\s*(?:years?|yrs?)", re.IGNORECASE)
_SENTENCE_RE = re.compile(r"[^.!?\n]+[.!?]?")

# Weights for the composite score (sum to 100)
_SKILL_WEIGHT = 70
_EXPERIENCE_WEIGHT = 20
_TITLE_WEIGHT = 10


def _skill_regex(name: str) -> re.Pattern[str]:
    # lookarounds instead of \b so "C++" or "Node.js" still match
    return re.compile(rf"(?<![\w]){re.escape(name)}(?![\w])", re.IGNORECASE)


def _sentences(text: str) -> list[str]:
    return [s.strip() for s in _SENTENCE_RE.findall(text) if s.strip()]


def _estimate_years(text: str) -> int:
    years = 0
    for m in _YEARS_RE.finditer(text):
        years = max(years, int(m.group(1)))
    return years


def _heuristic_summary(sentences: list[str], years: int, skills: list[str]) -> str:
    if skills:
        lead = f"Professional with {years} years of experience." if years else "Early-career professional."
        return f"{lead} Skilled in {', '.join(skills[:6])}."
    return sentences[0] if sentences else ""


class KeywordOracle(ScoringOracle):
    def __init__(self, vocabulary: Sequence[str] | None = None) -> None:
        self.vocabulary = list(vocabulary or KNOWN_SKILLS)

    async def analyze(self, resume_text: str) -> ResumeAnalysis:
        if not resume_text.strip():
            raise AnalysisError("Resume text is empty.")
        sentences = _sentences(resume_text)

        found: list[tuple[int, Skill]] = []
        for name in self.vocabulary:
            rx = _skill_regex(name)
            m = rx.search(resume_text)
            if not m:
                continue
            context = next((s for s in sentences if rx.search(s)), "")
            found.append((m.start(), Skill(name=name, context=context)))
        # extraction order = first appearance in the résumé
        skills = [s for _, s in sorted(found, key=lambda pair: pair[0])]

        years = _estimate_years(resume_text)
        summary = _heuristic_summary(sentences, years, [s.name for s in skills])
        log.info("Heuristic analysis complete — skills=%d, years=%d", len(skills), years)
        return ResumeAnalysis(summary=summary, skills=tuple(skills), experience_years=years)

    def score_job(self, analysis: ResumeAnalysis, job: Job) -> float:
        have = {n.lower() for n in analysis.skill_names()}
        required = [s.lower() for s in job.required_skills]

        if required:
            skill_part = _SKILL_WEIGHT * len([s for s in required if s in have]) / len(required)
        else:
            skill_part = 0.0

        if job.min_experience <= 0:
            exp_part = _EXPERIENCE_WEIGHT
        else:
            exp_part = _EXPERIENCE_WEIGHT * min(analysis.experience_years / job.min_experience, 1.0)

        title = job.title.lower()
        title_part = _TITLE_WEIGHT if any(_skill_regex(n).search(title) for n in have) else 0

        return round(skill_part + exp_part + title_part, 1)

    async def score(self, analysis: ResumeAnalysis, jobs: Sequence[Job]) -> list[Job]:
        try:
            scored = [job.with_score(self.score_job(analysis, job)) for job in jobs]
        except (TypeError, ZeroDivisionError) as exc:
            raise ScoringError(f"Could not score jobs: {exc}") from exc
        log.info("Scored %d jobs with keyword overlap", len(scored))
        return scored

    async def generate_profile(self, analysis: ResumeAnalysis) -> SmartProfile:
        if not analysis.skills and not analysis.summary:
            raise ProfileError("Not enough résumé content to build a profile.")
        have = {n.lower() for n in analysis.skill_names()}

        suggestions: list[SuggestedSkill] = []
        for name in analysis.skill_names():
            for candidate in ADJACENT_SKILLS.get(name.lower(), []):
                if candidate.lower() in have or any(s.name == candidate for s in suggestions):
                    continue
                suggestions.append(SuggestedSkill(candidate, f"Pairs naturally with your {name} experience."))
        for candidate in _FALLBACK_SUGGESTIONS:
            if candidate.lower() not in have and all(s.name != candidate for s in suggestions):
                suggestions.append(SuggestedSkill(candidate, "Widely requested across the job catalog."))

        points = [
            f"Tell me about a time when you used {s.name}: \"{s.context}\""
            for s in analysis.skills
            if s.context
        ][:3]
        if not points:
            points = ["Tell me about a project you are most proud of."]

        top = ", ".join(analysis.skill_names()[:4])
        enhanced = analysis.summary
        if top:
            enhanced = f"{analysis.summary} Brings hands-on strength in {top}, ready to deliver from day one.".strip()
        return SmartProfile(
            enhanced_summary=enhanced,
            suggested_skills=tuple(suggestions[:3]),
            interview_talking_points=tuple(points),
        )
