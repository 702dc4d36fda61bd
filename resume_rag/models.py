"""Data models for résumé analysis, jobs, filters, and the session log."""
from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import Any, Union

EMPLOYMENT_TYPES: tuple[str, ...] = ("Full-time", "Part-time", "Contract", "Internship")
LOG_STATUSES: tuple[str, ...] = ("info", "success", "warning", "error", "summary")
DATE_WINDOWS: tuple[str, ...] = ("all", "past-week", "past-month")
EXPERIENCE_BRACKETS: tuple[str, ...] = ("all", "0-2", "3-5", "5+")

# A salary bound in thousands, or "" when unset
SalaryBound = Union[int, float, str]


@dataclass(frozen=True)
class Skill:
    name: str
    context: str = ""


@dataclass(frozen=True)
class ResumeAnalysis:
    summary: str
    skills: tuple[Skill, ...]
    experience_years: float = 0

    def skill_names(self) -> list[str]:
        return [s.name for s in self.skills]


@dataclass(frozen=True)
class Job:
    id: str
    title: str
    company: str
    location: str
    description: str
    required_skills: tuple[str, ...]
    url: str
    employment_type: str
    posted_date: str
    min_experience: float
    min_salary: float
    max_salary: float
    is_new: bool = False
    relevance_score: float = 0

    def with_score(self, score: float) -> Job:
        return replace(self, relevance_score=score)


@dataclass(frozen=True)
class FilterOptions:
    """User filter criteria. "all" or "" means the criterion is unset."""

    location: str = "all"
    employment_type: str = "all"
    date_posted: str = "all"
    experience: str = "all"
    min_salary: SalaryBound = ""
    max_salary: SalaryBound = ""
    show_saved_only: bool = False

    def merged(self, **changes: Any) -> FilterOptions:
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise TypeError(f"Unknown filter option(s): {', '.join(sorted(unknown))}")
        # None would leave a hole; map it back to the unset sentinel
        for key, value in changes.items():
            if value is None:
                changes[key] = getattr(DEFAULT_FILTERS, key)
        return replace(self, **changes)


DEFAULT_FILTERS = FilterOptions()


@dataclass(frozen=True)
class LogEntry:
    label: str
    value: str
    status: str = "info"
    timestamp: str = field(default_factory=lambda: datetime.now().strftime("%H:%M:%S"))

    def __post_init__(self) -> None:
        if self.status not in LOG_STATUSES:
            raise ValueError(f"Unknown log status: {self.status}")


@dataclass(frozen=True)
class SuggestedSkill:
    name: str
    reason: str


@dataclass(frozen=True)
class SmartProfile:
    enhanced_summary: str
    suggested_skills: tuple[SuggestedSkill, ...] = ()
    interview_talking_points: tuple[str, ...] = ()


@dataclass(frozen=True)
class User:
    id: str
    email: str
    name: str = ""


@dataclass(frozen=True)
class UserSettings:
    theme: str = "light"
    job_alerts: bool = False


# ── Coercion from loosely-typed dicts (model JSON, YAML) ────────────────


def _require(data: dict[str, Any], *keys: str) -> None:
    missing = [k for k in keys if k not in data]
    if missing:
        raise ValueError(f"Missing field(s): {', '.join(missing)}")


def _number(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None


def analysis_from_dict(data: Any) -> ResumeAnalysis:
    if not isinstance(data, dict):
        raise ValueError("Analysis must be a JSON object")
    _require(data, "summary", "skills", "experience_years")
    raw_skills = data["skills"]
    if not isinstance(raw_skills, list):
        raise ValueError("skills must be a list")

    skills: list[Skill] = []
    for item in raw_skills:
        if isinstance(item, str):
            skills.append(Skill(name=item.strip()))
        elif isinstance(item, dict) and item.get("name"):
            skills.append(Skill(name=str(item["name"]).strip(), context=str(item.get("context") or "")))
        else:
            raise ValueError(f"Invalid skill entry: {item!r}")

    years = max(_number(data["experience_years"], "experience_years"), 0.0)
    return ResumeAnalysis(summary=str(data["summary"] or ""), skills=tuple(skills), experience_years=years)


def profile_from_dict(data: Any) -> SmartProfile:
    if not isinstance(data, dict):
        raise ValueError("Smart profile must be a JSON object")
    _require(data, "enhanced_summary", "suggested_skills", "interview_talking_points")
    raw_suggested = data["suggested_skills"] or []
    if not isinstance(raw_suggested, list):
        raise ValueError("suggested_skills must be a list")
    suggested = []
    for item in raw_suggested:
        if not isinstance(item, dict) or not item.get("name"):
            raise ValueError(f"Invalid suggested skill: {item!r}")
        suggested.append(SuggestedSkill(name=str(item["name"]), reason=str(item.get("reason") or "")))
    points = data["interview_talking_points"] or []
    if not isinstance(points, list):
        raise ValueError("interview_talking_points must be a list")
    return SmartProfile(
        enhanced_summary=str(data["enhanced_summary"] or ""),
        suggested_skills=tuple(suggested),
        interview_talking_points=tuple(str(p) for p in points),
    )


def job_from_dict(data: dict[str, Any]) -> Job:
    _require(
        data, "id", "title", "company", "location", "description", "required_skills", "url",
        "employment_type", "posted_date", "min_experience", "min_salary", "max_salary",
    )
    employment_type = str(data["employment_type"])
    if employment_type not in EMPLOYMENT_TYPES:
        raise ValueError(f"Job {data['id']}: unknown employment type {employment_type!r}")
    min_salary = _number(data["min_salary"], "min_salary")
    max_salary = _number(data["max_salary"], "max_salary")
    if min_salary > max_salary:
        raise ValueError(f"Job {data['id']}: min_salary exceeds max_salary")
    return Job(
        id=str(data["id"]),
        title=str(data["title"]),
        company=str(data["company"]),
        location=str(data["location"]),
        description=str(data["description"]),
        required_skills=tuple(str(s) for s in data["required_skills"] or []),
        url=str(data["url"]),
        employment_type=employment_type,
        posted_date=str(data["posted_date"]),
        min_experience=_number(data["min_experience"], "min_experience"),
        min_salary=min_salary,
        max_salary=max_salary,
        is_new=bool(data.get("is_new", False)),
    )
