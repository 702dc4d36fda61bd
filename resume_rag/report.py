"""Render a finished session as a Markdown report."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import AbstractSet, Sequence

from resume_rag.highlight import highlight_segments, matched_skills
from resume_rag.log import get_logger
from resume_rag.models import Job, LogEntry, Skill
from resume_rag.session import SessionState

log = get_logger(__name__)

_STATUS_BADGES: dict[str, str] = {
    "info": "ℹ️",
    "success": "✅",
    "warning": "⚠️",
    "error": "❌",
    "summary": "\U0001f4ca",
}


def score_label(score: float) -> str:
    if score > 85:
        return "Great Match"
    if score > 60:
        return "Good Match"
    if score > 40:
        return "Fair Match"
    return "Possible Match"


def format_salary(min_salary: float, max_salary: float) -> str:
    def k(amount: float) -> int:
        # half-up, not banker's rounding
        return int(amount / 1000 + 0.5)

    return f"${k(min_salary)}k - ${k(max_salary)}k"


def highlight_markdown(text: str, skills: Sequence[Skill]) -> str:
    """Job text with résumé skills in bold."""
    return "".join(f"**{seg.text}**" if seg.is_match else seg.text for seg in highlight_segments(text, skills))


def _job_block(job: Job, skills: Sequence[Skill], saved: bool) -> list[str]:
    badge = "★ " if saved else ""
    new = " \U0001f195" if job.is_new else ""
    lines = [
        f"### {badge}{job.title} @ {job.company}{new}",
        f"- **Score:** {round(job.relevance_score)}% — {score_label(job.relevance_score)}",
        f"- **Location:** {job.location} | **Type:** {job.employment_type} | **Posted:** {job.posted_date}",
        f"- **Salary:** {format_salary(job.min_salary, job.max_salary)}",
    ]
    matches = matched_skills(job.required_skills, [s.name for s in skills])
    if matches:
        lines.append(f"- **Matches your skills:** {', '.join(matches)}")
    if job.url:
        lines.append(f"- **Apply:** [View job]({job.url})")
    lines.append("")
    lines.append(f"> {highlight_markdown(job.description, skills)}")
    lines.append("")
    return lines


def _log_lines(entries: Sequence[LogEntry]) -> list[str]:
    return [
        f"- `{e.timestamp}` {_STATUS_BADGES.get(e.status, '')} **{e.label}:** {e.value}"
        for e in entries
    ]


def build_session_report(
    state: SessionState,
    saved_ids: AbstractSet[str] = frozenset(),
    *,
    top: int = 15,
) -> str:
    date = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    lines: list[str] = [f"# Resume Match Report — {date}", ""]

    if state.query_error:
        lines += [f"**Error:** {state.query_error}", ""]

    analysis = state.analysis
    skills: Sequence[Skill] = analysis.skills if analysis else ()
    if analysis:
        lines += [
            "## Profile",
            "",
            analysis.summary,
            "",
            f"- **Experience:** {analysis.experience_years:g} years",
            f"- **Skills:** {', '.join(analysis.skill_names()) or '—'}",
            "",
        ]

    lines.append(
        f"**{len(state.all_jobs)}** jobs scored | **{len(state.jobs)}** after filters | "
        f"**{len(saved_ids)}** saved"
    )
    lines.append("")

    if state.jobs:
        lines += ["## Top Matches", ""]
        for job in state.jobs[:top]:
            lines += _job_block(job, skills, job.id in saved_ids)
    elif state.all_jobs:
        lines += ["_No jobs match your current filters._", ""]

    profile = state.smart_profile
    if profile:
        lines += ["---", "", "## Smart Profile", "", profile.enhanced_summary, ""]
        if profile.suggested_skills:
            lines.append("**Skills to learn next:**")
            lines += [f"- **{s.name}** — {s.reason}" for s in profile.suggested_skills]
            lines.append("")
        if profile.interview_talking_points:
            lines.append("**Interview talking points:**")
            lines += [f"{i}. {p}" for i, p in enumerate(profile.interview_talking_points, 1)]
            lines.append("")

    if state.log_entries:
        lines += ["---", "", "## Extraction Log", ""]
        lines += _log_lines(state.log_entries)
        lines.append("")

    log.info("Built session report: %d jobs shown", min(len(state.jobs), top))
    return "\n".join(lines)


def write_session_report(content: str, reports_dir: Path) -> Path:
    reports_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H%M%S")
    path = reports_dir / f"matches_{stamp}.md"
    path.write_text(content, encoding="utf-8")
    log.info("Report written → %s", path)
    return path
