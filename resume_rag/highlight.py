"""Find résumé skills inside job text and compute matched skills per job.

Highlighting compiles one case-insensitive alternation of the escaped skill
names wrapped in word boundaries. Names are ordered longest first, so when
one skill is a prefix of another ("Java" / "JavaScript") the longer name wins
at a given position. Names beginning or ending in a non-word character
("C++", ".NET") cannot satisfy the boundary on that side and are not matched
there.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Sequence

from resume_rag.models import Skill

CONTEXT_LIMIT = 180


@dataclass(frozen=True)
class Segment:
    text: str
    skill: str | None = None
    context: str | None = None

    @property
    def is_match(self) -> bool:
        return self.skill is not None


def truncate_context(context: str, limit: int = CONTEXT_LIMIT) -> str:
    return f"{context[:limit]}..." if len(context) > limit else context


def _skill_pattern(names: Iterable[str]) -> re.Pattern[str] | None:
    unique = list(dict.fromkeys(n for n in names if n))
    if not unique:
        return None
    unique.sort(key=len, reverse=True)
    alternation = "|".join(re.escape(n) for n in unique)
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


def highlight_segments(text: str, skills: Sequence[Skill]) -> list[Segment]:
    """Split *text* into plain and matched spans, tagging matches with résumé context."""
    contexts: dict[str, str] = {}
    for skill in skills:
        name = skill.name.strip()
        if name:
            contexts[name.lower()] = skill.context

    pattern = _skill_pattern(s.name.strip() for s in skills)
    if pattern is None:
        return [Segment(text)] if text else []

    segments: list[Segment] = []
    pos = 0
    for m in pattern.finditer(text):
        if m.start() > pos:
            segments.append(Segment(text[pos:m.start()]))
        matched = m.group(0)
        segments.append(
            Segment(matched, skill=matched, context=truncate_context(contexts.get(matched.lower(), "")))
        )
        pos = m.end()
    if pos < len(text):
        segments.append(Segment(text[pos:]))
    return segments


def matched_skills(required_skills: Iterable[str], user_skills: Iterable[str]) -> list[str]:
    """Required skills the user also has, compared case-insensitively, in the job's order."""
    have = {s.lower() for s in user_skills}
    return [s for s in required_skills if s.lower() in have]
