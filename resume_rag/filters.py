"""Narrow a scored job list by location, type, recency, experience, and salary."""
from __future__ import annotations

import math
import re
from typing import AbstractSet, Any, Iterable

from resume_rag.models import FilterOptions, Job

# ASCII digits only; "３" or "٣" is not a number here
_LEADING_INT_RE = re.compile(r"^\s*([+-]?[0-9]+)")

# Days per unit, checked in this order against the lower-cased text
_UNIT_DAYS: tuple[tuple[str, int], ...] = (("day", 1), ("week", 7), ("month", 30))

_DATE_WINDOWS: dict[str, int] = {"past-week": 7, "past-month": 30}

# bracket -> inclusive (low, high) on a job's minimum experience
_EXPERIENCE_BRACKETS: dict[str, tuple[float, float]] = {
    "0-2": (0, 2),
    "3-5": (3, 5),
    "5+": (5, math.inf),
}


def days_since_posted(posted_date: str) -> float:
    """Approximate age in days of a relative date such as "3 days ago".

    "just now" and anything mentioning "today" are 0. Text without a leading
    number, or without a day/week/month unit, is infinitely old so it never
    falls inside a bounded window. Months count as 30 days.
    """
    text = (posted_date or "").lower()
    if text == "just now" or "today" in text:
        return 0
    m = _LEADING_INT_RE.match(text)
    if not m:
        return math.inf
    num = int(m.group(1))
    for unit, days in _UNIT_DAYS:
        if unit in text:
            return num * days
    return math.inf


def parse_salary_bound(value: Any) -> int | None:
    """Leading integer of a salary bound (in thousands), or None when unset."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return int(value)
    m = _LEADING_INT_RE.match(str(value))
    return int(m.group(1)) if m else None


def matches_location(job: Job, criteria: FilterOptions) -> bool:
    return criteria.location == "all" or job.location == criteria.location


def matches_employment_type(job: Job, criteria: FilterOptions) -> bool:
    return criteria.employment_type == "all" or job.employment_type == criteria.employment_type


def matches_date(job: Job, criteria: FilterOptions) -> bool:
    window = _DATE_WINDOWS.get(criteria.date_posted)
    if window is None:
        return True
    return days_since_posted(job.posted_date) <= window


def matches_experience(job: Job, criteria: FilterOptions) -> bool:
    bracket = _EXPERIENCE_BRACKETS.get(criteria.experience)
    if bracket is None:
        return True
    low, high = bracket
    return low <= job.min_experience <= high


def matches_salary(job: Job, criteria: FilterOptions) -> bool:
    """Range-overlap test; the two bounds apply independently and are never swapped."""
    min_k = parse_salary_bound(criteria.min_salary)
    max_k = parse_salary_bound(criteria.max_salary)
    if min_k is not None and job.max_salary < min_k * 1000:
        return False
    if max_k is not None and job.min_salary > max_k * 1000:
        return False
    return True


_PREDICATES = (
    matches_location,
    matches_employment_type,
    matches_date,
    matches_experience,
    matches_salary,
)


def apply_filters(
    jobs: Iterable[Job],
    criteria: FilterOptions,
    saved_ids: AbstractSet[str] = frozenset(),
) -> list[Job]:
    """Return the jobs passing every criterion, in their original order."""
    results = list(jobs)
    if criteria.show_saved_only:
        results = [j for j in results if j.id in saved_ids]
    return [j for j in results if all(pred(j, criteria) for pred in _PREDICATES)]
