"""
Unit tests for the filter engine.

Tests resume_rag.filters: date parsing, experience brackets, salary overlap,
and the combined apply_filters pass.
"""

import math

import pytest

from resume_rag.filters import (
    apply_filters,
    days_since_posted,
    matches_experience,
    matches_salary,
    parse_salary_bound,
)
from resume_rag.models import DEFAULT_FILTERS, FilterOptions
from tests.conftest import make_job


class TestDaysSincePosted:
    """Tests for the relative-date heuristic."""

    @pytest.mark.parametrize("text, days", [
        ("Just now", 0),
        ("just now", 0),
        ("Today, 9am", 0),
        ("Posted today", 0),
        ("3 days ago", 3),
        ("1 day ago", 1),
        ("2 weeks ago", 14),
        ("1 month ago", 30),
        ("2 months ago", 60),
    ])
    def test_parsed_values(self, text, days):
        assert days_since_posted(text) == days

    @pytest.mark.parametrize("text", [
        "recently", "", "a week ago", "5 years ago", "Just now!", "３ days ago", "٣ weeks ago",
    ])
    def test_unparseable_is_infinitely_old(self, text):
        """No leading number, or no known unit, never fits a bounded window."""
        assert days_since_posted(text) == math.inf


class TestDateWindows:
    """Tests for past-week / past-month windows."""

    def test_recently_only_under_all(self):
        job = make_job(posted_date="recently")
        for window in ("past-week", "past-month"):
            assert apply_filters([job], DEFAULT_FILTERS.merged(date_posted=window)) == []
        assert apply_filters([job], DEFAULT_FILTERS) == [job]

    def test_week_boundary_inclusive(self):
        jobs = [make_job("a", posted_date="7 days ago"), make_job("b", posted_date="8 days ago")]
        result = apply_filters(jobs, DEFAULT_FILTERS.merged(date_posted="past-week"))
        assert [j.id for j in result] == ["a"]

    def test_month_window(self):
        jobs = [
            make_job("a", posted_date="4 weeks ago"),
            make_job("b", posted_date="1 month ago"),
            make_job("c", posted_date="5 weeks ago"),
        ]
        result = apply_filters(jobs, DEFAULT_FILTERS.merged(date_posted="past-month"))
        assert [j.id for j in result] == ["a", "b"]


class TestExperience:
    """Tests for experience brackets on minimum experience."""

    def test_mid_bracket_inclusive(self):
        criteria = DEFAULT_FILTERS.merged(experience="3-5")
        assert matches_experience(make_job(min_experience=3), criteria)
        assert matches_experience(make_job(min_experience=5), criteria)
        assert not matches_experience(make_job(min_experience=2), criteria)
        assert not matches_experience(make_job(min_experience=6), criteria)

    def test_entry_and_senior(self):
        assert matches_experience(make_job(min_experience=0), DEFAULT_FILTERS.merged(experience="0-2"))
        assert matches_experience(make_job(min_experience=12), DEFAULT_FILTERS.merged(experience="5+"))
        assert not matches_experience(make_job(min_experience=4), DEFAULT_FILTERS.merged(experience="5+"))

    def test_unknown_bracket_passes(self):
        assert matches_experience(make_job(min_experience=40), DEFAULT_FILTERS.merged(experience="10+"))


class TestSalary:
    """Tests for the salary overlap predicate."""

    @pytest.mark.parametrize("value, expected", [
        (80, 80), ("80", 80), ("80k", 80), (80.9, 80), ("", None), ("abc", None), (None, None),
        ("８０", None), (" -5", -5),
    ])
    def test_parse_salary_bound(self, value, expected):
        assert parse_salary_bound(value) == expected

    def test_overlap_not_containment(self):
        """A 100k-150k job overlaps a 140k-200k request even though it is not contained."""
        job = make_job(min_salary=100_000, max_salary=150_000)
        assert matches_salary(job, DEFAULT_FILTERS.merged(min_salary=140, max_salary=200))
        assert not matches_salary(job, DEFAULT_FILTERS.merged(min_salary=151))
        assert not matches_salary(job, DEFAULT_FILTERS.merged(max_salary=99))

    def test_inverted_bounds_are_not_swapped(self):
        """min > max: each bound still applies on its own."""
        job = make_job(min_salary=100_000, max_salary=150_000)
        assert matches_salary(job, DEFAULT_FILTERS.merged(min_salary=120, max_salary=110))
        # swapping would make this pass; independent bounds reject it
        assert not matches_salary(job, DEFAULT_FILTERS.merged(min_salary=160, max_salary=90))

    def test_unset_bounds(self):
        job = make_job(min_salary=1, max_salary=2)
        assert matches_salary(job, DEFAULT_FILTERS)


class TestApplyFilters:
    """Tests for the combined filter pass."""

    def test_default_is_identity(self, catalog):
        assert apply_filters(catalog, DEFAULT_FILTERS, {"1"}) == list(catalog)

    def test_saved_only(self, catalog):
        result = apply_filters(catalog, DEFAULT_FILTERS.merged(show_saved_only=True), {"2", "4"})
        assert [j.id for j in result] == ["2", "4"]

    def test_saved_only_with_no_saved(self, catalog):
        assert apply_filters(catalog, DEFAULT_FILTERS.merged(show_saved_only=True), set()) == []

    def test_location_is_exact_and_case_sensitive(self, catalog):
        assert [j.id for j in apply_filters(catalog, DEFAULT_FILTERS.merged(location="Remote"))] == ["1", "3"]
        assert apply_filters(catalog, DEFAULT_FILTERS.merged(location="remote")) == []

    def test_conjunction(self, catalog):
        criteria = FilterOptions(location="Remote", date_posted="past-week", experience="0-2")
        assert apply_filters(catalog, criteria) == []
        criteria = FilterOptions(location="Remote", date_posted="past-week", experience="3-5")
        assert [j.id for j in apply_filters(catalog, criteria)] == ["1"]

    def test_employment_type(self, catalog):
        result = apply_filters(catalog, DEFAULT_FILTERS.merged(employment_type="Contract"))
        assert [j.id for j in result] == ["2"]

    def test_merged_rejects_unknown_keys(self):
        with pytest.raises(TypeError):
            DEFAULT_FILTERS.merged(salary=10)

    def test_merged_none_restores_sentinel(self):
        criteria = DEFAULT_FILTERS.merged(min_salary=80).merged(min_salary=None, location=None)
        assert criteria.min_salary == ""
        assert criteria.location == "all"
