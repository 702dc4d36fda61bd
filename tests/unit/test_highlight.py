"""
Unit tests for skill highlighting and matched skills.

Tests resume_rag.highlight: segmenting job text around résumé skills,
context tooltips, and case-insensitive skill intersection.
"""

from resume_rag.highlight import (
    CONTEXT_LIMIT,
    highlight_segments,
    matched_skills,
    truncate_context,
)
from resume_rag.models import Skill


def _joined(segments):
    return "".join(s.text for s in segments)


class TestMatchedSkills:
    """Tests for required-skill intersection."""

    def test_case_insensitive_in_job_order(self):
        assert matched_skills(["Python", "SQL"], ["python", "Go"]) == ["Python"]
        assert matched_skills(["SQL", "Python"], ["PYTHON", "sql"]) == ["SQL", "Python"]

    def test_empty_inputs(self):
        assert matched_skills([], ["Python"]) == []
        assert matched_skills(["Python"], []) == []


class TestHighlightSegments:
    """Tests for splitting text into plain and matched segments."""

    def test_no_skills_passes_text_through(self):
        assert [s.text for s in highlight_segments("Build APIs.", [])] == ["Build APIs."]
        assert highlight_segments("", []) == []

    def test_blank_skill_names_are_ignored(self):
        segments = highlight_segments("Build APIs.", [Skill(""), Skill("   ")])
        assert len(segments) == 1 and not segments[0].is_match

    def test_segments_reassemble_original(self):
        text = "We use python daily, plus SQL and more Python."
        segments = highlight_segments(text, [Skill("Python", "ctx"), Skill("SQL")])
        assert _joined(segments) == text
        assert [s.text for s in segments if s.is_match] == ["python", "SQL", "Python"]

    def test_match_keeps_source_casing_and_context(self):
        segments = highlight_segments("Needs PYTHON.", [Skill("Python", "Built Python services.")])
        match = next(s for s in segments if s.is_match)
        assert match.text == "PYTHON"
        assert match.context == "Built Python services."

    def test_word_boundaries(self):
        segments = highlight_segments("Javanese and Java", [Skill("Java")])
        assert [s.text for s in segments if s.is_match] == ["Java"]

    def test_longest_name_wins(self):
        segments = highlight_segments("JavaScript and Java", [Skill("Java"), Skill("JavaScript")])
        assert [s.text for s in segments if s.is_match] == ["JavaScript", "Java"]

    def test_regex_metacharacters_are_escaped(self):
        text = "Experience with Node.js, not Nodexjs."
        segments = highlight_segments(text, [Skill("Node.js")])
        assert [s.text for s in segments if s.is_match] == ["Node.js"]
        assert _joined(segments) == text

    def test_duplicate_names_use_last_context(self):
        skills = [Skill("Python", "first"), Skill("python", "second")]
        match = next(s for s in highlight_segments("Python", skills) if s.is_match)
        assert match.context == "second"

    def test_long_context_is_truncated(self):
        context = "x" * (CONTEXT_LIMIT + 20)
        match = next(s for s in highlight_segments("SQL", [Skill("SQL", context)]) if s.is_match)
        assert match.context == "x" * CONTEXT_LIMIT + "..."


class TestTruncateContext:
    """Tests for tooltip truncation."""

    def test_at_limit_is_unchanged(self):
        assert truncate_context("a" * CONTEXT_LIMIT) == "a" * CONTEXT_LIMIT

    def test_over_limit(self):
        assert truncate_context("abcdef", limit=3) == "abc..."
