"""LLM-backed oracle using Groq's OpenAI-compatible chat API."""
from __future__ import annotations

import json
import re
from typing import Any, Sequence

from openai import AsyncOpenAI, OpenAIError

from resume_rag.config import DEFAULT_MODEL, GROQ_BASE_URL
from resume_rag.errors import (
    AnalysisError,
    ConfigurationError,
    OracleError,
    ProfileError,
    ScoringError,
)
from resume_rag.log import get_logger
from resume_rag.models import (
    Job,
    ResumeAnalysis,
    SmartProfile,
    analysis_from_dict,
    profile_from_dict,
)
from resume_rag.oracle.base import ScoringOracle, apply_scores

log = get_logger(__name__)

INVALID_JSON = "The model returned an invalid JSON response. Please try again."

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.+?)\n?```", re.DOTALL)

_ANALYZE_PROMPT = """\
You are a resume parser. Analyze the resume text below and extract the required information.
Return ONLY valid JSON with these exact keys:

{{
  "summary": "A 2-3 sentence professional summary based on the resume",
  "skills": [
    {{"name": "Skill name", "context": "The sentence or phrase from the resume where this skill was mentioned"}}
  ],
  "experience_years": 0
}}

Rules:
- "skills" lists key skills, technologies, and methodologies, in the order they appear.
- "context" must be copied verbatim from the resume.
- "experience_years" is an estimate of total years of professional experience,
  calculated from the dates provided.

Resume text:
---
{resume_text}
---
"""

_SCORE_PROMPT = """\
Based on this resume analysis:

Summary: {summary}
Skills: {skills}
Experience: {years} years

Score the relevance of each job below on a scale of 0 to 100. A score of 100 is a perfect match.
Return ONLY valid JSON of the form:
{{"scores": [{{"id": "job id", "relevanceScore": 0}}]}}

Jobs:
---
{jobs}
---
"""

_PROFILE_PROMPT = """\
Based on the following resume analysis, generate a "Smart Profile" to help with a job search.

Summary: {summary}
Skills: {skills}
Experience: {years} years

Return ONLY valid JSON with these exact keys:
{{
  "enhanced_summary": "The summary rewritten to be more impactful and professional, tailored for job applications, 3-4 sentences",
  "suggested_skills": [{{"name": "A complementary skill to learn", "reason": "One sentence on why it is valuable"}}],
  "interview_talking_points": ["Tell me about a time when ..."]
}}

Suggest exactly 3 skills and 3 talking points drawn from the resume's content.
"""


def parse_json_response(raw: str) -> Any:
    """Parse model output that may be wrapped in a ```json fence or surrounded by prose."""
    text = (raw or "").strip()
    m = _FENCE_RE.search(text)
    if m:
        text = m.group(1).strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not starts:
        raise ValueError(INVALID_JSON)
    start = min(starts)
    end = max(text.rfind("}"), text.rfind("]")) + 1
    try:
        return json.loads(text[start:end])
    except json.JSONDecodeError:
        raise ValueError(INVALID_JSON) from None


def _skills_line(analysis: ResumeAnalysis) -> str:
    return ", ".join(analysis.skill_names())


class GroqOracle(ScoringOracle):
    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = GROQ_BASE_URL,
        client: AsyncOpenAI | None = None,
    ) -> None:
        if not api_key and client is None:
            raise ConfigurationError("GROQ_API_KEY is not set; add it to .env or config/settings.yaml")
        self.model = model
        self.client = client or AsyncOpenAI(api_key=api_key, base_url=base_url)

    async def _complete(self, prompt: str, max_tokens: int, temperature: float) -> str:
        resp = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
            temperature=temperature,
        )
        if not resp.choices:
            log.warning("LLM returned no choices")
            return ""
        return (resp.choices[0].message.content or "").strip()

    async def _ask(
        self,
        prompt: str,
        error: type[OracleError],
        action: str,
        max_tokens: int,
        temperature: float,
    ) -> Any:
        """Complete *prompt* and parse the JSON reply; every failure is raised as *error*."""
        try:
            raw = await self._complete(prompt, max_tokens=max_tokens, temperature=temperature)
        except OpenAIError as exc:
            raise error(f"{action} request failed: {exc}") from exc
        try:
            return parse_json_response(raw)
        except ValueError as exc:
            log.warning("Unparseable %s response: %.200s", action.lower(), raw)
            raise error(str(exc)) from exc

    async def analyze(self, resume_text: str) -> ResumeAnalysis:
        prompt = _ANALYZE_PROMPT.format(resume_text=resume_text[:12000])
        log.info("Analyzing resume with LLM (%s)", self.model)
        data = await self._ask(prompt, AnalysisError, "Resume analysis", max_tokens=2000, temperature=0.1)
        try:
            analysis = analysis_from_dict(data)
        except (ValueError, TypeError) as exc:
            raise AnalysisError(str(exc)) from exc
        log.info("LLM analysis complete — skills=%d, years=%.1f", len(analysis.skills), analysis.experience_years)
        return analysis

    async def score(self, analysis: ResumeAnalysis, jobs: Sequence[Job]) -> list[Job]:
        payload = [
            {
                "id": j.id,
                "title": j.title,
                "description": j.description[:500],
                "required_skills": list(j.required_skills),
            }
            for j in jobs
        ]
        prompt = _SCORE_PROMPT.format(
            summary=analysis.summary,
            skills=_skills_line(analysis),
            years=analysis.experience_years,
            jobs=json.dumps(payload, indent=2),
        )
        log.info("Scoring %d jobs with LLM (%s)", len(jobs), self.model)
        data = await self._ask(
            prompt, ScoringError, "Job scoring", max_tokens=100 + 40 * len(jobs), temperature=0.0
        )

        items = data.get("scores") if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise ScoringError(INVALID_JSON)
        scores: dict[str, Any] = {}
        for item in items:
            if isinstance(item, dict) and "id" in item:
                scores[str(item["id"])] = item.get("relevanceScore", item.get("relevance_score"))
        missing = len([j for j in jobs if j.id not in scores])
        if missing:
            log.warning("LLM returned no score for %d job(s); defaulting to 0", missing)
        return apply_scores(jobs, scores)

    async def generate_profile(self, analysis: ResumeAnalysis) -> SmartProfile:
        prompt = _PROFILE_PROMPT.format(
            summary=analysis.summary,
            skills=_skills_line(analysis),
            years=analysis.experience_years,
        )
        log.info("Generating smart profile with LLM (%s)", self.model)
        data = await self._ask(prompt, ProfileError, "Smart profile", max_tokens=1200, temperature=0.4)
        try:
            return profile_from_dict(data)
        except (ValueError, TypeError) as exc:
            raise ProfileError(str(exc)) from exc
