from .base import ScoringOracle, apply_scores, clamp_score
from .keyword import KeywordOracle

from resume_rag.config import Settings
from resume_rag.log import get_logger

log = get_logger(__name__)

__all__ = [
    "ScoringOracle", "KeywordOracle",
    "apply_scores", "clamp_score", "build_oracle",
]


def build_oracle(settings: Settings) -> ScoringOracle:
    if settings.has_llm:
        from .groq import GroqOracle

        log.info("Registered oracle: Groq LLM (%s)", settings.groq_model)
        return GroqOracle(
            api_key=settings.groq_api_key,
            model=settings.groq_model,
            base_url=settings.groq_base_url,
        )

    log.info("No GROQ_API_KEY found — using keyword oracle")
    return KeywordOracle()
