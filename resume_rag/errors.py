"""Exception types raised by the résumé pipeline and its collaborators."""
from __future__ import annotations

UNKNOWN_ERROR = "An unknown error occurred."


class ResumeRagError(Exception):
    """Base class for every error this package raises on purpose."""


class ConfigurationError(ResumeRagError):
    """A required setting (usually an API key) is missing or unusable."""


# ── Input errors: raised before a submission starts ─────────────────────


class InputError(ResumeRagError):
    pass


class ExtractionError(InputError):
    """The résumé file could not be read, or yielded too little text."""


class UnsupportedFormatError(ExtractionError):
    """The résumé file is not a PDF, DOCX, or TXT document."""


# ── Oracle errors: terminal for one submission attempt ──────────────────


class OracleError(ResumeRagError):
    pass


class AnalysisError(OracleError):
    pass


class ScoringError(OracleError):
    pass


class ProfileError(OracleError):
    pass


# ── Account / storage errors ────────────────────────────────────────────


class AccountError(ResumeRagError):
    """Mock account API failure (unknown user, bad password, duplicate email)."""


def error_message(exc: BaseException) -> str:
    """Text shown to the user for *exc*, with a fallback for empty messages."""
    return str(exc).strip() or UNKNOWN_ERROR
