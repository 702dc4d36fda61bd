"""Load settings from the environment, `.env`, and an optional YAML file."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from resume_rag.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "settings.yaml"
DATA_DIR: Path = ROOT_DIR / "data"
REPORTS_DIR: Path = ROOT_DIR / "reports"
CATALOG_PATH: Path = Path(__file__).resolve().parent / "data" / "jobs.yaml"

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_MODEL = "llama-3.3-70b-versatile"
MIN_RESUME_CHARS = 100

# settings key -> environment variable
_ENV_KEYS: dict[str, str] = {
    "groq_api_key": "GROQ_API_KEY",
    "groq_model": "GROQ_LLM_MODEL",
    "groq_base_url": "GROQ_BASE_URL",
    "min_resume_chars": "MIN_RESUME_CHARS",
    "store_path": "RESUME_RAG_STORE",
    "catalog_path": "RESUME_RAG_CATALOG",
    "api_latency": "RESUME_RAG_API_LATENCY",
    "reports_dir": "RESUME_RAG_REPORTS",
}


@dataclass
class Settings:
    groq_api_key: str = ""
    groq_model: str = DEFAULT_MODEL
    groq_base_url: str = GROQ_BASE_URL
    min_resume_chars: int = MIN_RESUME_CHARS
    store_path: Path = field(default_factory=lambda: DATA_DIR / "store.json")
    catalog_path: Path = CATALOG_PATH
    api_latency: float = 0.0
    reports_dir: Path = REPORTS_DIR

    @property
    def has_llm(self) -> bool:
        return bool(self.groq_api_key)


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        log.warning("Ignoring %s: expected a mapping, got %s", path, type(data).__name__)
        return {}
    return data


def load_settings(path: Path | None = None) -> Settings:
    """Build settings: defaults < YAML file < environment variables."""
    path = path or Path(get_env("RESUME_RAG_CONFIG") or SETTINGS_PATH)
    raw: dict[str, Any] = {k: v for k, v in _read_yaml(path).items() if k in _ENV_KEYS}
    for key, env_name in _ENV_KEYS.items():
        value = get_env(env_name)
        if value:
            raw[key] = value

    settings = Settings()
    try:
        if "groq_api_key" in raw:
            settings.groq_api_key = str(raw["groq_api_key"]).strip()
        if "groq_model" in raw:
            settings.groq_model = str(raw["groq_model"]).strip()
        if "groq_base_url" in raw:
            settings.groq_base_url = str(raw["groq_base_url"]).strip()
        if "min_resume_chars" in raw:
            settings.min_resume_chars = int(raw["min_resume_chars"])
        if "api_latency" in raw:
            settings.api_latency = float(raw["api_latency"])
        for key in ("store_path", "catalog_path", "reports_dir"):
            if key in raw:
                setattr(settings, key, Path(str(raw[key])).expanduser())
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid setting in {path.name}: {exc}") from exc

    if settings.min_resume_chars < 0:
        raise ValueError("min_resume_chars must be >= 0")
    return settings


def ensure_dirs(settings: Settings) -> None:
    for d in (settings.store_path.parent, settings.reports_dir):
        d.mkdir(parents=True, exist_ok=True)
