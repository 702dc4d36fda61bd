"""Logging setup shared by the library, the CLI, and the Streamlit app (stdlib only).

Handlers live on the root logger: one console handler on stdout and, unless
RESUME_RAG_LOG_FILE is 0/false/no, a daily file under RESUME_RAG_LOG_DIR
(default <repo>/logs). The level comes from LOG_LEVEL unless a caller passes one.
"""
from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

_DEFAULT_DIR = Path(__file__).resolve().parent.parent / "logs"
_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"

# handlers installed by configure(), so a second call adjusts instead of duplicating
_console: logging.Handler | None = None
_file: logging.Handler | None = None


def _file_logging_enabled() -> bool:
    return os.environ.get("RESUME_RAG_LOG_FILE", "1").strip().lower() not in ("0", "false", "no")


def _resolve_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    return getattr(logging, name, logging.INFO)


def configure(level: int | str | None = None) -> None:
    """Install the handlers once; later calls only change the console level."""
    global _console, _file
    resolved = _resolve_level(level)
    root = logging.getLogger()
    root.setLevel(min(resolved, logging.DEBUG) if _file else resolved)

    if _console is not None:
        _console.setLevel(resolved)
        return
    if root.handlers:
        # host (pytest, streamlit) already configured logging
        return

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FMT)
    _console = logging.StreamHandler(sys.stdout)
    _console.setLevel(resolved)
    _console.setFormatter(formatter)
    root.addHandler(_console)

    if not _file_logging_enabled():
        return
    log_dir = Path(os.environ.get("RESUME_RAG_LOG_DIR") or _DEFAULT_DIR)
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        _file = logging.FileHandler(
            log_dir / f"resume_rag_{datetime.now().strftime('%Y-%m-%d')}.log", encoding="utf-8"
        )
    except OSError as exc:
        root.warning("File logging disabled: %s", exc)
        return
    _file.setLevel(logging.DEBUG)
    _file.setFormatter(formatter)
    root.addHandler(_file)
    root.setLevel(logging.DEBUG)


def get_logger(name: str) -> logging.Logger:
    """Return a named logger, configuring the root handlers on first use."""
    if _console is None and not logging.getLogger().handlers:
        configure()
    return logging.getLogger(name)
