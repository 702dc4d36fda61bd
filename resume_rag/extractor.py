"""Extract plain text from résumé files.

Supports PDF (via pdftotext or pypdf), DOCX (via stdlib zipfile), and TXT.
"""
from __future__ import annotations

import io
import re
import shutil
import subprocess
import tempfile
import zipfile
from pathlib import Path
from typing import BinaryIO
from xml.etree import ElementTree

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from resume_rag.config import MIN_RESUME_CHARS
from resume_rag.errors import ExtractionError, UnsupportedFormatError
from resume_rag.log import get_logger

log = get_logger(__name__)

SUPPORTED_SUFFIXES: tuple[str, ...] = (".pdf", ".docx", ".txt")
TOO_SHORT = "Could not extract enough text. Please check the file or try another."

_DOCX_NS = "{http://schemas.openxmlformats.org/wordprocessingml/2006/main}"


def _suffix(name: str) -> str:
    suffix = Path(name).suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise UnsupportedFormatError("Unsupported file type. Please upload a PDF, DOCX, or TXT file.")
    return suffix


def _fix_spacing(text: str) -> str:
    """Re-insert spaces when PDF extraction merges words together."""
    if not text or len(text) < 50:
        return text
    space_ratio = text.count(" ") / len(text)
    if space_ratio > 0.08:
        return text

    log.debug("Low space ratio (%.2f%%) — applying spacing fix", space_ratio * 100)
    fixed = re.sub(r"([a-z])([A-Z])", r"\1 \2", text)
    fixed = re.sub(r"([a-zA-Z])(\d)", r"\1 \2", fixed)
    fixed = re.sub(r"(\d)([a-zA-Z])", r"\1 \2", fixed)
    fixed = re.sub(r"([.!?,;:])([A-Za-z])", r"\1 \2", fixed)
    return fixed


def _pdftotext(data: bytes) -> str | None:
    if not shutil.which("pdftotext"):
        return None
    with tempfile.NamedTemporaryFile(suffix=".pdf") as tmp:
        tmp.write(data)
        tmp.flush()
        result = subprocess.run(
            ["pdftotext", "-layout", tmp.name, "-"],
            capture_output=True,
            text=True,
            timeout=30,
        )
    if result.returncode == 0 and result.stdout.strip():
        return result.stdout
    return None


def _extract_pdf(data: bytes) -> str:
    # Prefer pdftotext (better spacing) over pypdf
    text = _pdftotext(data)
    if text is not None:
        return text
    reader = PdfReader(io.BytesIO(data))
    pages = [_fix_spacing(page.extract_text() or "") for page in reader.pages]
    return "\n".join(pages)


def _extract_docx(stream: BinaryIO) -> str:
    texts: list[str] = []
    with zipfile.ZipFile(stream) as zf:
        with zf.open("word/document.xml") as f:
            tree = ElementTree.parse(f)
            for para in tree.iter(f"{_DOCX_NS}p"):
                parts = [node.text for node in para.iter(f"{_DOCX_NS}t") if node.text]
                if parts:
                    texts.append("".join(parts))
    return "\n".join(texts)


def extract_upload(filename: str, data: bytes) -> str:
    """Return plain text from an uploaded PDF, DOCX, or TXT payload."""
    suffix = _suffix(filename)
    try:
        if suffix == ".txt":
            return data.decode("utf-8", errors="ignore")
        if suffix == ".docx":
            return _extract_docx(io.BytesIO(data))
        return _extract_pdf(data)
    except (zipfile.BadZipFile, KeyError, ElementTree.ParseError, PdfReadError,
            subprocess.SubprocessError, OSError, ValueError) as exc:
        log.warning("Extraction failed for %s: %s", filename, exc)
        raise ExtractionError(f"Failed to read {filename}: {exc}") from exc


def extract_text(path: Path) -> str:
    """Return plain text from a PDF, DOCX, or TXT file on disk."""
    path = Path(path)
    _suffix(path.name)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ExtractionError(f"Failed to read {path.name}: {exc}") from exc
    log.info("Extracting text from %s", path.name)
    return extract_upload(path.name, data)


def require_min_length(text: str, min_chars: int = MIN_RESUME_CHARS) -> str:
    if len(text.strip()) < min_chars:
        raise ExtractionError(TOO_SHORT)
    return text
