"""
Unit tests for résumé text extraction.

Tests resume_rag.extractor with TXT and DOCX payloads built on the fly.
"""

import io
import zipfile

import pytest

from resume_rag.errors import ExtractionError, InputError, UnsupportedFormatError
from resume_rag.extractor import (
    TOO_SHORT,
    _fix_spacing,
    extract_text,
    extract_upload,
    require_min_length,
)

_DOCX_XML = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
    "<w:body>"
    "<w:p><w:r><w:t>Jane Doe</w:t></w:r></w:p>"
    "<w:p><w:r><w:t>Python </w:t></w:r><w:r><w:t>developer</w:t></w:r></w:p>"
    "</w:body></w:document>"
)


def _docx_bytes(xml: str = _DOCX_XML) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr("word/document.xml", xml)
    return buf.getvalue()


class TestExtractUpload:
    """Tests for in-memory uploads."""

    def test_txt(self):
        assert extract_upload("cv.TXT", "Héllo wörld".encode("utf-8")) == "Héllo wörld"

    def test_docx_paragraphs(self):
        assert extract_upload("cv.docx", _docx_bytes()) == "Jane Doe\nPython developer"

    def test_unsupported_suffix(self):
        with pytest.raises(UnsupportedFormatError, match="Unsupported file type"):
            extract_upload("cv.rtf", b"{\\rtf1}")

    def test_unsupported_is_an_input_error(self):
        with pytest.raises(InputError):
            extract_upload("cv", b"text")

    def test_corrupt_docx(self):
        with pytest.raises(ExtractionError, match="cv.docx"):
            extract_upload("cv.docx", b"not a zip file")

    def test_docx_without_document_part(self):
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            zf.writestr("other.xml", "<x/>")
        with pytest.raises(ExtractionError):
            extract_upload("cv.docx", buf.getvalue())

    def test_docx_with_bad_xml(self):
        with pytest.raises(ExtractionError):
            extract_upload("cv.docx", _docx_bytes("<w:document"))


class TestExtractText:
    """Tests for files on disk."""

    def test_reads_file(self, tmp_path):
        path = tmp_path / "resume.txt"
        path.write_text("Python developer", encoding="utf-8")
        assert extract_text(path) == "Python developer"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ExtractionError):
            extract_text(tmp_path / "missing.txt")

    def test_suffix_checked_before_reading(self, tmp_path):
        with pytest.raises(UnsupportedFormatError):
            extract_text(tmp_path / "missing.png")


class TestRequireMinLength:
    """Tests for the minimum-length guard."""

    def test_short_text_rejected(self):
        with pytest.raises(ExtractionError) as exc_info:
            require_min_length("   short   ", 100)
        assert str(exc_info.value) == TOO_SHORT

    def test_whitespace_does_not_count(self):
        with pytest.raises(ExtractionError):
            require_min_length(" " * 200 + "x" * 99, 100)

    def test_long_enough_is_returned_unchanged(self):
        text = "x" * 100
        assert require_min_length(text, 100) is text


class TestFixSpacing:
    """Tests for the PDF word-merge repair."""

    def test_well_spaced_text_is_unchanged(self):
        text = "This sentence has plenty of ordinary spaces between all of its words."
        assert _fix_spacing(text) == text

    def test_merged_words_are_split(self):
        text = "SeniorEngineerAtAcmeCorp2019BuiltPythonServicesAndDataPipelines"
        fixed = _fix_spacing(text)
        assert "Senior Engineer" in fixed
        assert "Corp 2019" in fixed
