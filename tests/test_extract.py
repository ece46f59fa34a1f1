"""Tests for docbrief/extract.py — docling/pypdf text extraction."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from docbrief.extract import extract_text
from docbrief.models import ExtractionError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_pdf(tmp_path) -> Path:
    pdf = tmp_path / "notice.pdf"
    pdf.write_bytes(b"%PDF-1.4 fake content")
    return pdf


def _mocked_extract(pdf: Path, text: str, **kwargs) -> str:
    """Call extract_text with a mocked DocumentConverter returning ``text``."""
    with patch("docbrief.extract.DocumentConverter") as MockConverter:
        result = MockConverter.return_value.convert.return_value
        result.document.export_to_markdown.return_value = text
        return extract_text(pdf, **kwargs)


def _pypdf_pages(*pages: str) -> MagicMock:
    reader = MagicMock()
    reader.pages = [MagicMock(extract_text=MagicMock(return_value=p)) for p in pages]
    return reader


# ---------------------------------------------------------------------------
# docling path
# ---------------------------------------------------------------------------


def test_extract_text_returns_docling_output(fake_pdf):
    assert _mocked_extract(fake_pdf, "hello world") == "hello world"


def test_extract_text_truncates_to_max_chars(fake_pdf):
    result = _mocked_extract(fake_pdf, "x" * 1000, max_chars=100)
    assert result == "x" * 100


def test_extract_text_writes_no_cache_file(fake_pdf):
    _mocked_extract(fake_pdf, "content")
    assert sorted(p.name for p in fake_pdf.parent.iterdir()) == ["notice.pdf"]


def test_docling_only_mode_wraps_failure(fake_pdf):
    original = RuntimeError("deep failure")
    with patch("docbrief.extract.DocumentConverter") as MockConverter:
        MockConverter.return_value.convert.side_effect = original
        with pytest.raises(ExtractionError, match="notice.pdf") as exc_info:
            extract_text(fake_pdf, extractor="docling")
    assert exc_info.value.__cause__ is original


# ---------------------------------------------------------------------------
# pypdf path and fallback
# ---------------------------------------------------------------------------


def test_pypdf_mode_joins_pages(fake_pdf):
    with (
        patch("docbrief.extract.PdfReader", return_value=_pypdf_pages("one", "two")),
        patch("docbrief.extract.DocumentConverter") as MockConverter,
    ):
        assert extract_text(fake_pdf, extractor="pypdf") == "one\n\ntwo"
    MockConverter.assert_not_called()


def test_auto_mode_falls_back_to_pypdf(fake_pdf, caplog):
    with (
        patch("docbrief.extract.DocumentConverter") as MockConverter,
        patch("docbrief.extract.PdfReader", return_value=_pypdf_pages("fallback text")),
    ):
        MockConverter.return_value.convert.side_effect = RuntimeError("docling broke")
        assert extract_text(fake_pdf) == "fallback text"
    assert any("pypdf fallback" in r.message for r in caplog.records)


def test_auto_mode_raises_when_both_extractors_fail(fake_pdf):
    with (
        patch("docbrief.extract.DocumentConverter") as MockConverter,
        patch("docbrief.extract.PdfReader", side_effect=ValueError("bad xref")),
    ):
        MockConverter.return_value.convert.side_effect = RuntimeError("docling broke")
        with pytest.raises(ExtractionError, match="both failed"):
            extract_text(fake_pdf)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def test_missing_file_raises(tmp_path):
    with pytest.raises(ExtractionError, match="File not found"):
        extract_text(tmp_path / "absent.pdf")


def test_empty_text_raises(fake_pdf):
    with patch("docbrief.extract.PdfReader", return_value=_pypdf_pages("", "  ")):
        with pytest.raises(ExtractionError, match="No text extracted"):
            extract_text(fake_pdf, extractor="pypdf")
