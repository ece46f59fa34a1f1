"""Tests for docbrief/models.py — SummaryRecord, Config and exceptions."""

import pytest
from pydantic import ValidationError

from docbrief.models import (
    BatchReport,
    Config,
    FailedDocument,
    LLMError,
    MissingCredentialError,
    SummaryRecord,
)


# ---------------------------------------------------------------------------
# SummaryRecord
# ---------------------------------------------------------------------------


def test_summary_record_defaults_are_empty():
    record = SummaryRecord()
    assert record.short_summary == ""
    assert record.relevance_to_officials == ()
    assert record.action_items == ()
    assert record.confidence_estimate == "unknown"
    assert record.raw_text == ""
    assert record.error is None
    assert record.is_error is False


def test_summary_record_is_frozen():
    record = SummaryRecord(short_summary="x")
    with pytest.raises(ValidationError):
        record.short_summary = "y"


def test_summary_record_list_fields_are_immutable():
    record = SummaryRecord(action_items=["Prepare bid"])
    assert record.action_items == ("Prepare bid",)
    with pytest.raises(AttributeError):
        record.action_items.append("Upload documents")
    assert record.action_items == ("Prepare bid",)


def test_summary_record_rejects_unknown_confidence():
    with pytest.raises(ValidationError):
        SummaryRecord(confidence_estimate="maybe")


def test_error_record_cannot_carry_structured_fields():
    with pytest.raises(ValidationError, match="error record"):
        SummaryRecord(error="boom", short_summary="also data")


def test_failure_builds_error_record_with_raw_text():
    record = SummaryRecord.failure("GEMINI_API_KEY not found", raw_text="doc text")
    assert record.is_error
    assert record.error == "GEMINI_API_KEY not found"
    assert record.raw_text == "doc text"
    assert record.short_summary == ""


def test_degraded_record_keeps_summary_and_raw_text():
    record = SummaryRecord.degraded(short_summary="free text", raw_text="doc text")
    assert not record.is_error
    assert record.short_summary == "free text"
    assert record.relevance_to_officials == ()
    assert record.action_items == ()
    assert record.confidence_estimate == "unknown"
    assert record.raw_text == "doc text"


# ---------------------------------------------------------------------------
# Batch reporting
# ---------------------------------------------------------------------------


def test_batch_report_holds_failed_documents():
    report = BatchReport(
        processed=2,
        degraded=1,
        failed=1,
        failed_documents=[FailedDocument(pdf_path="a.pdf", error="No text")],
    )
    assert report.failed_documents[0].pdf_path == "a.pdf"


# ---------------------------------------------------------------------------
# Config and exceptions
# ---------------------------------------------------------------------------


def test_config_defaults():
    config = Config()
    assert config.mode == "local"
    assert config.model == "gemini-2.0-flash"
    assert config.base_url.startswith("https://generativelanguage.googleapis.com")
    assert config.timeout_s == 120
    assert config.api_key is None
    assert config.local_sentences == 5


def test_missing_credential_is_an_llm_error():
    assert issubclass(MissingCredentialError, LLMError)
