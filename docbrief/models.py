"""Pydantic models, dataclass Config, and exceptions for docbrief.

``SummaryRecord`` is the one shape exchanged between the summarization
pipeline and the presentation layer (``renderer.py`` / ``cli.py``).  Records
are frozen: a request builds one record, and the next request replaces it.
Coercing untrusted input into a valid record is the job of
``normalize.normalize_record``; the model itself only enforces the
error/data split.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

Confidence = Literal["high", "medium", "low", "unknown"]
"""How confident the summarizer is in the derived values."""

CONFIDENCE_LEVELS: tuple[str, ...] = ("high", "medium", "low", "unknown")

SummaryMode = Literal["local", "ai"]

#: The structured subset requested from the completion service.
STRUCTURED_FIELDS: tuple[str, ...] = (
    "short_summary",
    "relevance_to_officials",
    "action_items",
    "confidence_estimate",
)

# ---------------------------------------------------------------------------
# Summary record
# ---------------------------------------------------------------------------


class SummaryRecord(BaseModel):
    """A summary of one document, or the error that prevented one.

    When ``error`` is set the record is an error record: only ``error`` (and
    ``raw_text``, if extraction got that far) carry meaning, and the
    structured fields must stay at their empty defaults.

    Records are frozen and the list fields are tuples, so a record cannot be
    changed once built; lists passed in are converted on validation.
    """

    model_config = ConfigDict(frozen=True)

    short_summary: str = ""
    relevance_to_officials: tuple[str, ...] = ()
    action_items: tuple[str, ...] = ()
    confidence_estimate: Confidence = "unknown"
    raw_text: str = ""
    error: str | None = None

    @model_validator(mode="after")
    def _validate_error_split(self) -> "SummaryRecord":
        if self.error is None:
            return self
        if (
            self.short_summary
            or self.relevance_to_officials
            or self.action_items
            or self.confidence_estimate != "unknown"
        ):
            raise ValueError("structured fields must be empty on an error record")
        return self

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def degraded(cls, short_summary: str, raw_text: str) -> "SummaryRecord":
        """Record used when the LLM reply could not be structured.

        Keeps whatever summary text exists, leaves the derived values empty and
        marks confidence as ``unknown``.
        """
        return cls(
            short_summary=short_summary,
            relevance_to_officials=(),
            action_items=(),
            confidence_estimate="unknown",
            raw_text=raw_text,
        )

    @classmethod
    def failure(cls, error: str, raw_text: str = "") -> "SummaryRecord":
        """Error record carrying ``error`` as-is."""
        return cls(error=error, raw_text=raw_text)


# ---------------------------------------------------------------------------
# Batch reporting
# ---------------------------------------------------------------------------


class FailedDocument(BaseModel):
    """A document whose summarization ended in an error record."""

    pdf_path: str
    error: str


class BatchReport(BaseModel):
    """Aggregate result of a batch run over a directory of PDFs."""

    processed: int
    degraded: int
    failed: int
    failed_documents: list[FailedDocument] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Config (dataclass — not pydantic; holds runtime settings)
# ---------------------------------------------------------------------------

#: Gemini exposes an OpenAI-compatible endpoint; any other compatible backend
#: (LM Studio, OpenRouter) works by changing ``base_url``.
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
DEFAULT_MODEL = "gemini-2.0-flash"

#: ~25k tokens of document text at 4 chars/token.
_DEFAULT_MAX_CHARS = 100_000


@dataclass
class Config:
    """Runtime configuration for a summarization session.

    Attributes:
        base_url:          OpenAI-compatible API base URL.
        model:             Model identifier passed with every completion call.
        api_key:           API key.  ``None`` means resolve from the
                           ``LLM_API_KEY`` / ``GEMINI_API_KEY`` environment
                           variables (see ``llm.create_client``).
        timeout_s:         Seconds before a completion call is abandoned.
        max_output_tokens: Generation cap per call; ``None`` leaves it to the
                           model.
        max_chars:         Maximum characters of extracted text kept.
        extractor:         ``auto`` (docling, pypdf fallback), ``docling`` or
                           ``pypdf``.
        mode:              ``local`` (extractive, no network) or ``ai``.
        local_sentences:   Sentences kept by the local summarizer.
        output_dir:        Where batch mode writes rendered summaries.
        verbose:           DEBUG logging.
    """

    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    api_key: str | None = None
    timeout_s: int = 120
    max_output_tokens: int | None = None
    max_chars: int = _DEFAULT_MAX_CHARS
    extractor: Literal["auto", "docling", "pypdf"] = "auto"
    mode: SummaryMode = "local"
    local_sentences: int = 5
    output_dir: Path = Path("summaries")
    verbose: bool = False


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ExtractionError(Exception):
    """Raised when no text can be extracted from a PDF."""


class LLMError(Exception):
    """Raised when a completion call fails at the transport or API level."""


class MissingCredentialError(LLMError):
    """Raised when no API key is available for a remote completion backend."""


class BusyError(Exception):
    """Raised when a session is asked to summarize while already summarizing."""
