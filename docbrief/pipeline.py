"""Per-request orchestration — turns one PDF into one ``SummaryRecord``.

Local mode
    extract → extractive summary (``local.py``) → normalized record.

AI mode
    extract → free-form summary from the completion service → structuring
    (``structuring.py``, one or two more calls) → normalized record.  When
    structuring is exhausted the free-form summary is kept in a degraded
    record so the user still sees it.

Every failure ends in an error record rather than an exception, so the
presentation layer always receives something to render.  ``raw_text`` is
taken from extraction and never from an LLM reply.
"""

import dataclasses
import logging
import threading
from pathlib import Path

from docbrief.extract import extract_text
from docbrief.llm import CompletionClient, complete_text, create_client
from docbrief.local import summarize_text_local
from docbrief.models import (
    BusyError,
    Config,
    ExtractionError,
    LLMError,
    SummaryMode,
    SummaryRecord,
)
from docbrief.normalize import normalize_record
from docbrief.notify import Notifier, post
from docbrief.prompts import build_summary_prompt
from docbrief.structuring import structure_summary

logger = logging.getLogger(__name__)


def operation_id_for(pdf_path: Path) -> str:
    """Notification key of a summarization request for ``pdf_path``."""
    return f"summarize:{pdf_path.name}"


def summarize_file(
    pdf_path: Path,
    config: Config,
    notifier: Notifier | None = None,
    client: CompletionClient | None = None,
) -> SummaryRecord:
    """Summarize one PDF in ``config.mode`` and return the resulting record.

    Args:
        pdf_path: PDF to summarize.
        config:   Runtime configuration.
        notifier: Receives status updates keyed by ``summarize:<file name>``.
        client:   Completion client to use in AI mode; built from ``config``
                  when omitted.

    Returns:
        A data record, a degraded record, or an error record.  Never raises.
    """
    operation_id = operation_id_for(pdf_path)
    try:
        try:
            raw_text = extract_text(
                pdf_path, extractor=config.extractor, max_chars=config.max_chars
            )
        except ExtractionError as exc:
            logger.error("%s", exc)
            post(notifier, operation_id, "failed", str(exc))
            return SummaryRecord.failure(str(exc))

        if config.mode == "ai":
            return summarize_ai(raw_text, config, notifier, operation_id, client)
        return summarize_local(raw_text, config.local_sentences)
    except Exception as exc:
        logger.exception("Unexpected failure summarizing %s", pdf_path)
        post(notifier, operation_id, "failed", str(exc))
        return SummaryRecord.failure(f"Unexpected error: {exc}")


def summarize_local(raw_text: str, num_sentences: int = 5) -> SummaryRecord:
    """Build a record from the extractive local summarizer."""
    local = summarize_text_local(raw_text, num_sentences)
    if local is None:
        return SummaryRecord.failure("Failed to generate local summary", raw_text)
    return normalize_record({**local, "raw_text": raw_text})


def summarize_ai(
    raw_text: str,
    config: Config,
    notifier: Notifier | None = None,
    operation_id: str = "summarize",
    client: CompletionClient | None = None,
) -> SummaryRecord:
    """Summarize ``raw_text`` with the completion service and structure it.

    Completion failures (missing credential, transport, API errors) give an
    error record.  An unstructurable reply gives a degraded record whose
    ``short_summary`` is the model's free-form summary.
    """
    try:
        if client is None:
            client = create_client(config)
        post(notifier, operation_id, "fetching", f"Summarizing with {config.model}")
        llm_summary = complete_text(client, build_summary_prompt(raw_text))
        outcome = structure_summary(
            client, llm_summary, raw_text, notifier=notifier, operation_id=operation_id
        )
    except LLMError as exc:
        logger.error("%s", exc)
        post(notifier, operation_id, "failed", str(exc))
        return SummaryRecord.failure(str(exc), raw_text=raw_text)

    if outcome.succeeded:
        return normalize_record(outcome.value)

    logger.warning(
        "Structuring exhausted after %d attempts; using unstructured summary",
        outcome.attempts,
    )
    post(
        notifier,
        operation_id,
        "failed",
        "AI response could not be structured; showing the unstructured summary",
    )
    return SummaryRecord.degraded(short_summary=llm_summary.strip(), raw_text=raw_text)


class SummarizerSession:
    """One user's summarization session.

    Holds the busy flag that keeps requests from overlapping, and the record
    of the most recent request (replaced wholesale by the next one).
    """

    def __init__(self, config: Config, notifier: Notifier | None = None) -> None:
        self.config = config
        self.notifier = notifier if notifier is not None else Notifier()
        self.current: SummaryRecord | None = None
        self._busy = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._busy.locked()

    def summarize(self, pdf_path: Path, mode: SummaryMode | None = None) -> SummaryRecord:
        """Summarize ``pdf_path``, optionally overriding the configured mode.

        Raises:
            BusyError: if another request of this session is still running.
        """
        if not self._busy.acquire(blocking=False):
            raise BusyError("A summarization is already in progress")
        try:
            config = self.config
            if mode is not None:
                config = dataclasses.replace(config, mode=mode)
            self.current = summarize_file(pdf_path, config, self.notifier)
            return self.current
        finally:
            self._busy.release()
