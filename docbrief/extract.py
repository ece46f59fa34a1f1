"""PDF text extraction — docling with a pypdf fallback.

Extraction is stateless: nothing is cached or written next to the PDF.  Any
failure, including a document that yields no text, surfaces as
``ExtractionError`` and ends the request before summarization.
"""

import logging
import threading
from pathlib import Path

from docling.document_converter import DocumentConverter
from pypdf import PdfReader

from docbrief.models import ExtractionError

logger = logging.getLogger(__name__)

_DOCLING_LOCK = threading.Lock()


def extract_text(
    pdf_path: Path,
    extractor: str = "auto",
    max_chars: int | None = None,
) -> str:
    """Extract the text of a PDF.

    Args:
        pdf_path:  Path to the PDF file.
        extractor: ``auto`` (docling, pypdf on failure), ``docling`` or
                   ``pypdf``.
        max_chars: Truncate the result to this many characters when set.

    Raises:
        ExtractionError: if the file is missing, every extractor fails, or
            the document contains no text.
    """
    if not pdf_path.is_file():
        raise ExtractionError(f"File not found: {pdf_path}")

    logger.info("Running %s extraction on: %s", extractor, pdf_path.name)
    text = _extract(pdf_path, extractor=extractor)
    if not text.strip():
        raise ExtractionError(f"No text extracted from {pdf_path.name}")

    logger.info("Extraction complete: %s chars", f"{len(text):,}")
    if max_chars is not None and len(text) > max_chars:
        logger.warning(
            "Truncating %s from %s to %s chars",
            pdf_path.name,
            f"{len(text):,}",
            f"{max_chars:,}",
        )
        text = text[:max_chars]
    return text


def _extract(pdf_path: Path, extractor: str) -> str:
    if extractor == "docling":
        return _run_docling(pdf_path)
    if extractor == "pypdf":
        return _run_pypdf(pdf_path)
    return _run_docling_with_fallback(pdf_path)


def _run_docling_with_fallback(pdf_path: Path) -> str:
    try:
        return _run_docling(pdf_path)
    except ExtractionError as docling_exc:
        logger.warning(
            "Docling failed for %s; attempting pypdf fallback: %s",
            pdf_path.name,
            docling_exc,
        )
        try:
            return _run_pypdf(pdf_path)
        except ExtractionError as fallback_exc:
            raise ExtractionError(
                f"Failed to extract {pdf_path.name}: docling and pypdf both failed "
                f"({fallback_exc})"
            ) from (docling_exc.__cause__ or docling_exc)


def _run_docling(pdf_path: Path) -> str:
    """Run docling on *pdf_path* and return its markdown export.

    Raises:
        ExtractionError: wrapping any exception raised by docling.
    """
    try:
        # Concurrent docling conversions are not reliably thread-safe.
        with _DOCLING_LOCK:
            result = DocumentConverter().convert(str(pdf_path))
        return result.document.export_to_markdown()
    except Exception as e:
        raise ExtractionError(f"Failed to extract {pdf_path.name}: {e}") from e


def _run_pypdf(pdf_path: Path) -> str:
    try:
        reader = PdfReader(str(pdf_path))
        pages = [page.extract_text() or "" for page in reader.pages]
    except Exception as e:
        raise ExtractionError(f"Failed to extract {pdf_path.name}: {e}") from e
    return "\n\n".join(pages).strip()
