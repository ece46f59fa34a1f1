"""Batch processing — summarize every PDF under a directory.

Files are processed one at a time through a single ``SummarizerSession``, so
the one-request-at-a-time rule of a session holds in batch mode too.

Rendered summaries are written to ``{output_dir}/{pdf_stem}_summary.md``.  If
that path already exists a version suffix is appended (``_v2``, ``_v3``, ...).
Error records are reported but not written.
"""

import logging
import sys
from pathlib import Path

from tqdm.auto import tqdm

from docbrief.models import BatchReport, Config, FailedDocument
from docbrief.pipeline import SummarizerSession, operation_id_for
from docbrief.renderer import render_record

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# PDF discovery and output paths
# ---------------------------------------------------------------------------


def find_pdfs(source_dir: Path) -> list[Path]:
    """Return all PDF files found recursively under ``source_dir``, sorted."""
    return sorted(source_dir.rglob("*.pdf"))


def get_output_path(output_dir: Path, pdf_path: Path) -> Path:
    """Return ``output_dir / {stem}_summary.md``, creating ``output_dir``."""
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir / f"{pdf_path.stem}_summary.md"


def get_versioned_output_path(path: Path) -> Path:
    """Return ``path``, or the first free ``_v2``, ``_v3``, ... variant."""
    if not path.exists():
        return path

    version = 2
    while True:
        candidate = path.with_name(f"{path.stem}_v{version}{path.suffix}")
        if not candidate.exists():
            return candidate
        version += 1


# ---------------------------------------------------------------------------
# Batch runner
# ---------------------------------------------------------------------------


def run_batch(
    source_dir: Path,
    config: Config,
    session: SummarizerSession | None = None,
    show_raw: bool = False,
) -> BatchReport:
    """Summarize all PDFs under ``source_dir`` and return an aggregate report.

    A record counts as ``degraded`` when the request finished without an
    error but its last notification was ``failed`` (the AI reply could not be
    structured).

    Args:
        source_dir: Directory to scan for PDFs (recursive).
        config:     Runtime configuration.
        session:    Session to run requests through; one is created if omitted.
        show_raw:   Include extracted text in the written markdown.
    """
    session = session if session is not None else SummarizerSession(config)
    pdfs = find_pdfs(source_dir)
    total = len(pdfs)
    logger.info("Discovered PDFs: %d  (mode=%s)", total, config.mode)

    n_processed = 0
    written_ops: set[str] = set()
    failed: list[FailedDocument] = []

    with tqdm(
        total=total,
        desc="Summarize",
        unit="pdf",
        disable=not sys.stderr.isatty(),
    ) as progress:
        for idx, pdf_path in enumerate(pdfs, start=1):
            logger.info("  Processing [%d/%d]: %s", idx, total, pdf_path.name)
            operation_id = operation_id_for(pdf_path)
            session.notifier.dismiss(operation_id)
            record = session.summarize(pdf_path)

            if record.is_error:
                logger.error("  [%d/%d] Failed: %s", idx, total, record.error)
                failed.append(FailedDocument(pdf_path=str(pdf_path), error=record.error))
            else:
                output_path = get_versioned_output_path(
                    get_output_path(config.output_dir, pdf_path)
                )
                output_path.write_text(
                    render_record(record, title=pdf_path.name, show_raw=show_raw),
                    encoding="utf-8",
                )
                logger.info("  [%d/%d] Written: %s", idx, total, output_path)
                n_processed += 1
                written_ops.add(operation_id)

            progress.update(1)
            progress.set_postfix(ok=n_processed, failed=len(failed))

    degraded = [
        note
        for note in session.notifier.active()
        if note.status == "failed" and note.operation_id in written_ops
    ]
    for note in degraded:
        logger.warning("  Degraded %s: %s", note.operation_id, note.message)

    return BatchReport(
        processed=n_processed,
        degraded=len(degraded),
        failed=len(failed),
        failed_documents=failed,
    )
