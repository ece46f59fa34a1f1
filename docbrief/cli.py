"""Command-line interface for docbrief.

Entry point: ``docbrief`` (configured in ``pyproject.toml``).

Usage:
    docbrief --file PDF [options]     # summarize one PDF, print to stdout
    docbrief --source DIR [options]   # summarize every PDF under DIR

Key options:
    --mode local|ai, --model, --base-url, --timeout, --max-output-tokens,
    --max-chars, --extractor, --output-dir, --show-raw, --json,
    --verbose/--no-verbose, --log-file.

``--source`` and ``--file`` are mutually exclusive; exactly one must be
supplied.  In AI mode the CLI first checks that the root host of
``--base-url`` is reachable.
"""

import argparse
import logging
import os
import sys
import urllib.error
import urllib.parse
import urllib.request
from pathlib import Path

from dotenv import load_dotenv

from docbrief.batch import run_batch
from docbrief.log import setup_logging
from docbrief.models import DEFAULT_BASE_URL, DEFAULT_MODEL, Config, _DEFAULT_MAX_CHARS
from docbrief.pipeline import SummarizerSession
from docbrief.renderer import render_json, render_record

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    parsed = int(value)
    if parsed < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return parsed


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments, validate the environment, and run docbrief."""
    load_dotenv()

    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        verbose=args.verbose,
        log_file=Path(args.log_file) if args.log_file else None,
    )

    config = Config(
        base_url=args.base_url,
        model=args.model,
        timeout_s=args.timeout,
        max_output_tokens=args.max_output_tokens,
        max_chars=args.max_chars,
        extractor=args.extractor,
        mode=args.mode,
        local_sentences=args.sentences,
        output_dir=Path(args.output_dir),
        verbose=args.verbose,
    )

    if config.mode == "ai":
        _check_backend(config.base_url)

    if args.file:
        _run_single(Path(args.file), config, as_json=args.json, show_raw=args.show_raw)
    else:
        _run_batch(Path(args.source), config, show_raw=args.show_raw)


# ---------------------------------------------------------------------------
# Single-file mode
# ---------------------------------------------------------------------------


def _run_single(pdf_path: Path, config: Config, as_json: bool, show_raw: bool) -> None:
    """Summarize one PDF and print the rendered record to stdout."""
    if not pdf_path.exists():
        logger.error("File not found: %s", pdf_path)
        sys.exit(1)

    logger.info("Processing: %s (mode=%s)", pdf_path.name, config.mode)
    session = SummarizerSession(config)
    record = session.summarize(pdf_path)

    if as_json:
        print(render_json(record))
    else:
        print(render_record(record, title=pdf_path.name, show_raw=show_raw))

    if record.is_error:
        sys.exit(1)


# ---------------------------------------------------------------------------
# Batch mode
# ---------------------------------------------------------------------------


def _run_batch(source_dir: Path, config: Config, show_raw: bool) -> None:
    """Scan ``source_dir`` for PDFs and summarize each one."""
    if not source_dir.exists():
        logger.error("Directory not found: %s", source_dir)
        sys.exit(1)

    report = run_batch(source_dir, config, show_raw=show_raw)

    logger.info(
        "Done — processed: %d (degraded: %d), failed: %d",
        report.processed,
        report.degraded,
        report.failed,
    )

    if report.failed_documents:
        logger.error("Failed documents:")
        for doc in report.failed_documents:
            logger.error("  %s: %s", doc.pdf_path, doc.error)
        sys.exit(1)


# ---------------------------------------------------------------------------
# Backend health check
# ---------------------------------------------------------------------------


def _check_backend(base_url: str) -> None:
    """Exit early when the completion backend's host cannot be reached."""
    parsed = urllib.parse.urlparse(base_url)
    health_url = f"{parsed.scheme}://{parsed.netloc}"
    try:
        with urllib.request.urlopen(health_url, timeout=5):
            pass
    except urllib.error.HTTPError:
        # Any HTTP status means the host is up; remote APIs reject the bare root.
        return
    except Exception as exc:
        logger.error("Cannot reach LLM backend at %s\n  Details: %s", health_url, exc)
        sys.exit(1)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docbrief",
        description=(
            "Summarize PDF documents locally or with an LLM. "
            "Processes a single PDF (--file) or a directory of PDFs (--source)."
        ),
    )

    source_group = parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument(
        "--file",
        metavar="PDF",
        help="Path to a single PDF file to summarize.",
    )
    source_group.add_argument(
        "--source",
        metavar="DIR",
        help="Directory to scan recursively for PDF files.",
    )

    parser.add_argument(
        "--mode",
        choices=["local", "ai"],
        default="local",
        help="local: extractive summary, no network. ai: LLM summary (default: local).",
    )
    _default_model = os.environ.get("LLM_MODEL", DEFAULT_MODEL)
    parser.add_argument(
        "--model",
        metavar="MODEL",
        default=_default_model,
        help=f"LLM model identifier (default: LLM_MODEL env var, currently {_default_model!r}).",
    )
    parser.add_argument(
        "--base-url",
        metavar="URL",
        default=DEFAULT_BASE_URL,
        help=f"OpenAI-compatible API base URL (default: {DEFAULT_BASE_URL}).",
    )
    parser.add_argument(
        "--timeout",
        metavar="S",
        type=_positive_int,
        default=120,
        help="Per-call LLM timeout in seconds (default: 120).",
    )
    parser.add_argument(
        "--max-output-tokens",
        metavar="N",
        type=_positive_int,
        default=None,
        help="Maximum tokens the LLM may generate per call (default: no limit).",
    )
    parser.add_argument(
        "--max-chars",
        metavar="N",
        type=_positive_int,
        default=_DEFAULT_MAX_CHARS,
        help=f"Maximum characters of extracted text used (default: {_DEFAULT_MAX_CHARS:,}).",
    )
    parser.add_argument(
        "--extractor",
        choices=["auto", "docling", "pypdf"],
        default="auto",
        help="PDF extraction backend strategy (default: auto).",
    )
    parser.add_argument(
        "--sentences",
        metavar="N",
        type=_positive_int,
        default=5,
        help="Sentences kept by the local summarizer (default: 5).",
    )
    parser.add_argument(
        "--output-dir",
        metavar="DIR",
        default="summaries",
        help="Where batch mode writes summaries (default: summaries).",
    )
    parser.add_argument(
        "--show-raw",
        action="store_true",
        default=False,
        help="Include the extracted document text in the output.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Single-file mode: print the full record as JSON instead of markdown.",
    )
    parser.add_argument(
        "--verbose",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Enable DEBUG-level logging (default: off).",
    )
    parser.add_argument(
        "--log-file",
        metavar="FILE",
        default=None,
        help="Also write log output to FILE.",
    )

    return parser


if __name__ == "__main__":
    main()
