"""Render a ``SummaryRecord`` as markdown (or JSON) for the CLI.

Whatever arrives here goes through ``normalize_record`` first, so a record
from the structuring pipeline, a degraded fallback, or local mode all render
through the same unconditional code.  No file I/O is performed here; the
caller (``cli.py`` / ``batch.py``) decides where the string goes.
"""

import logging
from typing import Any, Sequence

from docbrief.models import SummaryRecord
from docbrief.normalize import normalize_record

logger = logging.getLogger(__name__)

NO_SUMMARY_PLACEHOLDER = "No summary available."
EMPTY_LIST_PLACEHOLDER = "N/A"


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def render_record(record: Any, title: str | None = None, show_raw: bool = False) -> str:
    """Convert any record-like value to a markdown string.

    Args:
        record:   A ``SummaryRecord`` or a mapping in the same shape.
        title:    Optional document title for the top-level heading.
        show_raw: Append the extracted document text.

    Returns:
        The error panel for error records, otherwise the summary with its
        derived values.
    """
    normalized = normalize_record(record)
    heading = f"# Summary: {title}" if title else "# Summary"

    if normalized.is_error:
        body = _render_error(normalized)
    else:
        body = _render_data(normalized)

    parts = [heading, body]
    if show_raw and normalized.raw_text:
        parts.append(_render_raw_text(normalized.raw_text))
    return "\n\n".join(parts) + "\n"


def render_json(record: Any) -> str:
    """Full record as indented JSON."""
    return normalize_record(record).model_dump_json(indent=2)


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def _render_error(record: SummaryRecord) -> str:
    return f"## Error\n\n> {record.error}"


def _render_data(record: SummaryRecord) -> str:
    summary = record.short_summary.strip() or NO_SUMMARY_PLACEHOLDER
    return (
        f"## Short Summary\n\n{summary}\n\n"
        "## Derived Values\n\n"
        f"**Relevance to Officials:**\n{_render_bullets(record.relevance_to_officials)}\n\n"
        f"**Action Items:**\n{_render_bullets(record.action_items)}\n\n"
        f"**Confidence Estimate:** {record.confidence_estimate}"
    )


def _render_raw_text(raw_text: str) -> str:
    return f"---\n\n## Raw Text\n\n```text\n{raw_text.strip()}\n```"


def _render_bullets(items: Sequence[str]) -> str:
    """Render a list of strings as markdown bullet points."""
    if not items:
        return EMPTY_LIST_PLACEHOLDER
    return "\n".join(f"- {item}" for item in items)
