"""Read-side normalization of summary records.

A record reaching the presentation layer may come from the structuring
pipeline (an LLM-produced JSON object), from a degraded fallback, or from the
local summarizer.  LLM output in particular can put a bare string where a list
belongs, invent confidence labels, or drop keys.  ``normalize_record`` maps
any such value onto a valid ``SummaryRecord`` and never raises, so rendering
code does not need to branch on shape.

Per field, the input is one of: absent, scalar, sequence, or some other type.
Each field has one coercion rule over those four cases.
"""

import logging
from collections.abc import Mapping
from typing import Any

from docbrief.models import CONFIDENCE_LEVELS, SummaryRecord

logger = logging.getLogger(__name__)


def normalize_record(value: Any) -> SummaryRecord:
    """Coerce ``value`` into a ``SummaryRecord``.

    Rules:
        - ``relevance_to_officials`` / ``action_items``: a list or tuple is
          kept (items as strings, ``None`` items dropped); any truthy string,
          number or boolean becomes a one-element tuple; empty, zero, and
          other types (mappings included) give ``()``.
        - ``confidence_estimate``: a recognised level (case-insensitive) is
          kept, anything else becomes ``"unknown"``.
        - ``short_summary`` / ``raw_text``: strings pass through, missing
          becomes ``""``.
        - A truthy ``error`` makes an error record; only ``error`` and
          ``raw_text`` are carried over.

    Values that are not mappings (``None``, lists, strings) yield an empty
    data record.  Normalizing an already normalized record returns an equal
    record.
    """
    if isinstance(value, SummaryRecord):
        value = value.model_dump()
    if not isinstance(value, Mapping):
        logger.debug("Normalizing non-mapping record of type %s", type(value).__name__)
        return SummaryRecord()

    raw_text = _as_text(value.get("raw_text"))
    error = value.get("error")
    if error:
        return SummaryRecord(error=_as_text(error), raw_text=raw_text)

    return SummaryRecord(
        short_summary=_as_text(value.get("short_summary")),
        relevance_to_officials=_as_items(value.get("relevance_to_officials")),
        action_items=_as_items(value.get("action_items")),
        confidence_estimate=_as_confidence(value.get("confidence_estimate")),
        raw_text=raw_text,
    )


def _as_items(value: Any) -> tuple[str, ...]:
    if isinstance(value, (list, tuple)):
        return tuple(_as_text(item) for item in value if item is not None)
    if not value or not isinstance(value, (str, int, float)):
        return ()
    if isinstance(value, bool):
        # JSON spelling, so a model answering `true` shows "true".
        return ("true",)
    return (str(value),)


def _as_confidence(value: Any) -> str:
    if isinstance(value, str):
        candidate = value.strip().lower()
        if candidate in CONFIDENCE_LEVELS:
            return candidate
    return "unknown"


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        # Some models answer with a list of sentences.
        return " ".join(_as_text(item) for item in value if item is not None)
    return str(value)
