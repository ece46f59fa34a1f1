"""Turning LLM reply text into a JSON value without ever raising.

``strip_code_fences`` removes the markdown fence most models wrap JSON in, and
``parse_json_safely`` is the only JSON entry point the structuring code uses:
it returns the parsed value or the ``ABSENT`` marker.  ``ABSENT`` is distinct
from ``None`` because ``"null"`` is a perfectly valid document.
"""

import enum
import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

# Opening fence with an optional language tag (```json, ```JSON, ```jsonc ...).
_LEADING_FENCE = re.compile(r"\A```[A-Za-z0-9_+-]*[ \t]*(?:\r?\n)?")
_TRAILING_FENCE = re.compile(r"(?:\r?\n)?[ \t]*```\Z")


class _Absent(enum.Enum):
    ABSENT = "ABSENT"

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent.ABSENT
"""Returned by ``parse_json_safely`` when the text is not a JSON document."""


def strip_code_fences(text: object) -> str:
    """Remove a leading and a trailing fence marker plus surrounding whitespace.

    Text without fences is only trimmed, so the function is idempotent on
    clean input.  Anything that is not a string yields ``""``.
    """
    if not isinstance(text, str):
        return ""
    cleaned = text.strip()
    cleaned = _LEADING_FENCE.sub("", cleaned, count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def parse_json_safely(text: object) -> Any:
    """Parse ``text`` as one complete JSON document.

    Returns:
        The parsed value, or ``ABSENT`` if ``text`` is not a string or is not
        valid JSON in its entirety.
    """
    if not isinstance(text, str):
        return ABSENT
    try:
        return json.loads(text)
    except (ValueError, RecursionError) as exc:
        logger.debug("Not a JSON document: %s", exc)
        return ABSENT
