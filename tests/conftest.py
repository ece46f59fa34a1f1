"""Shared pytest fixtures for the docbrief test suite."""

import json
import logging
from unittest.mock import MagicMock

import pytest


# ---------------------------------------------------------------------------
# Logger isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_docbrief_logger():
    """Clear the docbrief logger between tests.

    ``main()`` calls ``setup_logging()``, which attaches handlers and sets
    ``propagate=False``.  Without this fixture that state leaks into later
    tests and breaks ``caplog`` capture.
    """
    logger = logging.getLogger("docbrief")
    for h in logger.handlers[:]:
        try:
            h.close()
        except Exception:
            pass
        logger.removeHandler(h)
    logger.propagate = True
    yield
    for h in logger.handlers[:]:
        try:
            h.close()
        except Exception:
            pass
        logger.removeHandler(h)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

DOCUMENT_TEXT = (
    "Notice inviting tender for road maintenance in Ward 12. "
    "The deadline for bids is 15 September 2025. "
    "Bidders must submit technical and financial documents online. "
    "The estimated tender value is $250,000. "
    "Late submissions will not be considered."
)

FREEFORM_SUMMARY = (
    "This notice invites bids for road maintenance in Ward 12. Bids are due "
    "15 September 2025 and must include technical and financial documents."
)

STRUCTURED_DICT = {
    "short_summary": "Tender for Ward 12 road maintenance; bids due 15 Sep 2025.",
    "relevance_to_officials": ["Deadline: 15 September 2025", "Value: $250,000"],
    "action_items": ["Prepare bid", "Upload documents"],
    "confidence_estimate": "high",
}


@pytest.fixture
def document_text() -> str:
    return DOCUMENT_TEXT


@pytest.fixture
def structured_dict() -> dict:
    return json.loads(json.dumps(STRUCTURED_DICT))


@pytest.fixture
def make_client():
    """Build a mock completion client that replies with ``replies`` in order."""

    def _make(*replies: str) -> MagicMock:
        client = MagicMock()
        client.model = "test-model"
        client.base_url = "http://localhost:1234/v1"
        client.complete.side_effect = [MagicMock(text=r) for r in replies]
        return client

    return _make
