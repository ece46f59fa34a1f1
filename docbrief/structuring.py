"""Coerce a free-form LLM summary into the structured record fields.

``structure_summary`` drives at most two request/parse cycles against the
completion service: the primary prompt first, then the strict prompt if the
first reply did not parse into a JSON object.  The attempt plan is a fixed
two-element tuple, so a third call cannot happen.

The outcome is either ``success`` with the structured fields of the parsed
object plus the caller's ``raw_text``, or ``exhausted``.  Building a degraded record on
exhaustion is the caller's job.  Completion errors (``LLMError``, including
``MissingCredentialError``) are not caught here: a transport failure ends the
request instead of spending the retry meant for unparseable replies.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Literal

from docbrief.jsontext import parse_json_safely, strip_code_fences
from docbrief.llm import CompletionClient, complete_text
from docbrief.models import STRUCTURED_FIELDS
from docbrief.notify import Notifier, post
from docbrief.prompts import build_primary_prompt, build_strict_prompt

logger = logging.getLogger(__name__)


class StructuringState(enum.Enum):
    IDLE = "idle"
    ATTEMPT1_PENDING = "attempt1_pending"
    ATTEMPT1_PARSED = "attempt1_parsed"
    ATTEMPT1_FAILED = "attempt1_failed"
    ATTEMPT2_PENDING = "attempt2_pending"
    ATTEMPT2_PARSED = "attempt2_parsed"
    ATTEMPT2_FAILED = "attempt2_failed"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class _Attempt:
    label: str
    build_prompt: Callable[[str], str]
    pending: StructuringState
    parsed: StructuringState
    failed: StructuringState


_ATTEMPT_PLAN: tuple[_Attempt, _Attempt] = (
    _Attempt(
        label="primary",
        build_prompt=build_primary_prompt,
        pending=StructuringState.ATTEMPT1_PENDING,
        parsed=StructuringState.ATTEMPT1_PARSED,
        failed=StructuringState.ATTEMPT1_FAILED,
    ),
    _Attempt(
        label="strict",
        build_prompt=build_strict_prompt,
        pending=StructuringState.ATTEMPT2_PENDING,
        parsed=StructuringState.ATTEMPT2_PARSED,
        failed=StructuringState.ATTEMPT2_FAILED,
    ),
)

MAX_ATTEMPTS = len(_ATTEMPT_PLAN)


@dataclass(frozen=True)
class StructuringOutcome:
    """Terminal result of ``structure_summary``.

    Attributes:
        status:   ``"success"`` or ``"exhausted"``.
        value:    On success, the structured fields of the parsed object with
                  ``raw_text`` set;
                  ``None`` when exhausted.
        attempts: Completion calls made (1 or 2).
        states:   Every state visited, starting at ``IDLE``.
    """

    status: Literal["success", "exhausted"]
    value: dict[str, Any] | None
    attempts: int
    states: tuple[StructuringState, ...]

    @property
    def succeeded(self) -> bool:
        return self.status == "success"


def structure_summary(
    client: CompletionClient,
    text: str,
    raw_text: str,
    notifier: Notifier | None = None,
    operation_id: str = "structure",
) -> StructuringOutcome:
    """Ask the completion service to restate ``text`` as a JSON record.

    Args:
        client:       Completion client.
        text:         The free-form summary to structure.
        raw_text:     Extracted document text, copied onto a successful value.
        notifier:     Receives status updates under ``operation_id``.
        operation_id: Key for notifications of this request.

    Raises:
        LLMError: if a completion call fails.
    """
    post(notifier, operation_id, "fetching", "Requesting structured summary")
    states = [StructuringState.IDLE]

    for number, attempt in enumerate(_ATTEMPT_PLAN, start=1):
        states.append(attempt.pending)
        reply = complete_text(client, attempt.build_prompt(text))
        parsed = parse_json_safely(strip_code_fences(reply))

        if isinstance(parsed, dict):
            states.append(attempt.parsed)
            logger.info(
                "Structured reply parsed on attempt %d/%d (%s prompt)",
                number,
                MAX_ATTEMPTS,
                attempt.label,
            )
            post(notifier, operation_id, "succeeded", "Structured summary ready")
            return StructuringOutcome(
                status="success",
                value=_structured_subset(parsed, raw_text),
                attempts=number,
                states=tuple(states),
            )

        states.append(attempt.failed)
        logger.warning(
            "Attempt %d/%d (%s prompt) did not return a JSON object: %r",
            number,
            MAX_ATTEMPTS,
            attempt.label,
            reply[:200],
        )
        if number < MAX_ATTEMPTS:
            post(
                notifier, operation_id, "retrying", "Retrying with stricter prompt"
            )

    states.append(StructuringState.EXHAUSTED)
    post(
        notifier,
        operation_id,
        "failed",
        f"No structured reply after {MAX_ATTEMPTS} attempts",
    )
    return StructuringOutcome(
        status="exhausted", value=None, attempts=MAX_ATTEMPTS, states=tuple(states)
    )


def _structured_subset(parsed: dict[str, Any], raw_text: str) -> dict[str, Any]:
    """Keep only the requested fields of ``parsed`` and attach ``raw_text``.

    Keys the model was never asked for (``error``, its own ``raw_text``, or
    anything else) are dropped, so a parsed reply always yields a data record.
    """
    value = {key: parsed[key] for key in STRUCTURED_FIELDS if key in parsed}
    value["raw_text"] = raw_text
    return value
