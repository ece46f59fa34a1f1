"""Advisory status notifications keyed by operation.

A summarization request posts ``fetching``/``retrying``/``succeeded``/
``failed`` updates under one operation id.  The board keeps only the latest
update per id, so a new status replaces the previous one instead of stacking
(the way a toast with a fixed id is updated in place).  Every update is also
logged.  Notifications never block or fail the operation that posts them.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Literal

logger = logging.getLogger(__name__)

NotificationStatus = Literal["fetching", "retrying", "succeeded", "failed"]


@dataclass(frozen=True)
class Notification:
    operation_id: str
    status: NotificationStatus
    message: str


class Notifier:
    """Holds the latest ``Notification`` per operation id.

    Args:
        on_update: Optional callback invoked with each new notification, e.g.
            to redraw a status line.  Exceptions it raises are logged and
            discarded.
    """

    def __init__(self, on_update: Callable[[Notification], None] | None = None) -> None:
        self._latest: dict[str, Notification] = {}
        self._lock = threading.Lock()
        self._on_update = on_update

    def notify(
        self, operation_id: str, status: NotificationStatus, message: str
    ) -> Notification:
        note = Notification(operation_id=operation_id, status=status, message=message)
        with self._lock:
            self._latest[operation_id] = note

        level = logging.WARNING if status == "failed" else logging.INFO
        logger.log(level, "[%s] %s: %s", operation_id, status, message)

        if self._on_update is not None:
            try:
                self._on_update(note)
            except Exception:
                logger.exception("Notification callback failed for %s", operation_id)
        return note

    def latest(self, operation_id: str) -> Notification | None:
        with self._lock:
            return self._latest.get(operation_id)

    def active(self) -> list[Notification]:
        """Current notification of every operation, oldest operation first."""
        with self._lock:
            return list(self._latest.values())

    def dismiss(self, operation_id: str) -> None:
        with self._lock:
            self._latest.pop(operation_id, None)


def post(
    notifier: Notifier | None,
    operation_id: str,
    status: NotificationStatus,
    message: str,
) -> None:
    """``notifier.notify(...)`` when a notifier is given; no-op otherwise."""
    if notifier is not None:
        notifier.notify(operation_id, status, message)
