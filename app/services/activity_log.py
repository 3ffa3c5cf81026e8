"""Append-only activity (audit) log writer."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from app.models import ActivityRecord
from app.repositories.base import UnitOfWork

logger = logging.getLogger(__name__)

ACTIVITY_REGISTERED = "registered"
ACTIVITY_LOGGED_IN = "logged in"
ACTIVITY_EMAIL_VERIFIED = "email verified"
ACTIVITY_PROFILE_UPDATED = "profile updated"
ACTIVITY_ACCOUNT_DELETED = "account deleted"


class ActivityLogWriter:
    """
    Writes one ActivityRecord per call in its own commit.

    Called after the triggering operation has committed. A failed write is rolled
    back and reported as a warning; it never changes the operation's outcome.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._uow = uow
        self._clock = clock or (lambda: datetime.now(UTC))

    def append(self, account_id: str, label: str) -> bool:
        """Persist the record; return False when the write failed."""
        record = ActivityRecord(
            account_id=account_id,
            activity=label,
            occurred_at=self._clock(),
        )
        try:
            self._uow.activities.add(record)
            self._uow.commit()
        except Exception as e:
            self._uow.rollback()
            logger.warning(
                "Activity log write failed",
                extra={"account_id": account_id, "activity": label, "reason": str(e)[:200]},
            )
            return False
        return True
