"""Persistence of active tracking sessions, one row per employee.

Creation is guarded by the ``employee_id`` primary key: of two concurrent
inserts for the same employee exactly one commits, the other surfaces as
``ConflictError``. Updates and deletes go through SQLAlchemy's version counter,
so every write is conditional on the row still being the one that was read.
A stale write is rolled back and the caller's change is re-evaluated against
fresh state.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from overtime_tracker.core.errors import ConcurrentModificationError, ConflictError, NotFoundError
from overtime_tracker.core.logging import get_logger
from overtime_tracker.models import TrackingSession

logger = get_logger(__name__)

T = TypeVar("T")

ACTIVE_SESSION_EXISTS = "An active tracking session already exists. Please end it first."
NO_ACTIVE_SESSION = "No active tracking session found"


class SessionStore:
    def __init__(self, db: Session, retry_limit: int = 3) -> None:
        self.db = db
        self.retry_limit = retry_limit

    def get(self, employee_id: str) -> TrackingSession | None:
        """Latest committed session for the employee, bypassing the identity map."""
        return (
            self.db.query(TrackingSession)
            .filter(TrackingSession.employee_id == employee_id)
            .populate_existing()
            .one_or_none()
        )

    def exists(self, employee_id: str) -> bool:
        return self.get(employee_id) is not None

    def create(self, session: TrackingSession) -> TrackingSession:
        self.db.add(session)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.info("tracking_start_conflict", employee_id=session.employee_id)
            raise ConflictError(ACTIVE_SESSION_EXISTS) from exc
        self.db.refresh(session)
        return session

    def mutate(self, employee_id: str, change: Callable[[TrackingSession], T]) -> T:
        """Apply ``change`` to the employee's session and commit it atomically.

        ``change`` may edit the session, add rows, or delete the session; all of
        it lands in one commit. It is called again on fresh state if another
        writer got there first.
        """
        for attempt in range(1, self.retry_limit + 1):
            session = self.get(employee_id)
            if session is None:
                self.db.rollback()
                raise NotFoundError(NO_ACTIVE_SESSION)
            try:
                result = change(session)
                self.db.commit()
            except StaleDataError:
                self.db.rollback()
                logger.warning("tracking_write_contention", employee_id=employee_id, attempt=attempt)
                continue
            except Exception:
                self.db.rollback()
                raise
            return result

        raise ConcurrentModificationError(
            "The tracking session changed while the request was processed. Please retry."
        )
