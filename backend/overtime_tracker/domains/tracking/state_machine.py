"""Start, pause, resume and end of overtime tracking sessions.

A session moves ``Active -> Paused -> Active`` any number of times and ends
from either state. Ending removes the session and leaves one ledger entry;
there is no stored "ended" state.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from overtime_tracker.core.clock import Clock, utcnow
from overtime_tracker.core.errors import (
    ConflictError,
    InvalidInputError,
    InvalidStateError,
    PolicyViolationError,
    TrackingError,
)
from overtime_tracker.core.logging import get_logger
from overtime_tracker.core.observability import get_meter
from overtime_tracker.domains.office_hours.calendar import OfficeHoursCalendar
from overtime_tracker.domains.projects.directory import ProjectDirectory
from overtime_tracker.models import OvertimeEntry, OvertimeType, TrackingBreak, TrackingSession

from . import accountant, ledger
from .store import ACTIVE_SESSION_EXISTS, SessionStore

logger = get_logger(__name__)
meter = get_meter(__name__)

sessions_started = meter.create_counter("overtime.sessions.started", description="Tracking sessions started")
sessions_ended = meter.create_counter("overtime.sessions.ended", description="Tracking sessions ended")
break_seconds_recorded = meter.create_counter(
    "overtime.breaks.seconds", unit="s", description="Break time folded into sessions"
)

INVALID_TYPE = "Invalid overtime_type. Must be one of: " + ", ".join(t.value for t in OvertimeType)
INSIDE_OFFICE_HOURS = "Overtime tracking can only be started outside office hours or on off-days."
ALREADY_PAUSED = "Session is already paused"
NOT_PAUSED = "Session is not paused"


def parse_overtime_type(value: str | OvertimeType) -> OvertimeType:
    try:
        return OvertimeType(value)
    except ValueError as exc:
        raise InvalidInputError(INVALID_TYPE) from exc


def fold_open_break(session: TrackingSession, now: datetime) -> int:
    """Close the break in progress and add it to the session total.

    Returns the seconds added. Used by resume, and by end on a paused session.
    """
    delta = accountant.open_break_seconds(session, now)
    open_break = session.open_break()
    if open_break is not None:
        open_break.break_end_time = now
        open_break.break_duration_seconds = delta
    session.total_break_seconds = session.total_break_seconds + delta
    session.is_paused = False
    session.last_pause_time = None
    return delta


class TrackingStateMachine:
    def __init__(
        self,
        db: Session,
        *,
        calendar: OfficeHoursCalendar,
        directory: ProjectDirectory,
        clock: Clock = utcnow,
        retry_limit: int = 3,
    ) -> None:
        self.db = db
        self.store = SessionStore(db, retry_limit=retry_limit)
        self.calendar = calendar
        self.directory = directory
        self.clock = clock

    def current(self, employee_id: str) -> TrackingSession | None:
        return self.store.get(employee_id)

    def start(
        self,
        employee_id: str,
        overtime_type: str | OvertimeType,
        *,
        project_id: int | None = None,
        project_name: str | None = None,
        memo: str | None = None,
    ) -> TrackingSession:
        kind = parse_overtime_type(overtime_type)
        now = self.clock()
        try:
            if project_id is not None and not self.directory.exists(project_id):
                raise InvalidInputError(f"Project {project_id} not found")
            if self.store.exists(employee_id):
                raise ConflictError(ACTIVE_SESSION_EXISTS)
            if self.calendar.is_within_office_hours(now):
                logger.info("tracking_start_rejected", employee_id=employee_id, reason="office_hours")
                raise PolicyViolationError(INSIDE_OFFICE_HOURS)
        except TrackingError:
            self.db.rollback()
            raise

        # A concurrent start that passed the same checks loses on the primary key.
        session = self.store.create(
            TrackingSession(
                employee_id=employee_id,
                overtime_type=kind.value,
                project_id=project_id,
                project_name=(project_name or "").strip() or None,
                memo=(memo or "").strip() or None,
                start_time=now,
                is_paused=False,
                last_pause_time=None,
                total_break_seconds=0,
            )
        )
        sessions_started.add(1, {"overtime_type": kind.value})
        logger.info("tracking_started", employee_id=employee_id, overtime_type=kind.value)
        return session

    def pause(self, employee_id: str) -> TrackingSession:
        def change(session: TrackingSession) -> TrackingSession:
            if session.is_paused:
                raise InvalidStateError(ALREADY_PAUSED)
            now = self.clock()
            session.is_paused = True
            session.last_pause_time = now
            session.breaks.append(TrackingBreak(break_start_time=now))
            return session

        session = self.store.mutate(employee_id, change)
        logger.info("tracking_paused", employee_id=employee_id)
        return session

    def resume(self, employee_id: str) -> TrackingSession:
        def change(session: TrackingSession) -> tuple[TrackingSession, int]:
            if not session.is_paused:
                raise InvalidStateError(NOT_PAUSED)
            return session, fold_open_break(session, self.clock())

        session, delta = self.store.mutate(employee_id, change)
        break_seconds_recorded.add(delta)
        logger.info("tracking_resumed", employee_id=employee_id, break_seconds=delta)
        return session

    def end(self, employee_id: str) -> OvertimeEntry:
        def change(session: TrackingSession) -> tuple[OvertimeEntry, int]:
            now = self.clock()
            delta = fold_open_break(session, now) if session.is_paused else 0
            return ledger.write_entry(self.db, session, now), delta

        entry, delta = self.store.mutate(employee_id, change)
        if delta:
            break_seconds_recorded.add(delta)
        sessions_ended.add(1, {"overtime_type": entry.overtime_type})
        logger.info(
            "tracking_ended",
            employee_id=employee_id,
            overtime_id=entry.id,
            total_hours=entry.total_hours,
            actual_working_hours=entry.actual_working_hours,
        )
        return entry
