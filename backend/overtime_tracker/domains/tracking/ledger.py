from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from overtime_tracker.models import OvertimeEntry, OvertimeStatus, TrackingSession

from . import accountant


def describe(session: TrackingSession) -> str | None:
    """Free-text project names have no project row, so they travel in the description."""
    if session.project_name and not session.project_id:
        if session.memo:
            return f"{session.project_name} - {session.memo}"
        return session.project_name
    return session.memo or None


def build_entry(session: TrackingSession, end_time: datetime) -> OvertimeEntry:
    """Ledger entry for a session whose breaks are already folded in."""
    durations = accountant.measure(session, end_time)
    return OvertimeEntry(
        employee_id=session.employee_id,
        project_id=session.project_id,
        date=session.start_time.date(),
        overtime_type=session.overtime_type,
        start_time=session.start_time,
        end_time=end_time,
        total_hours=durations.total_hours,
        actual_working_hours=durations.working_hours,
        total_break_seconds=session.total_break_seconds,
        description=describe(session),
        status=OvertimeStatus.PENDING.value,
    )


def write_entry(db: Session, session: TrackingSession, end_time: datetime) -> OvertimeEntry:
    """Stage the entry and the session's removal in the caller's transaction."""
    entry = build_entry(session, end_time)
    db.add(entry)
    db.delete(session)
    return entry
