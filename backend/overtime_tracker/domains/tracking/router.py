from datetime import datetime
from typing import Literal, Union

from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from overtime_tracker.core.clock import Clock, get_clock
from overtime_tracker.core.config import settings
from overtime_tracker.db.session import begin_read_only, get_session
from overtime_tracker.domains.office_hours.calendar import DatabaseOfficeHoursCalendar, OfficeHoursCalendar
from overtime_tracker.domains.overtime.router import OvertimeEntryOut, entry_out
from overtime_tracker.domains.projects.directory import ProjectDirectory
from overtime_tracker.models import OvertimeType, TrackingSession

from . import accountant
from .state_machine import TrackingStateMachine

router = APIRouter(prefix="/employees/{employee_id}/overtime-tracking", tags=["overtime-tracking"])


class ProjectOut(BaseModel):
    id: int
    project_name: str
    client_name: str | None = None


class BreakOut(BaseModel):
    id: int
    break_start_time: datetime
    break_end_time: datetime | None = None
    break_duration_seconds: int | None = None


class SessionOut(BaseModel):
    employee_id: str
    overtime_type: OvertimeType
    project_id: int | None = None
    project_name: str | None = None
    project: ProjectOut | None = None
    memo: str | None = None
    start_time: datetime
    is_paused: bool
    last_pause_time: datetime | None = None
    total_break_seconds: int
    breaks: list[BreakOut] = []

    # Derived at observed_at from the timestamps above.
    observed_at: datetime
    elapsed_seconds: int
    break_seconds: int
    working_seconds: int


class SessionRead(BaseModel):
    session: SessionOut | None
    server_time: datetime
    poll_interval_seconds: float


class StartRequest(BaseModel):
    overtime_type: str
    project_id: int | None = None
    project_name: str | None = Field(default=None, max_length=200)
    memo: str | None = None


class TransitionRequest(BaseModel):
    action: Literal["pause", "resume", "end"]


def session_out(session: TrackingSession, now: datetime) -> SessionOut:
    durations = accountant.measure(session, now)
    project = session.project
    return SessionOut(
        employee_id=session.employee_id,
        overtime_type=session.overtime_type,
        project_id=session.project_id,
        project_name=session.project_name,
        project=(
            ProjectOut(id=project.id, project_name=project.project_name, client_name=project.client_name)
            if project
            else None
        ),
        memo=session.memo,
        start_time=session.start_time,
        is_paused=session.is_paused,
        last_pause_time=session.last_pause_time,
        total_break_seconds=session.total_break_seconds,
        breaks=[
            BreakOut(
                id=item.id,
                break_start_time=item.break_start_time,
                break_end_time=item.break_end_time,
                break_duration_seconds=item.break_duration_seconds,
            )
            for item in session.breaks
        ],
        observed_at=now,
        elapsed_seconds=durations.elapsed_seconds,
        break_seconds=durations.break_seconds,
        working_seconds=durations.working_seconds,
    )


def get_office_hours_calendar(db: Session = Depends(get_session)) -> OfficeHoursCalendar:
    return DatabaseOfficeHoursCalendar(db, settings.office_timezone)


def get_state_machine(
    employee_id: str = Path(..., min_length=1, max_length=50),
    db: Session = Depends(get_session),
    calendar: OfficeHoursCalendar = Depends(get_office_hours_calendar),
    clock: Clock = Depends(get_clock),
) -> TrackingStateMachine:
    return TrackingStateMachine(
        db,
        calendar=calendar,
        directory=ProjectDirectory(db),
        clock=clock,
        retry_limit=settings.write_retry_limit,
    )


@router.get("", response_model=SessionRead)
def read_session(
    employee_id: str, machine: TrackingStateMachine = Depends(get_state_machine)
) -> SessionRead:
    begin_read_only(machine.db)
    session = machine.current(employee_id)
    now = machine.clock()
    return SessionRead(
        session=session_out(session, now) if session else None,
        server_time=now,
        poll_interval_seconds=settings.poll_interval_seconds,
    )


@router.post("", response_model=SessionOut, status_code=201)
def start_session(
    employee_id: str,
    payload: StartRequest,
    machine: TrackingStateMachine = Depends(get_state_machine),
) -> SessionOut:
    session = machine.start(
        employee_id,
        payload.overtime_type,
        project_id=payload.project_id,
        project_name=payload.project_name,
        memo=payload.memo,
    )
    return session_out(session, machine.clock())


@router.put("", response_model=Union[SessionOut, OvertimeEntryOut])
def transition_session(
    employee_id: str,
    payload: TransitionRequest,
    machine: TrackingStateMachine = Depends(get_state_machine),
) -> Union[SessionOut, OvertimeEntryOut]:
    if payload.action == "pause":
        return session_out(machine.pause(employee_id), machine.clock())
    if payload.action == "resume":
        return session_out(machine.resume(employee_id), machine.clock())
    return entry_out(machine.end(employee_id))
