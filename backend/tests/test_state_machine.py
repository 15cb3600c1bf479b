from datetime import time, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from conftest import T0
from overtime_tracker.core.errors import (
    ConflictError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    PolicyViolationError,
)
from overtime_tracker.domains.tracking import ledger
from overtime_tracker.models import OfficeHours, OvertimeEntry, Project, TrackingBreak, TrackingSession

EMPLOYEE = "EMP001"


def test_start_creates_running_session(machine):
    session = machine.start(EMPLOYEE, "pending_tasks", memo="  close tickets  ")

    assert session.employee_id == EMPLOYEE
    assert session.overtime_type == "pending_tasks"
    assert session.start_time == T0
    assert session.is_paused is False
    assert session.last_pause_time is None
    assert session.total_break_seconds == 0
    assert session.memo == "close tickets"


def test_start_rejects_unknown_overtime_type(machine, db):
    with pytest.raises(InvalidInputError):
        machine.start(EMPLOYEE, "weekend_fun")

    assert db.query(TrackingSession).count() == 0


def test_start_rejects_unknown_project(machine):
    with pytest.raises(InvalidInputError):
        machine.start(EMPLOYEE, "tracking", project_id=42)


def test_start_accepts_directory_project(machine, add_rows):
    add_rows(Project(id=7, project_name="Customer Portal", client_name="Acme Corp"))

    session = machine.start(EMPLOYEE, "tracking", project_id=7)

    assert session.project.project_name == "Customer Portal"


def test_second_start_conflicts(machine, clock):
    machine.start(EMPLOYEE, "tracking")
    clock.advance(5)

    with pytest.raises(ConflictError):
        machine.start(EMPLOYEE, "new_tasks")

    assert machine.current(EMPLOYEE).overtime_type == "tracking"


def test_start_during_office_hours_is_a_policy_violation(machine, add_rows, db):
    # T0 is a Saturday (day 6) at 20:00.
    add_rows(OfficeHours(day_of_week=6, is_working_day=True, start_time=time(9, 0), end_time=time(21, 0)))

    with pytest.raises(PolicyViolationError):
        machine.start(EMPLOYEE, "tracking")

    assert db.query(TrackingSession).count() == 0


def test_start_after_office_hours_is_allowed(machine, add_rows):
    add_rows(OfficeHours(day_of_week=6, is_working_day=True, start_time=time(9, 0), end_time=time(20, 0)))

    assert machine.start(EMPLOYEE, "tracking").start_time == T0


def test_start_on_day_off_is_allowed(machine, add_rows):
    add_rows(OfficeHours(day_of_week=6, is_working_day=False, start_time=time(0, 0), end_time=time(23, 59)))

    assert machine.start(EMPLOYEE, "tracking") is not None


def test_worked_example(machine, clock):
    machine.start(EMPLOYEE, "tracking")
    clock.advance(10)
    machine.pause(EMPLOYEE)
    clock.advance(30)
    resumed = machine.resume(EMPLOYEE)
    assert resumed.total_break_seconds == 30
    clock.advance(60)

    entry = machine.end(EMPLOYEE)

    assert entry.total_hours == pytest.approx(100 / 3600)
    assert entry.actual_working_hours == pytest.approx(70 / 3600)
    assert entry.status == "pending"
    assert entry.end_time == T0 + timedelta(seconds=100)
    assert machine.current(EMPLOYEE) is None


def test_pause_records_break_and_resume_closes_it(machine, clock):
    machine.start(EMPLOYEE, "tracking")
    clock.advance(10)
    paused = machine.pause(EMPLOYEE)
    assert paused.is_paused is True
    assert paused.last_pause_time == T0 + timedelta(seconds=10)
    assert len(paused.breaks) == 1
    assert paused.breaks[0].break_end_time is None

    clock.advance(45)
    resumed = machine.resume(EMPLOYEE)

    assert resumed.is_paused is False
    assert resumed.last_pause_time is None
    assert resumed.breaks[0].break_end_time == T0 + timedelta(seconds=55)
    assert resumed.breaks[0].break_duration_seconds == 45


def test_double_pause_leaves_state_untouched(machine, clock):
    machine.start(EMPLOYEE, "tracking")
    clock.advance(10)
    machine.pause(EMPLOYEE)
    clock.advance(20)

    with pytest.raises(InvalidStateError):
        machine.pause(EMPLOYEE)

    session = machine.current(EMPLOYEE)
    assert session.last_pause_time == T0 + timedelta(seconds=10)
    assert session.total_break_seconds == 0
    assert len(session.breaks) == 1


def test_resume_while_running_is_invalid(machine):
    machine.start(EMPLOYEE, "tracking")

    with pytest.raises(InvalidStateError):
        machine.resume(EMPLOYEE)


@pytest.mark.parametrize("action", ["pause", "resume", "end"])
def test_transitions_without_session_create_nothing(machine, db, action):
    with pytest.raises(NotFoundError):
        getattr(machine, action)(EMPLOYEE)

    assert db.query(TrackingSession).count() == 0
    assert db.query(TrackingBreak).count() == 0
    assert db.query(OvertimeEntry).count() == 0


def test_ending_paused_session_matches_resume_then_end(machine, clock):
    machine.start(EMPLOYEE, "tracking")
    clock.advance(10)
    machine.pause(EMPLOYEE)
    clock.advance(30)
    direct = machine.end(EMPLOYEE)

    clock.now = T0
    machine.start("EMP002", "tracking")
    clock.advance(10)
    machine.pause("EMP002")
    clock.advance(30)
    machine.resume("EMP002")
    two_step = machine.end("EMP002")

    assert direct.actual_working_hours == two_step.actual_working_hours
    assert direct.total_hours == two_step.total_hours
    assert direct.total_break_seconds == two_step.total_break_seconds == 30


def test_end_writes_one_entry_and_removes_session(machine, db, clock):
    machine.start(EMPLOYEE, "new_tasks", project_name="Audit", memo="backlog")
    clock.advance(10)
    machine.pause(EMPLOYEE)
    clock.advance(10)

    entry = machine.end(EMPLOYEE)

    assert db.query(OvertimeEntry).count() == 1
    assert db.query(TrackingSession).count() == 0
    assert db.query(TrackingBreak).count() == 0
    assert entry.description == "Audit - backlog"

    with pytest.raises(NotFoundError):
        machine.end(EMPLOYEE)
    assert db.query(OvertimeEntry).count() == 1


def test_break_longer_than_session_clamps_to_zero(machine, add_rows, clock):
    # Clock skew left more recorded break than wall-clock time.
    add_rows(
        TrackingSession(
            employee_id=EMPLOYEE,
            overtime_type="tracking",
            start_time=T0,
            is_paused=False,
            last_pause_time=None,
            total_break_seconds=500,
        )
    )
    clock.advance(100)

    entry = machine.end(EMPLOYEE)

    assert entry.actual_working_hours == 0
    assert entry.total_hours == pytest.approx(100 / 3600)


def test_total_break_never_decreases(machine, clock):
    machine.start(EMPLOYEE, "tracking")
    totals = []
    for _ in range(3):
        clock.advance(5)
        machine.pause(EMPLOYEE)
        clock.advance(7)
        totals.append(machine.resume(EMPLOYEE).total_break_seconds)

    assert totals == [7, 14, 21]


def test_failed_ledger_write_keeps_session(machine, db, clock, monkeypatch):
    machine.start(EMPLOYEE, "tracking")
    clock.advance(10)
    machine.pause(EMPLOYEE)
    clock.advance(30)

    build_entry = ledger.build_entry

    def broken_entry(session, end_time):
        entry = build_entry(session, end_time)
        entry.overtime_type = None
        return entry

    monkeypatch.setattr(ledger, "build_entry", broken_entry)
    with pytest.raises(IntegrityError):
        machine.end(EMPLOYEE)

    session = machine.current(EMPLOYEE)
    assert session.is_paused is True
    assert session.total_break_seconds == 0
    assert session.breaks[0].break_end_time is None
    assert db.query(OvertimeEntry).count() == 0

    monkeypatch.undo()
    entry = machine.end(EMPLOYEE)
    assert entry.total_break_seconds == 30
    assert db.query(TrackingSession).count() == 0
