import datetime as dt

from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel
from sqlalchemy.orm import Session

from overtime_tracker.db.session import begin_read_only, get_session
from overtime_tracker.models import OvertimeEntry, OvertimeStatus, OvertimeType

router = APIRouter(prefix="/employees/{employee_id}/overtime", tags=["overtime"])


class OvertimeEntryOut(BaseModel):
    id: int
    employee_id: str
    project_id: int | None = None
    date: dt.date
    overtime_type: OvertimeType
    start_time: dt.datetime
    end_time: dt.datetime
    total_hours: float
    actual_working_hours: float
    total_break_seconds: int
    description: str | None = None
    status: OvertimeStatus
    created_at: dt.datetime | None = None


def entry_out(entry: OvertimeEntry) -> OvertimeEntryOut:
    return OvertimeEntryOut(
        id=entry.id,
        employee_id=entry.employee_id,
        project_id=entry.project_id,
        date=entry.date,
        overtime_type=entry.overtime_type,
        start_time=entry.start_time,
        end_time=entry.end_time,
        total_hours=entry.total_hours,
        actual_working_hours=entry.actual_working_hours,
        total_break_seconds=entry.total_break_seconds or 0,
        description=entry.description,
        status=entry.status,
        created_at=entry.created_at,
    )


@router.get("", response_model=list[OvertimeEntryOut])
def list_overtime(
    employee_id: str = Path(..., min_length=1, max_length=50),
    status: OvertimeStatus | None = None,
    overtime_type: OvertimeType | None = None,
    start_date: dt.date | None = None,
    end_date: dt.date | None = None,
    db: Session = Depends(get_session),
) -> list[OvertimeEntryOut]:
    begin_read_only(db)
    query = db.query(OvertimeEntry).filter(OvertimeEntry.employee_id == employee_id)
    if status:
        query = query.filter(OvertimeEntry.status == status.value)
    if overtime_type:
        query = query.filter(OvertimeEntry.overtime_type == overtime_type.value)
    if start_date and end_date:
        query = query.filter(OvertimeEntry.date >= start_date, OvertimeEntry.date <= end_date)

    rows = query.order_by(
        OvertimeEntry.date.desc(), OvertimeEntry.created_at.desc(), OvertimeEntry.id.desc()
    ).all()
    return [entry_out(row) for row in rows]
