from datetime import time

from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel, Field, model_validator
from sqlalchemy.orm import Session

from overtime_tracker.core.logging import get_logger
from overtime_tracker.db.session import get_session
from overtime_tracker.models import OfficeHours

router = APIRouter(prefix="/office-hours", tags=["office-hours"])
logger = get_logger(__name__)


class OfficeHoursOut(BaseModel):
    day_of_week: int
    is_working_day: bool
    start_time: time
    end_time: time
    has_lunch_break: bool
    lunch_start_time: time | None = None
    lunch_end_time: time | None = None
    lunch_duration_minutes: int | None = None


class OfficeHoursUpdate(BaseModel):
    is_working_day: bool | None = None
    start_time: time | None = None
    end_time: time | None = None
    has_lunch_break: bool | None = None
    lunch_start_time: time | None = None
    lunch_end_time: time | None = None
    lunch_duration_minutes: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_window(self) -> "OfficeHoursUpdate":
        if self.start_time and self.end_time and self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class DayUpdate(OfficeHoursUpdate):
    day_of_week: int = Field(..., ge=0, le=6)


class BulkUpdate(BaseModel):
    updates: list[DayUpdate]


def _out(row: OfficeHours) -> OfficeHoursOut:
    return OfficeHoursOut(
        day_of_week=row.day_of_week,
        is_working_day=row.is_working_day,
        start_time=row.start_time,
        end_time=row.end_time,
        has_lunch_break=row.has_lunch_break,
        lunch_start_time=row.lunch_start_time,
        lunch_end_time=row.lunch_end_time,
        lunch_duration_minutes=row.lunch_duration_minutes,
    )


def _apply(db: Session, day_of_week: int, payload: OfficeHoursUpdate) -> OfficeHours:
    row = db.query(OfficeHours).filter(OfficeHours.day_of_week == day_of_week).one_or_none()
    if not row:
        raise HTTPException(status_code=404, detail=f"Office hours for day {day_of_week} not found")

    for field, value in payload.model_dump(exclude_unset=True, exclude={"day_of_week"}).items():
        setattr(row, field, value)
    if row.start_time >= row.end_time:
        raise HTTPException(status_code=400, detail=f"Day {day_of_week}: start_time must be before end_time")
    return row


@router.get("", response_model=list[OfficeHoursOut])
def list_office_hours(db: Session = Depends(get_session)) -> list[OfficeHoursOut]:
    rows = db.query(OfficeHours).order_by(OfficeHours.day_of_week.asc()).all()
    return [_out(row) for row in rows]


@router.put("/{day_of_week}", response_model=OfficeHoursOut)
def update_day(
    payload: OfficeHoursUpdate,
    day_of_week: int = Path(..., ge=0, le=6, description="0 = Sunday ... 6 = Saturday"),
    db: Session = Depends(get_session),
) -> OfficeHoursOut:
    row = _apply(db, day_of_week, payload)
    db.commit()
    db.refresh(row)
    logger.info("office_hours_updated", day_of_week=day_of_week)
    return _out(row)


@router.put("", response_model=list[OfficeHoursOut])
def update_days(payload: BulkUpdate, db: Session = Depends(get_session)) -> list[OfficeHoursOut]:
    rows = [_apply(db, update.day_of_week, update) for update in payload.updates]
    db.commit()
    for row in rows:
        db.refresh(row)
    logger.info("office_hours_updated", days=[row.day_of_week for row in rows])
    return [_out(row) for row in rows]
