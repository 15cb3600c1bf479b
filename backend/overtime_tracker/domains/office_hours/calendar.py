from __future__ import annotations

from datetime import datetime, time

import pytz
from sqlalchemy.orm import Session

from overtime_tracker.models import OfficeHours


class OfficeHoursCalendar:
    """Answers whether a moment falls inside declared working hours."""

    def is_within_office_hours(self, moment: datetime) -> bool:
        raise NotImplementedError


def day_of_week(moment: datetime) -> int:
    """Sunday-based weekday index used by the office_hours table."""
    return (moment.weekday() + 1) % 7


class DatabaseOfficeHoursCalendar(OfficeHoursCalendar):
    def __init__(self, db: Session, timezone: str = "UTC") -> None:
        self.db = db
        self.timezone = pytz.timezone(timezone)

    def localize(self, moment: datetime) -> datetime:
        # Naive moments are UTC.
        if moment.tzinfo is None:
            moment = pytz.utc.localize(moment)
        return moment.astimezone(self.timezone)

    def hours_for(self, day: int) -> OfficeHours | None:
        return self.db.query(OfficeHours).filter(OfficeHours.day_of_week == day).one_or_none()

    def is_within_office_hours(self, moment: datetime) -> bool:
        local = self.localize(moment)
        hours = self.hours_for(day_of_week(local))

        # No configuration, or a day off: overtime is allowed all day.
        if hours is None or not hours.is_working_day:
            return False

        current = time(local.hour, local.minute)
        return hours.start_time <= current < hours.end_time
