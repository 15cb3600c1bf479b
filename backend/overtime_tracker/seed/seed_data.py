from datetime import time

from sqlalchemy.orm import Session

from overtime_tracker.db.session import session_scope
from overtime_tracker.models import OfficeHours, Project

WORKING_DAYS = {1, 2, 3, 4, 5}  # Monday to Friday


def default_office_week() -> list[OfficeHours]:
    return [
        OfficeHours(
            day_of_week=day,
            is_working_day=day in WORKING_DAYS,
            start_time=time(9, 0),
            end_time=time(18, 0),
            has_lunch_break=day in WORKING_DAYS,
            lunch_start_time=time(13, 0) if day in WORKING_DAYS else None,
            lunch_end_time=time(14, 0) if day in WORKING_DAYS else None,
            lunch_duration_minutes=60 if day in WORKING_DAYS else None,
        )
        for day in range(7)
    ]


def seed(session: Session) -> None:
    if session.query(OfficeHours).count() == 0:
        session.add_all(default_office_week())

    if session.query(Project).count() == 0:
        session.add_all(
            [
                Project(project_name="Payroll Migration", client_name="Internal"),
                Project(project_name="Customer Portal", client_name="Acme Corp"),
            ]
        )
    session.commit()


if __name__ == "__main__":
    with session_scope() as db:
        seed(db)
