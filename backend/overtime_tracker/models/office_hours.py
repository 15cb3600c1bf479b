from sqlalchemy import Boolean, Column, Integer, Time

from overtime_tracker.db.session import Base


class OfficeHours(Base):
    __tablename__ = "office_hours"

    # 0 = Sunday ... 6 = Saturday
    day_of_week = Column(Integer, primary_key=True)
    is_working_day = Column(Boolean, nullable=False, default=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    has_lunch_break = Column(Boolean, nullable=False, default=False)
    lunch_start_time = Column(Time, nullable=True)
    lunch_end_time = Column(Time, nullable=True)
    lunch_duration_minutes = Column(Integer, nullable=True)
