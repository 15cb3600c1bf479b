from enum import Enum

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer, String, Text

from overtime_tracker.core.clock import utcnow
from overtime_tracker.db.session import Base


class OvertimeType(str, Enum):
    PENDING_TASKS = "pending_tasks"
    NEW_TASKS = "new_tasks"
    TRACKING = "tracking"

class OvertimeStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PAID = "paid"

class OvertimeEntry(Base):
    __tablename__ = "overtime"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(String(50), nullable=False, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True)
    date = Column(Date, nullable=False)
    overtime_type = Column(String(20), nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    total_hours = Column(Float, nullable=False)
    actual_working_hours = Column(Float, nullable=False)
    total_break_seconds = Column(Integer, nullable=False, default=0)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=OvertimeStatus.PENDING.value)
    created_at = Column(DateTime, default=utcnow)
