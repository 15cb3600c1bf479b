from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from overtime_tracker.db.session import Base


class TrackingSession(Base):
    __tablename__ = "overtime_tracking_sessions"

    # One row per employee: the primary key is the single-active-session guard.
    employee_id = Column(String(50), primary_key=True)

    overtime_type = Column(String(20), nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True)
    project_name = Column(String(200), nullable=True)
    memo = Column(Text, nullable=True)

    start_time = Column(DateTime, nullable=False)
    is_paused = Column(Boolean, nullable=False, default=False)
    last_pause_time = Column(DateTime, nullable=True)  # set iff is_paused
    total_break_seconds = Column(Integer, nullable=False, default=0)

    version = Column(Integer, nullable=False)

    project = relationship("Project")
    breaks = relationship(
        "TrackingBreak",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="TrackingBreak.break_start_time",
    )

    __table_args__ = (
        CheckConstraint(
            "overtime_type IN ('pending_tasks', 'new_tasks', 'tracking')",
            name="ck_tracking_sessions_overtime_type",
        ),
        CheckConstraint(
            "(is_paused AND last_pause_time IS NOT NULL) OR (NOT is_paused AND last_pause_time IS NULL)",
            name="ck_tracking_sessions_pause_time",
        ),
        CheckConstraint("total_break_seconds >= 0", name="ck_tracking_sessions_break_seconds"),
    )
    __mapper_args__ = {"version_id_col": version}

    def open_break(self) -> "TrackingBreak | None":
        for item in self.breaks:
            if item.break_end_time is None:
                return item
        return None


class TrackingBreak(Base):
    __tablename__ = "overtime_breaks"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(
        String(50),
        ForeignKey("overtime_tracking_sessions.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    break_start_time = Column(DateTime, nullable=False)
    break_end_time = Column(DateTime, nullable=True)
    break_duration_seconds = Column(Integer, nullable=True)

    session = relationship("TrackingSession", back_populates="breaks")
