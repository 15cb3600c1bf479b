from sqlalchemy import Column, DateTime, Integer, String

from overtime_tracker.core.clock import utcnow
from overtime_tracker.db.session import Base


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    project_name = Column(String(200), nullable=False)
    client_name = Column(String(200), nullable=True)
    created_at = Column(DateTime, default=utcnow)
