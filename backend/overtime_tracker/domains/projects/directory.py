from __future__ import annotations

from sqlalchemy.orm import Session

from overtime_tracker.models import Project


class ProjectDirectory:
    def __init__(self, db: Session) -> None:
        self.db = db

    def resolve(self, project_id: int) -> Project | None:
        return self.db.query(Project).filter(Project.id == project_id).one_or_none()

    def exists(self, project_id: int) -> bool:
        return self.resolve(project_id) is not None
