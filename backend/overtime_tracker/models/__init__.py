from .office_hours import OfficeHours
from .overtime_entry import OvertimeEntry, OvertimeStatus, OvertimeType
from .project import Project
from .tracking_session import TrackingBreak, TrackingSession

__all__ = [
    "OfficeHours",
    "OvertimeEntry",
    "OvertimeStatus",
    "OvertimeType",
    "Project",
    "TrackingBreak",
    "TrackingSession",
]
