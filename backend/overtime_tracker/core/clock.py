from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    # Timestamps are stored as naive UTC.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def get_clock() -> Clock:
    return utcnow
