"""Duration arithmetic for tracking sessions.

Every value is derived from the session's absolute timestamps and the instant
of observation, in whole seconds. Nothing here keeps state, so any number of
observers asking at the same ``now`` get the same answer.

The functions accept anything shaped like a session: the ORM model, or the
``SessionSnapshot`` that clients rebuild from a read response.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

SECONDS_PER_HOUR = 3600


@dataclass(frozen=True)
class SessionSnapshot:
    start_time: datetime
    is_paused: bool
    last_pause_time: datetime | None
    total_break_seconds: int


@dataclass(frozen=True)
class Durations:
    elapsed_seconds: int
    break_seconds: int
    working_seconds: int

    @property
    def total_hours(self) -> float:
        return to_hours(self.elapsed_seconds)

    @property
    def working_hours(self) -> float:
        return to_hours(self.working_seconds)


def seconds_between(earlier: datetime, later: datetime) -> int:
    return int((later - earlier).total_seconds())


def elapsed_seconds(session, now: datetime) -> int:
    return seconds_between(session.start_time, now)


def open_break_seconds(session, now: datetime) -> int:
    """Length of the break in progress, zero when running.

    A pause stamped after ``now`` (clock skew) counts as zero rather than
    shrinking the accumulated total.
    """
    if not session.is_paused or session.last_pause_time is None:
        return 0
    return max(0, seconds_between(session.last_pause_time, now))


def current_break_seconds(session, now: datetime) -> int:
    return session.total_break_seconds + open_break_seconds(session, now)


def working_seconds(session, now: datetime) -> int:
    return max(0, elapsed_seconds(session, now) - current_break_seconds(session, now))


def measure(session, now: datetime) -> Durations:
    return Durations(
        elapsed_seconds=elapsed_seconds(session, now),
        break_seconds=current_break_seconds(session, now),
        working_seconds=working_seconds(session, now),
    )


def to_hours(seconds: int) -> float:
    return seconds / SECONDS_PER_HOUR
