"""Polling client for the overtime tracking endpoints.

Every UI surface (header widget, full page, ...) owns one ``TrackingClient``
and polls on its own; there is no push channel. Mutations are always followed
by a fresh read because their responses do not carry everything a surface
needs, so the returned ``TrackingView`` is the re-read, not the mutation reply.

Displayed durations are re-derived from the server's absolute timestamps on
each tick, shifted by the clock offset observed at fetch time. Nothing counts
seconds locally, so two surfaces showing the same session agree.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable

import httpx

from overtime_tracker.core.clock import utcnow
from overtime_tracker.core.logging import get_logger
from overtime_tracker.domains.tracking.accountant import Durations, SessionSnapshot, measure

logger = get_logger(__name__)

DEFAULT_POLL_INTERVAL = 1.5


def _parse_time(value: str | None) -> datetime | None:
    if value is None:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    # The server speaks naive UTC.
    if parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None) - (parsed.utcoffset() or timedelta(0))
    return parsed


def _error_detail(response: httpx.Response) -> Any:
    try:
        return response.json().get("detail")
    except (ValueError, AttributeError):
        return response.text or None


@dataclass(frozen=True)
class TrackingView:
    session: dict[str, Any] | None
    server_time: datetime
    fetched_at: datetime
    poll_interval_seconds: float

    @classmethod
    def from_response(cls, payload: dict[str, Any], fetched_at: datetime) -> "TrackingView":
        return cls(
            session=payload.get("session"),
            server_time=_parse_time(payload["server_time"]),
            fetched_at=fetched_at,
            poll_interval_seconds=payload.get("poll_interval_seconds") or DEFAULT_POLL_INTERVAL,
        )

    @property
    def is_active(self) -> bool:
        return self.session is not None

    @property
    def is_paused(self) -> bool:
        return bool(self.session and self.session["is_paused"])

    @property
    def clock_offset(self) -> timedelta:
        """How far the server clock is ahead of the local one."""
        return self.server_time - self.fetched_at

    def snapshot(self) -> SessionSnapshot | None:
        if self.session is None:
            return None
        return SessionSnapshot(
            start_time=_parse_time(self.session["start_time"]),
            is_paused=self.session["is_paused"],
            last_pause_time=_parse_time(self.session.get("last_pause_time")),
            total_break_seconds=self.session["total_break_seconds"],
        )

    def durations(self, local_now: datetime | None = None) -> Durations | None:
        snapshot = self.snapshot()
        if snapshot is None:
            return None
        local_now = local_now or utcnow()
        return measure(snapshot, local_now + self.clock_offset)


class TrackingClient:
    def __init__(self, http: httpx.Client, employee_id: str) -> None:
        self.http = http
        self.employee_id = employee_id
        self.view: TrackingView | None = None

    @property
    def path(self) -> str:
        return f"/employees/{self.employee_id}/overtime-tracking"

    def fetch(self) -> TrackingView:
        response = self.http.get(self.path)
        response.raise_for_status()
        self.view = TrackingView.from_response(response.json(), fetched_at=utcnow())
        return self.view

    def start(
        self,
        overtime_type: str,
        *,
        project_id: int | None = None,
        project_name: str | None = None,
        memo: str | None = None,
    ) -> TrackingView:
        payload = {
            "overtime_type": overtime_type,
            "project_id": project_id,
            "project_name": project_name,
            "memo": memo,
        }
        self._mutate("POST", payload)
        return self.fetch()

    def pause(self) -> TrackingView:
        self._mutate("PUT", {"action": "pause"})
        return self.fetch()

    def resume(self) -> TrackingView:
        self._mutate("PUT", {"action": "resume"})
        return self.fetch()

    def end(self) -> dict[str, Any]:
        """End the session and return the ledger entry it produced."""
        entry = self._mutate("PUT", {"action": "end"})
        self.fetch()
        return entry

    def _mutate(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        response = self.http.request(method, self.path, json=payload)
        if response.is_error:
            logger.info(
                "tracking_mutation_rejected",
                employee_id=self.employee_id,
                status_code=response.status_code,
                detail=_error_detail(response),
            )
            try:
                # Another surface may have changed the session; show what the server has.
                self.fetch()
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning("tracking_refresh_failed", employee_id=self.employee_id, error=str(exc))
            finally:
                response.raise_for_status()
        return response.json()

    def poll(
        self,
        on_update: Callable[[TrackingView], None],
        stop: threading.Event,
        interval: float | None = None,
    ) -> None:
        """Fetch and publish until ``stop`` is set.

        Uses the server-advised cadence unless ``interval`` is given. Transport
        errors are logged and the next tick retries; reads are idempotent.
        """
        while not stop.is_set():
            try:
                view = self.fetch()
            except httpx.HTTPError as exc:
                logger.warning("tracking_poll_failed", employee_id=self.employee_id, error=str(exc))
                delay = interval or (self.view.poll_interval_seconds if self.view else DEFAULT_POLL_INTERVAL)
            else:
                on_update(view)
                delay = interval or view.poll_interval_seconds
            stop.wait(delay)
