import threading
from datetime import timedelta

import httpx
import pytest

from overtime_tracker.client import TrackingClient

EMPLOYEE = "EMP001"


@pytest.fixture
def header(client):
    return TrackingClient(client, EMPLOYEE)


@pytest.fixture
def page(client):
    return TrackingClient(client, EMPLOYEE)


def test_fetch_without_session(header):
    view = header.fetch()

    assert view.is_active is False
    assert view.durations() is None
    assert view.poll_interval_seconds == 1.5


def test_mutations_return_a_fresh_read(header, clock):
    view = header.start("tracking", memo="release night")
    assert view.is_active
    assert view.session["memo"] == "release night"

    clock.advance(10)
    view = header.pause()
    assert view.is_paused
    assert view.session["last_pause_time"] == "2026-10-17T20:00:10"


def test_display_durations_follow_server_timestamps(header, clock):
    header.start("tracking")
    clock.advance(10)
    header.pause()
    clock.advance(30)
    header.resume()
    clock.advance(20)
    view = header.fetch()

    # Five local seconds after the fetch, the server clock has moved five seconds too.
    durations = view.durations(view.fetched_at + timedelta(seconds=5))

    assert durations.elapsed_seconds == 65
    assert durations.break_seconds == 30
    assert durations.working_seconds == 35


def test_display_of_paused_session_grows_break_not_work(header, clock):
    header.start("tracking")
    clock.advance(10)
    view = header.pause()

    later = view.durations(view.fetched_at + timedelta(seconds=50))

    assert later.working_seconds == 10
    assert later.break_seconds == 50


def test_surfaces_converge_after_one_poll(header, page, clock):
    header.start("tracking")
    page_view = page.fetch()
    clock.advance(12)
    header.pause()

    assert page_view.is_paused is False
    page_view = page.fetch()

    assert page_view.is_paused is True
    assert page_view.session == header.view.session


def test_end_returns_ledger_entry_and_clears_view(header, clock):
    header.start("new_tasks")
    clock.advance(360)

    entry = header.end()

    assert entry["total_hours"] == pytest.approx(0.1)
    assert entry["status"] == "pending"
    assert header.view.is_active is False


def test_rejected_mutation_refreshes_view(header, page, clock):
    header.start("tracking")
    clock.advance(5)
    page.fetch()
    header.pause()

    with pytest.raises(httpx.HTTPStatusError) as excinfo:
        page.pause()

    assert excinfo.value.response.status_code == 409
    assert page.view.is_paused is True


def test_poll_publishes_until_stopped(header, clock):
    header.start("tracking")
    stop = threading.Event()
    seen = []

    def on_update(view):
        seen.append(view)
        clock.advance(1)
        if len(seen) == 3:
            stop.set()

    header.poll(on_update, stop, interval=0.001)

    assert len(seen) == 3
    assert [view.session["elapsed_seconds"] for view in seen] == [0, 1, 2]


def test_rejected_mutation_raises_status_even_if_refresh_fails():
    def gateway(request):
        if request.method == "PUT":
            return httpx.Response(502, text="Bad Gateway")
        raise httpx.ConnectError("tracker unreachable", request=request)

    http = httpx.Client(transport=httpx.MockTransport(gateway), base_url="http://tracker")
    tracker = TrackingClient(http, EMPLOYEE)

    with pytest.raises(httpx.HTTPStatusError) as excinfo:
        tracker.pause()

    assert excinfo.value.response.status_code == 502
    assert tracker.view is None
