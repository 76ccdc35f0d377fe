from __future__ import annotations

from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest
import pytz
from flask import Flask

from src.workforce_scheduler.workforce_scheduler.core.enums import Role
from src.workforce_scheduler.workforce_scheduler.hours.controller import register as register_hours
from src.workforce_scheduler.workforce_scheduler.hours.service import HoursReportService
from src.workforce_scheduler.workforce_scheduler.notifications.service import NotificationService
from src.workforce_scheduler.workforce_scheduler.organizations.model import OrganizationPolicy
from src.workforce_scheduler.workforce_scheduler.schedules.model import ScheduleWeek
from src.workforce_scheduler.workforce_scheduler.timeclock.controller import register as register_timeclock
from src.workforce_scheduler.workforce_scheduler.timeclock.service import TimeClockService
from tests.fakes import (
    FakeNotifications,
    FakeOrganizations,
    FakeShifts,
    FakeTimeEntries,
    FakeUsers,
    FakeWeeks,
    make_shift,
    make_user,
)

T = datetime(2026, 3, 2, 9, 0, tzinfo=pytz.UTC)


class Clock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture()
def clock():
    return Clock(T + timedelta(minutes=2))


@pytest.fixture()
def app(clock):
    users = FakeUsers(
        make_user("emp-1", "Ada", "Lovelace"),
        make_user("mgr-1", "Grace", "Hopper", role=Role.MANAGER),
    )
    organizations = FakeOrganizations(OrganizationPolicy(org_id="org-1", timezone="UTC"))
    weeks = FakeWeeks(ScheduleWeek(week_id="week-1", org_id="org-1", start_date=T - timedelta(days=1), end_date=T + timedelta(days=6)))
    shifts = FakeShifts(make_shift("s1", T, T + timedelta(hours=8)))
    entries = FakeTimeEntries()

    container = SimpleNamespace(
        time_clock_service=TimeClockService(
            entries,
            shifts,
            organizations,
            weeks,
            users,
            NotificationService(FakeNotifications(), users),
            clock=clock,
        ),
        hours_report_service=HoursReportService(organizations, weeks, shifts, entries, clock=clock),
    )

    app = Flask(__name__)
    app.secret_key = "test-secret"
    register_timeclock(app, container)
    register_hours(app, container)
    return app


def login(client, user_id="emp-1", role=Role.EMPLOYEE):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["org_id"] = "org-1"
        sess["role"] = role.value


def test_requires_login(app):
    resp = app.test_client().get("/api/v1/time-clock/status")
    assert resp.status_code == 401


def test_clock_in_then_duplicate_is_conflict(app):
    client = app.test_client()
    login(client)

    resp = client.post("/api/v1/time-clock/clock-in", json={"shiftId": "s1"})
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["data"]["shiftId"] == "s1"
    assert body["data"]["status"] == "CLOCKED_IN"

    resp = client.post("/api/v1/time-clock/clock-in", json={})
    assert resp.status_code == 409
    assert resp.get_json()["message"] == "You are already clocked in"


def test_clock_in_rejects_non_boolean_force(app):
    client = app.test_client()
    login(client)

    resp = client.post("/api/v1/time-clock/clock-in", json={"force": "yes"})
    assert resp.status_code == 400


def test_clock_in_too_early_is_bad_request(app, clock):
    clock.now = T - timedelta(minutes=30)
    client = app.test_client()
    login(client)

    resp = client.post("/api/v1/time-clock/clock-in", json={"shiftId": "s1"})
    assert resp.status_code == 400
    assert resp.get_json()["message"].startswith("Too early to clock in")


def test_clock_out_with_both_ids_is_bad_request(app):
    client = app.test_client()
    login(client)
    entry_id = client.post("/api/v1/time-clock/clock-in", json={}).get_json()["data"]["id"]

    resp = client.post("/api/v1/time-clock/clock-out", json={"timeEntryId": entry_id, "shiftId": "s1"})
    assert resp.status_code == 400


def test_clock_out_and_weekly_hours(app, clock):
    client = app.test_client()
    login(client)
    client.post("/api/v1/time-clock/clock-in", json={})

    clock.now = T + timedelta(hours=4)
    resp = client.post("/api/v1/time-clock/clock-out", json={})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["workedMinutes"] == 238

    week = client.get("/api/v1/time-clock/my-week").get_json()["data"]
    assert week["weekStart"] == "2026-03-01T00:00:00+00:00"
    assert week["scheduledHours"] == 8.0
    assert len(week["entries"]) == 1


def test_clock_out_without_entry_is_conflict(app):
    client = app.test_client()
    login(client)
    resp = client.post("/api/v1/time-clock/clock-out", json={})
    assert resp.status_code == 409


def test_overtime_requests_require_manager(app):
    client = app.test_client()
    login(client)
    assert client.get("/api/v1/time-clock/overtime-requests").status_code == 403
    assert client.get("/api/v1/analytics/hours-comparison").status_code == 403


def test_manager_denies_overtime(app, clock):
    client = app.test_client()
    login(client)
    client.post("/api/v1/time-clock/clock-in", json={})
    clock.now = T + timedelta(hours=9)
    entry_id = client.post("/api/v1/time-clock/clock-out", json={}).get_json()["data"]["id"]

    login(client, "mgr-1", Role.MANAGER)
    pending = client.get("/api/v1/time-clock/overtime-requests").get_json()["data"]
    assert [p["id"] for p in pending] == [entry_id]

    resp = client.put(f"/api/v1/time-clock/overtime-requests/{entry_id}/deny")
    assert resp.status_code == 200
    assert resp.get_json()["data"]["clockOutAt"] == "2026-03-02T17:00:00+00:00"

    resp = client.put(f"/api/v1/time-clock/overtime-requests/{entry_id}/approve")
    assert resp.status_code == 404


def test_hours_comparison_csv_export(app):
    client = app.test_client()
    login(client, "mgr-1", Role.MANAGER)

    resp = client.get("/api/v1/analytics/hours-comparison?weekId=week-1&export=csv")
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "hours-comparison-2026-03-01.csv" in resp.headers["Content-Disposition"]
    lines = resp.get_data(as_text=True).splitlines()
    assert lines[0].startswith('"Employee Name","Email"')
    assert lines[1].startswith('"Ada Lovelace","ada@example.com","8.00","0.00"')


def test_hours_comparison_rejects_unknown_export(app):
    client = app.test_client()
    login(client, "mgr-1", Role.MANAGER)
    assert client.get("/api/v1/analytics/hours-comparison?export=pdf").status_code == 400


def test_hours_comparison_json_and_missing_week(app):
    client = app.test_client()
    login(client, "mgr-1", Role.MANAGER)

    data = client.get("/api/v1/analytics/hours-comparison").get_json()["data"]
    assert data["weekId"] == "week-1"
    assert data["totals"]["scheduledHours"] == 8.0

    assert client.get("/api/v1/analytics/hours-comparison?weekId=nope").status_code == 404


def test_weekly_summary(app):
    client = app.test_client()
    login(client, "mgr-1", Role.MANAGER)

    data = client.get("/api/v1/analytics/weekly-summary").get_json()["data"]
    assert data["scheduleWeekId"] == "week-1"
    assert data["totalScheduledHours"] == 8
