from datetime import date, time

import pytest
from httpx import AsyncClient
from sqlmodel import select

from labsyncpro.models import Schedule, ScheduleStatus
from labsyncpro.services import schedule_services
from labsyncpro.services.errors import ConflictError
from labsyncpro.services.schedule_services import resolve_or_create_schedule


def _resolve_body(data):
    return {"class_id": str(data.school_class.id), "lab_id": str(data.lab.id)}


@pytest.mark.asyncio
async def test_resolve_creates_default_schedule_once(client: AsyncClient, session, data, staff_headers):
    first = await client.post("/api/schedules/resolve", json=_resolve_body(data), headers=staff_headers)
    assert first.status_code == 201
    body = first.json()
    assert body["created"] is True
    schedule = body["schedule"]
    assert schedule["title"] == "Capacity Planning - 11 NM C"
    assert schedule["description"] == "Auto-generated schedule for capacity planning"
    assert schedule["scheduled_date"] == date.today().isoformat()
    assert schedule["start_time"] == "09:00"
    assert schedule["end_time"] == "17:00"
    assert schedule["duration_minutes"] == 480

    second = await client.post("/api/schedules/resolve", json=_resolve_body(data), headers=staff_headers)
    assert second.status_code == 200
    assert second.json()["created"] is False
    assert second.json()["schedule"]["id"] == schedule["id"]

    rows = session.exec(select(Schedule).where(Schedule.class_id == data.school_class.id)).all()
    assert len(rows) == 1


def test_resolve_returns_earliest_existing_schedule(session, data):
    later, _ = resolve_or_create_schedule(session, data.school_class.id, data.lab.id, today=date(2025, 5, 2))
    earlier = Schedule(
        title="Earlier", class_id=data.school_class.id, lab_id=data.lab.id,
        scheduled_date=date(2025, 5, 1), start_time=later.start_time, end_time=later.end_time,
    )
    session.add(earlier)
    session.commit()

    resolved, created = resolve_or_create_schedule(session, data.school_class.id, data.lab.id)
    assert created is False
    assert resolved.id == earlier.id


@pytest.mark.asyncio
async def test_resolve_unknown_class(client: AsyncClient, data, staff_headers):
    body = {"class_id": "00000000-0000-0000-0000-000000000000", "lab_id": str(data.lab.id)}
    response = await client.post("/api/schedules/resolve", json=body, headers=staff_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Class not found"}


@pytest.mark.asyncio
async def test_resolve_requires_staff(client: AsyncClient, data):
    from conftest import auth

    response = await client.post("/api/schedules/resolve", json=_resolve_body(data), headers=auth(data.students[0]))
    assert response.status_code == 403


def _schedule_body(data, start, end, title="Lesson"):
    return {
        "title": title,
        "class_id": str(data.school_class.id),
        "lab_id": str(data.lab.id),
        "scheduled_date": "2025-06-02",
        "start_time": start,
        "end_time": end,
    }


@pytest.mark.asyncio
async def test_create_schedule_and_list(client: AsyncClient, data, staff_headers):
    response = await client.post("/api/schedules", json=_schedule_body(data, "10:00", "11:30"), headers=staff_headers)
    assert response.status_code == 201
    assert response.json()["message"] == "Schedule created successfully"
    created = response.json()["schedule"]
    assert created["start_time"] == "10:00"

    listing = await client.get(
        "/api/schedules",
        params={"classId": str(data.school_class.id), "date": "2025-06-02"},
        headers=staff_headers,
    )
    assert [s["id"] for s in listing.json()["schedules"]] == [created["id"]]

    detail = await client.get(f"/api/schedules/{created['id']}", headers=staff_headers)
    assert detail.status_code == 200
    assert detail.json()["seat_assignments"] == []


@pytest.mark.asyncio
async def test_create_schedule_rejects_reversed_times(client: AsyncClient, data, staff_headers):
    response = await client.post("/api/schedules", json=_schedule_body(data, "11:00", "10:00"), headers=staff_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Start time must be before end time"


@pytest.mark.asyncio
async def test_create_schedule_conflict_suggests_free_slots(client: AsyncClient, data, staff_headers):
    await client.post("/api/schedules", json=_schedule_body(data, "08:00", "10:00"), headers=staff_headers)

    response = await client.post(
        "/api/schedules", json=_schedule_body(data, "09:00", "10:00", title="Clash"), headers=staff_headers
    )
    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "Schedule conflict detected"
    assert len(body["conflicting_schedules"]) == 1
    assert body["suggested_times"] == [
        {"start_time": "10:00", "end_time": "11:00"},
        {"start_time": "11:00", "end_time": "12:00"},
        {"start_time": "12:00", "end_time": "13:00"},
    ]


def _count(session, data):
    return len(session.exec(select(Schedule).where(Schedule.class_id == data.school_class.id)).all())


def _default_slot(data, **overrides):
    fields = dict(
        title="Capacity Planning - 11 NM C", class_id=data.school_class.id, lab_id=data.lab.id,
        scheduled_date=date.today(), start_time=time(9), end_time=time(17),
    )
    fields.update(overrides)
    return Schedule(**fields)


def test_resolve_race_loser_returns_winner(session, data, monkeypatch):
    winner = _default_slot(data)
    session.add(winner)
    session.commit()

    real_first = schedule_services.first_schedule
    calls = []

    def first_misses_once(*args):
        calls.append(args)
        # The first read happens before the winner's commit becomes visible.
        return None if len(calls) == 1 else real_first(*args)

    monkeypatch.setattr(schedule_services, "first_schedule", first_misses_once)
    resolved, created = resolve_or_create_schedule(session, data.school_class.id, data.lab.id)

    assert created is False
    assert resolved.id == winner.id
    assert len(calls) == 2
    assert _count(session, data) == 1


def test_resolve_skips_cancelled_schedules(session, data):
    cancelled = _default_slot(data, scheduled_date=date(2025, 1, 6), status=ScheduleStatus.CANCELLED)
    session.add(cancelled)
    session.commit()

    resolved, created = resolve_or_create_schedule(session, data.school_class.id, data.lab.id)
    assert created is True
    assert resolved.id != cancelled.id
    assert resolved.scheduled_date == date.today()


def test_resolve_default_slot_held_by_cancelled_schedule(session, data):
    session.add(_default_slot(data, status=ScheduleStatus.CANCELLED))
    session.commit()

    with pytest.raises(ConflictError):
        resolve_or_create_schedule(session, data.school_class.id, data.lab.id)
    assert _count(session, data) == 1
