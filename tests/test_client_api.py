import httpx
import pytest

from labsyncpro.client import (
    LabSyncClient,
    LookupFailed,
    NetworkError,
    NotFound,
    ScheduleCreationFailed,
    ScheduleResolver,
    ServerValidationError,
)
from labsyncpro.client.errors import NETWORK_ERROR_MESSAGE


@pytest.mark.asyncio
async def test_login_stores_token(client, data):
    from httpx import ASGITransport
    from labsyncpro.main import app

    async with LabSyncClient(base_url="http://test/api", transport=ASGITransport(app=app)) as api:
        result = await api.login("instructor@example.com", "password")
        assert result.user.role == "instructor"
        labs = await api.list_labs()
    assert {lab.name for lab in labs} == {"Computer Lab 1", "Computer Lab 2"}


@pytest.mark.asyncio
async def test_token_provider_is_awaited(client, data, api):
    from conftest import token_for

    async def provider():
        return token_for(data.admin)

    api.token = None
    api._token_provider = provider
    lab = await api.get_lab(data.lab.id)
    assert lab.total_computers == 19


@pytest.mark.asyncio
async def test_server_error_text_is_surfaced(api, data):
    resolved = await api.resolve_or_create_schedule(data.school_class.id, data.lab.id)
    assert resolved.created is True
    schedule_id = resolved.schedule.id

    await api.create_seat_assignment(data.students[0].id, data.seats[0].id, schedule_id)
    with pytest.raises(ServerValidationError) as excinfo:
        await api.create_seat_assignment(data.students[1].id, data.seats[0].id, schedule_id)
    assert excinfo.value.status_code == 409
    assert excinfo.value.message == "Seat is already assigned for this schedule"


@pytest.mark.asyncio
async def test_not_found_is_typed(api, data):
    with pytest.raises(NotFound) as excinfo:
        await api.delete_seat_assignment("00000000-0000-0000-0000-000000000000")
    assert excinfo.value.message == "Seat assignment not found"


@pytest.mark.asyncio
async def test_unassigned_and_class_views(api, data):
    schedule = (await api.resolve_or_create_schedule(data.school_class.id, data.lab.id)).schedule
    await api.create_seat_assignment(data.students[0].id, data.seats[0].id, schedule.id)

    unassigned = await api.unassigned_students(data.school_class.id, data.lab.id, schedule.id)
    assert unassigned.count == 2

    await api.create_computer_assignment(schedule.id, data.computers[2].id, "group", group_id=data.group_a.id)
    assignments = await api.class_computer_assignments(data.school_class.id, data.lab.id)
    assert [a.computer_name for a in assignments] == ["CL2-PC-003"]

    overview = await api.capacity_overview()
    assert overview.occupied_computers == 1


def _failing_transport(exc):
    def handler(request):
        raise exc
    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_transport_failure_becomes_network_error():
    transport = _failing_transport(httpx.ConnectError("refused"))
    async with LabSyncClient(base_url="http://test/api", token="t", transport=transport) as api:
        with pytest.raises(NetworkError) as excinfo:
            await api.list_labs()
    assert excinfo.value.message == NETWORK_ERROR_MESSAGE


@pytest.mark.asyncio
async def test_non_json_error_falls_back_to_status():
    transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad gateway"))
    async with LabSyncClient(base_url="http://test/api", token="t", transport=transport) as api:
        with pytest.raises(ServerValidationError) as excinfo:
            await api.list_labs()
    assert excinfo.value.message == "Request failed with status 502"


@pytest.mark.asyncio
async def test_resolver_maps_failures():
    timeout = _failing_transport(httpx.ReadTimeout("slow"))
    async with LabSyncClient(base_url="http://test/api", token="t", transport=timeout) as api:
        with pytest.raises(LookupFailed):
            await ScheduleResolver(api).resolve_or_create("c", "l")
        with pytest.raises(LookupFailed):
            await ScheduleResolver(api).lookup("c", "l")

    rejected = httpx.MockTransport(lambda request: httpx.Response(404, json={"error": "Class not found"}))
    async with LabSyncClient(base_url="http://test/api", token="t", transport=rejected) as api:
        with pytest.raises(ScheduleCreationFailed) as excinfo:
            await ScheduleResolver(api).resolve_or_create("c", "l")
    assert excinfo.value.message == "Class not found"


@pytest.mark.asyncio
async def test_lookup_never_creates(api, data):
    resolver = ScheduleResolver(api)
    assert await resolver.lookup(data.school_class.id, data.lab.id) is None
    assert await api.find_schedules(class_id=data.school_class.id) == []

    created = await resolver.resolve_or_create(data.school_class.id, data.lab.id)
    again = await resolver.resolve_or_create(data.school_class.id, data.lab.id)
    assert created.id == again.id
    assert (await resolver.lookup(data.school_class.id, data.lab.id)).id == created.id


@pytest.mark.asyncio
async def test_move_seat_assignment(api, data):
    schedule = (await api.resolve_or_create_schedule(data.school_class.id, data.lab.id)).schedule
    assignment = await api.create_seat_assignment(data.students[0].id, data.seats[0].id, schedule.id)

    moved = await api.update_seat_assignment(assignment.id, seat_id=data.seats[3].id)
    assert moved.id == assignment.id
    assert moved.seat_number == 4
    assert moved.seat_name == "CL2-CR-004"

    with pytest.raises(ServerValidationError) as excinfo:
        await api.update_seat_assignment(assignment.id, seat_id=data.maintenance_seat.id)
    assert excinfo.value.message == "Seat is under maintenance"


@pytest.mark.asyncio
async def test_capacity_overview_counts(api, data):
    overview = await api.capacity_overview()
    assert overview.occupied_computers == 0
    assert overview.total_computers == 19

    schedule = (await api.resolve_or_create_schedule(data.school_class.id, data.lab.id)).schedule
    await api.create_computer_assignment(schedule.id, data.computers[0].id, "group", group_id=data.group_b.id)
    overview = await api.capacity_overview()
    lab2 = next(lab for lab in overview.labs if lab.id == data.lab.id)
    assert (lab2.occupied_computers, lab2.available_computers) == (1, 17)


@pytest.mark.asyncio
async def test_my_seat_info_for_student(api, data):
    from conftest import token_for

    schedule = (await api.resolve_or_create_schedule(data.school_class.id, data.lab.id)).schedule
    await api.create_seat_assignment(data.students[1].id, data.seats[4].id, schedule.id)
    await api.create_computer_assignment(schedule.id, data.computers[2].id, "group", group_id=data.group_a.id)

    api.token = token_for(data.students[1])
    [info] = await api.my_seat_info()
    assert info.schedule_id == schedule.id
    assert info.seat_name == "CL2-CR-005"
    assert info.computer_name == "CL2-PC-003"
    assert info.computer_group_name == "Group A"
