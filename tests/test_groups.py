import pytest
from httpx import AsyncClient

from conftest import auth


@pytest.mark.asyncio
async def test_staff_updates_group(client: AsyncClient, data, staff_headers):
    response = await client.put(
        f"/api/groups/{data.group_a.id}",
        json={"name": "Group Alpha", "max_members": 3, "description": "Front row"},
        headers=staff_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Group updated successfully"
    assert body["group"]["name"] == "Group Alpha"
    assert body["group"]["max_members"] == 3
    assert body["group"]["member_count"] == 2


@pytest.mark.asyncio
async def test_max_members_below_member_count(client: AsyncClient, data, staff_headers):
    response = await client.put(f"/api/groups/{data.group_a.id}", json={"max_members": 1}, headers=staff_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Cannot set max members to 1. Current member count is 2"}

    out_of_range = await client.put(f"/api/groups/{data.group_a.id}", json={"max_members": 11}, headers=staff_headers)
    assert out_of_range.status_code == 400


@pytest.mark.asyncio
async def test_empty_update(client: AsyncClient, data, staff_headers):
    response = await client.put(f"/api/groups/{data.group_a.id}", json={}, headers=staff_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "No valid fields to update"}


@pytest.mark.asyncio
async def test_only_leader_student_may_edit(client: AsyncClient, data):
    s1, s2, _ = data.students
    member = await client.put(f"/api/groups/{data.group_a.id}", json={"description": "x"}, headers=auth(s2))
    assert member.status_code == 403
    assert member.json() == {"error": "Only group leaders can update group details"}

    leader = await client.put(f"/api/groups/{data.group_a.id}", json={"description": "ours"}, headers=auth(s1))
    assert leader.status_code == 200
    assert leader.json()["group"]["description"] == "ours"


@pytest.mark.asyncio
async def test_change_leader(client: AsyncClient, data, staff_headers):
    s1, s2, s3 = data.students
    outsider = await client.put(f"/api/groups/{data.group_a.id}", json={"leader_id": str(s3.id)}, headers=staff_headers)
    assert outsider.status_code == 400

    response = await client.put(f"/api/groups/{data.group_a.id}", json={"leader_id": str(s2.id)}, headers=staff_headers)
    assert response.status_code == 200
    members = response.json()["group"]["members"]
    roles = {m["first_name"]: m["role"] for m in members}
    assert roles == {"Kai": "member", "Mia": "leader"}
    assert members[0]["first_name"] == "Mia"


@pytest.mark.asyncio
async def test_unknown_group(client: AsyncClient, data, staff_headers):
    response = await client.put(
        "/api/groups/00000000-0000-0000-0000-000000000000", json={"name": "x"}, headers=staff_headers
    )
    assert response.status_code == 404
    assert response.json() == {"error": "Group not found"}
