from datetime import date, time

import pytest
from httpx import AsyncClient

from labsyncpro.models import Schedule


@pytest.mark.asyncio
async def test_list_labs_with_counts(client: AsyncClient, data, staff_headers):
    response = await client.get("/api/labs", headers=staff_headers)
    assert response.status_code == 200
    labs = {lab["name"]: lab for lab in response.json()["labs"]}
    assert list(labs) == ["Computer Lab 1", "Computer Lab 2"]
    lab2 = labs["Computer Lab 2"]
    assert lab2["total_computers"] == 19
    assert lab2["functional_computers"] == 18
    assert lab2["total_seats"] == 20
    assert lab2["available_seats"] == 19


@pytest.mark.asyncio
async def test_get_lab_detail_names_seats(client: AsyncClient, data, staff_headers):
    response = await client.get(f"/api/labs/{data.lab.id}", headers=staff_headers)
    assert response.status_code == 200
    lab = response.json()["lab"]
    assert len(lab["computers"]) == 19
    assert lab["computers"][2]["computer_name"] == "CL2-PC-003"
    assert lab["seats"][6]["seat_name"] == "CL2-CR-007"


@pytest.mark.asyncio
async def test_unknown_lab_is_404(client: AsyncClient, data, staff_headers):
    response = await client.get("/api/labs/00000000-0000-0000-0000-000000000000", headers=staff_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Lab not found"}


@pytest.mark.asyncio
async def test_classes_scoped_to_lab(client: AsyncClient, session, data, staff_headers):
    response = await client.get("/api/classes", params={"labId": str(data.lab.id)}, headers=staff_headers)
    classes = response.json()["classes"]
    assert [c["name"] for c in classes] == ["11 NM C"]
    assert classes[0]["group_count"] == 2
    assert classes[0]["student_count"] == 3

    response = await client.get("/api/classes", params={"labId": str(data.other_lab.id)}, headers=staff_headers)
    assert response.json()["classes"] == []

    # A schedule in the other lab brings the class into its list.
    session.add(Schedule(
        title="Extra", class_id=data.school_class.id, lab_id=data.other_lab.id,
        scheduled_date=date(2025, 3, 1), start_time=time(9), end_time=time(10),
    ))
    session.commit()
    response = await client.get("/api/classes", params={"labId": str(data.other_lab.id)}, headers=staff_headers)
    assert [c["name"] for c in response.json()["classes"]] == ["11 NM C"]


@pytest.mark.asyncio
async def test_students_and_groups(client: AsyncClient, data, staff_headers):
    response = await client.get(f"/api/capacity/students-groups/{data.school_class.id}", headers=staff_headers)
    assert response.status_code == 200
    body = response.json()
    by_name = {s["first_name"]: s for s in body["students"]}
    assert by_name["Kai"]["group_role"] == "leader"
    assert by_name["Mia"]["group_name"] == "Group A"
    assert by_name["Mia"]["group_role"] == "member"

    group_a = next(g for g in body["groups"] if g["name"] == "Group A")
    assert [m["first_name"] for m in group_a["members"]] == ["Kai", "Mia"]
    assert group_a["members"][0]["role"] == "leader"
    assert group_a["leader_name"] == "Kai Nguyen"
