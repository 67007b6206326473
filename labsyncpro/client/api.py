from __future__ import annotations

import inspect
import logging
import uuid
from datetime import date
from typing import Any, Awaitable, Callable, List, Optional, Union

import httpx

from labsyncpro.config import settings
from labsyncpro.schemas.assignment import ComputerAssignmentRead, SeatAssignmentRead
from labsyncpro.schemas.auth import TokenResponse
from labsyncpro.schemas.capacity import CapacityOverview, StudentSeatInfo, UnassignedStudents
from labsyncpro.schemas.classroom import ClassRead
from labsyncpro.schemas.group import GroupRead, StudentsGroupsRead
from labsyncpro.schemas.lab import LabDetail, LabRead
from labsyncpro.schemas.schedule import ScheduleRead, ScheduleResolved
from .errors import NetworkError, NotFound, ServerValidationError

log = logging.getLogger(__name__)

TokenProvider = Callable[[], Union[Optional[str], Awaitable[Optional[str]]]]

Id = Union[uuid.UUID, str]


def _error_message(response: httpx.Response) -> tuple[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    message = None
    if isinstance(payload, dict):
        message = payload.get("error") or payload.get("message")
    return message or f"Request failed with status {response.status_code}", payload


def _params(**values) -> dict:
    return {k: str(v) for k, v in values.items() if v is not None}


class LabSyncClient:
    """Async client for the LabSync HTTP API.

    Every call is one round trip. Transport failures raise ``NetworkError``;
    non-2xx answers raise ``ServerValidationError`` (``NotFound`` for 404)
    carrying the server's ``error`` text.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        token_provider: Optional[TokenProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        self.token = token if token is not None else settings.API_TOKEN
        self._token_provider = token_provider
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            transport=transport,
            timeout=timeout if timeout is not None else settings.CLIENT_TIMEOUT_SECONDS,
        )

    async def __aenter__(self) -> "LabSyncClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _auth_headers(self) -> dict:
        token = self.token
        if self._token_provider is not None:
            token = self._token_provider()
            if inspect.isawaitable(token):
                token = await token
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def request(self, method: str, path: str, **kwargs) -> Any:
        headers = await self._auth_headers()
        try:
            response = await self._http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            log.warning("%s %s failed: %s", method, path, exc)
            raise NetworkError() from exc

        if response.is_success:
            return response.json() if response.content else None

        message, payload = _error_message(response)
        log.warning("%s %s returned %s: %s", method, path, response.status_code, message)
        if response.status_code == 404:
            raise NotFound(message, response.status_code, payload)
        raise ServerValidationError(message, response.status_code, payload)

    # Auth

    async def login(self, email: str, password: str) -> TokenResponse:
        data = await self.request("POST", "/auth/login", json={"email": email, "password": password})
        result = TokenResponse.model_validate(data)
        self.token = result.token
        return result

    # Resource catalog

    async def list_labs(self) -> List[LabRead]:
        data = await self.request("GET", "/labs")
        return [LabRead.model_validate(lab) for lab in data["labs"]]

    async def get_lab(self, lab_id: Id) -> LabDetail:
        data = await self.request("GET", f"/labs/{lab_id}")
        return LabDetail.model_validate(data["lab"])

    # Class / group directory

    async def list_classes(self, lab_id: Optional[Id] = None) -> List[ClassRead]:
        data = await self.request("GET", "/classes", params=_params(labId=lab_id))
        return [ClassRead.model_validate(c) for c in data["classes"]]

    async def students_and_groups(self, class_id: Id) -> StudentsGroupsRead:
        data = await self.request("GET", f"/capacity/students-groups/{class_id}")
        return StudentsGroupsRead.model_validate(data)

    async def update_group(self, group_id: Id, **changes) -> GroupRead:
        body = {k: (str(v) if isinstance(v, uuid.UUID) else v) for k, v in changes.items()}
        data = await self.request("PUT", f"/groups/{group_id}", json=body)
        return GroupRead.model_validate(data["group"])

    async def class_computer_assignments(self, class_id: Id, lab_id: Optional[Id] = None) -> List[ComputerAssignmentRead]:
        data = await self.request("GET", f"/classes/{class_id}/assignments", params=_params(labId=lab_id))
        return [ComputerAssignmentRead.model_validate(a) for a in data["assignments"]]

    # Schedules

    async def find_schedules(
        self, class_id: Optional[Id] = None, lab_id: Optional[Id] = None, on_date: Optional[date] = None
    ) -> List[ScheduleRead]:
        data = await self.request(
            "GET", "/schedules", params=_params(classId=class_id, labId=lab_id, date=on_date)
        )
        return [ScheduleRead.model_validate(s) for s in data["schedules"]]

    async def create_schedule(self, **fields) -> ScheduleRead:
        body = {k: str(v) if not isinstance(v, (str, int, type(None))) else v for k, v in fields.items()}
        data = await self.request("POST", "/schedules", json=body)
        return ScheduleRead.model_validate(data["schedule"])

    async def resolve_or_create_schedule(self, class_id: Id, lab_id: Id) -> ScheduleResolved:
        data = await self.request(
            "POST", "/schedules/resolve", json={"class_id": str(class_id), "lab_id": str(lab_id)}
        )
        return ScheduleResolved.model_validate(data)

    # Assignment ledger

    async def list_seat_assignments(self, lab_id: Id, schedule_id: Optional[Id] = None) -> List[SeatAssignmentRead]:
        data = await self.request(
            "GET", f"/capacity/labs/{lab_id}/seat-assignments", params=_params(scheduleId=schedule_id)
        )
        return [SeatAssignmentRead.model_validate(a) for a in data["seat_assignments"]]

    async def create_seat_assignment(self, user_id: Id, seat_id: Id, schedule_id: Id) -> SeatAssignmentRead:
        data = await self.request("POST", "/capacity/seat-assignments", json={
            "user_id": str(user_id), "seat_id": str(seat_id), "schedule_id": str(schedule_id),
        })
        return SeatAssignmentRead.model_validate(data["assignment"])

    async def update_seat_assignment(
        self, assignment_id: Id, user_id: Optional[Id] = None, seat_id: Optional[Id] = None
    ) -> SeatAssignmentRead:
        data = await self.request(
            "PUT", f"/capacity/seat-assignments/{assignment_id}", json=_params(user_id=user_id, seat_id=seat_id)
        )
        return SeatAssignmentRead.model_validate(data["assignment"])

    async def delete_seat_assignment(self, assignment_id: Id) -> None:
        await self.request("DELETE", f"/capacity/seat-assignments/{assignment_id}")

    async def create_computer_assignment(
        self,
        schedule_id: Id,
        computer_id: Id,
        assignment_type: str,
        group_id: Optional[Id] = None,
        user_id: Optional[Id] = None,
    ) -> ComputerAssignmentRead:
        body = _params(schedule_id=schedule_id, assigned_computer=computer_id, group_id=group_id, user_id=user_id)
        body["assignment_type"] = assignment_type
        data = await self.request("POST", "/assignments", json=body)
        return ComputerAssignmentRead.model_validate(data["assignment"])

    async def delete_computer_assignment(self, assignment_id: Id) -> None:
        await self.request("DELETE", f"/capacity/computer-assignments/{assignment_id}")

    async def unassigned_students(self, class_id: Id, lab_id: Id, schedule_id: Optional[Id] = None) -> UnassignedStudents:
        data = await self.request(
            "GET", f"/capacity/unassigned-students/{class_id}/{lab_id}", params=_params(scheduleId=schedule_id)
        )
        return UnassignedStudents.model_validate(data)

    # Overviews

    async def capacity_overview(self) -> CapacityOverview:
        return CapacityOverview.model_validate(await self.request("GET", "/capacity"))

    async def my_seat_info(self) -> List[StudentSeatInfo]:
        data = await self.request("GET", "/capacity/my-seat-info")
        return [StudentSeatInfo.model_validate(s) for s in data["seat_info"]]
