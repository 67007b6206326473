"""Capacity planning: the actions behind the lab seating screen."""
from __future__ import annotations

import asyncio
import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, List, Optional

from labsyncpro.config import settings
from labsyncpro.models.assignment import AssignmentType
from labsyncpro.seating import SeatStatus, available_computers, seat_status
from .api import Id, LabSyncClient
from .confirmation import ConfirmationOptions, Confirmer, PromptConfirmer
from .errors import (
    NETWORK_ERROR_MESSAGE,
    ApiError,
    LookupFailed,
    NetworkError,
    NotFound,
    ScheduleCreationFailed,
)
from .notifications import Notifier
from .schedules import ScheduleResolver
from .state import CapacityState, DisplayMode, RequestGenerations

log = logging.getLogger(__name__)

CLASS_SCOPED_QUERIES = ("class_data", "seat_assignments", "unassigned")


@dataclass(frozen=True)
class SeatTile:
    seat: Any
    status: SeatStatus
    assignment: Optional[Any] = None


def _as_uuid(value: Id) -> uuid.UUID:
    return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))


class CapacityPlanningController:
    """Owns ``CapacityState`` and is the only thing that changes it.

    Reads are guarded per query by a request generation, so a response that
    arrives after the user has moved on is dropped. Mutations touch the state
    only after the server confirmed them.
    """

    def __init__(
        self,
        api: LabSyncClient,
        confirmer: Optional[Confirmer] = None,
        notifier: Optional[Notifier] = None,
        match_by: Optional[str] = None,
    ):
        self.api = api
        self.resolver = ScheduleResolver(api)
        self.confirmer = confirmer or PromptConfirmer()
        self.notifier = notifier or Notifier()
        self.match_by = match_by or settings.COMPUTER_AVAILABILITY_MATCH
        self.state = CapacityState()
        self._generations = RequestGenerations()

    @contextmanager
    def _loading(self, key: str):
        self.state.loading.add(key)
        try:
            yield
        finally:
            self.state.loading.discard(key)

    def _report(self, title: str, exc: ApiError) -> None:
        if isinstance(exc, (NetworkError, LookupFailed)):
            self.notifier.error("Network Error", NETWORK_ERROR_MESSAGE)
        else:
            self.notifier.error(title, exc.message)

    def _require_selection(self, message: str) -> bool:
        if self.state.selected_lab_id is None or self.state.selected_class_id is None:
            self.notifier.warning("Selection Required", message)
            return False
        return True

    # Loads

    async def load_labs(self) -> None:
        gen = self._generations.next("labs")
        with self._loading("labs"):
            try:
                labs = await self.api.list_labs()
            except ApiError as exc:
                if self._generations.is_current("labs", gen):
                    self._report("Load Failed", exc)
                return
        if self._generations.is_current("labs", gen):
            self.state.labs = labs

    async def _load_classes(self, lab_id: uuid.UUID) -> None:
        gen = self._generations.next("classes")
        with self._loading("classes"):
            try:
                classes = await self.api.list_classes(lab_id)
            except ApiError as exc:
                if self._generations.is_current("classes", gen):
                    self._report("Load Failed", exc)
                return
        if self._generations.is_current("classes", gen):
            self.state.classes = classes

    async def refresh_lab_resources(self) -> None:
        lab_id = self.state.selected_lab_id
        if lab_id is None:
            return
        gen = self._generations.next("lab_resources")
        with self._loading("lab_resources"):
            try:
                lab = await self.api.get_lab(lab_id)
            except ApiError as exc:
                if self._generations.is_current("lab_resources", gen):
                    self._report("Load Failed", exc)
                return
        if self._generations.is_current("lab_resources", gen):
            self.state.computers = lab.computers
            self.state.seats = lab.seats

    async def refresh_class_assignments(self) -> None:
        """Groups, students and computer assignments for the selected class."""
        lab_id, class_id = self.state.selected_lab_id, self.state.selected_class_id
        if lab_id is None or class_id is None:
            return
        gen = self._generations.next("class_data")
        with self._loading("class_data"):
            try:
                directory, assignments = await asyncio.gather(
                    self.api.students_and_groups(class_id),
                    self.api.class_computer_assignments(class_id, lab_id),
                )
            except ApiError as exc:
                if self._generations.is_current("class_data", gen):
                    self._report("Load Failed", exc)
                return
        if self._generations.is_current("class_data", gen):
            self.state.groups = directory.groups
            self.state.students = directory.students
            self.state.set_computer_assignments(assignments)

    async def refresh_seat_assignments(self) -> None:
        """Reload seat assignments, scoped to the class's schedule when one exists.

        Without a class or a schedule the lab-wide list is loaded and marked
        unscoped: it may hold assignments from several schedules.
        """
        lab_id, class_id = self.state.selected_lab_id, self.state.selected_class_id
        if lab_id is None:
            return
        gen = self._generations.next("seat_assignments")
        with self._loading("seat_assignments"):
            try:
                schedule = await self.resolver.lookup(class_id, lab_id) if class_id else None
                schedule_id = schedule.id if schedule else None
                assignments = await self.api.list_seat_assignments(lab_id, schedule_id)
            except ApiError as exc:
                if self._generations.is_current("seat_assignments", gen):
                    self._report("Load Failed", exc)
                return
        if self._generations.is_current("seat_assignments", gen):
            self.state.schedule_id = schedule_id
            self.state.set_seat_assignments(assignments, scoped=schedule_id is not None)

    async def _load_unassigned(self) -> None:
        lab_id, class_id = self.state.selected_lab_id, self.state.selected_class_id
        gen = self._generations.next("unassigned")
        with self._loading("unassigned"):
            try:
                result = await self.api.unassigned_students(class_id, lab_id, self.state.schedule_id)
            except ApiError as exc:
                if self._generations.is_current("unassigned", gen):
                    self._report("Load Failed", exc)
                return
        if self._generations.is_current("unassigned", gen):
            self.state.unassigned_students = result.unassigned_students

    # Selection

    async def select_lab(self, lab_id: Id) -> None:
        lab_id = _as_uuid(lab_id)
        self.state.selected_lab_id = lab_id
        self.state.clear_class_scope()
        self.state.classes = []
        self.state.computers = []
        self.state.seats = []
        self._generations.supersede(*CLASS_SCOPED_QUERIES)
        await asyncio.gather(
            self._load_classes(lab_id),
            self.refresh_lab_resources(),
            self.refresh_seat_assignments(),
        )

    async def select_class(self, class_id: Id) -> None:
        if self.state.selected_lab_id is None:
            self.notifier.warning("Selection Required", "Please select a lab first")
            return
        self.state.clear_class_scope()
        self.state.selected_class_id = _as_uuid(class_id)
        self._generations.supersede(*CLASS_SCOPED_QUERIES)
        await asyncio.gather(self.refresh_class_assignments(), self.refresh_seat_assignments())

    def set_display_mode(self, mode: DisplayMode) -> bool:
        if self.state.selected_lab_id is None:
            self.notifier.warning("Selection Required", "Please select a lab first")
            return False
        self.state.display_mode = DisplayMode(mode)
        return True

    async def open_seat_picker(self, seat_id: Id) -> bool:
        if not self._require_selection("Please select both a lab and a class before assigning seats"):
            return False
        seat_id = _as_uuid(seat_id)
        seat = next((s for s in self.state.seats if s.id == seat_id), None)
        if seat is not None and self.seat_status(seat) == SeatStatus.MAINTENANCE:
            self.notifier.warning("Seat Unavailable", "This seat is under maintenance")
            return False
        self.state.assigning_seat_id = seat_id
        await self._load_unassigned()
        return True

    def close_seat_picker(self) -> None:
        self._generations.supersede("unassigned")
        self.state.assigning_seat_id = None
        self.state.unassigned_students = []

    # Mutations

    async def _resolve_schedule(self):
        try:
            return await self.resolver.resolve_or_create(self.state.selected_class_id, self.state.selected_lab_id)
        except ScheduleCreationFailed as exc:
            self.notifier.error("Schedule Creation Failed", exc.message)
        except LookupFailed as exc:
            self._report("Schedule Creation Failed", exc)
        return None

    async def assign_seat_to_student(self, student_id: Id, seat_id: Optional[Id] = None) -> bool:
        seat_id = seat_id or self.state.assigning_seat_id
        if seat_id is None or not self._require_selection(
            "Please select both a lab and a class before assigning seats"
        ):
            return False
        schedule = await self._resolve_schedule()
        if schedule is None:
            return False
        try:
            assignment = await self.api.create_seat_assignment(student_id, seat_id, schedule.id)
        except ApiError as exc:
            self._report("Assignment Failed", exc)
            return False

        self.close_seat_picker()
        await self.refresh_seat_assignments()
        self.notifier.success(
            "Seat Assigned", f"{assignment.student_name} has been assigned to seat {assignment.seat_name}"
        )
        return True

    async def _assign_computer(self, computer_id: Id, assignment_type: AssignmentType, **owner) -> bool:
        if not self._require_selection("Please select both a lab and a class before assigning computers"):
            return False
        schedule = await self._resolve_schedule()
        if schedule is None:
            return False
        try:
            assignment = await self.api.create_computer_assignment(
                schedule.id, computer_id, assignment_type.value, **owner
            )
        except ApiError as exc:
            self._report("Assignment Failed", exc)
            return False

        await self.refresh_class_assignments()
        owner_name = assignment.group_name or assignment.student_name
        self.notifier.success("Computer Assigned", f"{assignment.computer_name} has been assigned to {owner_name}")
        return True

    async def assign_computer_to_group(self, group_id: Id, computer_id: Id) -> bool:
        return await self._assign_computer(computer_id, AssignmentType.GROUP, group_id=group_id)

    async def assign_computer_to_student(self, student_id: Id, computer_id: Id) -> bool:
        return await self._assign_computer(computer_id, AssignmentType.INDIVIDUAL, user_id=student_id)

    async def unassign_seat(self, assignment_id: Id) -> bool:
        assignment_id = _as_uuid(assignment_id)
        assignment = next((a for a in self.state.seat_assignments if a.id == assignment_id), None)
        who = f"{assignment.student_name} from seat {assignment.seat_name}" if assignment else "this seat"
        confirmed = await self.confirmer.confirm(ConfirmationOptions(
            title="Unassign Seat",
            message=f"Are you sure you want to unassign {who}? This action cannot be undone.",
            confirm_text="Unassign",
            type="warning",
        ))
        if not confirmed:
            return False

        try:
            await self.api.delete_seat_assignment(assignment_id)
        except NotFound:
            await self.refresh_seat_assignments()
            self.notifier.info("Already Unassigned", "This seat assignment had already been removed")
            return True
        except ApiError as exc:
            self._report("Unassignment Failed", exc)
            return False

        await self.refresh_seat_assignments()
        self.notifier.success("Seat Unassigned", f"Unassigned {who}")
        return True

    async def unassign_computer_from_group(self, group_id: Id) -> bool:
        assignment = self.assignment_for_group(group_id)
        if assignment is None:
            self.notifier.warning("No Assignment", "This group has no computer assigned")
            return False
        confirmed = await self.confirmer.confirm(ConfirmationOptions(
            title="Unassign Computer",
            message=(
                f"Are you sure you want to unassign {assignment.computer_name} from "
                f"{assignment.group_name}? This action cannot be undone."
            ),
            confirm_text="Unassign",
            type="warning",
        ))
        if not confirmed:
            return False

        try:
            await self.api.delete_computer_assignment(assignment.id)
        except NotFound:
            await self.refresh_class_assignments()
            self.notifier.info("Already Unassigned", "This computer assignment had already been removed")
            return True
        except ApiError as exc:
            self._report("Unassignment Failed", exc)
            return False

        await self.refresh_class_assignments()
        self.notifier.success(
            "Computer Unassigned", f"{assignment.computer_name} has been unassigned from {assignment.group_name}"
        )
        return True

    async def update_group(self, group_id: Id, **changes) -> bool:
        try:
            group = await self.api.update_group(group_id, **changes)
        except ApiError as exc:
            self._report("Update Failed", exc)
            return False
        await self.refresh_class_assignments()
        self.notifier.success("Group Updated", f"{group.name} has been updated")
        return True

    # Derived views

    def seat_status(self, seat) -> SeatStatus:
        return seat_status(seat, self.state.seat_index.get(seat.id))

    def seat_tiles(self) -> List[SeatTile]:
        return [
            SeatTile(seat=s, status=self.seat_status(s), assignment=self.state.seat_index.get(s.id))
            for s in self.state.seats
        ]

    def available_computers(self) -> List[Any]:
        return available_computers(self.state.computers, self.state.computer_assignments, self.match_by)

    def assignment_for_group(self, group_id: Id):
        return self.state.group_index.get(_as_uuid(group_id))

    def assignment_for_seat(self, seat_id: Id):
        return self.state.seat_index.get(_as_uuid(seat_id))
