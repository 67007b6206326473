from __future__ import annotations

import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from labsyncpro.seating import index_by


class Phase(str, Enum):
    NO_LAB_SELECTED = "no_lab_selected"
    LAB_SELECTED = "lab_selected"
    CLASS_SELECTED = "class_selected"


class DisplayMode(str, Enum):
    SEATS = "seats"
    COMPUTERS = "computers"


@dataclass
class CapacityState:
    """View model of the capacity planning screen.

    Only ``CapacityPlanningController`` writes to it. The ``*_index`` maps are
    rebuilt from the assignment lists each time those are replaced.
    """
    labs: List[Any] = field(default_factory=list)
    selected_lab_id: Optional[uuid.UUID] = None
    selected_class_id: Optional[uuid.UUID] = None
    classes: List[Any] = field(default_factory=list)
    groups: List[Any] = field(default_factory=list)
    students: List[Any] = field(default_factory=list)
    computers: List[Any] = field(default_factory=list)
    seats: List[Any] = field(default_factory=list)
    seat_assignments: List[Any] = field(default_factory=list)
    seat_assignments_scoped: bool = False
    computer_assignments: List[Any] = field(default_factory=list)
    schedule_id: Optional[uuid.UUID] = None
    display_mode: DisplayMode = DisplayMode.SEATS
    unassigned_students: List[Any] = field(default_factory=list)
    assigning_seat_id: Optional[uuid.UUID] = None
    loading: Set[str] = field(default_factory=set)

    seat_index: Dict[Any, Any] = field(default_factory=dict)
    computer_index: Dict[Any, Any] = field(default_factory=dict)
    group_index: Dict[Any, Any] = field(default_factory=dict)

    @property
    def phase(self) -> Phase:
        if self.selected_lab_id is None:
            return Phase.NO_LAB_SELECTED
        if self.selected_class_id is None:
            return Phase.LAB_SELECTED
        return Phase.CLASS_SELECTED

    def set_seat_assignments(self, assignments: List[Any], scoped: bool) -> None:
        self.seat_assignments = list(assignments)
        self.seat_assignments_scoped = scoped
        self.seat_index = index_by(self.seat_assignments, lambda a: a.seat_id)

    def set_computer_assignments(self, assignments: List[Any]) -> None:
        self.computer_assignments = list(assignments)
        self.computer_index = index_by(self.computer_assignments, lambda a: a.computer_id)
        self.group_index = index_by(self.computer_assignments, lambda a: a.group_id)

    def clear_class_scope(self) -> None:
        self.selected_class_id = None
        self.groups = []
        self.students = []
        self.schedule_id = None
        self.unassigned_students = []
        self.assigning_seat_id = None
        self.set_seat_assignments([], scoped=False)
        self.set_computer_assignments([])


class RequestGenerations:
    """Monotonic counter per logical query; only the newest response may land."""

    def __init__(self):
        self._current: Dict[str, int] = defaultdict(int)

    def next(self, key: str) -> int:
        self._current[key] += 1
        return self._current[key]

    def supersede(self, *keys: str) -> None:
        for key in keys:
            self.next(key)

    def is_current(self, key: str, generation: int) -> bool:
        return self._current[key] == generation
