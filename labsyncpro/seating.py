"""Derived capacity views: seat status, seat names and id-keyed lookups.

Nothing here touches the store; the helpers work on anything exposing the
right attributes, so the API routes (ORM rows) and the planning controller
(response schemas) share them.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import Any, Callable, Hashable, Iterable, Literal, TypeVar

T = TypeVar("T")

LAB_CODE_RE = re.compile(r"computer\s+lab\s*(\d+)", re.IGNORECASE)


class SeatStatus(str, Enum):
    AVAILABLE = "available"
    RESERVED = "reserved"
    MAINTENANCE = "maintenance"


def seat_status(seat: Any, assignment: Any | None) -> SeatStatus:
    # Maintenance wins even when an assignment row still exists.
    if not seat.is_available:
        return SeatStatus.MAINTENANCE
    if assignment is not None:
        return SeatStatus.RESERVED
    return SeatStatus.AVAILABLE


def lab_code(lab_name: str) -> str:
    m = LAB_CODE_RE.search(lab_name or "")
    if m:
        return f"CL{int(m.group(1))}"
    if "programming lab" in (lab_name or "").lower():
        return "PL"
    return "RL"


def generate_seat_name(lab_name: str, seat_number: int) -> str:
    """`Computer Lab 2`, 7 -> `CL2-CR-007`."""
    return f"{lab_code(lab_name)}-CR-{seat_number:03d}"


def index_by(rows: Iterable[T], key: Callable[[T], Hashable | None]) -> dict[Hashable, T]:
    """Map key -> row, keeping the first row per key and skipping rows without one."""
    index: dict[Hashable, T] = {}
    for row in rows:
        k = key(row)
        if k is not None and k not in index:
            index[k] = row
    return index


def available_computers(
    computers: Iterable[Any],
    assignments: Iterable[Any],
    match_by: Literal["id", "name"] = "id",
) -> list[Any]:
    """Functional computers without an assignment.

    `match_by="name"` reproduces the legacy lookup, where every computer
    sharing an assigned computer's name is treated as taken.
    """
    assignments = list(assignments)
    if match_by == "name":
        taken = {a.computer_name for a in assignments if getattr(a, "computer_name", None)}
        return [c for c in computers if c.is_functional and c.computer_name not in taken]
    if match_by != "id":
        raise ValueError(f"Unknown availability match: {match_by!r}")
    taken_ids = {a.computer_id for a in assignments}
    return [c for c in computers if c.is_functional and c.id not in taken_ids]


def unassigned_students(students: Iterable[T], seated_user_ids: Iterable[Hashable]) -> list[T]:
    """Students minus those holding a seat: {enrolled} - {seated}."""
    seated = set(seated_user_ids)
    return [s for s in students if s.id not in seated]
