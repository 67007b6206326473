from .link_models import Enrollment
from .user import User, STAFF_ROLES
from .lab import Lab, Computer, Seat
from .classroom import SchoolClass
from .group import Group, GroupMember
from .schedule import Schedule, ScheduleStatus
from .assignment import AssignmentType, SeatAssignment, ComputerAssignment

__all__ = [
    "Enrollment",
    "User", "STAFF_ROLES",
    "Lab", "Computer", "Seat",
    "SchoolClass",
    "Group", "GroupMember",
    "Schedule", "ScheduleStatus",
    "AssignmentType", "SeatAssignment", "ComputerAssignment",
]
