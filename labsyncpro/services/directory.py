from __future__ import annotations

import logging
import uuid
from typing import List

from sqlmodel import Session

from labsyncpro.models import Group, SchoolClass, User
from labsyncpro.schemas.group import (
    GroupMemberRead,
    GroupRead,
    GroupUpdate,
    StudentBrief,
    StudentRead,
    StudentsGroupsRead,
)
from .errors import NotFoundError, PermissionDenied, ValidationFailed, commit_or_conflict, get_or_404

log = logging.getLogger(__name__)


def student_brief(user: User) -> StudentBrief:
    return StudentBrief(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        student_code=user.student_code,
        email=user.email,
    )


def group_read(group: Group) -> GroupRead:
    members = group.ordered_members
    return GroupRead(
        id=group.id,
        class_id=group.class_id,
        name=group.name,
        description=group.description,
        max_members=group.max_members,
        leader_id=group.leader_id,
        leader_name=group.leader.full_name if group.leader else None,
        member_count=len(members),
        members=[GroupMemberRead(**student_brief(m.user).model_dump(), role=m.role) for m in members],
    )


def enrolled_students(school_class: SchoolClass) -> List[User]:
    students = [u for u in school_class.students if u.role == "student" and u.is_active]
    return sorted(students, key=lambda u: (u.first_name.lower(), u.last_name.lower()))


def students_and_groups(session: Session, class_id: uuid.UUID) -> StudentsGroupsRead:
    school_class = get_or_404(session, SchoolClass, class_id, "Class not found")
    groups = sorted(school_class.groups, key=lambda g: g.name.lower())

    membership = {}
    for group in groups:
        for m in group.memberships:
            membership.setdefault(m.user_id, (group, m.role))

    students = []
    for user in enrolled_students(school_class):
        group, role = membership.get(user.id, (None, None))
        students.append(StudentRead(
            **student_brief(user).model_dump(),
            group_id=group.id if group else None,
            group_name=group.name if group else None,
            group_role=role,
        ))
    return StudentsGroupsRead(students=students, groups=[group_read(g) for g in groups])


def update_group(session: Session, group_id: uuid.UUID, data: GroupUpdate, current_user: User) -> Group:
    group = session.get(Group, group_id)
    if not group:
        raise NotFoundError("Group not found")

    if not current_user.is_staff and group.leader_id != current_user.id:
        raise PermissionDenied("Only group leaders can update group details")

    changes = data.model_dump(exclude_unset=True)
    for key in ("name", "max_members"):
        if changes.get(key) is None:
            changes.pop(key, None)
    if not changes:
        raise ValidationFailed("No valid fields to update")

    member_count = len(group.memberships)
    if "max_members" in changes and changes["max_members"] < member_count:
        raise ValidationFailed(
            f"Cannot set max members to {changes['max_members']}. Current member count is {member_count}"
        )

    if "leader_id" in changes:
        leader_id = changes.pop("leader_id")
        by_user = {m.user_id: m for m in group.memberships}
        if leader_id is not None and leader_id not in by_user:
            raise ValidationFailed("Leader must be a member of the group")
        for m in group.memberships:
            m.role = "leader" if m.user_id == leader_id else "member"
            session.add(m)
        group.leader_id = leader_id

    for key, value in changes.items():
        setattr(group, key, value)

    session.add(group)
    commit_or_conflict(session, "A group with that name already exists in this class")
    session.refresh(group)
    log.info("Group %s updated by %s", group.id, current_user.email)
    return group
