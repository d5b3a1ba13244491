"""
services/access_control.py
-----------------
Group-scoped access control.

A request for a group operation passes two gates: the route's role
allow-list (role_gate, applied by the authorize_roles decorator) and a
membership test against the group document itself (has_access). Both
produce a Decision; denials carry the reason shown to the client.
"""

import logging
from enum import Enum

from campus_connect.models.groups import GroupType, GROUP_MODELS
from campus_connect.models.roles import Role, PROGRAM_COORDINATOR
from campus_connect.utils.errors import AuthorizationError, ValidationError

logger = logging.getLogger(__name__)


class Decision:

    def __init__(self, allowed, reason=None, error=AuthorizationError):
        self.allowed = allowed
        self.reason = reason
        self.error = error

    @classmethod
    def allow(cls):
        return cls(True)

    @classmethod
    def deny(cls, reason, error=AuthorizationError):
        return cls(False, reason, error)

    def __bool__(self):
        return self.allowed

    def raise_for_denial(self):
        if not self.allowed:
            raise self.error(self.reason)

    def __repr__(self):
        return "<Decision allow>" if self.allowed else f"<Decision deny {self.error.__name__}: {self.reason}>"


# ---------------------------------------------------------
# ROLE GATE
# ---------------------------------------------------------
def role_gate(required_roles, identity):
    roles = {r.value if isinstance(r, Role) else r for r in required_roles}

    if identity.role.value in roles:
        return Decision.allow()

    # Any faculty member may be the coordinator of some class group; the
    # handler checks the specific ClassGroup.
    if PROGRAM_COORDINATOR in roles and identity.role is Role.FACULTY:
        return Decision.allow()

    return Decision.deny(f"Role ({identity.role.value}) is not allowed to access this resource")


def is_program_coordinator(identity, class_group):
    return class_group.program_coordinator is not None and class_group.program_coordinator == identity.id


# ---------------------------------------------------------
# MEMBERSHIP RULES (one per group type)
# ---------------------------------------------------------
def _department_member(identity, department):
    if identity.role is Role.HOD:
        return department.hod is not None and department.hod == identity.id
    if identity.role is Role.FACULTY:
        return identity.id in department.faculties
    if identity.role is Role.STUDENT:
        return identity.id in department.students
    return False


def _class_group_member(identity, class_group):
    # Tutor and coordinator hold access whatever their role
    if class_group.program_coordinator == identity.id or class_group.tutor == identity.id:
        return True
    return identity.role is Role.STUDENT and identity.id in class_group.students


def _course_group_member(identity, course_group):
    if course_group.faculty is not None and course_group.faculty == identity.id:
        return True
    return identity.role is Role.STUDENT and identity.id in course_group.students


MEMBERSHIP_RULES = {
    GroupType.DEPARTMENT: _department_member,
    GroupType.CLASS_GROUP: _class_group_member,
    GroupType.COURSE_GROUP: _course_group_member,
}


class GroupAction(Enum):
    SEND = "send"
    READ = "read"


_MESSAGES = {
    GroupAction.SEND: {
        "admin": "Admin users are not allowed to send messages",
        "missing": "Please provide groupType, groupId and content",
        "denied": "You do not have permission to send messages to this group",
    },
    GroupAction.READ: {
        "admin": "Admin users are not allowed to read messages",
        "missing": "Please provide groupType and groupId",
        "denied": "You do not have permission to access messages from this group",
    },
}


class AccessControl:

    def __init__(self, db):
        self.db = db

    def has_access(self, identity, group_type, group_id):
        """
        True when identity may see the group's messages.
        An unknown group type, a malformed id or a group that does not exist
        all come back as False, the same answer as a non-member gets.
        """
        if identity.role is Role.ADMIN:
            return False

        group_type = GroupType.parse(group_type)
        if group_type is None:
            return False

        group = GROUP_MODELS[group_type].find_by_id(self.db, group_id)
        if group is None:
            return False

        return MEMBERSHIP_RULES[group_type](identity, group)

    def authorize_group_operation(self, identity, group_type, group_id, action=GroupAction.READ, content=None):
        messages = _MESSAGES[action]

        if identity.role is Role.ADMIN:
            return Decision.deny(messages["admin"])

        required = [group_type, group_id]
        if action is GroupAction.SEND:
            required.append(content)
        if not all(required):
            return Decision.deny(messages["missing"], error=ValidationError)

        if not self.has_access(identity, group_type, group_id):
            logger.info("Denied %s on %s %s for user %s", action.value, group_type, group_id, identity.id)
            return Decision.deny(messages["denied"])

        return Decision.allow()
