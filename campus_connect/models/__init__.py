# models/__init__.py

from .roles import Role, PROGRAM_COORDINATOR
from .users import User, Identity
from .groups import GroupType, Department, ClassGroup, CourseGroup, GROUP_MODELS
from .messages import Message
from .assignments import Assignment
from .submissions import Submission

__all__ = [
    "Role",
    "PROGRAM_COORDINATOR",
    "User",
    "Identity",
    "GroupType",
    "Department",
    "ClassGroup",
    "CourseGroup",
    "GROUP_MODELS",
    "Message",
    "Assignment",
    "Submission",
]
