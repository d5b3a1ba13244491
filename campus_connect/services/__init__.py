from .access_control import AccessControl, Decision, GroupAction, role_gate, is_program_coordinator
from .messaging import MessageService
from .groups import GroupService

__all__ = [
    "AccessControl",
    "Decision",
    "GroupAction",
    "role_gate",
    "is_program_coordinator",
    "MessageService",
    "GroupService",
]
