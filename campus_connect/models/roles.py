from enum import Enum


class Role(str, Enum):
    STUDENT = "student"
    FACULTY = "faculty"
    HOD = "hod"
    PRINCIPAL = "principal"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value):
        """Return the Role for a raw string, or None if it is not one."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None

    @classmethod
    def values(cls):
        return [role.value for role in cls]


# Not a stored role: coordinator-ship is a per-ClassGroup relationship
# held by a faculty member, checked against the ClassGroup document.
PROGRAM_COORDINATOR = "programCoordinator"
