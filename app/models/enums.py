import enum

class RoleEnum(str, enum.Enum):
    """Principal roles"""
    EMPLOYEE = "employee"
    SUPERVISOR = "supervisor"
    ADMIN = "admin"


class RunStatusEnum(str, enum.Enum):
    """Check-run lifecycle, forward only: in_progress -> submitted -> reviewed"""
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"
    REVIEWED = "reviewed"


class EntryResultEnum(str, enum.Enum):
    """Per-item outcome recorded in a run"""
    PASS = "pass"
    FAIL = "fail"
    NA = "na"


STAFF_ROLES = frozenset({RoleEnum.ADMIN.value, RoleEnum.SUPERVISOR.value})
