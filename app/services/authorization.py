"""
Single authorization guard for every operation.

``is_allowed`` is a pure function of (principal, action, resource); routes
and services call ``ensure_allowed`` instead of re-deriving role checks.
"""
import enum
from typing import Optional

from app.core.errors import Forbidden
from app.core.security import Principal
from app.models.check_run import CheckRun


class Action(str, enum.Enum):
    # Own run lifecycle (owner or staff)
    CREATE_RUN = "create_run"
    VIEW_RUN = "view_run"
    UPSERT_ENTRY = "upsert_entry"
    SUBMIT_RUN = "submit_run"
    # Oversight (staff)
    LIST_RUNS = "list_runs"
    REVIEW_RUN = "review_run"
    DELETE_RUN = "delete_run"
    DELETE_STRUCTURE = "delete_structure"
    VIEW_DASHBOARD = "view_dashboard"
    # Administration (admin only)
    MANAGE_STRUCTURE = "manage_structure"
    MANAGE_USERS = "manage_users"


OWNER_OR_STAFF = frozenset({
    Action.CREATE_RUN, Action.VIEW_RUN, Action.UPSERT_ENTRY, Action.SUBMIT_RUN,
})
STAFF_ONLY = frozenset({
    Action.LIST_RUNS, Action.REVIEW_RUN, Action.DELETE_RUN,
    Action.DELETE_STRUCTURE, Action.VIEW_DASHBOARD,
})
ADMIN_ONLY = frozenset({Action.MANAGE_STRUCTURE, Action.MANAGE_USERS})


def is_allowed(principal: Principal, action: Action, run: Optional[CheckRun] = None) -> bool:
    if action in OWNER_OR_STAFF:
        if principal.is_staff:
            return True
        # A run being created has no row yet; the creator is its owner.
        if run is None:
            return action == Action.CREATE_RUN
        return run.employee_id == principal.id
    if action in STAFF_ONLY:
        return principal.is_staff
    if action in ADMIN_ONLY:
        return principal.is_admin
    return False


def ensure_allowed(principal: Principal, action: Action, run: Optional[CheckRun] = None) -> None:
    if not is_allowed(principal, action, run):
        raise Forbidden()
