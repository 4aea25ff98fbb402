import pytest

from app.core.errors import Forbidden
from app.core.security import Principal
from app.models import CheckRun
from app.services.authorization import Action, ensure_allowed, is_allowed

EMPLOYEE = Principal(id=1, role="employee")
OTHER_EMPLOYEE = Principal(id=2, role="employee")
SUPERVISOR = Principal(id=3, role="supervisor")
ADMIN = Principal(id=4, role="admin")

OWN_RUN = CheckRun(id=10, employee_id=1, section_id=1, status="in_progress")


@pytest.mark.parametrize("action", [Action.VIEW_RUN, Action.UPSERT_ENTRY, Action.SUBMIT_RUN])
def test_owner_and_staff_may_touch_a_run(action):
    assert is_allowed(EMPLOYEE, action, OWN_RUN)
    assert is_allowed(SUPERVISOR, action, OWN_RUN)
    assert is_allowed(ADMIN, action, OWN_RUN)
    assert not is_allowed(OTHER_EMPLOYEE, action, OWN_RUN)


def test_anyone_authenticated_may_create_a_run():
    assert is_allowed(EMPLOYEE, Action.CREATE_RUN)
    assert is_allowed(SUPERVISOR, Action.CREATE_RUN)


def test_run_actions_without_a_run_are_denied_for_employees():
    assert not is_allowed(EMPLOYEE, Action.VIEW_RUN)
    assert not is_allowed(EMPLOYEE, Action.SUBMIT_RUN)


@pytest.mark.parametrize("action", [
    Action.LIST_RUNS, Action.REVIEW_RUN, Action.DELETE_RUN,
    Action.DELETE_STRUCTURE, Action.VIEW_DASHBOARD,
])
def test_staff_only_actions(action):
    assert is_allowed(SUPERVISOR, action, OWN_RUN)
    assert is_allowed(ADMIN, action, OWN_RUN)
    # Owning the run does not grant oversight rights
    assert not is_allowed(EMPLOYEE, action, OWN_RUN)


@pytest.mark.parametrize("action", [Action.MANAGE_STRUCTURE, Action.MANAGE_USERS])
def test_admin_only_actions(action):
    assert is_allowed(ADMIN, action)
    assert not is_allowed(SUPERVISOR, action)
    assert not is_allowed(EMPLOYEE, action)


def test_unknown_role_gets_nothing_beyond_ownership():
    ghost = Principal(id=1, role="auditor")
    assert is_allowed(ghost, Action.VIEW_RUN, OWN_RUN)
    assert not is_allowed(ghost, Action.LIST_RUNS)


def test_ensure_allowed_raises_forbidden():
    with pytest.raises(Forbidden) as exc:
        ensure_allowed(OTHER_EMPLOYEE, Action.SUBMIT_RUN, OWN_RUN)
    assert exc.value.code == "FORBIDDEN"
    assert exc.value.http_status == 403
