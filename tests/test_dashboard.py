from datetime import datetime, timedelta, timezone

from app.models import CheckRun
from app.services.dashboard_service import DashboardService

from tests.conftest import auth


def test_summary_counts_today_by_section(client, db, employee, make_user, supervisor, make_section, make_item):
    other = make_user("employee", "Otto Other")
    cocina = make_section("COCINA")
    patio = make_section("PATIO")
    make_section("ARCHIVO", is_active=False)
    item = make_item(cocina)

    run = client.post("/api/v1/check-runs", json={"section_id": cocina.id}, headers=auth(employee)).json()["run"]
    client.post(
        f"/api/v1/check-runs/{run['id']}/entries",
        data={"item_id": str(item.id), "result": "pass"},
        headers=auth(employee),
    )
    client.post(f"/api/v1/check-runs/{run['id']}/submit", headers=auth(employee))
    latest = client.post("/api/v1/check-runs", json={"section_id": cocina.id}, headers=auth(other)).json()["run"]

    db.add(CheckRun(
        employee_id=employee.id,
        section_id=patio.id,
        status="reviewed",
        started_at=datetime.now(timezone.utc) - timedelta(days=3),
    ))
    db.commit()

    res = client.get("/api/v1/admin/dashboard/summary", headers=auth(supervisor))
    assert res.status_code == 200
    body = res.json()
    assert body["totals"] == {"in_progress": 1, "submitted": 1, "reviewed": 0}

    by_name = {s["section_name"]: s for s in body["sections"]}
    assert list(by_name) == ["ARCHIVO", "COCINA", "PATIO"]
    assert by_name["COCINA"]["in_progress"] == 1
    assert by_name["COCINA"]["submitted"] == 1
    assert by_name["COCINA"]["last_run_id"] == latest["id"]
    assert by_name["COCINA"]["last_employee_name"] == "Otto Other"
    assert by_name["PATIO"]["reviewed"] == 0
    assert by_name["PATIO"]["last_run_id"] is None
    assert by_name["ARCHIVO"]["is_active"] is False


def test_summary_on_empty_day(db, make_section):
    make_section("COCINA")
    summary = DashboardService.get_summary(db)
    assert summary["totals"] == {"in_progress": 0, "submitted": 0, "reviewed": 0}
    assert summary["sections"][0]["last_status"] is None


def test_dashboard_is_staff_only(client, employee):
    assert client.get("/api/v1/admin/dashboard/summary", headers=auth(employee)).status_code == 403
