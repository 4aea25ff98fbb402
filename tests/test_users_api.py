from tests.conftest import auth, issue_token


def test_me_returns_current_user(client, employee):
    res = client.get("/api/v1/auth/me", headers=auth(employee))
    assert res.status_code == 200
    assert res.json()["email"] == employee.email
    assert res.json()["role"] == "employee"


def test_missing_or_malformed_credentials(client):
    res = client.get("/api/v1/auth/me")
    assert res.status_code == 401
    assert res.json()["code"] == "UNAUTHENTICATED"

    res = client.get("/api/v1/auth/me", headers={"Authorization": "Token abc"})
    assert res.status_code == 401


def test_token_signed_with_other_secret(client, employee):
    token = issue_token(employee.id, secret="not-the-secret")
    res = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401


def test_expired_token(client, employee):
    token = issue_token(employee.id, expires_in=-60)
    res = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401


def test_deleted_user_token_stops_working(client, db, employee):
    headers = auth(employee)
    db.delete(employee)
    db.commit()

    res = client.get("/api/v1/check-runs/me", headers=headers)
    assert res.status_code == 401


def test_list_users_is_admin_only(client, employee, supervisor, admin):
    assert client.get("/api/v1/admin/users", headers=auth(supervisor)).status_code == 403
    res = client.get("/api/v1/admin/users", headers=auth(admin))
    assert res.status_code == 200
    assert {u["id"] for u in res.json()} == {employee.id, supervisor.id, admin.id}


def test_role_change_applies_to_existing_token(client, employee, admin):
    headers = auth(employee)
    assert client.get("/api/v1/admin/check-runs", headers=headers).status_code == 403

    res = client.put(f"/api/v1/admin/users/{employee.id}/role", json={"role": "supervisor"}, headers=auth(admin))
    assert res.status_code == 200
    assert res.json()["role"] == "supervisor"

    assert client.get("/api/v1/admin/check-runs", headers=headers).status_code == 200


def test_role_change_validation(client, employee, admin):
    res = client.put(f"/api/v1/admin/users/{employee.id}/role", json={"role": "owner"}, headers=auth(admin))
    assert res.status_code == 400

    res = client.put("/api/v1/admin/users/9999/role", json={"role": "admin"}, headers=auth(admin))
    assert res.status_code == 404

    res = client.put(f"/api/v1/admin/users/{admin.id}/role", json={"role": "admin"}, headers=auth(employee))
    assert res.status_code == 403
