from app.models import CheckEntry, CheckItem, Section

from tests.conftest import auth


def test_admin_creates_section_and_items(client, admin):
    res = client.post("/api/v1/admin/sections", json={"name": "  cocina "}, headers=auth(admin))
    assert res.status_code == 201
    section = res.json()
    assert section["name"] == "COCINA"
    assert section["is_active"] is True

    res = client.post(
        "/api/v1/admin/items",
        json={"section_id": section["id"], "title": "  Campana limpia ", "instructions": "   "},
        headers=auth(admin),
    )
    assert res.status_code == 201
    item = res.json()
    assert item["title"] == "Campana limpia"
    assert item["instructions"] is None
    assert item["requires_photo"] is False
    assert item["requires_note_on_fail"] is True
    assert item["sort_order"] == 0

    res = client.get("/api/v1/admin/structure", headers=auth(admin))
    assert res.status_code == 200
    assert [s["name"] for s in res.json()["sections"]] == ["COCINA"]
    assert [i["id"] for i in res.json()["items"]] == [item["id"]]


def test_structure_management_is_admin_only(client, employee, supervisor, make_section):
    section = make_section()
    for user in (employee, supervisor):
        assert client.get("/api/v1/admin/structure", headers=auth(user)).status_code == 403
        assert client.post("/api/v1/admin/sections", json={"name": "X"}, headers=auth(user)).status_code == 403
        res = client.put(f"/api/v1/admin/sections/{section.id}", json={"name": "Y"}, headers=auth(user))
        assert res.status_code == 403


def test_create_item_in_unknown_section(client, admin):
    res = client.post("/api/v1/admin/items", json={"section_id": 404, "title": "Nada"}, headers=auth(admin))
    assert res.status_code == 404


def test_blank_names_are_rejected(client, admin, make_section):
    section = make_section()
    assert client.post("/api/v1/admin/sections", json={"name": "   "}, headers=auth(admin)).status_code == 400
    res = client.post("/api/v1/admin/items", json={"section_id": section.id, "title": "  "}, headers=auth(admin))
    assert res.status_code == 400


def test_partial_updates(client, admin, make_section, make_item):
    section = make_section("BODEGA")
    item = make_item(section, "Estantes", requires_photo=False, sort_order=3)

    res = client.put(f"/api/v1/admin/sections/{section.id}", json={"is_active": False}, headers=auth(admin))
    assert res.status_code == 200
    assert res.json()["name"] == "BODEGA"
    assert res.json()["is_active"] is False

    res = client.put(f"/api/v1/admin/items/{item.id}", json={"requires_photo": True}, headers=auth(admin))
    assert res.status_code == 200
    body = res.json()
    assert body["requires_photo"] is True
    assert body["title"] == "Estantes"
    assert body["sort_order"] == 3

    res = client.put(f"/api/v1/admin/items/{item.id}", json={"title": ""}, headers=auth(admin))
    assert res.status_code == 400

    res = client.put("/api/v1/admin/items/9999", json={"title": "x"}, headers=auth(admin))
    assert res.status_code == 404


def test_item_with_entries_needs_force(client, db, employee, supervisor, make_section, make_item):
    section = make_section()
    item = make_item(section)
    run = client.post("/api/v1/check-runs", json={"section_id": section.id}, headers=auth(employee)).json()["run"]
    client.post(
        f"/api/v1/check-runs/{run['id']}/entries",
        data={"item_id": str(item.id), "result": "pass"},
        headers=auth(employee),
    )

    res = client.delete(f"/api/v1/admin/items/{item.id}", headers=auth(supervisor))
    assert res.status_code == 409
    assert res.json()["code"] == "HAS_ENTRIES"
    assert db.query(CheckItem).filter(CheckItem.id == item.id).count() == 1

    res = client.delete(f"/api/v1/admin/items/{item.id}", params={"force": True}, headers=auth(supervisor))
    assert res.status_code == 200
    assert res.json() == {"ok": True, "item_id": item.id, "entries_deleted": 1}
    assert db.query(CheckItem).filter(CheckItem.id == item.id).count() == 0
    assert db.query(CheckEntry).filter(CheckEntry.item_id == item.id).count() == 0


def test_unused_item_is_deleted(client, supervisor, make_section, make_item):
    item = make_item(make_section())
    res = client.delete(f"/api/v1/admin/items/{item.id}", headers=auth(supervisor))
    assert res.json()["entries_deleted"] == 0


def test_section_delete_guards(client, db, employee, supervisor, make_section, make_item):
    with_items = make_section("CON ITEMS")
    make_item(with_items)
    res = client.delete(f"/api/v1/admin/sections/{with_items.id}", headers=auth(supervisor))
    assert res.status_code == 409
    assert res.json()["code"] == "HAS_ITEMS"

    with_runs = make_section("CON TURNOS")
    client.post("/api/v1/check-runs", json={"section_id": with_runs.id}, headers=auth(employee))
    res = client.delete(f"/api/v1/admin/sections/{with_runs.id}", headers=auth(supervisor))
    assert res.status_code == 409
    assert res.json()["code"] == "HAS_RUNS"

    empty = make_section("VACIA")
    res = client.delete(f"/api/v1/admin/sections/{empty.id}", headers=auth(supervisor))
    assert res.status_code == 200
    assert db.query(Section).filter(Section.id == empty.id).count() == 0


def test_employee_cannot_delete_structure(client, employee, make_section):
    section = make_section()
    assert client.delete(f"/api/v1/admin/sections/{section.id}", headers=auth(employee)).status_code == 403
