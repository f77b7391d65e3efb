from conftest import employee_headers, hr_headers


def _create_asset(client, name="Laptop", asset_type="Returnable", quantity=3, headers=None):
    body = {
        "name": name,
        "image": f"https://img.test/{name.lower()}.png",
        "asset_type": asset_type,
        "total_quantity": quantity,
    }
    r = client.post("/hr/assets", json=body, headers=headers or hr_headers())
    assert r.status_code == 201, r.text
    return r.json()


def test_create_asset_sets_available_to_total(client, acme):
    a = _create_asset(client, quantity=4)
    assert a["total_quantity"] == 4
    assert a["available_quantity"] == 4
    assert a["company_name"] == "Acme"
    assert a["hr_email"] == "hr@acme.test"

    r = client.get(f"/hr/assets/{a['id']}", headers=hr_headers())
    assert r.status_code == 200
    assert r.json()["name"] == "Laptop"


def test_asset_routes_require_hr(client):
    body = {"name": "Chair", "image": "x", "asset_type": "Non-returnable", "total_quantity": 1}

    r = client.post("/hr/assets", json=body)
    assert r.status_code == 401

    r = client.post("/hr/assets", json=body, headers=employee_headers("emma@acme.test"))
    assert r.status_code == 403


def test_negative_quantity_rejected(client):
    body = {"name": "Chair", "image": "x", "asset_type": "Non-returnable", "total_quantity": -1}
    r = client.post("/hr/assets", json=body, headers=hr_headers())
    assert r.status_code == 422


def test_list_assets_scoped_to_hr_and_filtered(client, acme):
    _create_asset(client, name="Laptop", asset_type="Returnable")
    _create_asset(client, name="Notebook", asset_type="Non-returnable")
    _create_asset(client, name="Monitor", headers=hr_headers("hr@other.test", "hr-2"))

    r = client.get("/hr/assets", headers=hr_headers())
    assert r.status_code == 200
    assert {a["name"] for a in r.json()} == {"Laptop", "Notebook"}

    r = client.get("/hr/assets?asset_type=Non-returnable", headers=hr_headers())
    assert [a["name"] for a in r.json()] == ["Notebook"]

    # 空文字フィルタでも落ちない
    r = client.get("/hr/assets?asset_type=&order=", headers=hr_headers())
    assert r.status_code == 200
    assert len(r.json()) == 2


def test_resize_shifts_available_and_guards_units_in_use(client, acme):
    a = _create_asset(client, quantity=2)
    r = client.post(
        "/employee/requests",
        json={"asset_id": a["id"]},
        headers=employee_headers("emma@acme.test"),
    )
    req_id = r.json()["id"]
    r = client.patch(f"/hr/requests/{req_id}/approve", headers=hr_headers())
    assert r.status_code == 200

    r = client.patch(f"/hr/assets/{a['id']}", json={"total_quantity": 5}, headers=hr_headers())
    assert r.status_code == 200, r.text
    assert r.json()["total_quantity"] == 5
    assert r.json()["available_quantity"] == 4

    # one unit is handed out, so total cannot drop to zero
    r = client.patch(f"/hr/assets/{a['id']}", json={"total_quantity": 0}, headers=hr_headers())
    assert r.status_code == 409

    r = client.patch(f"/hr/assets/{a['id']}", json={"total_quantity": 1, "name": "Laptop Pro"}, headers=hr_headers())
    assert r.status_code == 200
    data = r.json()
    assert data["total_quantity"] == 1
    assert data["available_quantity"] == 0
    assert data["name"] == "Laptop Pro"


def test_update_and_delete_missing_asset(client):
    r = client.patch("/hr/assets/nope", json={"name": "x"}, headers=hr_headers())
    assert r.status_code == 404

    r = client.delete("/hr/assets/nope", headers=hr_headers())
    assert r.status_code == 404


def test_delete_asset_keeps_request_history(client, acme):
    a = _create_asset(client, name="Headset", quantity=1)
    r = client.post(
        "/employee/requests",
        json={"asset_id": a["id"], "note": "for calls"},
        headers=employee_headers("emma@acme.test"),
    )
    req = r.json()

    r = client.delete(f"/hr/assets/{a['id']}", headers=hr_headers())
    assert r.status_code == 204

    r = client.get(f"/hr/assets/{a['id']}", headers=hr_headers())
    assert r.status_code == 404

    r = client.get("/employee/requests", headers=employee_headers("emma@acme.test"))
    history = r.json()
    assert len(history) == 1
    assert history[0]["id"] == req["id"]
    assert history[0]["asset_name"] == "Headset"
    assert history[0]["status"] == "pending"


def test_asset_routes_hide_other_companies_assets(client, acme):
    a = _create_asset(client, quantity=2)
    other = hr_headers("hr@globex.test", "hr-2")

    assert client.get(f"/hr/assets/{a['id']}", headers=other).status_code == 404
    r = client.patch(f"/hr/assets/{a['id']}", json={"name": "Mine now"}, headers=other)
    assert r.status_code == 404
    assert client.delete(f"/hr/assets/{a['id']}", headers=other).status_code == 404

    r = client.get(f"/hr/assets/{a['id']}", headers=hr_headers())
    assert r.status_code == 200
    assert r.json()["name"] == "Laptop"
