from dataclasses import replace

from server import create_app


def seed(client, debtors):
    res = client.post("/api/admin/debtors", json={"debtors": debtors})
    assert res.status_code == 200
    return res


def test_health(client):
    assert client.get("/api/health").get_json() == {"status": "ok"}


def test_login_success_returns_full_record(client):
    seed(client, [{"phone": "11999998888", "name": "Ana", "value": 100, "due_date": "15/02", "discount": 20}])
    res = client.post("/api/login", json={"phone": "(11) 99999-8888"})
    assert res.status_code == 200
    assert res.get_json() == {
        "success": True,
        "debtor": {"phone": "11999998888", "name": "Ana", "value": 100.0, "due_date": "15/02", "discount": 20.0},
    }


def test_login_missing_phone_is_400(client):
    for body in ({}, {"phone": ""}, None):
        res = client.post("/api/login", json=body)
        assert res.status_code == 400
        assert res.get_json()["success"] is False
        assert res.get_json()["message"]


def test_login_unknown_phone_is_404(client):
    res = client.post("/api/login", json={"phone": "11999998888"})
    assert res.status_code == 404
    assert res.get_json()["success"] is False


def test_admin_login(client, admin_password):
    assert client.post("/api/admin/login", json={"password": admin_password}).get_json() == {"success": True}
    res = client.post("/api/admin/login", json={"password": "wrong"})
    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_wrong_admin_password_changes_nothing(client):
    seed(client, [{"phone": "1", "name": "Ana"}])
    client.post("/api/admin/pix-config", json={"key": "abc"})
    before = (client.get("/api/admin/debtors").get_json(), client.get("/api/pix-config").get_json())

    assert client.post("/api/admin/login", json={"password": "wrong"}).status_code == 401

    after = (client.get("/api/admin/debtors").get_json(), client.get("/api/pix-config").get_json())
    assert before == after


def test_bulk_replace_drops_empty_phone(client):
    seed(client, [{"phone": "1"}, {"phone": ""}])
    rows = client.get("/api/admin/debtors").get_json()
    assert [r["phone"] for r in rows] == ["1"]


def test_bulk_replace_rejects_non_list(client):
    res = client.post("/api/admin/debtors", json={"debtors": "nope"})
    assert res.status_code == 400


def test_bulk_replace_store_failure_is_500_and_keeps_old_list(client):
    seed(client, [{"phone": "1", "name": "Ana"}])
    res = client.post("/api/admin/debtors", json={"debtors": [{"phone": "2"}, {"phone": "(2)"}]})
    assert res.status_code == 500
    assert res.get_json()["success"] is False
    assert [r["phone"] for r in client.get("/api/admin/debtors").get_json()] == ["1"]


def test_delete_one(client):
    seed(client, [{"phone": "1"}, {"phone": "2"}])
    assert client.delete("/api/admin/debtors/1").get_json() == {"success": True}
    assert [r["phone"] for r in client.get("/api/admin/debtors").get_json()] == ["2"]
    # Unknown key is still a success
    assert client.delete("/api/admin/debtors/999").status_code == 200


def test_reset(client, store, config_rows):
    seed(client, [{"phone": "1"}])
    client.post("/api/admin/pix-config", json={"key": "abc", "qrCode": "data:image/png;base64,AAAA"})
    assert client.post("/api/admin/reset").get_json() == {"success": True}
    assert client.get("/api/admin/debtors").get_json() == []
    assert client.get("/api/pix-config").get_json() == {"key": "", "qrCode": None}
    assert config_rows(store) == 1


def test_pix_config_partial_updates(client):
    assert client.get("/api/pix-config").get_json() == {"key": "", "qrCode": None}

    client.post("/api/admin/pix-config", json={"qrCode": "data:image/png;base64,QR"})
    client.post("/api/admin/pix-config", json={"key": "abc"})
    assert client.get("/api/pix-config").get_json() == {"key": "abc", "qrCode": "data:image/png;base64,QR"}

    client.post("/api/admin/pix-config", json={"qrCode": "data:image/png;base64,QR2"})
    assert client.get("/api/pix-config").get_json() == {"key": "abc", "qrCode": "data:image/png;base64,QR2"}


def test_development_mode_serves_no_assets(client):
    assert client.get("/").status_code == 404


def test_production_mode_serves_static_with_spa_fallback(service, settings, tmp_path):
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "index.html").write_text("<html>portal</html>", encoding="utf-8")
    (dist / "app.js").write_text("console.log(1)", encoding="utf-8")

    app = create_app(service, replace(settings, app_env="production", static_dir=dist))
    client = app.test_client()

    assert b"portal" in client.get("/").data
    assert b"console.log" in client.get("/app.js").data
    assert b"portal" in client.get("/some/client/route").data
    assert client.get("/api/unknown").status_code == 404
    assert client.get("/api/health").get_json() == {"status": "ok"}


def test_delete_all_clients_keeps_pix_config(client):
    seed(client, [{"phone": "1"}, {"phone": "2"}])
    client.post("/api/admin/pix-config", json={"key": "abc"})
    seed(client, [])
    assert client.get("/api/admin/debtors").get_json() == []
    assert client.get("/api/pix-config").get_json()["key"] == "abc"
