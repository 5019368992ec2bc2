"""
test_routers_clients.py — Tests for routers/clients.py

Client directory and requirement CRUD over sample data (empty tables) and
live rows, plus role checks.

Called by: pytest
Depends on: tests/conftest.py (client, factories)
"""

from app.services.entity_book import LOCAL_ONLY_NOTICE

VIEWER = {"X-User-Role": "viewer"}


def _workspace(client):
    return client.app.state.workspace


# ── Listing ──────────────────────────────────────────────────────────


def test_list_serves_sample_data_when_table_empty(client):
    resp = client.get("/api/clients")
    assert resp.status_code == 200
    data = resp.json()
    assert data["origin"] == "fixture"
    assert data["source_reason"] == "backend_empty"
    assert data["total"] == 5
    assert data["can_edit"] is True
    by_id = {c["id"]: c for c in data["items"]}
    assert by_id["client-001"]["name"] == "MedTech Solutions Inc."
    assert by_id["client-001"]["requirement_count"] == 2
    assert by_id["client-005"]["requirement_count"] == 0


def test_list_status_filter(client):
    data = client.get("/api/clients", params={"status": "pending"}).json()
    assert [c["id"] for c in data["items"]] == ["client-003"]


def test_viewer_sees_read_only_flag(client):
    assert client.get("/api/clients", headers=VIEWER).json()["can_edit"] is False


def test_unknown_role_is_rejected(client):
    resp = client.get("/api/clients", headers={"X-User-Role": "admin"})
    assert resp.status_code == 400
    assert resp.json()["status_code"] == 400


def test_live_rows(client, test_requirement_row, test_client_row):
    data = client.get("/api/clients").json()
    assert data["origin"] == "live"
    assert [c["id"] for c in data["items"]] == [test_client_row.id]
    assert data["items"][0]["requirement_count"] == 1


# ── Client writes ────────────────────────────────────────────────────


def test_create_client(client):
    resp = client.post("/api/clients", json={"name": "Nordic Pharma", "country": "Sweden"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["persisted"] is True
    assert body["item"]["name"] == "Nordic Pharma"
    assert body["item"]["origin"] == "live"
    listed = client.get("/api/clients").json()
    assert listed["origin"] == "live"
    assert listed["total"] == 1


def test_create_client_validation_error(client):
    resp = client.post("/api/clients", json={"name": " ", "contact_email": "nope"})
    assert resp.status_code == 422
    body = resp.json()
    assert body["error"] == "Validation failed"
    assert len(body["request_id"]) == 8
    assert {tuple(d["loc"])[-1] for d in body["detail"]} == {"name", "contact_email"}


def test_viewer_cannot_create(client):
    resp = client.post("/api/clients", json={"name": "Nordic Pharma"}, headers=VIEWER)
    assert resp.status_code == 403


def test_update_sample_client_stays_local(client):
    resp = client.put("/api/clients/client-001", json={"name": "MedTech Renamed"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["persisted"] is False
    assert body["notice"] == LOCAL_ONLY_NOTICE
    names = {c["id"]: c["name"] for c in client.get("/api/clients").json()["items"]}
    assert names["client-001"] == "MedTech Renamed"


def test_update_live_client(client, test_client_row):
    resp = client.put(f"/api/clients/{test_client_row.id}", json={"status": "inactive"})
    assert resp.json()["persisted"] is True
    assert resp.json()["item"]["status"] == "inactive"


def test_update_missing_client(client):
    resp = client.put("/api/clients/nope", json={"name": "X"})
    assert resp.status_code == 404
    assert resp.json()["error"] == "Client not found"


def test_delete_sample_client_drops_its_requirements(client):
    resp = client.delete("/api/clients/client-001")
    assert resp.status_code == 200
    ws = _workspace(client)
    assert "client-001" not in {c.id for c in ws.clients.fixtures}
    assert not [r for r in ws.requirements.fixtures if r.client_id == "client-001"]
    assert client.get("/api/clients/client-001/requirements").status_code == 404


def test_delete_live_client(client, test_client_row):
    resp = client.delete(f"/api/clients/{test_client_row.id}")
    assert resp.json()["persisted"] is True
    assert client.get("/api/clients").json()["origin"] == "fixture"


# ── Requirements ─────────────────────────────────────────────────────


def test_list_client_requirements(client):
    data = client.get("/api/clients/client-001/requirements").json()
    assert [r["id"] for r in data["items"]] == ["req-001", "req-002"]
    assert data["items"][0]["quantity"] == 100000


def test_add_requirement_to_sample_client(client):
    resp = client.post(
        "/api/clients/client-002/requirements",
        json={"api_name": "Ciprofloxacin", "dosage_form": "tablet", "quantity": 5000},
    )
    body = resp.json()
    assert body["persisted"] is False
    assert body["item"]["client_id"] == "client-002"
    assert body["item"]["origin"] == "fixture"
    ids = [r["id"] for r in client.get("/api/clients/client-002/requirements").json()["items"]]
    assert len(ids) == 2
    assert "req-003" in ids


def test_add_requirement_to_live_client(client, test_client_row):
    resp = client.post(
        f"/api/clients/{test_client_row.id}/requirements",
        json={"product_name": "Ibuprofen Tablets", "quantity": 1000, "budget_usd": 50},
    )
    body = resp.json()
    assert body["persisted"] is True
    assert body["item"]["quantity"] == 1000
    items = client.get(f"/api/clients/{test_client_row.id}/requirements").json()["items"]
    assert len(items) == 1


def test_requirement_needs_a_product(client):
    resp = client.post("/api/clients/client-002/requirements", json={"strength": "10mg"})
    assert resp.status_code == 422


def test_update_and_delete_requirement(client):
    resp = client.put("/api/requirements/req-001", json={"status": "Closed"})
    assert resp.json()["item"]["status"] == "closed"
    assert client.delete("/api/requirements/req-001").status_code == 200
    ids = [r["id"] for r in client.get("/api/clients/client-001/requirements").json()["items"]]
    assert ids == ["req-002"]


def test_viewer_cannot_delete_requirement(client):
    assert client.delete("/api/requirements/req-001", headers=VIEWER).status_code == 403
