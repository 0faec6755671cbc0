import pytest
from fastapi.testclient import TestClient

from space_saver.app import app


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def sample(client):
    resp = client.get("/api/sample")
    assert resp.status_code == 200
    return resp.json()


def test_index_page(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "Space Saver" in resp.text
    assert "/api/plan" in resp.text


def test_plan_sample(client, sample):
    resp = client.post("/api/plan", json=sample)
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    result = body["data"]["result"]
    assert len(result["moves"]) == 3
    assert result["kpis"]["bins_freed"] == 3
    assert body["data"]["data_audit"]["skipped_rows"] == {"excluded_location": 1}
    assert body["data"]["csv_text"].startswith("sku,from_location,to_location")


def test_plan_rejects_missing_table(client, sample):
    del sample["locations_table"]
    resp = client.post("/api/plan", json=sample)
    assert resp.status_code == 400
    assert "locations table" in resp.json()["error"]


def test_plan_rejects_invalid_json(client):
    resp = client.post("/api/plan", content=b"{oops", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_plan_rejects_empty_capacity(client, sample):
    sample["capacity_by_type"] = {}
    resp = client.post("/api/plan", json=sample)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing or empty capacity settings"}


def test_plan_rejects_bad_headroom(client, sample):
    sample["options"]["headroom_fraction"] = 2
    resp = client.post("/api/plan", json=sample)
    assert resp.status_code == 400


def test_moves_csv(client, sample):
    resp = client.post("/api/plan/moves.csv", json=sample)
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert "attachment" in resp.headers["content-disposition"]
    lines = resp.text.split("\n")
    assert lines[0] == "sku,from_location,to_location,qty_to_move,reason,est_fill_after"
    assert len(lines) == 4


def test_moves_pdf(client, sample):
    resp = client.post("/api/plan/moves.pdf", json=sample)
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.content.startswith(b"%PDF")


def test_location_types(client, sample):
    resp = client.post("/api/location-types", json={"table": sample["locations_table"], "type_col": 1})
    assert resp.status_code == 200
    body = resp.json()
    assert body["types"] == ["Bin", "Shelf", "Staging"]
    assert body["counts"] == {"Bin": 4, "Shelf": 4, "Staging": 1}


def test_location_types_by_key(client):
    table = {"headers": ["type"], "rows": [{"type": "Cart"}, {"type": "N/A"}]}
    resp = client.post("/api/location-types", json={"table": table, "type_key": "type"})
    assert resp.json() == {"types": ["Cart"], "counts": {"Cart": 1}}


def test_location_types_rejects_bad_index(client, sample):
    resp = client.post("/api/location-types", json={"table": sample["locations_table"], "type_col": 12})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid column index: 12"}


def test_location_types_requires_a_column(client, sample):
    resp = client.post("/api/location-types", json={"table": sample["locations_table"]})
    assert resp.status_code == 400
