"""
HTTP API tests (FastAPI TestClient)
"""
import pytest
from fastapi.testclient import TestClient

import studio.api.router_cards as router_cards
from studio.main import create_app

REGION = "ADV_MARKETING_REGION"


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(router_cards, "EXPORTS_FOLDER", tmp_path / "exports")
    with TestClient(create_app()) as c:
        assert c.post("/api/sample").status_code == 200
        yield c


class TestMeta:

    def test_health(self, client):
        body = client.get("/api/health").json()
        assert body["status"] == "ok"
        assert body["loaded"] and body["rows"] == 39 and body["columns"] == 27

    def test_columns(self, client):
        body = client.get("/api/columns").json()
        kinds = {c["name"]: c["kind"] for c in body["columns"]}
        assert kinds["AMOUNT"] == "numeric"
        assert body["measures"] == ["AMOUNT", "ADVERT_AMOUNT_INCL_AGENCY_FEE"]

    def test_column_values(self, client):
        body = client.get(f"/api/columns/{REGION}/values").json()
        assert body["blank_count"] == 11
        assert "US" in body["values"]
        assert client.get("/api/columns/NOPE/values").status_code == 404


class TestUpload:

    def test_bad_file_keeps_dataset(self, client):
        r = client.post("/api/upload", files={"file": ("notes.txt", b"hello", "text/plain")})
        assert r.status_code == 400
        r = client.post("/api/upload", files={"file": ("empty.csv", b"", "text/csv")})
        assert r.status_code == 400
        assert client.get("/api/health").json()["rows"] == 39

    def test_upload_replaces_dataset(self, client):
        r = client.post("/api/upload", files={"file": ("small.csv", b"REGION,AMOUNT\nUS,1\n,2\n", "text/csv")})
        assert r.status_code == 200
        assert r.json()["rows"] == 2
        assert client.get("/api/columns").json()["measures"] == ["AMOUNT"]


class TestTable:

    def test_pagination(self, client):
        body = client.post("/api/table/rows-per-page", json={"rows_per_page": 10}).json()
        assert body["pagination"]["total_pages"] == 4
        body = client.post("/api/table/page", json={"page": 9}).json()
        assert body["pagination"]["page"] == 4
        assert len(body["rows"]) == 9
        assert client.post("/api/table/rows-per-page", json={"rows_per_page": 7}).status_code == 400

    def test_sort(self, client):
        body = client.post("/api/table/sort", json={"column": "AMOUNT", "direction": "desc"}).json()
        assert body["rows"][0]["AMOUNT"] == "108.814"
        assert body["sort"] == {"key": "AMOUNT", "direction": "desc"}
        assert client.delete("/api/table/sort").json()["sort"] is None
        assert client.post("/api/table/sort", json={"column": "NOPE"}).status_code == 404

    def test_filters(self, client):
        body = client.post(f"/api/filters/{REGION}/selected", json={"values": ["US"]}).json()
        assert body["applied"] and body["state"]["filtered_count"] == 4
        body = client.post(f"/api/filters/{REGION}/blanks").json()
        assert body["state"]["filtered_count"] == 15
        body = client.delete("/api/filters").json()
        assert body["state"]["filtered_count"] == 39
        assert client.post("/api/filters/NOPE/blanks").status_code == 404

    def test_search_only_narrows_candidates(self, client):
        body = client.post(f"/api/filters/{REGION}/search", json={"term": "u"}).json()
        assert body["state"]["candidates"] == ["EU/MERT", "US"]
        assert body["state"]["filtered_count"] == 39

    def test_cell_edit(self, client):
        r = client.post("/api/edit/begin", json={"row_index": 0, "column": "AMOUNT"})
        assert r.json()["state"]["value"] == "70.814"
        client.post("/api/edit/value", json={"value": "71"})
        assert client.post("/api/edit/commit").json()["applied"]
        assert client.get("/api/table").json()["rows"][0]["AMOUNT"] == "71"
        assert client.post("/api/edit/begin", json={"row_index": 99, "column": "AMOUNT"}).status_code == 404

    def test_summary(self, client):
        body = client.get("/api/summary").json()
        assert body["measure"] == "AMOUNT"
        assert body["charts"][REGION][0]["label"] == "Unknown"


class TestCards:

    def test_add_until_full_then_undo(self, client):
        results = [client.post("/api/cards").json()["applied"] for _ in range(7)]
        assert results == [True] * 6 + [False]
        state = client.post("/api/cards/undo").json()["state"]
        assert len(state["cards"]) == 5
        assert state["history"]["can_redo"]

    def test_card_operations(self, client):
        ids = [client.post("/api/cards").json()["state"]["cards"][-1]["id"] for _ in range(3)]
        r = client.patch(f"/api/cards/{ids[0]}", json={"dimension": REGION, "chart_kind": "bar"})
        assert r.json()["applied"]
        state = client.post("/api/cards/reorder", json={"source_id": ids[0], "target_id": ids[2]}).json()["state"]
        assert [c["id"] for c in state["cards"]] == [ids[2], ids[1], ids[0]]
        state = client.post("/api/cards/merge", json={"source_id": ids[1], "target_id": ids[2]}).json()["state"]
        assert [c["id"] for c in state["cards"]] == [ids[1], ids[0]]
        assert state["cards"][0]["colspan"] == 2
        assert client.post(f"/api/cards/{ids[1]}/collapse").json()["applied"]
        assert client.delete(f"/api/cards/{ids[0]}").json()["applied"]
        assert client.patch("/api/cards/missing", json={"chart_kind": "bar"}).status_code == 404

    def test_series(self, client):
        card_id = client.post("/api/cards").json()["state"]["cards"][0]["id"]
        client.patch(f"/api/cards/{card_id}", json={"dimension": REGION})
        body = client.get(f"/api/cards/{card_id}/series").json()
        assert body["series"][0]["label"] == "Unknown"
        assert body["row_limit"] == 9
        assert client.get("/api/cards/missing/series").status_code == 404

    def test_export(self, client):
        client.post("/api/cards")
        r = client.get("/api/cards/export")
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("application/vnd.openxmlformats")


class TestAggregate:

    def test_series(self, client):
        body = client.get("/api/aggregate", params={"dimension": REGION}).json()
        assert body["measure"] == "AMOUNT"
        assert body["series"][0]["label"] == "Unknown"
        assert body["x_axis"]["angle"] == -45

    def test_stacked(self, client):
        body = client.get("/api/aggregate/stacked",
                          params={"dimension": "ADV_PILLAR", "segment": REGION, "percentage": True}).json()
        assert {item["name"] for item in body["data"]} == {"A", "B", "C", "D"}
        assert "Unknown" in body["segments"]

    def test_unknown_column(self, client):
        assert client.get("/api/aggregate", params={"dimension": "NOPE"}).status_code == 404


class TestReference:

    def test_inbox(self, client):
        assert client.get("/api/inbox/pending").json()["count"] == 3
        r = client.post("/api/inbox/pending/0/approve")
        assert r.json()["state"]["record"]["status"] == "APPROVED"
        counts = client.get("/api/inbox/past").json()["counts"]
        assert (counts["pending"], counts["past"]) == (2, 3)
        assert client.post("/api/inbox/pending/0/escalate").status_code == 400
        assert client.get("/api/inbox/nope").status_code == 404

    def test_source_data_sort(self, client):
        body = client.post("/api/source-data/versions/sort", json={"column": "version"}).json()
        assert [r["version"] for r in body["rows"]] == ["8", "9", "10"]
        assert body["sort"] == {"column": "version", "direction": "asc"}
