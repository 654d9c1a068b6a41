"""Tests for the HTTP command surface."""
import pytest
from fastapi.testclient import TestClient

from injurylog.adapters.memory_adapter import MemoryAdapter
from injurylog.app import app
from injurylog.context import LogContext
from injurylog.deps import get_context
from injurylog.errors import ConflictError
from injurylog.storage.codec import decode_log
from tests.conftest import CONFIG_PATH, EDITOR, LOG_PATH, VIEWER


class AlwaysStaleAdapter(MemoryAdapter):
    def put(self, path, content, expected_version, message=""):
        raise ConflictError(path, expected_version)


@pytest.fixture
def client(ctx):
    app.dependency_overrides[get_context] = lambda: ctx
    yield TestClient(app)
    app.dependency_overrides.clear()


def stored_log(ctx):
    return decode_log(ctx.adapter.get(LOG_PATH).content)


class TestHealth:

    def test_ping(self, client):
        response = client.get("/api/ping")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health_probes_storage(self, client):
        data = client.get("/api/health").json()
        assert data["status"] == "healthy"
        assert data["services"]["storage"] == "healthy"


class TestAuth:

    def test_reads_require_login(self, client):
        response = client.get("/api/log/")
        assert response.status_code == 401
        assert response.json()["error"]["type"] == "http_error"

    def test_wrong_password(self, client):
        assert client.get("/api/log/", auth=("coach", "nope")).status_code == 401

    def test_viewer_cannot_write(self, client, ctx):
        response = client.put("/api/log/records/Bob-2024-01-02", json={"status": "Injured"}, auth=VIEWER)
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "You are not authorized to make changes."
        assert ctx.adapter.commits == []


class TestLogRoutes:

    def test_get_log(self, client):
        response = client.get("/api/log/", auth=VIEWER)

        data = response.json()
        assert response.status_code == 200
        assert data["version"]
        assert data["log"]["Alice-2024-01-01"] == {
            "status": "Injured", "injurySite": "Knee", "injury": "ACL", "severity": "High", "comment": "Surgery booked",
        }

    def test_status_is_resolved_from_earlier_entry(self, client):
        response = client.get("/api/log/status", params={"athlete": "Alice", "date": "2024-01-05"}, auth=VIEWER)

        data = response.json()
        assert data["recorded"] is False
        assert data["record"]["status"] == "Injured"

    def test_status_without_history(self, client):
        data = client.get("/api/log/status", params={"athlete": "Bob", "date": "2024-01-05"}, auth=VIEWER).json()
        assert data["record"]["status"] == "Available"

    def test_put_record(self, client, ctx):
        response = client.put(
            "/api/log/records/Bob-2024-01-02",
            json={"status": "Injured", "injurySite": "Hamstring", "severity": "High"},
            auth=EDITOR,
        )

        assert response.status_code == 200
        assert response.json()["changed"] is True
        record = stored_log(ctx)["Bob-2024-01-02"]
        assert (record.status, record.injury_site, record.severity) == ("Injured", "Hamstring", "High")

    def test_put_record_rejects_commas(self, client, ctx):
        response = client.put(
            "/api/log/records/Bob-2024-01-02",
            json={"status": "Injured", "comment": "left, right"},
            auth=EDITOR,
        )

        assert response.status_code == 422
        assert response.json()["error"]["type"] == "validation_error"
        assert ctx.adapter.commits == []

    def test_put_record_rejects_bad_key(self, client):
        response = client.put("/api/log/records/Bob", json={"status": "Injured"}, auth=EDITOR)
        assert response.status_code == 422

    def test_put_record_rejects_unknown_status(self, client):
        response = client.put("/api/log/records/Bob-2024-01-02", json={"status": "Sleepy"}, auth=EDITOR)
        assert response.status_code == 422
        assert "Sleepy" in response.json()["error"]["message"]

    def test_batch(self, client, ctx):
        response = client.post("/api/log/batch", json={"entries": [
            {"key": "Bob-2024-01-01", "record": {"status": "Injured"}},
            {"key": "Bob-2024-01-03", "record": {"status": "Available"}},
        ]}, auth=EDITOR)

        assert response.status_code == 200
        assert response.json()["entries"] == 2
        assert len(ctx.adapter.commits) == 1
        assert {"Bob-2024-01-01", "Bob-2024-01-03"} <= set(stored_log(ctx))

    def test_empty_batch_is_rejected(self, client):
        assert client.post("/api/log/batch", json={"entries": []}, auth=EDITOR).status_code == 422

    def test_carry_forward_runs_inline(self, client, ctx):
        response = client.post("/api/log/carry-forward", json={"asOf": "2024-01-01"}, auth=EDITOR)

        data = response.json()
        assert response.status_code == 200
        assert data["target_date"] == "2024-01-02"
        assert data["added"] == ["Alice-2024-01-02", "Al-2024-01-02", "Bob-2024-01-02"]
        assert stored_log(ctx)["Bob-2024-01-02"].status == "Available"

    def test_conflict_is_reported(self):
        ctx = LogContext(adapter=AlwaysStaleAdapter(), max_retries=1)
        app.dependency_overrides[get_context] = lambda: ctx
        try:
            response = TestClient(app).put("/api/log/records/Bob-2024-01-02", json={"status": "Available"}, auth=EDITOR)
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 409
        assert response.json()["error"]["type"] == "conflict"


class TestConfigRoutes:

    def test_get_config(self, client):
        data = client.get("/api/config/", auth=VIEWER).json()

        assert data["config"]["athletes"] == ["Alice", "Al", "Bob"]
        assert data["config"]["statusColors"]["Injured"] == "red"
        assert data["seasonDates"] == []

    def test_malformed_config_is_storage_error(self, client, ctx):
        version = ctx.adapter.get(CONFIG_PATH).version
        ctx.adapter.put(CONFIG_PATH, "athlete,status\nBob,Available\nAmy,Injured,extra\n", version)

        response = client.get("/api/config/", auth=VIEWER)

        assert response.status_code == 502
        assert response.json()["error"]["type"] == "storage_error"

    def test_add_athlete(self, client):
        response = client.post("/api/config/athletes", json={"name": "Cara"}, auth=EDITOR)

        assert response.status_code == 201
        assert client.get("/api/config/", auth=VIEWER).json()["config"]["athletes"][-1] == "Cara"

    def test_remove_athlete_keeps_similar_names(self, client, ctx):
        response = client.delete("/api/config/athletes/Al", auth=EDITOR)

        assert response.status_code == 200
        assert response.json()["log"]["changed"] is True
        assert set(stored_log(ctx)) == {"Alice-2024-01-01"}

    def test_season_table(self, client):
        rows = [{"label": "2024", "startDate": "2024-03-01", "endDate": "2024-09-30"}]

        response = client.put("/api/config/season/dates", json={"rows": rows}, auth=EDITOR)

        assert response.status_code == 200
        assert client.get("/api/config/", auth=VIEWER).json()["seasonDates"] == rows

    def test_unknown_season_table(self, client):
        assert client.put("/api/config/season/weeks", json={"rows": []}, auth=EDITOR).status_code == 422


class TestActions:

    def test_add_athlete_action(self, client):
        response = client.post("/api/actions/", json={"action": "addAthlete", "payload": {"name": "Cara"}}, auth=EDITOR)

        assert response.status_code == 200
        assert response.json()["action"] == "addAthlete"

    def test_update_record_action(self, client, ctx):
        payload = {"key": "Bob-2024-01-02", "record": {"status": "Modified", "comment": "Light session"}}

        client.post("/api/actions/", json={"action": "updateRecord", "payload": payload}, auth=EDITOR)

        assert stored_log(ctx)["Bob-2024-01-02"].comment == "Light session"

    def test_unknown_action(self, client):
        response = client.post("/api/actions/", json={"action": "dropTable"}, auth=EDITOR)
        assert response.status_code == 400

    def test_invalid_payload(self, client):
        response = client.post("/api/actions/", json={"action": "addAthlete", "payload": {}}, auth=EDITOR)
        assert response.status_code == 422
