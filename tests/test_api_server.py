"""HTTP-level tests using FastAPI's TestClient against the in-memory store."""

import pytest
from fastapi.testclient import TestClient

from offdays.api_server import create_app


@pytest.fixture
def client(settings, store):
    return TestClient(create_app(settings=settings, store=store))


class TestScheduleStatusEndpoint:

    def test_success(self, client):
        response = client.get("/schedule-status/2023-04-10")
        assert response.status_code == 200
        status = response.json()["schedule-status"]
        assert status["off"] == [{"name": "Alice", "role": "Resident", "assignment": "CCU - A"}]
        assert [e["name"] for e in status["likelyNotOff"]] == ["Bob", "Dan"]
        assert status["minDate"] == "2023-01-02"

    def test_request_id_is_echoed(self, client):
        response = client.get("/schedule-status/2023-04-10", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"

    def test_before_minimum(self, client):
        response = client.get("/schedule-status/2022-05-01")
        assert response.status_code == 400
        assert response.json() == {
            "error": "The date must be between 2023-01-02 and 2023-12-31 (inclusive)"
        }

    def test_invalid_date(self, client):
        response = client.get("/schedule-status/tomorrow")
        assert response.status_code == 400
        assert response.json() == {"error": "The date is not valid"}

    def test_no_block(self, client):
        response = client.get("/schedule-status/2023-09-01")
        assert response.status_code == 404
        assert response.json() == {"error": "Could not find a schedule block for that date"}

    def test_store_failure_is_500(self, settings, store):
        async def broken_scan(*args, **kwargs):
            raise RuntimeError("connection reset")

        store.scan = broken_scan
        client = TestClient(create_app(settings=settings, store=store))

        response = client.get("/schedule-status/2023-04-10")
        assert response.status_code == 500
        assert response.json() == {"error": "connection reset"}


class TestResidentsEndpoint:

    def test_success(self, client):
        response = client.get("/residents/2023-04-10")
        assert response.status_code == 200
        body = response.json()
        assert body["metadata"]["blockName"] == "9A"
        assert body["metadata"]["dayNumber"] == 5
        assert body["off"] == [{"name": "Alice", "assignment": "CCU - A"}]
        assert body["maybeOff"] == []

    def test_missing_bayview_is_404(self, settings, store):
        del store.tables[settings.table_templates_secondary]
        client = TestClient(create_app(settings=settings, store=store))
        response = client.get("/residents/2023-04-10")
        assert response.status_code == 404
        assert response.json() == {"error": "Could not find any Bayview schedules for given date"}


class TestOtherEndpoints:

    def test_validate_pin(self, client):
        assert client.post("/validate", json={"pin": "4321"}).json() == {"isValid": True}
        assert client.post("/validate", json={"pin": "0000"}).json() == {"isValid": False}

    def test_validate_requires_json_body(self, client):
        response = client.post("/validate", content="pin", headers={"content-type": "text/plain"})
        assert response.status_code == 400
        assert "error" in response.json()

    def test_unknown_route(self, client):
        response = client.get("/nowhere")
        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}

    def test_health_without_redis(self, client):
        body = client.get("/health").json()
        assert body["status"] == "ok"
        assert body["redis"] is False


class TestUnknownRoleBlock:

    @pytest.fixture
    def fellow_client(self, settings, store):
        store.put(settings.table_blocks, "Fellow|9A", {
            "block": "9A", "role": "Fellow",
            "start_date": "2023-04-06", "end_date": "2023-04-19",
        })
        return TestClient(create_app(settings=settings, store=store))

    def test_schedule_status_ignores_unknown_role(self, fellow_client):
        response = fellow_client.get("/schedule-status/2023-04-10")
        assert response.status_code == 200
        status = response.json()["schedule-status"]
        assert [b["role"] for b in status["blocks"]] == ["Intern", "Resident"]
        assert [e["name"] for e in status["off"]] == ["Alice"]

    def test_residents_ignores_unknown_role(self, fellow_client):
        response = fellow_client.get("/residents/2023-04-10")
        assert response.status_code == 200
        assert response.json()["off"] == [{"name": "Alice", "assignment": "CCU - A"}]
