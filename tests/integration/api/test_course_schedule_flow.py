"""Integration tests for the REST API over the local database backend."""

import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from classslots.api.app import create_app
from classslots.config import Settings
from classslots.state_store import StateStore


@pytest.fixture
def temp_db_path() -> str:
    """Create a temporary database path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        return f.name


@pytest.fixture
def store(temp_db_path: str):
    """StateStore used to seed courses and enrollments."""
    s = StateStore(temp_db_path)
    s.create_course("Python para iniciantes", course_id="py", badge="poucas_vagas")
    yield s
    s.close()


@pytest.fixture
def client(temp_db_path: str, store: StateStore):
    """Create a test client with temporary database."""
    app = create_app(Settings(backend="database", db_path=temp_db_path))
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
    # Cleanup
    Path(temp_db_path).unlink(missing_ok=True)
    Path(f"{temp_db_path}-wal").unlink(missing_ok=True)
    Path(f"{temp_db_path}-shm").unlink(missing_ok=True)


URL = "/api/v1/courses/py/slots"


def _add(client: TestClient, day: str, time: str):
    return client.post(URL, json={"dayOfWeek": day, "startTime": time})


@pytest.mark.integration
class TestScheduleScenarios:
    """End-to-end slot management scenarios."""

    def test_add_to_empty_course(self, client: TestClient) -> None:
        response = _add(client, "monday", "14:00")
        assert response.status_code == 201

        slots = client.get(URL).json()["data"]
        assert len(slots) == 1
        assert slots[0]["index"] == 0
        assert slots[0]["displayNumber"] == 1
        assert slots[0]["currentEnrollment"] == 0
        assert slots[0]["isFull"] is False
        assert slots[0]["maxCapacity"] == 15
        assert slots[0]["slotId"]

    def test_duplicate_leaves_list_unchanged(self, client: TestClient) -> None:
        _add(client, "monday", "14:00")

        response = _add(client, "monday", "14:00")

        assert response.status_code == 400
        assert response.json()["code"] == "duplicate_slot"
        assert len(client.get(URL).json()["data"]) == 1

    def test_delete_blocked_by_enrolled_student(
        self, client: TestClient, store: StateStore
    ) -> None:
        for day, time in [("monday", "14:00"), ("wednesday", "16:00"), ("friday", "18:00")]:
            _add(client, day, time)
        store.add_enrollment("py", "Ana", class_assignment=2)

        response = client.delete(URL, params={"index": 1})

        assert response.status_code == 409
        assert response.json()["code"] == "slot_has_students"
        assert len(client.get(URL).json()["data"]) == 3

    def test_reorder_keeps_slot_ids(self, client: TestClient) -> None:
        for day, time in [("monday", "14:00"), ("wednesday", "16:00"), ("friday", "18:00")]:
            _add(client, day, time)
        before = client.get(URL).json()["data"]

        response = client.put(URL, json={"newOrder": [2, 0, 1]})

        assert response.status_code == 200
        after = response.json()["data"]
        assert [s["dayOfWeek"] for s in after] == ["friday", "monday", "wednesday"]
        assert [s["displayNumber"] for s in after] == [1, 2, 3]
        assert [s["slotId"] for s in after] == [
            before[2]["slotId"],
            before[0]["slotId"],
            before[1]["slotId"],
        ]

    def test_full_slot_blocks_admission(self, client: TestClient, store: StateStore) -> None:
        _add(client, "monday", "14:00")
        _add(client, "tuesday", "15:00")
        for i in range(15):
            store.add_enrollment("py", f"Aluno {i}", class_assignment=1)

        slots = client.get(URL).json()["data"]
        assert slots[0]["currentEnrollment"] == 15
        assert slots[0]["isFull"] is True
        assert slots[0]["availability"] == "full"

        blocked = client.post("/api/v1/courses/py/admissions", json={"displayNumber": 1})
        assert blocked.status_code == 409
        assert blocked.json()["code"] == "slot_full"

        admitted = client.post("/api/v1/courses/py/admissions")
        assert admitted.json()["data"]["displayNumber"] == 2

    def test_disabled_students_free_their_seat(
        self, client: TestClient, store: StateStore
    ) -> None:
        _add(client, "monday", "14:00")
        enrollments = [
            store.add_enrollment("py", f"Aluno {i}", class_assignment=1) for i in range(15)
        ]
        store.set_enrollment_enabled(enrollments[0].id, False)

        availability = client.get("/api/v1/courses/py/availability").json()["data"]

        assert availability["isFull"] is False
        assert availability["availableSeats"] == 1
        assert availability["activeDisplayNumber"] == 1
        assert availability["badge"] == {"kind": "seats_remaining", "days": None, "seats": 1}

    def test_delete_then_list_is_dense(self, client: TestClient) -> None:
        for day, time in [("monday", "14:00"), ("wednesday", "16:00"), ("friday", "18:00")]:
            _add(client, day, time)

        client.delete(URL, params={"index": 0})
        client.delete(URL, params={"index": 1})

        slots = client.get(URL).json()["data"]
        assert [(s["index"], s["displayNumber"], s["dayOfWeek"]) for s in slots] == [
            (0, 1, "wednesday")
        ]

    def test_unknown_course(self, client: TestClient) -> None:
        response = client.get("/api/v1/courses/nope/slots")

        assert response.status_code == 404
        assert response.json()["code"] == "course_not_found"
