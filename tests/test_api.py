"""
Tests for the household/donations API.

Uses FastAPI TestClient (backed by httpx) with in-memory storage.
"""

import pytest
from fastapi.testclient import TestClient

from mindthegap.api import create_app, create_storage
from mindthegap.config import ServerSettings
from mindthegap.services.storage import InMemoryHouseholdStorage


class UnreachableStorage(InMemoryHouseholdStorage):
    async def check_connection(self) -> bool:
        return False


@pytest.fixture
def client():
    with TestClient(create_app(InMemoryHouseholdStorage()), raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def household_id(client):
    return client.post("/household", json={"annualIncome": 50000}).json()["household"]["id"]


def add(client, household_id, **overrides):
    body = {
        "householdId": household_id,
        "charityName": "Red Cross",
        "amount": 100,
        "frequency": "monthly",
        **overrides,
    }
    return client.post("/donations", json=body)


class TestHousehold:

    def test_create(self, client):
        response = client.post("/household", json={"annualIncome": 0, "alias": "Home"})
        assert response.status_code == 201
        payload = response.json()
        assert payload["household"]["annual_income"] == 0
        assert payload["household"]["alias"] == "Home"
        assert payload["donations"] == []

    def test_get(self, client, household_id):
        add(client, household_id)
        payload = client.get("/household", params={"id": household_id}).json()
        assert payload["household"]["id"] == household_id
        assert payload["household"]["annual_income"] == 50000
        assert len(payload["donations"]) == 1

    def test_get_missing_id(self, client):
        response = client.get("/household")
        assert response.status_code == 400
        assert response.json() == {"error": "Missing id parameter"}

    def test_get_unknown(self, client):
        response = client.get("/household", params={"id": "nope"})
        assert response.status_code == 404
        assert "error" in response.json()

    def test_update_income(self, client, household_id):
        response = client.put("/household", json={"id": household_id, "annualIncome": 62000})
        assert response.status_code == 200
        assert response.json()["household"]["annual_income"] == 62000

    @pytest.mark.parametrize("body", [
        {"annualIncome": 1},
        {"id": "x"},
        {"id": "x", "annualIncome": "lots"},
        {"id": "x", "annualIncome": -5},
    ])
    def test_update_invalid_payload(self, client, body):
        response = client.put("/household", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid payload"}

    def test_update_unknown(self, client):
        response = client.put("/household", json={"id": "nope", "annualIncome": 1})
        assert response.status_code == 404

    def test_malformed_json(self, client):
        response = client.post(
            "/household",
            content="not json",
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid payload"}


class TestDonations:

    def test_add_recomputes_annual_amount(self, client, household_id):
        response = add(client, household_id, annualAmount=5, annual_amount=5)
        assert response.status_code == 201
        donations = response.json()["donations"]
        assert donations[0]["annual_amount"] == 1200
        assert donations[0]["charity_name"] == "Red Cross"

    def test_list_ordered_by_creation(self, client, household_id):
        add(client, household_id, charityName="First")
        add(client, household_id, charityName="Second")
        response = client.get("/donations", params={"householdId": household_id})
        assert [d["charity_name"] for d in response.json()["donations"]] == ["First", "Second"]

    def test_list_missing_household_id(self, client):
        response = client.get("/donations")
        assert response.status_code == 400
        assert response.json() == {"error": "Missing householdId parameter"}

    def test_unsupported_frequency(self, client, household_id):
        response = add(client, household_id, frequency="weekly")
        assert response.status_code == 400
        assert response.json() == {"error": "Unsupported frequency"}

    @pytest.mark.parametrize("overrides", [
        {"charityName": ""},
        {"charityName": None},
        {"amount": "abc"},
        {"amount": 0},
        {"householdId": ""},
    ])
    def test_invalid_payload(self, client, household_id, overrides):
        response = add(client, household_id, **overrides)
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid payload"}

    def test_add_to_unknown_household(self, client):
        response = add(client, "nope")
        assert response.status_code == 404

    def test_update(self, client, household_id):
        donation_id = add(client, household_id).json()["donations"][0]["id"]
        response = client.put("/donations", json={
            "id": donation_id,
            "householdId": household_id,
            "charityName": "UNICEF",
            "amount": 30,
            "frequency": "quarterly",
        })
        assert response.status_code == 200
        donation = response.json()["donations"][0]
        assert donation["id"] == donation_id
        assert donation["charity_name"] == "UNICEF"
        assert donation["annual_amount"] == 120

    def test_update_unknown(self, client, household_id):
        response = client.put("/donations", json={
            "id": "nope",
            "householdId": household_id,
            "charityName": "UNICEF",
            "amount": 30,
            "frequency": "quarterly",
        })
        assert response.status_code == 404

    def test_delete(self, client, household_id):
        donation_id = add(client, household_id).json()["donations"][0]["id"]
        response = client.request(
            "DELETE", "/donations", json={"id": donation_id, "householdId": household_id}
        )
        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert client.get("/donations", params={"householdId": household_id}).json() == {"donations": []}

    def test_delete_unknown_is_success(self, client, household_id):
        response = client.request("DELETE", "/donations", json={"id": "nope", "householdId": household_id})
        assert response.json() == {"success": True}

    def test_delete_invalid_payload(self, client):
        response = client.request("DELETE", "/donations", json={"id": "x"})
        assert response.status_code == 400


class TestHealthCheck:

    def test_ok(self, client):
        response = client.get("/health-check")
        assert response.status_code == 200
        assert response.json()["ok"] is True

    def test_unreachable_storage(self):
        with TestClient(create_app(UnreachableStorage())) as c:
            response = c.get("/health-check")
        assert response.status_code == 500
        assert response.json()["ok"] is False


class TestCreateStorage:

    def test_memory_backend(self):
        storage = create_storage(ServerSettings(storage_backend="memory"))
        assert isinstance(storage, InMemoryHouseholdStorage)
