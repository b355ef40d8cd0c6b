"""
Tests for the remote persistence adapter.

The adapter talks to the real FastAPI app through httpx.ASGITransport,
backed by in-memory storage. No network is involved.
"""

import asyncio

import httpx
import pytest

from mindthegap.api import create_app
from mindthegap.config import ApiSettings
from mindthegap.services.persistence import (
    BackendError,
    HouseholdApiClient,
    InMemoryClientEnvironment,
    NoActiveSessionError,
    NothingToShareError,
    RemotePersistenceAdapter,
    SessionStartError,
    SharedSnapshotUnavailableError,
    TransportError,
)
from mindthegap.services.storage import InMemoryHouseholdStorage, StorageError
from tests.conftest import make_fields


COOKIE = "mindthegap_household"


class FailingStorage(InMemoryHouseholdStorage):
    async def create_household(self, annual_income=0, alias=None):
        raise StorageError("households sheet unavailable")

    async def add_donation(self, household_id, fields):
        raise StorageError("donations sheet unavailable")


@pytest.fixture
def storage():
    return InMemoryHouseholdStorage()


@pytest.fixture
def api_settings():
    return ApiSettings(base_url="http://testserver", timeout_seconds=5, max_retries=2)


def make_adapter(storage, api_settings, app_settings, environment=None):
    client = HouseholdApiClient(
        api_settings,
        transport=httpx.ASGITransport(app=create_app(storage)),
    )
    environment = environment or InMemoryClientEnvironment()
    return RemotePersistenceAdapter(client, environment, app_settings), environment


class TestLoad:

    def test_fresh_session_creates_household(self, storage, api_settings, app_settings):
        adapter, environment = make_adapter(storage, api_settings, app_settings)

        snapshot = asyncio.run(adapter.load())

        assert snapshot.annual_income == 0
        assert snapshot.donations == []
        assert adapter.household_id is not None
        assert environment.read_cookie(COOKIE) == adapter.household_id
        assert "SameSite=Lax" in environment.cookie_headers[0]

    def test_cookie_resumes_household(self, storage, api_settings, app_settings):
        household = asyncio.run(storage.create_household(annual_income=40000))
        asyncio.run(storage.add_donation(household.id, make_fields()))
        adapter, _ = make_adapter(
            storage, api_settings, app_settings,
            InMemoryClientEnvironment(cookies={COOKIE: household.id}),
        )

        snapshot = asyncio.run(adapter.load())

        assert adapter.household_id == household.id
        assert snapshot.annual_income == 40000
        assert snapshot.donations[0].annual_amount == 1200

    def test_stale_cookie_starts_fresh(self, storage, api_settings, app_settings):
        adapter, environment = make_adapter(
            storage, api_settings, app_settings,
            InMemoryClientEnvironment(cookies={COOKIE: "gone"}),
        )

        asyncio.run(adapter.load())

        assert adapter.household_id not in (None, "gone")
        assert environment.read_cookie(COOKIE) == adapter.household_id

    def test_share_link_adopts_household(self, storage, api_settings, app_settings):
        household = asyncio.run(storage.create_household(annual_income=90000))
        adapter, environment = make_adapter(
            storage, api_settings, app_settings,
            InMemoryClientEnvironment(
                url=f"http://localhost:8501/?d={household.id}",
                cookies={COOKIE: "someone-else"},
            ),
        )

        snapshot = asyncio.run(adapter.load())

        assert snapshot.annual_income == 90000
        assert adapter.household_id == household.id
        assert environment.read_cookie(COOKIE) == household.id
        assert environment.get_query_param("d") is None

    def test_unknown_share_link_fails_without_fallback(self, storage, api_settings, app_settings):
        adapter, environment = make_adapter(
            storage, api_settings, app_settings,
            InMemoryClientEnvironment(url="http://localhost:8501/?d=missing"),
        )

        with pytest.raises(SharedSnapshotUnavailableError) as exc_info:
            asyncio.run(adapter.load())

        assert exc_info.value.user_message == "Could not load that shared snapshot."
        assert adapter.household_id is None
        assert environment.get_query_param("d") is None
        assert environment.cookies == {}

    def test_session_start_failure(self, api_settings, app_settings):
        adapter, _ = make_adapter(FailingStorage(), api_settings, app_settings)
        with pytest.raises(SessionStartError) as exc_info:
            asyncio.run(adapter.load())
        assert exc_info.value.user_message == "Starting a fresh session failed. Try again shortly."


class TestMutations:

    def test_round_trip(self, storage, api_settings, app_settings):
        adapter, _ = make_adapter(storage, api_settings, app_settings)
        asyncio.run(adapter.load())

        snapshot = asyncio.run(adapter.save_income(50000))
        assert snapshot.annual_income == 50000

        donations = asyncio.run(adapter.add_donation(make_fields("Red Cross", 100, "monthly")))
        assert [d.annual_amount for d in donations] == [1200]

        donations = asyncio.run(adapter.update_donation(donations[0].id, make_fields("Red Cross", 25, "quarterly")))
        assert [d.annual_amount for d in donations] == [100]

        donations = asyncio.run(adapter.remove_donation(donations[0].id))
        assert donations == []

    def test_mutation_without_session(self, storage, api_settings, app_settings):
        adapter, _ = make_adapter(storage, api_settings, app_settings)
        with pytest.raises(NoActiveSessionError):
            asyncio.run(adapter.save_income(1))
        with pytest.raises(NoActiveSessionError):
            asyncio.run(adapter.add_donation(make_fields()))

    def test_backend_error_carries_status(self, api_settings, app_settings):
        storage = FailingStorage()
        household = asyncio.run(InMemoryHouseholdStorage.create_household(storage))
        adapter, _ = make_adapter(
            storage, api_settings, app_settings,
            InMemoryClientEnvironment(cookies={COOKIE: household.id}),
        )
        asyncio.run(adapter.load())

        with pytest.raises(BackendError) as exc_info:
            asyncio.run(adapter.add_donation(make_fields()))
        assert exc_info.value.status_code == 500


class TestShare:

    def test_share_requires_household(self, storage, api_settings, app_settings):
        adapter, _ = make_adapter(storage, api_settings, app_settings)
        with pytest.raises(NothingToShareError):
            asyncio.run(adapter.share())

    def test_share_link_carries_household_id(self, storage, api_settings, app_settings):
        adapter, environment = make_adapter(storage, api_settings, app_settings)
        asyncio.run(adapter.load())

        link = asyncio.run(adapter.share())

        assert link == f"http://localhost:8501/?d={adapter.household_id}"
        assert environment.clipboard == [link]


class TestApiClientTransport:

    def test_reads_are_retried_then_raise(self, api_settings):
        calls = []

        def handler(request):
            calls.append(request.method)
            raise httpx.ConnectError("connection refused", request=request)

        client = HouseholdApiClient(api_settings, transport=httpx.MockTransport(handler))
        with pytest.raises(TransportError):
            asyncio.run(client.get_household("h-1"))
        assert calls == ["GET", "GET"]

    def test_writes_are_not_retried(self, api_settings):
        calls = []

        def handler(request):
            calls.append(request.method)
            raise httpx.ConnectError("connection refused", request=request)

        client = HouseholdApiClient(api_settings, transport=httpx.MockTransport(handler))
        with pytest.raises(TransportError):
            asyncio.run(client.create_household())
        assert calls == ["POST"]

    def test_unexpected_payload_is_backend_error(self, api_settings):
        client = HouseholdApiClient(
            api_settings,
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"nope": 1})),
        )
        with pytest.raises(BackendError):
            asyncio.run(client.list_donations("h-1"))

    def test_request_bodies_use_camel_case(self, api_settings):
        seen = []

        def handler(request):
            seen.append(request.read())
            return httpx.Response(201, json={"donations": []})

        client = HouseholdApiClient(api_settings, transport=httpx.MockTransport(handler))
        asyncio.run(client.add_donation("h-1", make_fields("Oxfam", 10, "yearly")))
        assert b'"householdId":"h-1"' in seen[0].replace(b" ", b"")
        assert b'"charityName":"Oxfam"' in seen[0].replace(b" ", b"")
