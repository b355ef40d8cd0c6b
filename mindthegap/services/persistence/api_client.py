"""
Household API Client

Thin async client for the household/donations backend. Request bodies use
the backend's camelCase keys; responses are parsed into the shared models.

DESIGN DECISION: A fresh httpx.AsyncClient is opened per call.
The dashboard drives coroutines from short-lived event loops (one per
Streamlit rerun), and a pooled client bound to a dead loop fails on reuse.
The request volume is one call per user action, so pooling buys nothing.

Only idempotent reads (GET) are retried. A retried POST could create a
second household or donation.
"""

from typing import Any, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from mindthegap.config import ApiSettings, get_settings
from mindthegap.log import get_logger
from mindthegap.models.donation import Donation, DonationFields, HouseholdPayload
from mindthegap.services.persistence.errors import BackendError, TransportError


logger = get_logger(__name__)


class HouseholdApiClient:
    """
    Client for the /household and /donations endpoints.

    Non-success statuses raise BackendError (with the status code);
    network failures and timeouts raise TransportError.
    """

    def __init__(
        self,
        settings: Optional[ApiSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._settings = settings or get_settings().api
        self._transport = transport

    # -------------------------------------------------------------------------
    # Plumbing
    # -------------------------------------------------------------------------

    async def _send(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, str]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> Any:
        try:
            async with httpx.AsyncClient(
                base_url=self._settings.base_url,
                timeout=self._settings.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, params=params, json=json)
        except httpx.HTTPError as e:
            logger.warning("api_transport_failed", method=method, path=path, error=str(e))
            raise TransportError(f"{method} {path} failed: {e}") from e

        if response.status_code >= 400:
            try:
                detail = response.json().get("error", response.text)
            except ValueError:
                detail = response.text
            logger.warning(
                "api_request_failed",
                method=method,
                path=path,
                status_code=response.status_code,
                error=detail,
            )
            raise BackendError(
                f"{method} {path} returned {response.status_code}: {detail}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise BackendError(
                f"{method} {path} returned invalid JSON",
                status_code=response.status_code,
            ) from e

    async def _get(self, path: str, params: dict[str, str]) -> Any:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._settings.max_retries),
            wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
            retry=retry_if_exception_type(TransportError),
            reraise=True,
        ):
            with attempt:
                return await self._send("GET", path, params=params)

    @staticmethod
    def _donations(data: Any) -> list[Donation]:
        try:
            return [Donation.model_validate(item) for item in data["donations"]]
        except (KeyError, TypeError, ValueError) as e:
            raise BackendError(f"Unexpected donations payload: {e}") from e

    @staticmethod
    def _payload(data: Any) -> HouseholdPayload:
        try:
            return HouseholdPayload.model_validate(data)
        except ValueError as e:
            raise BackendError(f"Unexpected household payload: {e}") from e

    @staticmethod
    def _donation_body(household_id: str, fields: DonationFields) -> dict[str, Any]:
        return {
            "householdId": household_id,
            "charityName": fields.charity_name,
            "amount": fields.amount,
            "frequency": fields.frequency.value,
        }

    # -------------------------------------------------------------------------
    # Households
    # -------------------------------------------------------------------------

    async def get_household(self, household_id: str) -> HouseholdPayload:
        return self._payload(await self._get("/household", {"id": household_id}))

    async def create_household(
        self,
        annual_income: int = 0,
        alias: Optional[str] = None,
    ) -> HouseholdPayload:
        body: dict[str, Any] = {"annualIncome": annual_income}
        if alias:
            body["alias"] = alias
        return self._payload(await self._send("POST", "/household", json=body))

    async def update_income(self, household_id: str, annual_income: int) -> HouseholdPayload:
        data = await self._send(
            "PUT",
            "/household",
            json={"id": household_id, "annualIncome": annual_income},
        )
        return self._payload(data)

    # -------------------------------------------------------------------------
    # Donations
    # -------------------------------------------------------------------------

    async def list_donations(self, household_id: str) -> list[Donation]:
        return self._donations(await self._get("/donations", {"householdId": household_id}))

    async def add_donation(self, household_id: str, fields: DonationFields) -> list[Donation]:
        data = await self._send(
            "POST",
            "/donations",
            json=self._donation_body(household_id, fields),
        )
        return self._donations(data)

    async def update_donation(
        self,
        household_id: str,
        donation_id: str,
        fields: DonationFields,
    ) -> list[Donation]:
        body = {"id": donation_id, **self._donation_body(household_id, fields)}
        return self._donations(await self._send("PUT", "/donations", json=body))

    async def delete_donation(self, household_id: str, donation_id: str) -> None:
        await self._send(
            "DELETE",
            "/donations",
            json={"id": donation_id, "householdId": household_id},
        )
