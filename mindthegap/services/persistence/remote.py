"""
Remote Persistence Adapter

The backend is the system of record. The browser only keeps a session
pointer (the household identifier) in a cookie, and share links carry the
same identifier, so opening someone's link attaches to their household.

Load order:
1. share parameter present -> that household, or an error (no fallback)
2. session cookie present -> that household, falling through on failure
3. otherwise (or after 2 failed) -> a brand new household with income 0
"""

from typing import Optional

from mindthegap.config import AppSettings
from mindthegap.log import get_logger
from mindthegap.models.donation import Donation, DonationFields, HouseholdPayload, Snapshot
from mindthegap.services.persistence.api_client import HouseholdApiClient
from mindthegap.services.persistence.client_state import ClientEnvironment
from mindthegap.services.persistence.errors import (
    NoActiveSessionError,
    NothingToShareError,
    PersistenceError,
    SessionStartError,
    SharedSnapshotUnavailableError,
)
from mindthegap.services.persistence.interface import PersistenceAdapter, copy_best_effort
from mindthegap.services.persistence.sharing import build_share_link


logger = get_logger(__name__)


class RemotePersistenceAdapter(PersistenceAdapter):
    """Persistence through the household API plus a session cookie."""

    def __init__(
        self,
        client: HouseholdApiClient,
        environment: ClientEnvironment,
        settings: AppSettings,
    ):
        self._client = client
        self._environment = environment
        self._settings = settings
        self._household_id: Optional[str] = None

    @property
    def household_id(self) -> Optional[str]:
        return self._household_id

    def _adopt(self, payload: HouseholdPayload) -> Snapshot:
        self._household_id = payload.household.id
        self._environment.write_cookie(
            self._settings.cookie_name,
            payload.household.id,
            self._settings.cookie_max_age_days,
        )
        return payload.to_snapshot()

    def _require_household(self) -> str:
        if not self._household_id:
            raise NoActiveSessionError("No household has been adopted yet")
        return self._household_id

    async def load(self) -> Snapshot:
        shared_id = self._environment.get_query_param(self._settings.share_param)
        if shared_id:
            try:
                payload = await self._client.get_household(shared_id)
            except PersistenceError as e:
                logger.warning("shared_household_unavailable", household_id=shared_id, error=str(e))
                raise SharedSnapshotUnavailableError(str(e)) from e
            finally:
                self._environment.remove_query_param(self._settings.share_param)
            logger.info("shared_household_loaded", household_id=shared_id)
            return self._adopt(payload)

        cached_id = self._environment.read_cookie(self._settings.cookie_name)
        if cached_id:
            try:
                payload = await self._client.get_household(cached_id)
                return self._adopt(payload)
            except PersistenceError as e:
                logger.info("cached_household_unavailable", household_id=cached_id, error=str(e))

        try:
            payload = await self._client.create_household(annual_income=0)
        except PersistenceError as e:
            raise SessionStartError(str(e)) from e
        logger.info("household_started", household_id=payload.household.id)
        return self._adopt(payload)

    async def save_income(self, annual_income: int) -> Snapshot:
        household_id = self._require_household()
        payload = await self._client.update_income(household_id, annual_income)
        return self._adopt(payload)

    async def add_donation(self, fields: DonationFields) -> list[Donation]:
        return await self._client.add_donation(self._require_household(), fields)

    async def update_donation(
        self,
        donation_id: str,
        fields: DonationFields,
    ) -> list[Donation]:
        return await self._client.update_donation(
            self._require_household(),
            donation_id,
            fields,
        )

    async def remove_donation(self, donation_id: str) -> list[Donation]:
        household_id = self._require_household()
        await self._client.delete_donation(household_id, donation_id)
        # DELETE only acknowledges; the list has to be fetched again
        return await self._client.list_donations(household_id)

    async def share(self) -> str:
        if not self._household_id:
            raise NothingToShareError("No household to share")
        link = build_share_link(
            self._environment.current_url(),
            self._settings.share_param,
            self._household_id,
        )
        copy_best_effort(self._environment, link)
        return link
