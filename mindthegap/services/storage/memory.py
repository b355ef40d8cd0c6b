"""
In-Memory Storage Implementation

Used by tests and for running the API locally without Google credentials.
Data lives as long as the process does.
"""

from typing import Optional
from uuid import uuid4

from mindthegap.models.donation import Donation, DonationFields, Household, utc_now
from mindthegap.services.storage.interface import (
    HouseholdStorageInterface,
    NotFoundError,
)


class InMemoryHouseholdStorage(HouseholdStorageInterface):
    """Dict-backed household storage."""

    def __init__(self):
        self._households: dict[str, Household] = {}
        self._donations: dict[str, list[Donation]] = {}

    async def create_household(
        self,
        annual_income: int = 0,
        alias: Optional[str] = None,
    ) -> Household:
        household = Household(
            id=str(uuid4()),
            annual_income=annual_income,
            alias=alias,
        )
        self._households[household.id] = household
        self._donations[household.id] = []
        return household

    async def get_household(self, household_id: str) -> Optional[Household]:
        return self._households.get(household_id)

    async def update_household_income(
        self,
        household_id: str,
        annual_income: int,
    ) -> Household:
        household = self._households.get(household_id)
        if household is None:
            raise NotFoundError(f"Household not found: {household_id}")
        updated = household.model_copy(update={
            "annual_income": annual_income,
            "updated_at": utc_now(),
        })
        self._households[household_id] = updated
        return updated

    async def list_donations(self, household_id: str) -> list[Donation]:
        donations = self._donations.get(household_id, [])
        return sorted(donations, key=lambda d: d.created_at)

    async def add_donation(
        self,
        household_id: str,
        fields: DonationFields,
    ) -> Donation:
        if household_id not in self._households:
            raise NotFoundError(f"Household not found: {household_id}")
        donation = Donation.create(str(uuid4()), fields)
        self._donations[household_id].append(donation)
        return donation

    async def update_donation(
        self,
        household_id: str,
        donation_id: str,
        fields: DonationFields,
    ) -> Donation:
        donations = self._donations.get(household_id, [])
        for index, donation in enumerate(donations):
            if donation.id == donation_id:
                updated = donation.with_fields(fields)
                donations[index] = updated
                return updated
        raise NotFoundError(f"Donation not found: {donation_id}")

    async def delete_donation(
        self,
        household_id: str,
        donation_id: str,
    ) -> bool:
        donations = self._donations.get(household_id, [])
        remaining = [d for d in donations if d.id != donation_id]
        if len(remaining) == len(donations):
            return False
        self._donations[household_id] = remaining
        return True
