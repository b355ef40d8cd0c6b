"""
Abstract Storage Interface

DESIGN DECISION: The backend talks to its system of record through an
abstract interface. This allows us to:
1. Swap Google Sheets for a real database later
2. Use in-memory storage for testing and local development
3. Keep the API routes decoupled from storage implementation

The interface is intentionally simple - we're not building a full ORM.
Just the operations the household/donation endpoints need.

Every write takes DonationFields, never an annual amount: implementations
build Donation records, which recompute annual_amount themselves.
"""

from abc import ABC, abstractmethod
from typing import Optional

from mindthegap.models.donation import Donation, DonationFields, Household


class HouseholdStorageInterface(ABC):
    """
    Abstract interface for household and donation storage.

    Any storage implementation (Google Sheets, PostgreSQL, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def create_household(
        self,
        annual_income: int = 0,
        alias: Optional[str] = None,
    ) -> Household:
        """
        Create a household with a fresh server-assigned identifier.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def get_household(self, household_id: str) -> Optional[Household]:
        """
        Retrieve a household by its ID.

        Returns:
            The household if found, None otherwise
        """
        pass

    @abstractmethod
    async def update_household_income(
        self,
        household_id: str,
        annual_income: int,
    ) -> Household:
        """
        Set a household's annual income.

        Raises:
            NotFoundError: If the household doesn't exist
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def list_donations(self, household_id: str) -> list[Donation]:
        """
        List a household's donations, oldest first.

        Unknown households simply have no donations.
        """
        pass

    @abstractmethod
    async def add_donation(
        self,
        household_id: str,
        fields: DonationFields,
    ) -> Donation:
        """
        Add a donation to a household.

        Raises:
            NotFoundError: If the household doesn't exist
        """
        pass

    @abstractmethod
    async def update_donation(
        self,
        household_id: str,
        donation_id: str,
        fields: DonationFields,
    ) -> Donation:
        """
        Replace a donation's editable fields.

        Raises:
            NotFoundError: If no such donation belongs to the household
        """
        pass

    @abstractmethod
    async def delete_donation(
        self,
        household_id: str,
        donation_id: str,
    ) -> bool:
        """
        Delete a donation scoped to its household.

        Returns:
            True if a donation was deleted, False if there was none
        """
        pass

    async def check_connection(self) -> bool:
        """Health check hook; storage that needs no connection is always up."""
        return True


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
