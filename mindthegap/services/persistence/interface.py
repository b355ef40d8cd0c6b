"""
Persistence Adapter Interface

DESIGN DECISION: The dashboard has one persistence contract with two
interchangeable strategies, selected at composition time:

- RemotePersistenceAdapter: the backend API is the system of record, a
  cookie holds the session pointer, share links carry the household id.
- LocalPersistenceAdapter: durable client storage is the system of record,
  share links carry the whole snapshot.

The dashboard flow never knows which one it talks to.

Failures are raised as PersistenceError subclasses (see errors.py).
"""

from abc import ABC, abstractmethod
from typing import Optional

from mindthegap.log import get_logger
from mindthegap.models.donation import Donation, DonationFields, Snapshot
from mindthegap.services.persistence.client_state import ClientEnvironment


logger = get_logger(__name__)


class PersistenceAdapter(ABC):
    """
    Abstract interface for dashboard state persistence.

    Every method either returns the new confirmed state or raises a
    PersistenceError. None of them partially apply a change.
    """

    @property
    def household_id(self) -> Optional[str]:
        """Active backend identifier; None when there is no backend."""
        return None

    @abstractmethod
    async def load(self) -> Snapshot:
        """
        Resolve the initial state (shared link, cached session, or fresh).

        Raises:
            PersistenceError: If no usable state could be obtained
        """
        pass

    @abstractmethod
    async def save_income(self, annual_income: int) -> Snapshot:
        """Store the annual income and return the confirmed snapshot."""
        pass

    @abstractmethod
    async def add_donation(self, fields: DonationFields) -> list[Donation]:
        """Add a donation and return the full confirmed donation list."""
        pass

    @abstractmethod
    async def update_donation(
        self,
        donation_id: str,
        fields: DonationFields,
    ) -> list[Donation]:
        """Edit a donation and return the full confirmed donation list."""
        pass

    @abstractmethod
    async def remove_donation(self, donation_id: str) -> list[Donation]:
        """Remove a donation and return the full confirmed donation list."""
        pass

    @abstractmethod
    async def share(self) -> str:
        """
        Build a shareable link and copy it to the clipboard (best-effort).

        Raises:
            NothingToShareError: If there is nothing to share yet
        """
        pass


def copy_best_effort(environment: ClientEnvironment, text: str) -> bool:
    """Copy to the clipboard if possible. Failure is ignored."""
    try:
        return bool(environment.copy_to_clipboard(text))
    except Exception as e:
        logger.debug("clipboard_copy_failed", error=str(e))
        return False
