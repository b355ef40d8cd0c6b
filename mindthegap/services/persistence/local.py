"""
Local Persistence Adapter

Durable client storage is the system of record: one entry holding the
whole snapshot as JSON. Share links carry the entire encoded snapshot, so
opening a link replaces local state with the sender's numbers.

Mutations apply to the in-memory snapshot first and are then written out.
A failed write is logged and never surfaces: the session keeps working,
it just will not survive a restart.
"""

import json
import random
import string
import uuid
from typing import Optional

from mindthegap.config import AppSettings
from mindthegap.log import get_logger
from mindthegap.models.donation import Donation, DonationFields, Snapshot
from mindthegap.services.persistence.client_state import ClientEnvironment
from mindthegap.services.persistence.errors import (
    DonationNotFoundError,
    NothingToShareError,
    SnapshotDecodeError,
)
from mindthegap.services.persistence.interface import PersistenceAdapter, copy_best_effort
from mindthegap.services.persistence.sharing import (
    build_share_link,
    decode_snapshot,
    encode_snapshot,
)


logger = get_logger(__name__)

_TOKEN_ALPHABET = string.ascii_lowercase + string.digits


def generate_donation_id() -> str:
    """Random donation identifier; falls back to a pseudo-random token."""
    try:
        return str(uuid.uuid4())
    except NotImplementedError:
        # os.urandom is unavailable on this platform
        return "".join(random.choices(_TOKEN_ALPHABET, k=32))


class LocalPersistenceAdapter(PersistenceAdapter):
    """Persistence in durable client storage plus snapshot share links."""

    def __init__(self, environment: ClientEnvironment, settings: AppSettings):
        self._environment = environment
        self._settings = settings
        self._snapshot = Snapshot()

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    def _persist(self) -> None:
        try:
            self._environment.write_storage(
                self._settings.storage_key,
                json.dumps(self._snapshot.to_transport_dict()),
            )
        except Exception as e:
            logger.error("storage_write_failed", key=self._settings.storage_key, error=str(e))

    def _read_stored(self) -> Optional[Snapshot]:
        try:
            raw = self._environment.read_storage(self._settings.storage_key)
            if not raw:
                return None
            return Snapshot.model_validate_json(raw)
        except Exception as e:
            logger.warning("storage_read_failed", key=self._settings.storage_key, error=str(e))
            return None

    def _replace(self, donations: list[Donation]) -> list[Donation]:
        self._snapshot = self._snapshot.model_copy(update={"donations": donations})
        self._persist()
        return list(donations)

    def _index_of(self, donation_id: str) -> int:
        for index, donation in enumerate(self._snapshot.donations):
            if donation.id == donation_id:
                return index
        raise DonationNotFoundError(f"Donation not found: {donation_id}")

    async def load(self) -> Snapshot:
        shared = self._environment.get_query_param(self._settings.share_param)
        if shared is not None:
            try:
                self._snapshot = decode_snapshot(shared)
                self._persist()
                logger.info("shared_snapshot_loaded", donations=len(self._snapshot.donations))
                return self._snapshot
            except SnapshotDecodeError as e:
                logger.warning("snapshot_decode_failed", error=str(e))
            finally:
                self._environment.remove_query_param(self._settings.share_param)

        self._snapshot = self._read_stored() or Snapshot()
        return self._snapshot

    async def save_income(self, annual_income: int) -> Snapshot:
        self._snapshot = self._snapshot.model_copy(update={"annual_income": max(annual_income, 0)})
        self._persist()
        return self._snapshot

    async def add_donation(self, fields: DonationFields) -> list[Donation]:
        donation = Donation.create(generate_donation_id(), fields)
        return self._replace([*self._snapshot.donations, donation])

    async def update_donation(
        self,
        donation_id: str,
        fields: DonationFields,
    ) -> list[Donation]:
        index = self._index_of(donation_id)
        donations = list(self._snapshot.donations)
        donations[index] = donations[index].with_fields(fields)
        return self._replace(donations)

    async def remove_donation(self, donation_id: str) -> list[Donation]:
        index = self._index_of(donation_id)
        donations = list(self._snapshot.donations)
        del donations[index]
        return self._replace(donations)

    async def share(self) -> str:
        if self._snapshot.is_empty:
            raise NothingToShareError("Snapshot is empty")
        link = build_share_link(
            self._environment.current_url(),
            self._settings.share_param,
            encode_snapshot(self._snapshot),
        )
        copy_best_effort(self._environment, link)
        return link
