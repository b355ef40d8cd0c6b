"""
Persistence Services Package

Provides the adapter interface the dashboard flow talks to and its two
strategies: the remote adapter (backend API + session cookie) and the
local adapter (durable client storage + snapshot share links).

The Streamlit environment is not imported here so that the rest of the
package works without a running Streamlit session.
"""

from mindthegap.services.persistence.api_client import HouseholdApiClient
from mindthegap.services.persistence.client_state import (
    ClientEnvironment,
    InMemoryClientEnvironment,
    build_cookie_header,
)
from mindthegap.services.persistence.errors import (
    GENERIC_ERROR_MESSAGE,
    BackendError,
    DonationNotFoundError,
    NoActiveSessionError,
    NothingToShareError,
    PersistenceError,
    SessionStartError,
    SharedSnapshotUnavailableError,
    SnapshotDecodeError,
    TransportError,
)
from mindthegap.services.persistence.file_storage import (
    BrowserScopedStorage,
    JsonFileStorage,
    is_browser_token,
    mint_browser_token,
)
from mindthegap.services.persistence.interface import PersistenceAdapter
from mindthegap.services.persistence.local import LocalPersistenceAdapter, generate_donation_id
from mindthegap.services.persistence.remote import RemotePersistenceAdapter
from mindthegap.services.persistence.sharing import (
    build_share_link,
    build_social_share_url,
    decode_snapshot,
    encode_snapshot,
    strip_query_param,
)

__all__ = [
    # Interface
    "PersistenceAdapter",
    "ClientEnvironment",
    # Exceptions
    "GENERIC_ERROR_MESSAGE",
    "BackendError",
    "DonationNotFoundError",
    "NoActiveSessionError",
    "NothingToShareError",
    "PersistenceError",
    "SessionStartError",
    "SharedSnapshotUnavailableError",
    "SnapshotDecodeError",
    "TransportError",
    # Implementations
    "BrowserScopedStorage",
    "HouseholdApiClient",
    "InMemoryClientEnvironment",
    "JsonFileStorage",
    "LocalPersistenceAdapter",
    "RemotePersistenceAdapter",
    # Helpers
    "build_cookie_header",
    "build_share_link",
    "build_social_share_url",
    "decode_snapshot",
    "encode_snapshot",
    "generate_donation_id",
    "is_browser_token",
    "mint_browser_token",
    "strip_query_param",
]
