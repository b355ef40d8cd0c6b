"""
Storage Services Package

Provides the abstract interface and concrete implementations for the
backend's household/donation storage. Google Sheets is the hosted backend;
the in-memory store serves tests and local development.
"""

from mindthegap.services.storage.interface import (
    ConnectionError,
    HouseholdStorageInterface,
    NotFoundError,
    StorageError,
)
from mindthegap.services.storage.memory import InMemoryHouseholdStorage
from mindthegap.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsHouseholdStorage,
)

__all__ = [
    # Interface
    "HouseholdStorageInterface",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsHouseholdStorage",
    "InMemoryHouseholdStorage",
]
