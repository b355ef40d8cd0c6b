"""Dependencies injected into the route handlers."""

from fastapi import Request

from mindthegap.services.storage import HouseholdStorageInterface


def get_storage(request: Request) -> HouseholdStorageInterface:
    """The storage backend chosen when the app was created."""
    return request.app.state.storage
