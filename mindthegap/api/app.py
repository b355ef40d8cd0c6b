"""
FastAPI application factory for the household/donations backend.

Usage:
    mindthegap-api                                   # uvicorn on MINDTHEGAP_SERVER_HOST:PORT
    MINDTHEGAP_SERVER_STORAGE_BACKEND=google_sheets mindthegap-api

Error responses are always {"error": message}:
- 400: missing identifiers, unsupported frequency, malformed payloads
- 404: unknown household or donation
- 500: storage failures
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from mindthegap import __version__
from mindthegap.api.errors import (
    INVALID_PAYLOAD,
    MISSING_HOUSEHOLD_ID,
    MISSING_ID,
    UNSUPPORTED_FREQUENCY,
    ApiError,
)
from mindthegap.api.routes import donations, health, household
from mindthegap.config import ServerSettings, get_settings
from mindthegap.log import configure_logging, get_logger
from mindthegap.services.storage import (
    GoogleSheetsHouseholdStorage,
    HouseholdStorageInterface,
    InMemoryHouseholdStorage,
    NotFoundError,
    StorageError,
)


logger = get_logger(__name__)


def create_storage(settings: Optional[ServerSettings] = None) -> HouseholdStorageInterface:
    """Build the configured storage backend."""
    settings = settings or get_settings().server
    if settings.storage_backend == "google_sheets":
        return GoogleSheetsHouseholdStorage()
    return InMemoryHouseholdStorage()


def _validation_message(exc: RequestValidationError) -> str:
    """Pick the client-facing message for a request that failed parsing."""
    for error in exc.errors():
        loc = error.get("loc", ())
        field = loc[-1] if loc else None
        if loc and loc[0] == "query" and field == "id":
            return MISSING_ID
        if loc and loc[0] == "query" and field == "householdId":
            return MISSING_HOUSEHOLD_ID
        if field == "frequency":
            return UNSUPPORTED_FREQUENCY
    return INVALID_PAYLOAD


def create_app(storage: Optional[HouseholdStorageInterface] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        storage: Override the storage backend (useful for testing).

    Returns:
        Configured FastAPI instance.
    """
    app = FastAPI(
        title="Mind the Gap API",
        description="Households, donations and annual income.",
        version=__version__,
    )
    app.state.storage = storage or create_storage()

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error("storage_error", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=500, content={"error": str(exc)})

    app.include_router(household.router)
    app.include_router(donations.router)
    app.include_router(health.router)

    return app


def main() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    configure_logging(debug=settings.app.debug_mode)
    server = settings.server
    logger.info("api_starting", host=server.host, port=server.port, storage=server.storage_backend)
    uvicorn.run(
        "mindthegap.api.app:create_app",
        factory=True,
        host=server.host,
        port=server.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
