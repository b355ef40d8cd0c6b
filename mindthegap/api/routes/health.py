"""Health check endpoint."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from mindthegap.api.dependencies import get_storage
from mindthegap.api.schemas import HealthResponse
from mindthegap.services.storage import HouseholdStorageInterface


router = APIRouter(tags=["health"])


@router.get("/health-check", response_model=HealthResponse)
async def health_check(
    storage: HouseholdStorageInterface = Depends(get_storage),
):
    """Report whether the storage backend is reachable."""
    if await storage.check_connection():
        return HealthResponse(ok=True, message="Storage backend is reachable.")
    return JSONResponse(
        status_code=500,
        content=HealthResponse(ok=False, message="Storage backend is unreachable.").model_dump(),
    )
