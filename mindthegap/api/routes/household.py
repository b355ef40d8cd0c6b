"""
Household endpoints.

GET returns 404 for an unknown id so clients can tell "gone" apart from
"backend down" and start a fresh household.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from mindthegap.api.dependencies import get_storage
from mindthegap.api.errors import INVALID_PAYLOAD, MISSING_ID, ApiError
from mindthegap.api.schemas import (
    HouseholdCreateRequest,
    HouseholdResponse,
    HouseholdUpdateRequest,
)
from mindthegap.log import get_logger
from mindthegap.services.storage import HouseholdStorageInterface, NotFoundError


logger = get_logger(__name__)

router = APIRouter(prefix="/household", tags=["household"])


async def _household_payload(
    storage: HouseholdStorageInterface,
    household_id: str,
) -> HouseholdResponse:
    household = await storage.get_household(household_id)
    if household is None:
        raise NotFoundError(f"Household not found: {household_id}")
    donations = await storage.list_donations(household_id)
    return HouseholdResponse(household=household, donations=donations)


@router.get("", response_model=HouseholdResponse)
async def get_household(
    id: Optional[str] = Query(default=None),
    storage: HouseholdStorageInterface = Depends(get_storage),
) -> HouseholdResponse:
    if not id:
        raise ApiError(status.HTTP_400_BAD_REQUEST, MISSING_ID)
    return await _household_payload(storage, id)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=HouseholdResponse)
async def create_household(
    body: HouseholdCreateRequest,
    storage: HouseholdStorageInterface = Depends(get_storage),
) -> HouseholdResponse:
    household = await storage.create_household(
        annual_income=body.annual_income,
        alias=body.alias or None,
    )
    logger.info("household_created", household_id=household.id)
    return HouseholdResponse(household=household, donations=[])


@router.put("", response_model=HouseholdResponse)
async def update_household(
    body: HouseholdUpdateRequest,
    storage: HouseholdStorageInterface = Depends(get_storage),
) -> HouseholdResponse:
    if not body.id or body.annual_income is None:
        raise ApiError(status.HTTP_400_BAD_REQUEST, INVALID_PAYLOAD)
    await storage.update_household_income(body.id, body.annual_income)
    return await _household_payload(storage, body.id)
