"""
Donation endpoints.

Writes take the user fields only. annual_amount is always derived on the
server, and every write answers with the household's full, ordered list.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import ValidationError

from mindthegap.api.dependencies import get_storage
from mindthegap.api.errors import (
    INVALID_PAYLOAD,
    MISSING_HOUSEHOLD_ID,
    UNSUPPORTED_FREQUENCY,
    ApiError,
)
from mindthegap.api.schemas import (
    DonationCreateRequest,
    DonationDeleteRequest,
    DonationsResponse,
    DonationUpdateRequest,
    SuccessResponse,
)
from mindthegap.calculations.annualization import Frequency
from mindthegap.models.donation import DonationFields
from mindthegap.services.storage import HouseholdStorageInterface


router = APIRouter(prefix="/donations", tags=["donations"])


def _fields(body: DonationCreateRequest) -> DonationFields:
    if not body.household_id or not body.charity_name or body.amount is None:
        raise ApiError(status.HTTP_400_BAD_REQUEST, INVALID_PAYLOAD)
    try:
        frequency = Frequency(body.frequency or "")
    except ValueError:
        raise ApiError(status.HTTP_400_BAD_REQUEST, UNSUPPORTED_FREQUENCY)
    try:
        return DonationFields(
            charity_name=body.charity_name,
            amount=body.amount,
            frequency=frequency,
        )
    except ValidationError:
        raise ApiError(status.HTTP_400_BAD_REQUEST, INVALID_PAYLOAD)


@router.get("", response_model=DonationsResponse)
async def list_donations(
    householdId: Optional[str] = Query(default=None),
    storage: HouseholdStorageInterface = Depends(get_storage),
) -> DonationsResponse:
    if not householdId:
        raise ApiError(status.HTTP_400_BAD_REQUEST, MISSING_HOUSEHOLD_ID)
    return DonationsResponse(donations=await storage.list_donations(householdId))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=DonationsResponse)
async def add_donation(
    body: DonationCreateRequest,
    storage: HouseholdStorageInterface = Depends(get_storage),
) -> DonationsResponse:
    fields = _fields(body)
    await storage.add_donation(body.household_id, fields)
    return DonationsResponse(donations=await storage.list_donations(body.household_id))


@router.put("", response_model=DonationsResponse)
async def update_donation(
    body: DonationUpdateRequest,
    storage: HouseholdStorageInterface = Depends(get_storage),
) -> DonationsResponse:
    if not body.id:
        raise ApiError(status.HTTP_400_BAD_REQUEST, INVALID_PAYLOAD)
    fields = _fields(body)
    await storage.update_donation(body.household_id, body.id, fields)
    return DonationsResponse(donations=await storage.list_donations(body.household_id))


@router.delete("", response_model=SuccessResponse)
async def delete_donation(
    body: DonationDeleteRequest,
    storage: HouseholdStorageInterface = Depends(get_storage),
) -> SuccessResponse:
    if not body.id or not body.household_id:
        raise ApiError(status.HTTP_400_BAD_REQUEST, INVALID_PAYLOAD)
    # Deleting an unknown donation is not an error
    await storage.delete_donation(body.household_id, body.id)
    return SuccessResponse()
