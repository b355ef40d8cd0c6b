"""
Request and Response Schemas

Request bodies use camelCase keys (annualIncome, householdId, charityName).
Fields are optional at the schema level so that the routes can answer with
the specific 400 messages clients rely on instead of a generic 422.

Responses reuse the domain models, serialized with their field names.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from mindthegap.models.donation import Donation, Household


class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class HouseholdCreateRequest(_Request):
    annual_income: int = Field(default=0, ge=0, alias="annualIncome")
    alias: Optional[str] = None


class HouseholdUpdateRequest(_Request):
    id: Optional[str] = None
    annual_income: Optional[int] = Field(default=None, ge=0, alias="annualIncome")


class DonationCreateRequest(_Request):
    household_id: Optional[str] = Field(default=None, alias="householdId")
    charity_name: Optional[str] = Field(default=None, alias="charityName")
    amount: Optional[int] = None
    frequency: Optional[str] = None


class DonationUpdateRequest(DonationCreateRequest):
    id: Optional[str] = None


class DonationDeleteRequest(_Request):
    id: Optional[str] = None
    household_id: Optional[str] = Field(default=None, alias="householdId")


class HouseholdResponse(BaseModel):
    household: Household
    donations: list[Donation] = Field(default_factory=list)


class DonationsResponse(BaseModel):
    donations: list[Donation] = Field(default_factory=list)


class SuccessResponse(BaseModel):
    success: bool = True


class HealthResponse(BaseModel):
    ok: bool
    message: str
