"""
Core Data Models for Mind the Gap

These models define the schemas for households, donations and the
snapshots that move between the dashboard, the backend and share links.
They are designed to:
1. Enforce type safety at runtime
2. Keep derived fields (annual_amount) consistent with their sources
3. Serialize to the exact JSON shapes the API and share links use

DESIGN DECISION: annual_amount is a stored field (the backend persists it),
but it is recomputed from amount + frequency every time a Donation is
validated. A supplied annual_amount is ignored, so it can never drift.
Donations are frozen; edits go through with_fields(), which re-validates.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)

from mindthegap.calculations.annualization import Frequency, annualize


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# DONATIONS
# =============================================================================

class DonationFields(BaseModel):
    """
    The user-editable part of a donation.

    Used for both adding and updating, on the client and on the server.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    charity_name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display name of the charity"
    )
    amount: int = Field(
        ...,
        gt=0,
        description="Amount per period in whole euros"
    )
    frequency: Frequency = Field(
        ...,
        description="How often the amount is given"
    )

    @property
    def annual_amount(self) -> int:
        return annualize(self.amount, self.frequency)


class Donation(BaseModel):
    """
    A single recurring gift.

    Identifiers are opaque strings: server-assigned in remote mode,
    client-generated in local mode.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque donation identifier"
    )
    charity_name: str = Field(
        ...,
        min_length=1,
        max_length=200,
    )
    amount: int = Field(..., gt=0)
    frequency: Frequency
    annual_amount: int = Field(
        default=0,
        ge=0,
        description="Derived: amount x periods per year"
    )
    created_at: datetime = Field(default_factory=utc_now)

    @model_validator(mode='before')
    @classmethod
    def derive_annual_amount(cls, data: Any) -> Any:
        """Recompute annual_amount from amount and frequency."""
        if isinstance(data, dict) and "amount" in data and "frequency" in data:
            try:
                annual = annualize(int(data["amount"]), data["frequency"])
            except (TypeError, ValueError):
                # Leave it to field validation to report the bad input
                return data
            data = {**data, "annual_amount": annual}
        return data

    @classmethod
    def create(
        cls,
        donation_id: str,
        fields: DonationFields,
        created_at: Optional[datetime] = None,
    ) -> "Donation":
        """Build a new donation from user fields."""
        return cls(
            id=donation_id,
            charity_name=fields.charity_name,
            amount=fields.amount,
            frequency=fields.frequency,
            created_at=created_at or utc_now(),
        )

    def with_fields(self, fields: DonationFields) -> "Donation":
        """Return an edited copy; identity and creation time are kept."""
        return Donation(
            id=self.id,
            charity_name=fields.charity_name,
            amount=fields.amount,
            frequency=fields.frequency,
            created_at=self.created_at,
        )

    def to_fields(self) -> DonationFields:
        return DonationFields(
            charity_name=self.charity_name,
            amount=self.amount,
            frequency=self.frequency,
        )


# =============================================================================
# HOUSEHOLDS (remote mode)
# =============================================================================

class Household(BaseModel):
    """The backend record that owns an income figure and its donations."""

    id: str = Field(..., min_length=1)
    annual_income: int = Field(
        default=0,
        ge=0,
        description="Annual income in whole euros"
    )
    alias: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class HouseholdPayload(BaseModel):
    """The backend's canonical {household, donations} response."""

    household: Household
    donations: list[Donation] = Field(default_factory=list)

    def to_snapshot(self) -> "Snapshot":
        return Snapshot(
            annual_income=self.household.annual_income,
            donations=self.donations,
        )


# =============================================================================
# SNAPSHOTS (local mode + share links)
# =============================================================================

class Snapshot(BaseModel):
    """
    The full {annualIncome, donations} state.

    This is the unit of local persistence and of link sharing. Loading a
    snapshot replaces state, it is never merged.
    """
    model_config = ConfigDict(populate_by_name=True)

    annual_income: int = Field(
        default=0,
        ge=0,
        alias="annualIncome",
    )
    donations: list[Donation] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.annual_income <= 0 and not self.donations

    def to_transport_dict(self) -> dict:
        """JSON-ready dict with the camelCase keys used in storage and links."""
        return self.model_dump(mode="json", by_alias=True)
