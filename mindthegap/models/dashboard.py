"""
Dashboard Models

Everything the presentation layer renders: aggregation results, chart
datasets, headline metrics, transient messages and the full view state.
None of these are persisted.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from mindthegap.models.donation import Donation, utc_now


class LoadState(str, Enum):
    """Top-level dashboard state. There are only two."""
    LOADING = "loading"
    READY = "ready"


class MessageType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class Message(BaseModel):
    """A transient, user-facing message."""

    type: MessageType
    text: str = Field(..., min_length=1)
    created_at: datetime = Field(default_factory=utc_now)


# =============================================================================
# AGGREGATION RESULTS
# =============================================================================

class Billionaire(BaseModel):
    """A reference entity for the "give at your rate" comparison."""

    name: str
    net_worth: int = Field(..., ge=0)


class DonationShare(BaseModel):
    """A donation together with its share of total annual giving."""

    donation: Donation
    share: float = Field(
        ...,
        ge=0,
        description="Percentage of total annual giving (0-100)"
    )


class PieSlice(BaseModel):
    name: str
    value: int = Field(..., ge=0)
    percentage: Optional[float] = None
    color: str


class ComparisonBar(BaseModel):
    """One bar of the billionaire comparison chart."""

    name: str
    contribution: float = Field(
        ...,
        ge=0,
        description="Projected yearly contribution"
    )
    net_worth: Optional[int] = None
    color: str
    is_self: bool = False

    @property
    def monthly_contribution(self) -> float:
        return self.contribution / 12


class Aggregation(BaseModel):
    """
    Everything derived from (income, donations).

    Recomputed from scratch on every change; never cached or stored.
    """

    annual_income: int = Field(..., ge=0)
    total_annual: int = Field(..., ge=0)
    percentage: float = Field(..., ge=0)
    shares: list[DonationShare] = Field(default_factory=list)
    income_pie: list[PieSlice] = Field(default_factory=list)
    donation_pie: list[PieSlice] = Field(default_factory=list)
    billionaire_comparison: list[ComparisonBar] = Field(default_factory=list)

    @property
    def remaining_income(self) -> int:
        return max(self.annual_income - self.total_annual, 0)


class Metric(BaseModel):
    """A headline figure (label + formatted value)."""

    label: str
    value: str


# =============================================================================
# VIEW STATE
# =============================================================================

class DashboardView(BaseModel):
    """A consistent picture of the dashboard at one moment."""

    state: LoadState
    household_id: Optional[str] = None
    annual_income: int = 0
    income_input: str = ""
    donations: list[Donation] = Field(default_factory=list)
    aggregation: Aggregation
    metrics: list[Metric] = Field(default_factory=list)
    message: Optional[Message] = None
    share_link: Optional[str] = None
    social_share_url: Optional[str] = None
    editing_id: Optional[str] = None
