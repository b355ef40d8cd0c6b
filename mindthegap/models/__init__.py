"""
Data Models Package

This package contains all Pydantic models used in Mind the Gap.
All data flowing through the system must conform to these schemas.
"""

from mindthegap.calculations.annualization import Frequency
from mindthegap.models.donation import (
    Donation,
    DonationFields,
    Household,
    HouseholdPayload,
    Snapshot,
    utc_now,
)
from mindthegap.models.dashboard import (
    Aggregation,
    Billionaire,
    ComparisonBar,
    DashboardView,
    DonationShare,
    LoadState,
    Message,
    MessageType,
    Metric,
    PieSlice,
)
from mindthegap.models.validation import (
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    # Donation models
    "Donation",
    "DonationFields",
    "Frequency",
    "Household",
    "HouseholdPayload",
    "Snapshot",
    "utc_now",
    # Dashboard models
    "Aggregation",
    "Billionaire",
    "ComparisonBar",
    "DashboardView",
    "DonationShare",
    "LoadState",
    "Message",
    "MessageType",
    "Metric",
    "PieSlice",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
]
