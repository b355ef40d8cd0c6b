"""Input validation package."""

from mindthegap.validation.validator import (
    DONATION_INPUT_MESSAGE,
    FREQUENCY_MESSAGE,
    MISSING_ID_MESSAGE,
    DonationValidator,
)

__all__ = [
    "DONATION_INPUT_MESSAGE",
    "FREQUENCY_MESSAGE",
    "MISSING_ID_MESSAGE",
    "DonationValidator",
]
