"""
Annualization

Converts a per-period donation amount into its yearly equivalent.

This module has no dependencies so that both the models (which store the
derived annual amount) and the API server (which recomputes it on every
write) can use it.
"""

from enum import Enum
from typing import Union


class Frequency(str, Enum):
    """How often a recurring donation is paid."""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @classmethod
    def _missing_(cls, value):
        # Accept "Monthly", " YEARLY " etc.
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @property
    def periods_per_year(self) -> int:
        return PERIODS_PER_YEAR[self]

    @property
    def label(self) -> str:
        return self.value.title()


PERIODS_PER_YEAR = {
    Frequency.MONTHLY: 12,
    Frequency.QUARTERLY: 4,
    Frequency.YEARLY: 1,
}


def annualize(amount: int, frequency: Union[Frequency, str]) -> int:
    """
    Yearly equivalent of a per-period amount.

    monthly -> amount * 12, quarterly -> amount * 4, yearly -> amount.

    Raises:
        ValueError: if frequency is not one of the three supported tags
    """
    return amount * Frequency(frequency).periods_per_year
