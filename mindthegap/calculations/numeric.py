"""
Numeric Input Handling

Users type amounts as free text ("12.500", "€ 1200", "1 000"). We keep only
the digits, reformat them with digit grouping while the user types, and
parse them back to whole euros.

None of these functions raise: malformed input degrades to "" or 0.

DESIGN DECISION: Locale formatting lives on an explicitly constructed
NumberFormatter that the composition root builds from settings and passes
around. There are no module-level formatter instances.
"""

import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union


_NON_DIGITS = re.compile(r"[^0-9]")


def sanitize_numeric_input(text: Optional[str]) -> str:
    """Strip every character that is not an ASCII decimal digit."""
    if not text:
        return ""
    return _NON_DIGITS.sub("", str(text))


def parse_numeric_input(text: Optional[str]) -> int:
    """Parse user text to a whole number; 0 when there are no digits."""
    digits = sanitize_numeric_input(text)
    return int(digits) if digits else 0


def _round_half_up(value: Union[int, float, Decimal], places: int = 0) -> Decimal:
    quantum = Decimal(1).scaleb(-places)
    return Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)


class NumberFormatter:
    """
    Locale-style number formatting.

    Defaults match the Dutch (nl-NL) conventions the dashboard was designed
    for: "." as the thousands separator and whole-euro currency amounts.
    Percentages are shown with at most one fraction digit.
    """

    def __init__(
        self,
        grouping_separator: str = ".",
        currency_symbol: str = "€",
    ):
        self.grouping_separator = grouping_separator
        self.currency_symbol = currency_symbol

    def format_number(self, value: int) -> str:
        """Group digits: 1234567 -> '1.234.567'."""
        grouped = f"{abs(int(value)):,}".replace(",", self.grouping_separator)
        return f"-{grouped}" if value < 0 else grouped

    def format_input(self, text: Optional[str]) -> str:
        """Sanitize then regroup user text; empty input stays empty."""
        digits = sanitize_numeric_input(text)
        if not digits:
            return ""
        return self.format_number(int(digits))

    def format_currency(self, value: Union[int, float]) -> str:
        """Whole-unit currency: 1234.6 -> '€ 1.235'."""
        rounded = int(_round_half_up(value or 0))
        if rounded < 0:
            return f"{self.currency_symbol} -{self.format_number(-rounded)}"
        return f"{self.currency_symbol} {self.format_number(rounded)}"

    def format_percent(self, percentage: float) -> str:
        """Percentage points with at most one decimal: 2.4 -> '2.4%', 2.0 -> '2%'."""
        rounded = _round_half_up(percentage or 0, places=1)
        text = f"{rounded:.1f}"
        if text.endswith(".0"):
            text = text[:-2]
        return f"{text}%"

    def format_headline_percent(self, percentage: float) -> str:
        """Headline share of income, always one decimal: 2 -> '2.0%', 0 -> '0%'."""
        if not percentage:
            return "0%"
        return f"{_round_half_up(percentage, places=1)}%"
