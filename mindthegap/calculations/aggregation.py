"""
Aggregation Engine

Turns an income figure and a list of donations into everything the
dashboard shows: total annual giving, percentage of income, per-donation
shares, the two pie datasets and the billionaire comparison.

GUARANTEES:
- Pure: same inputs, same outputs, no side effects
- Never divides by zero (zero income or zero giving yields 0, never NaN)
- The "remaining income" slice is clamped at zero when giving exceeds income

Inputs are small (dozens of rows at most), so everything is recomputed
on every change. There is no incremental update path.
"""

from typing import Optional, Sequence

from mindthegap.models.dashboard import (
    Aggregation,
    Billionaire,
    ComparisonBar,
    DonationShare,
    Metric,
    PieSlice,
)
from mindthegap.models.donation import Donation
from mindthegap.calculations.numeric import NumberFormatter


BILLIONAIRES: tuple[Billionaire, ...] = (
    Billionaire(name="Elon Musk", net_worth=226_000_000_000),
    Billionaire(name="Jeff Bezos", net_worth=205_000_000_000),
    Billionaire(name="Bernard Arnault", net_worth=195_000_000_000),
)

SELF_LABEL = "You"
DONATIONS_LABEL = "Donations"
REMAINING_LABEL = "Remaining income"

BAR_COLORS = ("#ee352e", "#fccc0a", "#00933c", "#ff6319", "#0039a6")
PIE_COLORS = ("#ee352e", "#00933c", "#ff6319", "#b933ad", "#0039a6")


def total_annual_donations(donations: Sequence[Donation]) -> int:
    return sum(donation.annual_amount for donation in donations)


def percentage_of_income(total_annual: int, income: int) -> float:
    """Share of income given away, in percent. 0 when income is 0."""
    if income > 0:
        return total_annual / income * 100
    return 0.0


def donation_shares(
    donations: Sequence[Donation],
    total_annual: Optional[int] = None,
) -> list[DonationShare]:
    """Each donation's annual amount as a percentage of all giving."""
    if total_annual is None:
        total_annual = total_annual_donations(donations)
    return [
        DonationShare(
            donation=donation,
            share=(donation.annual_amount / total_annual * 100) if total_annual > 0 else 0.0,
        )
        for donation in donations
    ]


def income_pie(income: int, total_annual: int) -> list[PieSlice]:
    """Two slices: what is given and what remains (never negative)."""
    return [
        PieSlice(name=DONATIONS_LABEL, value=total_annual, color=PIE_COLORS[0]),
        PieSlice(
            name=REMAINING_LABEL,
            value=max(income - total_annual, 0),
            color=PIE_COLORS[1],
        ),
    ]


def donation_pie(shares: Sequence[DonationShare]) -> list[PieSlice]:
    """One slice per donation."""
    return [
        PieSlice(
            name=item.donation.charity_name,
            value=item.donation.annual_amount,
            percentage=item.share,
            color=PIE_COLORS[index % len(PIE_COLORS)],
        )
        for index, item in enumerate(shares)
    ]


def billionaire_comparison(
    percentage: float,
    total_annual: int = 0,
    billionaires: Sequence[Billionaire] = BILLIONAIRES,
    include_self: bool = False,
) -> list[ComparisonBar]:
    """
    What each reference entity would give at the household's rate.

    contribution = net_worth * percentage / 100. Nothing is projected when
    the rate is zero. The household's own entry (include_self) is shown
    whenever its own total is nonzero, regardless of the rate.
    """
    bars = []
    if percentage > 0:
        bars = [
            ComparisonBar(
                name=person.name,
                net_worth=person.net_worth,
                contribution=person.net_worth * percentage / 100,
                color=BAR_COLORS[index % len(BAR_COLORS)],
            )
            for index, person in enumerate(billionaires)
        ]

    if include_self and total_annual > 0:
        bars.append(ComparisonBar(
            name=SELF_LABEL,
            contribution=float(total_annual),
            color=BAR_COLORS[len(billionaires) % len(BAR_COLORS)],
            is_self=True,
        ))

    return bars


def aggregate(
    income: int,
    donations: Sequence[Donation],
    billionaires: Sequence[Billionaire] = BILLIONAIRES,
    include_self: bool = False,
) -> Aggregation:
    """Compute every derived figure for one (income, donations) state."""
    income = max(int(income or 0), 0)
    total = total_annual_donations(donations)
    percentage = percentage_of_income(total, income)
    shares = donation_shares(donations, total)

    return Aggregation(
        annual_income=income,
        total_annual=total,
        percentage=percentage,
        shares=shares,
        income_pie=income_pie(income, total),
        donation_pie=donation_pie(shares),
        billionaire_comparison=billionaire_comparison(
            percentage,
            total_annual=total,
            billionaires=billionaires,
            include_self=include_self,
        ),
    )


def build_metrics(aggregation: Aggregation, formatter: NumberFormatter) -> list[Metric]:
    """The three headline figures shown above the charts."""
    percentage_display = formatter.format_headline_percent(aggregation.percentage)
    return [
        Metric(label="Annual income", value=formatter.format_currency(aggregation.annual_income)),
        Metric(label="Yearly donations", value=formatter.format_currency(aggregation.total_annual)),
        Metric(label="Share of income", value=percentage_display),
    ]
