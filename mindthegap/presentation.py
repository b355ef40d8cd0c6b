"""
HTML fragments rendered by the dashboard.

Charity names come from user input and from shared links, which carry
someone else's data, so every user-supplied string is escaped before it
is placed in markup.
"""

from html import escape

from mindthegap.calculations.numeric import NumberFormatter
from mindthegap.models.dashboard import DonationShare


def donation_card_html(item: DonationShare, formatter: NumberFormatter) -> str:
    """Card markup for one donation row."""
    donation = item.donation
    return (
        '<div class="donation-card">'
        f"<strong>{escape(donation.charity_name)}</strong><br/>"
        f"{escape(formatter.format_currency(donation.amount))} "
        f"{escape(donation.frequency.label.lower())}"
        f" · {escape(formatter.format_currency(donation.annual_amount))} a year"
        f" · {escape(formatter.format_percent(item.share))} of your giving"
        "</div>"
    )
