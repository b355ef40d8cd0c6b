"""
Share Links

Two kinds of share link exist, both carried in one query parameter:
- remote mode: the household identifier, as is
- local mode: the whole snapshot, as base64(URL-encoded JSON)

The snapshot encoding matches what a browser produces with
btoa(encodeURIComponent(JSON.stringify(snapshot))), so links created by
either side decode on the other.
"""

import base64
import binascii
import json
from typing import Optional
from urllib.parse import parse_qsl, quote, unquote, urlencode, urlsplit, urlunsplit

from mindthegap.calculations.aggregation import BILLIONAIRES
from mindthegap.calculations.numeric import NumberFormatter
from mindthegap.models.dashboard import Billionaire
from mindthegap.models.donation import Snapshot
from mindthegap.services.persistence.errors import SnapshotDecodeError


# encodeURIComponent leaves these unescaped (in addition to letters, digits, "-_.~")
URI_COMPONENT_SAFE = "!*'()"

TWEET_INTENT_URL = "https://twitter.com/intent/tweet"


def encode_snapshot(snapshot: Snapshot) -> str:
    """Compact transport form of a snapshot."""
    text = json.dumps(
        snapshot.to_transport_dict(),
        separators=(",", ":"),
        ensure_ascii=False,
    )
    escaped = quote(text, safe=URI_COMPONENT_SAFE)
    return base64.b64encode(escaped.encode("ascii")).decode("ascii")


def decode_snapshot(value: Optional[str]) -> Snapshot:
    """
    Inverse of encode_snapshot.

    Raises:
        SnapshotDecodeError: For anything that is not a valid encoded snapshot
    """
    if not value or not value.strip():
        raise SnapshotDecodeError("Empty snapshot payload")

    # A "+" that went through form decoding comes back as a space
    payload = value.strip().replace(" ", "+")
    payload += "=" * (-len(payload) % 4)

    try:
        escaped = base64.b64decode(payload, validate=True).decode("ascii")
        data = json.loads(unquote(escaped, errors="strict"))
        return Snapshot.model_validate(data)
    except (binascii.Error, UnicodeDecodeError, ValueError, TypeError) as e:
        # pydantic's ValidationError and JSONDecodeError are ValueErrors
        raise SnapshotDecodeError(f"Malformed snapshot payload: {e}") from e


def build_share_link(url: str, param: str, value: str) -> str:
    """Set (or replace) a query parameter on a URL."""
    parts = urlsplit(url)
    query = [
        (key, val)
        for key, val in parse_qsl(parts.query, keep_blank_values=True)
        if key != param
    ]
    query.append((param, value))
    return urlunsplit(parts._replace(query=urlencode(query)))


def strip_query_param(url: str, param: str) -> str:
    """Remove a query parameter from a URL, keeping everything else."""
    parts = urlsplit(url)
    query = [
        (key, val)
        for key, val in parse_qsl(parts.query, keep_blank_values=True)
        if key != param
    ]
    return urlunsplit(parts._replace(query=urlencode(query)))


def build_social_share_url(
    link: str,
    percentage: float,
    formatter: NumberFormatter,
    billionaire: Billionaire = BILLIONAIRES[1],
    handle: str = "@JeffBezos",
) -> str:
    """
    Tweet-intent link: "I give X% of my income; that would be Y a month for you."
    """
    monthly = billionaire.net_worth * percentage / 100 / 12
    text = (
        f"Hey {handle}, I give {formatter.format_percent(percentage)} of my income "
        f"to charity. That would be {formatter.format_currency(monthly)} a month "
        f"for you. #MindTheGap"
    )
    return f"{TWEET_INTENT_URL}?{urlencode({'text': text, 'url': link}, quote_via=quote)}"
