"""
Parser for pipe-delimited liquidity provider quote messages.

Wire format (one message per update, at least nine fields):

    <provider>|<currency_pair>|<buy_1m>|<sell_1m>|<buy_3m>|<sell_3m>|<buy_5m>|<sell_5m>|<timestamp_ns>

Fields are consumed positionally and trimmed. Extra trailing fields are
ignored. Parsing is all-or-nothing: either a complete Quote is returned
or a QuoteParseError subclass is raised, and nothing else is touched.
"""

import re

from ..errors import EmptyFieldError, FieldCountError, NumericFormatError
from .models import Quote

DEFAULT_DELIMITER = "|"
REQUIRED_FIELDS = 9

PRICE_FIELDS = ("buy_1m", "sell_1m", "buy_3m", "sell_3m", "buy_5m", "sell_5m")

MAX_TIMESTAMP_NS = 2 ** 64 - 1

# Decimal float grammar; rejects forms float() tolerates such as "1_000"
_FLOAT_RE = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?)",
    re.IGNORECASE | re.ASCII,
)
_UINT_RE = re.compile(r"\+?\d+", re.ASCII)


def parse_quote(raw: str, *,
                delimiter: str = DEFAULT_DELIMITER,
                min_fields: int = REQUIRED_FIELDS) -> Quote:
    """
    Parse one raw feed message into a Quote.

    Args:
        raw: Raw message text
        delimiter: Field separator
        min_fields: Minimum number of delimited fields required

    Returns:
        Validated Quote

    Raises:
        FieldCountError: If fewer than min_fields fields are present
        EmptyFieldError: If provider or currency pair is blank
        NumericFormatError: If a price or the timestamp is not numeric
    """
    fields = raw.split(delimiter)
    if len(fields) < min_fields:
        raise FieldCountError(
            f"missing market data fields: expected at least {min_fields}, got {len(fields)}",
            observed=len(fields),
            required=min_fields,
        )

    provider = _parse_text_field(fields[0], "provider", 1)
    # Currency pair is validated only; one instrument per engine
    _parse_text_field(fields[1], "currency_pair", 2)

    prices = {
        name: _parse_price_field(fields[position], name)
        for position, name in enumerate(PRICE_FIELDS, start=2)
    }

    timestamp_ns = _parse_timestamp_field(fields[8])

    return Quote(provider=provider, timestamp_ns=timestamp_ns, **prices)


def _parse_text_field(value: str, field_name: str, position: int) -> str:
    """Trim a required text field, rejecting blanks."""
    trimmed = value.strip()
    if not trimmed:
        raise EmptyFieldError(
            f"empty data field: {field_name} (field {position})",
            field_name=field_name,
            position=position,
        )
    return trimmed


def _parse_price_field(value: str, field_name: str) -> float:
    """Parse a trimmed decimal price."""
    text = value.strip()
    if not _FLOAT_RE.fullmatch(text):
        raise NumericFormatError(
            f"invalid float literal for {field_name}: {value!r}",
            field_name=field_name,
            raw_text=value,
        )
    return float(text)


def _parse_timestamp_field(value: str) -> int:
    """Parse a trimmed unsigned 64-bit nanosecond timestamp."""
    text = value.strip()
    if not _UINT_RE.fullmatch(text):
        raise NumericFormatError(
            f"invalid digit found in timestamp_ns: {value!r}",
            field_name="timestamp_ns",
            raw_text=value,
        )

    timestamp_ns = int(text)
    if timestamp_ns > MAX_TIMESTAMP_NS:
        raise NumericFormatError(
            f"timestamp_ns too large to fit in 64 bits: {value!r}",
            field_name="timestamp_ns",
            raw_text=value,
        )
    return timestamp_ns
