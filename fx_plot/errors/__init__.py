"""
Error classification for quote message processing.

Every error raised while turning a raw feed message into a quote is a
recoverable, per-message failure: the message is dropped and the
ingestion loop carries on.
"""

from .data_quality import (
    QuoteParseError,
    FieldCountError,
    EmptyFieldError,
    NumericFormatError,
)

__all__ = [
    "QuoteParseError",
    "FieldCountError",
    "EmptyFieldError",
    "NumericFormatError",
]
