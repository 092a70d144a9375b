"""
Data quality error classifications for quote message parsing.

These exceptions describe why a single feed message could not be turned
into a quote. All of them are recoverable at the message boundary.
"""

from typing import Any, Dict, Optional


class QuoteParseError(Exception):
    """Base class for quote messages that cannot be parsed."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class FieldCountError(QuoteParseError):
    """Message has fewer delimited fields than a quote requires."""

    def __init__(self, message: str, observed: int = 0, required: int = 0, **kwargs):
        super().__init__(message, **kwargs)
        self.observed = observed
        self.required = required


class EmptyFieldError(QuoteParseError):
    """Required text field is empty after trimming whitespace."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 position: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field_name = field_name
        self.position = position


class NumericFormatError(QuoteParseError):
    """Price or timestamp field is not a valid number."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 raw_text: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field_name = field_name
        self.raw_text = raw_text
