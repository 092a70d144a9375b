"""
Centralized logging configuration for the FX Plot engine.

This module provides standardized logging configuration using structlog
for all components. All logging throughout the system should use this
configuration to ensure consistent formatting and structured logging.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger

# Longest slice of a rejected payload written to the log
MAX_LOGGED_PAYLOAD = 100


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    # structlog does the formatting, stdlib only routes the records
    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_ingest_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound to the ingestion subsystem.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for the ingestion loop
    """
    # Lazy proxy: picks up configure_logging() calls made after import
    return structlog.get_logger(name, subsystem="ingestion")


def log_rejected_message(
    logger: FilteringBoundLogger,
    reason: str,
    error: Optional[BaseException] = None,
    raw: Optional[str] = None,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a dropped feed message with standardized fields.

    Args:
        logger: Structlog logger instance
        reason: Short machine-readable rejection reason
        error: Exception that caused the rejection, if any
        raw: Raw payload text, truncated before logging
        context: Additional context data
    """
    bound_logger = logger.bind(
        reason=reason,
        error=str(error) if error is not None else None,
        error_type=type(error).__name__ if error is not None else None,
    )

    if raw is not None:
        bound_logger = bound_logger.bind(raw=raw[:MAX_LOGGED_PAYLOAD])

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.error("Market data not processed")


def log_series_created(
    logger: FilteringBoundLogger,
    provider: str,
    zero_time_ref: int,
    start_hour: float,
    start_minute: float
) -> None:
    """
    Log the anchoring of a newly discovered liquidity provider.

    Args:
        logger: Structlog logger instance
        provider: Liquidity provider name
        zero_time_ref: Timestamp (ns) of the provider's first quote
        start_hour: UTC hour captured from the first quote
        start_minute: UTC minute captured from the first quote
    """
    logger.info(
        "New liquidity provider series",
        provider=provider,
        zero_time_ref=zero_time_ref,
        start_time=f"{int(start_hour):02d}:{int(start_minute):02d}",
    )
