"""
Thread-safe per-provider series store.

The store is the only shared mutable state in the engine. One lock
guards the whole provider map; apply and snapshot both run under it and
do no I/O while holding it, so the ingestion thread and render readers
never see a partially applied quote.
"""

import threading
from typing import Optional

import structlog

from ..logging.config import log_series_created
from ..utils.time import elapsed_whole_seconds, utc_clock_reading
from .models import LpSeries, LpSeriesSnapshot, Quote

logger = structlog.get_logger(__name__)


class SeriesStore:
    """Maps liquidity provider name to its anchored buy price series."""

    def __init__(self):
        self.logger = logger
        self._lock = threading.Lock()
        # dicts keep insertion order: first discovered provider is listed first
        self._providers: dict[str, LpSeries] = {}

    def apply(self, quote: Quote) -> bool:
        """
        Apply a validated quote to its provider series.

        The first quote for a provider anchors the series at (0.0, buy_1m)
        and captures the UTC hour/minute of its timestamp. Later quotes
        append (whole seconds since the anchor, buy_1m).

        Args:
            quote: Validated quote

        Returns:
            True if a point was appended, False if the quote was older
            than the provider's latest point and was skipped
        """
        created: Optional[LpSeries] = None
        stale_seconds: Optional[float] = None

        with self._lock:
            series = self._providers.get(quote.provider)

            if series is None:
                series = LpSeries(name=quote.provider)
                series.zero_time_ref = quote.timestamp_ns
                series.start_hour, series.start_minute = utc_clock_reading(quote.timestamp_ns)
                series.buy_points.append((0.0, quote.buy_1m))
                # Inserted only once fully anchored
                self._providers[quote.provider] = series
                created = series
            else:
                seconds = elapsed_whole_seconds(quote.timestamp_ns, series.zero_time_ref)
                if seconds < series.buy_points[-1][0]:
                    stale_seconds = seconds
                else:
                    series.buy_points.append((seconds, quote.buy_1m))

        if created is not None:
            log_series_created(
                self.logger,
                provider=created.name,
                zero_time_ref=created.zero_time_ref,
                start_hour=created.start_hour,
                start_minute=created.start_minute,
            )
        if stale_seconds is not None:
            self.logger.warning(
                "Out of order quote skipped",
                provider=quote.provider,
                elapsed_seconds=stale_seconds,
                timestamp_ns=quote.timestamp_ns,
            )
            return False
        return True

    def snapshot(self) -> tuple[LpSeriesSnapshot, ...]:
        """Immutable copies of every provider series in discovery order."""
        with self._lock:
            return tuple(series.snapshot() for series in self._providers.values())

    def get(self, provider: str) -> Optional[LpSeriesSnapshot]:
        """Snapshot of a single provider series, None if unknown."""
        with self._lock:
            series = self._providers.get(provider)
            return series.snapshot() if series is not None else None

    def provider_names(self) -> list[str]:
        """Known provider names in discovery order."""
        with self._lock:
            return list(self._providers)

    def __len__(self) -> int:
        with self._lock:
            return len(self._providers)
