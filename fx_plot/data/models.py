"""
Canonical data models for quotes and provider series.

Quotes are immutable parse results. Series are owned and mutated by the
series store only; readers receive immutable snapshots.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Quote:
    """One validated market update from a liquidity provider."""
    provider: str       # Liquidity provider name, trimmed
    buy_1m: float       # 1 million unit buy price
    sell_1m: float      # 1 million unit sell price
    buy_3m: float       # 3 million unit buy price
    sell_3m: float      # 3 million unit sell price
    buy_5m: float       # 5 million unit buy price
    sell_5m: float      # 5 million unit sell price
    timestamp_ns: int   # Feed timestamp, ns since Unix epoch


@dataclass(frozen=True)
class LpSeriesSnapshot:
    """Read-only copy of a provider series at a point in time."""
    name: str
    points: tuple[tuple[float, float], ...]
    zero_time_ref: int
    start_hour: float
    start_minute: float

    @property
    def last_point(self) -> tuple[float, float]:
        """Most recent (seconds, price) point."""
        return self.points[-1]


@dataclass
class LpSeries:
    """Per-provider buy price series anchored at the first quote."""

    name: str
    buy_points: list[tuple[float, float]] = field(default_factory=list)

    # Write-once anchor, set from the first accepted quote
    zero_time_ref: int = 0
    start_hour: float = 0.0
    start_minute: float = 0.0

    @property
    def is_anchored(self) -> bool:
        """True once the first quote has been applied."""
        return bool(self.buy_points)

    def snapshot(self) -> LpSeriesSnapshot:
        """Copy the series into an immutable snapshot."""
        return LpSeriesSnapshot(
            name=self.name,
            points=tuple(self.buy_points),
            zero_time_ref=self.zero_time_ref,
            start_hour=self.start_hour,
            start_minute=self.start_minute,
        )
