"""Default configuration parameters for the FX Plot engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ParserParams:
    """Quote message parsing parameters."""
    delimiter: str = "|"               # Field separator on the wire
    min_fields: int = 9                # provider, pair, 6 prices, timestamp


@dataclass(frozen=True)
class FeedParams:
    """Message feed parameters."""
    source: str = "-"                  # File path, "-" for stdin
    encoding: str = "utf-8"            # Payload text encoding
    topic: str = "fx-topic"            # Upstream topic name, logged for context
    group_id: str = "group1"           # Upstream consumer group, logged for context


@dataclass(frozen=True)
class ChartParams:
    """Render model labels."""
    title: str = "fx_plot"
    y_axis_label: str = "EUR/USD 1M Buy Price"
    legend_title: str = "EUR/USD\nLiquidity Providers"
    x_axis_label: str = "Time of Day (hrs:mins to nearest minute)"
    seconds_axis_label: str = "Time (seconds since start)"


@dataclass(frozen=True)
class LoggingParams:
    """Logging output parameters."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    parser: ParserParams
    feed: FeedParams
    chart: ChartParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        parser=ParserParams(),
        feed=FeedParams(),
        chart=ChartParams(),
        logging=LoggingParams(),
    )
