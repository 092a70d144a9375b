"""
Run the engine over a quote feed and print a per-provider summary.

    python -m fx_plot --source quotes.txt
    producer | python -m fx_plot --log-level WARNING
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

import yaml

from .chart.axis import format_time_axis_label
from .config.loader import ConfigLoader
from .config.validation import ConfigValidator
from .engine import FxPlotEngine
from .logging.config import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fx_plot",
        description="Normalize a pipe-delimited liquidity provider quote feed.",
    )
    parser.add_argument("--source", default=None,
                        help="feed file, '-' for stdin (default: feed.source from config)")
    parser.add_argument("--config-dir", default=None,
                        help="directory containing fx_plot.yaml")
    parser.add_argument("--log-level", default=None,
                        help="logging level (default: logging.level from config)")
    parser.add_argument("--json-logs", action="store_true",
                        help="emit JSON log lines")
    return parser


def format_summary(engine: FxPlotEngine) -> list[str]:
    """One line per provider: name, points, last price and clock label."""
    lines = []
    for series in engine.snapshot():
        seconds, price = series.last_point
        label = format_time_axis_label(seconds, series.start_hour, series.start_minute)
        start = f"{int(series.start_hour):02d}:{int(series.start_minute):02d}"
        lines.append(
            f"{series.name}\tpoints={len(series.points)}\tstart={start}"
            f"\tlast={price}\tat={seconds:g}s\t{label or '-'}"
        )
    return lines


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    overrides: dict = {}
    if args.log_level:
        overrides.setdefault("logging", {})["level"] = args.log_level.upper()
    if args.json_logs:
        overrides.setdefault("logging", {})["format_json"] = True

    loader = ConfigLoader.create(Path(args.config_dir) if args.config_dir else None)
    try:
        merged = loader.merge_config(overrides)
    except (yaml.YAMLError, ValueError) as e:
        print(f"fx_plot: cannot load configuration: {e}", file=sys.stderr)
        return 2

    errors = ConfigValidator.validate_config(merged)
    if errors:
        for err in errors:
            print(f"fx_plot: {err.field}: {err.message} (got: {err.value!r})", file=sys.stderr)
        return 2

    # Configure before the engine is built so its startup logs are formatted too
    logging_config = loader.build_config(merged).logging
    configure_logging(level=logging_config.level, format_json=logging_config.format_json)

    engine = FxPlotEngine(config_dir=args.config_dir, overrides=overrides)

    try:
        engine.run(engine.open_source(args.source))
    except OSError as e:
        print(f"fx_plot: cannot read feed: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        pass

    for line in format_summary(engine):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
