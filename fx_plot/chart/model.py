"""Render model built from series snapshots."""

from dataclasses import dataclass
from typing import Optional, Sequence

from ..config.defaults import ChartParams
from ..data.models import LpSeriesSnapshot
from .axis import format_time_axis_label


@dataclass(frozen=True)
class ChartLine:
    """One plotted provider line."""
    name: str
    points: tuple[tuple[float, float], ...]


@dataclass(frozen=True)
class ChartModel:
    """Everything a rendering surface needs to draw one frame."""
    lines: tuple[ChartLine, ...]
    title: str
    y_axis_label: str
    legend_title: str
    x_axis_label: str
    seconds_axis_label: str
    start_hour: float
    start_minute: float

    def axis_formatter(self, seconds: float) -> str:
        """Clock label for an x-axis grid mark."""
        return format_time_axis_label(seconds, self.start_hour, self.start_minute)

    def axis_labels(self, marks: Sequence[float]) -> list[str]:
        """Clock labels for a sequence of grid marks."""
        return [self.axis_formatter(mark) for mark in marks]


def build_chart_model(snapshots: Sequence[LpSeriesSnapshot],
                      chart_params: Optional[ChartParams] = None) -> Optional[ChartModel]:
    """
    Build the render model for the current store snapshot.

    The time axis is shared by all lines, so its clock labels are anchored
    on the first discovered provider.

    Args:
        snapshots: Provider snapshots in discovery order
        chart_params: Title and axis labels, defaults if None

    Returns:
        ChartModel, or None when no provider has data yet
    """
    if not snapshots:
        return None

    params = chart_params or ChartParams()
    anchor = snapshots[0]

    return ChartModel(
        lines=tuple(ChartLine(name=s.name, points=s.points) for s in snapshots),
        title=params.title,
        y_axis_label=params.y_axis_label,
        legend_title=params.legend_title,
        x_axis_label=params.x_axis_label,
        seconds_axis_label=params.seconds_axis_label,
        start_hour=anchor.start_hour,
        start_minute=anchor.start_minute,
    )

