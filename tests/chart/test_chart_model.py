"""Tests for the render model built from store snapshots."""

from fx_plot.chart.model import ChartLine, build_chart_model
from fx_plot.config.defaults import ChartParams
from fx_plot.data.models import LpSeriesSnapshot


def make_snapshot(name: str, start_hour: float, start_minute: float, points=((0.0, 1.1),)) -> LpSeriesSnapshot:
    return LpSeriesSnapshot(
        name=name,
        points=tuple(points),
        zero_time_ref=0,
        start_hour=start_hour,
        start_minute=start_minute,
    )


class TestBuildChartModel:
    """Test chart model construction."""

    def test_empty_snapshot_has_no_model(self):
        """Test nothing is drawn before the first quote."""
        assert build_chart_model(()) is None

    def test_one_line_per_provider_in_order(self):
        """Test lines follow provider discovery order."""
        snapshots = (
            make_snapshot("CITI", 10.0, 0.0, [(0.0, 1.1), (5.0, 1.2)]),
            make_snapshot("BARX", 10.0, 1.0, [(0.0, 1.3)]),
        )

        model = build_chart_model(snapshots)

        assert model.lines == (
            ChartLine(name="CITI", points=((0.0, 1.1), (5.0, 1.2))),
            ChartLine(name="BARX", points=((0.0, 1.3),)),
        )

    def test_axis_anchored_on_first_provider(self):
        """Test the shared axis uses the first provider's start time."""
        snapshots = (
            make_snapshot("CITI", 10.0, 0.0),
            make_snapshot("BARX", 18.0, 45.0),
        )

        model = build_chart_model(snapshots)

        assert (model.start_hour, model.start_minute) == (10.0, 0.0)
        assert model.axis_formatter(90) == "10:01"
        assert model.axis_labels([0, 30, 60, 3600]) == ["", "", "10:01", "11:00"]

    def test_default_labels(self):
        """Test default chart labels are applied."""
        model = build_chart_model((make_snapshot("CITI", 0.0, 0.0),))

        assert model.y_axis_label == "EUR/USD 1M Buy Price"
        assert model.x_axis_label == "Time of Day (hrs:mins to nearest minute)"
        assert model.seconds_axis_label == "Time (seconds since start)"

    def test_custom_labels(self):
        """Test configured chart labels override the defaults."""
        params = ChartParams(title="GBP feed", y_axis_label="GBP/USD 1M Buy Price")

        model = build_chart_model((make_snapshot("CITI", 0.0, 0.0),), params)

        assert model.title == "GBP feed"
        assert model.y_axis_label == "GBP/USD 1M Buy Price"
