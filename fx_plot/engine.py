"""
Main engine coordinator.

Wires configuration, the series store, the redraw signal and the feed
consumer together, and exposes the read side used by rendering surfaces.
"""

import threading
from pathlib import Path
from typing import Any, Callable, Optional, Union

import structlog

from .chart.model import ChartModel, build_chart_model
from .config.defaults import DefaultConfig
from .config.loader import ConfigLoader
from .config.validation import ConfigValidator
from .data.models import LpSeriesSnapshot
from .data.store import SeriesStore
from .ingest.consumer import IngestOutcome, MarketDataConsumer
from .ingest.notify import RedrawSignal
from .ingest.sources import FileMessageSource, IterableMessageSource, MessageSource, Payload, RawMessage

logger = structlog.get_logger(__name__)


class FxPlotEngine:
    """
    Coordinator for the quote normalization pipeline.

    Manages the flow:
    Raw Message → Parser → Series Store → Redraw Signal → Snapshot / Chart Model
    """

    def __init__(self,
                 config_dir: Optional[Union[str, Path]] = None,
                 overrides: Optional[dict[str, Any]] = None,
                 notify: Optional[Callable[[], None]] = None,
                 on_outcome: Optional[Callable[[RawMessage, IngestOutcome], None]] = None) -> None:
        """
        Initialize the engine.

        Args:
            config_dir: Directory holding fx_plot.yaml, package default if None
            overrides: Call-site configuration overrides
            notify: Extra redraw callback fired after each applied quote
            on_outcome: Callback receiving every message and its outcome

        Raises:
            ValueError: If the merged configuration is invalid
        """
        self.logger = logger

        self.config_loader = ConfigLoader.create(Path(config_dir) if config_dir is not None else None)
        merged = self.config_loader.merge_config(overrides)

        validation_errors = ConfigValidator.validate_config(merged)
        if validation_errors:
            error_msgs = [f"{err.field}: {err.message} (got: {err.value!r})" for err in validation_errors]
            self.logger.error("Configuration validation failed", errors=error_msgs)
            raise ValueError(f"Invalid configuration: {'; '.join(error_msgs)}")

        self.config: DefaultConfig = self.config_loader.build_config(merged)

        self.store = SeriesStore()
        self.redraw_signal = RedrawSignal()
        self._extra_notify = notify
        self._on_outcome = on_outcome

        # Consumer used for direct ingest() calls
        self._direct_consumer = self._make_consumer(IterableMessageSource((), name="direct"))

        self._consumer: Optional[MarketDataConsumer] = None
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

        self.logger.info("FX plot engine initialized",
                         delimiter=self.config.parser.delimiter,
                         min_fields=self.config.parser.min_fields)

    def _notify(self) -> None:
        self.redraw_signal()
        if self._extra_notify is not None:
            self._extra_notify()

    def _make_consumer(self, source: MessageSource) -> MarketDataConsumer:
        return MarketDataConsumer(
            source=source,
            store=self.store,
            notify=self._notify,
            on_outcome=self._on_outcome,
            parser_params=self.config.parser,
            feed_params=self.config.feed,
        )

    def ingest(self, payload: Payload) -> IngestOutcome:
        """Parse and apply a single message on the calling thread."""
        outcome = self._direct_consumer.process_payload(payload)
        if self._on_outcome is not None:
            self._on_outcome(RawMessage(payload=payload, offset=-1), outcome)
        return outcome

    def snapshot(self) -> tuple[LpSeriesSnapshot, ...]:
        """Consistent read-only view of every provider series."""
        return self.store.snapshot()

    def chart_model(self) -> Optional[ChartModel]:
        """Render model for the current snapshot, None before any data."""
        return build_chart_model(self.store.snapshot(), self.config.chart)

    def open_source(self, path: Optional[str] = None) -> FileMessageSource:
        """File or stdin source for the configured feed."""
        return FileMessageSource(path or self.config.feed.source)

    def run(self, source: MessageSource) -> None:
        """Consume a source on the calling thread until end of stream."""
        self._consumer = self._make_consumer(source)
        with source:
            self._consumer.run(self._stop_event)

    def start(self, source: MessageSource) -> threading.Thread:
        """Consume a source on a background daemon thread."""
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("Engine is already consuming a source")

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run,
            args=(source,),
            name="fx-plot-ingestion",
            daemon=True,
        )
        self._thread.start()
        self.logger.info("Ingestion thread started", source=source.name)
        return self._thread

    def stop(self, timeout: Optional[float] = None) -> bool:
        """
        Ask the ingestion loop to stop after its current message.

        A loop blocked inside the transport's receive() only notices the
        request once receive() returns.

        Returns:
            True if the ingestion thread has exited
        """
        self._stop_event.set()
        if self._thread is None:
            return True
        self._thread.join(timeout)
        stopped = not self._thread.is_alive()
        self.logger.info("Ingestion stop requested", stopped=stopped)
        return stopped

    def stats(self) -> dict[str, Any]:
        """Counters of the background consumer and direct ingest calls."""
        return {
            "providers": len(self.store),
            "direct": self._direct_consumer.stats.get_stats(),
            "consumer": self._consumer.stats.get_stats() if self._consumer is not None else None,
        }
