"""
Feed consumer loop.

Receives raw messages from a MessageSource, parses them into quotes,
applies them to the SeriesStore and signals the renderer. Every message
is acknowledged whatever the outcome: a malformed message is logged and
skipped for good rather than retried, so a poison message never stalls
the stream.
"""

import threading
import time
from enum import Enum
from typing import Any, Callable, Optional

from ..config.defaults import FeedParams, ParserParams
from ..data.parsers import parse_quote
from ..data.store import SeriesStore
from ..errors import QuoteParseError
from ..logging.config import get_ingest_logger, log_rejected_message
from .sources import MessageSource, Payload, RawMessage

logger = get_ingest_logger(__name__)

# Pause after a transport receive failure before polling again
RECEIVE_ERROR_BACKOFF_SECONDS = 0.1


class IngestOutcome(Enum):
    """What happened to one feed message."""
    PROCESSED = "processed"
    REJECTED = "rejected"
    STALE = "stale"
    NO_PAYLOAD = "no_payload"
    UNDECODABLE = "undecodable"


class IngestStats:
    """Simple counters for the ingestion loop."""

    def __init__(self):
        self._lock = threading.Lock()
        self.received = 0
        self.acknowledged = 0
        self.receive_errors = 0
        self.outcomes: dict[IngestOutcome, int] = {outcome: 0 for outcome in IngestOutcome}
        self.rejections_by_error: dict[str, int] = {}
        self.last_rejection_time: Optional[float] = None

    def record_received(self):
        with self._lock:
            self.received += 1

    def record_acknowledged(self):
        with self._lock:
            self.acknowledged += 1

    def record_receive_error(self):
        with self._lock:
            self.receive_errors += 1

    def record_outcome(self, outcome: IngestOutcome, error: Optional[Exception] = None):
        """Count an outcome, and the error type for rejections."""
        with self._lock:
            self.outcomes[outcome] += 1
            if error is not None:
                error_name = type(error).__name__
                self.rejections_by_error[error_name] = self.rejections_by_error.get(error_name, 0) + 1
                self.last_rejection_time = time.time()

    def get_stats(self) -> dict[str, Any]:
        """Get current counters."""
        with self._lock:
            return {
                "received": self.received,
                "acknowledged": self.acknowledged,
                "receive_errors": self.receive_errors,
                **{outcome.value: count for outcome, count in self.outcomes.items()},
                "rejections_by_error": dict(self.rejections_by_error),
                "last_rejection_time": self.last_rejection_time,
            }


class MarketDataConsumer:
    """Drives quote messages from a source into the series store."""

    def __init__(self,
                 source: MessageSource,
                 store: SeriesStore,
                 notify: Optional[Callable[[], None]] = None,
                 on_outcome: Optional[Callable[[RawMessage, IngestOutcome], None]] = None,
                 parser_params: Optional[ParserParams] = None,
                 feed_params: Optional[FeedParams] = None):
        self.logger = logger
        self.source = source
        self.store = store
        self.notify = notify
        self.on_outcome = on_outcome
        self.parser_params = parser_params or ParserParams()
        self.feed_params = feed_params or FeedParams()
        self.stats = IngestStats()
        self._thread: Optional[threading.Thread] = None

    def process_payload(self, payload: Payload) -> IngestOutcome:
        """
        Parse and apply one payload.

        Never raises for bad data: parse failures are logged and reported
        as REJECTED without touching the store.

        Args:
            payload: Raw message payload as bytes, text or None

        Returns:
            IngestOutcome describing what happened to the message
        """
        if payload is None:
            self.logger.info("No payload")
            outcome = IngestOutcome.NO_PAYLOAD
            self.stats.record_outcome(outcome)
            return outcome

        if isinstance(payload, bytes):
            try:
                text = payload.decode(self.feed_params.encoding)
            except UnicodeDecodeError as e:
                log_rejected_message(self.logger, "undecodable_payload", e,
                                     raw=payload[:100].hex())
                outcome = IngestOutcome.UNDECODABLE
                self.stats.record_outcome(outcome, e)
                return outcome
        else:
            text = payload

        self.logger.debug("Received message", payload=text)

        try:
            quote = parse_quote(
                text,
                delimiter=self.parser_params.delimiter,
                min_fields=self.parser_params.min_fields,
            )
        except QuoteParseError as e:
            log_rejected_message(self.logger, "parse_error", e, raw=text, context=e.context or None)
            outcome = IngestOutcome.REJECTED
            self.stats.record_outcome(outcome, e)
            return outcome

        if not self.store.apply(quote):
            outcome = IngestOutcome.STALE
            self.stats.record_outcome(outcome)
            return outcome

        self._signal_redraw()
        outcome = IngestOutcome.PROCESSED
        self.stats.record_outcome(outcome)
        return outcome

    def handle(self, message: RawMessage) -> IngestOutcome:
        """Process one transport message and acknowledge it."""
        self.stats.record_received()
        try:
            outcome = self.process_payload(message.payload)
        finally:
            self.source.acknowledge(message)
            self.stats.record_acknowledged()

        if self.on_outcome is not None:
            self.on_outcome(message, outcome)
        return outcome

    def run(self, stop_event: Optional[threading.Event] = None) -> None:
        """
        Consume messages until end of stream or until stop_event is set.

        Args:
            stop_event: Optional flag checked between messages
        """
        self.logger.info(
            "Consuming messages",
            source=self.source.name,
            topic=self.feed_params.topic,
            group_id=self.feed_params.group_id,
        )

        while stop_event is None or not stop_event.is_set():
            try:
                message = self.source.receive()
            except Exception as e:
                self.logger.error("Error while receiving from source",
                                  source=self.source.name, error=str(e))
                self.stats.record_receive_error()
                time.sleep(RECEIVE_ERROR_BACKOFF_SECONDS)
                continue

            if message is None:
                self.logger.info("End of stream", source=self.source.name)
                break

            try:
                self.handle(message)
            except Exception:
                # Keep consuming; the message has already been acknowledged
                self.logger.exception("Unexpected error handling message",
                                      offset=message.offset)

        self.logger.info("Consumer stopped", **self.stats.get_stats())

    def start(self, stop_event: Optional[threading.Event] = None) -> threading.Thread:
        """Run the consumer loop on a daemon thread."""
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("Consumer is already running")

        self._thread = threading.Thread(
            target=self.run,
            args=(stop_event,),
            name=f"fx-consumer-{self.source.name}",
            daemon=True,
        )
        self._thread.start()
        return self._thread

    def _signal_redraw(self) -> None:
        """Fire-and-forget redraw notification."""
        if self.notify is None:
            return
        try:
            self.notify()
        except Exception as e:
            self.logger.warning("Redraw notification failed", error=str(e))
