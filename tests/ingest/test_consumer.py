"""
Tests for the feed consumer loop.

Covers outcome classification, the acknowledge-regardless policy, redraw
notification and loop resilience.
"""

import threading
import pytest
from unittest.mock import Mock, patch

from fx_plot.config.defaults import FeedParams, ParserParams
from fx_plot.data.store import SeriesStore
from fx_plot.ingest.consumer import IngestOutcome, MarketDataConsumer
from fx_plot.ingest.sources import IterableMessageSource, MessageSource, RawMessage

BASE_TS_NS = 1_000_000_000_000_000_000
NANOS = 1_000_000_000


def msg(provider: str = "CITI", buy_1m: str = "1.1000", ts: int = BASE_TS_NS) -> str:
    return f"{provider}|EURUSD|{buy_1m}|1.1002|1.1001|1.1003|1.1002|1.1004|{ts}"


def make_consumer(payloads, **kwargs):
    source = IterableMessageSource(payloads)
    store = SeriesStore()
    notify = Mock()
    consumer = MarketDataConsumer(source, store, notify=notify, **kwargs)
    return consumer, source, store, notify


class TestProcessPayload:
    """Test single payload handling."""

    def test_valid_payload_processed(self):
        """Test a valid message is applied and signalled."""
        consumer, _, store, notify = make_consumer([])

        outcome = consumer.process_payload(msg())

        assert outcome is IngestOutcome.PROCESSED
        assert store.get("CITI").points == ((0.0, 1.1),)
        notify.assert_called_once_with()

    def test_bytes_payload_decoded(self):
        """Test byte payloads are decoded before parsing."""
        consumer, _, store, _ = make_consumer([])

        assert consumer.process_payload(msg().encode("utf-8")) is IngestOutcome.PROCESSED
        assert len(store) == 1

    def test_field_count_rejected_without_state_change(self):
        """Test a short message is rejected and touches nothing."""
        consumer, _, store, notify = make_consumer([])

        outcome = consumer.process_payload("CITI|EURUSD|1.1")

        assert outcome is IngestOutcome.REJECTED
        assert store.snapshot() == ()
        notify.assert_not_called()

    def test_numeric_failure_is_all_or_nothing(self):
        """Test a bad third price leaves provider count and points unchanged."""
        consumer, _, store, notify = make_consumer([])
        consumer.process_payload(msg())
        before = store.snapshot()

        bad = msg().split("|")
        bad[4] = "abc"
        outcome = consumer.process_payload("|".join(bad))

        assert outcome is IngestOutcome.REJECTED
        assert store.snapshot() == before
        assert notify.call_count == 1

    def test_new_provider_not_created_on_failure(self):
        """Test a failed message never registers its provider."""
        consumer, _, store, _ = make_consumer([])

        consumer.process_payload("BARX|EURUSD|1|1|1|1|1|1|not-a-time")

        assert store.get("BARX") is None

    def test_no_payload(self):
        """Test a missing payload is reported and ignored."""
        consumer, _, store, notify = make_consumer([])

        assert consumer.process_payload(None) is IngestOutcome.NO_PAYLOAD
        assert len(store) == 0
        notify.assert_not_called()

    def test_undecodable_payload(self):
        """Test invalid UTF-8 bytes are reported and ignored."""
        consumer, _, store, notify = make_consumer([])

        assert consumer.process_payload(b"\xff\xfe|EURUSD") is IngestOutcome.UNDECODABLE
        assert len(store) == 0
        notify.assert_not_called()

    def test_configured_encoding(self):
        """Test the feed encoding is used to decode payloads."""
        consumer, _, store, _ = make_consumer([], feed_params=FeedParams(encoding="latin-1"))

        assert consumer.process_payload(msg(provider="Soci\xe9t\xe9").encode("latin-1")) is IngestOutcome.PROCESSED
        assert store.provider_names() == ["Soci\xe9t\xe9"]

    def test_stale_quote(self):
        """Test an out of order quote is reported as stale without redraw."""
        consumer, _, store, notify = make_consumer([])
        consumer.process_payload(msg(ts=BASE_TS_NS + 10 * NANOS))
        notify.reset_mock()

        assert consumer.process_payload(msg(ts=BASE_TS_NS)) is IngestOutcome.STALE
        notify.assert_not_called()

    def test_parser_params_applied(self):
        """Test the configured delimiter is used."""
        consumer, _, store, _ = make_consumer([], parser_params=ParserParams(delimiter=";"))

        assert consumer.process_payload(msg().replace("|", ";")) is IngestOutcome.PROCESSED
        assert consumer.process_payload(msg()) is IngestOutcome.REJECTED

    def test_notify_failure_does_not_break_ingestion(self):
        """Test a failing redraw callback is logged and ignored."""
        consumer, _, store, notify = make_consumer([])
        notify.side_effect = RuntimeError("window closed")

        assert consumer.process_payload(msg()) is IngestOutcome.PROCESSED
        assert len(store) == 1

    def test_rejection_logged(self):
        """Test rejected messages are logged with the error type."""
        consumer, _, _, _ = make_consumer([])

        with patch("fx_plot.ingest.consumer.log_rejected_message") as mock_log:
            consumer.process_payload("CITI")

        mock_log.assert_called_once()
        args, kwargs = mock_log.call_args
        assert args[1] == "parse_error"
        assert type(args[2]).__name__ == "FieldCountError"
        assert kwargs["raw"] == "CITI"


class TestRunLoop:
    """Test the consume loop."""

    def test_processes_stream_to_end(self):
        """Test every message is consumed and the loop ends at end of stream."""
        payloads = [
            msg("CITI", "1.10", BASE_TS_NS),
            msg("BARX", "1.20", BASE_TS_NS),
            msg("CITI", "1.11", BASE_TS_NS + 5 * NANOS),
        ]
        consumer, _, store, notify = make_consumer(payloads)

        consumer.run()

        assert store.get("CITI").points == ((0.0, 1.10), (5.0, 1.11))
        assert store.get("BARX").points == ((0.0, 1.20),)
        assert notify.call_count == 3

    def test_bad_messages_acknowledged_and_skipped(self):
        """Test poison messages are acknowledged and the stream continues."""
        payloads = [msg(), "garbage", None, b"\xff", msg(ts=BASE_TS_NS + NANOS)]
        consumer, source, store, _ = make_consumer(payloads)

        consumer.run()

        assert source.acknowledged_count == 5
        assert source.acknowledged_offset == 4
        assert len(store.get("CITI").points) == 2

        stats = consumer.stats.get_stats()
        assert stats["received"] == 5
        assert stats["acknowledged"] == 5
        assert stats["processed"] == 2
        assert stats["rejected"] == 1
        assert stats["no_payload"] == 1
        assert stats["undecodable"] == 1
        assert stats["rejections_by_error"] == {"FieldCountError": 1, "UnicodeDecodeError": 1}

    def test_outcome_sink_receives_every_message(self):
        """Test the outcome callback sees processed and rejected messages."""
        outcomes = []
        consumer, _, _, _ = make_consumer(
            [msg(), "bad"],
            on_outcome=lambda message, outcome: outcomes.append((message.offset, outcome)),
        )

        consumer.run()

        assert outcomes == [(0, IngestOutcome.PROCESSED), (1, IngestOutcome.REJECTED)]

    def test_receive_errors_do_not_stop_loop(self):
        """Test transport receive failures are logged and retried."""
        source = Mock(spec=MessageSource)
        source.name = "flaky"
        source.receive.side_effect = [
            ConnectionError("broker down"),
            RawMessage(payload=msg(), offset=0),
            None,
        ]
        store = SeriesStore()
        consumer = MarketDataConsumer(source, store)

        with patch("fx_plot.ingest.consumer.time.sleep") as mock_sleep:
            consumer.run()

        assert len(store) == 1
        assert consumer.stats.get_stats()["receive_errors"] == 1
        mock_sleep.assert_called_once()
        source.acknowledge.assert_called_once()

    def test_unexpected_handler_error_continues(self):
        """Test an unexpected exception in handling is acknowledged and skipped."""
        consumer, source, store, _ = make_consumer([msg("CITI"), msg("BARX")])

        with patch.object(consumer.store, "apply", side_effect=[RuntimeError("boom"), True]):
            consumer.run()

        assert source.acknowledged_count == 2

    def test_stop_event_ends_loop(self):
        """Test a set stop event prevents further consumption."""
        consumer, source, store, _ = make_consumer([msg()])
        stop = threading.Event()
        stop.set()

        consumer.run(stop)

        assert len(store) == 0
        assert source.acknowledged_count == 0

    def test_start_runs_on_daemon_thread(self):
        """Test start() consumes the source on a background thread."""
        consumer, _, store, _ = make_consumer([msg(), msg("BARX")])

        thread = consumer.start()
        thread.join(timeout=5)

        assert not thread.is_alive()
        assert thread.daemon
        assert store.provider_names() == ["CITI", "BARX"]

    def test_start_twice_rejected(self):
        """Test a running consumer cannot be started again."""
        release = threading.Event()

        class BlockingSource(MessageSource):
            def receive(self):
                release.wait(5)
                return None

        consumer = MarketDataConsumer(BlockingSource("blocking"), SeriesStore())
        thread = consumer.start()
        try:
            with pytest.raises(RuntimeError):
                consumer.start()
        finally:
            release.set()
            thread.join(timeout=5)
