"""Unit tests for diagnostic sinks."""

import logging
from unittest.mock import Mock

import pytest
from pollwatch.core import BufferedDiagnosticSink, LoggingDiagnosticSink, NullDiagnosticSink


class TestNullDiagnosticSink:
    """Test cases for NullDiagnosticSink."""

    def test_disabled_and_silent(self):
        """Test that the null sink never formats or emits."""
        sink = NullDiagnosticSink()
        sink.emit = Mock()

        sink.log("File %r has not changed.", "/tmp/a")

        assert not sink.enabled
        sink.emit.assert_not_called()


class TestBufferedDiagnosticSink:
    """Test cases for BufferedDiagnosticSink."""

    def test_formats_messages(self):
        sink = BufferedDiagnosticSink()
        sink.log("File %r has been modified.", "/tmp/a")

        assert sink.messages == ["File '/tmp/a' has been modified."]

    def test_message_without_args_is_not_formatted(self):
        """Test that a lone message containing % is passed through."""
        sink = BufferedDiagnosticSink()
        sink.log("100% done")

        assert sink.messages == ["100% done"]

    def test_capacity_evicts_oldest(self):
        """Test that the buffer keeps only the most recent messages."""
        sink = BufferedDiagnosticSink(capacity=2)
        for i in range(3):
            sink.log("message %d", i)

        assert sink.messages == ["message 1", "message 2"]

    def test_disable_and_enable(self):
        """Test runtime toggling."""
        sink = BufferedDiagnosticSink()
        sink.log("first")
        sink.disable()
        sink.log("ignored")

        assert sink.messages == []

        sink.enable()
        sink.log("second")
        assert sink.drain() == ["second"]
        assert sink.messages == []

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            BufferedDiagnosticSink(capacity=0)


class TestLoggingDiagnosticSink:
    """Test cases for LoggingDiagnosticSink."""

    def test_forwards_to_logger(self, caplog):
        """Test that messages end up in the log at the configured level."""
        sink = LoggingDiagnosticSink(logging.getLogger("pollwatch.test"), level=logging.INFO)

        with caplog.at_level(logging.INFO, logger="pollwatch.test"):
            sink.log("Stopping %s", "watcher")

        assert "Stopping watcher" in caplog.text

    def test_disabled_when_level_filtered(self):
        """Test that the sink reports disabled when the logger drops its level."""
        logger = logging.getLogger("pollwatch.test.quiet")
        logger.setLevel(logging.WARNING)
        sink = LoggingDiagnosticSink(logger, level=logging.DEBUG)

        assert not sink.enabled
