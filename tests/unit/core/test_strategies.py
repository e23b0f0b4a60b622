"""Unit tests for change detection strategies."""

import hashlib
import os

import pytest
from pollwatch.core import DetectionStrategy, DigestStrategy, TimestampStrategy, get_strategy
from pollwatch.models import ConfigurationError


class TestTimestampStrategy:
    """Test cases for TimestampStrategy."""

    def test_capture_returns_mtime_ns(self, tmp_path):
        """Test that the captured value is the nanosecond modification time."""
        test_file = tmp_path / "a.txt"
        test_file.write_text("hello")
        os.utime(test_file, ns=(1_000_000_000, 2_000_000_000))

        assert TimestampStrategy().capture(str(test_file)) == 2_000_000_000

    def test_capture_missing_file(self, tmp_path):
        """Test that a missing file yields None."""
        assert TimestampStrategy().capture(str(tmp_path / "missing.txt")) is None

    def test_name(self):
        assert TimestampStrategy().name == "timestamp"


class TestDigestStrategy:
    """Test cases for DigestStrategy."""

    def test_capture_truncated_sha256(self, tmp_path):
        """Test that the digest is the truncated hex SHA-256 of the content."""
        test_file = tmp_path / "a.txt"
        test_file.write_bytes(b"hello world")

        digest = DigestStrategy(length=12).capture(str(test_file))

        assert digest == hashlib.sha256(b"hello world").hexdigest()[:12]

    def test_chunked_read_matches_whole_file(self, tmp_path):
        """Test that small chunks produce the same digest."""
        test_file = tmp_path / "big.bin"
        test_file.write_bytes(os.urandom(10_000))

        assert DigestStrategy(chunk_size=7).capture(str(test_file)) == DigestStrategy().capture(str(test_file))

    def test_content_change_detected_with_same_mtime(self, tmp_path):
        """Test that a rewrite with restored mtime still changes the digest."""
        test_file = tmp_path / "a.txt"
        test_file.write_text("one")
        stat = test_file.stat()
        strategy = DigestStrategy()
        before = strategy.capture(str(test_file))

        test_file.write_text("two")
        os.utime(test_file, ns=(stat.st_atime_ns, stat.st_mtime_ns))

        assert strategy.capture(str(test_file)) != before
        assert TimestampStrategy().capture(str(test_file)) == stat.st_mtime_ns

    def test_directory_digest_tracks_children(self, tmp_path):
        """Test that a directory digest changes when its listing changes."""
        strategy = DigestStrategy()
        before = strategy.capture(str(tmp_path))

        (tmp_path / "new.txt").write_text("x")

        assert strategy.capture(str(tmp_path)) != before

    def test_capture_missing_file(self, tmp_path):
        """Test that a vanished file yields None."""
        assert DigestStrategy().capture(str(tmp_path / "missing.txt")) is None

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="named pipes not supported")
    def test_named_pipe_is_not_opened(self, tmp_path):
        """Test that a FIFO is fingerprinted by type without blocking on a read."""
        pipe = tmp_path / "pipe"
        os.mkfifo(pipe)

        first = DigestStrategy().capture(str(pipe))

        assert first is not None
        assert first == DigestStrategy().capture(str(pipe))
        assert first != DigestStrategy().capture(str(tmp_path))

    def test_invalid_parameters(self):
        """Test parameter validation."""
        with pytest.raises(ConfigurationError):
            DigestStrategy(length=0)
        with pytest.raises(ConfigurationError):
            DigestStrategy(chunk_size=0)
        with pytest.raises(ConfigurationError) as exc_info:
            DigestStrategy(algorithm="not-a-hash")

        assert "Unsupported digest algorithm" in str(exc_info.value)


class TestGetStrategy:
    """Test cases for the strategy factory."""

    def test_default_is_timestamp(self):
        assert isinstance(get_strategy(), TimestampStrategy)

    def test_by_name_and_enum(self):
        """Test resolution from names and enum members."""
        assert isinstance(get_strategy("digest"), DigestStrategy)
        assert isinstance(get_strategy(DetectionStrategy.TIMESTAMP), TimestampStrategy)

    def test_kwargs_forwarded_to_digest(self):
        assert get_strategy("digest", length=8).length == 8

    def test_instance_passthrough(self):
        strategy = DigestStrategy()
        assert get_strategy(strategy) is strategy

    def test_unknown_name(self):
        """Test that unknown strategy names are rejected."""
        with pytest.raises(ConfigurationError) as exc_info:
            get_strategy("inotify")

        assert exc_info.value.context["config_key"] == "detection_strategy"
