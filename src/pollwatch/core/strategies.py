"""
Change detection strategies.

A watcher compares the metadata captured by its strategy between two ticks.
The timestamp strategy is cheap (one stat call per entry); the digest strategy
reads every byte of every tracked file on every tick and is only suitable for
small trees or files whose modification time cannot be trusted.
"""

import hashlib
import logging
import os
import stat
from enum import Enum
from typing import Any

from pollwatch.core.interfaces import IChangeDetectionStrategy
from pollwatch.models import ConfigurationError

logger = logging.getLogger(__name__)


class DetectionStrategy(str, Enum):
    """Change detection strategy enumeration."""

    TIMESTAMP = "timestamp"
    DIGEST = "digest"


class TimestampStrategy(IChangeDetectionStrategy):
    """Uses the entry's last-modified time in nanoseconds as metadata."""

    @property
    def name(self) -> str:
        return DetectionStrategy.TIMESTAMP.value

    def capture(self, path: str) -> int | None:
        try:
            return os.stat(path).st_mtime_ns
        except OSError as e:
            logger.debug("Cannot stat %s: %s", path, e)
            return None


class DigestStrategy(IChangeDetectionStrategy):
    """
    Uses a truncated content hash as metadata.

    Regular files are hashed in chunks so memory stays bounded; a directory is
    represented by a hash of its sorted child names. Other entries (FIFOs,
    sockets, device nodes) are never opened, since reading them can block
    indefinitely; their type and device number are hashed instead.
    """

    def __init__(self, length: int = 16, chunk_size: int = 65536, algorithm: str = "sha256"):
        """
        Initialize the digest strategy.

        Args:
            length: Number of hex characters kept from the digest
            chunk_size: Bytes read per chunk while hashing
            algorithm: Any algorithm name accepted by hashlib.new

        Raises:
            ConfigurationError: If a parameter is out of range or the algorithm is unknown
        """
        if length < 1:
            raise ConfigurationError(
                "digest length must be positive", config_key="length", expected_type="int >= 1", actual_value=length
            )
        if chunk_size < 1:
            raise ConfigurationError(
                "chunk size must be positive",
                config_key="chunk_size",
                expected_type="int >= 1",
                actual_value=chunk_size,
            )
        try:
            hashlib.new(algorithm)
        except ValueError as e:
            raise ConfigurationError(
                f"Unsupported digest algorithm: {algorithm}", config_key="algorithm", actual_value=algorithm
            ) from e

        self.length = length
        self.chunk_size = chunk_size
        self.algorithm = algorithm

    @property
    def name(self) -> str:
        return DetectionStrategy.DIGEST.value

    def capture(self, path: str) -> str | None:
        hasher = hashlib.new(self.algorithm)
        try:
            st = os.stat(path)
            if stat.S_ISDIR(st.st_mode):
                for name in sorted(os.listdir(path)):
                    hasher.update(os.fsencode(name))
                    hasher.update(b"\0")
            elif not stat.S_ISREG(st.st_mode):
                hasher.update(f"{stat.S_IFMT(st.st_mode)}:{st.st_rdev}".encode())
            else:
                with open(path, "rb") as f:
                    while chunk := f.read(self.chunk_size):
                        hasher.update(chunk)
        except OSError as e:
            logger.debug("Cannot hash %s: %s", path, e)
            return None

        return hasher.hexdigest()[: self.length]


def get_strategy(strategy: DetectionStrategy | str | IChangeDetectionStrategy | None = None, **kwargs: Any):
    """
    Resolve a strategy instance from a name, enum member or existing instance.

    Args:
        strategy: Strategy selector; None selects the timestamp strategy
        **kwargs: Extra arguments for the DigestStrategy constructor

    Returns:
        An IChangeDetectionStrategy instance

    Raises:
        ConfigurationError: If the name does not match a known strategy
    """
    if isinstance(strategy, IChangeDetectionStrategy):
        return strategy
    if strategy is None:
        return TimestampStrategy()

    try:
        selected = DetectionStrategy(strategy)
    except ValueError as e:
        raise ConfigurationError(
            f"Unknown change detection strategy: {strategy}",
            config_key="detection_strategy",
            expected_type="timestamp | digest",
            actual_value=strategy,
        ) from e

    if selected is DetectionStrategy.DIGEST:
        return DigestStrategy(**kwargs)
    return TimestampStrategy()
