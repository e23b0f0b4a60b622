"""
Configuration management for pollwatch.

Handles environment variables and .env loading, and provides validated
defaults for watchers created through the WatchCoordinator.
"""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from watchdog.utils.patterns import match_any_paths

from pollwatch.core.strategies import DetectionStrategy
from pollwatch.models.exceptions import ConfigurationError


class LogLevel(str, Enum):
    """Logging level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class OverflowPolicy(str, Enum):
    """What a producer does when a notification channel is full."""

    BLOCK = "block"
    DROP_NEWEST = "drop_newest"
    DROP_OLDEST = "drop_oldest"


class WatcherConfig(BaseSettings):
    """
    Central configuration class for pollwatch.

    Every option can be set through a POLLWATCH_-prefixed environment variable
    or a .env file. Explicit constructor arguments on a watcher always win over
    these defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="POLLWATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        use_enum_values=True,
    )

    # === Polling Configuration ===
    default_interval: int = Field(default=1, ge=1, description="Ticks between polls, in tick units")
    tick_unit_seconds: float = Field(default=1.0, gt=0.0, le=3600.0, description="Length of one tick unit (s)")

    # === Snapshot Configuration ===
    recursive: bool = Field(default=True, description="Descend into subdirectories of watched folders")
    include_directories: bool = Field(
        default=True, description="Report direct subdirectories as entries when not recursing"
    )
    detection_strategy: DetectionStrategy = Field(
        default=DetectionStrategy.TIMESTAMP, description="Change detection strategy"
    )
    digest_length: int = Field(default=16, ge=4, le=64, description="Hex characters kept from content digests")
    ignored_patterns: list[str] = Field(
        default=["*.tmp", "*.swp", ".git/*", ".DS_Store"], description="Glob patterns excluded from snapshots"
    )
    stop_on_root_loss: bool = Field(
        default=False, description="Stop a folder watcher when its root becomes inaccessible"
    )

    # === Notification Configuration ===
    channel_buffer_size: int = Field(default=64, ge=1, le=65536, description="Capacity of each notification channel")
    overflow_policy: OverflowPolicy = Field(
        default=OverflowPolicy.BLOCK, description="Producer behaviour when a channel is full"
    )

    # === Logging Configuration ===
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    log_file: Path | None = Field(default=None, description="Log file path (stderr if None)")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s", description="Log message format"
    )
    debug_mode: bool = Field(default=False, description="Route watcher diagnostics to the log at DEBUG level")

    @field_validator('ignored_patterns')
    @classmethod
    def validate_ignored_patterns(cls, v):
        """Drop blank patterns."""
        return [pattern.strip() for pattern in v if pattern and pattern.strip()]

    @model_validator(mode='after')
    def validate_debug_level(self):
        """Debug mode only makes sense if the configured level lets DEBUG records through."""
        if self.debug_mode and self.log_level != LogLevel.DEBUG.value:
            raise ConfigurationError(
                "debug_mode requires log_level DEBUG",
                config_key="debug_mode",
                expected_type="log_level == DEBUG",
                actual_value=self.log_level,
            )
        return self

    def should_ignore_file(self, file_path: str | Path) -> bool:
        """Check if a path should be excluded based on the ignored patterns."""
        if not self.ignored_patterns:
            return False
        return match_any_paths([str(file_path)], included_patterns=self.ignored_patterns, case_sensitive=True)

    def get_log_config(self) -> dict[str, Any]:
        """Get logging configuration dictionary for logging.config.dictConfig."""
        level = LogLevel(self.log_level).value
        config = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"standard": {"format": self.log_format}},
            "handlers": {
                "default": {
                    "level": level,
                    "formatter": "standard",
                    "class": "logging.StreamHandler" if not self.log_file else "logging.FileHandler",
                }
            },
            "loggers": {"pollwatch": {"handlers": ["default"], "level": level, "propagate": False}},
        }

        if self.log_file:
            config["handlers"]["default"]["filename"] = str(self.log_file)

        return config


# Global configuration instance
_config: WatcherConfig | None = None


def get_config() -> WatcherConfig:
    """
    Get the global configuration instance.

    Creates a new instance on first call and reuses it for subsequent calls.
    """
    global _config
    if _config is None:
        _config = WatcherConfig()
    return _config


def reload_config() -> WatcherConfig:
    """
    Force reload the configuration from environment/files.

    Useful for testing or when configuration needs to be updated at runtime.
    """
    global _config
    _config = WatcherConfig()
    return _config


def set_config(config: WatcherConfig) -> None:
    """
    Set a custom configuration instance.

    Primarily used for testing or advanced configuration scenarios.
    """
    global _config
    _config = config
