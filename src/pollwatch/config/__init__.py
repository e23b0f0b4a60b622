"""Configuration management and settings."""

from pollwatch.config.settings import LogLevel, OverflowPolicy, WatcherConfig, get_config, reload_config, set_config

__all__ = ["WatcherConfig", "LogLevel", "OverflowPolicy", "get_config", "reload_config", "set_config"]
