"""Strategies, diagnostic sinks and the interfaces they implement."""

from pollwatch.core.diagnostics import BufferedDiagnosticSink, LoggingDiagnosticSink, NullDiagnosticSink
from pollwatch.core.interfaces import IChangeDetectionStrategy, IDiagnosticSink, IWatcher
from pollwatch.core.strategies import DetectionStrategy, DigestStrategy, TimestampStrategy, get_strategy

__all__ = [
    "IChangeDetectionStrategy",
    "IDiagnosticSink",
    "IWatcher",
    "DetectionStrategy",
    "DigestStrategy",
    "TimestampStrategy",
    "get_strategy",
    "NullDiagnosticSink",
    "LoggingDiagnosticSink",
    "BufferedDiagnosticSink",
]
