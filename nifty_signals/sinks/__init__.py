"""External sinks that receive strong-signal summaries."""

from .base import LoggingSinkError, build_signal_log_record
from .webhook import WebhookSignalLogger, dispatch_signal_log

__all__ = [
    "LoggingSinkError",
    "WebhookSignalLogger",
    "build_signal_log_record",
    "dispatch_signal_log",
]
