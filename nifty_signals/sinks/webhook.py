"""Webhook sink that records strong signals (e.g. a spreadsheet web app)."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

import requests

from nifty_signals.config.loader import SignalLogSettings
from nifty_signals.models.analytics import AnalyticsResult

from .base import LoggingSinkError, build_signal_log_record

logger = logging.getLogger(__name__)


class WebhookSignalLogger:
    """Posts flattened signal records as JSON to a configured URL."""

    def __init__(self, settings: SignalLogSettings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()

    def log(self, record: Dict[str, Any]) -> None:
        """Deliver ``record``.

        Raises:
            LoggingSinkError: If the request fails or is rejected.
        """

        if not self.settings.is_configured:
            logger.info("Signal log URL not configured. Skipping log.")
            return
        try:
            response = self.session.post(
                self.settings.url,
                json=record,
                timeout=self.settings.timeout_seconds,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise LoggingSinkError(f"Failed to log signal to {self.settings.url}: {exc}") from exc
        logger.info("Logged %s signal at %s", record.get("signal_type"), record.get("signal_level"))

    def log_safely(self, record: Dict[str, Any]) -> None:
        """Deliver ``record``, logging instead of raising on failure."""

        try:
            self.log(record)
        except LoggingSinkError:
            logger.exception("Error logging signal")


def dispatch_signal_log(result: AnalyticsResult, sink: WebhookSignalLogger) -> Optional[threading.Thread]:
    """Log the strong signal in ``result`` on a daemon thread, if there is one.

    The caller never waits on the thread; delivery errors are logged only.
    """

    record = build_signal_log_record(result)
    if record is None:
        return None
    thread = threading.Thread(target=sink.log_safely, args=(record,), name="signal-log", daemon=True)
    thread.start()
    return thread


__all__ = ["WebhookSignalLogger", "dispatch_signal_log"]
