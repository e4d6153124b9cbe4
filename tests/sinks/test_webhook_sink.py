from __future__ import annotations

import logging
from typing import Any, Dict, List

import pytest
import requests

from nifty_signals.analytics import compute_analytics
from nifty_signals.config import SignalLogSettings
from nifty_signals.models import Snapshot
from nifty_signals.sinks import LoggingSinkError, WebhookSignalLogger, build_signal_log_record, dispatch_signal_log


class RecordingSession:
    def __init__(self, error: Exception | None = None, status_code: int = 200):
        self.error = error
        self.status_code = status_code
        self.posts: List[Dict[str, Any]] = []

    def post(self, url: str, json: Dict[str, Any], timeout: float):
        self.posts.append({"url": url, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        response = requests.Response()
        response.status_code = self.status_code
        response.url = url
        return response


@pytest.fixture()
def sink_settings() -> SignalLogSettings:
    return SignalLogSettings(url="https://hooks.example.com/signals", timeout_seconds=2)


def test_strong_call_record_is_flattened(strong_call_snapshot):
    record = build_signal_log_record(compute_analytics(strong_call_snapshot))

    assert record == {
        "spot": 20000.0,
        "signal_type": "Strong Call",
        "signal_level": 19900.0,
        "strength": "Strong",
        "score": 3,
        "supporting": "PCR > 1.1 (1.20), Strong Put Writing (Ratio: 3)",
        "contradicting": "",
    }


def test_no_record_without_a_strong_signal(strong_call_rows):
    # Halving put OI drops the PCR to 0.6, which contradicts the call.
    rows = [row.model_copy(update={"pe_open_interest": row.pe_open_interest // 2}) for row in strong_call_rows]
    result = compute_analytics(Snapshot(spot_price=20000.0, previous_close_price=20000.0, rows=rows))

    assert result.call_conviction.score == 1
    assert result.put_conviction.score == 0
    assert build_signal_log_record(result) is None


def test_logger_posts_record(sink_settings):
    session = RecordingSession()
    sink = WebhookSignalLogger(sink_settings, session=session)

    sink.log({"signal_type": "Strong Put", "signal_level": 20100.0})

    assert session.posts == [
        {
            "url": "https://hooks.example.com/signals",
            "json": {"signal_type": "Strong Put", "signal_level": 20100.0},
            "timeout": 2.0,
        }
    ]


def test_unconfigured_logger_skips_post():
    session = RecordingSession()
    sink = WebhookSignalLogger(SignalLogSettings(url=None), session=session)

    sink.log({"signal_type": "Strong Call"})

    assert session.posts == []


def test_delivery_failures_raise_sink_error(sink_settings):
    sink = WebhookSignalLogger(sink_settings, session=RecordingSession(error=requests.Timeout("timed out")))

    with pytest.raises(LoggingSinkError, match="timed out"):
        sink.log({"signal_type": "Strong Call"})


def test_rejected_post_raises_sink_error(sink_settings):
    sink = WebhookSignalLogger(sink_settings, session=RecordingSession(status_code=500))

    with pytest.raises(LoggingSinkError):
        sink.log({"signal_type": "Strong Call"})


def test_log_safely_swallows_failures(sink_settings, caplog):
    sink = WebhookSignalLogger(sink_settings, session=RecordingSession(error=requests.ConnectionError("refused")))

    with caplog.at_level(logging.ERROR, logger="nifty_signals.sinks.webhook"):
        sink.log_safely({"signal_type": "Strong Call"})

    assert "Error logging signal" in caplog.text


def test_dispatch_runs_in_background(strong_call_snapshot, sink_settings):
    session = RecordingSession()
    result = compute_analytics(strong_call_snapshot)

    thread = dispatch_signal_log(result, WebhookSignalLogger(sink_settings, session=session))

    assert thread is not None
    assert thread.daemon
    thread.join(timeout=5)
    assert [post["json"]["signal_type"] for post in session.posts] == ["Strong Call"]


def test_dispatch_skips_weak_results(strong_call_rows, sink_settings):
    rows = [row.model_copy(update={"pe_open_interest": row.pe_open_interest // 2}) for row in strong_call_rows]
    result = compute_analytics(Snapshot(spot_price=20000.0, previous_close_price=20000.0, rows=rows))

    assert dispatch_signal_log(result, WebhookSignalLogger(sink_settings, session=RecordingSession())) is None
