"""FastAPI application exposing option-chain analytics."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict

from fastapi import BackgroundTasks, Depends, FastAPI
from fastapi.responses import JSONResponse

from nifty_signals.adapters import AdapterError, OptionsDataAdapter, UpstreamFetchError
from nifty_signals.analytics.engine import compute_analytics
from nifty_signals.config import get_options_data_adapter, get_settings
from nifty_signals.models import AnalyticsResult, MalformedSnapshotError, Snapshot, serialize_analytics_response
from nifty_signals.sinks import WebhookSignalLogger, build_signal_log_record

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Nifty Option Chain Signals API", version="1.0.0")


def get_adapter() -> OptionsDataAdapter:
    return get_options_data_adapter()


@lru_cache(maxsize=1)
def get_signal_logger() -> WebhookSignalLogger:
    return WebhookSignalLogger(get_settings().signal_log)


def _error_response(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc)})


def _respond(
    result: AnalyticsResult,
    background_tasks: BackgroundTasks,
    signal_logger: WebhookSignalLogger,
) -> Dict[str, Any]:
    record = build_signal_log_record(result)
    if record is not None:
        logger.info("%s signal at %s (score %s)", record["signal_type"], record["signal_level"], record["score"])
        background_tasks.add_task(signal_logger.log_safely, record)
    return serialize_analytics_response(result)


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/analytics")
def live_analytics(
    background_tasks: BackgroundTasks,
    adapter: OptionsDataAdapter = Depends(get_adapter),
    signal_logger: WebhookSignalLogger = Depends(get_signal_logger),
) -> Any:
    """Fetch the nearest-expiry chain and return its analytics."""

    try:
        snapshot = adapter.get_nearest_snapshot()
        result = compute_analytics(snapshot)
    except UpstreamFetchError as exc:
        logger.error("Upstream fetch failed: %s", exc, extra={"payload": exc.payload})
        return _error_response(exc)
    except (AdapterError, MalformedSnapshotError) as exc:
        logger.error("Analytics request failed: %s", exc)
        return _error_response(exc)
    return _respond(result, background_tasks, signal_logger)


@app.post("/analytics")
def snapshot_analytics(
    snapshot: Snapshot,
    background_tasks: BackgroundTasks,
    signal_logger: WebhookSignalLogger = Depends(get_signal_logger),
) -> Any:
    """Return analytics for a snapshot supplied in the request body."""

    try:
        result = compute_analytics(snapshot)
    except MalformedSnapshotError as exc:
        logger.error("Rejected snapshot: %s", exc)
        return _error_response(exc)
    return _respond(result, background_tasks, signal_logger)


__all__ = ["app", "get_adapter", "get_signal_logger"]
