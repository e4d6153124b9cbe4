"""Command line interface for option-chain analysis and the API server."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Sequence

import pandas as pd
import uvicorn

from .adapters import AdapterError
from .adapters.dhan import parse_option_chain
from .analytics.engine import compute_analytics
from .config import get_options_data_adapter, get_settings
from .models import AnalyticsResult, MalformedSnapshotError, Snapshot, serialize_analytics_response
from .models.analytics import ConvictionResult
from .sinks import WebhookSignalLogger, dispatch_signal_log

LOG_DIR = Path("logs/nifty_signals")
APP_PATH = "nifty_signals.api.main:app"

LOGGER = logging.getLogger("nifty_signals.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Analyse an index option chain for directional signals")
    parser.add_argument("command", choices=["analyze", "serve"], help="Command to execute")
    parser.add_argument("--env", type=str, default=None, help="Configuration environment (defaults to APP_ENV or dev)")
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="Analyse a saved option-chain JSON response instead of fetching one",
    )
    parser.add_argument("--json", action="store_true", help="Print the full analytics payload as JSON")
    parser.add_argument("--no-log", action="store_true", help="Do not send strong signals to the signal log")
    parser.add_argument("--top", type=int, default=5, help="Number of top-scored strikes to display")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Interface the API server binds to")
    parser.add_argument("--port", type=int, default=8000, help="Port the API server listens on")
    return parser


def _configure_logging() -> None:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(LOG_DIR / "analyze.log", encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger("nifty_signals")
    if not any(isinstance(existing, logging.FileHandler) for existing in root.handlers):
        root.setLevel(logging.INFO)
        root.addHandler(handler)
    logging.basicConfig(level=logging.WARNING)


def load_snapshot_file(path: Path) -> Snapshot:
    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, dict):
        raise MalformedSnapshotError(f"{path} does not contain a JSON object")
    return parse_option_chain(payload)


def _format_conviction(label: str, conviction: ConvictionResult) -> str:
    lines = [f"{label}: {conviction.strength.value} (score {conviction.score})"]
    lines.extend(f"  + {reason}" for reason in conviction.supporting_reasons)
    lines.extend(f"  - {reason}" for reason in conviction.contradicting_reasons)
    return "\n".join(lines)


def _display(result: AnalyticsResult, top: int) -> None:
    print(f"Spot {result.spot:.2f} (prev close {result.previous_close:.2f})")
    print(f"PCR {result.pcr_oi:.2f}  Max pain {result.max_pain_strike:g}")
    print(f"OI change  PE {result.total_pe_change:+,}  CE {result.total_ce_change:+,}")
    print(f"ATM IV {result.atm_implied_vol:.2f}  Straddle {result.atm_straddle_price:.2f}")
    print(
        f"Buy call near {result.buy_call_level_scored:g} (simple {result.buy_call_level_simple:g}), "
        f"buy put near {result.buy_put_level_scored:g} (simple {result.buy_put_level_simple:g})"
    )
    print(_format_conviction("Call", result.call_conviction))
    print(_format_conviction("Put", result.put_conviction))

    if top <= 0 or not result.chain:
        return
    frame = pd.DataFrame([row.model_dump() for row in result.chain])
    columns = [
        "strike_price",
        "pe_open_interest",
        "pe_change",
        "support_score",
        "ce_open_interest",
        "ce_change",
        "resistance_score",
    ]
    with pd.option_context("display.max_columns", None, "display.width", 160):
        print("\nTop support strikes:")
        print(frame.nlargest(top, "support_score")[columns].to_string(index=False))
        print("\nTop resistance strikes:")
        print(frame.nlargest(top, "resistance_score")[columns].to_string(index=False))


def serve(host: str, port: int, env: str | None = None) -> int:
    """Run the HTTP API under uvicorn until interrupted."""

    if env:
        os.environ["APP_ENV"] = env
    LOGGER.info("Serving %s on %s:%d", APP_PATH, host, port)
    uvicorn.run(APP_PATH, host=host, port=port, log_level="info")
    return 0


def run_from_args(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        return serve(args.host, args.port, args.env)

    try:
        settings = get_settings(args.env)
        if args.input is not None:
            LOGGER.info("Analysing saved chain %s", args.input)
            snapshot = load_snapshot_file(args.input)
        else:
            snapshot = get_options_data_adapter(args.env).get_nearest_snapshot()
        result = compute_analytics(snapshot)
    except (AdapterError, MalformedSnapshotError, OSError, ValueError) as exc:
        LOGGER.error("Analysis failed: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(serialize_analytics_response(result), indent=2))
    else:
        _display(result, args.top)

    if not args.no_log:
        thread = dispatch_signal_log(result, WebhookSignalLogger(settings.signal_log))
        if thread is not None:
            # Let the short-lived CLI process finish the post before exiting.
            thread.join(timeout=settings.signal_log.timeout_seconds)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    _configure_logging()
    return run_from_args(argv)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
