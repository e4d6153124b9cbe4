from __future__ import annotations

from typing import Any, Dict, List

import pytest

from nifty_signals.models import OptionRow, Snapshot


def _leg(oi: int, previous_oi: int, volume: int, iv: float, ltp: float, **extra: Any) -> Dict[str, Any]:
    leg = {
        "oi": oi,
        "previous_oi": previous_oi,
        "volume": volume,
        "implied_volatility": iv,
        "last_price": ltp,
    }
    leg.update(extra)
    return leg


@pytest.fixture()
def strong_call_rows() -> List[OptionRow]:
    """Three strikes around 20000 with heavy put writing and a 1.2 PCR."""

    return [
        OptionRow(
            strike_price=19900,
            ce_open_interest=2000,
            ce_change=200,
            ce_volume=100,
            ce_implied_vol=10.0,
            ce_last_price=150.0,
            pe_open_interest=6000,
            pe_change=1500,
            pe_volume=300,
            pe_implied_vol=14.0,
            pe_last_price=40.0,
        ),
        OptionRow(
            strike_price=20000,
            ce_open_interest=4000,
            ce_change=300,
            ce_volume=200,
            ce_implied_vol=11.0,
            ce_last_price=80.0,
            pe_open_interest=4000,
            pe_change=1000,
            pe_volume=200,
            pe_implied_vol=13.0,
            pe_last_price=90.0,
        ),
        OptionRow(
            strike_price=20100,
            ce_open_interest=4000,
            ce_change=500,
            ce_volume=300,
            ce_implied_vol=12.0,
            ce_last_price=40.0,
            pe_open_interest=2000,
            pe_change=500,
            pe_volume=100,
            pe_implied_vol=15.0,
            pe_last_price=150.0,
        ),
    ]


@pytest.fixture()
def strong_call_snapshot(strong_call_rows: List[OptionRow]) -> Snapshot:
    return Snapshot(
        spot_price=20000.0,
        previous_close_price=19950.0,
        rows=strong_call_rows,
        expiry="2024-07-25",
    )


@pytest.fixture()
def dhan_chain_payload() -> Dict[str, Any]:
    """Dhan ``/optionchain`` response equivalent to ``strong_call_snapshot``."""

    return {
        "status": "success",
        "data": {
            "last_price": 20000.0,
            "oc": {
                "19900.000000": {
                    "ce": _leg(2000, 1800, 100, 10.0, 150.0, previous_close_price=19950.0),
                    "pe": _leg(6000, 4500, 300, 14.0, 40.0),
                },
                "20000.000000": {
                    "ce": _leg(4000, 3700, 200, 11.0, 80.0),
                    "pe": _leg(4000, 3000, 200, 13.0, 90.0),
                },
                "20100.000000": {
                    "ce": _leg(4000, 3500, 300, 12.0, 40.0),
                    "pe": _leg(2000, 1500, 100, 15.0, 150.0),
                },
            },
        },
    }
