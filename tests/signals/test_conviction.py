from __future__ import annotations

import pandas as pd
import pytest

from nifty_signals.models import SignalType, Strength
from nifty_signals.signals import (
    ConvictionEvaluator,
    ConvictionInputs,
    format_indian,
    format_ratio,
    measure_writing_flow,
    round_half_up,
)


def build_frame(strikes, ce_change=None, pe_change=None) -> pd.DataFrame:
    count = len(strikes)
    return pd.DataFrame(
        {
            "strike_price": [float(strike) for strike in strikes],
            "ce_change": ce_change or [0] * count,
            "pe_change": pe_change or [0] * count,
        }
    )


@pytest.fixture()
def quiet_frame() -> pd.DataFrame:
    return build_frame([19900, 20000, 20100], ce_change=[100, 200, 300], pe_change=[50, 60, 70])


def test_strong_put_writing_makes_a_strong_call(quiet_frame):
    inputs = ConvictionInputs(pcr_oi=1.2, total_pe_change=3000, total_ce_change=1000, spot=20000)

    result = ConvictionEvaluator().evaluate(SignalType.CALL, inputs, quiet_frame)

    assert result.score == 3
    assert result.strength is Strength.STRONG
    assert result.supporting_reasons == ["PCR > 1.1 (1.20)", "Strong Put Writing (Ratio: 3)"]
    assert result.contradicting_reasons == []


def test_call_writing_contradicts_a_call(quiet_frame):
    inputs = ConvictionInputs(pcr_oi=0.7, total_pe_change=500, total_ce_change=1000, spot=20000)

    result = ConvictionEvaluator().evaluate("call", inputs, quiet_frame)

    assert result.score == -2
    assert result.strength is Strength.WEAK
    assert result.strength.value == "Weak/Risky"
    assert result.supporting_reasons == []
    assert result.contradicting_reasons == ["PCR < 0.8 (0.70)", "Call Writing > Put Writing"]


def test_call_writing_supports_a_put(quiet_frame):
    inputs = ConvictionInputs(pcr_oi=0.7, total_pe_change=500, total_ce_change=1000, spot=20000)

    result = ConvictionEvaluator().evaluate(SignalType.PUT, inputs, quiet_frame)

    assert result.score == 3
    assert result.strength is Strength.STRONG
    assert result.supporting_reasons == ["PCR < 0.8 (0.70)", "Strong Call Writing (Ratio: 0.5)"]


def test_ratio_boundaries_fall_to_the_weaker_rule(quiet_frame):
    evaluator = ConvictionEvaluator()

    # 1499 / 1000 rounds to 1.50, which is not above 1.5
    call_inputs = ConvictionInputs(pcr_oi=1.0, total_pe_change=1499, total_ce_change=1000, spot=20000)
    call = evaluator.evaluate(SignalType.CALL, call_inputs, quiet_frame)
    assert call.supporting_reasons == ["Put Writing > Call Writing"]
    assert call.score == 1
    assert call.strength is Strength.MEDIUM

    put_inputs = ConvictionInputs(pcr_oi=1.0, total_pe_change=700, total_ce_change=1000, spot=20000)
    put = evaluator.evaluate(SignalType.PUT, put_inputs, quiet_frame)
    assert put.supporting_reasons == ["Call Writing > Put Writing"]
    assert put.score == 1


def test_put_path_thresholds_are_not_mirrored(quiet_frame):
    # A 1.15 ratio supports a call but is not enough to contradict a put.
    inputs = ConvictionInputs(pcr_oi=1.0, total_pe_change=1150, total_ce_change=1000, spot=20000)
    evaluator = ConvictionEvaluator()

    assert evaluator.evaluate(SignalType.CALL, inputs, quiet_frame).score == 1
    put = evaluator.evaluate(SignalType.PUT, inputs, quiet_frame)
    assert put.score == 0
    assert put.contradicting_reasons == []


def test_non_positive_call_change_disables_ratio_rules(quiet_frame):
    inputs = ConvictionInputs(pcr_oi=1.0, total_pe_change=5000, total_ce_change=-200, spot=20000)
    evaluator = ConvictionEvaluator()

    for signal_type in SignalType:
        result = evaluator.evaluate(signal_type, inputs, quiet_frame)
        assert result.score == 0
        assert result.supporting_reasons == []
        assert result.contradicting_reasons == []


def test_unwinding_near_spot_counts_as_covering():
    frame = build_frame(
        [19900, 20000, 20100],
        ce_change=[-8000, -4000, -50000],
        pe_change=[-30000, -6000, -6000],
    )
    inputs = ConvictionInputs(pcr_oi=1.0, total_pe_change=0, total_ce_change=0, spot=20000)

    flow = measure_writing_flow(inputs, frame)
    assert flow.ce_unwind == -12000
    assert flow.pe_unwind == -12000
    assert flow.oi_ratio == 0.0

    evaluator = ConvictionEvaluator()
    call = evaluator.evaluate(SignalType.CALL, inputs, frame)
    assert call.supporting_reasons == ["Call Writers Covering (12,000)"]
    assert call.contradicting_reasons == ["Put Writers Covering (12,000)"]
    assert call.score == 0

    put = evaluator.evaluate(SignalType.PUT, inputs, frame)
    assert put.supporting_reasons == ["Put Writers Covering (12,000)"]
    assert put.contradicting_reasons == ["Call Writers Covering (12,000)"]


def test_unwind_at_threshold_does_not_fire():
    frame = build_frame([20000], ce_change=[-10000], pe_change=[-10000])
    inputs = ConvictionInputs(pcr_oi=1.0, total_pe_change=0, total_ce_change=0, spot=20000)

    flow = measure_writing_flow(inputs, frame)

    assert not flow.call_writers_covering
    assert not flow.put_writers_covering


def test_evaluation_is_deterministic(quiet_frame):
    inputs = ConvictionInputs(pcr_oi=1.3, total_pe_change=1200, total_ce_change=1000, spot=20000)
    evaluator = ConvictionEvaluator()

    first = evaluator.evaluate(SignalType.CALL, inputs, quiet_frame)
    second = evaluator.evaluate(SignalType.CALL, inputs, quiet_frame)

    assert first == second
    assert first.supporting_reasons == ["PCR > 1.1 (1.30)", "Put Writing > Call Writing"]


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, "0"),
        (999, "999"),
        (1000, "1,000"),
        (12000, "12,000"),
        (100000, "1,00,000"),
        (1234567, "12,34,567"),
        (1234.6, "1,235"),
    ],
)
def test_format_indian(value, expected):
    assert format_indian(value) == expected


@pytest.mark.parametrize(
    "score, strength",
    [(5, "Strong"), (3, "Strong"), (2, "Medium"), (1, "Medium"), (0, "Weak/Risky"), (-3, "Weak/Risky")],
)
def test_strength_buckets(score, strength):
    assert Strength.from_score(score).value == strength


def test_oi_ratio_rounds_ties_away_from_zero(quiet_frame):
    up = measure_writing_flow(ConvictionInputs(pcr_oi=1.0, total_pe_change=9, total_ce_change=8, spot=20000), quiet_frame)
    down = measure_writing_flow(
        ConvictionInputs(pcr_oi=1.0, total_pe_change=-9, total_ce_change=8, spot=20000), quiet_frame
    )

    assert up.oi_ratio == 1.13
    assert down.oi_ratio == -1.13


@pytest.mark.parametrize(
    "value, expected",
    [(1.125, 1.13), (-1.125, -1.13), (0.125, 0.13), (1.5, 1.5), (2.0, 2.0)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [(3.0, "3"), (0.5, "0.5"), (1.13, "1.13"), (1.6, "1.6"), (12.0, "12")],
)
def test_format_ratio_drops_trailing_zeros(value, expected):
    assert format_ratio(value) == expected


def test_strong_put_writing_reason_shows_rounded_ratio(quiet_frame):
    inputs = ConvictionInputs(pcr_oi=1.0, total_pe_change=1625, total_ce_change=1000, spot=20000)

    result = ConvictionEvaluator().evaluate(SignalType.CALL, inputs, quiet_frame)

    assert result.supporting_reasons == ["Strong Put Writing (Ratio: 1.63)"]
