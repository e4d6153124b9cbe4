from __future__ import annotations

import logging
from typing import List, Optional

import pandas as pd

from nifty_signals.models.analytics import AnalyticsResult, SignalType
from nifty_signals.models.chain import MalformedSnapshotError, ScoredOptionRow, Snapshot
from nifty_signals.signals.base import ConvictionInputs, round_half_up
from nifty_signals.signals.conviction import ConvictionEvaluator

from .max_pain import calculate_max_pain
from .scores import ScoreAggregator

logger = logging.getLogger(__name__)


class AnalyticsAssembler:
    """Runs the full analytics pipeline over one option-chain snapshot."""

    def __init__(
        self,
        aggregator: Optional[ScoreAggregator] = None,
        evaluator: Optional[ConvictionEvaluator] = None,
    ):
        self.aggregator = aggregator or ScoreAggregator()
        self.evaluator = evaluator or ConvictionEvaluator()

    def run(self, snapshot: Snapshot) -> AnalyticsResult:
        """Compute analytics and both conviction signals for ``snapshot``.

        Raises:
            MalformedSnapshotError: If the chain has no strikes, repeats a
                strike, or carries no call open interest.
        """

        frame = snapshot.to_frame()
        if frame.empty:
            raise MalformedSnapshotError("Option chain contains no strikes")

        total_ce_oi = int(frame["ce_open_interest"].sum())
        if total_ce_oi <= 0:
            raise MalformedSnapshotError("Total call open interest is zero; put-call ratio is undefined")
        pcr_oi = round_half_up(int(frame["pe_open_interest"].sum()) / total_ce_oi)

        spot = snapshot.spot_price
        scored = self.aggregator.score(frame)
        levels = self.aggregator.directional_levels(scored)
        atm = self.aggregator.atm_quote(scored, spot)

        inputs = ConvictionInputs(
            pcr_oi=pcr_oi,
            total_pe_change=int(frame["pe_change"].sum()),
            total_ce_change=int(frame["ce_change"].sum()),
            spot=spot,
        )
        call_conviction = self.evaluator.evaluate(SignalType.CALL, inputs, scored)
        put_conviction = self.evaluator.evaluate(SignalType.PUT, inputs, scored)

        logger.debug(
            "Analysed %d strikes: pcr=%.2f call=%s(%d) put=%s(%d)",
            len(frame),
            pcr_oi,
            call_conviction.strength.value,
            call_conviction.score,
            put_conviction.strength.value,
            put_conviction.score,
        )

        return AnalyticsResult(
            spot=spot,
            previous_close=snapshot.previous_close_price,
            pcr_oi=pcr_oi,
            max_pain_strike=calculate_max_pain(frame),
            total_pe_change=inputs.total_pe_change,
            total_ce_change=inputs.total_ce_change,
            buy_call_level_simple=levels.buy_call_level_simple,
            buy_put_level_simple=levels.buy_put_level_simple,
            buy_call_level_scored=levels.buy_call_level_scored,
            buy_put_level_scored=levels.buy_put_level_scored,
            atm_implied_vol=atm.implied_vol,
            atm_straddle_price=atm.straddle_price,
            call_conviction=call_conviction,
            put_conviction=put_conviction,
            chain=_scored_rows(scored),
        )


def _scored_rows(scored: pd.DataFrame) -> List[ScoredOptionRow]:
    return [ScoredOptionRow(**record) for record in scored.to_dict(orient="records")]


def compute_analytics(snapshot: Snapshot) -> AnalyticsResult:
    """Return the analytics for ``snapshot`` using the default components."""

    return AnalyticsAssembler().run(snapshot)


__all__ = ["AnalyticsAssembler", "compute_analytics"]
