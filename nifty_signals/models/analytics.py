from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .chain import ScoredOptionRow


class SignalType(str, Enum):
    """Direction of the trade a conviction score is computed for."""

    CALL = "call"
    PUT = "put"


class Strength(str, Enum):
    """Qualitative bucket derived from a conviction score."""

    STRONG = "Strong"
    MEDIUM = "Medium"
    WEAK = "Weak/Risky"

    @classmethod
    def from_score(cls, score: int) -> "Strength":
        if score >= 3:
            return cls.STRONG
        if score >= 1:
            return cls.MEDIUM
        return cls.WEAK


class ConvictionResult(BaseModel):
    """Score, strength and the evidence behind one directional signal."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    score: int
    strength: Strength
    supporting_reasons: List[str] = Field(default_factory=list, alias="supportingReasons")
    contradicting_reasons: List[str] = Field(default_factory=list, alias="contradictingReasons")


class AnalyticsResult(BaseModel):
    """Aggregate analytics derived from a single option-chain snapshot."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    spot: float
    previous_close: float = Field(alias="previousClose")
    pcr_oi: float = Field(alias="pcrOI")
    max_pain_strike: float = Field(alias="maxPainStrike")
    total_pe_change: int = Field(alias="totalPeChange")
    total_ce_change: int = Field(alias="totalCeChange")
    buy_call_level_simple: float = Field(alias="buyCallLevelSimple")
    buy_put_level_simple: float = Field(alias="buyPutLevelSimple")
    buy_call_level_scored: float = Field(alias="buyCallLevelScored")
    buy_put_level_scored: float = Field(alias="buyPutLevelScored")
    atm_implied_vol: float = Field(alias="atmImpliedVol")
    atm_straddle_price: float = Field(alias="atmStraddlePrice")
    call_conviction: ConvictionResult = Field(alias="callConviction")
    put_conviction: ConvictionResult = Field(alias="putConviction")
    chain: List[ScoredOptionRow] = Field(default_factory=list)

    def conviction_for(self, signal_type: SignalType) -> ConvictionResult:
        if signal_type is SignalType.CALL:
            return self.call_conviction
        return self.put_conviction
