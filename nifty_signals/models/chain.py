"""Option-chain snapshot models shared by the adapters and the analytics engine."""

from __future__ import annotations

from typing import Any, List

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, field_validator


class MalformedSnapshotError(ValueError):
    """Raised when a snapshot is missing chain data or cannot be analysed."""


ROW_COLUMNS = [
    "strike_price",
    "ce_open_interest",
    "pe_open_interest",
    "ce_change",
    "pe_change",
    "ce_volume",
    "pe_volume",
    "ce_implied_vol",
    "pe_implied_vol",
    "ce_last_price",
    "pe_last_price",
]


class OptionRow(BaseModel):
    """Call and put legs quoted at a single strike."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    strike_price: float = Field(alias="strikePrice")
    ce_open_interest: int = Field(default=0, ge=0, alias="ceOpenInterest")
    pe_open_interest: int = Field(default=0, ge=0, alias="peOpenInterest")
    ce_change: int = Field(default=0, alias="ceChange")
    pe_change: int = Field(default=0, alias="peChange")
    ce_volume: int = Field(default=0, ge=0, alias="ceVolume")
    pe_volume: int = Field(default=0, ge=0, alias="peVolume")
    ce_implied_vol: float = Field(default=0.0, ge=0, alias="ceImpliedVol")
    pe_implied_vol: float = Field(default=0.0, ge=0, alias="peImpliedVol")
    ce_last_price: float = Field(default=0.0, ge=0, alias="ceLastPrice")
    pe_last_price: float = Field(default=0.0, ge=0, alias="peLastPrice")

    @field_validator(
        "ce_open_interest",
        "pe_open_interest",
        "ce_change",
        "pe_change",
        "ce_volume",
        "pe_volume",
        mode="before",
    )
    @classmethod
    def coerce_int(cls, value: Any) -> int:
        return int(value or 0)

    @field_validator(
        "ce_implied_vol",
        "pe_implied_vol",
        "ce_last_price",
        "pe_last_price",
        "strike_price",
        mode="before",
    )
    @classmethod
    def coerce_float(cls, value: Any) -> float:
        return float(value or 0.0)


class ScoredOptionRow(OptionRow):
    """Option row with its composite support and resistance scores attached."""

    support_score: float = Field(alias="supportScore")
    resistance_score: float = Field(alias="resistanceScore")


class Snapshot(BaseModel):
    """One option-chain observation: every strike plus the underlying prices."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    spot_price: float = Field(alias="spotPrice")
    previous_close_price: float = Field(alias="previousClosePrice")
    rows: List[OptionRow] = Field(default_factory=list)
    expiry: str | None = None

    @field_validator("rows", mode="after")
    @classmethod
    def sort_by_strike(cls, rows: List[OptionRow]) -> List[OptionRow]:
        return sorted(rows, key=lambda row: row.strike_price)

    def to_frame(self) -> pd.DataFrame:
        """Return the rows as a DataFrame ordered by ascending strike.

        Raises:
            MalformedSnapshotError: If two rows share the same strike.
        """

        frame = pd.DataFrame([row.model_dump() for row in self.rows], columns=ROW_COLUMNS)
        if frame["strike_price"].duplicated().any():
            duplicates = sorted(frame.loc[frame["strike_price"].duplicated(), "strike_price"].unique())
            raise MalformedSnapshotError(f"Duplicate strikes in option chain: {duplicates}")
        return frame.sort_values("strike_price", kind="mergesort").reset_index(drop=True)


__all__ = [
    "MalformedSnapshotError",
    "OptionRow",
    "ROW_COLUMNS",
    "ScoredOptionRow",
    "Snapshot",
]
