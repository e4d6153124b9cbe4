"""Fractional rank normalisation for option-chain metric columns."""

from __future__ import annotations

from typing import Iterable

import pandas as pd


def percentile_ranks(values: Iterable[float] | pd.Series) -> pd.Series:
    """Return the fractional rank ``(position + 1) / N`` of every value.

    Values are ordered ascending with a stable sort, so ties are ranked by
    their order of appearance rather than averaged. The result keeps the
    positional order (and index, for a Series) of the input and every rank
    lies in ``(0, 1]``.
    """

    series = values if isinstance(values, pd.Series) else pd.Series(list(values), dtype=float)
    return series.astype(float).rank(method="first", pct=True)


__all__ = ["percentile_ranks"]
