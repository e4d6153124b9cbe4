"""Max-pain strike computation."""

from __future__ import annotations

import numpy as np
import pandas as pd


def writer_losses(frame: pd.DataFrame) -> np.ndarray:
    """Aggregate option-writer loss for settlement at each observed strike.

    Element ``i`` is the payout owed by writers if the underlying expires at
    ``frame["strike_price"][i]``: calls struck above it and puts struck below
    it finish in the money. Strikes equal to the settlement contribute nothing.
    """

    strikes = frame["strike_price"].to_numpy(dtype=float)
    ce_oi = frame["ce_open_interest"].to_numpy(dtype=float)
    pe_oi = frame["pe_open_interest"].to_numpy(dtype=float)

    # rows: candidate settlement, columns: contract strike
    distance = strikes[np.newaxis, :] - strikes[:, np.newaxis]
    call_loss = np.clip(distance, 0.0, None) @ ce_oi
    put_loss = np.clip(-distance, 0.0, None) @ pe_oi
    return call_loss + put_loss


def calculate_max_pain(frame: pd.DataFrame) -> float:
    """Return the strike that minimises aggregate writer loss.

    The first minimum in ascending-strike order wins ties.
    """

    if frame.empty:
        raise ValueError("Cannot compute max pain for an empty option chain")
    losses = writer_losses(frame)
    return float(frame["strike_price"].iloc[int(np.argmin(losses))])


__all__ = ["calculate_max_pain", "writer_losses"]
