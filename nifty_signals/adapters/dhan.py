"""Dhan brokerage option-chain adapter."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence

import requests

from nifty_signals.config.loader import DhanSettings
from nifty_signals.models.chain import MalformedSnapshotError, OptionRow, Snapshot

from .base import AdapterError, OptionsDataAdapter, UpstreamFetchError

if TYPE_CHECKING:  # pragma: no cover
    from nifty_signals.config.loader import AppSettings

logger = logging.getLogger(__name__)


def _leg(options: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    return options.get(key) or {}


def _row_from_strike(strike: str, options: Mapping[str, Any]) -> OptionRow:
    ce = _leg(options, "ce")
    pe = _leg(options, "pe")
    return OptionRow(
        strike_price=float(strike),
        ce_open_interest=ce.get("oi") or 0,
        pe_open_interest=pe.get("oi") or 0,
        ce_change=(ce.get("oi") or 0) - (ce.get("previous_oi") or 0),
        pe_change=(pe.get("oi") or 0) - (pe.get("previous_oi") or 0),
        ce_volume=ce.get("volume") or 0,
        pe_volume=pe.get("volume") or 0,
        ce_implied_vol=ce.get("implied_volatility") or 0.0,
        pe_implied_vol=pe.get("implied_volatility") or 0.0,
        ce_last_price=ce.get("last_price") or 0.0,
        pe_last_price=pe.get("last_price") or 0.0,
    )


def parse_option_chain(payload: Mapping[str, Any], expiry: Optional[str] = None) -> Snapshot:
    """Convert a Dhan option-chain payload into a :class:`Snapshot`.

    ``payload`` may be either the full API response or its ``data`` section.
    The previous close is read from the first strike listed, falling back from
    the call leg to the put leg to the spot price.
    """

    data = payload.get("data") if "oc" not in payload else payload
    chain = (data or {}).get("oc")
    if not chain:
        raise MalformedSnapshotError("Option chain payload has no 'oc' strike data")

    spot = float(data.get("last_price") or 0.0)
    first_strike = _leg(chain, next(iter(chain)))
    previous_close = (
        _leg(first_strike, "ce").get("previous_close_price")
        or _leg(first_strike, "pe").get("previous_close_price")
        or spot
    )

    rows = [_row_from_strike(strike, options or {}) for strike, options in chain.items()]
    return Snapshot(
        spot_price=spot,
        previous_close_price=float(previous_close),
        rows=rows,
        expiry=expiry,
    )


class DhanOptionsDataAdapter(OptionsDataAdapter):
    """Options data adapter for Dhan's v2 REST API.

    Credentials are supplied through :class:`DhanSettings`; see
    ``nifty_signals.config.loader`` for the environment variables that
    populate them.
    """

    def __init__(self, settings: DhanSettings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: "AppSettings") -> "DhanOptionsDataAdapter":
        return cls(settings.dhan)

    @property
    def name(self) -> str:
        return "dhan"

    def _headers(self) -> Dict[str, str]:
        if not self.settings.client_id or not self.settings.access_token:
            raise AdapterError("Dhan credentials are not configured (DHAN_CLIENT_ID / DHAN_ACCESS_TOKEN)")
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "access-token": self.settings.access_token,
            "client-id": self.settings.client_id,
        }

    def _underlying(self) -> Dict[str, Any]:
        return {
            "UnderlyingScrip": self.settings.underlying_scrip,
            "UnderlyingSeg": self.settings.underlying_segment,
        }

    def _post(self, path: str, body: Dict[str, Any], description: str) -> Dict[str, Any]:
        url = f"{self.settings.base_url}{path}"
        try:
            response = self.session.post(
                url,
                json=body,
                headers=self._headers(),
                timeout=self.settings.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise UpstreamFetchError(f"Failed to fetch {description}: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamFetchError(
                f"Failed to fetch {description}: HTTP {response.status_code} returned a non-JSON body",
                payload=response.text,
            ) from exc

        if not isinstance(payload, dict) or payload.get("status") != "success":
            raise UpstreamFetchError(f"Failed to fetch {description}: {payload}", payload=payload)
        return payload

    def get_expirations(self) -> Sequence[str]:
        logger.info("Fetching expiry list for scrip %s", self.settings.underlying_scrip)
        payload = self._post("/optionchain/expirylist", self._underlying(), "expiry dates")
        expirations: List[str] = list(payload.get("data") or [])
        if not expirations:
            raise UpstreamFetchError(f"Failed to fetch expiry dates: {payload}", payload=payload)
        return expirations

    def get_snapshot(self, expiry: str) -> Snapshot:
        logger.info("Fetching option chain for expiry %s", expiry)
        body = dict(self._underlying(), Expiry=expiry)
        payload = self._post("/optionchain", body, "option chain")
        snapshot = parse_option_chain(payload, expiry=expiry)
        logger.info("Loaded %d strikes, spot %.2f", len(snapshot.rows), snapshot.spot_price)
        return snapshot


__all__ = ["DhanOptionsDataAdapter", "parse_option_chain"]
