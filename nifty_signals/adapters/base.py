"""Core abstractions for option-chain data adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional, Sequence

from nifty_signals.models.chain import Snapshot

if TYPE_CHECKING:  # pragma: no cover
    from nifty_signals.config.loader import AppSettings


class AdapterError(Exception):
    """Base exception raised for adapter related failures."""


class UpstreamFetchError(AdapterError):
    """Raised when a provider call fails or reports a non-success status.

    ``payload`` holds the decoded response body, when there is one, for
    diagnostics.
    """

    def __init__(self, message: str, payload: Optional[Any] = None):
        super().__init__(message)
        self.payload = payload


class OptionsDataAdapter(ABC):
    """Abstract base class for fetching option-chain snapshots from a broker."""

    @classmethod
    @abstractmethod
    def from_settings(cls, settings: "AppSettings") -> "OptionsDataAdapter":
        """Build the adapter from its section of the application settings."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human readable provider name."""

    @abstractmethod
    def get_expirations(self) -> Sequence[str]:
        """Return the available expiries, nearest first."""

    @abstractmethod
    def get_snapshot(self, expiry: str) -> Snapshot:
        """Return the option-chain snapshot for ``expiry``."""

    def get_nearest_snapshot(self) -> Snapshot:
        """Fetch the expiry list, then the chain for the nearest expiry."""

        expirations = self.get_expirations()
        if not expirations:
            raise UpstreamFetchError(f"{self.name} returned no expiries")
        return self.get_snapshot(expirations[0])


__all__ = [
    "AdapterError",
    "OptionsDataAdapter",
    "UpstreamFetchError",
]
