"""Configuration helpers for the API, the CLI and the adapters."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from nifty_signals.adapters import OptionsDataAdapter, create_adapter

from .loader import AppSettings, DhanSettings, SignalLogSettings, get_settings, reset_settings_cache


@lru_cache(maxsize=None)
def _get_options_data_adapter(env: Optional[str]) -> OptionsDataAdapter:
    settings = get_settings(env)
    try:
        return create_adapter(settings.adapter.provider, settings)
    except KeyError as exc:
        raise ValueError(f"Unsupported option-chain provider: {settings.adapter.provider}") from exc


def get_options_data_adapter(env: Optional[str] = None) -> OptionsDataAdapter:
    """Return the option-chain adapter configured for ``env``."""

    return _get_options_data_adapter(env)


def reset_options_data_adapter_cache() -> None:
    """Clear the cached adapter instance (useful for tests)."""

    _get_options_data_adapter.cache_clear()


__all__ = [
    "AppSettings",
    "DhanSettings",
    "SignalLogSettings",
    "get_options_data_adapter",
    "get_settings",
    "reset_options_data_adapter_cache",
    "reset_settings_cache",
]
