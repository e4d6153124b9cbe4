"""Adapter implementations for external option-chain providers."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Dict, Type

from .base import AdapterError, OptionsDataAdapter, UpstreamFetchError

if TYPE_CHECKING:  # pragma: no cover
    from nifty_signals.config.loader import AppSettings

_ADAPTER_REGISTRY: Dict[str, str] = {
    "dhan": "nifty_signals.adapters.dhan:DhanOptionsDataAdapter",
}


def create_adapter(provider: str, settings: "AppSettings") -> OptionsDataAdapter:
    """Instantiate an option-chain adapter by name.

    Args:
        provider: The lowercase name of the provider to load.
        settings: Application settings; each adapter reads its own section.

    Returns:
        An instance of the requested adapter implementation.

    Raises:
        KeyError: If the provider name is unknown.
    """

    normalized = provider.lower()
    try:
        dotted_path = _ADAPTER_REGISTRY[normalized]
    except KeyError as exc:
        raise KeyError(f"Unknown option-chain provider: {provider}") from exc

    module_name, class_name = dotted_path.split(":", 1)
    module = import_module(module_name)
    adapter_cls: Type[OptionsDataAdapter] = getattr(module, class_name)
    return adapter_cls.from_settings(settings)


__all__ = ["AdapterError", "OptionsDataAdapter", "UpstreamFetchError", "create_adapter"]
