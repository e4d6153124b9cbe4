"""Environment aware configuration loader for the option-chain signals service."""

from __future__ import annotations

import copy
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_SETTINGS: Dict[str, Any] = {
    "adapter": {
        "provider": "dhan",
    },
    "dhan": {
        "base_url": "https://api.dhan.co/v2",
        "client_id": None,
        "access_token": None,
        "underlying_scrip": 13,
        "underlying_segment": "IDX_I",
        "timeout_seconds": 10.0,
    },
    "signal_log": {
        "enabled": True,
        "url": None,
        "timeout_seconds": 10.0,
    },
}

CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"
ENVIRONMENT_VARIABLE = "APP_ENV"

# Environment variables that override YAML values: (section, key, variables)
SECRET_OVERRIDES = (
    ("dhan", "client_id", ("DHAN_CLIENT_ID",)),
    ("dhan", "access_token", ("DHAN_ACCESS_TOKEN",)),
    ("dhan", "base_url", ("DHAN_BASE_URL",)),
    ("signal_log", "url", ("SIGNAL_LOG_URL", "GOOGLE_SHEET_URL")),
)


class AdapterSettings(BaseModel):
    provider: str = "dhan"

    @field_validator("provider")
    @classmethod
    def _normalize_provider(cls, value: str) -> str:
        return value.strip().lower()


class DhanSettings(BaseModel):
    """Credentials and request parameters for the Dhan option-chain API."""

    model_config = ConfigDict(frozen=True)

    base_url: str = "https://api.dhan.co/v2"
    client_id: Optional[str] = None
    access_token: Optional[str] = None
    underlying_scrip: int = 13
    underlying_segment: str = "IDX_I"
    timeout_seconds: float = 10.0

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("client_id", mode="before")
    @classmethod
    def _coerce_client_id(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)


class SignalLogSettings(BaseModel):
    """Webhook that receives a summary of every strong signal."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    url: Optional[str] = None
    timeout_seconds: float = 10.0

    @property
    def is_configured(self) -> bool:
        return self.enabled and bool(self.url)


class AppSettings(BaseModel):
    """Fully resolved application settings loaded from YAML and the environment."""

    model_config = ConfigDict(frozen=True)

    env: str
    adapter: AdapterSettings = Field(default_factory=AdapterSettings)
    dhan: DhanSettings = Field(default_factory=DhanSettings)
    signal_log: SignalLogSettings = Field(default_factory=SignalLogSettings)

    @field_validator("env")
    @classmethod
    def _normalize_env(cls, value: str) -> str:
        return value.lower()


def _deep_merge(base: MutableMapping[str, Any], overrides: Mapping[str, Any]) -> MutableMapping[str, Any]:
    for key, value in overrides.items():
        if isinstance(value, Mapping):
            existing = base.get(key)
            if isinstance(existing, MutableMapping):
                base[key] = _deep_merge(copy.deepcopy(existing), value)
            else:
                base[key] = copy.deepcopy(value)
        else:
            base[key] = copy.deepcopy(value)
    return base


def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle.read()) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {path} must contain a mapping at the root.")
        return data


def _apply_environment(settings: MutableMapping[str, Any], environ: Mapping[str, str]) -> None:
    for section, key, variables in SECRET_OVERRIDES:
        for variable in variables:
            value = environ.get(variable)
            if value:
                settings.setdefault(section, {})[key] = value
                break


def _build_settings(env: str) -> AppSettings:
    config_path = CONFIG_DIR / f"{env}.yaml"
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file for environment '{env}' not found at {config_path}")

    merged = copy.deepcopy(DEFAULT_SETTINGS)
    overrides = _load_yaml(config_path)
    merged = _deep_merge(merged, overrides)
    _apply_environment(merged, os.environ)
    merged["env"] = env
    return AppSettings.model_validate(merged)


@lru_cache(maxsize=None)
def _cached_settings(env: str) -> AppSettings:
    return _build_settings(env)


def get_settings(env: Optional[str] = None) -> AppSettings:
    """Load settings for the requested environment (default: APP_ENV or 'dev')."""

    resolved_env = (env or os.getenv(ENVIRONMENT_VARIABLE, "dev")).strip().lower()
    return _cached_settings(resolved_env)


def reset_settings_cache() -> None:
    """Clear the cached settings, primarily used during tests."""

    _cached_settings.cache_clear()


__all__ = [
    "AdapterSettings",
    "AppSettings",
    "DhanSettings",
    "SignalLogSettings",
    "get_settings",
    "reset_settings_cache",
]
