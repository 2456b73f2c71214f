"""
Application configuration utilities.

This module defines the ``Settings`` class used throughout the service for
environment variables and provides helpers to load the YAML file containing
the inventory policy and forecasting defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration loaded from environment variables or a .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # API server configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Directory holding settings.yaml
    config_dir: str = "configs"

    # Root log level applied at application start
    log_level: str = "INFO"

    # Comma separated list of allowed CORS origins; empty means "*"
    cors_origins: str = ""


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """Return a cached instance of ``Settings``.

    Using a cache ensures that environment variables are only read once.
    """
    return Settings()


def load_yaml(file_path: str) -> dict:
    """Load a YAML file from the given path and return its contents.

    If the file does not exist, an empty dictionary is returned.
    """
    if not os.path.exists(file_path):
        return {}
    with open(file_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


_FORECAST_DEFAULTS: Dict[str, Any] = {
    "window_size": 7,
    "alpha": 0.5,
    "beta": 0.4,
    "gamma": 0.1,
    "season_length": 7,
}


@dataclass(frozen=True)
class AnalyticsPolicy:
    """Business constants read from ``settings.yaml``."""

    lead_time_days: int = 7
    service_level_z: float = 1.65
    service_level_pct: float = 95.0
    min_history_days: int = 10
    decomposition_min_days: int = 14
    forecast_defaults: Dict[str, Any] = field(default_factory=lambda: dict(_FORECAST_DEFAULTS))


def load_policy(config_root: str | None = None) -> AnalyticsPolicy:
    """Build an ``AnalyticsPolicy`` from ``<config_root>/settings.yaml``.

    Missing files and keys fall back to the defaults on ``AnalyticsPolicy``.
    """
    root = config_root or get_settings().config_dir
    settings = load_yaml(os.path.join(root, "settings.yaml"))
    defaults = AnalyticsPolicy()

    forecast_defaults = dict(_FORECAST_DEFAULTS)
    overrides = settings.get("forecast_defaults") or {}
    if isinstance(overrides, dict):
        forecast_defaults.update({k: v for k, v in overrides.items() if k in _FORECAST_DEFAULTS})

    return AnalyticsPolicy(
        lead_time_days=int(settings.get("lead_time_days", defaults.lead_time_days)),
        service_level_z=float(settings.get("service_level_z", defaults.service_level_z)),
        service_level_pct=float(settings.get("service_level_pct", defaults.service_level_pct)),
        min_history_days=int(settings.get("min_history_days", defaults.min_history_days)),
        decomposition_min_days=int(
            settings.get("decomposition_min_days", defaults.decomposition_min_days)
        ),
        forecast_defaults=forecast_defaults,
    )
