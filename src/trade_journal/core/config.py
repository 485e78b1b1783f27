"""Configuration management.

Loads from a TOML config file + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from .enums import LogFormat
from .errors import ConfigError


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class AnalyticsConfig(BaseModel):
    heatmap_days: int = 365  # Trailing window of the daily heatmap
    timezone: str | None = None  # IANA name; None = system local zone
    unknown_strategy_label: str = "Unknown"

    @field_validator("heatmap_days")
    @classmethod
    def heatmap_days_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"heatmap_days must be >= 0, got {v}")
        return v

    @field_validator("timezone")
    @classmethod
    def timezone_must_exist(cls, v: str | None) -> str | None:
        if not v:
            return None
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"unknown timezone '{v}'")
        return v


class DisplayConfig(BaseModel):
    currency_symbol: str = "$"
    percent_decimals: int = 2
    date_format: str = "%b %d, %Y %H:%M"


class SourceConfig(BaseModel):
    path: str | None = None  # Exported trades file (JSON, JSONL or CSV)


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.CONSOLE


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level application settings.

    Loaded from a TOML config file, overridden by environment variables.
    """

    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    source: SourceConfig = Field(default_factory=SourceConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "TRADE_JOURNAL_", "env_nested_delimiter": "__"}


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional). A missing file
            is ignored; an unparsable one raises ConfigError.
        overrides: Dict of overrides to apply on top.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            try:
                with open(path, "rb") as f:
                    data = tomli.load(f)
            except tomli.TOMLDecodeError as exc:
                raise ConfigError(f"Cannot parse {path}: {exc}") from exc

    if overrides:
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(data.get(key), dict):
                data[key] = {**data[key], **value}
            else:
                data[key] = value

    try:
        return Settings(**data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
