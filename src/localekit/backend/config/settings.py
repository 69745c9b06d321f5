"""Settings loader for the locale catalog subsystem."""

from __future__ import annotations

import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
SETTINGS_FILE = CONFIG_DIRECTORY / "settings.yaml"
SETTINGS_ENV = "LOCALEKIT_CONFIG"
SECRET_KEY_ENV = "LOCALEKIT_SECRET_KEY"

_EXTENSION_NAME = re.compile(r"^[A-Za-z0-9_]+:[A-Za-z0-9_]+$")


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class LocaleSettings(ImmutableModel):
    """Validated runtime settings for catalogs, extensions and cookies."""

    locales_root: Path
    extensions_root: Path
    extensions: tuple[str, ...] = ()
    installation_in_progress: bool = False
    default_locale: str = "en"
    home_locale: str = "en"
    fallback_locale: str = "en"
    web_root: str = ""
    cookie_name: str = "localekit_locale"
    cookie_max_age_days: int = 1000
    secret_key: str = Field(default="dev", repr=False)

    @field_validator("extensions", mode="before")
    @classmethod
    def _coerce_extensions(cls, value: Any) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            raise ConfigurationError("'extensions' must be a list of 'vendor:name' entries")
        names = tuple(str(item).strip() for item in value)
        for name in names:
            if not _EXTENSION_NAME.match(name):
                raise ConfigurationError(f"Invalid extension name: {name!r}")
        return names

    @field_validator("web_root")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @model_validator(mode="after")
    def _validate_values(self) -> LocaleSettings:
        if self.cookie_max_age_days <= 0:
            raise ConfigurationError("'cookie_max_age_days' must be positive")
        if not self.cookie_name.strip():
            raise ConfigurationError("'cookie_name' must not be empty")
        return self

    @property
    def cookie_max_age(self) -> int:
        """Locale cookie lifetime in seconds."""

        return self.cookie_max_age_days * 24 * 60 * 60

    @property
    def cookie_path(self) -> str:
        return f"{self.web_root}/"

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], base_dir: Path) -> LocaleSettings:
        """Validate ``raw`` and resolve relative paths against ``base_dir``."""

        prepared = dict(raw)
        for key in ("locales_root", "extensions_root"):
            value = prepared.get(key)
            if value is None:
                raise ConfigurationError(f"Missing required setting '{key}'")
            path = Path(value)
            prepared[key] = path if path.is_absolute() else (base_dir / path).resolve()

        secret = os.getenv(SECRET_KEY_ENV)
        if secret:
            prepared["secret_key"] = secret

        try:
            return cls.model_validate(prepared)
        except ValidationError as error:
            raise ConfigurationError(f"Settings validation failed: {error}") from error


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Settings file must define a mapping at the top level")
    return data


def _settings_path(path: Path | str | None) -> Path:
    if path is not None:
        return Path(path)
    override = os.getenv(SETTINGS_ENV)
    return Path(override) if override else SETTINGS_FILE


@lru_cache(maxsize=4)
def _load_settings_file(path: Path) -> LocaleSettings:
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")
    return LocaleSettings.from_mapping(_load_yaml(path), path.resolve().parent)


def load_settings(path: Path | str | None = None) -> LocaleSettings:
    """Load and cache settings from ``path``, ``$LOCALEKIT_CONFIG`` or the packaged file."""

    return _load_settings_file(_settings_path(path))


__all__ = [
    "CONFIG_DIRECTORY",
    "ConfigurationError",
    "LocaleSettings",
    "SETTINGS_ENV",
    "SETTINGS_FILE",
    "load_settings",
]
