"""Tests for the YAML-backed settings loader."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from localekit.backend.config import settings as settings_module
from localekit.backend.config.settings import ConfigurationError, LocaleSettings, load_settings


def _write_settings(path: Path, payload: dict) -> Path:
    path.write_text(yaml.safe_dump(payload), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    settings_module._load_settings_file.cache_clear()
    yield
    settings_module._load_settings_file.cache_clear()


def test_packaged_settings_are_valid() -> None:
    loaded = load_settings(settings_module.SETTINGS_FILE)

    assert loaded.locales_root == (settings_module.CONFIG_DIRECTORY / "locales").resolve()
    assert (loaded.locales_root / "en" / "properties").is_file()
    assert loaded.extensions == ("acme:chat_greetings",)
    assert loaded.cookie_max_age == 1000 * 24 * 60 * 60


def test_relative_paths_resolve_against_settings_file(tmp_path: Path) -> None:
    path = _write_settings(
        tmp_path / "settings.yaml",
        {"locales_root": "catalogs", "extensions_root": "plugins", "web_root": "/chat/"},
    )

    loaded = load_settings(path)

    assert loaded.locales_root == (tmp_path / "catalogs").resolve()
    assert loaded.extensions_root == (tmp_path / "plugins").resolve()
    assert loaded.cookie_path == "/chat/"


def test_environment_variable_selects_settings_file(tmp_path: Path, monkeypatch) -> None:
    path = _write_settings(
        tmp_path / "custom.yaml",
        {"locales_root": "l", "extensions_root": "e", "default_locale": "fr"},
    )
    monkeypatch.setenv(settings_module.SETTINGS_ENV, str(path))

    assert load_settings().default_locale == "fr"


def test_secret_key_can_come_from_environment(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("LOCALEKIT_SECRET_KEY", "from-env")

    loaded = LocaleSettings.from_mapping({"locales_root": "l", "extensions_root": "e"}, tmp_path)

    assert loaded.secret_key == "from-env"


@pytest.mark.parametrize(
    "overrides",
    [
        {"extensions": ["not-a-valid-name"]},
        {"extensions": "acme:chat"},
        {"cookie_max_age_days": 0},
        {"unexpected": True},
    ],
)
def test_invalid_settings_raise_configuration_error(tmp_path: Path, overrides: dict) -> None:
    raw = {"locales_root": "l", "extensions_root": "e", **overrides}

    with pytest.raises(ConfigurationError):
        LocaleSettings.from_mapping(raw, tmp_path)


def test_missing_required_path_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        LocaleSettings.from_mapping({"locales_root": "l"}, tmp_path)


def test_missing_settings_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "absent.yaml")


def test_settings_are_immutable(tmp_path: Path) -> None:
    loaded = LocaleSettings.from_mapping({"locales_root": "l", "extensions_root": "e"}, tmp_path)

    with pytest.raises(ValueError):
        loaded.default_locale = "fr"  # type: ignore[misc]
