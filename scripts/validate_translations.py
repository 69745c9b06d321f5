#!/usr/bin/env python3
"""Validate locale catalogs against the fallback locale."""

from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC = REPO_ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from localekit.backend.app.localization import LocaleValidator, read_catalog  # noqa: E402
from localekit.backend.app.localization.cache import catalog_path  # noqa: E402
from localekit.backend.config.settings import load_settings  # noqa: E402

PLACEHOLDER_PATTERN = re.compile(r"{(\d+)}")


def _load_catalogues(locales_root: Path) -> dict[str, dict[str, str]]:
    validator = LocaleValidator(locales_root)
    return {
        locale: read_catalog(catalog_path(locales_root, locale))
        for locale in validator.available_locales()
        if validator.exists(locale)
    }


def _placeholders(message: str) -> frozenset[str]:
    return frozenset(PLACEHOLDER_PATTERN.findall(message))


def missing_keys(catalogues: dict[str, dict[str, str]], base_locale: str) -> list[str]:
    issues: list[str] = []
    expected = set(catalogues.get(base_locale, {}))
    for locale, messages in sorted(catalogues.items()):
        missing = expected - set(messages)
        if missing:
            issues.append(
                f"Locale '{locale}' missing {len(missing)} keys: {', '.join(sorted(missing))}"
            )
    return issues


def extra_keys(catalogues: dict[str, dict[str, str]], base_locale: str) -> list[str]:
    issues: list[str] = []
    expected = set(catalogues.get(base_locale, {}))
    for locale, messages in sorted(catalogues.items()):
        extra = set(messages) - expected
        if extra:
            issues.append(
                f"Locale '{locale}' defines {len(extra)} keys unknown to '{base_locale}': "
                f"{', '.join(sorted(extra))}"
            )
    return issues


def placeholder_inconsistencies(catalogues: dict[str, dict[str, str]], base_locale: str) -> list[str]:
    inconsistencies: list[str] = []
    base = catalogues.get(base_locale, {})
    for key, base_message in sorted(base.items()):
        expected = _placeholders(base_message)
        for locale, messages in sorted(catalogues.items()):
            if locale == base_locale or key not in messages:
                continue
            found = _placeholders(messages[key])
            if found != expected:
                inconsistencies.append(
                    f"{key}: {base_locale}={{{', '.join(sorted(expected))}}} "
                    f"{locale}={{{', '.join(sorted(found))}}}"
                )
    return inconsistencies


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--config", type=Path, help="Settings file (defaults to the packaged one)")
    parser.add_argument(
        "--fail-on-extra",
        action="store_true",
        help="Exit with an error if a locale defines keys the fallback locale lacks",
    )
    args = parser.parse_args(argv)

    settings = load_settings(args.config)
    catalogues = _load_catalogues(settings.locales_root)
    base_locale = settings.fallback_locale
    if base_locale not in catalogues:
        print(f"[error] Fallback locale '{base_locale}' has no catalog")
        return 1

    missing = missing_keys(catalogues, base_locale)
    extra = extra_keys(catalogues, base_locale)
    inconsistencies = placeholder_inconsistencies(catalogues, base_locale)

    for issue in missing:
        print(f"[missing] {issue}")
    for issue in extra:
        print(f"[extra] {issue}")
    for issue in inconsistencies:
        print(f"[placeholder] {issue}")

    if missing or inconsistencies or (extra and args.fail_on_extra):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
