"""Translation helpers wiring catalogs, overlays and negotiation together."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping

from flask import current_app, g

from localekit.backend.config.settings import LocaleSettings

from .cache import CATALOG_FILENAME, CatalogCache, ExtensionRegistry, StaticExtensionRegistry
from .editor import AuditOrigin, CatalogEditor
from .negotiation import BASE_LOCALE, RESERVED_NAMES, LocaleNegotiator, LocaleValidator
from .parser import read_id_list
from .resolver import Resolver

EXTENSION_KEY = "localekit"

_LIST_NAME = re.compile(r"[\w_.]+", re.ASCII)


@dataclass(frozen=True)
class Translator:
    """Callable helper for retrieving localized strings."""

    locale: str
    _resolver: Resolver

    def __call__(self, key: str, *params: Any, raw: bool = False) -> str:
        return self._resolver.resolve(key, self.locale, params or None, raw)

    def for_js(self, key: str, *params: Any) -> str:
        return self._resolver.resolve_for_js(key, self.locale, params or None)


class LocaleService:
    """Application-scoped owner of the catalog cache and its collaborators."""

    def __init__(self, settings: LocaleSettings, registry: ExtensionRegistry | None = None) -> None:
        self.settings = settings
        self.validator = LocaleValidator(settings.locales_root)
        self.cache = CatalogCache(
            settings.locales_root,
            extensions_root=settings.extensions_root,
            registry=registry or StaticExtensionRegistry(settings.extensions),
            installation_in_progress=lambda: settings.installation_in_progress,
        )
        self.resolver = Resolver(self.cache, fallback_locale=settings.fallback_locale)
        self.editor = CatalogEditor(settings.locales_root)

        # Validated once; an invalid configured value degrades to the base locale.
        self.default_locale = self.validator.validated(settings.default_locale)
        self.home_locale = self.validator.validated(settings.home_locale)

        self.negotiator = LocaleNegotiator(
            self.validator,
            default_locale=self.default_locale,
            cookie_max_age=settings.cookie_max_age,
            cookie_path=settings.cookie_path,
        )

    @property
    def fallback_locale(self) -> str:
        return self.resolver.fallback_locale

    def normalise_locale(self, locale: str | None) -> str:
        """Return ``locale`` when it names an existing catalog, else the default."""

        return self.validator.validated(locale, self.default_locale)

    def translator(self, locale: str) -> Translator:
        return Translator(locale=locale, _resolver=self.resolver)

    def available_locales(self) -> list[str]:
        return self.validator.available_locales()

    def locale_links(self) -> dict[str, str] | None:
        """Map each locale to its display name, or ``None`` with fewer than two locales."""

        locales = self.available_locales()
        if len(locales) < 2:
            return None
        return {code: self.resolver.resolve(code, RESERVED_NAMES) for code in locales}

    def load_id_list(self, list_name: str) -> list[str]:
        """Return the identifiers listed in ``names/<list_name>``."""

        if list_name == CATALOG_FILENAME or not _LIST_NAME.fullmatch(list_name):
            return []
        return read_id_list(self.settings.locales_root / RESERVED_NAMES / list_name)

    def save_entry(self, locale: str, key: str, value: str, origin: AuditOrigin | None = None) -> None:
        self.editor.save_entry(locale, key, value, origin)

    def messages(self, locale: str) -> Mapping[str, str]:
        return self.cache.get_merged(locale)


def get_locale_service() -> LocaleService:
    """Return the service bound to the current Flask application."""

    return current_app.extensions[EXTENSION_KEY]


def normalise_locale(locale: str | None) -> str:
    """Normalise requested locale to a supported catalogue key."""

    return get_locale_service().normalise_locale(locale)


def get_translator(locale: str | None = None) -> Translator:
    """Return a translator for ``locale`` or the locale negotiated for this request."""

    service = get_locale_service()
    if locale is None:
        return service.translator(g.get("locale") or service.default_locale)
    return service.translator(service.normalise_locale(locale))


def load_translations(locale: str | None = None) -> dict[str, Any]:
    """Expose merged messages and the fallback catalogue for API consumers."""

    service = get_locale_service()
    normalized = service.normalise_locale(locale) if locale else g.get("locale", service.default_locale)
    fallback = service.fallback_locale

    return {
        "locale": normalized,
        "available_locales": service.available_locales(),
        "messages": dict(service.messages(normalized)),
        "fallback": {
            "locale": fallback,
            "messages": dict(service.messages(fallback)),
        },
    }


__all__ = [
    "BASE_LOCALE",
    "LocaleService",
    "Translator",
    "get_locale_service",
    "get_translator",
    "load_translations",
    "normalise_locale",
]
