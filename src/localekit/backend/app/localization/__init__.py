"""Locale catalogs: parsing, overlay caching, resolution, negotiation and editing."""

from .cache import CatalogCache, ExtensionRegistry, StaticExtensionRegistry
from .catalog import (
    LocaleService,
    Translator,
    get_locale_service,
    get_translator,
    load_translations,
    normalise_locale,
)
from .editor import AuditOrigin, CatalogEditor, validate_key
from .negotiation import FlaskRequestContext, LocaleNegotiator, LocaleValidator, RequestContext
from .parser import CatalogAccessError, read_catalog, read_id_list
from .resolver import Resolver
from .sanitizer import sanitize_string

__all__ = [
    "AuditOrigin",
    "CatalogAccessError",
    "CatalogCache",
    "CatalogEditor",
    "ExtensionRegistry",
    "FlaskRequestContext",
    "LocaleNegotiator",
    "LocaleService",
    "LocaleValidator",
    "RequestContext",
    "Resolver",
    "StaticExtensionRegistry",
    "Translator",
    "get_locale_service",
    "get_translator",
    "load_translations",
    "normalise_locale",
    "read_catalog",
    "read_id_list",
    "sanitize_string",
    "validate_key",
]
