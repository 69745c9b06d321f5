"""Process-scoped cache of base catalogs merged with extension overlays."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Mapping, Protocol, Sequence

from .parser import CatalogAccessError, read_catalog

_LOGGER = logging.getLogger(__name__)

CATALOG_FILENAME = "properties"

CatalogReader = Callable[[Path], Mapping[str, str]]


class ExtensionRegistry(Protocol):
    """Ordered listing of the active extensions."""

    def active_extensions(self) -> Sequence[str]:
        ...


class StaticExtensionRegistry:
    """Registry serving a fixed, configured list of extension names."""

    def __init__(self, names: Sequence[str] = ()) -> None:
        self._names = tuple(names)

    def active_extensions(self) -> Sequence[str]:
        return self._names


def catalog_path(locales_root: Path, locale: str) -> Path:
    return locales_root / locale / CATALOG_FILENAME


def extension_catalog_path(extensions_root: Path, extension: str, locale: str) -> Path | None:
    """Return the catalog path for ``vendor:feature_name``, or ``None`` if malformed.

    ``acme:chat_greetings`` maps to ``Acme/ChatGreetings/locales/<locale>/properties``.
    """

    vendor, separator, feature = extension.partition(":")
    if not separator or not vendor or not feature:
        return None
    vendor_dir = vendor[:1].upper() + vendor[1:]
    feature_dir = "".join(part[:1].upper() + part[1:] for part in feature.split("_"))
    return extensions_root / vendor_dir / feature_dir / "locales" / locale / CATALOG_FILENAME


class CatalogCache:
    """Lazily merge and memoise catalogs per locale for the life of the process.

    Entries are never refreshed once populated; edits made on disk become
    visible only after :meth:`clear`. Concurrent first loads of the same locale
    may parse twice, the last result wins.
    """

    def __init__(
        self,
        locales_root: Path,
        *,
        extensions_root: Path | None = None,
        registry: ExtensionRegistry | None = None,
        installation_in_progress: Callable[[], bool] = lambda: False,
        reader: CatalogReader = read_catalog,
    ) -> None:
        self._locales_root = Path(locales_root)
        self._extensions_root = Path(extensions_root) if extensions_root else None
        self._registry = registry or StaticExtensionRegistry()
        self._installation_in_progress = installation_in_progress
        self._reader = reader
        self._merged: dict[str, Mapping[str, str]] = {}

    def __contains__(self, locale: object) -> bool:
        return locale in self._merged

    def get_merged(self, locale: str) -> Mapping[str, str]:
        """Return the read-only merged catalog for ``locale``."""

        cached = self._merged.get(locale)
        if cached is not None:
            return cached

        merged = dict(self._reader(catalog_path(self._locales_root, locale)))
        if not self._installation_in_progress():
            for extension in self._registry.active_extensions():
                overlay = self._read_overlay(extension, locale)
                if overlay:
                    merged.update(overlay)

        frozen = MappingProxyType(merged)
        self._merged[locale] = frozen
        return frozen

    def _read_overlay(self, extension: str, locale: str) -> Mapping[str, str] | None:
        if self._extensions_root is None:
            return None

        path = extension_catalog_path(self._extensions_root, extension, locale)
        if path is None:
            _LOGGER.warning("Ignoring malformed extension name %r", extension)
            return None

        # Missing overlays are expected for partially translated extensions.
        if not os.access(path, os.R_OK):
            _LOGGER.debug("No %s catalog for extension %s at %s", locale, extension, path)
            return None
        try:
            return self._reader(path)
        except CatalogAccessError:
            _LOGGER.debug("Skipping unreadable catalog for extension %s: %s", extension, path)
            return None

    def clear(self) -> None:
        """Drop every cached catalog so the next lookup re-reads from disk."""

        self._merged.clear()


__all__ = [
    "CATALOG_FILENAME",
    "CatalogCache",
    "ExtensionRegistry",
    "StaticExtensionRegistry",
    "catalog_path",
    "extension_catalog_path",
]
