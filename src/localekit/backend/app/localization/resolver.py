"""Message lookup with locale fallback, placeholders and sanitization."""

from __future__ import annotations

from typing import Any, Sequence

from .cache import CatalogCache
from .sanitizer import sanitize_string

MISSING_PREFIX = "!"
SANITIZE_TAGS_LEVEL = "low"
SANITIZE_ATTR_LEVEL = "moderate"

_JS_ESCAPES = str.maketrans({"\\": "\\\\", "\n": "\\n", '"': '\\"', "'": "\\'"})


def substitute_placeholders(text: str, params: Sequence[Any] | None) -> str:
    """Replace ``{0}``, ``{1}``... with the matching entry of ``params``."""

    if not params:
        return text
    for index, value in enumerate(params):
        text = text.replace(f"{{{index}}}", str(value))
    return text


def sanitize(text: str) -> str:
    return sanitize_string(text, SANITIZE_TAGS_LEVEL, SANITIZE_ATTR_LEVEL)


class Resolver:
    """Resolve message keys against the requested locale, then the fallback locale."""

    def __init__(self, cache: CatalogCache, fallback_locale: str = "en") -> None:
        self._cache = cache
        self.fallback_locale = fallback_locale

    def fallback_chain(self, locale: str) -> tuple[str, ...]:
        if locale == self.fallback_locale:
            return (locale,)
        return (locale, self.fallback_locale)

    def lookup(self, key: str, locale: str) -> str | None:
        """Return the raw message for ``key`` or ``None`` when no locale defines it."""

        for candidate in self.fallback_chain(locale):
            messages = self._cache.get_merged(candidate)
            if key in messages:
                return messages[key]
        return None

    def _base_string(self, key: str, locale: str) -> str:
        message = self.lookup(key, locale)
        return MISSING_PREFIX + key if message is None else message

    def resolve(
        self,
        key: str,
        locale: str,
        params: Sequence[Any] | None = None,
        raw: bool = False,
    ) -> str:
        """Return the finished string for ``key``.

        Missing keys render as ``!key``. Placeholders are substituted before
        sanitization; ``raw`` skips sanitization for callers that escape the
        result themselves.
        """

        text = substitute_placeholders(self._base_string(key, locale), params)
        return text if raw else sanitize(text)

    def resolve_for_js(self, key: str, locale: str, params: Sequence[Any] | None = None) -> str:
        """Return ``key`` escaped for embedding in a quoted script literal."""

        text = self._base_string(key, locale).translate(_JS_ESCAPES)
        return sanitize(substitute_placeholders(text, params))


__all__ = ["MISSING_PREFIX", "Resolver", "sanitize", "substitute_placeholders"]
