"""Locale validation and per-request locale negotiation."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, MutableMapping, Protocol

from flask import Request, Response

from .cache import catalog_path

_LOGGER = logging.getLogger(__name__)

BASE_LOCALE = "en"
RESERVED_NAMES = "names"
SESSION_KEY = "locale"
LOCALE_PARAM = "locale"

_LOCALE_PATTERN = re.compile(r"[\w-]{2,5}", re.ASCII)


class LocaleValidator:
    """Syntax and existence checks for locale codes under ``locales_root``."""

    def __init__(self, locales_root: Path) -> None:
        self.locales_root = Path(locales_root)

    @staticmethod
    def pattern_check(code: str | None) -> bool:
        return bool(code) and _LOCALE_PATTERN.fullmatch(code) is not None and code != RESERVED_NAMES

    def exists(self, code: str) -> bool:
        return catalog_path(self.locales_root, code).is_file()

    def is_valid(self, code: str | None) -> bool:
        return code is not None and self.pattern_check(code) and self.exists(code)

    def validated(self, code: str | None, fallback: str = BASE_LOCALE) -> str:
        """Return ``code`` when valid, otherwise ``fallback``."""

        if code is not None and self.is_valid(code):
            return code
        return fallback

    def available_locales(self) -> list[str]:
        """List locale directories, sorted, for a locale switcher."""

        if not self.locales_root.is_dir():
            return []
        return sorted(
            entry.name
            for entry in self.locales_root.iterdir()
            if self.pattern_check(entry.name) and entry.is_dir()
        )


class RequestContext(Protocol):
    """Request-scoped sources a locale can be negotiated from."""

    def locale_param(self) -> str | None:
        ...

    def session_locale(self) -> str | None:
        ...

    def store_session_locale(self, code: str) -> None:
        ...

    def cookie_locale(self) -> str | None:
        ...

    def store_cookie_locale(self, code: str, max_age: int, path: str) -> None:
        ...

    def accept_language(self) -> str | None:
        ...


@dataclass
class PendingCookie:
    name: str
    value: str
    max_age: int
    path: str


class FlaskRequestContext:
    """Adapt a Flask request/session pair to :class:`RequestContext`.

    Cookies cannot be set before a response exists, so the locale cookie is
    queued and written by :meth:`apply_cookie` from an ``after_request`` hook.
    """

    def __init__(self, request: Request, session: MutableMapping[str, Any], cookie_name: str) -> None:
        self._request = request
        self._session = session
        self._cookie_name = cookie_name
        self.pending_cookie: PendingCookie | None = None

    def locale_param(self) -> str | None:
        return self._request.args.get(LOCALE_PARAM) or None

    def session_locale(self) -> str | None:
        value = self._session.get(SESSION_KEY)
        return value if isinstance(value, str) else None

    def store_session_locale(self, code: str) -> None:
        self._session[SESSION_KEY] = code

    def cookie_locale(self) -> str | None:
        return self._request.cookies.get(self._cookie_name)

    def store_cookie_locale(self, code: str, max_age: int, path: str) -> None:
        self.pending_cookie = PendingCookie(self._cookie_name, code, max_age, path)

    def accept_language(self) -> str | None:
        return self._request.headers.get("Accept-Language")

    def apply_cookie(self, response: Response) -> Response:
        if self.pending_cookie is not None:
            cookie = self.pending_cookie
            response.set_cookie(cookie.name, cookie.value, max_age=cookie.max_age, path=cookie.path)
        return response


class LocaleNegotiator:
    """Pick the locale for a request from ranked, validated sources."""

    def __init__(
        self,
        validator: LocaleValidator,
        *,
        default_locale: str = BASE_LOCALE,
        cookie_max_age: int = 1000 * 24 * 60 * 60,
        cookie_path: str = "/",
    ) -> None:
        self._validator = validator
        self.default_locale = default_locale
        self._cookie_max_age = cookie_max_age
        self._cookie_path = cookie_path

    def negotiate(self, context: RequestContext) -> str:
        """Return the request locale and remember it in the locale cookie."""

        requested = context.locale_param()
        stored = context.session_locale()
        if requested is not None and self._validator.is_valid(requested):
            locale = requested
            context.store_session_locale(locale)
        elif stored is not None and self._validator.is_valid(stored):
            locale = stored
        else:
            locale = self.user_locale(context)

        context.store_cookie_locale(locale, self._cookie_max_age, self._cookie_path)
        _LOGGER.debug("Negotiated locale %s", locale)
        return locale

    def user_locale(self, context: RequestContext) -> str:
        """Derive a locale from the cookie, ``Accept-Language`` and defaults.

        Each ``Accept-Language`` entry is stripped of surrounding whitespace
        before its first two characters are tried, so the ``en`` in
        ``"fr-CA, en;q=0.5"`` still matches. Quality weights are ignored and
        entries are tried in header order.
        """

        cookie = context.cookie_locale()
        if cookie is not None and self._validator.is_valid(cookie):
            return cookie

        header = context.accept_language()
        if header:
            for entry in header.split(","):
                candidate = entry.strip()[:2]
                if self._validator.is_valid(candidate):
                    return candidate

        if self._validator.is_valid(self.default_locale):
            return self.default_locale
        return BASE_LOCALE


__all__ = [
    "BASE_LOCALE",
    "FlaskRequestContext",
    "LocaleNegotiator",
    "LocaleValidator",
    "PendingCookie",
    "RequestContext",
]
