"""Expose catalogs, locale metadata and catalog edits to API consumers."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, g, jsonify, request

from localekit.backend.app.http import bad_request, not_found
from localekit.backend.app.localization import (
    AuditOrigin,
    get_locale_service,
    load_translations,
    validate_key,
)

blueprint = Blueprint("translations", __name__, url_prefix="/api/v1/translations")

_TRUTHY = {"1", "true", "yes", "on"}


@blueprint.get("/")
def get_default_translations():
    """Return translations for the locale negotiated for this request."""

    payload = load_translations()
    return jsonify(payload), 200


@blueprint.get("/locales")
def list_locales():
    """Describe the available locales for a locale switcher."""

    service = get_locale_service()
    payload = {
        "current": g.get("locale", service.default_locale),
        "default_locale": service.default_locale,
        "home_locale": service.home_locale,
        "available_locales": service.available_locales(),
        "links": service.locale_links(),
    }
    return jsonify(payload), 200


@blueprint.get("/names/<list_name>")
def get_id_list(list_name: str):
    """Return a named identifier list from the shared ``names`` directory."""

    service = get_locale_service()
    return jsonify({"name": list_name, "items": service.load_id_list(list_name)}), 200


@blueprint.get("/<locale>")
def get_locale_translations(locale: str):
    """Return translations for a specific locale slug."""

    payload = load_translations(locale)
    return jsonify(payload), 200


@blueprint.get("/<locale>/messages/<path:key>")
def get_message(locale: str, key: str):
    """Resolve one message; ``param`` values fill ``{0}``, ``{1}``..."""

    service = get_locale_service()
    resolved_locale = service.normalise_locale(locale)
    params = request.args.getlist("param")
    raw = request.args.get("raw", "").lower() in _TRUTHY

    if request.args.get("format") == "js":
        text = service.resolver.resolve_for_js(key, resolved_locale, params)
    else:
        text = service.resolver.resolve(key, resolved_locale, params, raw=raw)

    payload: dict[str, Any] = {"locale": resolved_locale, "key": key, "text": text}
    return jsonify(payload), 200


@blueprint.put("/<locale>/messages/<path:key>")
def save_message(locale: str, key: str):
    """Upsert a message in the on-disk catalog for ``locale``."""

    service = get_locale_service()
    if not service.validator.is_valid(locale):
        return not_found(f"Unknown locale: {locale}")
    try:
        validate_key(key)
    except ValueError as exc:
        return bad_request(str(exc))

    data = request.get_json(silent=True)
    value = data.get("value") if isinstance(data, dict) else None
    if not isinstance(value, str):
        return bad_request("Request JSON must contain a string 'value'")

    service.save_entry(locale, key, value, AuditOrigin.from_request(request))
    return jsonify({"locale": locale, "key": key, "saved": True}), 200
