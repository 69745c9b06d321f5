"""Expose locale configuration metadata consumed by front-end shells."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify

from localekit.backend.app.localization import get_locale_service
from localekit.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the validated settings."""

    service = get_locale_service()
    return {
        "version": get_project_version(),
        "default_locale": service.default_locale,
        "home_locale": service.home_locale,
        "fallback_locale": service.fallback_locale,
        "locale_count": len(service.available_locales()),
    }


@blueprint.get("/meta")
def get_application_metadata() -> tuple[Any, int]:
    """Expose lightweight application metadata such as the version identifier."""

    payload = get_configuration_metadata()
    return jsonify(payload), 200
