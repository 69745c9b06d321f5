"""Application factory for the localekit backend."""

from __future__ import annotations

import logging

from flask import Flask, Response, g, jsonify, request, session
from werkzeug.exceptions import BadRequest

from localekit.backend.config.settings import LocaleSettings, load_settings

from .http import problem_response
from .localization import CatalogAccessError, FlaskRequestContext, LocaleService
from .localization.catalog import EXTENSION_KEY
from .routes import register_routes
from .routes.config import get_configuration_metadata

logger = logging.getLogger(__name__)


def create_app(settings: LocaleSettings | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    settings = settings or load_settings()

    app = Flask(__name__)
    app.config.update(SECRET_KEY=settings.secret_key)
    app.extensions[EXTENSION_KEY] = LocaleService(settings)

    @app.before_request
    def _negotiate_locale() -> None:
        service: LocaleService = app.extensions[EXTENSION_KEY]
        context = FlaskRequestContext(request, session, settings.cookie_name)
        g.locale = service.negotiator.negotiate(context)
        g.locale_context = context

    @app.after_request
    def _persist_locale_cookie(response: Response) -> Response:
        context = g.get("locale_context")
        if context is not None:
            context.apply_cookie(response)
        return response

    register_routes(app)

    @app.route("/health", methods=["GET"])
    def health_check():
        """Simple health check endpoint for infrastructure monitoring."""

        payload = {"status": "ok", **get_configuration_metadata()}
        return jsonify(payload)

    @app.errorhandler(CatalogAccessError)
    def handle_catalog_error(error: CatalogAccessError):
        """Abort the request when a required catalog is unreadable or unwritable."""

        logger.error("Catalog access failed for %s: %s", error.path, error)
        return problem_response(
            "catalog_unavailable", status=500, message=str(error)
        ).to_response()

    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        """Return consistent JSON responses for malformed payloads."""

        message = error.description or "Invalid request"
        return problem_response("bad_request", status=400, message=message).to_response()

    @app.errorhandler(ValueError)
    def handle_value_error(error: ValueError):
        """Gracefully surface domain validation errors to clients."""

        return problem_response(
            "validation_error", status=400, message=str(error)
        ).to_response()

    return app
