"""WSGI entrypoint for deploying the localekit backend behind Passenger."""

from localekit.backend.app import create_app

# Passenger expects a module-level variable named ``application``.
application = create_app()
