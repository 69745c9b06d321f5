"""Test configuration utilities and shared fixtures."""

import sys
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from localekit.backend.app import create_app  # noqa: E402
from localekit.backend.config.settings import LocaleSettings  # noqa: E402

EN_CATALOG = """\
# English catalog
app.title=Locale Kit
app.greeting=Hello {0}
app.welcome=Welcome, {0}! You have {1} new messages.
app.only_en=Only in English
app.multiline=First line\\nSecond line
app.markup=<b>Bold</b><script>alert(1)</script>
Hello {0}=Hello {0}

chat.quote=Say "{0}"
"""

FR_CATALOG = """\
# Catalogue français
app.title=Locale Kit
app.greeting=Bonjour {0}
app.welcome=Bienvenue, {0} ! Vous avez {1} nouveaux messages.
"""

DE_CATALOG = """\
app.title=Locale Kit
app.greeting=Hallo {0}
"""

NAMES_CATALOG = """\
de=Deutsch
en=English
fr=Français
"""

EXTENSION_EN_CATALOG = """\
app.greeting=Hi there, {0}
ext.only=From the extension
"""


def write_text(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture()
def write_catalog():
    """Expose :func:`write_text` to tests that add catalogs on the fly."""

    return write_text


@pytest.fixture()
def locales_root(tmp_path: Path) -> Path:
    """Build a catalog tree with en/fr/de locales and a ``names`` directory."""

    root = tmp_path / "locales"
    write_text(root / "en" / "properties", EN_CATALOG)
    write_text(root / "fr" / "properties", FR_CATALOG)
    write_text(root / "de" / "properties", DE_CATALOG)
    write_text(root / "names" / "properties", NAMES_CATALOG)
    write_text(root / "names" / "departments", "support\nsales\n\nbad/entry\nbilling.eu\n")
    return root


@pytest.fixture()
def extensions_root(tmp_path: Path) -> Path:
    root = tmp_path / "extensions"
    write_text(
        root / "Acme" / "ChatGreetings" / "locales" / "en" / "properties",
        EXTENSION_EN_CATALOG,
    )
    return root


@pytest.fixture()
def settings(locales_root: Path, extensions_root: Path) -> LocaleSettings:
    return LocaleSettings.from_mapping(
        {
            "locales_root": str(locales_root),
            "extensions_root": str(extensions_root),
            "extensions": ["acme:chat_greetings"],
            "default_locale": "en",
            "home_locale": "fr",
            "secret_key": "testing",
        },
        locales_root.parent,
    )


@pytest.fixture()
def app(settings: LocaleSettings) -> Flask:
    """Return a configured Flask application for integration tests."""

    application = create_app(settings)
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the configured Flask app."""

    return app.test_client()
