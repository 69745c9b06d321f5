"""Resolve the localekit version from distribution metadata or the source tree."""

from __future__ import annotations

import tomllib
from functools import lru_cache
from importlib import metadata
from pathlib import Path
from typing import Final

PACKAGE_NAME: Final = "localekit"
PYPROJECT_PATH: Final = Path(__file__).resolve().parents[3] / "pyproject.toml"


@lru_cache(maxsize=1)
def get_project_version() -> str:
    """Return the installed version, or the ``pyproject.toml`` one in a checkout."""

    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        return read_pyproject_version(PYPROJECT_PATH)


def read_pyproject_version(path: Path) -> str:
    try:
        with path.open("rb") as handle:
            project = tomllib.load(handle).get("project", {})
    except FileNotFoundError as exc:
        raise RuntimeError(f"Unable to locate project metadata at {path}") from exc

    version = project.get("version")
    if not isinstance(version, str) or not version:
        raise RuntimeError(f"No [project] version declared in {path}")
    return version


__all__ = ["get_project_version", "read_pyproject_version"]
