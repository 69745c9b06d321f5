"""Readers for ``key=value`` catalog files and named identifier lists."""

from __future__ import annotations

import logging
import re
from os import PathLike

_LOGGER = logging.getLogger(__name__)

# Narrower than str.strip(): only ASCII whitespace and NUL are trimmed.
_TRIM_CHARS = " \t\n\r\0\x0b"
_ID_PATTERN = re.compile(r"[\w_.]+", re.ASCII)


class CatalogAccessError(RuntimeError):
    """Raised when a required catalog file cannot be read or written."""

    def __init__(self, path: str | PathLike[str], message: str | None = None) -> None:
        self.path = str(path)
        super().__init__(message or f"unable to read locale file {self.path}")


def unescape_value(raw: str) -> str:
    """Trim a stored value and expand literal ``\\n`` sequences."""

    return raw.strip(_TRIM_CHARS).replace("\\n", "\n")


def escape_value(value: str) -> str:
    """Prepare ``value`` for storage on a single catalog line."""

    return value.strip(_TRIM_CHARS).replace("\n", "\\n").replace("\r", "")


def split_entry(line: str) -> tuple[str, str] | None:
    """Return ``(key, raw_value)`` for an entry line, ``None`` for anything else."""

    if not line.strip() or line.lstrip().startswith("#"):
        return None
    key, separator, value = line.partition("=")
    if not separator:
        return None
    return key, value


def read_catalog(path: str | PathLike[str]) -> dict[str, str]:
    """Parse the catalog at ``path`` into an ordered key/value mapping."""

    messages: dict[str, str] = {}
    try:
        with open(path, "r", encoding="utf-8-sig") as handle:
            for line in handle:
                entry = split_entry(line)
                if entry is None:
                    continue
                key, value = entry
                messages[key] = unescape_value(value)
    except (OSError, UnicodeDecodeError) as exc:
        raise CatalogAccessError(path) from exc

    _LOGGER.debug("Loaded %d messages from %s", len(messages), path)
    return messages


def read_id_list(path: str | PathLike[str]) -> list[str]:
    """Read a newline-delimited identifier list; missing files yield ``[]``."""

    try:
        with open(path, "r", encoding="utf-8") as handle:
            lines = [line.strip() for line in handle]
    except OSError:
        _LOGGER.debug("Identifier list %s is not readable", path)
        return []

    return [line for line in lines if line and _ID_PATTERN.fullmatch(line)]


__all__ = [
    "CatalogAccessError",
    "escape_value",
    "read_catalog",
    "read_id_list",
    "split_entry",
    "unescape_value",
]
