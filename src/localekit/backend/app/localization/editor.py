"""In-place catalog editing with an append-only audit trail."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterator

from flask import Request

from .cache import catalog_path
from .parser import CatalogAccessError, escape_value, split_entry

_LOGGER = logging.getLogger(__name__)

# RFC 822 with a two-digit year, e.g. "Sat, 18 Oct 26 16:42:00 +0000".
RFC822_FORMAT = "%a, %d %b %y %H:%M:%S %z"


@dataclass(frozen=True)
class AuditOrigin:
    """Who submitted an edit, as recorded in the audit log."""

    remote_addr: str = ""
    user_agent: str = ""
    forwarded_for: str | None = None
    remote_host: str | None = None

    @classmethod
    def from_request(cls, request: Request) -> AuditOrigin:
        return cls(
            remote_addr=request.remote_addr or "",
            user_agent=request.headers.get("User-Agent", ""),
            forwarded_for=request.headers.get("X-Forwarded-For"),
            remote_host=request.environ.get("REMOTE_HOST"),
        )

    def describe(self) -> str:
        if self.remote_host:
            return self.remote_host
        if self.forwarded_for and self.forwarded_for != self.remote_addr:
            return f"{self.remote_addr} ({self.forwarded_for})"
        return self.remote_addr


def _now() -> datetime:
    return datetime.now(timezone.utc).astimezone()


@contextmanager
def _exclusive_lock(lock_path: Path) -> Iterator[None]:
    """Hold an exclusive advisory lock on ``lock_path`` for the block."""

    with open(lock_path, "a", encoding="utf-8") as handle:
        if os.name == "nt":
            import msvcrt

            handle.seek(0)
            msvcrt.locking(handle.fileno(), msvcrt.LK_LOCK, 1)
            try:
                yield
            finally:
                handle.seek(0)
                msvcrt.locking(handle.fileno(), msvcrt.LK_UNLCK, 1)
        else:
            import fcntl

            fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


def validate_key(key: str) -> str:
    """Return ``key`` if it can be written as a single, matchable entry line.

    Raises :class:`ValueError` for empty keys, keys containing ``=`` or a line
    break, and keys the parser would read back as a comment.
    """

    if not key.strip():
        raise ValueError("Message keys must not be empty")
    if "=" in key or "\n" in key or "\r" in key:
        raise ValueError("Message keys must not contain '=' or line breaks")
    if key.lstrip().startswith("#"):
        raise ValueError("Message keys must not start with '#'")
    return key


def upsert_line(lines: list[str], key: str, value: str) -> list[str]:
    """Replace the first ``key=`` line or append a new one.

    Every other line, including later duplicates of ``key``, is kept verbatim.
    """

    entry = f"{key}={escape_value(value)}\n"
    result: list[str] = []
    replaced = False
    for line in lines:
        if not replaced:
            parts = split_entry(line)
            if parts is not None and parts[0] == key:
                result.append(entry)
                replaced = True
                continue
        result.append(line)

    if not replaced:
        if result and not result[-1].endswith("\n"):
            result[-1] += "\n"
        result.append(entry)
    return result


class CatalogEditor:
    """Write single entries back into on-disk catalogs.

    Edits do not touch any in-memory catalog cache.
    """

    def __init__(self, locales_root: Path, *, clock: Callable[[], datetime] | None = None) -> None:
        self._locales_root = Path(locales_root)
        self._clock = clock or _now

    def save_entry(self, locale: str, key: str, value: str, origin: AuditOrigin | None = None) -> None:
        """Upsert ``key`` in the ``locale`` catalog and append an audit record."""

        validate_key(key)
        path = catalog_path(self._locales_root, locale)
        lock_path = path.with_name(f"{path.name}.lock")

        try:
            with _exclusive_lock(lock_path):
                lines = self._read_lines(path, locale)
                self._write_atomic(path, "".join(upsert_line(lines, key, value)))
        except OSError as exc:
            raise CatalogAccessError(path, f"unable to lock properties for locale {locale}") from exc

        _LOGGER.info("Saved %s in %s catalog", key, locale)
        self._append_audit(path, key, value, origin or AuditOrigin())

    @staticmethod
    def _read_lines(path: Path, locale: str) -> list[str]:
        try:
            with open(path, "r", encoding="utf-8", newline="") as handle:
                return handle.readlines()
        except (OSError, UnicodeDecodeError) as exc:
            raise CatalogAccessError(path, f"unable to open properties for locale {locale}") from exc

    @staticmethod
    def _write_atomic(path: Path, text: str) -> None:
        tmp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                newline="",
                dir=path.parent,
                prefix=f".{path.name}.",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(text)
            shutil.copymode(path, tmp_name)
            os.replace(tmp_name, path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise CatalogAccessError(
                path, f"cannot write {path}, please check file permissions"
            ) from exc

    def _append_audit(self, path: Path, key: str, value: str, origin: AuditOrigin) -> None:
        log_path = path.with_name(f"{path.name}.log")
        timestamp = self._clock().strftime(RFC822_FORMAT)
        record = (
            f"# {timestamp} by {origin.describe()} using {origin.user_agent}\n"
            f"{key}={escape_value(value)}\n"
        )
        try:
            with open(log_path, "a", encoding="utf-8") as handle:
                handle.write(record)
        except OSError as exc:
            _LOGGER.warning("Could not append to audit log %s: %s", log_path, exc)


__all__ = ["AuditOrigin", "CatalogEditor", "RFC822_FORMAT", "upsert_line", "validate_key"]
