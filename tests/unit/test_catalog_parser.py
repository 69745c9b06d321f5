"""Tests for the catalog file parser."""

from __future__ import annotations

from pathlib import Path

import pytest

from localekit.backend.app.localization import CatalogAccessError, read_catalog, read_id_list


def test_read_catalog_splits_on_first_equals(tmp_path: Path) -> None:
    path = tmp_path / "properties"
    path.write_text("formula=a=b+c\nplain=value\n", encoding="utf-8")

    messages = read_catalog(path)

    assert messages == {"formula": "a=b+c", "plain": "value"}


def test_read_catalog_ignores_comments_blank_and_unsplittable_lines(tmp_path: Path) -> None:
    path = tmp_path / "properties"
    path.write_text("# comment=with equals\n\nno separator here\nkey=value\n", encoding="utf-8")

    assert read_catalog(path) == {"key": "value"}


def test_read_catalog_trims_values_and_unescapes_newlines(tmp_path: Path) -> None:
    path = tmp_path / "properties"
    path.write_text("multi=  first\\nsecond \t\r\n", encoding="utf-8")

    assert read_catalog(path)["multi"] == "first\nsecond"


def test_read_catalog_keeps_keys_verbatim_and_file_order(tmp_path: Path) -> None:
    path = tmp_path / "properties"
    path.write_text("zeta=1\nalpha =2\nmid=3\n", encoding="utf-8")

    messages = read_catalog(path)

    assert list(messages) == ["zeta", "alpha ", "mid"]


def test_read_catalog_last_duplicate_wins(tmp_path: Path) -> None:
    path = tmp_path / "properties"
    path.write_text("key=first\nkey=second\n", encoding="utf-8")

    assert read_catalog(path) == {"key": "second"}


def test_read_catalog_tolerates_byte_order_mark(tmp_path: Path) -> None:
    path = tmp_path / "properties"
    path.write_bytes(b"\xef\xbb\xbf" + "greeting=Grüß dich\n".encode("utf-8"))

    assert read_catalog(path) == {"greeting": "Grüß dich"}


def test_read_catalog_missing_file_is_fatal(tmp_path: Path) -> None:
    path = tmp_path / "missing" / "properties"

    with pytest.raises(CatalogAccessError) as excinfo:
        read_catalog(path)

    assert excinfo.value.path == str(path)
    assert str(path) in str(excinfo.value)


def test_read_catalog_undecodable_file_is_fatal(tmp_path: Path) -> None:
    path = tmp_path / "properties"
    path.write_bytes(b"app.title=\xff\xfe broken\n")

    with pytest.raises(CatalogAccessError) as excinfo:
        read_catalog(path)

    assert excinfo.value.path == str(path)


def test_read_id_list_filters_invalid_lines(tmp_path: Path) -> None:
    path = tmp_path / "groups"
    path.write_text("  support \nsales\n\nbad entry\nwith/slash\nbilling.eu\n", encoding="utf-8")

    assert read_id_list(path) == ["support", "sales", "billing.eu"]


def test_read_id_list_missing_file_is_empty(tmp_path: Path) -> None:
    assert read_id_list(tmp_path / "nope") == []
