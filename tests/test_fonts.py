"""Tests for font handles and font resolution."""

from __future__ import annotations

import requests

from chartgen.fonts import Font, google, resolve_font
from chartgen.fonts.google import extract_font_url, get_google_font

CSS = """
@font-face {
  font-family: 'Roboto';
  font-weight: 700;
  src: url(https://fonts.gstatic.com/s/roboto/v30/KFOlCnqEu92Fr1MmWUlvAw.ttf) format('truetype');
}
"""


def test_face_names_for_builtin_families() -> None:
    assert Font().face_name == "Helvetica"
    assert Font(bold=True).face_name == "Helvetica-Bold"
    assert Font(family="Times", italic=True).face_name == "Times-Italic"
    assert Font(family="Courier", bold=True, italic=True).face_name == "Courier-BoldOblique"


def test_unregistered_variant_falls_back_to_family() -> None:
    assert Font(family="Nonexistent", bold=True).face_name == "Nonexistent"


def test_derive_returns_live_handle() -> None:
    font = Font(size=9)
    font.dispose()

    bold = font.derive(bold=True)

    assert font.is_disposed
    assert not bold.is_disposed
    assert (bold.size, bold.bold) == (9, True)


def test_resolve_builtin_and_fallback() -> None:
    assert resolve_font("Helvetica") == "Helvetica"
    assert resolve_font("courier") == "Courier"
    assert resolve_font("No Such Font") == "Helvetica"


def test_resolve_with_weight_falls_back_when_download_fails(monkeypatch) -> None:
    monkeypatch.setattr("chartgen.fonts.get_google_font", lambda family, weight: None)

    assert resolve_font("Imaginary:700", fallback="Times") == "Times"


def test_extract_font_url() -> None:
    assert extract_font_url(CSS) == "https://fonts.gstatic.com/s/roboto/v30/KFOlCnqEu92Fr1MmWUlvAw.ttf"
    assert extract_font_url("body { color: red }") is None


def test_google_font_served_from_cache(tmp_path, monkeypatch) -> None:
    cached = tmp_path / "Roboto-700.ttf"
    cached.write_bytes(b"ttf")

    def fail(*args, **kwargs):
        raise AssertionError("network used")

    monkeypatch.setattr(google.requests, "get", fail)

    assert get_google_font("Roboto", 700, cache_dir=tmp_path) == cached


def test_google_font_download_failure_returns_none(tmp_path, monkeypatch) -> None:
    def offline(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(google.requests, "get", offline)

    assert get_google_font("Roboto", 700, cache_dir=tmp_path) is None
