"""Unit tests for comparison/visual_diff.py."""
from __future__ import annotations

import pytest
from PIL import Image

from comparison.visual_diff import DIFF_COLOR, DiffImage, render_diff


@pytest.fixture
def white_page():
    return Image.new("RGB", (24, 32), "white")


def test_identical_pages_have_no_diff(white_page):
    out = render_diff(white_page, white_page.copy(), 0.1, False, alpha=0.1)
    assert isinstance(out, DiffImage)
    assert out.diff_count == 0
    assert (out.width, out.height) == (24, 32)
    assert out.image.size == (24, 32)


def test_changed_region_is_painted(white_page):
    changed = white_page.copy()
    changed.paste((0, 0, 0), (0, 0, 24, 32))
    out = render_diff(white_page, changed, 0.1, False, alpha=0.1)
    assert out.diff_count == 24 * 32
    assert out.image.getpixel((0, 0))[:3] == DIFF_COLOR


def test_pages_of_different_size_use_common_area(white_page):
    taller = Image.new("RGB", (20, 40), "white")
    out = render_diff(white_page, taller, 0.1, False, alpha=0.1)
    assert (out.width, out.height) == (20, 32)


def test_alpha_defaults_to_settings(monkeypatch, white_page):
    from config.settings import settings

    monkeypatch.setattr(settings, "diff_overlay_alpha", 0.5)
    out = render_diff(white_page, white_page.copy(), 0.1, True)
    assert out.diff_count == 0


def test_to_bytes_formats(white_page):
    out = render_diff(white_page, white_page.copy(), 0.1, False, alpha=0.1)
    assert out.to_bytes("png").startswith(b"\x89PNG")
    assert out.to_bytes("jpeg", quality=80).startswith(b"\xff\xd8")
