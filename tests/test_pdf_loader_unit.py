from __future__ import annotations

from pathlib import Path

import fitz
import pytest

from extraction.pdf_loader import load_document


def _write_pdf(path: Path, texts: list[str], *, width: float = 200, height: float = 300) -> Path:
    doc = fitz.open()
    for text in texts:
        page = doc.new_page(width=width, height=height)
        if text:
            page.insert_text((20, 120), text, fontsize=11)
    doc.save(path)
    doc.close()
    return path


def test_load_document_renders_and_extracts(tmp_path):
    pdf = _write_pdf(tmp_path / "report.pdf", ["Alpha bravo charlie", "", "Delta echo"])

    doc = load_document(pdf, render_scale=1.0)

    assert doc.name == "report.pdf"
    assert len(doc) == 3
    assert [p.index for p in doc] == [0, 1, 2]
    assert doc[0].image.size == (200, 300)
    assert doc[0].image.mode == "RGB"
    assert doc[0].text == "Alpha bravo charlie"
    assert doc[1].text == ""
    assert "Delta" in doc[2].text


def test_render_scale_changes_raster_size(tmp_path):
    pdf = _write_pdf(tmp_path / "a.pdf", ["x"])
    doc = load_document(pdf, render_scale=2.0)
    assert doc[0].image.size == (400, 600)


def test_scanned_loading_skips_text(tmp_path):
    pdf = _write_pdf(tmp_path / "scan.pdf", ["Some visible words"])
    doc = load_document(pdf, render_scale=0.5, extract_text=False)
    assert doc[0].text == ""


def test_default_render_scale_from_settings(tmp_path, monkeypatch):
    from config.settings import settings

    monkeypatch.setattr(settings, "render_scale", 0.5)
    pdf = _write_pdf(tmp_path / "a.pdf", ["x"])
    assert load_document(pdf)[0].image.size == (100, 150)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_document(tmp_path / "nope.pdf", render_scale=1.0)


def test_invalid_render_scale(tmp_path):
    with pytest.raises(ValueError, match="render_scale"):
        load_document(tmp_path / "nope.pdf", render_scale=0)
