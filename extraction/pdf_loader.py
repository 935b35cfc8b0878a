"""Decode a PDF into page renders and per-page text using PyMuPDF."""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from PIL import Image

from comparison.models import Document, Page
from utils.logging import logger


def load_document(
    path: str | Path,
    *,
    render_scale: Optional[float] = None,
    extract_text: bool = True,
) -> Document:
    """
    Render every page of a PDF and extract its text.

    Args:
        path: Path to the PDF file
        render_scale: Rasterization scale (1.0 = 72 DPI). If None, uses settings.
        extract_text: If False (scanned documents), every page gets empty text.

    Returns:
        Document named after the file, one Page per PDF page
    """
    if render_scale is None:
        from config.settings import settings

        render_scale = settings.render_scale
    if render_scale <= 0:
        raise ValueError(f"render_scale must be positive, got {render_scale}")

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"PDF not found: {path}")

    try:
        import fitz  # PyMuPDF
    except ImportError as exc:
        raise RuntimeError(
            "PyMuPDF is required for PDF loading. Install via `pip install PyMuPDF`."
        ) from exc

    logger.info("Loading PDF: %s (scale=%.2f, text=%s)", path, render_scale, extract_text)
    pages: List[Page] = []
    matrix = fitz.Matrix(render_scale, render_scale)

    with fitz.open(path) as doc:
        for page in doc:
            image = _render_page(page, matrix)
            text = _page_text(page) if extract_text else ""
            pages.append(Page(index=page.number, image=image, text=text))

    logger.info("Loaded %d pages from %s", len(pages), path.name)
    return Document(name=path.name, pages=pages)


def _render_page(page, matrix) -> Image.Image:
    pix = page.get_pixmap(matrix=matrix, alpha=False)
    return Image.frombytes("RGB", (pix.width, pix.height), pix.samples)


def _page_text(page) -> str:
    """Join the page's words with single spaces, in PyMuPDF's reading order."""
    words = page.get_text("words")
    return " ".join(word[4] for word in words if word[4])
