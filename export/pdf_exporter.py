"""Generate a PDF comparison report, one page per alignment step."""
from __future__ import annotations

from datetime import datetime
from pathlib import Path

from comparison.models import ComparisonResult, DeleteA, InsertB, Match
from comparison.visual_diff import render_diff
from utils.logging import logger


MM = 72 / 25.4  # points per millimetre
MARGIN = 15 * MM
HEADING_Y = 16 * MM

GAP_COLOR = (138 / 255, 90 / 255, 0)
TEXT_COLOR = (0, 0, 0)


def export_pdf(
    result: ComparisonResult,
    output_path: str | Path,
    *,
    large_report: bool = False,
) -> Path:
    """
    Write an A4 report: a cover page, then one page per alignment step.

    Matched pages get their similarity and a full-page diff image; inserted and
    removed pages get a short notice. ``large_report`` embeds JPEG instead of
    PNG to keep big reports small.

    Args:
        result: ComparisonResult from the pipeline
        output_path: Path to save the report

    Returns:
        Path to the generated PDF
    """
    output = Path(output_path)
    logger.info("Generating PDF report -> %s", output)

    try:
        import fitz  # PyMuPDF
    except ImportError as exc:
        raise RuntimeError(
            "PyMuPDF is required for PDF export. Install via `pip install PyMuPDF`."
        ) from exc

    from config.settings import settings as app_settings

    image_format = "jpeg" if large_report else "png"
    quality = app_settings.report_jpeg_quality if large_report else 95

    doc = fitz.open()
    try:
        paper = fitz.paper_rect("a4")
        _add_cover_page(doc.new_page(width=paper.width, height=paper.height), result)

        name_a, name_b = result.doc_a.name, result.doc_b.name
        for step in result.steps:
            page = doc.new_page(width=paper.width, height=paper.height)

            if isinstance(step, InsertB):
                _add_gap_page(
                    page,
                    f"Inserted page in {name_b}: Page {step.b_index + 1}",
                    "This page exists only in the updated PDF.",
                )
                continue

            if isinstance(step, DeleteA):
                _add_gap_page(
                    page,
                    f"Removed from {name_b} (exists in {name_a}): Page {step.a_index + 1}",
                    "This page exists only in the original PDF.",
                )
                continue

            _add_match_page(page, step, result, image_format, quality)

        output.parent.mkdir(parents=True, exist_ok=True)
        doc.save(output, deflate=True)
    finally:
        doc.close()

    logger.info("PDF report generated: %s (%d steps)", output, len(result.steps))
    return output


def _add_cover_page(page, result: ComparisonResult) -> None:
    summary = result.alignment.edit_script.summary()
    page.insert_text((MARGIN, 20 * MM), "PDF Comparison Report", fontsize=18, color=TEXT_COLOR)
    page.insert_text(
        (MARGIN, 30 * MM), f"{result.doc_a.name} vs {result.doc_b.name}", fontsize=11
    )
    page.insert_text(
        (MARGIN, 38 * MM),
        f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        fontsize=9,
    )
    page.insert_text(
        (MARGIN, 46 * MM),
        (
            f"Tolerance: {result.settings.tolerance} | "
            f"Matched: {summary['matches']} | "
            f"Inserted: {summary['insertions']} | "
            f"Removed: {summary['deletions']}"
        ),
        fontsize=9,
    )


def _add_gap_page(page, heading: str, note: str) -> None:
    page.insert_text((MARGIN, HEADING_Y), heading, fontsize=13, color=GAP_COLOR)
    page.insert_text((MARGIN, HEADING_Y + 8 * MM), note, fontsize=10, color=TEXT_COLOR)


def _add_match_page(page, step: Match, result: ComparisonResult, image_format: str, quality: int) -> None:
    import fitz

    label_a = f"{result.doc_a.name} Page {step.a_index + 1}"
    label_b = f"{result.doc_b.name} Page {step.b_index + 1}"
    page.insert_text((MARGIN, HEADING_Y), f"{label_a} <-> {label_b}", fontsize=12, color=TEXT_COLOR)
    page.insert_text(
        (MARGIN, HEADING_Y + 7 * MM), f"Similarity: {step.similarity:.2f}%", fontsize=10
    )

    diff = render_diff(
        result.doc_a[step.a_index].image,
        result.doc_b[step.b_index].image,
        result.settings.pixel_threshold,
        result.settings.include_antialiasing,
    )

    top = HEADING_Y + 14 * MM
    max_w = page.rect.width - MARGIN * 2
    max_h = page.rect.height - top - MARGIN

    img_w = max_w
    img_h = diff.height / diff.width * img_w
    if img_h > max_h:
        img_h = max_h
        img_w = diff.width / diff.height * img_h

    rect = fitz.Rect(MARGIN, top, MARGIN + img_w, top + img_h)
    page.insert_image(rect, stream=diff.to_bytes(image_format, quality=quality))
