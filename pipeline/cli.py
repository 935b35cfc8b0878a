"""Command line entrypoint: ``python -m pipeline original.pdf updated.pdf``."""
from __future__ import annotations

import argparse
import logging
from typing import List, Optional, Sequence

from comparison.models import MAX_TOLERANCE, AlignmentSettings, ComparisonResult, DeleteA, InsertB
from comparison.pixel_diff import available_backends
from export import export_json, export_pdf
from pipeline.compare_pdfs import compare_pdfs
from utils.logging import configure_logging, logger
from utils.performance import log_stage_summary, reset_stages, timed_stage


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m pipeline",
        description="Compare two PDFs page by page, detecting inserted and removed pages",
    )
    parser.add_argument("pdf_a", help="Original PDF")
    parser.add_argument("pdf_b", help="Updated PDF")
    parser.add_argument(
        "--tolerance",
        type=int,
        default=None,
        help=f"Consecutive inserted/removed pages to accept (0-{MAX_TOLERANCE}, 0 = compare by position)",
    )
    parser.add_argument("--threshold", type=float, default=None, help="Pixel mismatch sensitivity (0-1)")
    parser.add_argument(
        "--include-aa",
        action="store_true",
        default=None,
        help="Count anti-aliased pixels as differences",
    )
    parser.add_argument(
        "--scanned",
        action="store_true",
        default=None,
        help="Image-only documents: skip text extraction and compare pixels only",
    )
    parser.add_argument("--render-scale", type=float, default=None, help="Page render scale (1.0 = 72 DPI)")
    parser.add_argument("--backend", choices=available_backends(), default=None, help="Pixel diff backend")
    parser.add_argument("--json", dest="json_out", default=None, help="Write the alignment as JSON")
    parser.add_argument("--pdf", dest="pdf_out", default=None, help="Write a PDF report")
    parser.add_argument(
        "--large-report",
        action="store_true",
        help="Embed JPEG diff images in the PDF report (smaller file)",
    )
    parser.add_argument("--profile", action="store_true", help="Log a timing summary")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def format_steps(result: ComparisonResult) -> List[str]:
    """One human-readable line per alignment step (page numbers are 1-based)."""
    name_a, name_b = result.doc_a.name, result.doc_b.name
    lines = []
    for step in result.steps:
        if isinstance(step, InsertB):
            lines.append(f"Inserted page in {name_b}: Page {step.b_index + 1}")
        elif isinstance(step, DeleteA):
            lines.append(f"Removed from {name_b} (exists in {name_a}): Page {step.a_index + 1}")
        else:
            lines.append(
                f"{name_a} Page {step.a_index + 1} <-> {name_b} Page {step.b_index + 1}"
                f" | similarity≈{step.similarity:.2f}%"
            )
    return lines


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    from config.settings import settings

    configure_logging(logging.DEBUG if args.verbose else settings.log_level)

    try:
        run_settings = AlignmentSettings.from_settings(
            pixel_threshold=args.threshold,
            include_antialiasing=args.include_aa,
            tolerance=args.tolerance,
            scanned_mode=args.scanned,
        )
    except ValueError as exc:
        logger.error("Invalid settings: %s", exc)
        return 2

    reset_stages()
    try:
        result = compare_pdfs(
            args.pdf_a,
            args.pdf_b,
            run_settings,
            render_scale=args.render_scale,
            pixel_diff_backend=args.backend,
        )
        for line in format_steps(result):
            print(line)

        with timed_stage("export"):
            if args.json_out:
                export_json(result, args.json_out)
            if args.pdf_out:
                export_pdf(result, args.pdf_out, large_report=args.large_report)
    except Exception:
        logger.exception("Comparison failed")
        return 1

    if args.profile:
        log_stage_summary()
    return 0
