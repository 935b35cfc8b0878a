"""
Main orchestrator: end-to-end page-aligned PDF comparison.

Provides a single entrypoint that:
1. Renders both PDFs to page images (and extracts text unless scanned)
2. Aligns pages with the bounded-gap aligner
3. Returns a ComparisonResult that the caller hands to exporters
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from comparison.alignment import align_documents
from comparison.models import AlignmentResult, AlignmentSettings, ComparisonResult, Document
from comparison.pixel_diff import PixelDiffFn, get_pixel_diff
from extraction.pdf_loader import load_document
from utils.logging import logger
from utils.performance import timed_stage


@dataclass
class PipelineConfig:
    """Configuration for the comparison pipeline (everything except per-run alignment settings)."""

    render_scale: Optional[float] = None  # None = use settings default
    pixel_diff_backend: Optional[str] = None  # None = use settings default


@dataclass
class PipelineMetrics:
    pages_a: int = 0
    pages_b: int = 0
    load_seconds: float = 0.0
    align_seconds: float = 0.0
    evaluated_pairs: int = 0

    @property
    def total_seconds(self) -> float:
        return self.load_seconds + self.align_seconds

    def to_dict(self) -> dict:
        return {
            "pages_a": self.pages_a,
            "pages_b": self.pages_b,
            "load_seconds": round(self.load_seconds, 3),
            "align_seconds": round(self.align_seconds, 3),
            "total_seconds": round(self.total_seconds, 3),
            "evaluated_pairs": self.evaluated_pairs,
        }


class ComparisonPipeline:
    """
    End-to-end document comparison pipeline.

    Usage:
        pipeline = ComparisonPipeline(config)
        result = pipeline.compare(pdf_a, pdf_b, settings)

        # Or step-by-step:
        doc_a = pipeline.load(pdf_a, settings)
        doc_b = pipeline.load(pdf_b, settings)
        alignment = pipeline.align(doc_a, doc_b, settings)
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        *,
        diff_fn: Optional[PixelDiffFn] = None,
    ):
        self.config = config or PipelineConfig()
        self.metrics = PipelineMetrics()
        self._diff_fn = diff_fn

    @property
    def render_scale(self) -> float:
        if self.config.render_scale is not None:
            return self.config.render_scale
        from config.settings import settings

        return settings.render_scale

    def load(self, pdf_path: str | Path, settings: AlignmentSettings) -> Document:
        return load_document(
            pdf_path,
            render_scale=self.render_scale,
            extract_text=not settings.scanned_mode,
        )

    def align(self, doc_a: Document, doc_b: Document, settings: AlignmentSettings) -> AlignmentResult:
        diff_fn = self._diff_fn or get_pixel_diff(self.config.pixel_diff_backend)
        return align_documents(doc_a, doc_b, settings, diff_fn=diff_fn)

    def compare(
        self,
        pdf_a: str | Path,
        pdf_b: str | Path,
        settings: Optional[AlignmentSettings] = None,
    ) -> ComparisonResult:
        """
        Full end-to-end comparison of two PDF documents.

        Args:
            pdf_a: Path to the original PDF
            pdf_b: Path to the updated PDF
            settings: Alignment settings. If None, built from the application settings.

        Returns:
            ComparisonResult holding both documents, the settings and the alignment
        """
        if settings is None:
            settings = AlignmentSettings.from_settings()

        logger.info("=== Starting comparison pipeline ===")
        logger.info("Doc A: %s", pdf_a)
        logger.info("Doc B: %s", pdf_b)

        with timed_stage("load") as load_timing:
            doc_a = self.load(pdf_a, settings)
            doc_b = self.load(pdf_b, settings)
            load_timing.pages = len(doc_a) + len(doc_b)

        with timed_stage("align", pages=len(doc_a) + len(doc_b)) as align_timing:
            alignment = self.align(doc_a, doc_b, settings)

        self.metrics = PipelineMetrics(
            pages_a=len(doc_a),
            pages_b=len(doc_b),
            load_seconds=load_timing.seconds,
            align_seconds=align_timing.seconds,
            evaluated_pairs=alignment.evaluated_pairs,
        )
        logger.info("=== Comparison complete in %.2fs ===", self.metrics.total_seconds)

        return ComparisonResult(
            doc_a=doc_a,
            doc_b=doc_b,
            settings=settings,
            alignment=alignment,
            render_scale=self.render_scale,
        )


def compare_pdfs(
    pdf_a: str | Path,
    pdf_b: str | Path,
    settings: Optional[AlignmentSettings] = None,
    *,
    render_scale: Optional[float] = None,
    pixel_diff_backend: Optional[str] = None,
) -> ComparisonResult:
    """
    Compare two PDF documents page by page.

    Example:
        from comparison.models import AlignmentSettings
        from pipeline import compare_pdfs

        result = compare_pdfs("v1.pdf", "v2.pdf", AlignmentSettings(tolerance=3))
        for step in result.steps:
            print(step)
    """
    config = PipelineConfig(render_scale=render_scale, pixel_diff_backend=pixel_diff_backend)
    return ComparisonPipeline(config).compare(pdf_a, pdf_b, settings)
