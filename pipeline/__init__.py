"""Pipeline module - orchestrates end-to-end page-aligned comparison."""
from pipeline.compare_pdfs import (
    ComparisonPipeline,
    PipelineConfig,
    PipelineMetrics,
    compare_pdfs,
)

__all__ = [
    "compare_pdfs",
    "ComparisonPipeline",
    "PipelineConfig",
    "PipelineMetrics",
]
