"""Export alignment results as JSON."""
from __future__ import annotations

import json
from pathlib import Path

from comparison.models import ComparisonResult
from utils.logging import logger


def build_payload(result: ComparisonResult) -> dict:
    """Serializable view of a comparison: inputs, derived parameters and the edit script."""
    script = result.alignment.edit_script
    return {
        "metadata": {
            "doc_a": result.doc_a.name,
            "doc_b": result.doc_b.name,
            "pages_a": len(result.doc_a),
            "pages_b": len(result.doc_b),
            "render_scale": result.render_scale,
        },
        "settings": result.settings.to_dict(),
        "params": result.alignment.params.to_dict(),
        "evaluated_pairs": result.alignment.evaluated_pairs,
        "summary": script.summary(),
        # Page indices are 0-based; reports show them 1-based.
        "steps": script.to_dict(),
    }


def export_json(result: ComparisonResult, output_path: str | Path) -> Path:
    """Write the comparison result to ``output_path`` as UTF-8 JSON."""
    output = Path(output_path)
    logger.info("Writing JSON alignment to %s", output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(build_payload(result), ensure_ascii=False, indent=2), encoding="utf-8")
    return output
