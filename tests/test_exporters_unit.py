from __future__ import annotations

import json

import fitz
import pytest
from PIL import Image

from comparison.models import (
    AlignmentResult,
    AlignmentSettings,
    ComparisonResult,
    DeleteA,
    Document,
    EditScript,
    InsertB,
    Match,
    Page,
)
from comparison.alignment import derive_params
from export import build_payload, export_json, export_pdf


def _doc(name: str, colors: list[str]) -> Document:
    return Document(
        name=name,
        pages=[Page(i, Image.new("RGB", (40, 56), color), f"page {i}") for i, color in enumerate(colors)],
    )


@pytest.fixture
def result() -> ComparisonResult:
    doc_a = _doc("old.pdf", ["white", "white", "gray"])
    doc_b = _doc("new.pdf", ["white", "black", "white"])
    script = EditScript([Match(0, 0, 0.0), InsertB(1), Match(1, 2, 0.25), DeleteA(2)])
    settings = AlignmentSettings(tolerance=1)
    return ComparisonResult(
        doc_a=doc_a,
        doc_b=doc_b,
        settings=settings,
        alignment=AlignmentResult(edit_script=script, params=derive_params(1), evaluated_pairs=9),
        render_scale=1.5,
    )


def test_build_payload(result):
    payload = build_payload(result)
    assert payload["metadata"]["doc_a"] == "old.pdf"
    assert payload["metadata"]["pages_b"] == 3
    assert payload["settings"]["tolerance"] == 1
    assert payload["params"]["max_consecutive_gaps"] == 1
    assert payload["evaluated_pairs"] == 9
    assert payload["summary"] == {"matches": 2, "deletions": 1, "insertions": 1}
    assert payload["steps"][2] == {
        "type": "match",
        "a_index": 1,
        "b_index": 2,
        "cost": 0.25,
        "similarity": 75.0,
    }


def test_export_json_writes_valid_json(result, tmp_path):
    out = export_json(result, tmp_path / "nested" / "alignment.json")
    data = json.loads(out.read_text(encoding="utf-8"))
    assert [s["type"] for s in data["steps"]] == ["match", "insert", "match", "delete"]


def test_export_json_tolerance_zero_gap_penalty_is_null(result, tmp_path):
    result.alignment.params = derive_params(0)
    data = json.loads(export_json(result, tmp_path / "a.json").read_text(encoding="utf-8"))
    assert data["params"]["gap_penalty"] is None


@pytest.mark.parametrize("large_report", [False, True])
def test_export_pdf_one_page_per_step(result, tmp_path, large_report):
    out = export_pdf(result, tmp_path / "report.pdf", large_report=large_report)
    assert out.exists()

    with fitz.open(out) as doc:
        assert len(doc) == 1 + len(result.steps)
        cover = doc[0].get_text()
        assert "PDF Comparison Report" in cover
        assert "old.pdf vs new.pdf" in cover

        assert "Similarity: 100.00%" in doc[1].get_text()
        assert len(doc[1].get_images()) == 1

        assert "Inserted page in new.pdf: Page 2" in doc[2].get_text()
        assert "Similarity: 75.00%" in doc[3].get_text()
        assert "Removed from new.pdf (exists in old.pdf): Page 3" in doc[4].get_text()
        assert doc[4].get_images() == []
