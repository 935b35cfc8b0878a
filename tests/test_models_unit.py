from __future__ import annotations

import math

import pytest
from PIL import Image

from comparison.models import (
    AlignmentParams,
    AlignmentSettings,
    DeleteA,
    Document,
    EditScript,
    InsertB,
    Match,
    Page,
)


def _page(index: int, text: str = "") -> Page:
    return Page(index=index, image=Image.new("RGB", (10, 10), "white"), text=text)


def test_document_sequence_protocol():
    doc = Document(name="a.pdf", pages=[_page(0), _page(1)])
    assert len(doc) == 2
    assert doc[1].index == 1
    assert [p.index for p in doc] == [0, 1]
    assert doc[0].size == (10, 10)


def test_document_rejects_out_of_order_pages():
    with pytest.raises(ValueError, match="position 0 has index 1"):
        Document(name="a.pdf", pages=[_page(1), _page(0)])


def test_page_is_immutable():
    page = _page(0, "text")
    with pytest.raises(AttributeError):
        page.index = 3  # type: ignore[misc]


@pytest.mark.parametrize(
    "kwargs,message",
    [
        ({"tolerance": -1}, "tolerance must be between"),
        ({"tolerance": 1.5}, "tolerance must be an integer"),
        ({"tolerance": True}, "tolerance must be an integer"),
        ({"pixel_threshold": 1.5}, "pixel_threshold"),
        ({"pixel_threshold": -0.1}, "pixel_threshold"),
    ],
)
def test_alignment_settings_preconditions(kwargs, message):
    with pytest.raises(ValueError, match=message):
        AlignmentSettings(**kwargs)


def test_alignment_settings_clamps_high_tolerance():
    assert AlignmentSettings(tolerance=7).effective_tolerance == 5
    assert AlignmentSettings(tolerance=3).effective_tolerance == 3


def test_alignment_settings_from_config(monkeypatch):
    from config.settings import settings

    monkeypatch.setattr(settings, "alignment_tolerance", 4)
    monkeypatch.setattr(settings, "alignment_scanned_mode", True)

    run = AlignmentSettings.from_settings(pixel_threshold=0.3, include_antialiasing=None)
    assert run.tolerance == 4
    assert run.scanned_mode is True
    assert run.pixel_threshold == 0.3
    assert run.include_antialiasing is settings.alignment_include_antialiasing


def test_match_similarity_percentage():
    assert Match(0, 0, 0.0).similarity == 100.0
    assert Match(0, 0, 0.1234).similarity == pytest.approx(87.66)
    assert Match(0, 0, 1.0).similarity == 0.0
    assert Match(0, 0, 1.3).similarity == 0.0


def test_step_kinds_and_dicts():
    assert Match(1, 2, 0.5).kind == "match"
    assert DeleteA(3).kind == "delete"
    assert InsertB(4).kind == "insert"
    assert Match(1, 2, 0.5).to_dict() == {
        "type": "match",
        "a_index": 1,
        "b_index": 2,
        "cost": 0.5,
        "similarity": 50.0,
    }
    assert DeleteA(3).to_dict() == {"type": "delete", "a_index": 3}
    assert InsertB(4).to_dict() == {"type": "insert", "b_index": 4}


def test_edit_script_views():
    script = EditScript([Match(0, 0, 0.0), InsertB(1), Match(1, 2, 0.2), DeleteA(2)])
    assert len(script) == 4
    assert script[1] == InsertB(1)
    assert [m.b_index for m in script.matches] == [0, 2]
    assert script.insertions == [InsertB(1)]
    assert script.deletions == [DeleteA(2)]
    assert script.summary() == {"matches": 2, "deletions": 1, "insertions": 1}
    assert [d["type"] for d in script.to_dict()] == ["match", "insert", "match", "delete"]


def test_alignment_params_to_dict_has_no_infinity():
    params = AlignmentParams(0, math.inf, 0.55, 0.0)
    assert params.to_dict()["gap_penalty"] is None
    assert AlignmentParams(1, 0.188, 0.5, 0.04).to_dict()["gap_penalty"] == 0.188
