from __future__ import annotations

import logging

import pytest

from utils.logging import LOGGER_NAME
from utils.performance import StageTiming, log_stage_summary, recorded_stages, reset_stages, timed_stage


@pytest.fixture(autouse=True)
def _clean_stages():
    reset_stages()
    yield
    reset_stages()


def test_timed_stage_records_duration_and_pages():
    with timed_stage("load") as timing:
        timing.pages = 4

    stages = recorded_stages()
    assert len(stages) == 1
    assert stages[0].stage == "load"
    assert stages[0].pages == 4
    assert stages[0].seconds >= 0.0


def test_stage_is_recorded_when_block_raises():
    with pytest.raises(RuntimeError):
        with timed_stage("align"):
            raise RuntimeError("boom")
    assert [t.stage for t in recorded_stages()] == ["align"]


def test_seconds_per_page():
    assert StageTiming("align", seconds=2.0, pages=4).seconds_per_page == 0.5
    assert StageTiming("export", seconds=2.0).seconds_per_page is None


def test_summary_logs_each_stage(caplog):
    with timed_stage("load", pages=2):
        pass
    with timed_stage("export"):
        pass

    with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
        log_stage_summary()

    text = caplog.text
    assert "load" in text and "over 2 pages" in text
    assert "export" in text
    assert "total" in text


def test_summary_without_stages(caplog):
    with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
        log_stage_summary()
    assert "No stage timings recorded" in caplog.text
