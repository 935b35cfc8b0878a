"""Stage timings for the comparison pipeline (load, align, export)."""
from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, List, Optional

from utils.logging import logger


@dataclass
class StageTiming:
    stage: str
    seconds: float = 0.0
    pages: int = 0

    @property
    def seconds_per_page(self) -> Optional[float]:
        return self.seconds / self.pages if self.pages else None


_stages: List[StageTiming] = []


@contextmanager
def timed_stage(stage: str, pages: int = 0) -> Generator[StageTiming, None, None]:
    """Time a pipeline stage; ``pages`` may be filled in inside the block."""
    timing = StageTiming(stage=stage, pages=pages)
    start = time.perf_counter()
    try:
        yield timing
    finally:
        timing.seconds = time.perf_counter() - start
        _stages.append(timing)
        logger.debug("Stage %s took %.3fs", stage, timing.seconds)


def recorded_stages() -> List[StageTiming]:
    return list(_stages)


def reset_stages() -> None:
    _stages.clear()


def log_stage_summary() -> None:
    """Log every recorded stage with its share of the total and per-page cost."""
    if not _stages:
        logger.info("No stage timings recorded")
        return

    total = sum(t.seconds for t in _stages)
    logger.info("Stage timings:")
    for timing in _stages:
        share = timing.seconds / total * 100 if total > 0 else 0.0
        per_page = timing.seconds_per_page
        if per_page is None:
            logger.info("  %-6s %.3fs (%.1f%%)", timing.stage, timing.seconds, share)
        else:
            logger.info(
                "  %-6s %.3fs (%.1f%%, %.3fs/page over %d pages)",
                timing.stage,
                timing.seconds,
                share,
                per_page,
                timing.pages,
            )
    logger.info("  total  %.3fs", total)
