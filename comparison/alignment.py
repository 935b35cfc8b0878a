"""
Page alignment between two document versions.

Pages are paired by a bounded-gap global sequence alignment (edit-distance
style dynamic programming) over pairwise page costs, so inserted, deleted
and shifted pages are detected instead of being compared index-for-index.

The single user-facing control is the tolerance (0-5). It decides how many
consecutive unmatched pages are accepted, how cheap skipping a page is, and
how hard poor matches are pushed towards being treated as gaps.
"""
from __future__ import annotations

import math
from typing import Callable, List, Optional, Sequence

import numpy as np

from comparison.cost_model import CostModel, PairCostCache
from comparison.models import (
    MAX_TOLERANCE,
    AlignmentParams,
    AlignmentResult,
    AlignmentSettings,
    AlignmentStep,
    DeleteA,
    EditScript,
    InsertB,
    Match,
    Page,
)
from comparison.pixel_diff import PixelDiffFn
from utils.logging import logger


# Back-pointer moves
_DIAG = 0
_UP = 1  # consume a page of A only (deletion)
_LEFT = 2  # consume a page of B only (insertion)

_GAP_PENALTY_BASE = 0.22
_GAP_PENALTY_STEP = 0.03
_BAD_MATCH_CUTOFF_BASE = 0.55
_BAD_MATCH_CUTOFF_STEP = 0.05
_BAD_MATCH_PENALTY_STEP = 0.04


def derive_params(tolerance: int) -> AlignmentParams:
    """
    Derive the DP parameters from the tolerance (clamped to 0-5).

    Higher tolerance gives longer allowed gap runs, cheaper gaps, a stricter
    cutoff for acceptable matches and a larger surcharge on poor ones.
    Tolerance 0 forbids gaps entirely.
    """
    mw = max(0, min(MAX_TOLERANCE, int(tolerance)))
    gap_penalty = math.inf if mw == 0 else _GAP_PENALTY_BASE - mw * _GAP_PENALTY_STEP
    return AlignmentParams(
        max_consecutive_gaps=mw,
        gap_penalty=gap_penalty,
        bad_match_cutoff=_BAD_MATCH_CUTOFF_BASE - mw * _BAD_MATCH_CUTOFF_STEP,
        bad_match_penalty=mw * _BAD_MATCH_PENALTY_STEP,
    )


def align_documents(
    doc_a: Sequence[Page],
    doc_b: Sequence[Page],
    settings: Optional[AlignmentSettings] = None,
    *,
    diff_fn: Optional[PixelDiffFn] = None,
) -> AlignmentResult:
    """
    Align the pages of two documents.

    Args:
        doc_a: Pages of the original document, ``doc_a[k].index == k``
        doc_b: Pages of the updated document, ``doc_b[k].index == k``
        settings: Run settings. If None, built from the application settings.
        diff_fn: Pixel-difference primitive. If None, the configured backend.

    Returns:
        AlignmentResult with the edit script, the derived parameters and the
        number of page pairs that were scored.

    Raises:
        ValueError: if a page index disagrees with its position.
    """
    if settings is None:
        settings = AlignmentSettings.from_settings()

    _check_indices(doc_a, "A")
    _check_indices(doc_b, "B")

    tolerance = settings.effective_tolerance
    params = derive_params(tolerance)
    n, m = len(doc_a), len(doc_b)
    logger.info("Aligning %d pages -> %d pages (tolerance=%d)", n, m, tolerance)
    logger.debug(
        "Alignment params: max_gaps=%d gap_penalty=%s cutoff=%.3f bad_penalty=%.3f",
        params.max_consecutive_gaps,
        params.gap_penalty,
        params.bad_match_cutoff,
        params.bad_match_penalty,
    )

    model = CostModel(settings, diff_fn)
    pages_a = [model.prepare(page) for page in doc_a]
    pages_b = [model.prepare(page) for page in doc_b]
    cache = PairCostCache(lambda i, j: model(pages_a[i], pages_b[j]))

    if tolerance == 0:
        steps = _align_by_position(n, m, cache.get)
    else:
        steps = _align_dp(n, m, params, cache.get)

    script = EditScript(steps)
    logger.info(
        "Alignment complete: %d matches, %d deletions, %d insertions (%d pairs scored)",
        len(script.matches),
        len(script.deletions),
        len(script.insertions),
        cache.evaluations,
    )
    return AlignmentResult(edit_script=script, params=params, evaluated_pairs=cache.evaluations)


def _check_indices(pages: Sequence[Page], label: str) -> None:
    for position, page in enumerate(pages):
        if page.index != position:
            raise ValueError(
                f"Document {label}: page at position {position} has index {page.index}"
            )


def _align_by_position(
    n: int, m: int, cost: Callable[[int, int], float]
) -> List[AlignmentStep]:
    """Pair pages strictly by position; the longer document's tail becomes gaps."""
    count = min(n, m)
    steps: List[AlignmentStep] = [Match(i, i, cost(i, i)) for i in range(count)]
    steps.extend(DeleteA(i) for i in range(count, n))
    steps.extend(InsertB(j) for j in range(count, m))
    return steps


def _align_dp(
    n: int,
    m: int,
    params: AlignmentParams,
    cost: Callable[[int, int], float],
) -> List[AlignmentStep]:
    """Bounded-gap global alignment; ties prefer diagonal, then up, then left."""
    max_gaps = params.max_consecutive_gaps
    gap = params.gap_penalty

    dp = np.full((n + 1, m + 1), np.inf, dtype=np.float64)
    back = np.zeros((n + 1, m + 1), dtype=np.int8)
    run_a = np.zeros((n + 1, m + 1), dtype=np.int32)
    run_b = np.zeros((n + 1, m + 1), dtype=np.int32)

    dp[0, 0] = 0.0
    for i in range(1, n + 1):
        dp[i, 0] = dp[i - 1, 0] + gap
        back[i, 0] = _UP
        run_a[i, 0] = run_a[i - 1, 0] + 1
    for j in range(1, m + 1):
        dp[0, j] = dp[0, j - 1] + gap
        back[0, j] = _LEFT
        run_b[0, j] = run_b[0, j - 1] + 1

    for i in range(1, n + 1):
        for j in range(1, m + 1):
            match_cost = cost(i - 1, j - 1)
            if match_cost > params.bad_match_cutoff:
                match_cost += params.bad_match_penalty
            c_diag = dp[i - 1, j - 1] + match_cost

            c_up = dp[i - 1, j] + gap if run_a[i - 1, j] < max_gaps else math.inf
            c_left = dp[i, j - 1] + gap if run_b[i, j - 1] < max_gaps else math.inf

            if c_diag <= c_up and c_diag <= c_left:
                dp[i, j] = c_diag
                back[i, j] = _DIAG
            elif c_up <= c_left:
                dp[i, j] = c_up
                back[i, j] = _UP
                run_a[i, j] = run_a[i - 1, j] + 1
            else:
                dp[i, j] = c_left
                back[i, j] = _LEFT
                run_b[i, j] = run_b[i, j - 1] + 1

    steps: List[AlignmentStep] = []
    i, j = n, m
    while i > 0 or j > 0:
        move = back[i, j]
        if move == _DIAG:
            # Raw cost, without the bad-match surcharge.
            steps.append(Match(i - 1, j - 1, cost(i - 1, j - 1)))
            i -= 1
            j -= 1
        elif move == _UP:
            steps.append(DeleteA(i - 1))
            i -= 1
        else:
            steps.append(InsertB(j - 1))
            j -= 1
    steps.reverse()
    return steps
