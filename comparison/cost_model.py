"""
Page dissimilarity scoring.

Two signals are combined into a single cost in [0, 1]:

- pixel cost: fraction of mismatched pixels inside the central content band
  of two downscaled page renders
- text cost: Jaccard distance between the pages' token sets

When both pages carry real text the text signal dominates; otherwise the
visual signal does. In scanned mode only the pixel cost is used.
"""
from __future__ import annotations

import math
from typing import Callable, Dict, Optional, Tuple

from PIL import Image

from comparison.models import AlignmentSettings, Page
from comparison.pixel_diff import PixelDiffFn, get_pixel_diff
from utils.text_normalization import normalize_text, tokenize


# Larger page dimension after downscaling; bounds the O(n*m) pairwise work.
DOWNSCALE_MAX_DIM = 420

# Fraction of page height dropped at top and bottom (headers, footers, page numbers).
CONTENT_BAND_MARGIN = 0.12

# A page is text-bearing when its normalized text is longer than this.
TEXT_BEARING_MIN_CHARS = 20

TEXT_WEIGHT_RICH = 0.75
TEXT_WEIGHT_SPARSE = 0.25

EMPTY_TEXT_COST = 0.5
ONE_SIDED_TEXT_COST = 1.0


# =============================================================================
# Image preparation
# =============================================================================

def downscale(image: Image.Image, max_dim: int = DOWNSCALE_MAX_DIM) -> Image.Image:
    """Shrink ``image`` so its larger side is at most ``max_dim``; never upscales."""
    width, height = image.size
    if width == 0 or height == 0:
        raise ValueError(f"Cannot score an empty page image of size {width}x{height}")
    scale = min(1.0, max_dim / max(width, height))
    if scale >= 1.0:
        return image
    new_size = (max(1, math.floor(width * scale)), max(1, math.floor(height * scale)))
    return image.resize(new_size, Image.Resampling.BILINEAR)


def content_band(
    image: Image.Image,
    top: float = CONTENT_BAND_MARGIN,
    bottom: float = CONTENT_BAND_MARGIN,
) -> Image.Image:
    """Crop to the central vertical band, excluding ``top``/``bottom`` fractions of the height."""
    width, height = image.size
    y = math.floor(height * top)
    band_height = max(1, math.floor(height * (1 - top - bottom)))
    return image.crop((0, y, width, y + band_height))


def crop_to_common_size(
    image_a: Image.Image, image_b: Image.Image
) -> Tuple[Image.Image, Image.Image]:
    """Crop both images from the top-left corner to their overlapping width and height."""
    width = min(image_a.size[0], image_b.size[0])
    height = min(image_a.size[1], image_b.size[1])
    box = (0, 0, width, height)
    return image_a.crop(box), image_b.crop(box)


# =============================================================================
# Costs
# =============================================================================

def pixel_cost(
    image_a: Image.Image,
    image_b: Image.Image,
    threshold: float,
    include_aa: bool,
    *,
    diff_fn: Optional[PixelDiffFn] = None,
) -> float:
    """Fraction of mismatched pixels in the common content band of two pages."""
    if diff_fn is None:
        diff_fn = get_pixel_diff()

    band_a = content_band(downscale(image_a))
    band_b = content_band(downscale(image_b))
    region_a, region_b = crop_to_common_size(band_a, band_b)

    width, height = region_a.size
    mismatched = diff_fn(region_a, region_b, threshold, include_aa)
    return min(1.0, max(0.0, mismatched / (width * height)))


def text_cost(text_a: Optional[str], text_b: Optional[str]) -> float:
    """
    Jaccard distance between the token sets of two texts.

    Two token-less texts give no signal (0.5); text on only one side counts as
    maximally different (1.0).
    """
    tokens_a = tokenize(text_a)
    tokens_b = tokenize(text_b)
    if not tokens_a and not tokens_b:
        return EMPTY_TEXT_COST
    if not tokens_a or not tokens_b:
        return ONE_SIDED_TEXT_COST

    union = len(tokens_a | tokens_b)
    return 1.0 - len(tokens_a & tokens_b) / union


def is_text_bearing(text: Optional[str]) -> bool:
    return len(normalize_text(text)) > TEXT_BEARING_MIN_CHARS


def combined_cost(
    page_a: Page,
    page_b: Page,
    settings: AlignmentSettings,
    *,
    diff_fn: Optional[PixelDiffFn] = None,
) -> float:
    """Weighted pixel/text dissimilarity of two pages, in [0, 1]."""
    p_cost = pixel_cost(
        page_a.image,
        page_b.image,
        settings.pixel_threshold,
        settings.include_antialiasing,
        diff_fn=diff_fn,
    )
    if settings.scanned_mode:
        return p_cost

    t_cost = text_cost(page_a.text, page_b.text)
    if is_text_bearing(page_a.text) and is_text_bearing(page_b.text):
        w_text = TEXT_WEIGHT_RICH
    else:
        w_text = TEXT_WEIGHT_SPARSE
    return w_text * t_cost + (1.0 - w_text) * p_cost


class CostModel:
    """Run-scoped binding of settings and a pixel-difference primitive."""

    def __init__(self, settings: AlignmentSettings, diff_fn: Optional[PixelDiffFn] = None):
        self.settings = settings
        self.diff_fn = diff_fn if diff_fn is not None else get_pixel_diff()

    def prepare(self, page: Page) -> Page:
        """Downscale a page once so repeated pair evaluations skip the resize."""
        return Page(index=page.index, image=downscale(page.image), text=page.text)

    def __call__(self, page_a: Page, page_b: Page) -> float:
        return combined_cost(page_a, page_b, self.settings, diff_fn=self.diff_fn)


class PairCostCache:
    """Read-through cache of pair costs keyed by ``(a_index, b_index)``; one per run."""

    def __init__(self, compute: Callable[[int, int], float]):
        self._compute = compute
        self._values: Dict[Tuple[int, int], float] = {}

    def get(self, a_index: int, b_index: int) -> float:
        key = (a_index, b_index)
        value = self._values.get(key)
        if value is None:
            value = self._compute(a_index, b_index)
            self._values[key] = value
        return value

    def __contains__(self, key: Tuple[int, int]) -> bool:
        return key in self._values

    @property
    def evaluations(self) -> int:
        return len(self._values)
