"""Diff image rendering for matched page pairs."""
from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Tuple

from PIL import Image

from comparison.cost_model import crop_to_common_size
from utils.logging import logger


DIFF_COLOR: Tuple[int, int, int] = (255, 0, 0)


@dataclass
class DiffImage:
    image: Image.Image
    diff_count: int
    width: int
    height: int

    def to_bytes(self, fmt: str = "png", quality: int = 95) -> bytes:
        """Encode the diff image; ``quality`` only applies to JPEG."""
        buffer = io.BytesIO()
        if fmt.lower() in ("jpg", "jpeg"):
            self.image.convert("RGB").save(buffer, format="JPEG", quality=quality)
        else:
            self.image.save(buffer, format="PNG")
        return buffer.getvalue()


def render_diff(
    image_a: Image.Image,
    image_b: Image.Image,
    threshold: float,
    include_aa: bool,
    alpha: float | None = None,
) -> DiffImage:
    """
    Render a full-page diff of two pages over their common area.

    Mismatched pixels are painted red; unchanged content is shown faded by
    ``alpha``. Unlike the alignment cost, the whole page is compared, headers
    and footers included.
    """
    if alpha is None:
        from config.settings import settings

        alpha = settings.diff_overlay_alpha

    try:
        from pixelmatch.contrib.PIL import pixelmatch
    except ImportError as exc:
        raise RuntimeError(
            "pixelmatch is required for diff rendering. Install via `pip install pixelmatch`."
        ) from exc

    region_a, region_b = crop_to_common_size(image_a.convert("RGBA"), image_b.convert("RGBA"))
    width, height = region_a.size
    output = Image.new("RGBA", (width, height))

    diff_count = pixelmatch(
        region_a,
        region_b,
        output,
        threshold=threshold,
        includeAA=include_aa,
        alpha=alpha,
        diff_color=DIFF_COLOR,
    )
    logger.debug("Rendered diff %dx%d with %d mismatched pixels", width, height, diff_count)
    return DiffImage(image=output, diff_count=int(diff_count), width=width, height=height)
