"""Pixel-difference primitives: count mismatched pixels between two equal-size rasters."""
from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict

import numpy as np

from utils.logging import logger

if TYPE_CHECKING:
    from PIL import Image


# (image_a, image_b, threshold, include_antialiasing) -> mismatched pixel count
PixelDiffFn = Callable[["Image.Image", "Image.Image", float, bool], int]


def _check_same_size(image_a: "Image.Image", image_b: "Image.Image") -> None:
    if image_a.size != image_b.size:
        raise ValueError(
            f"Pixel diff requires equal image sizes, got {image_a.size} and {image_b.size}"
        )


def pixelmatch_count(
    image_a: "Image.Image",
    image_b: "Image.Image",
    threshold: float,
    include_aa: bool,
) -> int:
    """
    Count mismatched pixels with the pixelmatch algorithm.

    ``threshold`` is pixelmatch's perceptual colour-distance sensitivity (0-1,
    smaller is stricter). Anti-aliased pixels are ignored unless
    ``include_aa`` is set.
    """
    _check_same_size(image_a, image_b)
    try:
        from pixelmatch.contrib.PIL import pixelmatch
    except ImportError as exc:
        raise RuntimeError(
            "pixelmatch is required for the default pixel diff. Install via `pip install pixelmatch`."
        ) from exc

    return int(
        pixelmatch(
            image_a.convert("RGBA"),
            image_b.convert("RGBA"),
            None,
            threshold=threshold,
            includeAA=include_aa,
        )
    )


def opencv_count(
    image_a: "Image.Image",
    image_b: "Image.Image",
    threshold: float,
    include_aa: bool,
) -> int:
    """
    Count mismatched pixels from a grayscale absolute difference.

    A pixel counts when its gray-level difference exceeds ``threshold * 255``.
    Without ``include_aa`` a 3x3 opening removes isolated edge pixels, which is
    where anti-aliasing differences show up.
    """
    _check_same_size(image_a, image_b)
    try:
        import cv2
    except ImportError as exc:
        raise RuntimeError(
            "OpenCV is required for the opencv pixel diff. Install via `pip install opencv-python`."
        ) from exc

    gray_a = np.asarray(image_a.convert("L"), dtype=np.uint8)
    gray_b = np.asarray(image_b.convert("L"), dtype=np.uint8)

    diff = cv2.absdiff(gray_a, gray_b)
    _, mask = cv2.threshold(diff, float(threshold) * 255.0, 255, cv2.THRESH_BINARY)

    if not include_aa:
        kernel = np.ones((3, 3), np.uint8)
        mask = cv2.morphologyEx(mask, cv2.MORPH_OPEN, kernel)

    return int(cv2.countNonZero(mask))


_BACKENDS: Dict[str, PixelDiffFn] = {
    "pixelmatch": pixelmatch_count,
    "opencv": opencv_count,
}


def available_backends() -> list[str]:
    return sorted(_BACKENDS)


def get_pixel_diff(name: str | None = None) -> PixelDiffFn:
    """Resolve a pixel-difference backend by name (defaults to the configured one)."""
    if name is None:
        from config.settings import settings

        name = settings.pixel_diff_backend

    key = name.strip().lower()
    if key not in _BACKENDS:
        raise ValueError(
            f"Unknown pixel diff backend {name!r}; expected one of {', '.join(available_backends())}"
        )
    logger.debug("Using pixel diff backend: %s", key)
    return _BACKENDS[key]
