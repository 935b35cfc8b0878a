"""Configuration management for alignment defaults, rendering, and report export."""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Alignment defaults (one comparison run)
    alignment_pixel_threshold: float = Field(
        default=0.1,
        description="Pixel-mismatch sensitivity passed to the pixel-difference primitive (0.0-1.0)",
    )
    alignment_include_antialiasing: bool = Field(
        default=False,
        description="Count anti-aliased pixels as mismatches",
    )
    alignment_tolerance: int = Field(
        default=2,
        description="Page alignment tolerance (0-5). 0 pairs pages strictly by position",
    )
    alignment_scanned_mode: bool = Field(
        default=False,
        description="Treat documents as image-only: skip text extraction and text cost",
    )

    # Pixel difference
    pixel_diff_backend: str = Field(
        default="pixelmatch",
        description="Pixel-difference primitive: 'pixelmatch' (default) or 'opencv' (faster)",
    )

    # Rendering
    render_scale: float = Field(
        default=1.5,
        description="Scale factor for rasterizing PDF pages (1.0 = 72 DPI)",
    )

    # Report export
    diff_overlay_alpha: float = Field(
        default=0.1,
        description="Opacity of unchanged content in rendered diff images (0.0-1.0)",
    )
    report_jpeg_quality: int = Field(
        default=80,
        description="JPEG quality used for diff images in large PDF reports",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Default log level for the command line")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


def get_settings() -> Settings:
    """Return a cached settings instance."""
    return _get_settings()


@lru_cache()
def _get_settings() -> Settings:
    return Settings()


settings = get_settings()
