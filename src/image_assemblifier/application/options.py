"""Typed option objects shared across pipeline use-cases."""

from __future__ import annotations

import os
from dataclasses import dataclass

from image_assemblifier.types import ResampleKind

DEFAULT_ASPECT_CORRECTION = 0.43
DEFAULT_ARTIFACT_FILENAME = "generated.s"
# Upper bound on the downscaled raster, in pixels (4096x4096).
DEFAULT_MAX_PIXELS = 4096 * 4096
ARTIFACT_CONTENT_TYPE = "text/plain;charset=utf-8"

ASPECT_CORRECTION_ENV = "IMAGE_ASSEMBLIFIER_ASPECT_CORRECTION"
RESAMPLE_ENV = "IMAGE_ASSEMBLIFIER_RESAMPLE"
MAX_PIXELS_ENV = "IMAGE_ASSEMBLIFIER_MAX_PIXELS"


@dataclass(frozen=True)
class PipelineSettings:
    """Tuning parameters for one pipeline instance."""

    aspect_correction: float = DEFAULT_ASPECT_CORRECTION
    resample: ResampleKind = "bilinear"
    artifact_filename: str = DEFAULT_ARTIFACT_FILENAME
    max_pixels: int = DEFAULT_MAX_PIXELS

    @classmethod
    def from_env(cls) -> PipelineSettings:
        """Build settings from environment overrides, validated."""
        from image_assemblifier.application.use_cases import build_pipeline_settings

        raw_aspect = os.getenv(ASPECT_CORRECTION_ENV)
        raw_resample = os.getenv(RESAMPLE_ENV)
        raw_max_pixels = os.getenv(MAX_PIXELS_ENV)
        return build_pipeline_settings(
            aspect_correction=(
                DEFAULT_ASPECT_CORRECTION if raw_aspect is None else raw_aspect
            ),
            resample=raw_resample or "bilinear",
            max_pixels=DEFAULT_MAX_PIXELS if raw_max_pixels is None else raw_max_pixels,
        )
