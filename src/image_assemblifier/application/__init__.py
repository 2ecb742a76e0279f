"""Application-layer use-cases, ports and result objects."""

from __future__ import annotations

from image_assemblifier.application.options import PipelineSettings
from image_assemblifier.application.ports import (
    ArtifactSink,
    ImageDecoder,
    PixelConverter,
)
from image_assemblifier.application.results import (
    ConversionResult,
    Failure,
    OutputArtifact,
    PipelineOutcome,
    PipelineState,
    Success,
)


def build_pipeline_settings(
    *,
    aspect_correction: float | str = 0.43,
    resample: str = "bilinear",
    artifact_filename: str = "generated.s",
    max_pixels: int | str = 4096 * 4096,
) -> PipelineSettings:
    """Build typed pipeline settings via lazy use-case import."""
    from image_assemblifier.application.use_cases import build_pipeline_settings as _impl

    return _impl(
        aspect_correction=aspect_correction,
        resample=resample,
        artifact_filename=artifact_filename,
        max_pixels=max_pixels,
    )


__all__ = [
    "ArtifactSink",
    "ConversionResult",
    "Failure",
    "ImageDecoder",
    "OutputArtifact",
    "PipelineOutcome",
    "PipelineSettings",
    "PipelineState",
    "PixelConverter",
    "Success",
    "build_pipeline_settings",
]
