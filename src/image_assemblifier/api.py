"""Public conversion API (delegates to application use-cases)."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from image_assemblifier.adapters.decoders import PillowImageDecoder
from image_assemblifier.adapters.sinks import FileArtifactSink, MemoryArtifactSink
from image_assemblifier.application.ports import PixelConverter
from image_assemblifier.application.results import OutputArtifact
from image_assemblifier.application.use_cases import (
    ConversionRequest,
    build_pipeline_settings,
    convert_image,
)
from image_assemblifier.types import ColumnsInput


def convert_image_file(
    image_path: Path,
    output_dir: Path,
    columns: ColumnsInput,
    converter: PixelConverter,
    aspect_correction: float = 0.43,
    resample: str = "bilinear",
    output_name: Optional[str] = None,
) -> Path:
    """Convert an image file and write the artifact into ``output_dir``."""
    settings = build_pipeline_settings(
        aspect_correction=aspect_correction,
        resample=resample,
    )
    sink = FileArtifactSink(output_dir, filename=output_name)
    outcome = convert_image(
        request=ConversionRequest(source=image_path, columns=columns),
        decoder=PillowImageDecoder(),
        converter=converter,
        sink=sink,
        settings=settings,
    )
    return sink.target_for(outcome.artifact)


def convert_image_bytes(
    data: bytes,
    columns: ColumnsInput,
    converter: PixelConverter,
    aspect_correction: float = 0.43,
    resample: str = "bilinear",
) -> OutputArtifact:
    """Convert in-memory image bytes and return the artifact."""
    settings = build_pipeline_settings(
        aspect_correction=aspect_correction,
        resample=resample,
    )
    sink = MemoryArtifactSink()
    outcome = convert_image(
        request=ConversionRequest(source=data, columns=columns),
        decoder=PillowImageDecoder(),
        converter=converter,
        sink=sink,
        settings=settings,
    )
    return outcome.artifact
