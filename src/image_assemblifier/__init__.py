"""Top-level API for image-to-text-artifact conversion."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from image_assemblifier.types import ColumnsInput

if TYPE_CHECKING:
    from image_assemblifier.application.ports import PixelConverter
    from image_assemblifier.application.results import OutputArtifact

__version__ = "0.1.0"


def convert_image_file(
    image_path: Path,
    output_dir: Path | None = None,
    *,
    columns: ColumnsInput,
    converter: PixelConverter,
    aspect_correction: float = 0.43,
    resample: str = "bilinear",
    output_name: str | None = None,
) -> Path:
    """Convert an image file into a downloadable text artifact.

    Parameters
    ----------
    image_path : Path
        Source raster file (any format Pillow can decode).
    output_dir : Path | None, default=None
        Directory receiving the artifact. Defaults to the image's directory.
    columns : str | int
        Target column count; strings must be digits only.
    converter : PixelConverter
        Conversion engine receiving the RGBA buffer.
    aspect_correction : float, default=0.43
        Glyph aspect correction applied to the derived height.
    resample : str, default="bilinear"
        Pillow resampling filter name.
    output_name : str | None, default=None
        File name override; defaults to ``generated.s``.

    Returns
    -------
    Path
        Path of the written artifact.
    """
    from .api import convert_image_file as _impl

    return _impl(
        image_path=image_path,
        output_dir=output_dir or image_path.parent,
        columns=columns,
        converter=converter,
        aspect_correction=aspect_correction,
        resample=resample,
        output_name=output_name,
    )


def convert_image_bytes(
    data: bytes,
    *,
    columns: ColumnsInput,
    converter: PixelConverter,
    aspect_correction: float = 0.43,
    resample: str = "bilinear",
) -> OutputArtifact:
    """Convert in-memory image bytes and return the artifact."""
    from .api import convert_image_bytes as _impl

    return _impl(
        data=data,
        columns=columns,
        converter=converter,
        aspect_correction=aspect_correction,
        resample=resample,
    )


__all__ = ["__version__", "convert_image_bytes", "convert_image_file"]
