"""Rasterize a decoded image into an RGBA pixel buffer."""

from __future__ import annotations

from PIL import Image

from image_assemblifier.errors import ExtractionError
from image_assemblifier.imaging.models import PixelBuffer, SourceImage, TargetGeometry
from image_assemblifier.types import ResampleKind

_RESAMPLE_FILTERS: dict[str, Image.Resampling] = {
    "nearest": Image.Resampling.NEAREST,
    "bilinear": Image.Resampling.BILINEAR,
    "bicubic": Image.Resampling.BICUBIC,
    "lanczos": Image.Resampling.LANCZOS,
}


def extract_pixels(
    source: SourceImage | None,
    geometry: TargetGeometry,
    resample: ResampleKind = "bilinear",
) -> PixelBuffer:
    """Resample ``source`` onto a ``geometry`` sized RGBA raster.

    Raises
    ------
    ExtractionError
        If there is no decoded image, the geometry is not positive, or
        Pillow fails while resampling (including running out of memory).
    """
    if source is None or source.image is None:
        raise ExtractionError("no decoded image to extract pixels from.")
    if geometry.width <= 0 or geometry.height <= 0:
        raise ExtractionError(
            f"target geometry must be positive, got {geometry.width}x{geometry.height}."
        )
    try:
        resample_filter = _RESAMPLE_FILTERS[resample]
    except KeyError as exc:
        raise ExtractionError(f"unknown resample filter '{resample}'.") from exc

    try:
        rgba = source.image
        if rgba.mode != "RGBA":
            rgba = rgba.convert("RGBA")
        surface = rgba.resize((geometry.width, geometry.height), resample_filter)
        data = surface.tobytes()
    except (OSError, ValueError, OverflowError, MemoryError) as exc:
        raise ExtractionError(f"failed to rasterize image: {exc}") from exc

    return PixelBuffer(data=data, width=geometry.width, height=geometry.height)
