"""Target geometry computation for the downscaled raster."""

from __future__ import annotations

import math

from image_assemblifier.application.options import (
    DEFAULT_ASPECT_CORRECTION,
    DEFAULT_MAX_PIXELS,
)
from image_assemblifier.errors import ExtractionError
from image_assemblifier.imaging.models import TargetGeometry


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return math.floor(value + 0.5)


def compute_geometry(
    source_width: int,
    source_height: int,
    columns: int,
    aspect_correction: float = DEFAULT_ASPECT_CORRECTION,
    max_pixels: int = DEFAULT_MAX_PIXELS,
) -> TargetGeometry:
    """Compute the target raster size for a column count.

    Parameters
    ----------
    source_width : int
        Natural width of the decoded image.
    source_height : int
        Natural height of the decoded image.
    columns : int
        Requested number of output columns; becomes the target width.
    aspect_correction : float, default=0.43
        Multiplier compensating for the non-square output glyphs.
    max_pixels : int, default=16777216
        Largest ``width * height`` the raster may have.

    Returns
    -------
    TargetGeometry
        Geometry with ``height`` floored at 1.

    Raises
    ------
    ExtractionError
        If any input is non-positive, the correction is not finite, or the
        raster would exceed ``max_pixels``.
    """
    if source_width <= 0 or source_height <= 0:
        raise ExtractionError(
            f"source dimensions must be positive, got {source_width}x{source_height}."
        )
    if columns <= 0:
        raise ExtractionError(f"columns must be positive, got {columns}.")
    if not math.isfinite(aspect_correction) or aspect_correction <= 0:
        raise ExtractionError(
            f"aspect correction must be a positive number, got {aspect_correction}."
        )
    # height is at least 1, so columns alone bounds the area from below.
    if columns > max_pixels:
        raise ExtractionError(
            f"{columns} columns exceed the raster limit of {max_pixels} pixels."
        )

    height = max(
        1, round_half_up((source_height / source_width) * columns * aspect_correction)
    )
    if columns * height > max_pixels:
        raise ExtractionError(
            f"target raster {columns}x{height} exceeds the limit of {max_pixels} pixels."
        )
    return TargetGeometry(columns=columns, width=columns, height=height)
