"""Raster geometry and pixel extraction."""

from .extract import extract_pixels
from .models import PixelBuffer, SourceImage, TargetGeometry
from .resize import compute_geometry

__all__ = [
    "PixelBuffer",
    "SourceImage",
    "TargetGeometry",
    "compute_geometry",
    "extract_pixels",
]
