"""Application ports for clean architecture boundaries."""

from __future__ import annotations

from typing import Protocol

from image_assemblifier.application.results import ConversionResult, OutputArtifact
from image_assemblifier.imaging.models import SourceImage


class ImageDecoder(Protocol):
    """Decode raw file bytes into an in-memory raster."""

    def decode(self, data: bytes) -> SourceImage:
        """Decode bytes; raise ``ImageLoadError`` on failure."""


class PixelConverter(Protocol):
    """External conversion engine mapping RGBA pixels to an encoded payload."""

    def convert(self, pixels: bytes, width: int, height: int) -> ConversionResult:
        """Convert a ``width * height * 4`` byte RGBA buffer."""


class ArtifactSink(Protocol):
    """Receive the finished artifact (save, download, etc.)."""

    def save(self, artifact: OutputArtifact) -> None:
        """Persist or hand off the artifact."""
