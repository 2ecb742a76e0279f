"""Raster value objects passed between pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from image_assemblifier.errors import ExtractionError

if TYPE_CHECKING:
    from PIL import Image

CHANNELS = 4


@dataclass(frozen=True)
class SourceImage:
    """Decoded raster with its natural dimensions."""

    image: Image.Image
    width: int
    height: int

    @classmethod
    def from_pil(cls, image: Image.Image) -> SourceImage:
        width, height = image.size
        return cls(image=image, width=width, height=height)


@dataclass(frozen=True)
class TargetGeometry:
    """Downscaled raster size; ``width`` always equals ``columns``."""

    columns: int
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width != self.columns:
            raise ExtractionError("target width must equal the column count.")
        if self.width <= 0 or self.height <= 0:
            raise ExtractionError(
                f"target geometry must be positive, got {self.width}x{self.height}."
            )

    @property
    def buffer_length(self) -> int:
        return self.width * self.height * CHANNELS


@dataclass(frozen=True)
class PixelBuffer:
    """Row-major RGBA bytes for a ``width x height`` raster."""

    data: bytes
    width: int
    height: int

    def __post_init__(self) -> None:
        expected = self.width * self.height * CHANNELS
        if len(self.data) != expected:
            raise ExtractionError(
                f"pixel buffer holds {len(self.data)} bytes, expected {expected}."
            )

    def __len__(self) -> int:
        return len(self.data)
