"""Plugin protocol for named conversion engines."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from image_assemblifier.application.results import ConversionResult


@runtime_checkable
class EnginePlugin(Protocol):
    """Protocol implemented by engine plugins."""

    name: str

    def convert(self, pixels: bytes, width: int, height: int) -> ConversionResult:
        """Convert an RGBA buffer into an encoded payload.

        Parameters
        ----------
        pixels : bytes
            Row-major RGBA bytes, ``width * height * 4`` long.
        width : int
            Raster width in pixels.
        height : int
            Raster height in pixels.

        Returns
        -------
        ConversionResult
            ``Success`` with the payload or ``Failure`` with a diagnostic.
        """
