#!/usr/bin/env python3
"""Example engine plugin emitting run-length encoded rows.

Load it with::

    image-assemblifier convert photo.png --columns 80 \
        --engine-module examples/rle_engine_plugin.py
"""

from __future__ import annotations

from image_assemblifier.application.results import ConversionResult, Failure, Success

MAX_PIXELS = 1 << 20


class RunLengthEngine:
    """Write one line per row as ``rrggbb*count`` runs."""

    name = "rle"

    def convert(self, pixels: bytes, width: int, height: int) -> ConversionResult:
        """Encode the RGBA buffer row by row; alpha is ignored."""
        if width * height > MAX_PIXELS:
            return Failure(message="Resulting image is too big!")
        lines: list[str] = []
        stride = width * 4
        for row in range(height):
            runs: list[list[object]] = []
            line = pixels[row * stride : (row + 1) * stride]
            for offset in range(0, stride, 4):
                color = line[offset : offset + 3].hex()
                if runs and runs[-1][0] == color:
                    runs[-1][1] += 1  # type: ignore[operator]
                else:
                    runs.append([color, 1])
            lines.append(" ".join(f"{color}*{count}" for color, count in runs))
        return Success(payload=("\n".join(lines) + "\n").encode("ascii"))


ENGINE = RunLengthEngine()
