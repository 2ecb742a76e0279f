"""Shared type aliases for pipeline modules."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, TypeAlias

ResampleKind: TypeAlias = Literal["nearest", "bilinear", "bicubic", "lanczos"]
ImageSourceLike: TypeAlias = Path | bytes
ColumnsInput: TypeAlias = str | int
