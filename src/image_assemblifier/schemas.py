"""Pydantic schemas for runtime validation of pipeline inputs."""

from __future__ import annotations

import math
import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

COLUMNS_PATTERN = re.compile(r"^[0-9]+$")


class ColumnsConfig(BaseModel):
    """Validated column count taken from user input."""

    model_config = ConfigDict(extra="forbid")

    columns: int = Field(gt=0)

    @field_validator("columns", mode="before")
    @classmethod
    def _validate_digits(cls, value: object) -> object:
        if isinstance(value, bool):
            raise ValueError("columns must be an integer, not a boolean.")
        if isinstance(value, str) and not COLUMNS_PATTERN.fullmatch(value):
            raise ValueError("columns must contain digits only.")
        if isinstance(value, str):
            return int(value)
        if not isinstance(value, int):
            raise ValueError("columns must be a digit string or an integer.")
        return value


class PipelineSettingsConfig(BaseModel):
    """Validated pipeline tuning parameters."""

    model_config = ConfigDict(extra="forbid")

    aspect_correction: float = Field(default=0.43, gt=0.0)
    resample: Literal["nearest", "bilinear", "bicubic", "lanczos"] = "bilinear"
    artifact_filename: str = "generated.s"
    max_pixels: int = Field(default=4096 * 4096, gt=0)

    @field_validator("aspect_correction")
    @classmethod
    def _validate_finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("aspect_correction must be finite.")
        return value

    @field_validator("artifact_filename")
    @classmethod
    def _validate_filename(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned or "/" in cleaned or "\\" in cleaned:
            raise ValueError("artifact_filename must be a bare file name.")
        return cleaned
