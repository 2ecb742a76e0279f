"""Application-layer result objects."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

from image_assemblifier.application.options import (
    ARTIFACT_CONTENT_TYPE,
    DEFAULT_ARTIFACT_FILENAME,
)
from image_assemblifier.imaging.models import TargetGeometry


@dataclass(frozen=True)
class Success:
    """Engine produced an encoded payload."""

    payload: bytes


@dataclass(frozen=True)
class Failure:
    """Engine rejected the pixel buffer with a diagnostic."""

    message: str


ConversionResult: TypeAlias = Success | Failure


class PipelineState(Enum):
    """Orchestrator lifecycle states."""

    IDLE = "idle"
    LOADING = "loading"
    EXTRACTING = "extracting"
    CONVERTING = "converting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in {PipelineState.SUCCEEDED, PipelineState.FAILED}


@dataclass(frozen=True)
class OutputArtifact:
    """Downloadable artifact built from a successful conversion."""

    payload: bytes
    filename: str = DEFAULT_ARTIFACT_FILENAME
    content_type: str = ARTIFACT_CONTENT_TYPE

    @classmethod
    def from_success(
        cls, result: Success, filename: str = DEFAULT_ARTIFACT_FILENAME
    ) -> OutputArtifact:
        return cls(payload=bytes(result.payload), filename=filename)

    @property
    def size_bytes(self) -> int:
        return len(self.payload)


@dataclass(frozen=True)
class PipelineOutcome:
    """Structured outcome of a successful pipeline run."""

    artifact: OutputArtifact
    geometry: TargetGeometry
    states: tuple[PipelineState, ...]
