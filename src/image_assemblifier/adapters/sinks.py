"""Artifact sinks receiving finished conversions."""

from __future__ import annotations

import logging
from pathlib import Path

from image_assemblifier.application.results import OutputArtifact

logger = logging.getLogger(__name__)


class FileArtifactSink:
    """Write artifacts into a directory, or to an explicit file path."""

    def __init__(self, directory: Path, filename: str | None = None) -> None:
        self.directory = directory
        self.filename = filename
        self.saved: list[Path] = []

    def target_for(self, artifact: OutputArtifact) -> Path:
        return self.directory / (self.filename or artifact.filename)

    def save(self, artifact: OutputArtifact) -> None:
        target = self.target_for(artifact)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(artifact.payload)
        self.saved.append(target)
        logger.info("saved %s (%d bytes)", target, artifact.size_bytes)


class MemoryArtifactSink:
    """Keep artifacts in memory for download responses."""

    def __init__(self) -> None:
        self.artifacts: list[OutputArtifact] = []

    @property
    def last(self) -> OutputArtifact | None:
        return self.artifacts[-1] if self.artifacts else None

    def save(self, artifact: OutputArtifact) -> None:
        self.artifacts.append(artifact)
