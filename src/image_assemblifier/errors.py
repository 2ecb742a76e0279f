"""Error taxonomy for the image conversion pipeline."""

from __future__ import annotations


class AssemblifierError(Exception):
    """Base error for all pipeline failures.

    Every subclass is terminal for the current request and maps to a distinct
    CLI exit code through ``exit_code``.
    """

    exit_code = 1


class InvalidInput(AssemblifierError):
    """Raised when the requested column count is not a positive integer."""

    exit_code = 2


class FileReadError(AssemblifierError):
    """Raised when the source bytes could not be read."""

    exit_code = 3


class ImageLoadError(AssemblifierError):
    """Raised when the source bytes could not be decoded as an image."""

    exit_code = 4


class ExtractionError(AssemblifierError):
    """Raised on invalid target geometry or a rasterization failure."""

    exit_code = 5


class ConversionFailure(AssemblifierError):
    """Raised when the conversion engine reports a failure."""

    exit_code = 6
    prefix = "An error occurred during processing: "

    def __init__(self, engine_message: str) -> None:
        self.engine_message = engine_message
        super().__init__(f"{self.prefix}{engine_message}")


class PluginError(AssemblifierError):
    """Raised when an engine plugin cannot be loaded or resolved."""

    exit_code = 7


class DependencyError(AssemblifierError):
    """Raised when an optional runtime dependency is unavailable."""

    exit_code = 8


class ArtifactSaveError(AssemblifierError):
    """Raised when a generated artifact could not be written to its sink."""

    exit_code = 9
