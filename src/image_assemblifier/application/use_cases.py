"""Application use-cases orchestrating the image conversion pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from image_assemblifier.application.options import DEFAULT_MAX_PIXELS, PipelineSettings
from image_assemblifier.application.ports import (
    ArtifactSink,
    ImageDecoder,
    PixelConverter,
)
from image_assemblifier.application.results import (
    ConversionResult,
    Failure,
    OutputArtifact,
    PipelineOutcome,
    PipelineState,
    Success,
)
from image_assemblifier.errors import (
    ArtifactSaveError,
    AssemblifierError,
    ConversionFailure,
    ExtractionError,
    FileReadError,
    ImageLoadError,
    InvalidInput,
)
from image_assemblifier.imaging.extract import extract_pixels
from image_assemblifier.imaging.models import PixelBuffer, SourceImage, TargetGeometry
from image_assemblifier.imaging.resize import compute_geometry
from image_assemblifier.schemas import ColumnsConfig, PipelineSettingsConfig
from image_assemblifier.types import ColumnsInput, ImageSourceLike

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionRequest:
    """Raw user request: an image source and the requested column count.

    Parameters
    ----------
    source : Path | bytes
        Image file path, or bytes already read from an upload.
    columns : str | int
        Column count as typed by the user (digits only) or as an integer.
    """

    source: ImageSourceLike
    columns: ColumnsInput


def parse_columns(value: ColumnsInput) -> int:
    """Validate a user supplied column count.

    Raises
    ------
    InvalidInput
        If the value has non-digit characters, is empty, or is zero.
    """
    try:
        return ColumnsConfig(columns=value).columns
    except ValidationError as exc:
        raise InvalidInput(f"Invalid number of desired columns: {value!r}") from exc


def build_pipeline_settings(
    *,
    aspect_correction: float | str = 0.43,
    resample: str = "bilinear",
    artifact_filename: str = "generated.s",
    max_pixels: int | str = DEFAULT_MAX_PIXELS,
) -> PipelineSettings:
    """Build typed pipeline settings from command/API params."""
    try:
        config = PipelineSettingsConfig(
            aspect_correction=aspect_correction,
            resample=resample,
            artifact_filename=artifact_filename,
            max_pixels=max_pixels,
        )
    except ValidationError as exc:
        raise InvalidInput(f"Invalid pipeline settings: {exc}") from exc
    return PipelineSettings(
        aspect_correction=config.aspect_correction,
        resample=config.resample,
        artifact_filename=config.artifact_filename,
        max_pixels=config.max_pixels,
    )


def read_source(source: ImageSourceLike) -> bytes:
    """Return the raw bytes of an image source."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    try:
        return Path(source).read_bytes()
    except OSError as exc:
        raise FileReadError(f"The file could not be read: {exc}") from exc


class ImagePipeline:
    """Sequence read, decode, resize, extract and convert for one request.

    The pipeline keeps no state between requests apart from ``state``, which
    restarts at ``IDLE`` on every ``run`` call.
    """

    def __init__(
        self,
        decoder: ImageDecoder,
        converter: PixelConverter,
        sink: ArtifactSink | None = None,
        settings: PipelineSettings | None = None,
    ) -> None:
        self.decoder = decoder
        self.converter = converter
        self.sink = sink
        self.settings = settings or PipelineSettings()
        self.state = PipelineState.IDLE
        self._visited: list[PipelineState] = [PipelineState.IDLE]

    @property
    def visited(self) -> tuple[PipelineState, ...]:
        return tuple(self._visited)

    def _enter(self, state: PipelineState) -> None:
        logger.debug("pipeline %s -> %s", self.state.value, state.value)
        self.state = state
        self._visited.append(state)

    def _fail(self, exc: AssemblifierError) -> None:
        self._enter(PipelineState.FAILED)
        logger.warning("conversion failed (%s): %s", type(exc).__name__, exc)

    def run(self, request: ConversionRequest) -> PipelineOutcome:
        """Run the full pipeline for ``request``.

        Returns
        -------
        PipelineOutcome
            Artifact, geometry, and the visited states.

        Raises
        ------
        AssemblifierError
            One of ``InvalidInput``, ``FileReadError``, ``ImageLoadError``,
            ``ExtractionError``, ``ConversionFailure`` or
            ``ArtifactSaveError``. Only the last one is raised after the
            artifact reached the sink.
        """
        self.state = PipelineState.IDLE
        self._visited = [PipelineState.IDLE]

        try:
            columns = parse_columns(request.columns)
        except InvalidInput as exc:
            self._fail(exc)
            raise

        self._enter(PipelineState.LOADING)
        try:
            source = self._load(request.source)
        except AssemblifierError as exc:
            self._fail(exc)
            raise

        self._enter(PipelineState.EXTRACTING)
        try:
            geometry, pixels = self._extract(source, columns)
        except AssemblifierError as exc:
            self._fail(exc)
            raise
        del source

        self._enter(PipelineState.CONVERTING)
        result = self._convert(pixels)
        del pixels
        if isinstance(result, Failure):
            failure = ConversionFailure(result.message)
            self._fail(failure)
            raise failure

        artifact = OutputArtifact.from_success(
            result, filename=self.settings.artifact_filename
        )
        if self.sink is not None:
            try:
                self.sink.save(artifact)
            except OSError as exc:
                error = ArtifactSaveError(f"The artifact could not be saved: {exc}")
                self._fail(error)
                raise error from exc
        self._enter(PipelineState.SUCCEEDED)
        logger.info(
            "generated %s (%d bytes) from %dx%d raster",
            artifact.filename,
            artifact.size_bytes,
            geometry.width,
            geometry.height,
        )
        return PipelineOutcome(artifact=artifact, geometry=geometry, states=self.visited)

    def _load(self, source: ImageSourceLike) -> SourceImage:
        data = read_source(source)
        try:
            image = self.decoder.decode(data)
        except ImageLoadError:
            raise
        except Exception as exc:
            raise ImageLoadError(f"The image could not be loaded: {exc}") from exc
        logger.debug("decoded source image %dx%d", image.width, image.height)
        return image

    def _extract(
        self, source: SourceImage, columns: int
    ) -> tuple[TargetGeometry, PixelBuffer]:
        geometry = compute_geometry(
            source.width,
            source.height,
            columns,
            aspect_correction=self.settings.aspect_correction,
            max_pixels=self.settings.max_pixels,
        )
        logger.info(
            "resizing %dx%d -> %dx%d",
            source.width,
            source.height,
            geometry.width,
            geometry.height,
        )
        pixels = extract_pixels(source, geometry, resample=self.settings.resample)
        if len(pixels) != geometry.buffer_length:
            raise ExtractionError("pixel buffer does not match target geometry.")
        return geometry, pixels

    def _convert(self, pixels: PixelBuffer) -> ConversionResult:
        try:
            result = self.converter.convert(pixels.data, pixels.width, pixels.height)
        except Exception as exc:
            logger.exception("conversion engine raised")
            return Failure(message=str(exc) or type(exc).__name__)
        if isinstance(result, (Success, Failure)):
            return result
        return Failure(
            message=f"engine returned unsupported result type {type(result).__name__}"
        )


def convert_image(
    *,
    request: ConversionRequest,
    decoder: ImageDecoder,
    converter: PixelConverter,
    sink: ArtifactSink | None = None,
    settings: PipelineSettings | None = None,
) -> PipelineOutcome:
    """Use-case: run one conversion request through a fresh pipeline."""
    pipeline = ImagePipeline(
        decoder=decoder,
        converter=converter,
        sink=sink,
        settings=settings,
    )
    return pipeline.run(request)
