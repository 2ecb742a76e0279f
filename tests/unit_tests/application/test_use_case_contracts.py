"""Unit tests for the pipeline orchestrator contracts."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from image_assemblifier.application.options import PipelineSettings
from image_assemblifier.application.results import (
    ConversionResult,
    Failure,
    OutputArtifact,
    PipelineState,
    Success,
)
from image_assemblifier.application.use_cases import (
    ConversionRequest,
    ImagePipeline,
    convert_image,
)
from image_assemblifier.errors import (
    ArtifactSaveError,
    ConversionFailure,
    ExtractionError,
    FileReadError,
    ImageLoadError,
    InvalidInput,
)
from image_assemblifier.imaging.models import SourceImage


class _Decoder:
    def __init__(self, size: tuple[int, int] = (200, 100), fail: bool = False) -> None:
        self.size = size
        self.fail = fail
        self.calls: list[bytes] = []

    def decode(self, data: bytes) -> SourceImage:
        self.calls.append(data)
        if self.fail:
            raise ImageLoadError("The image could not be loaded")
        return SourceImage.from_pil(Image.new("RGBA", self.size, (1, 2, 3, 255)))


class _Converter:
    def __init__(self, result: ConversionResult) -> None:
        self.result = result
        self.calls: list[tuple[int, int, int]] = []

    def convert(self, pixels: bytes, width: int, height: int) -> ConversionResult:
        self.calls.append((len(pixels), width, height))
        assert len(pixels) == width * height * 4
        return self.result


class _Sink:
    def __init__(self) -> None:
        self.saved: list[OutputArtifact] = []

    def save(self, artifact: OutputArtifact) -> None:
        self.saved.append(artifact)


def test_success_roundtrip_contract() -> None:
    """Verify decode, resize, extract, convert and sink run in order."""
    decoder = _Decoder()
    converter = _Converter(Success(payload=b"mov r0, #1\n"))
    sink = _Sink()

    outcome = convert_image(
        request=ConversionRequest(source=b"raw-bytes", columns="50"),
        decoder=decoder,
        converter=converter,
        sink=sink,
    )

    assert decoder.calls == [b"raw-bytes"]
    assert converter.calls == [(50 * 11 * 4, 50, 11)]
    assert outcome.artifact.payload == b"mov r0, #1\n"
    assert outcome.artifact.filename == "generated.s"
    assert outcome.artifact.content_type == "text/plain;charset=utf-8"
    assert sink.saved == [outcome.artifact]
    assert outcome.states == (
        PipelineState.IDLE,
        PipelineState.LOADING,
        PipelineState.EXTRACTING,
        PipelineState.CONVERTING,
        PipelineState.SUCCEEDED,
    )


@pytest.mark.parametrize("columns", ["12a", "", "-5", " 12", "+3", "1.5", "0", "00", 0, -4, True])
def test_invalid_columns_fail_without_io(columns: object, tmp_path: Path) -> None:
    """Bad column counts stop the pipeline before any file or decode work."""
    decoder = _Decoder()
    converter = _Converter(Success(payload=b"x"))
    pipeline = ImagePipeline(decoder=decoder, converter=converter)

    with pytest.raises(InvalidInput, match="Invalid number of desired columns"):
        pipeline.run(
            ConversionRequest(source=tmp_path / "missing.png", columns=columns)  # type: ignore[arg-type]
        )

    assert decoder.calls == []
    assert converter.calls == []
    assert pipeline.state is PipelineState.FAILED
    assert pipeline.visited == (PipelineState.IDLE, PipelineState.FAILED)


def test_integer_columns_are_accepted() -> None:
    """Integer column counts skip the digit pattern but still must be positive."""
    converter = _Converter(Success(payload=b"x"))
    outcome = ImagePipeline(decoder=_Decoder(), converter=converter).run(
        ConversionRequest(source=b"data", columns=8)
    )
    assert outcome.geometry.width == 8


def test_unreadable_file_is_file_read_error(tmp_path: Path) -> None:
    """A missing path fails while loading, before decode."""
    decoder = _Decoder()
    pipeline = ImagePipeline(decoder=decoder, converter=_Converter(Success(payload=b"")))

    with pytest.raises(FileReadError, match="could not be read"):
        pipeline.run(ConversionRequest(source=tmp_path / "missing.png", columns="10"))

    assert decoder.calls == []
    assert pipeline.visited[-2:] == (PipelineState.LOADING, PipelineState.FAILED)


def test_decode_failure_is_image_load_error() -> None:
    converter = _Converter(Success(payload=b""))
    pipeline = ImagePipeline(decoder=_Decoder(fail=True), converter=converter)

    with pytest.raises(ImageLoadError):
        pipeline.run(ConversionRequest(source=b"not-an-image", columns="10"))

    assert converter.calls == []
    assert pipeline.state is PipelineState.FAILED


def test_unexpected_decoder_exception_is_wrapped() -> None:
    """Decoder crashes surface as ImageLoadError rather than leaking."""

    class _Crashing:
        def decode(self, data: bytes) -> SourceImage:
            raise RuntimeError("codec exploded")

    pipeline = ImagePipeline(decoder=_Crashing(), converter=_Converter(Success(payload=b"")))
    with pytest.raises(ImageLoadError, match="codec exploded"):
        pipeline.run(ConversionRequest(source=b"data", columns="10"))


def test_degenerate_source_is_extraction_error() -> None:
    """A decoder reporting a zero-sized image fails during extraction."""

    class _Empty:
        def decode(self, data: bytes) -> SourceImage:
            return SourceImage(image=Image.new("RGBA", (1, 1)), width=0, height=5)

    converter = _Converter(Success(payload=b""))
    pipeline = ImagePipeline(decoder=_Empty(), converter=converter)
    with pytest.raises(ExtractionError):
        pipeline.run(ConversionRequest(source=b"data", columns="10"))
    assert converter.calls == []
    assert pipeline.visited[-2:] == (PipelineState.EXTRACTING, PipelineState.FAILED)


def test_engine_failure_surfaces_message_verbatim() -> None:
    """Engine diagnostics are prefixed for users and kept verbatim."""
    sink = _Sink()
    pipeline = ImagePipeline(
        decoder=_Decoder(),
        converter=_Converter(Failure(message="Resulting image is too big!")),
        sink=sink,
    )

    with pytest.raises(ConversionFailure) as excinfo:
        pipeline.run(ConversionRequest(source=b"data", columns="10"))

    assert excinfo.value.engine_message == "Resulting image is too big!"
    assert str(excinfo.value) == (
        "An error occurred during processing: Resulting image is too big!"
    )
    assert sink.saved == []
    assert pipeline.visited[-2:] == (PipelineState.CONVERTING, PipelineState.FAILED)


def test_engine_exception_becomes_conversion_failure() -> None:
    class _Raising:
        def convert(self, pixels: bytes, width: int, height: int) -> ConversionResult:
            raise MemoryError("out of memory")

    pipeline = ImagePipeline(decoder=_Decoder(), converter=_Raising())
    with pytest.raises(ConversionFailure, match="out of memory"):
        pipeline.run(ConversionRequest(source=b"data", columns="10"))


def test_engine_unknown_result_type_is_failure() -> None:
    class _Legacy:
        def convert(self, pixels: bytes, width: int, height: int) -> object:
            return {"status": 0, "message": "payload"}

    pipeline = ImagePipeline(decoder=_Decoder(), converter=_Legacy())  # type: ignore[arg-type]
    with pytest.raises(ConversionFailure, match="unsupported result type dict"):
        pipeline.run(ConversionRequest(source=b"data", columns="10"))


def test_settings_drive_geometry_and_filename() -> None:
    """Aspect correction and artifact name come from settings."""
    converter = _Converter(Success(payload=b"x"))
    pipeline = ImagePipeline(
        decoder=_Decoder(size=(100, 100)),
        converter=converter,
        settings=PipelineSettings(aspect_correction=1.0, artifact_filename="out.s"),
    )
    outcome = pipeline.run(ConversionRequest(source=b"data", columns="20"))
    assert converter.calls == [(20 * 20 * 4, 20, 20)]
    assert outcome.artifact.filename == "out.s"


def test_rerun_is_idempotent_and_restarts_from_idle() -> None:
    """Identical requests give byte-identical artifacts and fresh state."""
    pipeline = ImagePipeline(decoder=_Decoder(), converter=_Converter(Success(payload=b"abc")))
    request = ConversionRequest(source=b"data", columns="30")

    first = pipeline.run(request)
    second = pipeline.run(request)

    assert first.artifact == second.artifact
    assert second.states[0] is PipelineState.IDLE
    assert second.states.count(PipelineState.SUCCEEDED) == 1


def test_failed_request_does_not_leak_into_next_run() -> None:
    converter = _Converter(Success(payload=b"ok"))
    pipeline = ImagePipeline(decoder=_Decoder(), converter=converter)

    with pytest.raises(InvalidInput):
        pipeline.run(ConversionRequest(source=b"data", columns="x"))
    outcome = pipeline.run(ConversionRequest(source=b"data", columns="5"))

    assert outcome.artifact.payload == b"ok"
    assert pipeline.state is PipelineState.SUCCEEDED


@pytest.mark.parametrize("columns", ["99999999999999999999", "100000"])
def test_oversized_raster_is_extraction_error(columns: str) -> None:
    """Column counts that pass validation still cannot exceed the raster limit."""
    converter = _Converter(Success(payload=b""))
    pipeline = ImagePipeline(decoder=_Decoder(size=(100, 100)), converter=converter)

    with pytest.raises(ExtractionError, match="raster limit|exceeds the limit"):
        pipeline.run(ConversionRequest(source=b"data", columns=columns))

    assert converter.calls == []
    assert pipeline.visited[-2:] == (PipelineState.EXTRACTING, PipelineState.FAILED)


def test_raster_limit_comes_from_settings() -> None:
    converter = _Converter(Success(payload=b"ok"))
    pipeline = ImagePipeline(
        decoder=_Decoder(size=(100, 100)),
        converter=converter,
        settings=PipelineSettings(aspect_correction=1.0, max_pixels=400),
    )

    pipeline.run(ConversionRequest(source=b"data", columns="20"))
    with pytest.raises(ExtractionError):
        pipeline.run(ConversionRequest(source=b"data", columns="21"))
    assert converter.calls == [(20 * 20 * 4, 20, 20)]


def test_sink_failure_is_artifact_save_error(caplog: pytest.LogCaptureFixture) -> None:
    """A sink that cannot write ends the run in FAILED and logs the error."""

    class _ReadOnlySink:
        def save(self, artifact: OutputArtifact) -> None:
            raise PermissionError(13, "Permission denied", "generated.s")

    pipeline = ImagePipeline(
        decoder=_Decoder(),
        converter=_Converter(Success(payload=b"ok")),
        sink=_ReadOnlySink(),
    )

    with caplog.at_level("WARNING", logger="image_assemblifier.application.use_cases"):
        with pytest.raises(ArtifactSaveError, match="could not be saved") as excinfo:
            pipeline.run(ConversionRequest(source=b"data", columns="10"))

    assert isinstance(excinfo.value.__cause__, PermissionError)
    assert excinfo.value.exit_code == 9
    assert pipeline.state is PipelineState.FAILED
    assert pipeline.visited[-2:] == (PipelineState.CONVERTING, PipelineState.FAILED)
    assert "ArtifactSaveError" in caplog.text
