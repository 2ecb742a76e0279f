"""Unit tests for package-level convenience wrappers."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

import image_assemblifier
from image_assemblifier.errors import ConversionFailure, InvalidInput


def test_version_is_exposed() -> None:
    assert image_assemblifier.__version__


def test_convert_image_file_defaults_to_source_directory(
    image_file: Callable[..., Path], summary_engine: object
) -> None:
    source = image_file(200, 100)
    out = image_assemblifier.convert_image_file(
        source, columns="50", converter=summary_engine  # type: ignore[arg-type]
    )
    assert out == source.parent / "generated.s"
    assert out.read_bytes() == b"; 50x11 rgba=200,40,10,255\n"


def test_convert_image_file_with_output_dir_and_name(
    tmp_path: Path, image_file: Callable[..., Path], summary_engine: object
) -> None:
    out = image_assemblifier.convert_image_file(
        image_file(100, 100),
        tmp_path / "artifacts",
        columns=10,
        converter=summary_engine,  # type: ignore[arg-type]
        aspect_correction=1.0,
        output_name="square.s",
    )
    assert out == tmp_path / "artifacts" / "square.s"
    assert out.read_bytes().startswith(b"; 10x10 ")


def test_convert_image_bytes_returns_artifact(
    image_bytes: Callable[..., bytes], summary_engine: object
) -> None:
    artifact = image_assemblifier.convert_image_bytes(
        image_bytes(200, 100), columns="50", converter=summary_engine  # type: ignore[arg-type]
    )
    assert artifact.filename == "generated.s"
    assert artifact.payload == b"; 50x11 rgba=200,40,10,255\n"


def test_convert_image_bytes_failure_produces_nothing(
    tmp_path: Path, image_file: Callable[..., Path], failing_engine: object
) -> None:
    source = image_file(20, 20)
    with pytest.raises(ConversionFailure):
        image_assemblifier.convert_image_file(
            source, tmp_path / "out", columns="5", converter=failing_engine  # type: ignore[arg-type]
        )
    assert not (tmp_path / "out").exists()


def test_invalid_settings_are_invalid_input(
    image_bytes: Callable[..., bytes], summary_engine: object
) -> None:
    with pytest.raises(InvalidInput):
        image_assemblifier.convert_image_bytes(
            image_bytes(4, 4),
            columns="5",
            converter=summary_engine,  # type: ignore[arg-type]
            resample="sinc",
        )
