"""Shared pytest configuration, marker assignment and image fixtures."""

from __future__ import annotations

from collections.abc import Callable
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from image_assemblifier.application.results import ConversionResult, Failure, Success


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Attach suite markers based on test file path."""
    del config
    for item in items:
        path = Path(str(item.fspath))
        parts = set(path.parts)
        if "e2e_tests" in parts:
            item.add_marker(pytest.mark.e2e)
        elif "integration_tests" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit_tests" in parts:
            item.add_marker(pytest.mark.unit)


def encode_image(
    width: int,
    height: int,
    color: tuple[int, int, int, int] = (200, 40, 10, 255),
    fmt: str = "PNG",
) -> bytes:
    """Encode a solid-color image of the given size."""
    mode = "RGBA" if fmt == "PNG" else "RGB"
    fill = color if mode == "RGBA" else color[:3]
    buffer = BytesIO()
    Image.new(mode, (width, height), fill).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def image_bytes() -> Callable[..., bytes]:
    """Factory returning encoded image bytes."""
    return encode_image


@pytest.fixture
def image_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing an encoded image under ``tmp_path``."""

    def _write(width: int, height: int, name: str = "source.png", **kwargs: object) -> Path:
        path = tmp_path / name
        path.write_bytes(encode_image(width, height, **kwargs))
        return path

    return _write


class SummaryEngine:
    """Deterministic engine describing the buffer it received."""

    name = "summary"

    def __init__(self) -> None:
        self.calls: list[tuple[int, int, int]] = []

    def convert(self, pixels: bytes, width: int, height: int) -> ConversionResult:
        self.calls.append((len(pixels), width, height))
        first = ",".join(str(value) for value in pixels[:4])
        return Success(payload=f"; {width}x{height} rgba={first}\n".encode())


class FailingEngine:
    """Engine that always reports a failure."""

    name = "failing"

    def __init__(self, message: str = "Resulting image is too big!") -> None:
        self.message = message
        self.calls = 0

    def convert(self, pixels: bytes, width: int, height: int) -> ConversionResult:
        del pixels, width, height
        self.calls += 1
        return Failure(message=self.message)


@pytest.fixture
def summary_engine() -> SummaryEngine:
    return SummaryEngine()


@pytest.fixture
def failing_engine() -> FailingEngine:
    return FailingEngine()
