"""Conversion engine adapters implementing the ``PixelConverter`` port."""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Callable, Sequence
from typing import Protocol, TypeAlias

from image_assemblifier.application.results import ConversionResult, Failure, Success

logger = logging.getLogger(__name__)


class StatusResultLike(Protocol):
    """Engine response carrying a numeric status and a dual-purpose message."""

    status: int
    message: str | bytes


StatusEngineFn: TypeAlias = Callable[[bytes, int, int], StatusResultLike]


def _as_bytes(payload: str | bytes | bytearray) -> bytes:
    if isinstance(payload, str):
        return payload.encode("utf-8")
    return bytes(payload)


def _as_text(message: str | bytes | bytearray) -> str:
    if isinstance(message, str):
        return message
    return bytes(message).decode("utf-8", errors="replace")


def from_status(status: int, message: str | bytes) -> ConversionResult:
    """Map a status/message pair onto the explicit result type.

    Status ``0`` means ``message`` is the payload; anything else means it is
    a diagnostic.
    """
    if status == 0:
        return Success(payload=_as_bytes(message))
    return Failure(message=_as_text(message))


class StatusResultEngine:
    """Wrap an engine that reports ``status``/``message`` objects."""

    def __init__(self, fn: StatusEngineFn, name: str = "status") -> None:
        self.fn = fn
        self.name = name

    def convert(self, pixels: bytes, width: int, height: int) -> ConversionResult:
        """Invoke the wrapped engine and normalize its response."""
        output = self.fn(pixels, width, height)
        return from_status(int(output.status), output.message)


class CommandEngine:
    """Run an external executable as the conversion engine.

    The RGBA buffer is written to the process stdin and ``width`` and
    ``height`` are appended as the last two arguments. Exit status ``0``
    yields stdout as the payload; any other status, a missing executable or
    a timeout yields a ``Failure``.
    """

    def __init__(
        self,
        command: Sequence[str] | str,
        *,
        timeout: float | None = None,
        name: str = "command",
    ) -> None:
        argv = shlex.split(command) if isinstance(command, str) else list(command)
        if not argv:
            raise ValueError("engine command cannot be empty.")
        self.argv = argv
        self.timeout = timeout
        self.name = name

    def convert(self, pixels: bytes, width: int, height: int) -> ConversionResult:
        """Run the command once for this buffer."""
        argv = [*self.argv, str(width), str(height)]
        logger.debug("running engine command: %s", shlex.join(argv))
        try:
            completed = subprocess.run(
                argv,
                input=pixels,
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError:
            return Failure(message=f"engine executable not found: {self.argv[0]}")
        except subprocess.TimeoutExpired:
            return Failure(message=f"engine timed out after {self.timeout}s")

        if completed.returncode != 0:
            stderr = _as_text(completed.stderr).strip()
            return Failure(
                message=stderr or f"engine exited with status {completed.returncode}"
            )
        return Success(payload=completed.stdout)
