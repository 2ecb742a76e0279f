#!/usr/bin/env python3
"""
image_assemblifier.cli.cli

Typer-based CLI for turning raster images into text artifacts.

The conversion engine is external: register one from a Python module with
``--engine-module`` or run an executable with ``--engine-command``.

Examples
--------
Preview the downscaled raster size:

    image-assemblifier geometry 200 100 --columns 50

Convert through an external engine executable:

    image-assemblifier convert photo.png --columns 100 --engine-command "./engine"
"""

from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path

import typer

from image_assemblifier.errors import AssemblifierError

app = typer.Typer(
    name="image-assemblifier",
    help="Downscale images and convert them into text artifacts.",
    no_args_is_help=True,
)

ENGINE_MODULE_HELP = "Engine module import path or file path (repeatable)."
ENGINE_COMMAND_HELP = (
    "External engine command; receives RGBA on stdin plus WIDTH HEIGHT arguments."
)


# -----------------------------
# Utilities
# -----------------------------
def _print_pipeline_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly pipeline error and return the exit code."""
    typer.secho(f"✗ {type(exc).__name__}: {exc}", fg=typer.colors.RED, err=True)
    if debug:
        typer.echo("\nTraceback:", err=True)
        typer.echo(
            "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            err=True,
        )
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


def _build_registry(
    engine_modules: list[str] | None,
    engine_command: str | None,
    engine_timeout: float | None,
):
    from image_assemblifier.plugins.registry import create_default_registry

    return create_default_registry(
        extra_modules=engine_modules,
        engine_command=engine_command,
        engine_timeout=engine_timeout,
    )


def _build_settings(
    aspect_correction: float | None,
    resample: str | None,
    max_pixels: int | None = None,
):
    from image_assemblifier.application.options import PipelineSettings
    from image_assemblifier.application.use_cases import build_pipeline_settings

    defaults = PipelineSettings.from_env()
    return build_pipeline_settings(
        aspect_correction=(
            defaults.aspect_correction if aspect_correction is None else aspect_correction
        ),
        resample=resample or defaults.resample,
        max_pixels=defaults.max_pixels if max_pixels is None else max_pixels,
    )


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Show full tracebacks on error."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Initialize shared CLI state."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    ctx.obj = {"debug": debug}


# -----------------------------
# Commands
# -----------------------------
@app.command("convert")
def convert_cmd(
    ctx: typer.Context,
    image_path: Path = typer.Argument(..., help="Image file to convert."),
    columns: str = typer.Option(
        "100", "--columns", "-c", help="Number of output columns (digits only)."
    ),
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for the artifact. Defaults to the current directory.",
    ),
    output_name: str | None = typer.Option(
        None, "--output-name", help="Artifact file name (default: generated.s)."
    ),
    engine: str | None = typer.Option(
        None, "--engine", help="Engine name when several are registered."
    ),
    engine_module: list[str] | None = typer.Option(
        None, "--engine-module", help=ENGINE_MODULE_HELP
    ),
    engine_command: str | None = typer.Option(
        None, "--engine-command", help=ENGINE_COMMAND_HELP
    ),
    engine_timeout: float | None = typer.Option(
        None, "--engine-timeout", min=0.0, help="Timeout in seconds for --engine-command."
    ),
    aspect_correction: float | None = typer.Option(
        None,
        "--aspect-correction",
        help="Glyph aspect correction (default 0.43 or $IMAGE_ASSEMBLIFIER_ASPECT_CORRECTION).",
    ),
    resample: str | None = typer.Option(
        None, "--resample", help="nearest, bilinear, bicubic or lanczos."
    ),
    max_pixels: int | None = typer.Option(
        None,
        "--max-pixels",
        help="Largest raster area in pixels (default 4096x4096 or $IMAGE_ASSEMBLIFIER_MAX_PIXELS).",
    ),
) -> None:
    """Convert an image into a downloadable text artifact."""
    debug: bool = bool(ctx.obj.get("debug", False))

    try:
        from image_assemblifier.adapters.decoders import PillowImageDecoder
        from image_assemblifier.adapters.sinks import FileArtifactSink
        from image_assemblifier.application.use_cases import (
            ConversionRequest,
            convert_image,
            parse_columns,
        )

        parse_columns(columns)
        settings = _build_settings(aspect_correction, resample, max_pixels)
        registry = _build_registry(engine_module, engine_command, engine_timeout)
        converter = registry.resolve(engine)

        sink = FileArtifactSink(output_dir or Path.cwd(), filename=output_name)
        outcome = convert_image(
            request=ConversionRequest(source=image_path, columns=columns),
            decoder=PillowImageDecoder(),
            converter=converter,
            sink=sink,
            settings=settings,
        )
        geometry = outcome.geometry
        typer.secho(
            f"✓ Saved: {sink.target_for(outcome.artifact)} "
            f"({geometry.width}x{geometry.height}, {outcome.artifact.size_bytes} bytes)",
            fg=typer.colors.GREEN,
        )
    except AssemblifierError as exc:
        raise typer.Exit(code=_print_pipeline_error(exc, debug))
    except Exception as exc:
        raise typer.Exit(code=_print_pipeline_error(exc, debug))


@app.command("geometry")
def geometry_cmd(
    ctx: typer.Context,
    source_width: int = typer.Argument(..., help="Source image width in pixels."),
    source_height: int = typer.Argument(..., help="Source image height in pixels."),
    columns: str = typer.Option("100", "--columns", "-c", help="Number of output columns."),
    aspect_correction: float | None = typer.Option(
        None, "--aspect-correction", help="Glyph aspect correction."
    ),
) -> None:
    """Print the raster size an image would be downscaled to."""
    debug: bool = bool(ctx.obj.get("debug", False))

    try:
        from image_assemblifier.application.use_cases import parse_columns
        from image_assemblifier.imaging.resize import compute_geometry

        settings = _build_settings(aspect_correction, None)
        geometry = compute_geometry(
            source_width,
            source_height,
            parse_columns(columns),
            aspect_correction=settings.aspect_correction,
            max_pixels=settings.max_pixels,
        )
        typer.echo(f"{geometry.width}x{geometry.height}")
    except AssemblifierError as exc:
        raise typer.Exit(code=_print_pipeline_error(exc, debug))


@app.command("engines")
def engines_cmd(
    ctx: typer.Context,
    engine_module: list[str] | None = typer.Option(
        None, "--engine-module", help=ENGINE_MODULE_HELP
    ),
    engine_command: str | None = typer.Option(
        None, "--engine-command", help=ENGINE_COMMAND_HELP
    ),
) -> None:
    """List engines registered by the given modules/command."""
    debug: bool = bool(ctx.obj.get("debug", False))

    try:
        registry = _build_registry(engine_module, engine_command, None)
    except AssemblifierError as exc:
        raise typer.Exit(code=_print_pipeline_error(exc, debug))
    names = registry.names()
    if not names:
        typer.echo("engines: <none>")
        return
    for name in names:
        typer.echo(name)


@app.command("doctor")
def doctor_cmd() -> None:
    """Print installed library versions."""
    import importlib.metadata as metadata

    modules = ["pillow", "pydantic", "typer", "fastapi", "uvicorn"]

    typer.echo(f"Python: {sys.version.split()[0]}")
    for module in modules:
        try:
            version = metadata.version(module)
            typer.echo(f"{module}: {version}")
        except metadata.PackageNotFoundError:
            typer.echo(f"{module}: <not installed>")


if __name__ == "__main__":
    app()
