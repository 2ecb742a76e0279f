"""HTTP server for image upload and artifact download."""

from __future__ import annotations

import argparse
import logging
import os
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from image_assemblifier.adapters.decoders import PillowImageDecoder
from image_assemblifier.adapters.sinks import MemoryArtifactSink
from image_assemblifier.application.options import PipelineSettings
from image_assemblifier.application.ports import PixelConverter
from image_assemblifier.application.use_cases import (
    ConversionRequest,
    convert_image,
    parse_columns,
)
from image_assemblifier.errors import (
    ArtifactSaveError,
    ConversionFailure,
    DependencyError,
    ExtractionError,
    FileReadError,
    ImageLoadError,
    InvalidInput,
    PluginError,
)

logger = logging.getLogger(__name__)

ENGINE_MODULES_ENV = "IMAGE_ASSEMBLIFIER_ENGINE_MODULES"
ENGINE_COMMAND_ENV = "IMAGE_ASSEMBLIFIER_ENGINE_COMMAND"
ENGINE_NAME_ENV = "IMAGE_ASSEMBLIFIER_ENGINE"

try:
    from fastapi import FastAPI, File, Form, HTTPException, UploadFile, status
    from fastapi.concurrency import run_in_threadpool
    from fastapi.responses import Response

    _fastapi_available = True
except ModuleNotFoundError:  # pragma: no cover
    _fastapi_available = False

try:
    import uvicorn
except ModuleNotFoundError:  # pragma: no cover
    uvicorn = None


def _require_http_runtime() -> None:
    """Ensure HTTP server runtime dependencies are available."""
    if not _fastapi_available:
        raise DependencyError(
            "fastapi is required to run image-assemblifier-http. "
            "Install with extra: .[server]"
        )


class HealthResponse(BaseModel):
    """Health response payload."""

    model_config = ConfigDict(extra="forbid")

    status: str


class ReadyResponse(BaseModel):
    """Readiness response payload."""

    model_config = ConfigDict(extra="forbid")

    status: str
    engine: str | None = None


def converter_from_env() -> PixelConverter:
    """Resolve the conversion engine configured through environment variables."""
    from image_assemblifier.plugins.registry import create_default_registry

    modules = [
        item.strip()
        for item in os.getenv(ENGINE_MODULES_ENV, "").split(",")
        if item.strip()
    ]
    registry = create_default_registry(
        extra_modules=modules,
        engine_command=os.getenv(ENGINE_COMMAND_ENV) or None,
    )
    return registry.resolve(os.getenv(ENGINE_NAME_ENV) or None)


def create_app(
    converter: PixelConverter | None = None,
    settings: PipelineSettings | None = None,
) -> FastAPI:
    """Create the conversion HTTP application.

    Parameters
    ----------
    converter : PixelConverter | None, default=None
        Engine to use. When omitted it is resolved from the environment on
        first use.
    settings : PipelineSettings | None, default=None
        Pipeline settings; defaults to ``PipelineSettings.from_env()``, read
        once here so a malformed environment fails at startup.
    """
    _require_http_runtime()
    pipeline_settings = settings or PipelineSettings.from_env()
    app = FastAPI(
        title="Image Assemblifier",
        version="0.1.0",
        description="Upload an image and download its text artifact.",
    )
    resolved: dict[str, PixelConverter] = {}
    if converter is not None:
        resolved["engine"] = converter

    def _engine() -> PixelConverter:
        if "engine" not in resolved:
            resolved["engine"] = converter_from_env()
        return resolved["engine"]

    @app.get("/healthz", response_model=HealthResponse)
    async def healthz() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/readyz", response_model=ReadyResponse)
    async def readyz() -> ReadyResponse:
        try:
            engine = _engine()
        except PluginError as exc:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=str(exc),
            ) from exc
        return ReadyResponse(status="ready", engine=getattr(engine, "name", None))

    @app.post("/v1/convert/upload")
    async def convert_upload(
        image: UploadFile = File(...),
        columns: str = Form(default=""),
    ) -> Response:
        """Convert an uploaded image and return the artifact as a download."""
        try:
            engine = _engine()
        except PluginError as exc:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=str(exc),
            ) from exc

        try:
            requested_columns = parse_columns(columns)
        except InvalidInput as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(exc),
            ) from exc

        try:
            payload = await image.read()
        except OSError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"The file could not be read: {exc}",
            ) from exc

        try:
            outcome = await run_in_threadpool(
                convert_image,
                request=ConversionRequest(source=payload, columns=requested_columns),
                decoder=PillowImageDecoder(),
                converter=engine,
                sink=MemoryArtifactSink(),
                settings=pipeline_settings,
            )
        except (InvalidInput, FileReadError, ImageLoadError, ExtractionError) as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(exc),
            ) from exc
        except ConversionFailure as exc:
            raise HTTPException(
                status_code=422,
                detail=str(exc),
            ) from exc
        except ArtifactSaveError as exc:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=str(exc),
            ) from exc
        except Exception as exc:  # pragma: no cover
            logger.exception("unexpected error during HTTP conversion upload")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="internal server error",
            ) from exc

        artifact = outcome.artifact
        return Response(
            content=artifact.payload,
            media_type=artifact.content_type,
            headers={
                "Content-Disposition": f'attachment; filename="{artifact.filename}"',
                "X-Raster-Size": f"{outcome.geometry.width}x{outcome.geometry.height}",
            },
        )

    return app


if TYPE_CHECKING:
    app: FastAPI | None

if _fastapi_available:
    app = create_app()
else:  # pragma: no cover
    app = None


def main() -> None:
    """Run the HTTP server entrypoint."""
    _require_http_runtime()
    if uvicorn is None:
        raise DependencyError("uvicorn is required to run image-assemblifier-http")
    parser = argparse.ArgumentParser(description="Image Assemblifier HTTP server.")
    parser.add_argument(
        "--host",
        default=os.getenv("IMAGE_ASSEMBLIFIER_HTTP_HOST", "0.0.0.0"),
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("IMAGE_ASSEMBLIFIER_HTTP_PORT", "8090")),
    )
    args = parser.parse_args()
    uvicorn.run(
        "image_assemblifier.server.http_server:app",
        host=args.host,
        port=args.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
