"""FastAPI server exposing receipt extraction to the calendar front end."""

from __future__ import annotations

import json
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .config import AppConfig, load_config
from .errors import ParseError, UpstreamError, ValidationError
from .extraction import extract_receipt
from .vision import VisionBackend, create_backend

logger = logging.getLogger(__name__)

EXTRACT_PATH = "/api/extract-receipt"


def create_app(
    config: AppConfig | None = None, backend: VisionBackend | None = None
) -> FastAPI:
    """Build the API application.

    Args:
        config: Loaded configuration; defaults are used when omitted.
        backend: Vision backend override. Built from ``config`` on first use
            when omitted.
    """
    config = config or load_config()
    app = FastAPI(title="Receipt Calendar API")
    app.state.config = config
    app.state.backend = backend

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS", "PATCH", "DELETE", "POST", "PUT"],
        allow_headers=["Content-Type"],
    )

    def _backend() -> VisionBackend:
        if app.state.backend is None:
            app.state.backend = create_backend(app.state.config)
        return app.state.backend

    @app.post(EXTRACT_PATH)
    async def extract(request: Request) -> JSONResponse:
        """Receive ``{"image": ...}`` and return the extracted receipt."""
        declared = request.headers.get("content-length")
        if declared and declared.isdigit() and int(declared) > config.server.max_body_bytes:
            return JSONResponse({"error": "Payload too large"}, status_code=413)

        body = await request.body()
        if len(body) > config.server.max_body_bytes:
            return JSONResponse({"error": "Payload too large"}, status_code=413)

        try:
            payload = json.loads(body) if body else {}
        except (json.JSONDecodeError, UnicodeDecodeError):
            payload = {}
        image = payload.get("image") if isinstance(payload, dict) else None

        try:
            extraction = await extract_receipt(image, _backend())
        except ValidationError as e:
            return JSONResponse({"error": str(e)}, status_code=400)
        except UpstreamError as e:
            logger.error("Error extracting receipt: %s", e)
            return JSONResponse({"error": str(e)}, status_code=502)
        except ParseError as e:
            logger.error("Error extracting receipt: %s", e)
            return JSONResponse({"error": str(e)}, status_code=500)

        return JSONResponse(extraction)

    @app.options(EXTRACT_PATH)
    async def extract_preflight() -> Response:
        # Browsers' CORS pre-flights are answered by the middleware; this
        # covers bare OPTIONS requests without an Origin header.
        return Response(status_code=200)

    @app.api_route(EXTRACT_PATH, methods=["GET", "PUT", "PATCH", "DELETE"])
    async def extract_wrong_method() -> JSONResponse:
        return JSONResponse({"error": "Method not allowed"}, status_code=405)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok"}

    return app


def run(config: AppConfig, host: str | None = None, port: int | None = None) -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    host = host or config.server.host
    port = port or config.server.port
    logger.info("API server running on http://%s:%s", host, port)
    uvicorn.run(create_app(config), host=host, port=port)
