"""HTTP front-end: GET /?host=a,b:18001 -> JSON list of per-target station results."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from . import __version__
from .errors import InvalidTargetError
from .orchestrator import QueryOrchestrator
from .targets import parse_targets
from .types import ServiceConfig

logger = logging.getLogger(__name__)

ALLOWED_PARAMETERS = frozenset({"host"})
# Answered with a plain-text 405; OPTIONS is left to the CORS middleware
OTHER_METHODS = ["POST", "PUT", "PATCH", "DELETE"]


def _http_error(status_code: int, message: str) -> PlainTextResponse:
    return PlainTextResponse(message, status_code=status_code)


def create_app(orchestrator: QueryOrchestrator, config: ServiceConfig | None = None) -> FastAPI:
    """Build the FastAPI application around an orchestrator (and its cache)."""
    config = config or ServiceConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "SeedLink station service v%s initialized on %s:%d",
            __version__,
            config.listen_host,
            config.listen_port,
        )
        yield

    app = FastAPI(
        title="SeedLink Stations",
        description="Network/station discovery for SeedLink servers",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["GET"],
    )

    async def stations(request: Request) -> Response:
        query = request.url.query
        params = request.query_params

        if request.method != "GET":
            return _http_error(405, "Method not supported")
        if not query:
            return _http_error(400, "Empty query string submitted")
        if "host" not in params:
            return _http_error(400, "Host parameter is required")
        # Only the root path is served
        if request.url.path != "/":
            return _http_error(405, "Method not supported")

        for key in params.keys():
            if key not in ALLOWED_PARAMETERS:
                return _http_error(400, f"Key {key} is not supported")

        try:
            targets = parse_targets(params["host"], default_port=config.default_port)
        except InvalidTargetError as e:
            return _http_error(400, str(e))

        results = await orchestrator.run(targets)
        return JSONResponse([r.to_payload() for r in results])

    app.add_api_route("/", stations, methods=["GET", *OTHER_METHODS])
    app.add_api_route("/{path:path}", stations, methods=["GET", *OTHER_METHODS], include_in_schema=False)
    return app
