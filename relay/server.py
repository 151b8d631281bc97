"""FastAPI server for the capture relay."""

from __future__ import annotations

import logging
from typing import Any
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, WebSocket
from fastapi.responses import ORJSONResponse

from relay.state import RuntimeDeps
from relay.state.settings import AppSettings
from relay.runtime.logging import configure_logging
from relay.config.websocket import WS_ENDPOINT_PATH
from relay.runtime.dependencies import build_runtime_deps
from relay.handlers.websocket import handle_websocket_connection
from relay.handlers.capture import ping_body, handle_capture, last_capture_body
from relay.handlers.answers import read_answer_body, current_answer_body, handle_publish_answer

logger = logging.getLogger(__name__)

configure_logging()


def _deps(app: FastAPI) -> RuntimeDeps:
    runtime_deps = getattr(app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    return runtime_deps


def build_app(settings: AppSettings | None = None) -> FastAPI:
    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        app.state.runtime_deps = await build_runtime_deps(settings)
        logger.info("runtime: ready")
        try:
            yield
        finally:
            deps = getattr(app.state, "runtime_deps", None)
            if deps is not None:
                await deps.shutdown()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)

    @app.get("/")
    @app.get("/health")
    @app.get("/healthz")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/ping")
    async def ping() -> dict[str, Any]:
        return ping_body(_deps(app))

    @app.post("/capture")
    async def capture(request: Request) -> dict[str, Any]:
        return await handle_capture(request, _deps(app))

    @app.get("/capture/last")
    @app.get("/last-image")
    async def last_capture() -> dict[str, Any]:
        return last_capture_body(_deps(app))

    @app.post("/answer")
    async def publish_answer(request: Request) -> dict[str, Any]:
        return await handle_publish_answer(await read_answer_body(request), _deps(app))

    @app.get("/answer")
    @app.get("/last")
    async def current_answer() -> dict[str, Any]:
        return current_answer_body(_deps(app))

    @app.websocket(WS_ENDPOINT_PATH)
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await handle_websocket_connection(websocket, _deps(app))

    return app


app = build_app()

__all__ = ["app", "build_app"]
