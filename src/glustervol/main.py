"""glustervol Docker volume plugin application."""

import logging
import os
from contextlib import asynccontextmanager
from typing import Callable

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from glustervol import __version__
from glustervol.api import volume_driver_router
from glustervol.api.dependencies import close_backend, init_backend
from glustervol.config import get_plugin_config
from glustervol.core.errors import ErrorResponse, PluginError
from glustervol.infra import close_db, init_db
from glustervol.logging import setup_logging
from glustervol.logging_schema import LogEvent

# Configure logging using config
_config = get_plugin_config()
setup_logging(_config.logging)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    config = get_plugin_config()
    logger.info(
        "Starting glustervol",
        extra={
            "event": LogEvent.APP_STARTED,
            "version": __version__,
            "backend": config.backend,
        },
    )

    await init_db(config.state.database_url, echo=config.state.echo)
    await init_backend(config)

    yield
    logger.info("Shutting down glustervol", extra={"event": LogEvent.APP_STOPPED})
    await close_backend()
    await close_db()


app = FastAPI(
    title="glustervol",
    description="Docker volume plugin for GlusterFS via Heketi",
    version=__version__,
    lifespan=lifespan,
)


def _error_response(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(Err=message or "Unknown error").model_dump(),
    )


@app.exception_handler(PluginError)
async def plugin_error_handler(request: Request, exc: PluginError) -> JSONResponse:
    """Render PluginError as the protocol error envelope."""
    logger.error(
        "%s: %s",
        request.url.path,
        exc.message,
        extra={
            "event": LogEvent.VERB_FAILED,
            "error_code": exc.code.value,
            "path": request.url.path,
        },
    )
    return _error_response(exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies are per-request protocol errors."""
    message = f"Invalid request: {exc.errors()}"
    logger.error(
        "%s: %s",
        request.url.path,
        message,
        extra={"event": LogEvent.VERB_FAILED, "path": request.url.path},
    )
    return _error_response(message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions with logging."""
    logger.exception(
        "Unhandled exception",
        extra={
            "event": LogEvent.UNHANDLED_EXCEPTION,
            "path": request.url.path,
        },
    )
    return _error_response(str(exc))


@app.middleware("http")
async def verb_log_middleware(
    request: Request, call_next: Callable[[Request], Response]
) -> Response:
    """Log successful verbs; failures are logged by the error handlers."""
    response = await call_next(request)
    if response.status_code == 200:
        logger.info(
            "%s: OK",
            request.url.path,
            extra={"event": LogEvent.VERB_OK, "path": request.url.path},
        )
    return response


app.include_router(volume_driver_router)


def remove_socket(socket_path: str) -> None:
    """Remove the plugin socket file left after the server stops."""
    if not os.path.exists(socket_path):
        return
    try:
        os.remove(socket_path)
    except OSError as e:
        logger.warning(
            "Failed to remove socket file at %s: %s",
            socket_path,
            e,
            extra={"event": LogEvent.SOCKET_CLEANUP_FAILED},
        )


def main() -> None:
    """Run the plugin server on its Unix socket."""
    config = get_plugin_config()
    try:
        uvicorn.run(
            "glustervol.main:app",
            uds=config.server.socket,
            reload=False,
            log_config=None,
        )
    finally:
        remove_socket(config.server.socket)


if __name__ == "__main__":
    main()
