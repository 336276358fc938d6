"""
FastAPI application for the chat orchestrator.

Usage:
    # Development server with auto-reload
    uvicorn chat_orchestrator.api.main:app --reload --host 0.0.0.0 --port 8000

    # Debug mode (verbose logging)
    LOG_LEVEL=DEBUG uvicorn chat_orchestrator.api.main:app --reload

The registry tools are also served over MCP: streamable HTTP at /mcp/ and
SSE at /sse/.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import config
from ..tracing import init_tracing_client, shutdown_tracing
from .mcp_server import create_mcp_server
from .routes import chat, health


def configure_logging():
    """Configure logging based on the configured log level."""
    log_level = getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("chat_orchestrator").setLevel(log_level)


configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Starting chat orchestrator API server")

    logger.info("=" * 60)
    logger.info("COMPLETION SERVICE")
    logger.info(f"  Endpoint: {config.gemini.generate_url}")
    logger.info(f"  API key: {'configured' if config.gemini.api_key else 'MISSING'}")
    logger.info(f"  Max tool calls: {config.orchestrator.max_tool_calls}")
    logger.info(f"  Language: {config.orchestrator.language}")

    # Build the registry before serving traffic
    logger.info("-" * 60)
    logger.info("REGISTERED TOOLS")
    for line in chat.get_registry().get_tools_summary().splitlines():
        logger.info(f"  {line}")

    logger.info("-" * 60)
    logger.info("LANGFUSE OBSERVABILITY")
    tracing_client = init_tracing_client(config.langfuse)
    for line in tracing_client.status_lines():
        logger.info(f"  {line}")
    logger.info("=" * 60)

    yield

    logger.info("Shutting down chat orchestrator API server")
    shutdown_tracing()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """
    mcp = create_mcp_server(chat.get_registry())
    mcp_http_app = mcp.http_app(path="/")
    mcp_sse_app = mcp.http_app(path="/", transport="sse")

    @asynccontextmanager
    async def app_lifespan(app: FastAPI):
        # The streamable HTTP session manager runs inside the MCP app lifespan
        async with lifespan(app), mcp_http_app.lifespan(app):
            yield

    app = FastAPI(
        title="Chat Orchestrator API",
        description="Tool-calling chat over the Gemini API.",
        version=__version__,
        lifespan=app_lifespan,
    )
    app.state.mcp = mcp

    # CORS middleware - allow all origins for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, tags=["Health"])
    app.include_router(chat.router, tags=["Chat"])
    app.mount("/mcp", mcp_http_app)
    app.mount("/sse", mcp_sse_app)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Log validation errors before returning 400 response."""
        logger.warning(
            f"Validation error on {request.method} {request.url.path}: {exc.errors()}"
        )
        return JSONResponse(
            status_code=400,
            content={"detail": exc.errors()},
        )

    return app


app = create_app()


def run_server():
    """
    Run the server using uvicorn.
    """
    import uvicorn

    uvicorn.run(
        "chat_orchestrator.api.main:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.reload,
        workers=1 if config.server.reload else config.server.workers,
    )


if __name__ == "__main__":
    run_server()
