"""
SuiQuest API - backend for the SuiQuest NFT game.

Provides REST endpoints for:
- Service banner (GET /)
- NFT placeholder (GET /api/nfts)
- Listing a player's NFTs (GET /nfts/)
- Staking an NFT (POST /nfts/stake)
- Health checks (GET /health)
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import Settings, get_settings
from .db import Database, connect_database
from .models import HealthResponse, MessageResponse
from .nfts import NFTService, load_nft_service
from .nfts import router as nfts_router
from .zklogin import TokenVerifier, ZkLoginVerifier

# Configure logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    settings: Settings = app.state.settings

    logger.info(
        "api_started",
        version=__version__,
        host=settings.host,
        port=settings.port,
        zklogin_verifier=settings.zklogin_verifier_url,
        nft_service=settings.nft_service,
    )

    yield

    # Cleanup
    verifier = app.state.verifier
    if isinstance(verifier, ZkLoginVerifier):
        await verifier.close()

    database: Optional[Database] = app.state.database
    if database is not None:
        await database.close()
        app.state.database = None

    logger.info("api_stopped")


def create_app(
    settings: Optional[Settings] = None,
    *,
    database: Optional[Database] = None,
    verifier: Optional[TokenVerifier] = None,
    nft_service: Optional[NFTService] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Collaborators not passed in are created from settings: the zkLogin
    verifier from ZKLOGIN_VERIFIER_URL and the NFT service from NFT_SERVICE.
    The database is attached by `serve()` once the connection succeeds.
    """
    settings = settings or get_settings()

    if verifier is None:
        verifier = ZkLoginVerifier(settings.zklogin_verifier_url, timeout=settings.external_timeout)
    if nft_service is None and settings.nft_service:
        nft_service = load_nft_service(settings.nft_service)

    app = FastAPI(
        title="SuiQuest API",
        description="Backend for the SuiQuest NFT game",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.verifier = verifier
    app.state.nft_service = nft_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.add_api_route("/", root, methods=["GET"], response_model=MessageResponse)
    # Placeholder kept next to the real router mounted at /nfts
    app.add_api_route("/api/nfts", nfts_placeholder, methods=["GET"], response_model=MessageResponse)
    app.add_api_route("/health", health_check, methods=["GET"], response_model=HealthResponse)
    app.include_router(nfts_router, prefix="/nfts", tags=["NFTs"])

    return app


# ============================================================================
# Error Handling
# ============================================================================


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render deliberate HTTP errors as {"error": detail}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log anything a route did not handle; the client gets a generic 500."""
    logger.error(
        "unhandled_error",
        method=request.method,
        path=request.url.path,
        error=str(exc),
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"error": "Something went wrong!"})


# ============================================================================
# Routes
# ============================================================================


async def root() -> dict[str, Any]:
    return {"message": "SuiQuest Backend Running!"}


async def nfts_placeholder() -> dict[str, Any]:
    return {"message": "NFTs endpoint working!"}


async def health_check(request: Request) -> HealthResponse:
    """
    Check API health and database connectivity.
    """
    database: Optional[Database] = request.app.state.database
    database_ok = False
    if database is not None:
        database_ok = await database.ping()

    return HealthResponse(
        status="ok" if database_ok else "degraded",
        version=__version__,
        database=database_ok,
    )


app = create_app()


# ============================================================================
# Entry Point
# ============================================================================


async def serve(settings: Settings, application: FastAPI = app) -> None:
    """
    Connect to MongoDB, then serve HTTP.

    The database connection is made before the listener binds; if it fails
    the process exits with status 1 and no port is ever opened.
    """
    application.state.database = await connect_database(settings)

    config = uvicorn.Config(
        application,
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else settings.log_level.lower(),
    )
    await uvicorn.Server(config).serve()


def configure_logging(settings: Settings) -> None:
    """Route structlog output through stdlib logging at the configured level."""
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(format="%(message)s", level=level)


def run() -> None:
    """Run the API server."""
    settings = get_settings()
    configure_logging(settings)
    asyncio.run(serve(settings))


if __name__ == "__main__":
    run()
