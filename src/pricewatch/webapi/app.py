"""FastAPI application for alert management and job control."""

import uuid
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config.logging import get_logger
from .dependencies import verify_auth_token
from .exceptions import setup_exception_handlers
from .models.responses import StatusResponse
from .routers import alerts_router, system_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Pricewatch API", version=__version__)
    yield
    logger.info("Pricewatch API shutdown completed")


async def add_request_id_middleware(request: Request, call_next):
    """Add unique request ID to each request for tracking."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    logger.info(
        "Request started",
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        remote_addr=request.client.host if request.client else None,
    )

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    logger.info(
        "Request completed",
        request_id=request_id,
        status_code=response.status_code,
        method=request.method,
        path=request.url.path,
    )

    return response


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Pricewatch API",
        description="Price alert management for the Pricewatch monitoring engine.",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.middleware("http")(add_request_id_middleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    protected = [Depends(verify_auth_token)]
    app.include_router(
        alerts_router, prefix="/api/v1", tags=["Price Alerts"], dependencies=protected
    )
    app.include_router(
        system_router, prefix="/api/v1", tags=["System"], dependencies=protected
    )

    @app.get("/", response_model=StatusResponse, summary="API Root Endpoint")
    async def root(request: Request, token: str = Depends(verify_auth_token)):
        return StatusResponse.create(
            data={"service": "pricewatch", "version": __version__},
            message="Pricewatch is running",
            request_id=request.state.request_id,
        )

    return app


app = create_app()
