"""Actioo API application factory and ASGI entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from src.api.middleware.error_handler import error_handler_middleware, http_exception_handler
from src.api.middleware.latency_logging import latency_logging_middleware
from src.api.middleware.request_size import request_size_limit_middleware
from src.api.routes import auth, health, profiles, spots, stats
from src.core.config import get_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

API_V1_ROUTERS = (auth.router, profiles.router, spots.router, stats.router)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    logger.info("Starting %s (%s)", settings.app_name, settings.app_env)
    if not (settings.supabase_signing_key_jwk or settings.supabase_jwt_secret):
        logger.warning("No token signing key configured; every authenticated request will get 401")
    if not settings.supabase_anon_key:
        logger.warning("SUPABASE_ANON_KEY not set; user-scoped clients fall back to the secret key")
    yield
    logger.info("Shutting down %s", settings.app_name)


def create_app() -> FastAPI:
    """Build the application: middleware stack, health probes and /api/v1."""
    settings = get_settings()

    app = FastAPI(
        title="Actioo API",
        description="Action sports community backend: spots, rider profiles and dashboard stats",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Last added runs first: size check, then latency logging, then error formatting
    app.add_middleware(BaseHTTPMiddleware, dispatch=error_handler_middleware)
    app.add_middleware(BaseHTTPMiddleware, dispatch=latency_logging_middleware)
    app.add_middleware(BaseHTTPMiddleware, dispatch=request_size_limit_middleware)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.include_router(health.router)

    api_v1 = APIRouter(prefix="/api/v1")
    for router in API_V1_ROUTERS:
        api_v1.include_router(router)
    app.include_router(api_v1)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("src.main:app", host=settings.host, port=settings.port, reload=settings.debug)
