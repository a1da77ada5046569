"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portal.config import get_settings
from portal.db.database import init_db
from portal.exceptions import PortalError

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events.

    Args:
        app: FastAPI application instance.
    """
    # Startup
    init_db()
    yield
    # Shutdown (cleanup if needed)


app = FastAPI(
    title=settings.app_name,
    description="Client portal login, sessions and credential management",
    version="0.1.0",
    lifespan=lifespan,
    debug=settings.debug,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    """Render portal errors as ``{"error": message}`` with their status."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


# Import and include routers
from portal.auth.router import router as auth_router
from portal.client_auth.router import router as client_auth_router
from portal.client_portal.router import router as client_portal_router
from portal.scheduler.router import router as cron_router

# API routes
app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(client_auth_router, prefix="/api/client-auth", tags=["client-auth"])
app.include_router(client_portal_router, prefix="/api/client-portal", tags=["client-portal"])
app.include_router(cron_router, prefix="/api/cron", tags=["cron"])


@app.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "ok"}
