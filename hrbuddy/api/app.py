"""FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.middleware.sessions import SessionMiddleware

from hrbuddy.api.deps import require_user
from hrbuddy.api.limiter import limiter
from hrbuddy.config import settings
from hrbuddy.db.base import init_db
from hrbuddy.errors import HRBuddyError
from hrbuddy.services.mcp_service import McpService

logger = logging.getLogger(__name__)

ALLOWED_ORIGINS = settings.cors_origins.split(",")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database and MCP service on startup; close MCP sessions on shutdown."""
    try:
        init_db()
    except ValueError:
        logger.warning("DATABASE_URL not configured, skipping table creation")
    app.state.mcp_service = McpService(settings)
    yield
    await app.state.mcp_service.close()


app = FastAPI(
    title="HR Buddy API",
    description="Applicant tracking with AI resume analysis and search",
    version="0.1.0",
    lifespan=lifespan,
)

app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Return 429 with a clear message when rate limit is exceeded."""
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


@app.exception_handler(RequestValidationError)
async def validation_handler(request: Request, exc: RequestValidationError):
    """Return 400 for malformed request bodies."""
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request format", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(HRBuddyError)
async def service_error_handler(request: Request, exc: HRBuddyError):
    """Turn uncaught service failures into a structured 500."""
    logger.error(f"Unhandled service error on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"success": False, "error": str(exc)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"success": False, "error": "Internal server error"})


app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)
app.add_middleware(SessionMiddleware, secret_key=settings.session_secret, same_site="lax")


# Import and include routers
from hrbuddy.api.routes import (  # noqa: E402
    analysis,
    applicants,
    auth,
    dashboard,
    email,
    mcp,
    search,
    webhooks,
)

protected = [Depends(require_user)]

app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(applicants.router, prefix="/applicants", tags=["Applicants"], dependencies=protected)
app.include_router(search.router, prefix="/search", tags=["Search"], dependencies=protected)
app.include_router(email.router, prefix="/email", tags=["Email"], dependencies=protected)
app.include_router(mcp.router, prefix="/mcp", tags=["MCP"], dependencies=protected)
app.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"], dependencies=protected)
# Bearer-secret routes, called by Zapier and internal jobs
app.include_router(webhooks.router, prefix="/webhooks", tags=["Webhooks"])
app.include_router(analysis.router, prefix="/analysis", tags=["Analysis"])


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
