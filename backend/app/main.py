"""FastAPI application entry point."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from app.config import settings
from app.database import engine
from app.errors import register_exception_handlers
from app.logging_config import configure_logging
from app.routes import auth, encounters, patients, practitioners
from app.schemas.api import HealthResponse

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"
API_VERSION = "1.0.0"

# Paths excluded from the request log
_UNLOGGED_PATHS = frozenset({f"{API_PREFIX}/health"})


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events for startup/shutdown."""
    configure_logging(level=settings.log_level, log_format=settings.log_format)
    logger.info(
        "Starting FHIR resource API",
        extra={"structured_fields": {"log_level": settings.log_level}},
    )

    yield  # Application runs here

    await engine.dispose()
    logger.info("Server exited properly")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        # Prevent clickjacking
        response.headers["X-Frame-Options"] = "DENY"
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


class RequestLogMiddleware(BaseHTTPMiddleware):
    """One structured access-log record per request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        path = request.url.path
        if path in _UNLOGGED_PATHS:
            return response

        fields = {
            "status": response.status_code,
            "method": request.method,
            "path": path,
            "client_ip": request.client.host if request.client else None,
            "user_agent": request.headers.get("user-agent"),
            "latency_ms": round((time.perf_counter() - start) * 1000, 3),
        }
        level = logging.ERROR if response.status_code >= 500 else logging.INFO
        logger.log(level, "request", extra={"structured_fields": fields})
        return response


api_router = APIRouter(prefix=API_PREFIX)


@api_router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="ok")


api_router.include_router(auth.router)
api_router.include_router(patients.router)
api_router.include_router(practitioners.router)
api_router.include_router(encounters.router)


app = FastAPI(
    title="FHIR Resource API",
    description="Field-projected access to encounters, patients and practitioners",
    version=API_VERSION,
    lifespan=lifespan,
)

register_exception_handlers(app)

# Security headers middleware (applied to all responses)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLogMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Authorization", "Content-Type"],
)

app.include_router(api_router)


@app.get("/")
async def root() -> dict:
    """Root endpoint with API info."""
    return {
        "name": "FHIR Resource API",
        "version": API_VERSION,
        "docs": "/docs",
    }


def main() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=None,
    )


if __name__ == "__main__":
    main()
