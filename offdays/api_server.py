"""
Off-Days Tracker FastAPI Application.

Main entry point for the REST API.
Answers which interns and residents are off on a given date.

Run with:
    uvicorn offdays.api_server:app --reload --port 8080

Or production:
    uvicorn offdays.api_server:app --host 0.0.0.0 --port 8080 --workers 2
"""

import os
import uuid
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from offdays.config import Settings
from offdays.errors import ErrorKind, ScheduleError
from offdays.models import HealthResponse, PinRequest, PinResponse
from offdays.redis_manager import RedisConnectionManager
from offdays.routers import v1_router, v2_router
from offdays.table_store import RedisTableStore, TableStore

# ============================================================================
# LOGGING SETUP
# ============================================================================

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("offdays.api")

STATUS_BY_KIND = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UNEXPECTED: 500,
}

# ============================================================================
# MIDDLEWARE: REQUEST ID TRACKING
# ============================================================================

class RequestIdMiddleware(BaseHTTPMiddleware):
    """Add request ID to all requests for tracing."""

    async def dispatch(self, request: Request, call_next):
        # Use incoming X-Request-ID or generate new UUID
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        return response


# ============================================================================
# ERROR HANDLERS
# ============================================================================

async def schedule_error_handler(request: Request, exc: ScheduleError):
    status_code = STATUS_BY_KIND[exc.kind]
    if status_code >= 500:
        logger.error("requestId=%s error=%s",
                     getattr(request.state, "request_id", "unknown"), exc.message)
    return ORJSONResponse(status_code=status_code, content={"error": exc.message})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = "Not found" if exc.status_code == 404 else str(exc.detail)
    return ORJSONResponse(status_code=exc.status_code, content={"error": message})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return ORJSONResponse(status_code=400, content={"error": errors or "Invalid request"})


async def general_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler."""
    request_id = getattr(request.state, "request_id", "unknown")
    logger.error(
        "Unhandled exception requestId=%s: %s",
        request_id,
        str(exc),
        exc_info=True
    )
    return ORJSONResponse(status_code=500, content={"error": str(exc)})


# ============================================================================
# FASTAPI APP
# ============================================================================

def create_app(settings: Optional[Settings] = None,
               store: Optional[TableStore] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Defaults to ``Settings.from_env()``
        store: Defaults to a Redis-backed store using the settings' key prefix
    """
    settings = settings or Settings.from_env()

    app = FastAPI(
        title="Off-Days Tracker API",
        description="Which interns and residents are off on a given date",
        version="0.1.0",
        docs_url="/docs",
        openapi_url="/openapi.json",
        default_response_class=ORJSONResponse,
    )
    app.state.settings = settings
    app.state.store = store if store is not None else RedisTableStore(key_prefix=settings.key_prefix)

    app.add_middleware(RequestIdMiddleware)

    cors_origins = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:8000"
    ).split(",")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ScheduleError, schedule_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(v1_router)
    app.include_router(v2_router)

    @app.on_event("shutdown")
    async def shutdown_event():
        """Release the Redis pool if this app owns one"""
        if isinstance(app.state.store, RedisTableStore):
            await RedisConnectionManager().close()

    # ========================================================================
    # ENDPOINTS
    # ========================================================================

    @app.get("/health", response_model=HealthResponse)
    async def health():
        """Health check endpoint."""
        ping = getattr(app.state.store, "ping", None)
        return HealthResponse(status="ok", redis=await ping() if ping else False)

    @app.post("/validate", response_model=PinResponse)
    async def validate_pin(payload: PinRequest):
        """Check a PIN against the configured one."""
        is_valid = bool(app.state.settings.default_pin) and payload.pin == app.state.settings.default_pin
        if not is_valid:
            logger.warning("PIN validation failed")
        return PinResponse(isValid=is_valid)

    return app


app = create_app()


# ============================================================================
# MAIN
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8080"))
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        log_level="info"
    )
