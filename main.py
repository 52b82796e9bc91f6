"""Authkeeper - password authentication with access/refresh tokens."""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.config import get_settings
from app.errors import AuthError
from app.routers import auth_router, users_router

VERSION = "0.1.0"

logger = logging.getLogger("authkeeper")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

for problem in get_settings().validate():
    logger.warning("Config: %s", problem)

app = FastAPI(title="Authkeeper", version=VERSION)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """JSON-only API: nothing is framed, cached or allowed to load subresources."""

    HEADERS = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Referrer-Policy": "no-referrer",
        "Cache-Control": "no-store",
        "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    }

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers.update(self.HEADERS)
        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    MAX_BODY_SIZE = 64 * 1024

    async def dispatch(self, request: Request, call_next) -> Response:
        declared = request.headers.get("content-length", "")
        if declared.isdigit() and int(declared) > self.MAX_BODY_SIZE:
            return JSONResponse(status_code=413, content={"detail": "Request body too large"})
        return await call_next(request)


class AuditLogMiddleware(BaseHTTPMiddleware):
    """Log every state-changing call on the auth and user endpoints, with its outcome."""

    AUDITED_PREFIXES = ("/api/v1/auth/", "/api/v1/users/")
    AUDITED_METHODS = frozenset({"POST", "PATCH"})

    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()
        response = await call_next(request)

        if request.method in self.AUDITED_METHODS and request.url.path.startswith(self.AUDITED_PREFIXES):
            status = response.status_code
            outcome = "ok" if status < 400 else "rejected" if status < 500 else "error"
            logger.info(
                "AUDIT %s %s %s status=%d %.0fms client=%s",
                outcome,
                request.method,
                request.url.path,
                status,
                (time.perf_counter() - started) * 1000,
                request.client.host if request.client else "-",
            )
        return response


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestSizeLimitMiddleware)
app.add_middleware(AuditLogMiddleware)

app.include_router(auth_router)
app.include_router(users_router)


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Map service errors to JSON responses with their status code."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.get("/api/health")
def health_check() -> dict:
    return {"status": "ok", "app": "authkeeper", "version": VERSION}
