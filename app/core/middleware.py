"""Middleware for request processing, error handling, and page access guards."""
import time
import uuid
import logging
from typing import Callable
from fastapi import Request, Response
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
from app.config.settings import settings
from app.core.dependencies import extract_access_token, identity_resolver_for
from app.core.guards import decide, redirect_location, signed_in_home
from app.core.permissions import is_auth_route, requirement_for_path

logger = logging.getLogger(__name__)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to ensure each request has a correlation ID.
    Adds/propagates `X-Request-ID` header and stores it in request.state.request_id.
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Last line of defence for exceptions no handler claimed."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
            return JSONResponse(status_code=500, content={"error": "Internal server error"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging all requests."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()

        logger.info(
            f"Request: {request.method} {request.url.path} "
            f"from {request.client.host if request.client else 'unknown'}"
        )

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"Response: {response.status_code} "
            f"took {process_time:.3f}s"
        )
        response.headers["X-Process-Time"] = str(process_time)
        return response


class AccessGuardMiddleware(BaseHTTPMiddleware):
    """
    Edge guard for page routes.

    Runs before any route code. Protected pages redirect anonymous callers to
    sign-in; admin pages additionally redirect non-admins and admins missing
    the page's permission. Signed-in users opening sign-in or sign-up are sent
    to their home page. API routes are left to the throwing guards.
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if path.startswith(settings.API_V1_STR):
            return await call_next(request)

        requirement = requirement_for_path(path)
        auth_route = is_auth_route(path)
        if requirement is None and not auth_route:
            return await call_next(request)

        resolver = identity_resolver_for(request.app)
        identity = await run_in_threadpool(resolver.resolve, extract_access_token(request))
        request.state.identity = identity

        if auth_route:
            if identity is not None:
                return RedirectResponse(signed_in_home(identity), status_code=307)
            return await call_next(request)

        target = f"{path}?{request.url.query}" if request.url.query else path
        location = redirect_location(decide(identity, requirement), requirement, target)
        if location:
            logger.info(f"Access guard redirecting {path} -> {location}")
            return RedirectResponse(location, status_code=307)

        return await call_next(request)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware for adding security headers."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        if settings.ENVIRONMENT.lower() == "production":
            response.headers["X-Frame-Options"] = "DENY"
        else:
            response.headers["Content-Security-Policy"] = (
                "frame-ancestors 'self' http://localhost:* http://127.0.0.1:*"
            )

        return response
