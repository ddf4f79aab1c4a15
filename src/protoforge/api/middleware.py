"""Middleware: request timing, security headers, body size limits."""

from __future__ import annotations

import re
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

# Artifact creation and version recording carry generated markup/code
_CONTENT_PATH = re.compile(r"^/artifacts(/[^/]+/versions)?$")
_DEFAULT_MAX_CONTENT = 5 * 1024 * 1024
_DEFAULT_MAX_OTHER = 1 * 1024 * 1024


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Add X-Request-Duration header with processing time."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000
        response.headers["X-Request-Duration-Ms"] = f"{duration_ms:.1f}"
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add standard security headers to every response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        response.headers["Content-Security-Policy"] = "default-src 'self'; frame-ancestors 'none'"
        return response


class RequestBodyLimitMiddleware(BaseHTTPMiddleware):
    """Reject request bodies that exceed size limits.

    Artifact creation and version endpoints allow ``max_content`` bytes;
    all other endpoints are capped at ``max_other``.  The Content-Length
    header is checked first, then the streamed byte count, so chunked
    uploads are bounded too.  The consumed bytes are cached on
    ``request._body`` so downstream handlers can still read the body.
    """

    def __init__(
        self,
        app: ASGIApp,
        max_content: int = _DEFAULT_MAX_CONTENT,
        max_other: int = _DEFAULT_MAX_OTHER,
    ) -> None:
        super().__init__(app)
        self._max_content = max_content
        self._max_other = max_other

    def _too_large(self, limit: int) -> JSONResponse:
        return JSONResponse(
            status_code=413,
            content={"detail": f"Request body too large (max {limit} bytes)"},
        )

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path.rstrip("/")
        limit = self._max_content if _CONTENT_PATH.match(path) else self._max_other

        content_length = request.headers.get("content-length")
        if content_length is not None:
            try:
                declared = int(content_length)
            except ValueError:
                declared = -1
            if declared > limit:
                return self._too_large(limit)

        if request.method in ("POST", "PUT", "PATCH"):
            chunks: list[bytes] = []
            total = 0
            async for chunk in request.stream():
                total += len(chunk)
                if total > limit:
                    return self._too_large(limit)
                chunks.append(chunk)
            request._body = b"".join(chunks)  # noqa: SLF001

        return await call_next(request)
