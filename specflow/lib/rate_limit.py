# specflow/lib/rate_limit.py
"""
Rate limiting - protect against API abuse.

Every route shares the default limit (RATE_LIMIT, e.g. "100/minute") per
client address. SlowAPIMiddleware rejects over-limit requests before the
route handler runs.

The middleware resolves the matched route through its `endpoint`; routers
mounted with include_router on FastAPI 0.137+ have none and every request
would be exempt, hence the upper bound on fastapi.
"""
from typing import Optional

from fastapi import FastAPI, Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from specflow.core.config import settings
from specflow.core.logging import log


def create_limiter(rate_limit: Optional[str] = None) -> Limiter:
    return Limiter(
        key_func=get_remote_address,
        default_limits=[rate_limit or settings.rate_limit],
        headers_enabled=True,
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    429 in the standard error envelope, with Retry-After and X-RateLimit-* headers.

    Kept synchronous: SlowAPIMiddleware calls it without awaiting.
    """
    log("SECURITY", f"Rate limit exceeded for {get_remote_address(request)} on {request.url.path}")
    response = JSONResponse(
        {"success": False, "error": f"Rate limit exceeded: {exc.detail}"},
        status_code=429,
    )
    return request.app.state.limiter._inject_headers(response, request.state.view_rate_limit)


def register_rate_limiting(app: FastAPI, rate_limit: Optional[str] = None) -> Limiter:
    rate_limit = rate_limit or settings.rate_limit
    limiter = create_limiter(rate_limit)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
    log("SECURITY", f"Rate limiting enabled: {rate_limit}")
    return limiter
