"""
Simple in-memory rate limiting for API endpoints
"""
from functools import wraps
from fastapi import HTTPException, status, Request
from fastapi.responses import JSONResponse
from typing import Callable, Optional
from datetime import datetime, timedelta
from collections import defaultdict
import logging
import threading

from qrcampaigns.core.config import settings

logger = logging.getLogger(__name__)

# In-memory store for rate limiting
# Format: {identifier: [timestamp, ...]}
_rate_limit_store = defaultdict(list)
_rate_limit_lock = threading.Lock()

# Cleanup old entries every 5 minutes
_last_cleanup = datetime.utcnow()
_cleanup_interval = timedelta(minutes=5)

# Public scan pages and health checks are never limited
EXEMPT_PATH_PREFIXES = ("/qrcode/", "/qr-view/", "/health", "/docs", "/openapi.json")


def _cleanup_old_entries():
    """Remove entries older than the time window"""
    global _last_cleanup

    now = datetime.utcnow()
    if now - _last_cleanup < _cleanup_interval:
        return

    with _rate_limit_lock:
        _last_cleanup = now
        cutoff_time = now - timedelta(hours=1)  # Keep last hour of data

        for key in list(_rate_limit_store.keys()):
            _rate_limit_store[key] = [ts for ts in _rate_limit_store[key] if ts > cutoff_time]
            if not _rate_limit_store[key]:
                del _rate_limit_store[key]


def reset_rate_limits():
    """Forget every recorded request."""
    with _rate_limit_lock:
        _rate_limit_store.clear()


def hit(identifier: str, max_requests: int, window_seconds: int) -> tuple[bool, int, int]:
    """
    Record a request for `identifier`.

    Returns (allowed, remaining, retry_after_seconds). Refused requests are not recorded.
    """
    _cleanup_old_entries()

    now = datetime.utcnow()
    window_start = now - timedelta(seconds=window_seconds)

    with _rate_limit_lock:
        recent_requests = [ts for ts in _rate_limit_store[identifier] if ts > window_start]
        _rate_limit_store[identifier] = recent_requests

        if len(recent_requests) >= max_requests:
            oldest = min(recent_requests)
            retry_after = max(1, int((oldest + timedelta(seconds=window_seconds) - now).total_seconds()))
            return False, 0, retry_after

        recent_requests.append(now)
        return True, max_requests - len(recent_requests), 0


def client_ip(request: Optional[Request]) -> str:
    """Best-effort client address, honouring X-Forwarded-For when proxies are trusted."""
    if request is None:
        return "unknown"
    if settings.TRUST_PROXY_HEADERS:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            first_hop = forwarded.split(",")[0].strip()
            if first_hop:
                return first_hop
    return request.client.host if request.client else "unknown"


def rate_limit(max_requests: int = 5, window_seconds: int = 300, identifier_func: Callable = None):
    """
    Rate limiting decorator for FastAPI endpoints.

    Args:
        max_requests: Maximum number of requests allowed
        window_seconds: Time window in seconds (default: 5 minutes)
        identifier_func: Function to extract identifier from request (default: user id, then IP)

    Usage:
        @router.post("/endpoint")
        @rate_limit(max_requests=5, window_seconds=300)
        def my_endpoint(request: Request, ...):
            ...
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            request = None
            user = None

            for arg in args:
                if isinstance(arg, Request):
                    request = arg
                    break

            for key, value in kwargs.items():
                if isinstance(value, Request):
                    request = value
                elif hasattr(value, 'id') and hasattr(value, 'is_admin'):  # User object
                    user = value

            if identifier_func:
                identifier = identifier_func(request, user)
            elif user:
                identifier = f"user_{user.id}"
            else:
                identifier = client_ip(request)
            identifier = f"{func.__name__}:{identifier}"

            allowed, _, retry_after = hit(identifier, max_requests, window_seconds)
            if not allowed:
                logger.warning(f"[RATE_LIMIT] {func.__name__} exceeded for {identifier}")
                raise HTTPException(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    detail=f"Rate limit exceeded: {max_requests} requests per {window_seconds} seconds. Please try again later.",
                    headers={"Retry-After": str(retry_after)},
                )

            return func(*args, **kwargs)

        return wrapper
    return decorator


async def api_rate_limit_middleware(request: Request, call_next):
    """Per-IP limit over all API routes; HEAD requests and public scan pages pass through."""
    path = request.url.path
    if request.method == "HEAD" or path == "/" or path.startswith(EXEMPT_PATH_PREFIXES):
        return await call_next(request)

    max_requests = settings.API_RATE_LIMIT_REQUESTS
    window_seconds = settings.API_RATE_LIMIT_WINDOW_SECONDS
    ip = client_ip(request)

    allowed, remaining, retry_after = hit(f"api:{ip}", max_requests, window_seconds)
    if not allowed:
        logger.warning(f"[RATE_LIMIT] {request.method} {path} refused for {ip}")
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={"detail": "Too many requests", "retry_after": retry_after},
            headers={"Retry-After": str(retry_after)},
        )

    response = await call_next(request)
    response.headers["X-RateLimit-Limit"] = str(max_requests)
    response.headers["X-RateLimit-Remaining"] = str(remaining)
    return response
