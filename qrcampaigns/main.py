from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import time
from qrcampaigns.core.config import settings
from qrcampaigns.core.logging_config import setup_logging
from qrcampaigns.core.rate_limit import api_rate_limit_middleware
from qrcampaigns.api import auth, users, campaigns, stats, analytics, notifications, admin, public

setup_logging()
logger = logging.getLogger("qrcampaigns.http")

app = FastAPI(title="QR Campaigns API", version="1.0.0")

ALLOWED_ORIGINS = settings.get_allowed_origins()

app.middleware("http")(api_rate_limit_middleware)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["X-XSS-Protection"] = "1; mode=block"
    if settings.ENVIRONMENT == "production":
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    return response


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    message = f"[HTTP] {request.method} {request.url.path} {response.status_code} {duration_ms:.0f}ms"
    if response.status_code >= 500:
        logger.error(message)
    elif response.status_code >= 400:
        logger.warning(message)
    else:
        logger.info(message)
    return response


# Added last so it wraps every other middleware, including 429s from the rate limiter
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log unhandled errors; CORS headers are added here since the middleware is bypassed"""
    logger.exception(f"[HTTP] Unhandled exception on {request.method} {request.url.path}: {exc}")

    detail = "Internal server error"
    if settings.ENVIRONMENT == "development":
        detail = f"Internal server error: {exc}"
    response = JSONResponse(status_code=500, content={"detail": detail})

    origin = request.headers.get("origin")
    if origin and origin in ALLOWED_ORIGINS:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Access-Control-Allow-Methods"] = "*"
        response.headers["Access-Control-Allow-Headers"] = "*"

    return response


# Public scan pages live at the root
app.include_router(public.router, tags=["public"])
app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(users.router, prefix="/users", tags=["users"])
app.include_router(campaigns.router, prefix="/campaigns", tags=["campaigns"])
app.include_router(stats.router, prefix="/stats", tags=["stats"])
app.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
app.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
app.include_router(admin.router, prefix="/admin", tags=["admin"])


@app.get("/")
async def root():
    return {"message": "QR Campaigns API", "version": "1.0.0"}


@app.get("/health")
async def health():
    return {"status": "healthy"}
