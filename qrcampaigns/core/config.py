from pydantic_settings import BaseSettings
from typing import Optional, List


def _parse_allowed_origins(v: str) -> List[str]:
    """Parse comma-separated origins string; strip whitespace; keep non-empty."""
    if not v or not v.strip():
        return []
    return [o.strip() for o in v.split(",") if o.strip()]


_DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5000",
    "http://127.0.0.1:5173",
]


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "postgresql://postgres:postgres@db:5432/qrcampaigns"

    # CORS: comma-separated extra origins for production
    ALLOWED_ORIGINS_EXTRA: str = ""

    def get_allowed_origins(self) -> List[str]:
        """Return CORS allowed origins: default localhost + ALLOWED_ORIGINS_EXTRA."""
        return _DEFAULT_CORS_ORIGINS + _parse_allowed_origins(self.ALLOWED_ORIGINS_EXTRA)

    # Auth
    SECRET_KEY: str = "supersecret_jwt_key_change_in_production"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Runtime
    ENVIRONMENT: str = "production"  # "development" exposes error details
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = "logs"  # None/empty disables the rotating file handler

    # Public links (QR codes point at {PUBLIC_BASE_URL}/qrcode/{id}); falls back to request base URL
    PUBLIC_BASE_URL: Optional[str] = None

    # Analytics: daily windows and hourly buckets are computed in this zone
    ANALYTICS_TIMEZONE: str = "Asia/Kolkata"

    # Notifications: campaigns ending within this many days are "expiring"
    EXPIRY_WARNING_DAYS: int = 3

    # Region lookup for scans (ip-api.com compatible JSON). Unset = store raw IP.
    GEOIP_API_URL: Optional[str] = None  # e.g. "http://ip-api.com/json/{ip}"
    GEOIP_TIMEOUT_SECONDS: float = 2.0
    TRUST_PROXY_HEADERS: bool = True

    # Per-IP limit for /api-style routes
    API_RATE_LIMIT_REQUESTS: int = 100
    API_RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60

    # Seed
    SEED_ADMIN_USERNAME: str = "admin"
    SEED_ADMIN_PASSWORD: str = "changeme"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
