import os
import logging
from pydantic import BaseModel, Field
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()


class Config(BaseModel):
    app_name: str = "Performance Review Platform"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api/v1"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./reviews.db")

    # Auth
    secret_key: str = os.getenv("SECRET_KEY", "dev-only-insecure-key-DO-NOT-USE-IN-PROD")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    login_rate_limit: str = os.getenv("LOGIN_RATE_LIMIT", "20/minute")

    # First-run admin account, only created when both are set
    bootstrap_admin_email: Optional[str] = os.getenv("BOOTSTRAP_ADMIN_EMAIL")
    bootstrap_admin_password: Optional[str] = os.getenv("BOOTSTRAP_ADMIN_PASSWORD")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    sql_echo: bool = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")

    version: str = "1.0.0"
    request_id_header: str = "X-Request-ID"

    # CORS: comma-separated origins loaded from env
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:3000,http://localhost:3100,"
                "http://127.0.0.1:3000,http://127.0.0.1:3100",
            ).split(",")
            if o.strip()
        ]
    )


settings = Config()

# --- Startup Validation for Production ---
_logger = logging.getLogger(__name__)
if settings.environment not in ("development", "testing"):
    if "dev-only" in settings.secret_key:
        raise RuntimeError(
            "FATAL: SECRET_KEY must be set for non-development environments. "
            "Set it as an environment variable."
        )
elif "dev-only" in settings.secret_key:
    _logger.warning("⚠ Using insecure default SECRET_KEY, only acceptable in development.")
