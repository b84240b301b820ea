"""
Central application settings.

Every tunable (DB connection, JWT secret, gateway credentials, tracing
endpoint) lives here and is handed to the services that need it through
FastAPI dependencies, instead of each module calling os.getenv on import.
"""
import warnings
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_JWT_SECRET = "insecure-jwt-secret-change-me"
_INSECURE_INTERNAL_KEY = "insecure-default-change-me"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # --- Database ---
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "localhost"  # In Docker, this will be 'postgres'
    postgres_port: str = "5433"
    postgres_db: str = "ecommerce"
    database_url: Optional[str] = None  # Full URL override, e.g. sqlite+aiosqlite:// for tests
    sql_echo: bool = False

    # --- Security ---
    jwt_secret_key: str = ""
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    internal_api_key: str = ""

    # --- Payment gateway (Razorpay) ---
    razorpay_key_id: str = ""
    razorpay_key_secret: str = ""
    razorpay_base_url: str = "https://api.razorpay.com/v1"
    payment_currency: str = "INR"
    gateway_timeout_seconds: float = Field(10.0, gt=0)

    # --- Observability / limits ---
    log_level: str = "INFO"
    otlp_endpoint: Optional[str] = None
    create_order_rate_limit: str = "10/minute"

    def model_post_init(self, __context) -> None:
        # Missing secrets in development get a loud, obviously-insecure default
        # instead of crashing the app at import time.
        if not self.jwt_secret_key:
            warnings.warn(
                "JWT_SECRET_KEY is not set. Using an insecure default. "
                "Set this env var in production!",
                stacklevel=2,
            )
            self.jwt_secret_key = _INSECURE_JWT_SECRET
        if not self.internal_api_key:
            warnings.warn(
                "INTERNAL_API_KEY is not set. Using an insecure default. "
                "Set this env var in production!",
                stacklevel=2,
            )
            self.internal_api_key = _INSECURE_INTERNAL_KEY

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
