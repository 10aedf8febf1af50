"""
Application configuration using pydantic-settings.
All config is validated at startup - fail fast if anything is missing.
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    app_env: str = "development"
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_base_url: str = "http://localhost:8000"
    app_secret_key: str
    log_level: str = "INFO"
    allowed_origins: str = ""  # Comma-separated CORS origins (auto-includes localhost in dev)

    # Database
    database_url: str
    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Redis (auth rate limiting)
    redis_url: str = "redis://localhost:6379/0"

    # Dashboard sessions
    dashboard_jwt_secret: str = ""
    dashboard_jwt_expiry_hours: int = 24

    # Automation handoff
    automation_webhook_url: str = ""  # Empty disables the onboarding handoff
    automation_callback_secret: str = ""  # Empty accepts unauthenticated callbacks
    automation_timeout_seconds: float = 10.0

    # Sentry
    sentry_dsn: str = ""

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def jwt_signing_key(self) -> str:
        return self.dashboard_jwt_secret or self.app_secret_key

    @property
    def cors_origins(self) -> list[str]:
        origins = [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        if self.app_env == "development":
            origins += ["http://localhost:3000", "http://localhost:5173"]
        return origins


@lru_cache()
def get_settings() -> Settings:
    return Settings()
