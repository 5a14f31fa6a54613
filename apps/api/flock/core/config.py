"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # App Version (format: a.bc.de - major.feature.patch)
    VERSION: str = "1.00.00"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./flock.db"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Internal scheduled endpoints (cron jobs)
    INTERNAL_SECRET: str = ""  # Secret for /internal/scheduled/* endpoints

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    # Notification delivery: "inline" writes rows immediately, "queue" goes through the worker
    NOTIFICATION_DISPATCH: str = "inline"

    # Worker
    WORKER_POLL_INTERVAL: int = 10  # seconds
    WORKER_BATCH_SIZE: int = 10
    REMINDER_INTERVAL_HOURS: int = 6

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def queue_notifications(self) -> bool:
        return self.NOTIFICATION_DISPATCH.lower() == "queue"


settings = Settings()
