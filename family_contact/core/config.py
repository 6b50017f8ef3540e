"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"
    VERSION: str = "0.1.0"

    # Database
    DATABASE_URL: str = "sqlite:///./family_contact.db"

    # Logging
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    # Contact schedules are reviewed every N months from start / last review
    SCHEDULE_REVIEW_MONTHS: int = 6

    # Used to derive a DBS expiry when only the check date is known
    BACKGROUND_CHECK_VALIDITY_YEARS: int = 3

    # Schedule counter cascade attempts before giving up
    CASCADE_MAX_ATTEMPTS: int = 3

    # Risk-gated scheduling: require a current approved assessment recommending contact
    REQUIRE_CURRENT_RISK_ASSESSMENT: bool = False

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
