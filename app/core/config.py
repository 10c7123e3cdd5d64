"""
Application configuration management
"""
from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    # Supabase
    SUPABASE_URL: str
    SUPABASE_PUBLISHABLE_KEY: str
    SUPABASE_SECRET_KEY: str

    # Recipe extraction webhook
    RECIPE_WEBHOOK_URL: str = "https://flw.panteragpt.com/webhook/social-media-recipe"
    RECIPE_WEBHOOK_TIMEOUT_SECONDS: float = 120.0
    RECIPE_WEBHOOK_USER_AGENT: str = "Chef-Roulette/1.0"

    # Application
    APP_ENV: str = "development"
    APP_NAME: str = "Chef Roulette API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True

    # CORS
    CORS_ORIGINS: str = "http://localhost:5000,http://localhost:5173"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Rate Limiting
    RATE_LIMIT_PER_MINUTE: int = 60
    CAPTURE_RATE_LIMIT_PER_MINUTE: int = 10  # Webhook calls are slow and metered

    # Gamification
    POINTS_PER_COOK: int = 50
    WEEKLY_RESET_DAY_OF_WEEK: str = "mon"
    WEEKLY_RESET_HOUR_UTC: int = 0

    # Pro subscription
    PRO_SUBSCRIPTION_DAYS: int = 30

    # Uvicorn Workers (0 = auto-calculate based on CPU cores)
    UVICORN_WORKERS: int = 0

    # Logging
    LOG_LEVEL: str = "INFO"

    # Monitoring
    SENTRY_DSN: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.APP_ENV == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
