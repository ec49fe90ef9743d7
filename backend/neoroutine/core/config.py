"""
Application configuration and environment variables
"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment variables"""

    # Database
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")

    # Time
    APP_TIMEZONE: str = os.getenv("APP_TIMEZONE", "UTC")

    # Insights
    INSIGHTS_CACHE_TTL_SECONDS: float = float(os.getenv("INSIGHTS_CACHE_TTL_SECONDS", "60"))
    DEFAULT_INSIGHTS_RANGE: int = int(os.getenv("DEFAULT_INSIGHTS_RANGE", "30"))

    # Scheduler
    SCHEDULER_ENABLED: bool = _env_bool("SCHEDULER_ENABLED", True)
    REMINDER_SWEEP_HOUR: int = int(os.getenv("REMINDER_SWEEP_HOUR", "9"))

    # CLI
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:8000")


# Create a global settings instance
settings = Settings()
