"""
Application configuration using environment variables.
"""
import os
from dataclasses import dataclass
from dotenv import load_dotenv

# Load .env file
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class Settings:
    """Application settings."""
    APP_NAME: str = os.getenv("APP_NAME", "PageScore Engine")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Backing store (empty -> in-process memory store)
    REDIS_URL: str = os.getenv("REDIS_URL", "")

    # Analysis cache
    CACHE_ENABLED: bool = _env_bool("CACHE_ENABLED", "true")
    CACHE_KEY_PREFIX: str = os.getenv("CACHE_KEY_PREFIX", "seo_analysis:")
    CACHE_SCHEMA_VERSION: str = os.getenv("CACHE_SCHEMA_VERSION", "1.0.0")
    CACHE_COMPRESSION_ENABLED: bool = _env_bool("CACHE_COMPRESSION_ENABLED", "true")
    CACHE_COMPRESSION_THRESHOLD: int = int(os.getenv("CACHE_COMPRESSION_THRESHOLD", "1024"))
    CACHE_DEFAULT_TTL: int = int(os.getenv("CACHE_DEFAULT_TTL", "3600"))

    # Scoring
    SCORING_VERSION: str = os.getenv("SCORING_VERSION", "2.0.0")

settings = Settings()
