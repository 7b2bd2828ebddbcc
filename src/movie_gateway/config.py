import os
from dataclasses import dataclass, field
from functools import lru_cache

import redis.asyncio as redis
from dotenv import load_dotenv

load_dotenv()

RANDOM_PAGE_STRATEGIES = ("top", "random-page")


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # TMDB (catalog upstream)
    tmdb_api_key: str | None = os.getenv("TMDB_API_KEY")
    tmdb_base_url: str = os.getenv("TMDB_BASE_URL", "https://api.themoviedb.org/3")
    tmdb_image_base_url: str = os.getenv("TMDB_IMAGE_BASE_URL", "https://image.tmdb.org/t/p")
    tmdb_timeout: float = float(os.getenv("TMDB_TIMEOUT", "10"))

    # Groq (completion upstream)
    groq_api_key: str | None = os.getenv("GROQ_API_KEY")
    groq_base_url: str = os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")
    groq_model: str = os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")
    groq_timeout: float = float(os.getenv("GROQ_TIMEOUT", "30"))

    # Security
    app_signature: str | None = os.getenv("APP_SIGNATURE")
    allowed_origins: tuple[str, ...] = field(
        default_factory=lambda: _split_csv(os.getenv("ALLOWED_ORIGINS", "*"))
    )

    # Rate limiting
    rate_limit_window_seconds: int = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "900"))
    rate_limit_max: int = int(os.getenv("RATE_LIMIT_MAX", "100"))

    # Cache
    redis_url: str | None = os.getenv("REDIS_URL") or None
    cache_ttl: int = int(os.getenv("CACHE_TTL", "300"))  # 5 minutes default
    cache_key_prefix: str = os.getenv("CACHE_KEY_PREFIX", "movie_gateway")
    cached_endpoints: tuple[str, ...] = field(
        default_factory=lambda: _split_csv(
            os.getenv("CACHED_ENDPOINTS", "now-playing,trending,upcoming")
        )
    )

    # Catalog policy
    random_page_strategy: str = os.getenv("RANDOM_PAGE_STRATEGY", "top")
    default_language: str = os.getenv("DEFAULT_LANGUAGE", "en-US")
    default_region: str = os.getenv("DEFAULT_REGION", "US")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("PORT", os.getenv("API_PORT", "8000")))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def rate_limit(self) -> str:
        """Limit string in the format understood by slowapi/limits."""
        return f"{self.rate_limit_max}/{self.rate_limit_window_seconds} second"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.rate_limit_window_seconds <= 0:
            raise ValueError("RATE_LIMIT_WINDOW_SECONDS must be a positive number of seconds")

        if self.rate_limit_max <= 0:
            raise ValueError("RATE_LIMIT_MAX must be a positive number of requests")

        if self.cache_ttl <= 0:
            raise ValueError("CACHE_TTL must be a positive number of seconds")

        if self.random_page_strategy not in RANDOM_PAGE_STRATEGIES:
            raise ValueError(
                f"RANDOM_PAGE_STRATEGY must be one of {list(RANDOM_PAGE_STRATEGIES)}, "
                f"got {self.random_page_strategy!r}"
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def get_redis_client(settings: Settings) -> redis.Redis:
    """Create an async Redis client for the configured URL."""
    if not settings.redis_url:
        raise ValueError("REDIS_URL is not configured")
    return redis.from_url(
        settings.redis_url,
        decode_responses=True,
        socket_connect_timeout=2,
    )
