"""
Configuration management for the crowd curation engine
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    # Logging
    log_level: str = "INFO"
    log_file: str = ""  # Empty = stderr only

    # Crowd-match blend (frequency must dominate)
    crowd_frequency_weight: float = 0.7
    crowd_popularity_weight: float = 0.3

    # Buckets
    favorites_limit: int = 15
    hidden_anthem_theme_min: float = 85.0
    hidden_anthem_popularity_max: float = 55.0

    # Smart filters
    average_track_minutes: float = 3.0

    # Refresh notifications
    min_guests_for_recommendations: int = 5
    rank_volatility_threshold: float = 0.3
    guest_batch_threshold: int = 5
    notify_top_n: int = 10


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
