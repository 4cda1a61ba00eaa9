"""Application configuration"""

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_SECRET_KEY = "dev-secret-change-me"


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    app_name: str = "Kanban Boards API"
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"  # "development" or "production"

    # Database (empty path keeps everything in memory)
    database_path: str = ""

    # Security
    secret_key: str = DEFAULT_SECRET_KEY
    access_token_expire_minutes: int = 60 * 24  # 24 hours

    # Board list policy
    max_lists_per_board: int = 20
    recommended_lists_per_board: int = 10
    list_warning_threshold: int = 15
    max_list_title_length: int = 100

    # Card policy
    max_cards_per_list: int = 100
    max_card_title_length: int = 200
    max_card_description_length: int = 2000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def validate_production_settings(settings: Settings) -> list:
    """Validate that all required settings are configured for production"""
    errors = []

    if settings.secret_key == DEFAULT_SECRET_KEY:
        errors.append("SECRET_KEY must be changed from default value")

    if not settings.database_path:
        errors.append("DATABASE_PATH is empty; data will not survive a restart")

    if settings.list_warning_threshold > settings.max_lists_per_board:
        errors.append("LIST_WARNING_THRESHOLD should not exceed MAX_LISTS_PER_BOARD")

    return errors


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    base_settings = Settings()

    if base_settings.environment == "production":
        errors = validate_production_settings(base_settings)
        for error in errors:
            logger.warning(f"Production config warning: {error}")

    return base_settings


# Convenience access
settings = get_settings()
