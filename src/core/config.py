"""Application settings. Read from environment variables (prefixed with CHESS_PATTERN_) or a .env file."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CHESS_PATTERN_", env_file=".env", extra="ignore"
    )

    database_url: str = "sqlite:///./chess_pattern.db"
    database_echo: bool = False
    # A move pattern is only accepted as a credential with MORE than 20 half-moves
    min_pattern_half_moves: int = 21
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
