"""Application configuration and logging setup."""

import logging
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # App
    app_name: str = "AI Governance Console"
    debug: bool = False
    log_level: str = "INFO"

    # Backend collaborator
    api_base_url: str = "http://localhost:8000"
    request_timeout: float | None = 30.0

    # Graph layout
    layout_iterations: int = 100
    layout_seed: int | None = None
    canvas_width: int = 900
    canvas_height: int = 600

    # Paths
    positions_path: str | None = None
    seed_graph_path: str | None = None

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the console.

    Args:
        level: Log level name; defaults to ``Settings.log_level``
    """
    settings = get_settings()
    level_name = (level or settings.log_level).upper()
    if settings.debug:
        level_name = "DEBUG"

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
