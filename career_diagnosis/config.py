import logging
import sys

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


def setup_logging(level: str = "INFO"):
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # Set third-party loggers to WARNING to reduce noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


class Settings(BaseSettings):
    # Claude API (server-side only)
    anthropic_api_key: Optional[str] = None
    anthropic_base_url: str = "https://api.anthropic.com/v1"
    anthropic_version: str = "2023-06-01"

    # Phase 1: quick diagnosis
    quick_model: str = "claude-3-haiku-20240307"
    quick_max_tokens: int = 300
    quick_temperature: float = 0.0
    quick_timeout: float = 10.0

    # Phase 2: detailed personal diagnosis
    detailed_model: str = "claude-3-5-sonnet-20241022"
    detailed_max_tokens: int = 800
    detailed_temperature: float = 0.1
    detailed_timeout: float = 30.0

    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()

# Initialize logging on import
setup_logging(settings.log_level)
