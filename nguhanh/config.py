"""
Ngũ Hành analyzer settings

Runtime settings are read from the .env file.
Usage:
    from nguhanh.config import settings
    path = settings.INPUT_FILE
"""

import sys
from typing import Optional

from loguru import logger
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # ignore variables not declared here
    )

    # === Logging ===
    LOG_LEVEL: str = "INFO"

    # === Batch files ===
    INPUT_FILE: str = "sodienthoai.txt"
    OUTPUT_FILE: str = "result.txt"

    # === Parallel evaluation ===
    # 0 or 1 keeps evaluation in-process
    MAX_WORKERS: int = 0
    PARALLEL_MIN_LINES: int = 20000


def setup_logging(level: Optional[str] = None) -> None:
    """
    Route loguru output to stderr at the configured level.

    The applied level is kept in settings.LOG_LEVEL so worker processes
    can be started with the same one.
    """
    settings.LOG_LEVEL = (level or settings.LOG_LEVEL).upper()
    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL)


# singleton instance
settings = Settings()
