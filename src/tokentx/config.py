"""
Configuration management using pydantic-settings.
"""

from __future__ import annotations

import sys
from typing import Literal

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tokentx.constants import DEFAULT_FIXED_FEE


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TOKENTX_", env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    # Address version bytes: prod or dev network
    network: Literal["prod", "dev"] = "dev"

    rpc_url: str = "http://127.0.0.1:12381"
    rpc_user: str = "user"
    rpc_password: str = "pass"
    rpc_timeout: float = Field(default=30.0, gt=0)

    fixed_fee: int = Field(default=DEFAULT_FIXED_FEE, ge=0, description="Fee in tapyrus")

    log_level: str = "INFO"


def get_settings() -> Settings:
    return Settings()


def setup_logging(level: str = "INFO") -> None:
    """Configure loguru logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )
