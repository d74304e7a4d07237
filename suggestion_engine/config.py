"""Runtime settings for the suggestion cycle."""

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings read from ``SUGGESTION_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(env_prefix="SUGGESTION_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    max_displacement: int = 2
    # the ordering prompt only ever carries the top of the baseline list
    max_tasks: int = 10
    inference_timeout_seconds: float = 10.0
    log_level: str = "INFO"


def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
