#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Settings - Centralized configuration management
"""

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    CLASSIFIER_CACHE_SIZE,
    MIGRATION_BATCH_SIZE,
    MIGRATION_BATCH_DELAY_SECONDS,
    LOG_LEVEL,
)


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Engine settings (env prefix CONTENT_ENGINE_)"""

    # ========== Classifier ==========
    classifier_cache_size: int = CLASSIFIER_CACHE_SIZE

    # ========== Migration ==========
    migration_batch_size: int = MIGRATION_BATCH_SIZE
    migration_batch_delay: float = MIGRATION_BATCH_DELAY_SECONDS
    migration_enable_backup: bool = True
    migration_dry_run: bool = False
    # Fail records whose converted content doesn't pass storage validation
    strict_content_validation: bool = True

    # ========== Logging ==========
    log_level: str = LOG_LEVEL

    model_config = SettingsConfigDict(
        env_prefix="CONTENT_ENGINE_",
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Allow extra fields from .env that aren't defined in model
    )


# Global settings instance
settings = Settings()
