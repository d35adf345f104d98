"""Настройки приложения -- загружаются из переменных окружения

    TASKFLOW_DB_PATH       путь к файлу SQLite
    TASKFLOW_CORS_ORIGINS  разрешённые origin через запятую
    TASKFLOW_LOG_FORMAT    dev / json
    TASKFLOW_LOG_LEVEL     уровень логирования
    GEMINI_API_KEY         ключ Gemini API
    GEMINI_MODEL           модель для генерации задач
    GEMINI_BASE_URL        базовый URL Gemini API
    GEMINI_TIMEOUT_S       таймаут вызова Gemini (секунды)
"""

import os
from typing import Literal

import structlog
from pydantic import BaseModel, Field, SecretStr

log = structlog.get_logger()

DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100


class Settings(BaseModel):
    db_path: str = "taskflow.db"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    log_format: Literal["dev", "json"] = "dev"
    log_level: str = "INFO"

    gemini_api_key: SecretStr = SecretStr("")
    gemini_model: str = "gemini-2.5-flash-lite"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_timeout_s: int = Field(default=30, ge=1)


def load_settings() -> Settings:
    """Собрать Settings из окружения; неизвестные значения -- по умолчанию"""
    kwargs: dict = {}

    if val := os.environ.get("TASKFLOW_DB_PATH"):
        kwargs["db_path"] = val

    if val := os.environ.get("TASKFLOW_CORS_ORIGINS"):
        kwargs["cors_origins"] = [o.strip() for o in val.split(",") if o.strip()]

    if val := os.environ.get("TASKFLOW_LOG_FORMAT"):
        if val in ("dev", "json"):
            kwargs["log_format"] = val
        else:
            log.warning("invalid_log_format", value=val, fallback="dev")

    if val := os.environ.get("TASKFLOW_LOG_LEVEL"):
        kwargs["log_level"] = val.upper()

    if val := os.environ.get("GEMINI_API_KEY"):
        kwargs["gemini_api_key"] = SecretStr(val)

    if val := os.environ.get("GEMINI_MODEL"):
        kwargs["gemini_model"] = val

    if val := os.environ.get("GEMINI_BASE_URL"):
        kwargs["gemini_base_url"] = val.rstrip("/")

    if val := os.environ.get("GEMINI_TIMEOUT_S"):
        try:
            timeout = int(val)
            if timeout < 1:
                raise ValueError(val)
            kwargs["gemini_timeout_s"] = timeout
        except ValueError:
            log.warning(
                "invalid_timeout_config",
                env_var="GEMINI_TIMEOUT_S",
                value=val,
                fallback=30,
            )

    return Settings(**kwargs)
