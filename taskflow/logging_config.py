"""Настройка structlog для TaskFlow

dev  -- читаемый вывод в консоль
json -- структурированный JSON (продакшн)

Пароли, токены и ключ Gemini в логи не попадают: их значения
заменяются маской ещё до рендеринга.
"""

import logging

import structlog

from .config import Settings

SECRET_KEYS = frozenset({"password", "password_confirmation", "token", "authorization", "api_key"})
MASK = "***"

# uvicorn.access дублирует request_completed из LoggingMiddleware
QUIET_LOGGERS = ("uvicorn.access",)


def mask_secrets(logger, method_name: str, event_dict: dict) -> dict:
    for key in SECRET_KEYS & event_dict.keys():
        event_dict[key] = MASK
    return event_dict


def setup_logging(settings: Settings) -> None:
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        mask_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
