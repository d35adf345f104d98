"""FastAPI-приложение TaskFlow

create_app() собирает приложение: настройки, логирование, CORS,
обработчики ошибок и роутеры. lifespan создаёт таблицы при старте.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import Settings, load_settings
from .db import init_db
from .exceptions import TaskFlowError, Unauthenticated
from .frontend import router as frontend_router
from .logging_config import setup_logging
from .middleware import LoggingMiddleware
from .routes import auth, tasks

log = structlog.get_logger()

SKIPPED_LOC_PARTS = ("body", "query", "path")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    init_db(settings.db_path)
    log.info("database_ready", db_path=settings.db_path)
    yield


def validation_errors(exc: RequestValidationError) -> dict[str, list[str]]:
    """Ошибки pydantic -> {поле: [сообщения]}"""
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        parts = [str(p) for p in err["loc"] if p not in SKIPPED_LOC_PARTS]
        field = ".".join(parts) or "body"
        if err["type"] == "missing":
            message = f"The {field} field is required."
        elif err["type"] == "value_error" and "error" in err.get("ctx", {}):
            message = str(err["ctx"]["error"])
        else:
            message = err["msg"]
        errors.setdefault(field, []).append(message)
    return errors


async def taskflow_error_handler(request: Request, exc: TaskFlowError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(exc.to_dict(), status_code=exc.status_code, headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = validation_errors(exc)
    message = next(iter(errors.values()))[0] if errors else "The given data was invalid."
    return JSONResponse({"message": message, "errors": errors}, status_code=422)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Создать экземпляр приложения"""
    if settings is None:
        settings = load_settings()

    setup_logging(settings)

    app = FastAPI(title="TaskFlow API", version=__version__, lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TaskFlowError, taskflow_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(auth.router, tags=["Auth"])
    app.include_router(tasks.router, tags=["Tasks"])
    app.include_router(frontend_router)

    return app
