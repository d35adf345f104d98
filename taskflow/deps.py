"""Зависимости FastAPI: настройки, соединение с БД, текущий пользователь"""

import sqlite3
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import Settings
from .db import connect
from .exceptions import Unauthenticated
from .repositories import TokenRepository
from .services.generator import GeminiClient, TaskGenerator

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """Аутентифицированный пользователь и токен, которым он вошёл"""

    user_id: int
    token_id: int


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(settings: Settings = Depends(get_settings)) -> Iterator[sqlite3.Connection]:
    """Одно соединение на запрос"""
    conn = connect(settings.db_path)
    try:
        yield conn
    finally:
        conn.close()


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: sqlite3.Connection = Depends(get_db),
) -> Principal:
    """Проверяет токен и возвращает текущего пользователя"""
    if not credentials:
        raise Unauthenticated()
    row = TokenRepository(db).resolve(credentials.credentials)
    if not row:
        raise Unauthenticated()
    return Principal(user_id=row["user_id"], token_id=row["id"])


def get_task_generator(settings: Settings = Depends(get_settings)) -> TaskGenerator:
    return TaskGenerator(GeminiClient.from_settings(settings))
