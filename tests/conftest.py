"""Тестовая конфигурация -- приложение на временной БД + httpx AsyncClient"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from taskflow.config import Settings
from taskflow.db import connect, init_db
from taskflow.deps import get_task_generator
from taskflow.main import create_app
from taskflow.services.generator import TaskGenerator


class FakeTextGenerator:
    """Подменяет Gemini: возвращает заранее заданный текст"""

    def __init__(self, text: str = "[]") -> None:
        self.text = text
        self.prompts: list[str] = []

    async def generate_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.text


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(db_path=str(tmp_path / "test.db"))


@pytest.fixture
def db(settings: Settings):
    init_db(settings.db_path)
    conn = connect(settings.db_path)
    yield conn
    conn.close()


@pytest.fixture
def fake_llm() -> FakeTextGenerator:
    return FakeTextGenerator()


@pytest_asyncio.fixture
async def app(settings: Settings, fake_llm: FakeTextGenerator):
    # ASGITransport не запускает lifespan -- таблицы создаём сами
    init_db(settings.db_path)
    application = create_app(settings)
    application.dependency_overrides[get_task_generator] = lambda: TaskGenerator(fake_llm)
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


async def register(
    client: AsyncClient,
    email: str = "ada@example.com",
    first_name: str = "Ada",
    last_name: str = "Lovelace",
    password: str = "secret123",
):
    return await client.post(
        "/register",
        json={
            "first_name": first_name,
            "last_name": last_name,
            "email": email,
            "password": password,
            "password_confirmation": password,
        },
    )


async def login(client: AsyncClient, email: str = "ada@example.com", password: str = "secret123") -> str:
    resp = await client.post("/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def token(client: AsyncClient) -> str:
    """Токен зарегистрированного пользователя ada@example.com"""
    await register(client)
    return await login(client)


@pytest_asyncio.fixture
async def other_token(client: AsyncClient) -> str:
    """Токен второго пользователя bob@example.com"""
    await register(client, email="bob@example.com", first_name="Bob", last_name="Builder")
    return await login(client, email="bob@example.com")
