"""Демо-данные: пользователи demoN@example.com с 1-5 задачами"""

import random
from datetime import date, timedelta

import structlog

from .db import connect, init_db
from .repositories import TaskRepository, UserRepository
from .schemas import RegisterModel
from .services.auth_service import AuthService

log = structlog.get_logger()

DEMO_PASSWORD = "password"

FIRST_NAMES = ["Anna", "Ivan", "Maria", "Pablo", "Lucia", "Oleg", "Sofia", "Diego"]
LAST_NAMES = ["Ivanova", "Petrov", "Garcia", "Lopez", "Smirnova", "Torres"]
TASK_TITLES = [
    "Buy groceries",
    "Call the bank",
    "Prepare the report",
    "Book a dentist appointment",
    "Renew the passport",
    "Plan the weekend trip",
    "Clean the garage",
    "Read a chapter of the book",
]


def seed_demo(db_path: str, users: int = 10, rng: random.Random | None = None) -> int:
    """Создать демо-пользователей; уже существующие email пропускаются"""
    rng = rng or random.Random()
    init_db(db_path)
    conn = connect(db_path)
    created = 0
    try:
        auth = AuthService(conn)
        user_repo = UserRepository(conn)
        task_repo = TaskRepository(conn)
        for n in range(1, users + 1):
            email = f"demo{n}@example.com"
            if user_repo.email_exists(email):
                continue
            user_id = auth.register(
                RegisterModel(
                    first_name=rng.choice(FIRST_NAMES),
                    last_name=rng.choice(LAST_NAMES),
                    email=email,
                    password=DEMO_PASSWORD,
                    password_confirmation=DEMO_PASSWORD,
                )
            )
            for title in rng.sample(TASK_TITLES, rng.randint(1, 5)):
                task_repo.create(
                    user_id,
                    {
                        "title": title,
                        "description": None,
                        "completed": rng.random() < 0.3,
                        "due_date": date.today() + timedelta(days=rng.randint(-3, 14)),
                    },
                )
            created += 1
    finally:
        conn.close()

    log.info("demo_seeded", users=created, db_path=db_path)
    return created
