"""Доступ к данным поверх sqlite3

Каждый запрос к tasks содержит условие user_id = ?, поэтому чужие задачи
не видны ни при чтении, ни при изменении.
"""

import math
import sqlite3
from dataclasses import dataclass
from datetime import date
from typing import Optional

from .config import DEFAULT_PER_PAGE, MAX_PER_PAGE
from .exceptions import NotFound
from .security import generate_token, hash_token

SORTABLE_COLUMNS = ("due_date", "created_at")
# INTEGER в sqlite -- 64-битный знаковый
SQLITE_MAX_INT = 2**63 - 1
MAX_PAGE = SQLITE_MAX_INT // MAX_PER_PAGE
TASK_FIELDS = ("title", "description", "completed", "due_date")


def task_to_dict(row: sqlite3.Row) -> dict:
    task = dict(row)
    task["completed"] = bool(task["completed"])
    return task


def _check_task_id(task_id: int) -> None:
    # id вне диапазона INTEGER не может существовать
    if not 0 < task_id <= SQLITE_MAX_INT:
        raise NotFound("Task")


def _to_db(field: str, value):
    if field == "completed":
        return int(bool(value))
    if isinstance(value, date):
        return value.isoformat()
    return value


@dataclass
class TaskFilters:
    completed: Optional[bool] = None
    title: Optional[str] = None
    sort: Optional[str] = None
    direction: str = "desc"


@dataclass
class PageRequest:
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE

    def __post_init__(self) -> None:
        if self.page < 1:
            self.page = 1
        self.page = min(self.page, MAX_PAGE)
        if self.per_page < 1:
            self.per_page = DEFAULT_PER_PAGE
        self.per_page = min(self.per_page, MAX_PER_PAGE)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


# ─────────────────────────────────────────
#  ПОЛЬЗОВАТЕЛИ
# ─────────────────────────────────────────

class UserRepository:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def get_by_id(self, user_id: int) -> Optional[sqlite3.Row]:
        return self.conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()

    def get_by_email(self, email: str) -> Optional[sqlite3.Row]:
        return self.conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()

    def email_exists(self, email: str) -> bool:
        return self.get_by_email(email) is not None

    def nickname_exists(self, nickname: str) -> bool:
        row = self.conn.execute("SELECT 1 FROM users WHERE nickname = ?", (nickname,)).fetchone()
        return row is not None

    def create(
        self,
        nickname: str,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
        password_salt: str,
    ) -> int:
        cursor = self.conn.execute(
            """INSERT INTO users (nickname, first_name, last_name, email, password_hash, password_salt)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (nickname, first_name, last_name, email, password_hash, password_salt),
        )
        self.conn.commit()
        return cursor.lastrowid


# ─────────────────────────────────────────
#  ТОКЕНЫ ДОСТУПА
# ─────────────────────────────────────────

class TokenRepository:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def issue(self, user_id: int, name: str = "api") -> str:
        """Создать токен; открытое значение возвращается только здесь"""
        token = generate_token()
        self.conn.execute(
            "INSERT INTO access_tokens (user_id, name, token_hash) VALUES (?, ?, ?)",
            (user_id, name, hash_token(token)),
        )
        self.conn.commit()
        return token

    def resolve(self, token: str) -> Optional[sqlite3.Row]:
        row = self.conn.execute(
            "SELECT id, user_id FROM access_tokens WHERE token_hash = ?",
            (hash_token(token),),
        ).fetchone()
        if row:
            self.conn.execute(
                "UPDATE access_tokens SET last_used_at = datetime('now') WHERE id = ?",
                (row["id"],),
            )
            self.conn.commit()
        return row

    def revoke(self, token_id: int) -> None:
        self.conn.execute("DELETE FROM access_tokens WHERE id = ?", (token_id,))
        self.conn.commit()

    def count_for_user(self, user_id: int) -> int:
        row = self.conn.execute(
            "SELECT COUNT(*) AS n FROM access_tokens WHERE user_id = ?", (user_id,)
        ).fetchone()
        return row["n"]


# ─────────────────────────────────────────
#  ЗАДАЧИ
# ─────────────────────────────────────────

class TaskRepository:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def find_tasks_by_owner(
        self, owner_id: int, filters: TaskFilters, page: PageRequest
    ) -> dict:
        """Страница задач владельца с фильтрами и сортировкой"""
        where = "WHERE user_id = ?"
        params: list = [owner_id]

        if filters.completed is not None:
            where += " AND completed = ?"
            params.append(int(filters.completed))
        if filters.title:
            where += " AND title LIKE ?"
            params.append(f"%{filters.title}%")

        # неизвестное поле сортировки молча игнорируется
        if filters.sort in SORTABLE_COLUMNS:
            direction = "ASC" if filters.direction == "asc" else "DESC"
            order = f"ORDER BY {filters.sort} {direction}, id {direction}"
        else:
            order = "ORDER BY id ASC"

        total = self.conn.execute(f"SELECT COUNT(*) AS n FROM tasks {where}", params).fetchone()["n"]
        rows = self.conn.execute(
            f"SELECT * FROM tasks {where} {order} LIMIT ? OFFSET ?",
            [*params, page.per_page, page.offset],
        ).fetchall()

        return {
            "data": [task_to_dict(r) for r in rows],
            "current_page": page.page,
            "last_page": max(1, math.ceil(total / page.per_page)),
            "per_page": page.per_page,
            "total": total,
        }

    def get_for_owner(self, owner_id: int, task_id: int) -> dict:
        _check_task_id(task_id)
        row = self.conn.execute(
            "SELECT * FROM tasks WHERE id = ? AND user_id = ?",
            (task_id, owner_id),
        ).fetchone()
        if not row:
            raise NotFound("Task")
        return task_to_dict(row)

    def _insert(self, owner_id: int, data: dict) -> int:
        cursor = self.conn.execute(
            "INSERT INTO tasks (user_id, title, description, completed, due_date) VALUES (?, ?, ?, ?, ?)",
            (
                owner_id,
                data["title"],
                data.get("description"),
                _to_db("completed", data.get("completed", False)),
                _to_db("due_date", data.get("due_date")),
            ),
        )
        return cursor.lastrowid

    def create(self, owner_id: int, data: dict) -> dict:
        new_id = self._insert(owner_id, data)
        self.conn.commit()
        return self.get_for_owner(owner_id, new_id)

    def create_many(self, owner_id: int, items: list[dict]) -> list[dict]:
        """Все задачи создаются одной транзакцией"""
        with self.conn:
            new_ids = [self._insert(owner_id, item) for item in items]
        return [self.get_for_owner(owner_id, i) for i in new_ids]

    def update(self, owner_id: int, task_id: int, changes: dict) -> dict:
        self.get_for_owner(owner_id, task_id)

        updates = []
        params = []
        for field in TASK_FIELDS:
            if field in changes:
                updates.append(f"{field} = ?")
                params.append(_to_db(field, changes[field]))

        if updates:
            updates.append("updated_at = datetime('now')")
            params.extend([task_id, owner_id])
            self.conn.execute(
                f"UPDATE tasks SET {', '.join(updates)} WHERE id = ? AND user_id = ?",
                params,
            )
            self.conn.commit()

        return self.get_for_owner(owner_id, task_id)

    def delete(self, owner_id: int, task_id: int) -> None:
        _check_task_id(task_id)
        cursor = self.conn.execute(
            "DELETE FROM tasks WHERE id = ? AND user_id = ?",
            (task_id, owner_id),
        )
        self.conn.commit()
        if cursor.rowcount == 0:
            raise NotFound("Task")
