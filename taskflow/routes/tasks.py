import sqlite3
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from ..config import DEFAULT_PER_PAGE
from ..deps import Principal, get_current_user, get_db, get_task_generator
from ..exceptions import NotFound
from ..repositories import PageRequest, TaskFilters, TaskRepository
from ..schemas import GenerateTasksModel, TaskCreate, TaskUpdate
from ..services.generator import TaskGenerator

router = APIRouter()

TRUE_VALUES = {"1", "true", "on", "yes"}


def parse_bool(value: str) -> bool:
    return value.strip().lower() in TRUE_VALUES


def parse_int(value: Optional[str], default: int) -> int:
    try:
        return int(value) if value else default
    except ValueError:
        return default


def parse_task_id(value: str) -> int:
    """Нечисловой id -- такой задачи нет"""
    if not (value.isascii() and value.isdigit()):
        raise NotFound("Task")
    return int(value)


# ─────────────────────────────────────────
#  ЗАДАЧИ — с поиском, фильтрацией и страницами
# ─────────────────────────────────────────


@router.get("/tasks")
async def get_tasks(
    completed: Optional[str] = None,
    title: Optional[str] = None,
    sort: Optional[str] = None,
    dir: Optional[str] = None,
    per_page: Optional[str] = None,
    page: Optional[str] = None,
    principal: Principal = Depends(get_current_user),
    db: sqlite3.Connection = Depends(get_db),
):
    """
    Задачи текущего пользователя:
    - completed: true/1/on/yes -- выполненные, иначе невыполненные
    - title: поиск по подстроке в названии
    - sort: due_date | created_at (прочее игнорируется), dir: asc | desc
    - per_page, page: пагинация
    """
    filters = TaskFilters(
        completed=parse_bool(completed) if completed else None,
        title=title or None,
        sort=sort,
        direction="asc" if dir == "asc" else "desc",
    )
    page_request = PageRequest(
        page=parse_int(page, 1),
        per_page=parse_int(per_page, DEFAULT_PER_PAGE),
    )
    return TaskRepository(db).find_tasks_by_owner(principal.user_id, filters, page_request)


@router.post("/tasks", status_code=status.HTTP_201_CREATED)
async def create_task(
    data: TaskCreate,
    principal: Principal = Depends(get_current_user),
    db: sqlite3.Connection = Depends(get_db),
):
    return TaskRepository(db).create(principal.user_id, data.model_dump())


@router.post("/tasks/generate-ai", status_code=status.HTTP_201_CREATED)
async def generate_tasks(
    data: GenerateTasksModel,
    principal: Principal = Depends(get_current_user),
    db: sqlite3.Connection = Depends(get_db),
    generator: TaskGenerator = Depends(get_task_generator),
):
    """Сгенерировать задачи по теме и сохранить их все разом"""
    drafts = await generator.generate(data.topic)
    return TaskRepository(db).create_many(principal.user_id, [asdict(d) for d in drafts])


@router.get("/tasks/{task_id}")
async def get_task(
    task_id: str,
    principal: Principal = Depends(get_current_user),
    db: sqlite3.Connection = Depends(get_db),
):
    return TaskRepository(db).get_for_owner(principal.user_id, parse_task_id(task_id))


@router.api_route("/tasks/{task_id}", methods=["PUT", "PATCH"])
async def update_task(
    task_id: str,
    data: TaskUpdate,
    principal: Principal = Depends(get_current_user),
    db: sqlite3.Connection = Depends(get_db),
):
    """Частичное обновление задачи"""
    return TaskRepository(db).update(principal.user_id, parse_task_id(task_id), data.changes())


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: str,
    principal: Principal = Depends(get_current_user),
    db: sqlite3.Connection = Depends(get_db),
):
    TaskRepository(db).delete(principal.user_id, parse_task_id(task_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
