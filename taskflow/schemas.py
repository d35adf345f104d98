import re
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator

# ─────────────────────────────────────────
#  МОДЕЛИ ДАННЫХ (с валидацией)
# ─────────────────────────────────────────

EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")


def _required(value: str, field: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"The {field} field is required.")
    return value


class RegisterModel(BaseModel):
    first_name: str = Field(..., max_length=100)
    last_name: str = Field(..., max_length=100)
    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=255)
    password_confirmation: str = Field(..., max_length=255)

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, v, info):
        return _required(v, info.field_name)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        v = _required(v, "email")
        if not EMAIL_RE.match(v):
            raise ValueError("The email field must be a valid email address.")
        return v.lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if len(v) < 8:
            raise ValueError("The password field must be at least 8 characters.")
        return v


class LoginModel(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class TaskCreate(BaseModel):
    title: str = Field(..., max_length=255)
    description: Optional[str] = None
    due_date: Optional[date] = None
    completed: bool = False

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _required(v, "title")


class TaskUpdate(BaseModel):
    """Частичное обновление: меняются только переданные поля"""

    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    due_date: Optional[date] = None
    completed: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        # явный null для title недопустим
        if v is None:
            raise ValueError("The title field must be a string.")
        return _required(v, "title")

    @field_validator("completed")
    @classmethod
    def validate_completed(cls, v):
        if v is None:
            raise ValueError("The completed field must be true or false.")
        return v

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class GenerateTasksModel(BaseModel):
    topic: str = Field(..., max_length=255)

    @field_validator("topic")
    @classmethod
    def validate_topic(cls, v):
        return _required(v, "topic")
