"""Иерархия ошибок TaskFlow

Каждая ошибка знает свой HTTP-статус; обработчик в main.py превращает её
в JSON вида {"message": ...} (+ "errors" для ValidationError).
"""


class TaskFlowError(Exception):
    """Базовая ошибка приложения"""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(TaskFlowError):
    """Ошибки валидации по полям (422)"""

    status_code = 422

    def __init__(self, errors: dict[str, list[str]], message: str | None = None) -> None:
        if message is None:
            first = next(iter(errors.values()), ["The given data was invalid."])
            message = first[0]
        super().__init__(message)
        self.errors = errors

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls({field: [message]})

    def to_dict(self) -> dict:
        return {"message": self.message, "errors": self.errors}


class InvalidCredentials(TaskFlowError):
    """Неверный email или пароль -- без уточнения, что именно"""

    status_code = 401

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class Unauthenticated(TaskFlowError):
    """Нет токена, либо он отозван/не найден"""

    status_code = 401

    def __init__(self) -> None:
        super().__init__("Unauthenticated.")


class NotFound(TaskFlowError):
    """Ресурс отсутствует или принадлежит другому пользователю"""

    status_code = 404

    def __init__(self, resource: str = "Task") -> None:
        super().__init__(f"{resource} not found.")


class GenerationError(TaskFlowError):
    """Сбой генерации задач: вызов Gemini, разбор или проверка ответа"""

    status_code = 500

    def __init__(self, message: str, raw_response: str | None = None) -> None:
        super().__init__(message)
        self.raw_response = raw_response
