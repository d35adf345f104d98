from .auth_service import AuthService, derive_nickname
from .generator import GeminiClient, TaskDraft, TaskGenerator, extract_json_payload, parse_task_drafts

__all__ = [
    "AuthService",
    "GeminiClient",
    "TaskDraft",
    "TaskGenerator",
    "derive_nickname",
    "extract_json_payload",
    "parse_task_drafts",
]
