"""Генерация задач по теме через Gemini API

Ответ модели -- JSON-массив [{"title": ..., "description": ...}], возможно
обёрнутый в markdown-блок ```json ... ```. Любая ошибка в структуре
отклоняет весь список целиком.
"""

import json
import re
from dataclasses import dataclass
from typing import Protocol

import httpx
import structlog

from ..config import Settings
from ..exceptions import GenerationError

log = structlog.get_logger()

FENCED_BLOCK_RE = re.compile(r"```(?:json)?\s*\n(.*?)\n```", re.DOTALL)

PROMPT_TEMPLATE = """Generate a list of tasks in JSON format for the following topic: "{topic}".
Each task must have two fields:
- "title": a short title for the task
- "description": a short explanation of the task.

Return ONLY valid JSON, without any additional explanation.

IMPORTANT: make sure the JSON is correctly formatted. The format must be:
[
  {{
    "title": "Task title 1",
    "description": "Task description 1"
  }},
  {{
    "title": "Task title 2",
    "description": "Task description 2"
  }}
]
Do not include any other text outside the JSON."""


@dataclass
class TaskDraft:
    title: str
    description: str


class TextGenerator(Protocol):
    async def generate_text(self, prompt: str) -> str: ...


def build_prompt(topic: str) -> str:
    return PROMPT_TEMPLATE.format(topic=topic)


def extract_json_payload(text: str) -> str:
    """Содержимое fenced-блока, если он есть, иначе весь текст без пробелов по краям"""
    match = FENCED_BLOCK_RE.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def parse_task_drafts(payload: str) -> list[TaskDraft]:
    try:
        items = json.loads(payload)
    except json.JSONDecodeError as e:
        raise GenerationError(f"Invalid JSON in response: {e}") from e

    if not isinstance(items, list):
        raise GenerationError("Response does not contain a JSON array of tasks")

    drafts = []
    for index, item in enumerate(items):
        if (
            not isinstance(item, dict)
            or not isinstance(item.get("title"), str)
            or not isinstance(item.get("description"), str)
        ):
            log.warning("invalid_task_draft", index=index, item=item)
            raise GenerationError(f"Task at index {index} does not have the required structure")
        drafts.append(TaskDraft(title=item["title"], description=item["description"]))
    return drafts


class GeminiClient:
    """Вызов generateContent у Gemini REST API"""

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        timeout_s: int = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiClient":
        return cls(
            api_key=settings.gemini_api_key.get_secret_value(),
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout_s=settings.gemini_timeout_s,
        )

    async def generate_text(self, prompt: str) -> str:
        if not self._api_key:
            raise GenerationError("Gemini API key is not configured")

        url = f"{self._base_url}/models/{self._model}:generateContent"
        async with httpx.AsyncClient(timeout=self._timeout_s, transport=self._transport) as client:
            response = await client.post(
                url,
                headers={"x-goog-api-key": self._api_key},
                json={"contents": [{"parts": [{"text": prompt}]}]},
            )
            response.raise_for_status()
            payload = response.json()

        return _candidate_text(payload)


def _candidate_text(payload) -> str:
    """Текст первого кандидата; неожиданная структура -- GenerationError"""
    if not isinstance(payload, dict):
        raise GenerationError("Unexpected Gemini response: body is not a JSON object")

    candidates = payload.get("candidates") or []
    if not isinstance(candidates, list):
        raise GenerationError("Unexpected Gemini response: candidates is not a list")
    if not candidates:
        return ""
    if not isinstance(candidates[0], dict):
        raise GenerationError("Unexpected Gemini response: candidate is not an object")

    content = candidates[0].get("content") or {}
    if not isinstance(content, dict):
        raise GenerationError("Unexpected Gemini response: content is not an object")
    parts = content.get("parts") or []
    if not isinstance(parts, list):
        raise GenerationError("Unexpected Gemini response: parts is not a list")

    texts = []
    for part in parts:
        text = part.get("text", "") if isinstance(part, dict) else None
        if not isinstance(text, str):
            raise GenerationError("Unexpected Gemini response: part text is not a string")
        texts.append(text)
    return "".join(texts)


class TaskGenerator:
    def __init__(self, client: TextGenerator) -> None:
        self.client = client

    async def generate(self, topic: str) -> list[TaskDraft]:
        """Черновики задач по теме; при любой ошибке -- GenerationError"""
        raw = None
        try:
            raw = await self.client.generate_text(build_prompt(topic))
            if not raw or not raw.strip():
                raise GenerationError("Empty response from Gemini API")

            log.info("gemini_response", topic=topic, response=raw)

            payload = extract_json_payload(raw)
            if not payload:
                raise GenerationError("Could not extract JSON content from the response")

            return parse_task_drafts(payload)
        except Exception as e:
            log.error(
                "task_generation_failed",
                topic=topic,
                raw_response=raw,
                error=str(e),
                exc_info=True,
            )
            raise GenerationError(
                f"Failed to generate tasks for topic '{topic}': {e}",
                raw_response=raw,
            ) from e
