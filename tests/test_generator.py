"""Генерация задач: разбор ответа модели, клиент Gemini, эндпоинт"""

import json

import httpx
import pytest
from httpx import AsyncClient

from conftest import FakeTextGenerator, bearer
from taskflow.exceptions import GenerationError
from taskflow.services.generator import (
    GeminiClient,
    TaskDraft,
    TaskGenerator,
    build_prompt,
    extract_json_payload,
    parse_task_drafts,
)

FENCED = '```json\n[{"title":"t","description":"d"}]\n```'


class TestExtractJsonPayload:
    def test_fenced_json_block(self):
        assert extract_json_payload(FENCED) == '[{"title":"t","description":"d"}]'

    def test_untagged_fence(self):
        text = 'Here you go:\n```\n[1, 2]\n```\nEnjoy!'
        assert extract_json_payload(text) == "[1, 2]"

    def test_raw_text_is_trimmed(self):
        assert extract_json_payload('  \n[{"a": 1}]\n ') == '[{"a": 1}]'

    def test_multiline_block(self):
        text = '```json\n[\n  {"title": "a",\n   "description": "b"}\n]\n```'
        assert json.loads(extract_json_payload(text)) == [{"title": "a", "description": "b"}]


class TestParseTaskDrafts:
    def test_valid_array(self):
        drafts = parse_task_drafts('[{"title": "t", "description": "d"}]')
        assert drafts == [TaskDraft(title="t", description="d")]

    def test_empty_array(self):
        assert parse_task_drafts("[]") == []

    def test_invalid_json(self):
        with pytest.raises(GenerationError, match="Invalid JSON"):
            parse_task_drafts("not json")

    def test_not_an_array(self):
        with pytest.raises(GenerationError, match="array"):
            parse_task_drafts('{"title": "t", "description": "d"}')

    def test_missing_description_rejects_batch(self):
        payload = '[{"title": "a", "description": "b"}, {"title": "c"}]'
        with pytest.raises(GenerationError, match="index 1"):
            parse_task_drafts(payload)

    def test_non_object_element(self):
        with pytest.raises(GenerationError, match="index 0"):
            parse_task_drafts('["just a string"]')


class TestTaskGenerator:
    async def test_prompt_embeds_topic(self):
        fake = FakeTextGenerator(FENCED)
        await TaskGenerator(fake).generate("moving house")
        assert fake.prompts == [build_prompt("moving house")]
        assert '"moving house"' in fake.prompts[0]

    async def test_empty_response(self):
        with pytest.raises(GenerationError) as exc:
            await TaskGenerator(FakeTextGenerator("   ")).generate("x")
        assert str(exc.value) == "Failed to generate tasks for topic 'x': Empty response from Gemini API"

    async def test_error_keeps_raw_response(self):
        with pytest.raises(GenerationError) as exc:
            await TaskGenerator(FakeTextGenerator("oops")).generate("garden")
        assert exc.value.raw_response == "oops"
        assert "garden" in exc.value.message


class TestGeminiClient:
    async def test_returns_candidate_text(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["key"] = request.headers["x-goog-api-key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={"candidates": [{"content": {"parts": [{"text": "[1"}, {"text": "]"}]}}]},
            )

        client = GeminiClient(
            api_key="k",
            model="gemini-test",
            base_url="https://gemini.test/v1beta/",
            transport=httpx.MockTransport(handler),
        )
        text = await client.generate_text("hello")

        assert text == "[1]"
        assert seen["url"] == "https://gemini.test/v1beta/models/gemini-test:generateContent"
        assert seen["key"] == "k"
        assert seen["body"] == {"contents": [{"parts": [{"text": "hello"}]}]}

    async def test_no_candidates_is_empty_text(self):
        client = GeminiClient(
            api_key="k",
            model="m",
            base_url="https://gemini.test",
            transport=httpx.MockTransport(lambda r: httpx.Response(200, json={})),
        )
        assert await client.generate_text("hello") == ""

    async def test_http_error_becomes_generation_error(self):
        client = GeminiClient(
            api_key="k",
            model="m",
            base_url="https://gemini.test",
            transport=httpx.MockTransport(lambda r: httpx.Response(503, json={"error": "busy"})),
        )
        with pytest.raises(GenerationError, match="Failed to generate tasks for topic 'x'"):
            await TaskGenerator(client).generate("x")

    @pytest.mark.parametrize(
        "body",
        [
            [1, 2],
            {"candidates": [{"content": {"parts": [{"text": None}]}}]},
            {"candidates": "nope"},
            {"candidates": [{"content": {"parts": "text"}}]},
            {"candidates": [42]},
        ],
    )
    async def test_malformed_body_becomes_generation_error(self, body):
        client = GeminiClient(
            api_key="k",
            model="m",
            base_url="https://gemini.test",
            transport=httpx.MockTransport(lambda r: httpx.Response(200, json=body)),
        )
        with pytest.raises(GenerationError, match="Unexpected Gemini response"):
            await client.generate_text("hello")
        with pytest.raises(GenerationError, match="Failed to generate tasks for topic 'x'"):
            await TaskGenerator(client).generate("x")

    async def test_invalid_url_becomes_generation_error(self):
        client = GeminiClient(
            api_key="k",
            model="m",
            base_url="https://gemini\x00.test",
            transport=httpx.MockTransport(lambda r: httpx.Response(200, json={})),
        )
        with pytest.raises(GenerationError, match="Failed to generate tasks for topic 'x'"):
            await TaskGenerator(client).generate("x")

    async def test_missing_api_key(self):
        client = GeminiClient(api_key="", model="m", base_url="https://gemini.test")
        with pytest.raises(GenerationError, match="API key is not configured"):
            await client.generate_text("hello")


class TestGenerateEndpoint:
    async def test_fenced_response_creates_one_task(
        self, client: AsyncClient, token: str, fake_llm: FakeTextGenerator
    ):
        fake_llm.text = FENCED
        resp = await client.post("/tasks/generate-ai", json={"topic": "demo"}, headers=bearer(token))
        assert resp.status_code == 201
        created = resp.json()
        assert len(created) == 1
        assert created[0]["title"] == "t"
        assert created[0]["description"] == "d"
        assert created[0]["completed"] is False

        listed = await client.get("/tasks", headers=bearer(token))
        assert listed.json()["total"] == 1

    async def test_invalid_element_creates_nothing(
        self, client: AsyncClient, token: str, fake_llm: FakeTextGenerator
    ):
        fake_llm.text = '[{"title": "a", "description": "b"}, {"title": "c"}]'
        resp = await client.post("/tasks/generate-ai", json={"topic": "demo"}, headers=bearer(token))
        assert resp.status_code == 500
        assert resp.json()["message"].startswith("Failed to generate tasks for topic 'demo': ")

        listed = await client.get("/tasks", headers=bearer(token))
        assert listed.json()["total"] == 0

    async def test_unexpected_upstream_failure_is_500_json(
        self, app, client: AsyncClient, token: str
    ):
        from taskflow.deps import get_task_generator

        broken = GeminiClient(
            api_key="k",
            model="m",
            base_url="https://gemini.test",
            transport=httpx.MockTransport(lambda r: httpx.Response(200, json=[1, 2])),
        )
        app.dependency_overrides[get_task_generator] = lambda: TaskGenerator(broken)

        resp = await client.post("/tasks/generate-ai", json={"topic": "demo"}, headers=bearer(token))
        assert resp.status_code == 500
        assert resp.json()["message"].startswith("Failed to generate tasks for topic 'demo': ")

    async def test_blank_topic(self, client: AsyncClient, token: str):
        resp = await client.post("/tasks/generate-ai", json={"topic": "  "}, headers=bearer(token))
        assert resp.status_code == 422
        assert resp.json()["errors"]["topic"] == ["The topic field is required."]

    async def test_requires_auth(self, client: AsyncClient):
        resp = await client.post("/tasks/generate-ai", json={"topic": "demo"})
        assert resp.status_code == 401

    async def test_generated_tasks_belong_to_requester(
        self, client: AsyncClient, token: str, other_token: str, fake_llm: FakeTextGenerator
    ):
        fake_llm.text = '[{"title": "x", "description": "y"}, {"title": "z", "description": "w"}]'
        resp = await client.post("/tasks/generate-ai", json={"topic": "t"}, headers=bearer(token))
        assert resp.status_code == 201

        theirs = await client.get("/tasks", headers=bearer(other_token))
        assert theirs.json()["total"] == 0
        mine = await client.get("/tasks", headers=bearer(token))
        assert [t["title"] for t in mine.json()["data"]] == ["x", "z"]
