"""Одностраничный интерфейс, отдаваемый на /"""

from httpx import AsyncClient


class TestFrontend:
    async def test_index_serves_html(self, client: AsyncClient):
        resp = await client.get("/")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert "TaskFlow" in resp.text

    async def test_cards_can_be_edited_inline(self, client: AsyncClient):
        html = (await client.get("/")).text
        assert "function editTask(task, card)" in html
        assert "api('PATCH','/tasks/'+task.id,changes)" in html
        for field in ("e-title", "e-desc", "e-due"):
            assert f'class="{field}"' in html

