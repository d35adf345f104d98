"""Регистрация, вход, выход и проверка токена"""

import inspect

from httpx import AsyncClient

from conftest import bearer, login, register
from taskflow.routes import auth as auth_routes


class TestRegister:
    async def test_register_returns_201(self, client: AsyncClient):
        resp = await register(client)
        assert resp.status_code == 201
        assert resp.json() == {"message": "User registered successfully"}

    async def test_register_does_not_log_in(self, client: AsyncClient):
        resp = await register(client)
        assert "token" not in resp.json()

    async def test_nickname_gets_first_free_suffix(self, client: AsyncClient, db):
        for email in ["a@example.com", "b@example.com", "c@example.com"]:
            resp = await register(client, email=email, first_name="John", last_name="Doe")
            assert resp.status_code == 201

        rows = db.execute("SELECT nickname FROM users ORDER BY id").fetchall()
        assert [r["nickname"] for r in rows] == ["john.doe", "john.doe1", "john.doe2"]

    async def test_nickname_is_lowercased(self, client: AsyncClient, db):
        await register(client, first_name="MaRiA", last_name="GARCIA")
        row = db.execute("SELECT nickname FROM users").fetchone()
        assert row["nickname"] == "maria.garcia"

    async def test_duplicate_email_rejected(self, client: AsyncClient):
        await register(client)
        resp = await register(client, first_name="Other", last_name="Person")
        assert resp.status_code == 422
        assert resp.json()["errors"]["email"] == ["The email has already been taken."]

    async def test_email_is_case_insensitive(self, client: AsyncClient):
        await register(client, email="ada@example.com")
        resp = await register(client, email="ADA@Example.com")
        assert resp.status_code == 422

    async def test_password_confirmation_mismatch(self, client: AsyncClient):
        resp = await client.post(
            "/register",
            json={
                "first_name": "Ada",
                "last_name": "Lovelace",
                "email": "ada@example.com",
                "password": "secret123",
                "password_confirmation": "different1",
            },
        )
        assert resp.status_code == 422
        assert "password" in resp.json()["errors"]

    async def test_blank_first_name_rejected(self, client: AsyncClient):
        resp = await register(client, first_name="   ")
        assert resp.status_code == 422
        body = resp.json()
        assert body["errors"]["first_name"] == ["The first_name field is required."]
        assert body["message"] == "The first_name field is required."

    async def test_missing_fields_rejected(self, client: AsyncClient):
        resp = await client.post("/register", json={"email": "ada@example.com"})
        assert resp.status_code == 422
        errors = resp.json()["errors"]
        for field in ("first_name", "last_name", "password", "password_confirmation"):
            assert field in errors

    async def test_short_password_rejected(self, client: AsyncClient):
        resp = await register(client, password="short")
        assert resp.status_code == 422
        assert "password" in resp.json()["errors"]

    async def test_password_is_not_stored_in_plaintext(self, client: AsyncClient, db):
        await register(client, password="secret123")
        row = db.execute("SELECT password_hash FROM users").fetchone()
        assert row["password_hash"] != "secret123"

    async def test_nickname_race_is_reported_as_retryable(
        self, client: AsyncClient, db, monkeypatch
    ):
        await register(client)
        # другой запрос успел занять ник между проверкой и вставкой
        monkeypatch.setattr(
            "taskflow.services.auth_service.derive_nickname",
            lambda users, first, last: "ada.lovelace",
        )
        resp = await register(client, email="twin@example.com")
        assert resp.status_code == 422
        assert resp.json()["errors"]["email"] == [
            "Registration conflicted with another request, please retry."
        ]
        assert db.execute("SELECT COUNT(*) AS n FROM users").fetchone()["n"] == 1

    def test_password_hashing_handlers_run_in_threadpool(self):
        assert not inspect.iscoroutinefunction(auth_routes.register)
        assert not inspect.iscoroutinefunction(auth_routes.login)


class TestLogin:
    async def test_login_returns_token(self, client: AsyncClient):
        await register(client)
        resp = await client.post("/login", json={"email": "ada@example.com", "password": "secret123"})
        assert resp.status_code == 200
        assert resp.json()["token"]

    async def test_token_authorizes_requests(self, client: AsyncClient, token: str):
        resp = await client.get("/tasks", headers=bearer(token))
        assert resp.status_code == 200

    async def test_wrong_password_and_unknown_email_look_the_same(self, client: AsyncClient):
        await register(client)
        wrong = await client.post("/login", json={"email": "ada@example.com", "password": "nope12345"})
        unknown = await client.post("/login", json={"email": "nobody@example.com", "password": "secret123"})
        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json() == {"message": "Invalid credentials"}

    async def test_each_login_issues_a_new_token(self, client: AsyncClient):
        await register(client)
        first = await login(client)
        second = await login(client)
        assert first != second
        assert (await client.get("/tasks", headers=bearer(first))).status_code == 200
        assert (await client.get("/tasks", headers=bearer(second))).status_code == 200

    async def test_tokens_stored_hashed(self, client: AsyncClient, db, token: str):
        row = db.execute("SELECT token_hash FROM access_tokens").fetchone()
        assert row["token_hash"] != token


class TestLogout:
    async def test_logout_revokes_only_current_token(self, client: AsyncClient):
        await register(client)
        first = await login(client)
        second = await login(client)

        resp = await client.post("/logout", headers=bearer(first))
        assert resp.status_code == 200
        assert resp.json() == {"message": "Logged out"}

        assert (await client.get("/tasks", headers=bearer(first))).status_code == 401
        assert (await client.get("/tasks", headers=bearer(second))).status_code == 200

    async def test_second_logout_is_unauthenticated(self, client: AsyncClient, token: str):
        assert (await client.post("/logout", headers=bearer(token))).status_code == 200
        resp = await client.post("/logout", headers=bearer(token))
        assert resp.status_code == 401
        assert resp.json() == {"message": "Unauthenticated."}


class TestAuthentication:
    async def test_missing_token(self, client: AsyncClient):
        resp = await client.get("/tasks")
        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == "Bearer"

    async def test_garbage_token(self, client: AsyncClient):
        resp = await client.get("/tasks", headers=bearer("not-a-real-token"))
        assert resp.status_code == 401

    async def test_me_returns_profile(self, client: AsyncClient, token: str):
        resp = await client.get("/me", headers=bearer(token))
        assert resp.status_code == 200
        body = resp.json()
        assert body["email"] == "ada@example.com"
        assert body["nickname"] == "ada.lovelace"
        assert "password_hash" not in body

    async def test_request_id_header(self, client: AsyncClient):
        resp = await client.get("/tasks")
        assert resp.headers.get("x-request-id")

    async def test_incoming_request_id_is_kept(self, client: AsyncClient):
        resp = await client.get("/tasks", headers={"X-Request-ID": "edge-42.a"})
        assert resp.headers["x-request-id"] == "edge-42.a"

    async def test_malformed_request_id_is_replaced(self, client: AsyncClient):
        resp = await client.get("/tasks", headers={"X-Request-ID": "bad id; drop"})
        assert resp.headers["x-request-id"] != "bad id; drop"
        assert len(resp.headers["x-request-id"]) == 26
