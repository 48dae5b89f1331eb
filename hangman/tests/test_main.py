"""Tests for hangman.main — FastAPI app, middleware, handlers, lifespan.

Covers: health endpoint, CORS headers, auth dependency (happy path +
failures), exception handlers (game errors, HTTPException, validation,
unhandled), request logging, and the session reaper lifespan.

Uses httpx.AsyncClient with ASGITransport. All async tests use explicit
@pytest.mark.asyncio per strict mode.
"""

import logging

import httpx
import pytest
from fastapi import APIRouter, Depends
from httpx import ASGITransport
from pydantic import BaseModel

import hangman.game.sessions as sessions_module
from hangman.api.deps import get_auth_service, get_current_user
from hangman.errors import GameAlreadyComplete, SessionNotFound
from hangman.hooks.auth import FakeAuthService
from hangman.main import app, lifespan
from hangman.schemas import User

TEACHER = User(id="teacher-1", role="teacher", name="Teacher One")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def client() -> httpx.AsyncClient:
    """Async test client wired to the app."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    return httpx.AsyncClient(transport=transport, base_url="http://test")


@pytest.fixture(autouse=True)
def _known_users():
    app.dependency_overrides[get_auth_service] = lambda: FakeAuthService([TEACHER])
    yield
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helper: mount a tiny test route for handler testing
# ---------------------------------------------------------------------------

_test_router = APIRouter(prefix="/api/v1/test")


@_test_router.get("/protected")
async def protected_route(user: User = Depends(get_current_user)) -> dict:
    return {"user_id": user.id, "role": user.role}


class _BodyModel(BaseModel):
    name: str
    age: int


@_test_router.post("/validated")
async def validated_route(body: _BodyModel) -> dict:
    return {"name": body.name}


@_test_router.get("/explode")
async def exploding_route() -> dict:
    raise RuntimeError("Something went terribly wrong")


@_test_router.get("/finished")
async def finished_route() -> dict:
    raise GameAlreadyComplete()


@_test_router.get("/gone")
async def gone_route() -> dict:
    raise SessionNotFound("Game session not found or expired.")


app.include_router(_test_router)


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------


class TestHealthEndpoint:
    @pytest.mark.asyncio
    async def test_health_returns_api_response(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.get("/api/v1/health")
        body = resp.json()
        assert resp.status_code == 200
        assert body["ok"] is True
        assert body["data"]["status"] == "healthy"
        assert body["error"] is None


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


class TestCORS:
    @pytest.mark.asyncio
    async def test_allowed_origin_gets_cors_header(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.options(
                "/api/v1/health",
                headers={
                    "Origin": "http://localhost:3000",
                    "Access-Control-Request-Method": "GET",
                },
            )
        assert resp.headers.get("access-control-allow-origin") == "http://localhost:3000"

    @pytest.mark.asyncio
    async def test_disallowed_origin_no_cors_header(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.options(
                "/api/v1/health",
                headers={
                    "Origin": "http://evil.example.com",
                    "Access-Control-Request-Method": "GET",
                },
            )
        assert "access-control-allow-origin" not in resp.headers


# ---------------------------------------------------------------------------
# Auth dependency
# ---------------------------------------------------------------------------


class TestAuth:
    @pytest.mark.asyncio
    async def test_valid_bearer_token(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.get(
                "/api/v1/test/protected", headers={"Authorization": "Bearer teacher-1"}
            )
        assert resp.status_code == 200
        assert resp.json() == {"user_id": "teacher-1", "role": "teacher"}

    @pytest.mark.asyncio
    async def test_missing_header(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.get("/api/v1/test/protected")
        body = resp.json()
        assert resp.status_code == 401
        assert body["ok"] is False
        assert body["error"]["code"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("header", ["teacher-1", "Basic teacher-1", "Bearer ", "Bearer"])
    async def test_malformed_header(self, client: httpx.AsyncClient, header: str) -> None:
        async with client:
            resp = await client.get(
                "/api/v1/test/protected", headers={"Authorization": header}
            )
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_unknown_token(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.get(
                "/api/v1/test/protected", headers={"Authorization": "Bearer stranger"}
            )
        assert resp.status_code == 401
        assert resp.json()["error"]["message"] == "Invalid or expired token."


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------


class TestExceptionHandlers:
    @pytest.mark.asyncio
    async def test_game_error_maps_status_and_code(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.get("/api/v1/test/finished")
        body = resp.json()
        assert resp.status_code == 409
        assert body == {
            "ok": False,
            "data": None,
            "error": {"code": "GAME_ALREADY_COMPLETE", "message": "Game is already complete."},
        }

    @pytest.mark.asyncio
    async def test_session_not_found_is_404(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.get("/api/v1/test/gone")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "SESSION_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_unknown_route_is_wrapped(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.get("/api/v1/nowhere")
        body = resp.json()
        assert resp.status_code == 404
        assert body["ok"] is False
        assert body["error"]["code"] == "HTTP_ERROR"

    @pytest.mark.asyncio
    async def test_validation_error(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.post("/api/v1/test/validated", json={"name": "x"})
        body = resp.json()
        assert resp.status_code == 422
        assert body["error"]["code"] == "VALIDATION_ERROR"
        assert "age" in body["error"]["message"]

    @pytest.mark.asyncio
    async def test_unhandled_error_hides_details(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.get("/api/v1/test/explode")
        body = resp.json()
        assert resp.status_code == 500
        assert body["error"]["code"] == "INTERNAL_ERROR"
        assert "terribly" not in body["error"]["message"]


# ---------------------------------------------------------------------------
# Request logging
# ---------------------------------------------------------------------------


class TestRequestLogging:
    @pytest.mark.asyncio
    async def test_logs_method_path_status(
        self, client: httpx.AsyncClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="hangman"):
            async with client:
                await client.get("/api/v1/health")
        assert any(
            "GET /api/v1/health 200" in record.getMessage() for record in caplog.records
        )

    @pytest.mark.asyncio
    async def test_does_not_log_auth_header(
        self, client: httpx.AsyncClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="hangman"):
            async with client:
                await client.get(
                    "/api/v1/test/protected",
                    headers={"Authorization": "Bearer teacher-1"},
                )
        assert all("Bearer" not in record.getMessage() for record in caplog.records)


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


class TestLifespan:
    @pytest.mark.asyncio
    async def test_reaper_runs_for_app_lifetime(self, monkeypatch) -> None:
        events: list[str] = []

        class _RecordingReaper:
            def __init__(self, store, interval) -> None:
                events.append(f"init:{interval}")

            def start(self) -> None:
                events.append("start")

            async def stop(self) -> None:
                events.append("stop")

        monkeypatch.setattr(sessions_module, "SessionReaper", _RecordingReaper)

        async with lifespan(app):
            assert events == ["init:60.0", "start"]
        assert events[-1] == "stop"
