"""
API Client Tests
================

Tests for TaskApiClient against a mocked transport.
"""

import json

import httpx
import pytest

from app.client.api import ApiError, AuthActionError, TaskApiClient

TASK = {
    "id": "t1",
    "userId": "u1",
    "title": "Buy milk",
    "description": None,
    "status": "TODO",
    "priority": "LOW",
    "dueDate": None,
    "createdAt": "2025-12-06T10:00:00+00:00",
    "updatedAt": "2025-12-06T10:00:00+00:00",
}


class Recorder:
    """Mock transport handler that records requests and replays canned responses."""

    def __init__(self, routes: dict[tuple[str, str], httpx.Response]):
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.routes.get(
            (request.method, request.url.path),
            httpx.Response(404, json={"error": "Not found"}),
        )


def _client(recorder: Recorder, token=None) -> TaskApiClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(recorder), base_url="http://api")
    return TaskApiClient(http=http, token=token)


class TestTasks:

    @pytest.mark.asyncio
    async def test_list_sends_filters_and_token(self):
        recorder = Recorder({("GET", "/api/tasks"): httpx.Response(200, json={"tasks": [TASK]})})

        async with _client(recorder, token="tok") as api:
            tasks = await api.list_tasks(status="TODO", search="milk")

        request = recorder.requests[0]
        assert request.headers["Authorization"] == "Bearer tok"
        assert request.url.params["status"] == "TODO"
        assert request.url.params["search"] == "milk"
        assert [task.title for task in tasks] == ["Buy milk"]

    @pytest.mark.asyncio
    async def test_create_posts_payload(self):
        recorder = Recorder({("POST", "/api/tasks"): httpx.Response(201, json={"task": TASK})})

        async with _client(recorder) as api:
            task = await api.create_task({"title": "Buy milk"})

        assert json.loads(recorder.requests[0].content) == {"title": "Buy milk"}
        assert "Authorization" not in recorder.requests[0].headers
        assert task.id == "t1"

    @pytest.mark.asyncio
    async def test_error_body_becomes_api_error(self):
        recorder = Recorder({
            ("PUT", "/api/tasks/t1"): httpx.Response(
                400,
                json={"error": "Validation error", "details": "Status must be one of: TODO, IN_PROGRESS, DONE"},
            ),
        })

        async with _client(recorder) as api:
            with pytest.raises(ApiError) as exc_info:
                await api.update_task("t1", {"status": "NOPE"})

        assert exc_info.value.status_code == 400
        assert exc_info.value.error == "Validation error"
        assert str(exc_info.value) == "Status must be one of: TODO, IN_PROGRESS, DONE"

    @pytest.mark.asyncio
    async def test_non_json_error(self):
        recorder = Recorder({("DELETE", "/api/tasks/t1"): httpx.Response(502, text="Bad gateway")})

        async with _client(recorder) as api:
            with pytest.raises(ApiError) as exc_info:
                await api.delete_task("t1")

        assert exc_info.value.status_code == 502
        assert exc_info.value.details is None

    @pytest.mark.asyncio
    async def test_delete_returns_message(self):
        recorder = Recorder({
            ("DELETE", "/api/tasks/t1"): httpx.Response(200, json={"message": "Task deleted successfully"}),
        })

        async with _client(recorder) as api:
            assert await api.delete_task("t1") == "Task deleted successfully"


class TestSession:

    @pytest.mark.asyncio
    async def test_sign_in_keeps_token(self):
        recorder = Recorder({
            ("POST", "/api/auth/sign-in"): httpx.Response(
                200, json={"user": {"id": "u1"}, "token": "new-token", "expiresAt": "2030-01-01T00:00:00Z"}
            ),
            ("GET", "/api/tasks"): httpx.Response(200, json={"tasks": []}),
        })

        async with _client(recorder) as api:
            await api.sign_in("a@example.com", "Passw0rd!")
            await api.list_tasks()

        assert api.token == "new-token"
        assert recorder.requests[1].headers["Authorization"] == "Bearer new-token"

    @pytest.mark.asyncio
    async def test_sign_in_requires_credentials(self):
        recorder = Recorder({})

        async with _client(recorder) as api:
            with pytest.raises(AuthActionError):
                await api.sign_in("", "")

        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_sign_up_checks_confirmation(self):
        recorder = Recorder({})

        async with _client(recorder) as api:
            with pytest.raises(AuthActionError, match="Passwords do not match."):
                await api.sign_up("Ann", "a@example.com", "Passw0rd!", "Passw0rd?")

        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_get_session_error_is_signed_out(self):
        recorder = Recorder({("GET", "/api/auth/session"): httpx.Response(500, json={"error": "boom"})})

        async with _client(recorder) as api:
            assert await api.get_session() is None

    @pytest.mark.asyncio
    async def test_sign_out_clears_token_even_on_error(self):
        recorder = Recorder({("POST", "/api/auth/sign-out"): httpx.Response(500, json={"error": "boom"})})

        async with _client(recorder, token="tok") as api:
            with pytest.raises(ApiError):
                await api.sign_out()

        assert api.token is None
