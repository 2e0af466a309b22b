"""
Task API Client
===============

Async HTTP client for the task manager API, built on httpx.

Non-2xx responses raise ``ApiError`` carrying the status code and the
server's ``{"error", "details"}`` body. After a successful sign-in or
sign-up the session token is kept and sent as a bearer token.
"""

import logging
from typing import Any, Optional

import httpx

from app.client.view import TaskItem
from app.config import settings

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class ApiError(Exception):
    """A request the API answered with an error status."""

    def __init__(self, status_code: int, error: str, details: Optional[str] = None):
        self.status_code = status_code
        self.error = error
        self.details = details
        super().__init__(details or error)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and "error" in body:
            return cls(response.status_code, str(body["error"]), body.get("details"))
        return cls(response.status_code, response.reason_phrase or "Request failed")


class AuthActionError(Exception):
    """A sign-in / sign-up request rejected before it was sent."""


class TaskApiClient:
    """Client for the ``/api/auth`` and ``/api/tasks`` endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        http: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        if http is None:
            http = httpx.AsyncClient(base_url=base_url or settings.API_BASE_URL, timeout=timeout)
        self._http = http
        self.token = token

    async def __aenter__(self) -> "TaskApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        response = await self._http.request(method, url, headers=headers, **kwargs)
        if response.is_error:
            error = ApiError.from_response(response)
            logger.debug("%s %s failed: %s %s", method, url, error.status_code, error)
            raise error
        return response.json()

    # =========================================================================
    # Session
    # =========================================================================

    async def get_session(self) -> Optional[dict]:
        """The current session, or None when signed out."""
        try:
            data = await self._request("GET", "/api/auth/session")
        except ApiError as exc:
            logger.error("Error fetching session: %s", exc)
            return None
        return data.get("session")

    async def sign_in(self, email: str, password: str) -> dict:
        if not email or not password:
            raise AuthActionError("Email and password are required for sign-in.")

        data = await self._request(
            "POST",
            "/api/auth/sign-in",
            json={"email": email, "password": password},
        )
        self.token = data["token"]
        return data

    async def sign_up(
        self,
        name: str,
        email: str,
        password: str,
        confirm_password: str,
    ) -> dict:
        if not email or not password:
            raise AuthActionError("Email and password are required for sign-up.")
        if password != confirm_password:
            raise AuthActionError("Passwords do not match.")

        data = await self._request(
            "POST",
            "/api/auth/sign-up",
            json={
                "name": name,
                "email": email,
                "password": password,
                "confirmPassword": confirm_password,
            },
        )
        self.token = data["token"]
        return data

    async def sign_out(self) -> None:
        try:
            await self._request("POST", "/api/auth/sign-out")
        finally:
            self.token = None

    # =========================================================================
    # Tasks
    # =========================================================================

    async def list_tasks(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[TaskItem]:
        params = {}
        if status:
            params["status"] = status
        if search:
            params["search"] = search

        data = await self._request("GET", "/api/tasks", params=params)
        return [TaskItem.from_api(task) for task in data["tasks"]]

    async def get_task(self, task_id: str) -> TaskItem:
        data = await self._request("GET", f"/api/tasks/{task_id}")
        return TaskItem.from_api(data["task"])

    async def create_task(self, payload: dict[str, Any]) -> TaskItem:
        data = await self._request("POST", "/api/tasks", json=payload)
        return TaskItem.from_api(data["task"])

    async def update_task(self, task_id: str, payload: dict[str, Any]) -> TaskItem:
        data = await self._request("PUT", f"/api/tasks/{task_id}", json=payload)
        return TaskItem.from_api(data["task"])

    async def delete_task(self, task_id: str) -> str:
        data = await self._request("DELETE", f"/api/tasks/{task_id}")
        return data.get("message", "")
