"""
Session Gate
============

Raw ASGI middleware that resolves the caller's session before any task
route runs.

- Any client-supplied ``x-user-id`` header is dropped from every request.
- On protected paths, the session is resolved through
  ``app.state.session_resolver``. No session (or a resolver failure)
  answers 401 ``{"error": "Unauthorized"}`` without calling the route.
- Otherwise the resolved user id is written to the ``x-user-id`` header
  and to ``scope["state"]["user_id"]`` for downstream consumers.
"""

import logging
from typing import Iterable

from starlette.requests import HTTPConnection
from starlette.responses import JSONResponse

from app.core.errors import ErrorLabels

logger = logging.getLogger(__name__)

USER_ID_HEADER = "x-user-id"
_USER_ID_HEADER_RAW = USER_ID_HEADER.encode("latin-1")

DEFAULT_PROTECTED_PREFIXES = ("/api/tasks",)


class SessionGateMiddleware:
    """Gate for the task API; stateless per request."""

    def __init__(self, app, protected_prefixes: Iterable[str] = DEFAULT_PROTECTED_PREFIXES):
        self.app = app
        self.protected_prefixes = tuple(p.rstrip("/") for p in protected_prefixes)

    def is_protected(self, path: str) -> bool:
        return any(
            path == prefix or path.startswith(prefix + "/")
            for prefix in self.protected_prefixes
        )

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        # The header is only ever trusted when this middleware set it.
        # Scope is mutated in place so outer middleware sees the same state.
        scope["headers"] = [
            (name, value)
            for name, value in scope.get("headers", [])
            if name.lower() != _USER_ID_HEADER_RAW
        ]

        if not self.is_protected(scope.get("path", "")):
            await self.app(scope, receive, send)
            return

        connection = HTTPConnection(scope)
        resolver = connection.app.state.session_resolver
        try:
            session = await resolver.get_session(connection.headers, connection.cookies)
        except Exception:
            logger.exception("Session resolution failed for %s", scope.get("path"))
            session = None

        if session is None:
            response = JSONResponse(
                {"error": ErrorLabels.UNAUTHORIZED},
                status_code=401,
            )
            await response(scope, receive, send)
            return

        user_id = str(session.user_id)
        # Reading connection.headers may have replaced scope["headers"] with a copy
        scope["headers"] = [
            *scope["headers"],
            (_USER_ID_HEADER_RAW, user_id.encode("latin-1")),
        ]
        scope.setdefault("state", {})["user_id"] = user_id

        await self.app(scope, receive, send)
