"""
Task List Controller
====================

Client-side state for the task screen and the CRUD calls that change it.

State has a single source of truth, the raw ``tasks`` list as last
fetched. ``visible_tasks`` is derived from it on every access through
the view pipeline; filter, search and sort never write back into it.

Every mutation is followed by a full refetch. Fetches are not cancelled
or sequenced, so a slow response can land after a newer one and
overwrite it.
"""

import logging
from typing import Any, Optional

import httpx

from app.client.api import ApiError, TaskApiClient
from app.client.debounce import DebouncedValue
from app.client.view import DEFAULT_SORT, FILTER_ALL, TaskItem, derive_view
from app.config import settings

logger = logging.getLogger(__name__)

EMPTY_NO_TASKS = "You don't have any tasks yet. Click 'New Task' to create your first task."
EMPTY_NO_MATCHES = "No tasks match your current filters. Try adjusting your search or filters."
LOAD_FAILED = "Failed to load tasks"


class TaskListController:
    """Holds task list state and orchestrates calls to the API client."""

    def __init__(
        self,
        api: TaskApiClient,
        search_delay: Optional[float] = None,
    ):
        self.api = api

        # Authentication state
        self.user: Optional[dict[str, Any]] = None
        self.is_checking_auth = True

        # Task data state
        self.tasks: list[TaskItem] = []
        self.is_loading = False
        self.error: Optional[str] = None

        # Filter, search and sort state
        if search_delay is None:
            search_delay = settings.SEARCH_DEBOUNCE_MS / 1000
        self._search = DebouncedValue("", delay=search_delay)
        self.filter_status = FILTER_ALL
        self.sort_by = DEFAULT_SORT

        # Mutation state
        self.is_saving = False
        self.save_error: Optional[str] = None

    # =========================================================================
    # Derived state
    # =========================================================================

    @property
    def search_query(self) -> str:
        return self._search.value

    @property
    def debounced_search(self) -> str:
        return self._search.debounced

    @property
    def visible_tasks(self) -> list[TaskItem]:
        return derive_view(
            self.tasks,
            filter_status=self.filter_status,
            search=self.debounced_search,
            sort_by=self.sort_by,
        )

    @property
    def empty_message(self) -> Optional[str]:
        """Message for an empty list, None when there is something to show."""
        if self.visible_tasks:
            return None
        if self.search_query or self.filter_status != FILTER_ALL:
            return EMPTY_NO_MATCHES
        return EMPTY_NO_TASKS

    # =========================================================================
    # Inputs
    # =========================================================================

    def set_search_query(self, query: str) -> None:
        """Update the search box; the view follows after the debounce delay."""
        self._search.set(query)

    def set_filter_status(self, status: str) -> None:
        self.filter_status = status

    def set_sort_by(self, sort_by: str) -> None:
        self.sort_by = sort_by

    # =========================================================================
    # Authentication
    # =========================================================================

    async def check_auth(self) -> None:
        """Load the session; fetch tasks when signed in."""
        try:
            session = await self.api.get_session()
            if session and session.get("user"):
                self.user = session["user"]
        except httpx.HTTPError as exc:
            logger.error("Auth check failed: %s", exc)
        finally:
            self.is_checking_auth = False

        if self.user is not None:
            await self.fetch_tasks()

    async def logout(self) -> None:
        try:
            await self.api.sign_out()
        except (ApiError, httpx.HTTPError) as exc:
            logger.error("Logout failed: %s", exc)
            return
        self.user = None
        self.tasks = []

    # =========================================================================
    # Task CRUD
    # =========================================================================

    async def fetch_tasks(self) -> None:
        """Replace the raw list with the server's current list."""
        self.is_loading = True
        self.error = None
        try:
            self.tasks = await self.api.list_tasks()
        except (ApiError, httpx.HTTPError) as exc:
            self.error = str(exc) or LOAD_FAILED
        finally:
            self.is_loading = False

    async def retry(self) -> None:
        """The "Try again" action after a failed load."""
        await self.fetch_tasks()

    async def save_task(
        self,
        task_data: dict[str, Any],
        editing: Optional[TaskItem] = None,
    ) -> bool:
        """
        Create a task, or update ``editing`` when given, then refetch.

        Returns True on success. On failure the error is kept in
        ``save_error`` and the list is left as it was.
        """
        self.is_saving = True
        self.save_error = None
        try:
            if editing is not None:
                await self.api.update_task(editing.id, task_data)
            else:
                await self.api.create_task(task_data)
        except (ApiError, httpx.HTTPError) as exc:
            logger.error("Save task failed: %s", exc)
            self.save_error = str(exc)
            return False
        finally:
            self.is_saving = False

        await self.fetch_tasks()
        return True

    async def delete_task(self, task_id: str) -> bool:
        """Delete a task, then refetch. Returns True on success."""
        self.is_saving = True
        self.save_error = None
        try:
            await self.api.delete_task(task_id)
        except (ApiError, httpx.HTTPError) as exc:
            logger.error("Delete task failed: %s", exc)
            self.save_error = str(exc)
            return False
        finally:
            self.is_saving = False

        await self.fetch_tasks()
        return True

    def find_task(self, task_id: str) -> Optional[TaskItem]:
        return next((task for task in self.tasks if task.id == task_id), None)
