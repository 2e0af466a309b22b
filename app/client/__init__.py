"""
Task Manager Client
===================

Python client for the task API: HTTP calls, the task list controller and
the pure view pipeline it renders through.
"""

from app.client.api import ApiError, AuthActionError, TaskApiClient
from app.client.controller import TaskListController
from app.client.debounce import DebouncedValue, Debouncer
from app.client.view import TaskItem, derive_view

__all__ = [
    "ApiError",
    "AuthActionError",
    "DebouncedValue",
    "Debouncer",
    "TaskApiClient",
    "TaskItem",
    "TaskListController",
    "derive_view",
]
