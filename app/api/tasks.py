"""
Tasks API Endpoints
===================

Task CRUD for the signed-in user. Mounted behind the session gate, which
supplies the caller's id in the trusted ``x-user-id`` header.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Query, status

from app.dependencies import CurrentUserId, DBSession
from app.schemas.common import ErrorResponse
from app.schemas.task import (
    MessageResponse,
    TaskCreate,
    TaskEnvelope,
    TaskListEnvelope,
    TaskUpdate,
)
from app.services.task_service import TaskService
from app.utils.validators import normalize_search, parse_status_filter

router = APIRouter(
    responses={
        401: {"model": ErrorResponse, "description": "No valid session"},
    },
)


@router.get(
    "",
    response_model=TaskListEnvelope,
    responses={400: {"model": ErrorResponse, "description": "Unknown status value"}},
)
async def list_tasks(
    user_id: CurrentUserId,
    db: DBSession,
    status_param: Optional[str] = Query(default=None, alias="status"),
    search: Optional[str] = Query(default=None),
):
    """
    List the caller's tasks, newest first.

    - **status**: TODO, IN_PROGRESS, DONE or ALL
    - **search**: case-insensitive match on title or description
    """
    status_filter = parse_status_filter(status_param)
    search_text = normalize_search(search)

    tasks = await TaskService(db).list_tasks(user_id, status_filter, search_text)
    return {"tasks": [task.to_api_dict() for task in tasks]}


@router.post(
    "",
    response_model=TaskEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Invalid field"}},
)
async def create_task(
    task_data: TaskCreate,
    user_id: CurrentUserId,
    db: DBSession,
):
    """
    Create a new task.

    Defaults: priority LOW, status TODO. The owner is the caller.
    """
    task = await TaskService(db).create_task(user_id=user_id, task_data=task_data)
    return {"task": task.to_api_dict()}


@router.get(
    "/{task_id}",
    response_model=TaskEnvelope,
    responses={404: {"model": ErrorResponse, "description": "Not found or not yours"}},
)
async def get_task(
    task_id: str,
    user_id: CurrentUserId,
    db: DBSession,
):
    """
    Get a specific task by ID.
    """
    task = await TaskService(db).get_task_or_404(task_id, user_id)
    return {"task": task.to_api_dict()}


@router.put(
    "/{task_id}",
    response_model=TaskEnvelope,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid field"},
        404: {"model": ErrorResponse, "description": "Not found or not yours"},
    },
)
async def update_task(
    task_id: str,
    user_id: CurrentUserId,
    db: DBSession,
    payload: Any = Body(default=None),
):
    """
    Update any subset of a task's fields.

    The task is resolved before the payload is validated, so a request
    for someone else's task is a 404 whatever its body.
    """
    task_service = TaskService(db)
    task = await task_service.get_task_or_404(task_id, user_id)

    task_data = TaskUpdate.model_validate(payload if payload is not None else {})
    updated_task = await task_service.update_task(task, task_data)
    return {"task": updated_task.to_api_dict()}


@router.delete(
    "/{task_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse, "description": "Not found or not yours"}},
)
async def delete_task(
    task_id: str,
    user_id: CurrentUserId,
    db: DBSession,
):
    """
    Delete a task. There is no undo.
    """
    task_service = TaskService(db)
    task = await task_service.get_task_or_404(task_id, user_id)

    await task_service.delete_task(task)
    return {"message": "Task deleted successfully"}
