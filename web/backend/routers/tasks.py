#!/usr/bin/env python3
"""
Task endpoints - task catalogue, recommendations and self-selection.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.assignment import AssignmentOrchestrator
from database.models import User
from ..dependencies import get_current_user, get_db, get_orchestrator, require_admin
from ..services.task_service import TaskService
from ..utils import validate_uuid
from ..models.requests import TaskCreate, TaskImportRequest, TaskUpdate
from ..models.responses import (
    AssignmentResponse,
    ImportResponse,
    MessageResponse,
    RecommendationsResponse,
    TaskResponse,
    TasksResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


# Declared before /{task_id} so the literal path wins
@router.get("/user/recommended", response_model=RecommendationsResponse)
def get_recommended_tasks(
    limit: Optional[int] = Query(default=None, ge=1, le=50, description="Maximum recommendations"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    orchestrator: AssignmentOrchestrator = Depends(get_orchestrator)
):
    """
    Recommend unassigned tasks for the calling user, best match first.
    """
    service = TaskService(db, orchestrator)
    recommendations = service.recommend_for_user(user, limit=limit)
    return RecommendationsResponse(success=True, recommendations=recommendations)


@router.post("/user/choose/{task_id}", response_model=AssignmentResponse, status_code=201)
def choose_task(
    task_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    orchestrator: AssignmentOrchestrator = Depends(get_orchestrator)
):
    """The calling user claims an unassigned task."""
    validate_uuid(task_id, "task_id")
    assignment = TaskService(db, orchestrator).choose_task(user, task_id)
    return AssignmentResponse(success=True, message="Task chosen", assignment=assignment)


@router.get("", response_model=TasksResponse)
def list_tasks(
    db: Session = Depends(get_db),
    orchestrator: AssignmentOrchestrator = Depends(get_orchestrator)
):
    """List every task. Public, like GET /api/tasks/{task_id}."""
    tasks = TaskService(db, orchestrator).list_tasks()
    return TasksResponse(success=True, count=len(tasks), tasks=tasks)


@router.post("", response_model=TaskResponse, status_code=201)
def create_task(
    payload: TaskCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    orchestrator: AssignmentOrchestrator = Depends(get_orchestrator)
):
    task = TaskService(db, orchestrator).create_task(payload)
    return TaskResponse(success=True, message="Task created", task=task)


@router.post("/import", response_model=ImportResponse)
def import_tasks(
    payload: TaskImportRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    orchestrator: AssignmentOrchestrator = Depends(get_orchestrator)
):
    """
    Bulk import task definitions.

    Entries that fail validation or reuse an existing task code are
    reported in the result instead of failing the request.
    """
    result = TaskService(db, orchestrator).import_tasks(payload.tasks)
    return ImportResponse(
        success=True,
        message=f"Imported {result.success} of {result.total} tasks",
        result=result
    )


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: str,
    db: Session = Depends(get_db),
    orchestrator: AssignmentOrchestrator = Depends(get_orchestrator)
):
    validate_uuid(task_id, "task_id")
    task = TaskService(db, orchestrator).get_task(task_id)
    return TaskResponse(success=True, task=task)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    payload: TaskUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    orchestrator: AssignmentOrchestrator = Depends(get_orchestrator)
):
    """
    Edit a task definition.

    Status is not editable here; it only changes through assignments and reopen.
    """
    validate_uuid(task_id, "task_id")
    task = TaskService(db, orchestrator).update_task(task_id, payload)
    return TaskResponse(success=True, message="Task updated", task=task)


@router.post("/{task_id}/reopen", response_model=TaskResponse)
def reopen_task(
    task_id: str,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    orchestrator: AssignmentOrchestrator = Depends(get_orchestrator)
):
    """Return a rejected task to the unassigned pool."""
    validate_uuid(task_id, "task_id")
    task = TaskService(db, orchestrator).reopen_task(task_id)
    return TaskResponse(success=True, message="Task reopened", task=task)


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: str,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    orchestrator: AssignmentOrchestrator = Depends(get_orchestrator)
):
    """Delete a task together with its assignments."""
    validate_uuid(task_id, "task_id")
    deleted = TaskService(db, orchestrator).delete_task(task_id)
    return MessageResponse(success=True, message=f"Task deleted along with {deleted} assignments")
