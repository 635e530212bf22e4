#!/usr/bin/env python3
"""
Assignment endpoints - batch and manual assignment, and the assignment lifecycle.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from core.assignment import AssignmentOrchestrator
from database.models import User
from ..dependencies import get_current_user, get_db, get_orchestrator, require_admin
from ..services.assignment_service import AssignmentService
from ..utils import validate_uuid
from ..models.requests import (
    AssignmentStatusUpdate,
    AssignmentUpdate,
    AssignTasksRequest,
    NoteRequest,
)
from ..models.responses import (
    AssignmentResponse,
    AssignmentsResponse,
    BatchAssignmentResponse,
    MessageResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/assignments", tags=["assignments"])


def get_assignment_service(
    request: Request,
    db: Session = Depends(get_db),
    orchestrator: AssignmentOrchestrator = Depends(get_orchestrator)
) -> AssignmentService:
    return AssignmentService(
        db,
        orchestrator,
        expose_error_detail=request.app.state.config.web.is_development
    )


@router.post("/assign", response_model=BatchAssignmentResponse)
def assign_tasks(
    request: AssignTasksRequest,
    admin: User = Depends(require_admin),
    service: AssignmentService = Depends(get_assignment_service)
):
    """
    Assign each listed task to its best-matching user.

    With autoAssign=false nothing is persisted; each result carries the
    best match and the top alternatives instead.
    """
    return service.assign_tasks(request.task_ids, auto_assign=request.auto_assign)


@router.post("/assign/{task_id}/{user_id}", response_model=AssignmentResponse, status_code=201)
def assign_task_to_user(
    task_id: str,
    user_id: str,
    admin: User = Depends(require_admin),
    service: AssignmentService = Depends(get_assignment_service)
):
    """Manually assign a task to a specific user."""
    validate_uuid(task_id, "task_id")
    validate_uuid(user_id, "user_id")
    assignment = service.assign_task_to_user(task_id, user_id)
    return AssignmentResponse(success=True, message="Task assigned", assignment=assignment)


@router.get("/user", response_model=AssignmentsResponse)
def get_my_assignments(
    user: User = Depends(get_current_user),
    service: AssignmentService = Depends(get_assignment_service)
):
    assignments = service.list_for_user(user)
    return AssignmentsResponse(success=True, count=len(assignments), assignments=assignments)


@router.get("/user/{assignment_id}", response_model=AssignmentResponse)
def get_my_assignment(
    assignment_id: str,
    user: User = Depends(get_current_user),
    service: AssignmentService = Depends(get_assignment_service)
):
    validate_uuid(assignment_id, "assignment_id")
    return AssignmentResponse(success=True, assignment=service.get_for_user(user, assignment_id))


@router.put("/user/{assignment_id}/status", response_model=AssignmentResponse)
def update_my_assignment_status(
    assignment_id: str,
    request: AssignmentStatusUpdate,
    user: User = Depends(get_current_user),
    service: AssignmentService = Depends(get_assignment_service)
):
    """Move one of the caller's assignments to in_progress, completed or rejected."""
    validate_uuid(assignment_id, "assignment_id")
    assignment = service.update_status(user, assignment_id, request.status)
    return AssignmentResponse(success=True, message="Assignment status updated", assignment=assignment)


@router.put("/user/{assignment_id}/note", response_model=AssignmentResponse)
def add_my_note(
    assignment_id: str,
    request: NoteRequest,
    user: User = Depends(get_current_user),
    service: AssignmentService = Depends(get_assignment_service)
):
    validate_uuid(assignment_id, "assignment_id")
    assignment = service.add_user_note(user, assignment_id, request.note)
    return AssignmentResponse(success=True, message="Note saved", assignment=assignment)


@router.get("", response_model=AssignmentsResponse)
def list_assignments(
    status: Optional[str] = Query(default=None, description="Filter by assignment status"),
    admin: User = Depends(require_admin),
    service: AssignmentService = Depends(get_assignment_service)
):
    assignments = service.list_all(status=status)
    return AssignmentsResponse(success=True, count=len(assignments), assignments=assignments)


@router.get("/{assignment_id}", response_model=AssignmentResponse)
def get_assignment(
    assignment_id: str,
    admin: User = Depends(require_admin),
    service: AssignmentService = Depends(get_assignment_service)
):
    validate_uuid(assignment_id, "assignment_id")
    return AssignmentResponse(success=True, assignment=service.get_assignment(assignment_id))


@router.put("/{assignment_id}", response_model=AssignmentResponse)
def update_assignment(
    assignment_id: str,
    request: AssignmentUpdate,
    admin: User = Depends(require_admin),
    service: AssignmentService = Depends(get_assignment_service)
):
    """Admin update of status and/or admin note."""
    validate_uuid(assignment_id, "assignment_id")
    assignment = service.update_assignment(
        assignment_id,
        status=request.status,
        admin_note=request.admin_note
    )
    return AssignmentResponse(success=True, message="Assignment updated", assignment=assignment)


@router.put("/{assignment_id}/admin-note", response_model=AssignmentResponse)
def add_admin_note(
    assignment_id: str,
    request: NoteRequest,
    admin: User = Depends(require_admin),
    service: AssignmentService = Depends(get_assignment_service)
):
    validate_uuid(assignment_id, "assignment_id")
    assignment = service.add_admin_note(assignment_id, request.note)
    return AssignmentResponse(success=True, message="Admin note saved", assignment=assignment)


@router.delete("/{assignment_id}", response_model=MessageResponse)
def delete_assignment(
    assignment_id: str,
    admin: User = Depends(require_admin),
    service: AssignmentService = Depends(get_assignment_service)
):
    validate_uuid(assignment_id, "assignment_id")
    service.delete_assignment(assignment_id)
    return MessageResponse(success=True, message="Assignment deleted")
