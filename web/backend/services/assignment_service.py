#!/usr/bin/env python3
"""
Assignment service - wraps the AssignmentOrchestrator for the HTTP layer.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from core.assignment import AssignmentOrchestrator
from core.assignment.dto import AssignmentRecord, TaskError
from core.exceptions import AssignmentNotFoundError
from database.models import User
from database.repositories import AssignmentRepository
from ..models.responses import (
    AssignmentOut,
    BatchAssignmentResponse,
    SkippedTaskOut,
    TaskErrorOut,
)
from .serializers import to_assignment_out, to_batch_result_out

logger = logging.getLogger(__name__)


class AssignmentService:
    """Service for creating and managing assignments."""

    def __init__(self, db: Session, orchestrator: AssignmentOrchestrator, expose_error_detail: bool = False):
        self.db = db
        self.orchestrator = orchestrator
        self.expose_error_detail = expose_error_detail
        self.assignments = AssignmentRepository(db)

    def assign_tasks(self, task_ids: List[str], auto_assign: bool = True) -> BatchAssignmentResponse:
        batch = self.orchestrator.assign_tasks(task_ids, auto_assign=auto_assign)
        return BatchAssignmentResponse(
            success=True,
            message="Tasks assigned automatically" if auto_assign else "Match scores calculated",
            results=[to_batch_result_out(o, auto_assign) for o in batch.results],
            skipped=[SkippedTaskOut(task_id=s.task_id, reason=s.reason) for s in batch.skipped],
            errors=[self._to_error_out(e) for e in batch.errors],
        )

    def _to_error_out(self, error: TaskError) -> TaskErrorOut:
        return TaskErrorOut(
            task_id=error.task_id,
            error=error.error,
            type=error.type,
            detail=error.detail if self.expose_error_detail else None
        )

    def assign_task_to_user(self, task_id: str, user_id: str) -> AssignmentOut:
        return to_assignment_out(self.orchestrator.assign_task_to_user(task_id, user_id))

    def list_for_user(self, user: User) -> List[AssignmentOut]:
        return [
            to_assignment_out(AssignmentRecord.from_model(a))
            for a in self.assignments.find_assignments_for_user(user.id)
        ]

    def list_all(self, status: Optional[str] = None) -> List[AssignmentOut]:
        assignments = self.assignments.find_all_assignments()
        if status:
            assignments = [a for a in assignments if a.status == status]
        return [to_assignment_out(AssignmentRecord.from_model(a)) for a in assignments]

    def get_for_user(self, user: User, assignment_id: str) -> AssignmentOut:
        """One of the caller's assignments; someone else's reads as not found."""
        assignment = self.assignments.find_assignment_by_id(assignment_id)
        if assignment is None or assignment.user_id != user.id:
            raise AssignmentNotFoundError(f"Assignment {assignment_id} not found")
        return to_assignment_out(AssignmentRecord.from_model(assignment))

    def get_assignment(self, assignment_id: str) -> AssignmentOut:
        assignment = self.assignments.find_assignment_by_id(assignment_id)
        if assignment is None:
            raise AssignmentNotFoundError(f"Assignment {assignment_id} not found")
        return to_assignment_out(AssignmentRecord.from_model(assignment))

    def update_status(self, user: User, assignment_id: str, status: str) -> AssignmentOut:
        return to_assignment_out(self.orchestrator.update_assignment_status(assignment_id, user.id, status))

    def add_user_note(self, user: User, assignment_id: str, note: str) -> AssignmentOut:
        return to_assignment_out(self.orchestrator.add_user_note(assignment_id, user.id, note))

    def update_assignment(
        self,
        assignment_id: str,
        status: Optional[str] = None,
        admin_note: Optional[str] = None
    ) -> AssignmentOut:
        return to_assignment_out(
            self.orchestrator.update_assignment(assignment_id, status=status, admin_note=admin_note)
        )

    def add_admin_note(self, assignment_id: str, note: str) -> AssignmentOut:
        return to_assignment_out(self.orchestrator.add_admin_note(assignment_id, note))

    def delete_assignment(self, assignment_id: str) -> None:
        self.orchestrator.delete_assignment(assignment_id)
