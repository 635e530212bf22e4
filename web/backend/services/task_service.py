#!/usr/bin/env python3
"""
Task service - task catalogue, recommendations and self-selection.
"""

import logging
from typing import Any, Dict, List

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from core.assignment import AssignmentOrchestrator
from core.assignment.dto import TaskSummary
from core.exceptions import TaskNotFoundError, ValidationError
from database.models import User
from database.repositories import TaskRepository
from ..models.requests import TaskCreate, TaskUpdate
from ..models.responses import (
    AssignmentOut,
    ComponentScoresOut,
    ImportResult,
    RecommendationOut,
    TaskOut,
)
from .serializers import to_assignment_out, to_task_out

logger = logging.getLogger(__name__)


class TaskService:
    """Service for managing household tasks."""

    def __init__(self, db: Session, orchestrator: AssignmentOrchestrator):
        self.db = db
        self.orchestrator = orchestrator
        self.tasks = TaskRepository(db)

    def list_tasks(self) -> List[TaskOut]:
        return [to_task_out(TaskSummary.from_model(t)) for t in self.tasks.find_all_tasks()]

    def get_task(self, task_id: str) -> TaskOut:
        task = self.tasks.find_task_by_id(task_id)
        if task is None:
            raise TaskNotFoundError(f"Task {task_id} not found")
        return to_task_out(TaskSummary.from_model(task))

    def create_task(self, payload: TaskCreate) -> TaskOut:
        """
        Create a task.

        Raises:
            ValidationError: If the task code is already in use.
        """
        if self.tasks.find_task_by_code(payload.task_code):
            raise ValidationError(f"Task id {payload.task_code} already exists")

        task = self.tasks.create_task(payload.model_dump())
        self.db.commit()
        logger.info(f"Created task {task.id} ({task.name})")
        return to_task_out(TaskSummary.from_model(task))

    def update_task(self, task_id: str, payload: TaskUpdate) -> TaskOut:
        """
        Apply the provided fields to a task.

        Raises:
            TaskNotFoundError: If the task does not exist.
            ValidationError: If nothing is provided or the new task code is taken.
        """
        task = self.tasks.find_task_by_id(task_id)
        if task is None:
            raise TaskNotFoundError(f"Task {task_id} not found")

        changes = payload.model_dump(exclude_unset=True)
        if not changes:
            raise ValidationError("No task fields provided")
        if None in changes.values():
            raise ValidationError("Task fields cannot be set to null")

        new_code = changes.get('task_code')
        if new_code and new_code != task.task_code and self.tasks.find_task_by_code(new_code):
            raise ValidationError(f"Task id {new_code} already exists")

        self.tasks.update_task(task, changes)
        self.db.commit()
        logger.info(f"Updated task {task.id}: {sorted(changes)}")
        return to_task_out(TaskSummary.from_model(task))

    def import_tasks(self, items: List[Dict[str, Any]]) -> ImportResult:
        """
        Import a list of task definitions.

        Invalid or duplicate entries are counted and reported; the valid
        ones are committed together.
        """
        result = ImportResult(total=len(items), success=0, failed=0, errors=[])
        seen_codes = set()

        for item in items:
            label = item.get('name') or item.get('task_code') or item.get('task_id') or 'unknown task'
            try:
                payload = TaskCreate.model_validate(item)
            except PydanticValidationError as e:
                result.failed += 1
                result.errors.append(f"Failed to import {label}: {e.error_count()} invalid fields")
                continue

            if payload.task_code in seen_codes or self.tasks.find_task_by_code(payload.task_code):
                result.failed += 1
                result.errors.append(f"Task id {payload.task_code} already exists")
                continue

            self.tasks.create_task(payload.model_dump())
            seen_codes.add(payload.task_code)
            result.success += 1

        self.db.commit()
        logger.info(f"Imported {result.success}/{result.total} tasks")
        return result

    def delete_task(self, task_id: str) -> int:
        return self.orchestrator.delete_task(task_id)

    def reopen_task(self, task_id: str) -> TaskOut:
        return to_task_out(self.orchestrator.reopen_task(task_id))

    def recommend_for_user(self, user: User, limit: int = None) -> List[RecommendationOut]:
        recommendations = self.orchestrator.recommend_tasks(user.id, limit=limit)
        return [
            RecommendationOut(
                task=to_task_out(r.task),
                match_score=r.result.final_score,
                component_scores=ComponentScoresOut(**r.result.component_scores.to_dict()),
            )
            for r in recommendations
        ]

    def choose_task(self, user: User, task_id: str) -> AssignmentOut:
        return to_assignment_out(self.orchestrator.choose_task(task_id, user.id))
