#!/usr/bin/env python3
"""
Task and Assignment lifecycles.

Task:       unassigned -> assigned -> completed
            assigned -> cancelled -> unassigned
            assigned -> rejected -> unassigned (admin reopen)
Assignment: assigned -> in_progress -> completed
            assigned -> rejected
            assigned | in_progress -> cancelled
"""

from enum import Enum
from typing import Dict, FrozenSet

from core.exceptions import StateConflictError, ValidationError


class TaskStatus(str, Enum):
    UNASSIGNED = "unassigned"
    ASSIGNED = "assigned"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"


class AssignmentStatus(str, Enum):
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


TASK_TRANSITIONS: Dict[TaskStatus, FrozenSet[TaskStatus]] = {
    TaskStatus.UNASSIGNED: frozenset({TaskStatus.ASSIGNED}),
    TaskStatus.ASSIGNED: frozenset({TaskStatus.COMPLETED, TaskStatus.CANCELLED, TaskStatus.REJECTED}),
    TaskStatus.CANCELLED: frozenset({TaskStatus.UNASSIGNED}),
    TaskStatus.REJECTED: frozenset({TaskStatus.UNASSIGNED}),
    TaskStatus.COMPLETED: frozenset(),
}

ASSIGNMENT_TRANSITIONS: Dict[AssignmentStatus, FrozenSet[AssignmentStatus]] = {
    AssignmentStatus.ASSIGNED: frozenset({
        AssignmentStatus.IN_PROGRESS,
        AssignmentStatus.REJECTED,
        AssignmentStatus.CANCELLED,
    }),
    AssignmentStatus.IN_PROGRESS: frozenset({AssignmentStatus.COMPLETED, AssignmentStatus.CANCELLED}),
    AssignmentStatus.COMPLETED: frozenset(),
    AssignmentStatus.REJECTED: frozenset(),
    AssignmentStatus.CANCELLED: frozenset(),
}

# Statuses an assignee may set on their own assignment
USER_SETTABLE_STATUSES = frozenset({
    AssignmentStatus.IN_PROGRESS,
    AssignmentStatus.COMPLETED,
    AssignmentStatus.REJECTED,
})

ACTIVE_ASSIGNMENT_STATUSES = frozenset({AssignmentStatus.ASSIGNED, AssignmentStatus.IN_PROGRESS})


def parse_assignment_status(value) -> AssignmentStatus:
    try:
        return AssignmentStatus(value)
    except ValueError:
        raise ValidationError(f"Invalid assignment status: {value!r}")


def ensure_task_transition(current: TaskStatus, new: TaskStatus) -> None:
    if new not in TASK_TRANSITIONS[current]:
        raise StateConflictError(f"Task cannot move from {current.value} to {new.value}")


def ensure_assignment_transition(current: AssignmentStatus, new: AssignmentStatus) -> None:
    if new not in ASSIGNMENT_TRANSITIONS[current]:
        raise StateConflictError(f"Assignment cannot move from {current.value} to {new.value}")
