#!/usr/bin/env python3
"""
Domain exceptions raised by the assignment orchestrator and services.

The web layer maps each family to an HTTP status code.
"""


class ChoreMatchError(Exception):
    """Base exception for service layer errors."""
    pass


class ValidationError(ChoreMatchError):
    """Raised when a request is missing or has malformed fields."""
    pass


class NotFoundError(ChoreMatchError):
    """Raised when an id does not resolve."""
    pass


class TaskNotFoundError(NotFoundError):
    pass


class UserNotFoundError(NotFoundError):
    pass


class AssignmentNotFoundError(NotFoundError):
    pass


class StateConflictError(ChoreMatchError):
    """Raised when a status transition is not allowed from the current state."""
    pass


class NoAssignableTasksError(ValidationError):
    """Raised when none of the requested tasks is still unassigned."""
    pass


class NoUsersAvailableError(ValidationError):
    """Raised when there is nobody to assign tasks to."""
    pass
