"""Business logic services."""

from .task_service import TaskService
from .assignment_service import AssignmentService
from .user_service import UserService
