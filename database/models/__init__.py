from .base import Base
from .user import User, user_active_task
from .task import Task
from .assignment import Assignment

__all__ = [
    'Base',
    'User',
    'user_active_task',
    'Task',
    'Assignment',
]
