from database.repositories.base import BaseRepository, to_uuid
from database.repositories.task import TaskRepository
from database.repositories.user import UserRepository
from database.repositories.assignment import AssignmentRepository

__all__ = [
    'BaseRepository',
    'TaskRepository',
    'UserRepository',
    'AssignmentRepository',
    'to_uuid',
]
