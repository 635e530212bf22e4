"""API route handlers."""

from .tasks import router as tasks_router
from .assignments import router as assignments_router
from .users import router as users_router
