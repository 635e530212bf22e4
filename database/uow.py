import contextlib
import logging
from dataclasses import dataclass
from typing import Callable, ContextManager

from sqlalchemy.orm import Session, sessionmaker

from database.repositories import AssignmentRepository, TaskRepository, UserRepository

logger = logging.getLogger(__name__)


@dataclass
class Repositories:
    """Repositories sharing one Session, and therefore one transaction."""
    session: Session
    tasks: TaskRepository
    users: UserRepository
    assignments: AssignmentRepository

    @classmethod
    def for_session(cls, session: Session) -> "Repositories":
        return cls(
            session=session,
            tasks=TaskRepository(session),
            users=UserRepository(session),
            assignments=AssignmentRepository(session),
        )


UnitOfWorkFactory = Callable[[], ContextManager[Repositories]]


@contextlib.contextmanager
def household_uow(session_factory: sessionmaker):
    """Per-unit-of-work transaction scope.

    Yields Repositories bound to a fresh Session. Commits on success,
    rolls back on exception, always closes.

    Usage:
        with household_uow(SessionLocal) as repos:
            task = repos.tasks.find_task_by_id(task_id)
            # perform operations...
        # commit happens automatically on successful exit
    """
    session = session_factory()
    try:
        yield Repositories.for_session(session)
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def uow_factory(session_factory: sessionmaker) -> UnitOfWorkFactory:
    """Bind a session factory so callers can open units of work without arguments."""
    def _factory():
        return household_uow(session_factory)
    return _factory
