#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.

The DatabaseManager is the composition root: it owns the engine and session
factory and builds the scoring, ranking and assignment services from config.
create_app builds one per application and keeps it on `app.state.db_manager`.
"""

from typing import Generator, Optional

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from core.assignment import AssignmentOrchestrator
from core.config_loader import AppConfig
from core.ranking import RankingService
from core.scorer import ScoringService
from database.database import build_engine, build_session_factory
from database.models import User
from database.repositories import UserRepository
from database.uow import uow_factory


class DatabaseManager:
    """Manages database connections, sessions and the services built on them."""

    def __init__(self, config: AppConfig):
        self.config = config
        self.engine = build_engine(config.database)
        self.SessionLocal = build_session_factory(self.engine)

        self.scoring = ScoringService(config.matching.scorer)
        self.ranking = RankingService(self.scoring, config.matching.ranking)
        self.orchestrator = AssignmentOrchestrator(
            uow_factory(self.SessionLocal),
            ranking=self.ranking,
            scoring=self.scoring
        )

    def get_session(self) -> Generator[Session, None, None]:
        """
        Get a database session.

        Yields:
            Session: SQLAlchemy database session.
        """
        session = self.SessionLocal()
        try:
            yield session
        finally:
            session.close()

    def close(self) -> None:
        self.engine.dispose()


def get_db_manager(request: Request) -> DatabaseManager:
    """Return the manager that create_app built from the app's config."""
    return request.app.state.db_manager


def get_db(manager: DatabaseManager = Depends(get_db_manager)) -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session.

    Usage:
        @app.get("/endpoint")
        def my_endpoint(db: Session = Depends(get_db)):
            ...

    Yields:
        Session: Database session that will be automatically closed.
    """
    yield from manager.get_session()


def get_orchestrator(manager: DatabaseManager = Depends(get_db_manager)) -> AssignmentOrchestrator:
    return manager.orchestrator


def get_current_user(
    x_user_id: Optional[str] = Header(default=None),
    db: Session = Depends(get_db)
) -> User:
    """
    Resolve the calling user from the X-User-Id header.

    Raises:
        HTTPException: 401 when the header is missing or names no user.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Authentication required")

    user = UserRepository(db).find_user_by_id(x_user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Unknown user")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != 'admin':
        raise HTTPException(status_code=403, detail="Admin privileges required")
    return user
