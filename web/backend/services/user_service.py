#!/usr/bin/env python3
"""
User service - household members and their matching profiles.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from core.assignment import AssignmentOrchestrator
from core.assignment.dto import AssignmentRecord, UserSummary
from core.exceptions import UserNotFoundError, ValidationError
from database.models import User
from database.repositories import AssignmentRepository, UserRepository
from ..models.requests import PreferencesUpdate, UserCreate, UserUpdate
from ..models.responses import AssignmentOut, ImportResult, UserOut
from .serializers import to_assignment_out, to_user_out

logger = logging.getLogger(__name__)


class UserService:
    """Service for managing users."""

    def __init__(self, db: Session, orchestrator: Optional[AssignmentOrchestrator] = None):
        self.db = db
        self.orchestrator = orchestrator
        self.users = UserRepository(db)

    def create_user(self, payload: UserCreate) -> UserOut:
        if self.users.find_user_by_member_id(payload.member_id):
            raise ValidationError(f"Member id {payload.member_id} already exists")

        user = self.users.create_user(self._user_data(payload))
        self.db.commit()
        logger.info(f"Created user {user.id} ({user.name})")
        return to_user_out(UserSummary.from_model(user, include_active=True))

    def import_users(self, items: List[Dict[str, Any]]) -> ImportResult:
        """
        Import a list of household members.

        Invalid entries and reused member ids are reported; the valid
        ones are committed together.
        """
        result = ImportResult(total=len(items), success=0, failed=0, errors=[])
        seen_ids = set()

        for item in items:
            label = item.get('name') or item.get('member_id') or 'unknown user'
            try:
                payload = UserCreate.model_validate(item)
            except PydanticValidationError as e:
                result.failed += 1
                result.errors.append(f"Failed to import {label}: {e.error_count()} invalid fields")
                continue

            if payload.member_id in seen_ids or self.users.find_user_by_member_id(payload.member_id):
                result.failed += 1
                result.errors.append(f"Member id {payload.member_id} already exists")
                continue

            self.users.create_user(self._user_data(payload))
            seen_ids.add(payload.member_id)
            result.success += 1

        self.db.commit()
        logger.info(f"Imported {result.success}/{result.total} users")
        return result

    def list_users(self) -> List[UserOut]:
        return [to_user_out(UserSummary.from_model(u)) for u in self.users.find_all_users()]

    def get_user(self, user_id: str) -> UserOut:
        return to_user_out(UserSummary.from_model(self._require(user_id), include_active=True))

    def get_profile(self, user: User) -> UserOut:
        return to_user_out(UserSummary.from_model(user, include_active=True))

    def list_assignments(self, user: User) -> List[AssignmentOut]:
        return [
            to_assignment_out(AssignmentRecord.from_model(a))
            for a in AssignmentRepository(self.db).find_assignments_for_user(user.id)
        ]

    def update_preferences(self, user: User, payload: PreferencesUpdate) -> UserOut:
        """Apply the provided fields; omitted fields are left unchanged."""
        return self._apply(user, payload)

    def update_user(self, user_id: str, payload: UserUpdate) -> UserOut:
        user = self._require(user_id)
        if payload.member_id and payload.member_id != user.member_id:
            if self.users.find_user_by_member_id(payload.member_id):
                raise ValidationError(f"Member id {payload.member_id} already exists")
        return self._apply(user, payload)

    def delete_user(self, user_id: str) -> int:
        """Delete a user; their active tasks return to the pool."""
        return self.orchestrator.delete_user(user_id)

    def _require(self, user_id: str) -> User:
        user = self.users.find_user_by_id(user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")
        return user

    def _apply(self, user: User, payload: PreferencesUpdate) -> UserOut:
        changes = payload.model_dump(exclude_none=True, exclude={'environment'})
        if payload.environment is not None:
            changes.update(payload.environment.model_dump(exclude_unset=True))

        if not changes:
            raise ValidationError("No profile fields provided")

        self.users.update_profile(user, changes)
        self.db.commit()
        logger.info(f"Updated user {user.id}: {sorted(changes)}")
        return to_user_out(UserSummary.from_model(user, include_active=True))

    @staticmethod
    def _user_data(payload: UserCreate) -> Dict[str, Any]:
        data = payload.model_dump(exclude={'environment'})
        data.update(payload.environment.model_dump())
        return data
