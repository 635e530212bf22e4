#!/usr/bin/env python3
"""
User endpoints - household members and matching profiles.
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.assignment import AssignmentOrchestrator
from database.models import User
from ..dependencies import get_current_user, get_db, get_orchestrator, require_admin
from ..services.user_service import UserService
from ..utils import validate_uuid
from ..models.requests import (
    PreferencesUpdate,
    ProfileUpdate,
    UserCreate,
    UserImportRequest,
    UserUpdate,
)
from ..models.responses import (
    AssignmentsResponse,
    ImportResponse,
    MessageResponse,
    UserResponse,
    UsersResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=201)
def create_user(
    payload: UserCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Create a household member.

    Environment values omitted from the request default to 50.
    """
    user = UserService(db).create_user(payload)
    return UserResponse(success=True, message="User created", user=user)


@router.get("", response_model=UsersResponse)
def list_users(
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    users = UserService(db).list_users()
    return UsersResponse(success=True, count=len(users), users=users)


# Caller-scoped routes are declared before /{user_id}
@router.get("/profile", response_model=UserResponse)
def get_profile(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return UserResponse(success=True, user=UserService(db).get_profile(user))


@router.put("/profile", response_model=UserResponse)
def update_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update the caller's name, email and matching profile."""
    updated = UserService(db).update_preferences(user, payload)
    return UserResponse(success=True, message="Profile updated", user=updated)


@router.get("/tasks", response_model=AssignmentsResponse)
def get_my_tasks(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """The caller's assignments, newest first."""
    assignments = UserService(db).list_assignments(user)
    return AssignmentsResponse(success=True, count=len(assignments), assignments=assignments)


@router.put("/preferences", response_model=UserResponse)
def update_preferences(
    payload: PreferencesUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update the caller's skills, preferences, time slots or environment."""
    updated = UserService(db).update_preferences(user, payload)
    return UserResponse(success=True, message="Preferences updated", user=updated)


@router.post("/import", response_model=ImportResponse)
def import_users(
    payload: UserImportRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Bulk import household members.

    Entries that fail validation or reuse an existing member id are
    reported in the result instead of failing the request.
    """
    result = UserService(db).import_users(payload.users)
    return ImportResponse(
        success=True,
        message=f"Imported {result.success} of {result.total} users",
        result=result
    )


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    validate_uuid(user_id, "user_id")
    return UserResponse(success=True, user=UserService(db).get_user(user_id))


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str,
    payload: UserUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    validate_uuid(user_id, "user_id")
    user = UserService(db).update_user(user_id, payload)
    return UserResponse(success=True, message="User updated", user=user)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    orchestrator: AssignmentOrchestrator = Depends(get_orchestrator)
):
    """Delete a user with their assignments; tasks they held become unassigned."""
    validate_uuid(user_id, "user_id")
    deleted = UserService(db, orchestrator).delete_user(user_id)
    return MessageResponse(success=True, message=f"User deleted along with {deleted} assignments")
