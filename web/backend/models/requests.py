#!/usr/bin/env python3
"""
Request models for API endpoints.

Environment attributes use the Chinese wire keys of the mobile client;
the English attribute names are accepted too.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Literal, Optional

from core.scorer.models import DEFAULT_ENVIRONMENT_VALUE


class EnvironmentPayload(BaseModel):
    """A user's environmental tolerances (0-100). Missing values default to 50."""
    model_config = ConfigDict(populate_by_name=True)

    noise_tolerance: int = Field(DEFAULT_ENVIRONMENT_VALUE, ge=0, le=100, alias="噪音耐受度")
    space_requirement: int = Field(DEFAULT_ENVIRONMENT_VALUE, ge=0, le=100, alias="空间需求")
    social_density: int = Field(DEFAULT_ENVIRONMENT_VALUE, ge=0, le=100, alias="社交密度")
    urgency_acceptance: int = Field(DEFAULT_ENVIRONMENT_VALUE, ge=0, le=100, alias="紧急程度接受度")
    multitask_capability: int = Field(DEFAULT_ENVIRONMENT_VALUE, ge=0, le=100, alias="多任务处理")


class AssignTasksRequest(BaseModel):
    """Request to auto-assign a batch of tasks."""
    model_config = ConfigDict(populate_by_name=True)

    task_ids: List[str] = Field(..., alias="taskIds", description="Ids of the tasks to assign")
    auto_assign: bool = Field(
        default=True,
        alias="autoAssign",
        description="Persist assignments; false returns a preview only"
    )


class TaskCreate(BaseModel):
    """Request to create a task."""
    task_code: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("task_code", "task_id"),
        description="Unique external task identifier"
    )
    name: str = Field(..., min_length=1)
    level: int = Field(..., ge=1, le=5)
    time_slots: List[str] = Field(default_factory=list)
    environment: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    urgency: int = Field(..., ge=1, le=5)
    duration: int = Field(..., ge=0, description="Duration in minutes")
    description: str = ""


class UserCreate(BaseModel):
    """Request to create a household member."""
    member_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    role: Literal["user", "admin"] = "user"
    skills: List[str] = Field(default_factory=list)
    preferences: List[str] = Field(default_factory=list)
    time_slots: List[str] = Field(default_factory=list)
    environment: EnvironmentPayload = Field(default_factory=EnvironmentPayload)


class PreferencesUpdate(BaseModel):
    """Request to update the caller's matching preferences."""
    skills: Optional[List[str]] = None
    preferences: Optional[List[str]] = None
    time_slots: Optional[List[str]] = None
    environment: Optional[EnvironmentPayload] = None


class AssignmentStatusUpdate(BaseModel):
    status: Literal["in_progress", "completed", "rejected"]


class AssignmentUpdate(BaseModel):
    """Admin update of an assignment."""
    status: Optional[Literal["assigned", "in_progress", "completed", "rejected", "cancelled"]] = None
    admin_note: Optional[str] = None


class NoteRequest(BaseModel):
    note: str = Field(..., min_length=1)


class TaskImportRequest(BaseModel):
    """Bulk import; entries are validated individually."""
    tasks: List[Dict[str, Any]]


class TaskUpdate(BaseModel):
    """Partial edit of a task definition. Status is managed by assignments."""
    model_config = ConfigDict(extra="forbid")

    task_code: Optional[str] = Field(
        default=None,
        min_length=1,
        validation_alias=AliasChoices("task_code", "task_id")
    )
    name: Optional[str] = Field(default=None, min_length=1)
    level: Optional[int] = Field(default=None, ge=1, le=5)
    time_slots: Optional[List[str]] = None
    environment: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    urgency: Optional[int] = Field(default=None, ge=1, le=5)
    duration: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None


class ProfileUpdate(PreferencesUpdate):
    """Request to update the caller's own profile."""
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = None


class UserUpdate(ProfileUpdate):
    """Admin edit of any user."""
    member_id: Optional[str] = Field(default=None, min_length=1)
    role: Optional[Literal["user", "admin"]] = None


class UserImportRequest(BaseModel):
    """Bulk import; entries are validated individually."""
    users: List[Dict[str, Any]]
