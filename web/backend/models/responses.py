#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional


class ComponentScoresOut(BaseModel):
    """Component scores. The time and level scores are not capped at 100."""
    skill_score: float = Field(ge=0, le=100)
    preference_score: float = Field(ge=0, le=100)
    time_score: float = Field(ge=0)
    environment_score: float = Field(ge=0, le=100)
    level_score: float = Field(ge=0)


class TaskOut(BaseModel):
    """A household task."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "task_code": "T001",
                "name": "洗碗",
                "level": 2,
                "time_slots": ["9:00-11:00"],
                "environment": ["中等噪音"],
                "tags": ["日常例行任务"],
                "urgency": 2,
                "duration": 20,
                "description": "",
                "status": "unassigned",
                "created_at": "2026-02-01T12:00:00"
            }
        }
    )

    id: str
    task_code: str
    name: str
    level: int
    time_slots: List[str]
    environment: List[str]
    tags: List[str]
    urgency: int
    duration: int
    description: str
    status: str
    created_at: Optional[str] = None


class UserOut(BaseModel):
    """Public user profile. Never includes credentials."""
    id: str
    member_id: str
    name: str
    email: Optional[str]
    role: str
    skills: List[str] = []
    preferences: List[str] = []
    time_slots: List[str] = []
    environment: Dict[str, int] = {}
    active_tasks: List[str] = []


class AssignmentOut(BaseModel):
    id: str
    status: str
    match_score: float = Field(ge=0)
    component_scores: Dict[str, float]
    user_note: str
    admin_note: str
    assigned_at: Optional[str]
    started_at: Optional[str]
    completed_at: Optional[str]
    task: TaskOut
    user: UserOut


class CandidateMatchOut(BaseModel):
    user_id: str
    name: Optional[str]
    match_score: float
    component_scores: ComponentScoresOut


class TaskAssignmentResultOut(BaseModel):
    """Outcome for one task of a batch: a created assignment, or a preview."""
    task: str
    task_id: str
    user_id: str
    match_score: float
    assigned_to: Optional[str] = None
    assignment_id: Optional[str] = None
    best_match: Optional[str] = None
    all_matches: Optional[List[CandidateMatchOut]] = None


class SkippedTaskOut(BaseModel):
    task_id: str
    reason: str


class TaskErrorOut(BaseModel):
    """A failed task. `detail` is only filled in development."""
    task_id: str
    error: str
    type: str
    detail: Optional[str] = None


class BatchAssignmentResponse(BaseModel):
    success: bool
    message: str
    results: List[TaskAssignmentResultOut]
    skipped: List[SkippedTaskOut] = []
    errors: List[TaskErrorOut] = []


class AssignmentResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    assignment: AssignmentOut


class AssignmentsResponse(BaseModel):
    success: bool
    count: int
    assignments: List[AssignmentOut]


class RecommendationOut(BaseModel):
    task: TaskOut
    match_score: float
    component_scores: ComponentScoresOut


class RecommendationsResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    recommendations: List[RecommendationOut]


class TaskResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    task: TaskOut


class TasksResponse(BaseModel):
    success: bool
    count: int
    tasks: List[TaskOut]


class ImportResult(BaseModel):
    total: int
    success: int
    failed: int
    errors: List[str] = []


class ImportResponse(BaseModel):
    success: bool
    message: str
    result: ImportResult


class UserResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    user: UserOut


class UsersResponse(BaseModel):
    success: bool
    count: int
    users: List[UserOut]


class MessageResponse(BaseModel):
    success: bool
    message: str
