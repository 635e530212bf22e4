"""Data Transfer Objects for the assignment orchestrator.

DTOs are used to transfer data outside of the Unit of Work context,
allowing ORM objects to be converted to plain Python objects that
can be safely used after the database session is closed.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from core.scorer import EnvironmentFlag, EnvironmentProfile, MatchResult, TaskDefinition, UserProfile
from database.models import Assignment, Task, User


def user_to_profile(user: User) -> UserProfile:
    return UserProfile(
        skills=tuple(user.skills or ()),
        preferences=tuple(user.preferences or ()),
        time_slots=tuple(user.time_slots or ()),
        environment=EnvironmentProfile(
            noise_tolerance=user.noise_tolerance,
            space_requirement=user.space_requirement,
            social_density=user.social_density,
            urgency_acceptance=user.urgency_acceptance,
            multitask_capability=user.multitask_capability,
        ),
        user_id=str(user.id),
        name=user.name,
    )


def task_to_definition(task: Task) -> TaskDefinition:
    return TaskDefinition(
        name=task.name,
        tags=tuple(task.tags or ()),
        time_slots=tuple(task.time_slots or ()),
        environment=EnvironmentFlag.parse_many(task.environment or ()),
        urgency=task.urgency,
        level=task.level,
        task_id=str(task.id),
    )


@dataclass
class TaskSummary:
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
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, task: Task) -> "TaskSummary":
        return cls(
            id=str(task.id),
            task_code=task.task_code,
            name=task.name,
            level=task.level,
            time_slots=list(task.time_slots or []),
            environment=list(task.environment or []),
            tags=list(task.tags or []),
            urgency=task.urgency,
            duration=task.duration,
            description=task.description or '',
            status=task.status,
            created_at=task.created_at,
        )


@dataclass
class UserSummary:
    """Public view of a user. Never carries the password hash."""
    id: str
    member_id: str
    name: str
    email: Optional[str]
    role: str
    skills: List[str] = field(default_factory=list)
    preferences: List[str] = field(default_factory=list)
    time_slots: List[str] = field(default_factory=list)
    environment: Dict[str, int] = field(default_factory=dict)
    active_tasks: List[str] = field(default_factory=list)

    @classmethod
    def from_model(cls, user: User, include_active: bool = False) -> "UserSummary":
        return cls(
            id=str(user.id),
            member_id=user.member_id,
            name=user.name,
            email=user.email,
            role=user.role,
            skills=list(user.skills or []),
            preferences=list(user.preferences or []),
            time_slots=list(user.time_slots or []),
            environment=user_to_profile(user).environment.to_wire(),
            active_tasks=[str(a.id) for a in user.active_tasks] if include_active else [],
        )


@dataclass
class AssignmentRecord:
    id: str
    status: str
    match_score: float
    component_scores: Dict[str, float]
    user_note: str
    admin_note: str
    assigned_at: Optional[datetime]
    started_at: Optional[datetime]
    completed_at: Optional[datetime]
    task: TaskSummary
    user: UserSummary

    @classmethod
    def from_model(cls, assignment: Assignment) -> "AssignmentRecord":
        return cls(
            id=str(assignment.id),
            status=assignment.status,
            match_score=float(assignment.match_score),
            component_scores=dict(assignment.component_scores or {}),
            user_note=assignment.user_note or '',
            admin_note=assignment.admin_note or '',
            assigned_at=assignment.assigned_at,
            started_at=assignment.started_at,
            completed_at=assignment.completed_at,
            task=TaskSummary.from_model(assignment.task),
            user=UserSummary.from_model(assignment.user),
        )


@dataclass
class CandidateMatch:
    user_id: str
    user_name: Optional[str]
    match_score: float
    component_scores: Dict[str, float]

    @classmethod
    def from_ranked(cls, user: UserProfile, result: MatchResult) -> "CandidateMatch":
        return cls(
            user_id=user.user_id,
            user_name=user.name,
            match_score=result.final_score,
            component_scores=result.component_scores.to_dict(),
        )


@dataclass
class TaskAssignmentOutcome:
    """Per-task result of a batch: the assignment made, or a preview of it."""
    task_id: str
    task_name: str
    best_match: CandidateMatch
    assignment_id: Optional[str] = None
    alternatives: List[CandidateMatch] = field(default_factory=list)


@dataclass
class SkippedTask:
    task_id: str
    reason: str


@dataclass
class TaskError:
    """A task the batch could not assign; `detail` holds the raw exception text, if any."""
    task_id: str
    error: str
    type: str
    detail: Optional[str] = None


@dataclass
class BatchAssignmentResult:
    auto_assign: bool
    results: List[TaskAssignmentOutcome] = field(default_factory=list)
    skipped: List[SkippedTask] = field(default_factory=list)
    errors: List[TaskError] = field(default_factory=list)


@dataclass
class TaskRecommendation:
    task: TaskSummary
    result: MatchResult
