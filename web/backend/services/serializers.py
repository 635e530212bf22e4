#!/usr/bin/env python3
"""
Conversion from orchestrator DTOs to API response models.
"""

from core.assignment.dto import (
    AssignmentRecord,
    CandidateMatch,
    TaskAssignmentOutcome,
    TaskSummary,
    UserSummary,
)
from ..models.responses import (
    AssignmentOut,
    CandidateMatchOut,
    ComponentScoresOut,
    TaskAssignmentResultOut,
    TaskOut,
    UserOut,
)
from ..utils import safe_datetime_iso


def to_task_out(task: TaskSummary) -> TaskOut:
    return TaskOut(
        id=task.id,
        task_code=task.task_code,
        name=task.name,
        level=task.level,
        time_slots=task.time_slots,
        environment=task.environment,
        tags=task.tags,
        urgency=task.urgency,
        duration=task.duration,
        description=task.description,
        status=task.status,
        created_at=safe_datetime_iso(task.created_at),
    )


def to_user_out(user: UserSummary) -> UserOut:
    return UserOut(
        id=user.id,
        member_id=user.member_id,
        name=user.name,
        email=user.email,
        role=user.role,
        skills=user.skills,
        preferences=user.preferences,
        time_slots=user.time_slots,
        environment=user.environment,
        active_tasks=user.active_tasks,
    )


def to_assignment_out(record: AssignmentRecord) -> AssignmentOut:
    return AssignmentOut(
        id=record.id,
        status=record.status,
        match_score=record.match_score,
        component_scores=record.component_scores,
        user_note=record.user_note,
        admin_note=record.admin_note,
        assigned_at=safe_datetime_iso(record.assigned_at),
        started_at=safe_datetime_iso(record.started_at),
        completed_at=safe_datetime_iso(record.completed_at),
        task=to_task_out(record.task),
        user=to_user_out(record.user),
    )


def to_candidate_out(candidate: CandidateMatch) -> CandidateMatchOut:
    return CandidateMatchOut(
        user_id=candidate.user_id,
        name=candidate.user_name,
        match_score=candidate.match_score,
        component_scores=ComponentScoresOut(**candidate.component_scores),
    )


def to_batch_result_out(outcome: TaskAssignmentOutcome, auto_assign: bool) -> TaskAssignmentResultOut:
    best = outcome.best_match
    if auto_assign:
        return TaskAssignmentResultOut(
            task=outcome.task_name,
            task_id=outcome.task_id,
            assigned_to=best.user_name,
            user_id=best.user_id,
            match_score=best.match_score,
            assignment_id=outcome.assignment_id,
        )
    return TaskAssignmentResultOut(
        task=outcome.task_name,
        task_id=outcome.task_id,
        best_match=best.user_name,
        user_id=best.user_id,
        match_score=best.match_score,
        all_matches=[to_candidate_out(c) for c in outcome.alternatives],
    )
