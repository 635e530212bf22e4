#!/usr/bin/env python3
"""
Assignment Orchestrator - Claims tasks for users and persists Assignments.

Every assignment is one unit of work: claim the task (conditional status
update), create the Assignment, and push it onto the user's active-task list.
The claim is the serialization point between concurrent writers; a failure
at any step rolls the whole unit back.

Batch auto-assignment treats each task independently: one task failing or
losing a race never aborts the rest of the batch.
"""

from typing import Any, Iterable, List, Optional
import logging

from core.assignment.dto import (
    AssignmentRecord,
    BatchAssignmentResult,
    CandidateMatch,
    SkippedTask,
    TaskAssignmentOutcome,
    TaskError,
    TaskRecommendation,
    TaskSummary,
    task_to_definition,
    user_to_profile,
)
from core.assignment.state import (
    ACTIVE_ASSIGNMENT_STATUSES,
    USER_SETTABLE_STATUSES,
    AssignmentStatus,
    TaskStatus,
    ensure_assignment_transition,
    ensure_task_transition,
    parse_assignment_status,
)
from core.exceptions import (
    AssignmentNotFoundError,
    ChoreMatchError,
    NoAssignableTasksError,
    NoUsersAvailableError,
    StateConflictError,
    TaskNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from core.ranking import RankingService
from core.scorer import MatchResult, ScoringService
from database.models import Assignment
from database.models.base import utcnow
from database.repositories import to_uuid
from database.uow import Repositories, UnitOfWorkFactory

logger = logging.getLogger(__name__)

SKIP_NOT_ASSIGNABLE = "not_found_or_not_unassigned"
SKIP_ALREADY_CLAIMED = "already_claimed"
INTERNAL_ERROR_MESSAGE = "Internal error"


class AssignmentOrchestrator:
    """
    Batch and single assignment of tasks, plus the assignment lifecycle.

    Dependencies are injected; the orchestrator opens its own units of work
    through `uow_factory`.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        ranking: Optional[RankingService] = None,
        scoring: Optional[ScoringService] = None
    ):
        self.uow_factory = uow_factory
        self.scoring = scoring or (ranking.scoring if ranking else ScoringService())
        self.ranking = ranking or RankingService(self.scoring)

    # ------------------------------------------------------------------
    # Assignment creation
    # ------------------------------------------------------------------

    def assign_tasks(self, task_ids: Iterable[Any], auto_assign: bool = True) -> BatchAssignmentResult:
        """
        Assign each requested unassigned task to its best-matching user.

        Args:
            task_ids: Ids of tasks to assign; tasks not currently unassigned are skipped
            auto_assign: Persist the assignments; when False only previews are returned

        Returns:
            BatchAssignmentResult with per-task outcomes, skipped tasks and errors

        Raises:
            ValidationError: task_ids is not a list
            NoAssignableTasksError: none of the tasks is unassigned
            NoUsersAvailableError: there are no users
        """
        if not isinstance(task_ids, (list, tuple)):
            raise ValidationError("taskIds must be an array of task ids")

        requested = list(dict.fromkeys(str(t) for t in task_ids))

        # Snapshot tasks and users; scoring happens outside any transaction
        with self.uow_factory() as repos:
            tasks = [
                task_to_definition(t)
                for t in repos.tasks.find_tasks_by_ids_and_status(requested, TaskStatus.UNASSIGNED.value)
            ]
            users = [user_to_profile(u) for u in repos.users.find_all_users()]

        if not tasks:
            raise NoAssignableTasksError("No valid unassigned tasks found")
        if not users:
            raise NoUsersAvailableError("There are no users to assign tasks to")

        batch = BatchAssignmentResult(auto_assign=auto_assign)

        found = {to_uuid(t.task_id) for t in tasks}
        for task_id in requested:
            if to_uuid(task_id) not in found:
                batch.skipped.append(SkippedTask(task_id=task_id, reason=SKIP_NOT_ASSIGNABLE))

        for task in tasks:
            try:
                ranked = self.ranking.rank_users_for_task(task, users)
                best = ranked[0]
                best_match = CandidateMatch.from_ranked(best.user, best.result)

                if not auto_assign:
                    batch.results.append(TaskAssignmentOutcome(
                        task_id=task.task_id,
                        task_name=task.name,
                        best_match=best_match,
                        alternatives=[
                            CandidateMatch.from_ranked(r.user, r.result)
                            for r in ranked[:self.ranking.config.alternatives]
                        ]
                    ))
                    continue

                with self.uow_factory() as repos:
                    record = self._persist_assignment(repos, task.task_id, best.user.user_id, best.result)

                batch.results.append(TaskAssignmentOutcome(
                    task_id=task.task_id,
                    task_name=task.name,
                    best_match=best_match,
                    assignment_id=record.id
                ))
            except StateConflictError:
                logger.info(f"Task {task.task_id} was claimed by another worker, skipping")
                batch.skipped.append(SkippedTask(task_id=task.task_id, reason=SKIP_ALREADY_CLAIMED))
            except ChoreMatchError as e:
                logger.warning(f"Failed to assign task {task.task_id}: {e}")
                batch.errors.append(TaskError(task_id=task.task_id, error=str(e), type=e.__class__.__name__))
            except Exception as e:
                logger.exception(f"Unexpected error assigning task {task.task_id}")
                batch.errors.append(TaskError(
                    task_id=task.task_id,
                    error=INTERNAL_ERROR_MESSAGE,
                    type="InternalError",
                    detail=str(e)
                ))

        logger.info(
            f"Batch assignment ({'auto' if auto_assign else 'preview'}): "
            f"{len(batch.results)} results, {len(batch.skipped)} skipped, {len(batch.errors)} errors"
        )
        return batch

    def assign_task_to_user(self, task_id: Any, user_id: Any) -> AssignmentRecord:
        """Manually assign one task to one user, scoring the pair directly."""
        with self.uow_factory() as repos:
            task = repos.tasks.find_task_by_id(task_id)
            if task is None:
                raise TaskNotFoundError(f"Task {task_id} not found")

            user = repos.users.find_user_by_id(user_id)
            if user is None:
                raise UserNotFoundError(f"User {user_id} not found")

            if task.status != TaskStatus.UNASSIGNED.value:
                raise StateConflictError(f"Task {task_id} is already {task.status}")

            result = self.scoring.score(user_to_profile(user), task_to_definition(task))
            return self._persist_assignment(repos, task.id, user.id, result)

    def choose_task(self, task_id: Any, user_id: Any) -> AssignmentRecord:
        """A user self-selects an unassigned task."""
        return self.assign_task_to_user(task_id, user_id)

    def _persist_assignment(
        self,
        repos: Repositories,
        task_id: Any,
        user_id: Any,
        result: MatchResult
    ) -> AssignmentRecord:
        claimed = repos.tasks.update_task_status(
            task_id,
            TaskStatus.ASSIGNED.value,
            expected_status=TaskStatus.UNASSIGNED.value
        )
        if not claimed:
            raise StateConflictError(f"Task {task_id} is no longer unassigned")

        assignment = repos.assignments.save_assignment(
            user_id=user_id,
            task_id=task_id,
            match_score=result.final_score,
            component_scores=result.component_scores.to_dict(),
            status=AssignmentStatus.ASSIGNED.value
        )
        repos.users.push_user_active_task(user_id, assignment.id)

        logger.info(f"Assigned task {task_id} to user {user_id} (score={result.final_score})")
        return AssignmentRecord.from_model(assignment)

    # ------------------------------------------------------------------
    # Recommendations
    # ------------------------------------------------------------------

    def recommend_tasks(self, user_id: Any, limit: Optional[int] = None) -> List[TaskRecommendation]:
        """Rank the currently unassigned tasks for one user."""
        with self.uow_factory() as repos:
            user = repos.users.find_user_by_id(user_id)
            if user is None:
                raise UserNotFoundError(f"User {user_id} not found")

            profile = user_to_profile(user)
            available = repos.tasks.find_tasks_by_status(TaskStatus.UNASSIGNED.value)
            summaries = {str(t.id): TaskSummary.from_model(t) for t in available}
            definitions = [task_to_definition(t) for t in available]

        ranked = self.ranking.rank_tasks_for_user(profile, definitions, limit=limit)
        return [TaskRecommendation(task=summaries[r.task.task_id], result=r.result) for r in ranked]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def update_assignment_status(self, assignment_id: Any, user_id: Any, status: Any) -> AssignmentRecord:
        """Assignee-driven transition: in_progress, completed or rejected."""
        new_status = parse_assignment_status(status)
        if new_status not in USER_SETTABLE_STATUSES:
            raise ValidationError(f"Users cannot set assignment status {new_status.value}")

        with self.uow_factory() as repos:
            assignment = self._get_assignment(repos, assignment_id, owner_id=user_id)
            self._apply_status(repos, assignment, new_status)
            return AssignmentRecord.from_model(assignment)

    def update_assignment(
        self,
        assignment_id: Any,
        status: Any = None,
        admin_note: Optional[str] = None
    ) -> AssignmentRecord:
        """Admin update of status and/or admin note."""
        new_status = parse_assignment_status(status) if status else None

        with self.uow_factory() as repos:
            assignment = self._get_assignment(repos, assignment_id)
            if new_status is not None:
                self._apply_status(repos, assignment, new_status)
            if admin_note:
                assignment.admin_note = admin_note
            repos.session.flush()
            return AssignmentRecord.from_model(assignment)

    def add_user_note(self, assignment_id: Any, user_id: Any, note: str) -> AssignmentRecord:
        if not note:
            raise ValidationError("Note must not be empty")
        with self.uow_factory() as repos:
            assignment = self._get_assignment(repos, assignment_id, owner_id=user_id)
            assignment.user_note = note
            repos.session.flush()
            return AssignmentRecord.from_model(assignment)

    def add_admin_note(self, assignment_id: Any, note: str) -> AssignmentRecord:
        if not note:
            raise ValidationError("Note must not be empty")
        with self.uow_factory() as repos:
            assignment = self._get_assignment(repos, assignment_id)
            assignment.admin_note = note
            repos.session.flush()
            return AssignmentRecord.from_model(assignment)

    def delete_assignment(self, assignment_id: Any) -> None:
        """Delete an assignment; an active one returns its task to the pool."""
        with self.uow_factory() as repos:
            assignment = self._get_assignment(repos, assignment_id)
            if AssignmentStatus(assignment.status) in ACTIVE_ASSIGNMENT_STATUSES:
                self._release_task(repos, assignment.task_id)
            repos.users.pull_user_active_task(assignment.user_id, assignment.id)
            repos.assignments.delete_assignment(assignment)
            logger.info(f"Deleted assignment {assignment_id}")

    def delete_task(self, task_id: Any) -> int:
        """Delete a task and every assignment that references it."""
        with self.uow_factory() as repos:
            task = repos.tasks.find_task_by_id(task_id)
            if task is None:
                raise TaskNotFoundError(f"Task {task_id} not found")
            deleted = repos.assignments.delete_assignments_by_task(task.id)
            repos.tasks.delete_task(task)
            logger.info(f"Deleted task {task_id} and {deleted} assignments")
            return deleted

    def delete_user(self, user_id: Any) -> int:
        """
        Delete a user and all of their assignments.

        Tasks held by an active assignment go back to the unassigned pool.

        Returns:
            Number of assignments deleted
        """
        with self.uow_factory() as repos:
            user = repos.users.find_user_by_id(user_id)
            if user is None:
                raise UserNotFoundError(f"User {user_id} not found")

            assignments = repos.assignments.find_assignments_for_user(user.id)
            for assignment in assignments:
                if AssignmentStatus(assignment.status) in ACTIVE_ASSIGNMENT_STATUSES:
                    self._release_task(repos, assignment.task_id)
                repos.assignments.delete_assignment(assignment)

            repos.users.delete_user(user)
            logger.info(f"Deleted user {user_id} and {len(assignments)} assignments")
            return len(assignments)

    def reopen_task(self, task_id: Any) -> TaskSummary:
        """Return a rejected task to the unassigned pool."""
        with self.uow_factory() as repos:
            task = repos.tasks.find_task_by_id(task_id)
            if task is None:
                raise TaskNotFoundError(f"Task {task_id} not found")
            self._transition_task(repos, task.id, TaskStatus(task.status), TaskStatus.UNASSIGNED)
            return TaskSummary.from_model(task)

    def _get_assignment(self, repos: Repositories, assignment_id: Any, owner_id: Any = None) -> Assignment:
        assignment = repos.assignments.find_assignment_by_id(assignment_id)
        if assignment is None or (owner_id is not None and assignment.user_id != to_uuid(owner_id)):
            raise AssignmentNotFoundError(f"Assignment {assignment_id} not found")
        return assignment

    def _apply_status(self, repos: Repositories, assignment: Assignment, new_status: AssignmentStatus) -> None:
        ensure_assignment_transition(AssignmentStatus(assignment.status), new_status)
        now = utcnow()

        if new_status == AssignmentStatus.IN_PROGRESS:
            assignment.started_at = assignment.started_at or now
        elif new_status == AssignmentStatus.COMPLETED:
            assignment.completed_at = assignment.completed_at or now
            self._transition_task(repos, assignment.task_id, TaskStatus.ASSIGNED, TaskStatus.COMPLETED)
            repos.users.pull_user_active_task(assignment.user_id, assignment.id)
        elif new_status == AssignmentStatus.REJECTED:
            self._transition_task(repos, assignment.task_id, TaskStatus.ASSIGNED, TaskStatus.REJECTED)
            repos.users.pull_user_active_task(assignment.user_id, assignment.id)
        elif new_status == AssignmentStatus.CANCELLED:
            self._release_task(repos, assignment.task_id)
            repos.users.pull_user_active_task(assignment.user_id, assignment.id)

        assignment.status = new_status.value
        repos.session.flush()
        logger.info(f"Assignment {assignment.id} -> {new_status.value}")

    def _release_task(self, repos: Repositories, task_id: Any) -> None:
        self._transition_task(repos, task_id, TaskStatus.ASSIGNED, TaskStatus.CANCELLED)
        self._transition_task(repos, task_id, TaskStatus.CANCELLED, TaskStatus.UNASSIGNED)

    def _transition_task(self, repos: Repositories, task_id: Any, current: TaskStatus, new: TaskStatus) -> None:
        ensure_task_transition(current, new)
        if not repos.tasks.update_task_status(task_id, new.value, expected_status=current.value):
            raise StateConflictError(f"Task {task_id} is not {current.value}")
