#!/usr/bin/env python3
"""
Test suite for AssignmentOrchestrator against a temporary SQLite database.
"""

import unittest
import uuid
from unittest.mock import patch

import pytest
from sqlalchemy import func, select

from core.assignment import AssignmentOrchestrator
from core.assignment.orchestrator import INTERNAL_ERROR_MESSAGE, SKIP_ALREADY_CLAIMED, SKIP_NOT_ASSIGNABLE
from core.exceptions import (
    AssignmentNotFoundError,
    NoAssignableTasksError,
    NoUsersAvailableError,
    StateConflictError,
    TaskNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from database.models import Assignment, Task, User
from database.repositories import UserRepository
from database.uow import uow_factory
from tests.fixtures.household_fixtures import DISHWASHER_PROFILE, TestDatabase, seed_task, seed_user


@pytest.mark.db
class OrchestratorTestCase(unittest.TestCase):
    """Shared database setup."""

    def setUp(self):
        self.db = TestDatabase()
        self.uow = uow_factory(self.db.session_factory)
        self.orchestrator = AssignmentOrchestrator(self.uow)

    def tearDown(self):
        self.db.close()

    def task_status(self, task_id: str) -> str:
        with self.db.session() as session:
            return session.get(Task, uuid.UUID(task_id)).status

    def assignment_count(self, task_id: str = None) -> int:
        stmt = select(func.count()).select_from(Assignment)
        if task_id:
            stmt = stmt.where(Assignment.task_id == uuid.UUID(task_id))
        with self.db.session() as session:
            return session.execute(stmt).scalar_one()

    def active_ids(self, user_id: str):
        with self.db.session() as session:
            return [str(i) for i in UserRepository(session).get_active_assignment_ids(user_id)]


class TestBatchAssignment(OrchestratorTestCase):

    def test_two_tasks_one_user(self):
        user_id = seed_user(self.db.session_factory, **DISHWASHER_PROFILE)
        dishes = seed_task(self.db.session_factory, name="洗碗")
        cooking = seed_task(self.db.session_factory, name="做饭", tags=[], time_slots=[])

        batch = self.orchestrator.assign_tasks([dishes, cooking])

        self.assertEqual(len(batch.results), 2)
        self.assertEqual(batch.skipped, [])
        self.assertEqual(batch.errors, [])
        scores = {r.task_id: r.best_match.match_score for r in batch.results}
        self.assertEqual(scores[dishes], 90.0)
        self.assertLess(scores[cooking], scores[dishes])
        for outcome in batch.results:
            self.assertEqual(outcome.best_match.user_id, user_id)
            self.assertIsNotNone(outcome.assignment_id)

        self.assertEqual(self.task_status(dishes), "assigned")
        self.assertEqual(self.task_status(cooking), "assigned")
        self.assertEqual(self.assignment_count(), 2)
        self.assertEqual(
            sorted(self.active_ids(user_id)),
            sorted(r.assignment_id for r in batch.results)
        )

    def test_best_user_wins(self):
        seed_user(self.db.session_factory, name="novice")
        expert_id = seed_user(self.db.session_factory, name="expert", **DISHWASHER_PROFILE)
        task_id = seed_task(self.db.session_factory)

        batch = self.orchestrator.assign_tasks([task_id])

        self.assertEqual(batch.results[0].best_match.user_id, expert_id)
        self.assertEqual(batch.results[0].best_match.user_name, "expert")

    def test_preview_persists_nothing(self):
        for i in range(4):
            seed_user(self.db.session_factory, name=f"member-{i}", skills=["洗碗"] if i == 2 else [])
        task_id = seed_task(self.db.session_factory)

        batch = self.orchestrator.assign_tasks([task_id], auto_assign=False)

        outcome = batch.results[0]
        self.assertIsNone(outcome.assignment_id)
        self.assertEqual(outcome.best_match.user_name, "member-2")
        self.assertEqual(len(outcome.alternatives), 3)
        self.assertEqual(outcome.alternatives[0], outcome.best_match)
        self.assertEqual(self.task_status(task_id), "unassigned")
        self.assertEqual(self.assignment_count(), 0)

    def test_skips_tasks_that_are_not_assignable(self):
        seed_user(self.db.session_factory)
        open_task = seed_task(self.db.session_factory)
        taken_task = seed_task(self.db.session_factory, status="assigned")
        missing = str(uuid.uuid4())

        batch = self.orchestrator.assign_tasks([open_task, taken_task, missing, "not-a-uuid"])

        self.assertEqual([r.task_id for r in batch.results], [open_task])
        self.assertEqual(
            [(s.task_id, s.reason) for s in batch.skipped],
            [
                (taken_task, SKIP_NOT_ASSIGNABLE),
                (missing, SKIP_NOT_ASSIGNABLE),
                ("not-a-uuid", SKIP_NOT_ASSIGNABLE),
            ]
        )

    def test_duplicate_ids_are_assigned_once(self):
        seed_user(self.db.session_factory)
        task_id = seed_task(self.db.session_factory)

        batch = self.orchestrator.assign_tasks([task_id, task_id])

        self.assertEqual(len(batch.results), 1)
        self.assertEqual(self.assignment_count(task_id), 1)

    def test_no_assignable_tasks(self):
        seed_user(self.db.session_factory)
        task_id = seed_task(self.db.session_factory, status="completed")

        with self.assertRaises(NoAssignableTasksError):
            self.orchestrator.assign_tasks([task_id])

    def test_no_users(self):
        task_id = seed_task(self.db.session_factory)

        with self.assertRaises(NoUsersAvailableError):
            self.orchestrator.assign_tasks([task_id])

    def test_task_ids_must_be_a_list(self):
        with self.assertRaises(ValidationError):
            self.orchestrator.assign_tasks("abc")

    def test_concurrent_batches_create_one_assignment(self):
        """The second batch to claim the task reports it as skipped."""
        seed_user(self.db.session_factory)
        task_id = seed_task(self.db.session_factory)

        rival = AssignmentOrchestrator(self.uow)
        rival_batches = []
        opened = []

        def racing_uow():
            opened.append(True)
            # Both batches have snapshotted the task as unassigned; the rival commits first
            if len(opened) == 2:
                rival_batches.append(rival.assign_tasks([task_id]))
            return self.uow()

        batch = AssignmentOrchestrator(racing_uow).assign_tasks([task_id])

        self.assertEqual(len(rival_batches[0].results), 1)
        self.assertEqual(batch.results, [])
        self.assertEqual([(s.task_id, s.reason) for s in batch.skipped], [(task_id, SKIP_ALREADY_CLAIMED)])
        self.assertEqual(self.assignment_count(task_id), 1)

    def test_failed_task_is_rolled_back_and_batch_continues(self):
        user_id = seed_user(self.db.session_factory)
        first = seed_task(self.db.session_factory)
        second = seed_task(self.db.session_factory)

        push = UserRepository.push_user_active_task
        calls = []

        def flaky_push(repo, user, assignment):
            calls.append(assignment)
            if len(calls) == 1:
                raise RuntimeError("disk full")
            return push(repo, user, assignment)

        with patch.object(UserRepository, 'push_user_active_task', autospec=True, side_effect=flaky_push):
            batch = self.orchestrator.assign_tasks([first, second])

        self.assertEqual([e.task_id for e in batch.errors], [first])
        self.assertEqual(batch.errors[0].type, "InternalError")
        self.assertEqual([r.task_id for r in batch.results], [second])

        self.assertEqual(self.task_status(first), "unassigned")
        self.assertEqual(self.assignment_count(first), 0)
        self.assertEqual(self.task_status(second), "assigned")
        self.assertEqual(len(self.active_ids(user_id)), 1)

    def test_unexpected_error_text_is_kept_out_of_error_message(self):
        seed_user(self.db.session_factory)
        task_id = seed_task(self.db.session_factory)

        failure = RuntimeError("password=hunter2 at db-host:5432")
        with patch.object(UserRepository, 'push_user_active_task', side_effect=failure):
            batch = self.orchestrator.assign_tasks([task_id])

        self.assertEqual(len(batch.errors), 1)
        error = batch.errors[0]
        self.assertEqual(error.error, INTERNAL_ERROR_MESSAGE)
        self.assertNotIn("hunter2", error.error)
        self.assertEqual(error.type, "InternalError")
        self.assertEqual(error.detail, "password=hunter2 at db-host:5432")

    def test_domain_error_message_is_reported(self):
        seed_user(self.db.session_factory)
        task_id = seed_task(self.db.session_factory)

        with patch.object(UserRepository, 'push_user_active_task', side_effect=ValidationError("bad slot")):
            batch = self.orchestrator.assign_tasks([task_id])

        self.assertEqual(batch.errors[0].error, "bad slot")
        self.assertEqual(batch.errors[0].type, "ValidationError")
        self.assertIsNone(batch.errors[0].detail)


class TestManualAssignment(OrchestratorTestCase):

    def test_assign_task_to_user(self):
        user_id = seed_user(self.db.session_factory, **DISHWASHER_PROFILE)
        task_id = seed_task(self.db.session_factory)

        record = self.orchestrator.assign_task_to_user(task_id, user_id)

        self.assertEqual(record.status, "assigned")
        self.assertEqual(record.match_score, 90.0)
        self.assertEqual(record.component_scores["skill_score"], 100)
        self.assertEqual(record.task.id, task_id)
        self.assertEqual(record.task.status, "assigned")
        self.assertEqual(record.user.id, user_id)
        self.assertFalse(hasattr(record.user, "password_hash"))
        self.assertEqual(self.active_ids(user_id), [record.id])

    def test_already_assigned_task_conflicts(self):
        user_id = seed_user(self.db.session_factory)
        task_id = seed_task(self.db.session_factory)
        self.orchestrator.assign_task_to_user(task_id, user_id)

        with self.assertRaises(StateConflictError):
            self.orchestrator.assign_task_to_user(task_id, user_id)
        self.assertEqual(self.assignment_count(task_id), 1)

    def test_unknown_task_or_user(self):
        user_id = seed_user(self.db.session_factory)
        task_id = seed_task(self.db.session_factory)

        with self.assertRaises(TaskNotFoundError):
            self.orchestrator.assign_task_to_user(str(uuid.uuid4()), user_id)
        with self.assertRaises(UserNotFoundError):
            self.orchestrator.assign_task_to_user(task_id, str(uuid.uuid4()))

    def test_choose_task(self):
        user_id = seed_user(self.db.session_factory)
        task_id = seed_task(self.db.session_factory)

        record = self.orchestrator.choose_task(task_id, user_id)

        self.assertEqual(record.user.id, user_id)
        self.assertEqual(self.task_status(task_id), "assigned")


class TestRecommendations(OrchestratorTestCase):

    def test_recommends_unassigned_tasks_best_first(self):
        user_id = seed_user(self.db.session_factory, **DISHWASHER_PROFILE)
        seed_task(self.db.session_factory, name="做饭", level=5)
        dishes = seed_task(self.db.session_factory, name="洗碗")
        seed_task(self.db.session_factory, name="洗碗", status="assigned")

        recommendations = self.orchestrator.recommend_tasks(user_id)

        self.assertEqual(len(recommendations), 2)
        self.assertEqual(recommendations[0].task.id, dishes)
        self.assertEqual(recommendations[0].result.final_score, 90.0)

    def test_limit(self):
        user_id = seed_user(self.db.session_factory)
        for _ in range(8):
            seed_task(self.db.session_factory)

        self.assertEqual(len(self.orchestrator.recommend_tasks(user_id)), 6)
        self.assertEqual(len(self.orchestrator.recommend_tasks(user_id, limit=3)), 3)

    def test_unknown_user(self):
        with self.assertRaises(UserNotFoundError):
            self.orchestrator.recommend_tasks(str(uuid.uuid4()))


class TestAssignmentLifecycle(OrchestratorTestCase):

    def setUp(self):
        super().setUp()
        self.user_id = seed_user(self.db.session_factory)
        self.task_id = seed_task(self.db.session_factory)
        self.assignment_id = self.orchestrator.assign_task_to_user(self.task_id, self.user_id).id

    def test_start_then_complete(self):
        started = self.orchestrator.update_assignment_status(self.assignment_id, self.user_id, "in_progress")
        self.assertEqual(started.status, "in_progress")
        self.assertIsNotNone(started.started_at)
        self.assertEqual(self.active_ids(self.user_id), [self.assignment_id])

        completed = self.orchestrator.update_assignment_status(self.assignment_id, self.user_id, "completed")
        self.assertEqual(completed.status, "completed")
        self.assertIsNotNone(completed.completed_at)
        self.assertEqual(self.task_status(self.task_id), "completed")
        self.assertEqual(self.active_ids(self.user_id), [])

    def test_cannot_complete_before_starting(self):
        with self.assertRaises(StateConflictError):
            self.orchestrator.update_assignment_status(self.assignment_id, self.user_id, "completed")
        self.assertEqual(self.task_status(self.task_id), "assigned")

    def test_reject_then_reopen(self):
        rejected = self.orchestrator.update_assignment_status(self.assignment_id, self.user_id, "rejected")

        self.assertEqual(rejected.status, "rejected")
        self.assertEqual(self.task_status(self.task_id), "rejected")
        self.assertEqual(self.active_ids(self.user_id), [])

        reopened = self.orchestrator.reopen_task(self.task_id)
        self.assertEqual(reopened.status, "unassigned")

    def test_reopen_requires_rejected_task(self):
        with self.assertRaises(StateConflictError):
            self.orchestrator.reopen_task(self.task_id)

    def test_users_cannot_cancel(self):
        with self.assertRaises(ValidationError):
            self.orchestrator.update_assignment_status(self.assignment_id, self.user_id, "cancelled")

    def test_other_users_cannot_update(self):
        other_id = seed_user(self.db.session_factory)
        with self.assertRaises(AssignmentNotFoundError):
            self.orchestrator.update_assignment_status(self.assignment_id, other_id, "in_progress")

    def test_admin_cancel_releases_task(self):
        record = self.orchestrator.update_assignment(self.assignment_id, status="cancelled", admin_note="away")

        self.assertEqual(record.status, "cancelled")
        self.assertEqual(record.admin_note, "away")
        self.assertEqual(self.task_status(self.task_id), "unassigned")
        self.assertEqual(self.active_ids(self.user_id), [])

        # The task can be claimed again
        self.orchestrator.assign_task_to_user(self.task_id, self.user_id)
        self.assertEqual(self.assignment_count(self.task_id), 2)

    def test_notes(self):
        record = self.orchestrator.add_user_note(self.assignment_id, self.user_id, "need soap")
        self.assertEqual(record.user_note, "need soap")

        record = self.orchestrator.add_admin_note(self.assignment_id, "buy soap")
        self.assertEqual(record.admin_note, "buy soap")

        with self.assertRaises(ValidationError):
            self.orchestrator.add_admin_note(self.assignment_id, "")

    def test_delete_active_assignment_releases_task(self):
        self.orchestrator.delete_assignment(self.assignment_id)

        self.assertEqual(self.assignment_count(), 0)
        self.assertEqual(self.task_status(self.task_id), "unassigned")
        self.assertEqual(self.active_ids(self.user_id), [])

    def test_delete_missing_assignment(self):
        with self.assertRaises(AssignmentNotFoundError):
            self.orchestrator.delete_assignment(str(uuid.uuid4()))

    def test_delete_task_cascades(self):
        deleted = self.orchestrator.delete_task(self.task_id)

        self.assertEqual(deleted, 1)
        self.assertEqual(self.assignment_count(), 0)
        self.assertEqual(self.active_ids(self.user_id), [])
        with self.db.session() as session:
            self.assertIsNone(session.get(Task, uuid.UUID(self.task_id)))

    def test_delete_user_releases_active_tasks(self):
        completed_task = seed_task(self.db.session_factory)
        finished = self.orchestrator.assign_task_to_user(completed_task, self.user_id)
        self.orchestrator.update_assignment_status(finished.id, self.user_id, "in_progress")
        self.orchestrator.update_assignment_status(finished.id, self.user_id, "completed")
        self.orchestrator.update_assignment_status(self.assignment_id, self.user_id, "in_progress")

        deleted = self.orchestrator.delete_user(self.user_id)

        self.assertEqual(deleted, 2)
        self.assertEqual(self.assignment_count(), 0)
        self.assertEqual(self.task_status(self.task_id), "unassigned")
        self.assertEqual(self.task_status(completed_task), "completed")
        self.assertEqual(self.active_ids(self.user_id), [])
        with self.db.session() as session:
            self.assertIsNone(session.get(User, uuid.UUID(self.user_id)))

    def test_delete_missing_user(self):
        with self.assertRaises(UserNotFoundError):
            self.orchestrator.delete_user(str(uuid.uuid4()))


if __name__ == '__main__':
    unittest.main()
