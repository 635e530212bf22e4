#!/usr/bin/env python3
"""
Repository tests against a temporary SQLite database.
"""

import unittest
import uuid

import pytest

from database.models import Task, User
from database.repositories import AssignmentRepository, TaskRepository, UserRepository, to_uuid
from tests.fixtures.household_fixtures import TestDatabase, seed_task, seed_user


class TestToUuid(unittest.TestCase):

    def test_coerces_strings(self):
        value = uuid.uuid4()
        self.assertEqual(to_uuid(str(value)), value)
        self.assertIs(to_uuid(value), value)

    def test_invalid_values(self):
        self.assertIsNone(to_uuid("T001"))
        self.assertIsNone(to_uuid(None))


@pytest.mark.db
class TestTaskRepository(unittest.TestCase):

    def setUp(self):
        self.db = TestDatabase()
        self.session = self.db.session()
        self.repo = TaskRepository(self.session)

    def tearDown(self):
        self.session.close()
        self.db.close()

    def test_conditional_status_update(self):
        task_id = seed_task(self.db.session_factory)

        self.assertTrue(self.repo.update_task_status(task_id, "assigned", expected_status="unassigned"))
        self.assertFalse(self.repo.update_task_status(task_id, "assigned", expected_status="unassigned"))
        self.assertEqual(self.repo.find_task_by_id(task_id).status, "assigned")

    def test_update_refreshes_loaded_instance(self):
        task_id = seed_task(self.db.session_factory)
        task = self.repo.find_task_by_id(task_id)
        self.assertEqual(task.status, "unassigned")

        self.repo.update_task_status(task_id, "assigned")

        self.assertEqual(task.status, "assigned")

    def test_update_unknown_task(self):
        self.assertFalse(self.repo.update_task_status(str(uuid.uuid4()), "assigned"))
        self.assertFalse(self.repo.update_task_status("not-a-uuid", "assigned"))

    def test_find_by_ids_and_status(self):
        open_task = seed_task(self.db.session_factory)
        seed_task(self.db.session_factory, status="completed")
        done = seed_task(self.db.session_factory, status="completed")

        found = self.repo.find_tasks_by_ids_and_status([open_task, done, "junk"], "unassigned")

        self.assertEqual([str(t.id) for t in found], [open_task])
        self.assertEqual(self.repo.find_tasks_by_ids_and_status([], "unassigned"), [])

    def test_create_and_find_by_code(self):
        task = self.repo.create_task(dict(
            task_code="T900", name="浇花", level=1, urgency=2, duration=10
        ))
        self.session.commit()

        found = self.repo.find_task_by_code("T900")
        self.assertEqual(found.id, task.id)
        self.assertEqual(found.status, "unassigned")
        self.assertEqual(found.tags, [])

    def test_update_task(self):
        task_id = seed_task(self.db.session_factory, urgency=1)
        task = self.repo.find_task_by_id(task_id)

        self.repo.update_task(task, {"urgency": 3, "name": "拖地"})
        self.session.commit()

        with self.db.session() as other:
            reloaded = other.get(Task, uuid.UUID(task_id))
            self.assertEqual((reloaded.urgency, reloaded.name), (3, "拖地"))


@pytest.mark.db
class TestUserAndAssignmentRepositories(unittest.TestCase):

    def setUp(self):
        self.db = TestDatabase()
        self.session = self.db.session()
        self.users = UserRepository(self.session)
        self.assignments = AssignmentRepository(self.session)

    def tearDown(self):
        self.session.close()
        self.db.close()

    def test_environment_columns_default_to_fifty(self):
        user = self.users.create_user(dict(member_id="M900", name="新成员"))
        self.session.commit()

        reloaded = self.session.get(User, user.id)
        self.assertEqual(
            [reloaded.noise_tolerance, reloaded.space_requirement, reloaded.social_density,
             reloaded.urgency_acceptance, reloaded.multitask_capability],
            [50] * 5
        )
        self.assertEqual(reloaded.role, "user")

    def test_active_task_push_and_pull(self):
        user_id = seed_user(self.db.session_factory)
        task_id = seed_task(self.db.session_factory)

        assignment = self.assignments.save_assignment(user_id, task_id, 55.5, {"skill_score": 0})
        self.users.push_user_active_task(user_id, assignment.id)
        self.session.commit()

        self.assertEqual(self.users.get_active_assignment_ids(user_id), [assignment.id])
        self.assertEqual([a.id for a in self.users.find_user_by_id(user_id).active_tasks], [assignment.id])

        self.assertEqual(self.users.pull_user_active_task(user_id, assignment.id), 1)
        self.assertEqual(self.users.pull_user_active_task(user_id, assignment.id), 0)
        self.assertEqual(self.users.get_active_assignment_ids(user_id), [])

    def test_find_assignment_loads_task_and_user(self):
        user_id = seed_user(self.db.session_factory, name="小明")
        task_id = seed_task(self.db.session_factory, name="扫地")
        assignment = self.assignments.save_assignment(user_id, task_id, 80, {})
        self.session.commit()

        found = self.assignments.find_assignment_by_id(str(assignment.id))

        self.assertEqual(found.task.name, "扫地")
        self.assertEqual(found.user.name, "小明")
        self.assertEqual(found.match_score, 80.0)
        self.assertIsNone(self.assignments.find_assignment_by_id("junk"))

    def test_delete_assignments_by_task(self):
        user_id = seed_user(self.db.session_factory)
        task_id = seed_task(self.db.session_factory)
        other_task = seed_task(self.db.session_factory)
        first = self.assignments.save_assignment(user_id, task_id, 10, {})
        self.assignments.save_assignment(user_id, task_id, 20, {}, status="cancelled")
        kept = self.assignments.save_assignment(user_id, other_task, 30, {})
        self.users.push_user_active_task(user_id, first.id)
        self.users.push_user_active_task(user_id, kept.id)
        self.session.commit()

        deleted = self.assignments.delete_assignments_by_task(task_id)
        self.session.commit()

        self.assertEqual(deleted, 2)
        self.assertEqual(self.users.get_active_assignment_ids(user_id), [kept.id])
        self.assertEqual(len(self.assignments.find_assignments_by_task(other_task)), 1)
        self.assertIsNotNone(self.session.get(Task, uuid.UUID(task_id)))

    def test_delete_user_clears_active_list(self):
        user_id = seed_user(self.db.session_factory)
        task_id = seed_task(self.db.session_factory)
        assignment = self.assignments.save_assignment(user_id, task_id, 10, {})
        self.users.push_user_active_task(user_id, assignment.id)
        self.session.commit()

        self.users.delete_user(self.users.find_user_by_id(user_id))
        self.session.commit()

        self.assertIsNone(self.users.find_user_by_id(user_id))
        self.assertEqual(self.users.get_active_assignment_ids(user_id), [])
        self.assertIsNone(self.assignments.find_assignment_by_id(assignment.id))


if __name__ == '__main__':
    unittest.main()
