#!/usr/bin/env python3
"""
Test suite for RankingService.
"""

import unittest
from unittest.mock import Mock

from core.config_loader import RankingConfig
from core.ranking import RankingService
from core.scorer import ComponentScores, MatchResult
from tests.fixtures.household_fixtures import make_task_definition, make_user_profile


def _result(score: float) -> MatchResult:
    return MatchResult(final_score=score, component_scores=ComponentScores(0, 0, 0, 0, 0))


class TestRankTasksForUser(unittest.TestCase):

    def setUp(self):
        self.user = make_user_profile(skills=["洗碗", "扫地"], preferences=["厨房"], time_slots=["9:00-11:00"])
        self.ranking = RankingService()

    def test_sorted_descending_and_limited(self):
        tasks = [make_task_definition(name=f"task-{i}", level=(i % 5) + 1) for i in range(10)]
        tasks.append(make_task_definition(name="洗碗", tags=["厨房"], time_slots=["9:00-11:00"]))

        ranked = self.ranking.rank_tasks_for_user(self.user, tasks)

        self.assertEqual(len(ranked), 6)
        scores = [r.result.final_score for r in ranked]
        self.assertEqual(scores, sorted(scores, reverse=True))
        self.assertEqual(ranked[0].task.name, "洗碗")

    def test_length_is_min_of_limit_and_candidates(self):
        tasks = [make_task_definition(name=f"task-{i}") for i in range(3)]
        self.assertEqual(len(self.ranking.rank_tasks_for_user(self.user, tasks, limit=6)), 3)
        self.assertEqual(len(self.ranking.rank_tasks_for_user(self.user, tasks, limit=2)), 2)

    def test_empty_candidates(self):
        self.assertEqual(self.ranking.rank_tasks_for_user(self.user, []), [])

    def test_default_limit_from_config(self):
        ranking = RankingService(config=RankingConfig(recommendation_limit=2))
        tasks = [make_task_definition(name=f"task-{i}") for i in range(5)]
        self.assertEqual(len(ranking.rank_tasks_for_user(self.user, tasks)), 2)

    def test_ties_keep_input_order(self):
        scoring = Mock()
        scoring.score.side_effect = [_result(50), _result(70), _result(50), _result(70)]
        ranking = RankingService(scoring=scoring)
        tasks = [make_task_definition(name=n) for n in ("a", "b", "c", "d")]

        ranked = ranking.rank_tasks_for_user(self.user, tasks, limit=4)

        self.assertEqual([r.task.name for r in ranked], ["b", "d", "a", "c"])


class TestRankUsersForTask(unittest.TestCase):

    def setUp(self):
        self.ranking = RankingService()
        self.task = make_task_definition(name="洗碗", tags=["厨房"], time_slots=["9:00-11:00"], level=3)

    def test_best_user_first(self):
        novice = make_user_profile(name="novice")
        expert = make_user_profile(name="expert", skills=["洗碗"], preferences=["厨房"], time_slots=["9:00-11:00"])
        partial = make_user_profile(name="partial", preferences=["厨房"])

        ranked = self.ranking.rank_users_for_task(self.task, [novice, partial, expert])

        self.assertEqual([r.user.name for r in ranked], ["expert", "partial", "novice"])
        self.assertEqual(len(ranked), 3)

    def test_best_user_for_task(self):
        expert = make_user_profile(name="expert", skills=["洗碗"])
        best = self.ranking.best_user_for_task(self.task, [make_user_profile(), expert])
        self.assertEqual(best.user.name, "expert")

    def test_best_user_for_task_without_users(self):
        self.assertIsNone(self.ranking.best_user_for_task(self.task, []))
        self.assertEqual(self.ranking.rank_users_for_task(self.task, []), [])


if __name__ == '__main__':
    unittest.main()
