#!/usr/bin/env python3
"""
Ranking Service - Orders candidate tasks for a user, or candidate users for a task.

Both directions score every candidate with the ScoringService and sort
descending by final score. Python's sort is stable, so candidates with equal
scores keep their input order.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional
import logging

from core.config_loader import RankingConfig
from core.scorer import MatchResult, ScoringService, TaskDefinition, UserProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankedTask:
    task: TaskDefinition
    result: MatchResult


@dataclass(frozen=True)
class RankedUser:
    user: UserProfile
    result: MatchResult


class RankingService:
    """Pure ranking on top of a ScoringService."""

    def __init__(
        self,
        scoring: Optional[ScoringService] = None,
        config: Optional[RankingConfig] = None
    ):
        self.scoring = scoring or ScoringService()
        self.config = config or RankingConfig()

    def rank_tasks_for_user(
        self,
        user: UserProfile,
        candidate_tasks: Iterable[TaskDefinition],
        limit: Optional[int] = None
    ) -> List[RankedTask]:
        """
        Score every candidate task for one user and return the best `limit`.

        Args:
            user: The user to recommend tasks to
            candidate_tasks: Tasks to choose from
            limit: Maximum entries returned (defaults to recommendation_limit)

        Returns:
            RankedTask entries sorted by final_score (highest first)
        """
        if limit is None:
            limit = self.config.recommendation_limit

        ranked = [RankedTask(task=task, result=self.scoring.score(user, task)) for task in candidate_tasks]
        ranked.sort(key=lambda r: r.result.final_score, reverse=True)

        logger.debug(f"Ranked {len(ranked)} tasks for user {user.name or user.user_id}, returning top {limit}")
        return ranked[:limit]

    def rank_users_for_task(
        self,
        task: TaskDefinition,
        candidate_users: Iterable[UserProfile]
    ) -> List[RankedUser]:
        """Score every candidate user for one task, highest final_score first."""
        ranked = [RankedUser(user=user, result=self.scoring.score(user, task)) for user in candidate_users]
        ranked.sort(key=lambda r: r.result.final_score, reverse=True)
        return ranked

    def best_user_for_task(
        self,
        task: TaskDefinition,
        candidate_users: Iterable[UserProfile]
    ) -> Optional[RankedUser]:
        ranked = self.rank_users_for_task(task, candidate_users)
        return ranked[0] if ranked else None
