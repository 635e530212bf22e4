"""Ranking of tasks for users and users for tasks."""

from core.ranking.service import RankedTask, RankedUser, RankingService

__all__ = ['RankingService', 'RankedTask', 'RankedUser']
