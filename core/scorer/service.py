#!/usr/bin/env python3
"""
Scoring Service - Weighted multi-factor match score between a user and a task.

final = w_skill * skill + w_pref * preference + w_time * time
        + w_env * environment + w_level * level

Pure and stateless apart from its weights: safe to share between threads.
"""

from typing import Optional
import logging

from core.config_loader import ScorerConfig
from core.scorer import components
from core.scorer.environment import calculate_environment_score
from core.scorer.models import ComponentScores, MatchResult, TaskDefinition, UserProfile

logger = logging.getLogger(__name__)


class ScoringService:
    """
    Computes MatchResult values for (user, task) pairs.

    The time component is not capped, so a task slot matched by several
    identical user slots can push the final score above 100.
    """

    def __init__(self, config: Optional[ScorerConfig] = None):
        self.config = config or ScorerConfig()

    @property
    def weights(self):
        return self.config.weights

    def score(self, user: UserProfile, task: TaskDefinition) -> MatchResult:
        skill_score = components.calculate_skill_score(user, task)
        preference_score = components.calculate_preference_score(user, task)
        time_score = components.calculate_time_score(user, task)
        environment_score, environment_details = calculate_environment_score(user, task)
        level_score = components.calculate_level_score(user, task)

        w = self.weights
        final_score = (
            skill_score * w.skill +
            preference_score * w.preference +
            time_score * w.time +
            environment_score * w.environment +
            level_score * w.level
        )

        logger.debug(
            f"Task {task.name!r} / user {user.name or user.user_id}: "
            f"skill={skill_score}, pref={preference_score}, time={time_score:.2f}, "
            f"env={environment_score:.2f} {environment_details}, level={level_score}, "
            f"final={final_score:.2f}"
        )

        return MatchResult(
            final_score=components.round_score(final_score),
            component_scores=ComponentScores(
                skill_score=skill_score,
                preference_score=preference_score,
                time_score=time_score,
                environment_score=components.round_score(environment_score),
                level_score=level_score,
            )
        )
