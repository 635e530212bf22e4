#!/usr/bin/env python3
"""
Environment Compatibility - Average of five per-attribute compatibilities.

A task's environment flags decide how much each of the user's tolerances
matters. Absent flags mean the attribute imposes nothing (100).
"""

from typing import Dict, Tuple
import logging

from core.scorer.models import EnvironmentFlag, TaskDefinition, UserProfile

logger = logging.getLogger(__name__)

MEDIUM_DEMAND_MULTIPLIER = 1.5
HIGH_URGENCY_LEVEL = 4


def _tiered(flags, tolerance: int, high: EnvironmentFlag, medium: EnvironmentFlag) -> float:
    if high in flags:
        return tolerance
    if medium in flags:
        return min(100, tolerance * MEDIUM_DEMAND_MULTIPLIER)
    return 100


def noise_compatibility(user: UserProfile, task: TaskDefinition) -> float:
    # Low noise and quiet environments suit everyone, same as no flag
    return _tiered(
        task.environment,
        user.environment.noise_tolerance,
        EnvironmentFlag.HIGH_NOISE,
        EnvironmentFlag.MEDIUM_NOISE,
    )


def space_compatibility(user: UserProfile, task: TaskDefinition) -> float:
    return _tiered(
        task.environment,
        user.environment.space_requirement,
        EnvironmentFlag.HIGH_SPACE,
        EnvironmentFlag.MEDIUM_SPACE,
    )


def social_compatibility(user: UserProfile, task: TaskDefinition) -> float:
    return _tiered(
        task.environment,
        user.environment.social_density,
        EnvironmentFlag.HIGH_SOCIAL,
        EnvironmentFlag.MEDIUM_SOCIAL,
    )


def urgency_compatibility(user: UserProfile, task: TaskDefinition) -> float:
    if EnvironmentFlag.HIGH_URGENCY in task.environment or task.urgency >= HIGH_URGENCY_LEVEL:
        return user.environment.urgency_acceptance
    return 100


def multitask_compatibility(user: UserProfile, task: TaskDefinition) -> float:
    if EnvironmentFlag.MULTITASK in task.environment:
        return user.environment.multitask_capability
    return 100


def calculate_environment_score(
    user: UserProfile,
    task: TaskDefinition
) -> Tuple[float, Dict[str, float]]:
    """
    Calculate environment compatibility.

    The composite uses this unrounded average; only the reported component
    is rounded to 2 decimals.

    Returns: (environment_score, per-attribute details)
    """
    details = {
        'noise': noise_compatibility(user, task),
        'space': space_compatibility(user, task),
        'social': social_compatibility(user, task),
        'urgency': urgency_compatibility(user, task),
        'multitask': multitask_compatibility(user, task),
    }
    return sum(details.values()) / len(details), details
