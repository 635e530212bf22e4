#!/usr/bin/env python3
"""
Component Scores - Skill, preference, time and level sub-scores.

Each function returns a non-negative score, nominally on a 0-100 scale. The
formulas are fixed:
- Skill: binary, 100 when the task name is one of the user's skills.
- Preference: 50 points per task tag the user prefers, capped at 100.
- Time: an "all day" slot scores 100; otherwise every task slot contributes
  100/N per matching user slot. Not capped, duplicates count.
- Level: 100 for skilled users, else 100 - 20 per level above 2, floored at 0.
  Level-1 tasks score 120 for unskilled users.
"""

from decimal import Decimal, ROUND_HALF_UP

from core.scorer.models import ALL_DAY_SLOT, TaskDefinition, UserProfile

POINTS_PER_PREFERRED_TAG = 50
MAX_COMPONENT_SCORE = 100

BASELINE_LEVEL = 2
POINTS_PER_LEVEL = 20

_CENTS = Decimal("0.01")


def round_score(value: float) -> float:
    """Round to 2 decimals, half away from zero on the exact binary value."""
    return float(Decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP))


def is_skilled(user: UserProfile, task: TaskDefinition) -> bool:
    return task.name in user.skills


def calculate_skill_score(user: UserProfile, task: TaskDefinition) -> int:
    return 100 if is_skilled(user, task) else 0


def calculate_preference_score(user: UserProfile, task: TaskDefinition) -> int:
    matched = sum(1 for tag in task.tags if tag in user.preferences)
    return min(POINTS_PER_PREFERRED_TAG * matched, MAX_COMPONENT_SCORE)


def calculate_time_score(user: UserProfile, task: TaskDefinition) -> float:
    score = 0
    for task_slot in task.time_slots:
        if task_slot == ALL_DAY_SLOT:
            return 100
        for user_slot in user.time_slots:
            if task_slot == user_slot:
                score += 100 / len(task.time_slots)
    return score


def calculate_level_score(user: UserProfile, task: TaskDefinition) -> int:
    if is_skilled(user, task):
        return 100
    return max(0, 100 - (task.level - BASELINE_LEVEL) * POINTS_PER_LEVEL)
