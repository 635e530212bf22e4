#!/usr/bin/env python3
"""
Scoring Models - Immutable inputs and outputs of the scoring engine.

UserProfile and TaskDefinition are snapshots taken from persistence (or a
request body) before scoring; MatchResult is recomputed on demand and never
cached.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

# Neutral value used for any environment attribute a profile does not declare
DEFAULT_ENVIRONMENT_VALUE = 50

ALL_DAY_SLOT = "全天"


class EnvironmentFlag(str, Enum):
    """Environment flags a task may declare. Values are the wire strings."""
    HIGH_NOISE = "高噪音耐受"
    MEDIUM_NOISE = "中等噪音"
    LOW_NOISE = "低噪音"
    QUIET = "安静"
    HIGH_SPACE = "高空间需求"
    MEDIUM_SPACE = "中等空间需求"
    HIGH_SOCIAL = "高社交密度"
    MEDIUM_SOCIAL = "中等社交密度"
    LOW_SOCIAL = "低社交密度"
    HIGH_URGENCY = "紧急程度高"
    MULTITASK = "可多任务处理"

    @classmethod
    def parse_many(cls, values: Iterable[str]) -> FrozenSet["EnvironmentFlag"]:
        flags = set()
        for value in values or ():
            try:
                flags.add(cls(value))
            except ValueError:
                logger.debug(f"Ignoring unknown environment flag: {value!r}")
        return frozenset(flags)


# attribute name -> wire key
ENVIRONMENT_WIRE_KEYS: Dict[str, str] = {
    'noise_tolerance': "噪音耐受度",
    'space_requirement': "空间需求",
    'social_density': "社交密度",
    'urgency_acceptance': "紧急程度接受度",
    'multitask_capability': "多任务处理",
}


@dataclass(frozen=True)
class EnvironmentProfile:
    """A user's five environmental tolerances, each in [0, 100]."""
    noise_tolerance: int = DEFAULT_ENVIRONMENT_VALUE
    space_requirement: int = DEFAULT_ENVIRONMENT_VALUE
    social_density: int = DEFAULT_ENVIRONMENT_VALUE
    urgency_acceptance: int = DEFAULT_ENVIRONMENT_VALUE
    multitask_capability: int = DEFAULT_ENVIRONMENT_VALUE

    def __post_init__(self):
        for name in ENVIRONMENT_WIRE_KEYS:
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} must be within [0, 100], got {value}")

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "EnvironmentProfile":
        """Build from either attribute names or wire keys; absent keys default to 50."""
        data = data or {}
        values = {}
        for name, wire_key in ENVIRONMENT_WIRE_KEYS.items():
            value = data.get(name, data.get(wire_key))
            values[name] = DEFAULT_ENVIRONMENT_VALUE if value is None else int(value)
        return cls(**values)

    def to_wire(self) -> Dict[str, int]:
        return {wire_key: getattr(self, name) for name, wire_key in ENVIRONMENT_WIRE_KEYS.items()}


@dataclass(frozen=True)
class UserProfile:
    """
    Scoring view of a user.

    Sequences keep their duplicates: the time score counts every matching
    occurrence of a slot.
    """
    skills: Tuple[str, ...] = ()
    preferences: Tuple[str, ...] = ()
    time_slots: Tuple[str, ...] = ()
    environment: EnvironmentProfile = field(default_factory=EnvironmentProfile)
    user_id: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class TaskDefinition:
    """Scoring view of a task. `name` is the identity used for skill lookup."""
    name: str
    tags: Tuple[str, ...] = ()
    time_slots: Tuple[str, ...] = ()
    environment: FrozenSet[EnvironmentFlag] = frozenset()
    urgency: int = 1
    level: int = 1
    task_id: Optional[str] = None


@dataclass(frozen=True)
class ComponentScores:
    skill_score: float
    preference_score: float
    time_score: float
    environment_score: float
    level_score: float

    def to_dict(self) -> Dict[str, float]:
        return {
            'skill_score': self.skill_score,
            'preference_score': self.preference_score,
            'time_score': self.time_score,
            'environment_score': self.environment_score,
            'level_score': self.level_score,
        }


@dataclass(frozen=True)
class MatchResult:
    """Composite match score plus its component breakdown."""
    final_score: float
    component_scores: ComponentScores

    def to_dict(self) -> Dict[str, Any]:
        return {
            'final_score': self.final_score,
            'component_scores': self.component_scores.to_dict(),
        }
