#!/usr/bin/env python3
"""
Scoring Module - Deterministic user/task match scoring.

Public API:
- ScoringService: computes a MatchResult for a (UserProfile, TaskDefinition) pair
- UserProfile, EnvironmentProfile, TaskDefinition, EnvironmentFlag: inputs
- MatchResult, ComponentScores: outputs

Modules:
- models.py: Data structures
- components.py: Skill, preference, time and level formulas
- environment.py: Environment compatibility
- service.py: ScoringService (weighted composite)
"""

from core.scorer.models import (
    ComponentScores,
    EnvironmentFlag,
    EnvironmentProfile,
    MatchResult,
    TaskDefinition,
    UserProfile,
)
from core.scorer.service import ScoringService

__all__ = [
    'ScoringService',
    'ComponentScores',
    'EnvironmentFlag',
    'EnvironmentProfile',
    'MatchResult',
    'TaskDefinition',
    'UserProfile',
]
