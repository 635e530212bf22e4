"""
Assignment Module - Claims tasks for users and manages assignment lifecycles.

Public API:
- AssignmentOrchestrator: batch/manual assignment, recommendations, lifecycle
- TaskStatus, AssignmentStatus: lifecycle states
"""

from core.assignment.orchestrator import AssignmentOrchestrator
from core.assignment.state import AssignmentStatus, TaskStatus

__all__ = ['AssignmentOrchestrator', 'AssignmentStatus', 'TaskStatus']
