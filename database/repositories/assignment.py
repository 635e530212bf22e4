import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select, delete
from sqlalchemy.orm import joinedload

from database.models import Assignment, user_active_task
from database.repositories.base import BaseRepository, to_uuid

logger = logging.getLogger(__name__)


class AssignmentRepository(BaseRepository):
    def save_assignment(
        self,
        user_id: Any,
        task_id: Any,
        match_score: float,
        component_scores: Dict[str, float],
        status: str = 'assigned'
    ) -> Assignment:
        assignment = Assignment(
            user_id=to_uuid(user_id),
            task_id=to_uuid(task_id),
            match_score=match_score,
            component_scores=component_scores,
            status=status
        )
        self.db.add(assignment)
        self.db.flush()  # Generate ID
        return assignment

    def find_assignment_by_id(self, assignment_id: Any) -> Optional[Assignment]:
        assignment_uuid = to_uuid(assignment_id)
        if assignment_uuid is None:
            return None
        stmt = (
            select(Assignment)
            .options(joinedload(Assignment.task), joinedload(Assignment.user))
            .where(Assignment.id == assignment_uuid)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def find_assignments_for_user(self, user_id: Any) -> List[Assignment]:
        stmt = (
            select(Assignment)
            .options(joinedload(Assignment.task), joinedload(Assignment.user))
            .where(Assignment.user_id == to_uuid(user_id))
            .order_by(Assignment.created_at.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def find_all_assignments(self) -> List[Assignment]:
        stmt = (
            select(Assignment)
            .options(joinedload(Assignment.task), joinedload(Assignment.user))
            .order_by(Assignment.created_at.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def find_assignments_by_task(self, task_id: Any) -> List[Assignment]:
        stmt = select(Assignment).where(Assignment.task_id == to_uuid(task_id))
        return list(self.db.execute(stmt).scalars().all())

    def delete_assignment(self, assignment: Assignment) -> None:
        self.db.execute(
            delete(user_active_task).where(user_active_task.c.assignment_id == assignment.id)
        )
        self.db.delete(assignment)
        self.db.flush()

    def delete_assignments_by_task(self, task_id: Any) -> int:
        """Delete every assignment of a task, including active-list references."""
        task_uuid = to_uuid(task_id)
        assignment_ids = select(Assignment.id).where(Assignment.task_id == task_uuid)

        self.db.execute(
            delete(user_active_task)
            .where(user_active_task.c.assignment_id.in_(assignment_ids))
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(
            delete(Assignment)
            .where(Assignment.task_id == task_uuid)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount:
            logger.info(f"Deleted {result.rowcount} assignments for task {task_id}")
        return result.rowcount
