import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select, update, delete

from database.models import Task
from database.models.base import utcnow
from database.repositories.base import BaseRepository, to_uuid

logger = logging.getLogger(__name__)


class TaskRepository(BaseRepository):
    def find_task_by_id(self, task_id: Any) -> Optional[Task]:
        task_uuid = to_uuid(task_id)
        if task_uuid is None:
            return None
        return self.db.get(Task, task_uuid)

    def find_task_by_code(self, task_code: str) -> Optional[Task]:
        stmt = select(Task).where(Task.task_code == task_code)
        return self.db.execute(stmt).scalar_one_or_none()

    def find_tasks_by_ids_and_status(self, task_ids: Iterable[Any], status: str) -> List[Task]:
        ids = [u for u in (to_uuid(t) for t in task_ids) if u is not None]
        if not ids:
            return []
        stmt = (
            select(Task)
            .where(Task.id.in_(ids), Task.status == status)
            .order_by(Task.created_at)
        )
        return list(self.db.execute(stmt).scalars().all())

    def find_tasks_by_status(self, status: str) -> List[Task]:
        stmt = select(Task).where(Task.status == status).order_by(Task.created_at)
        return list(self.db.execute(stmt).scalars().all())

    def find_all_tasks(self) -> List[Task]:
        stmt = select(Task).order_by(Task.created_at.desc())
        return list(self.db.execute(stmt).scalars().all())

    def create_task(self, task_data: Dict[str, Any]) -> Task:
        task = Task(**task_data)
        self.db.add(task)
        self.db.flush()  # Generate ID
        return task

    def update_task_status(
        self,
        task_id: Any,
        new_status: str,
        expected_status: Optional[str] = None
    ) -> bool:
        """
        Set a task's status, optionally only if it is still `expected_status`.

        The conditional form is a single UPDATE ... WHERE status = expected,
        so two writers racing on the same task cannot both succeed.

        Returns:
            True if a row was updated
        """
        task_uuid = to_uuid(task_id)
        if task_uuid is None:
            return False

        stmt = update(Task).where(Task.id == task_uuid)
        if expected_status is not None:
            stmt = stmt.where(Task.status == expected_status)
        stmt = stmt.values(status=new_status, updated_at=utcnow()).execution_options(
            synchronize_session=False
        )

        result = self.db.execute(stmt)
        updated = result.rowcount == 1

        if updated:
            # Keep any already-loaded instance in step with the row
            task = self.db.identity_map.get(self.db.identity_key(Task, task_uuid))
            if task is not None:
                self.db.expire(task, ['status', 'updated_at'])
        return updated

    def update_task(self, task: Task, changes: Dict[str, Any]) -> Task:
        for key, value in changes.items():
            setattr(task, key, value)
        self.db.flush()
        return task

    def delete_task(self, task: Task) -> None:
        self.db.delete(task)
        self.db.flush()
