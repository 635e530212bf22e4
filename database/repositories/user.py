import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select, insert, delete

from database.models import User, user_active_task
from database.repositories.base import BaseRepository, to_uuid

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository):
    def find_user_by_id(self, user_id: Any) -> Optional[User]:
        user_uuid = to_uuid(user_id)
        if user_uuid is None:
            return None
        return self.db.get(User, user_uuid)

    def find_user_by_member_id(self, member_id: str) -> Optional[User]:
        stmt = select(User).where(User.member_id == member_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def find_all_users(self) -> List[User]:
        stmt = select(User).order_by(User.created_at)
        return list(self.db.execute(stmt).scalars().all())

    def create_user(self, user_data: Dict[str, Any]) -> User:
        user = User(**user_data)
        self.db.add(user)
        self.db.flush()
        return user

    def update_profile(self, user: User, changes: Dict[str, Any]) -> User:
        for key, value in changes.items():
            setattr(user, key, value)
        self.db.flush()
        return user

    def delete_user(self, user: User) -> None:
        self.db.execute(
            delete(user_active_task).where(user_active_task.c.user_id == user.id)
        )
        self.db.delete(user)
        self.db.flush()

    def push_user_active_task(self, user_id: Any, assignment_id: Any) -> None:
        self.db.execute(
            insert(user_active_task).values(
                user_id=to_uuid(user_id),
                assignment_id=to_uuid(assignment_id)
            )
        )

    def pull_user_active_task(self, user_id: Any, assignment_id: Any) -> int:
        result = self.db.execute(
            delete(user_active_task).where(
                user_active_task.c.user_id == to_uuid(user_id),
                user_active_task.c.assignment_id == to_uuid(assignment_id)
            )
        )
        return result.rowcount

    def get_active_assignment_ids(self, user_id: Any) -> List[Any]:
        stmt = select(user_active_task.c.assignment_id).where(
            user_active_task.c.user_id == to_uuid(user_id)
        )
        return list(self.db.execute(stmt).scalars().all())
