import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Numeric, Index, Uuid
from sqlalchemy.orm import relationship

from .base import Base, JSONType, utcnow


class Assignment(Base):
    """
    Links one user to one task with the match score it was assigned at.

    Tracks:
    - Composite and component scores at assignment time
    - Lifecycle status with per-transition timestamps
    - Free-form notes from the assignee and the admin
    """
    __tablename__ = 'assignment'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    task_id = Column(Uuid, ForeignKey('task.id', ondelete='CASCADE'), nullable=False)

    match_score = Column(Numeric(6, 2, asdecimal=False), nullable=False)
    component_scores = Column(JSONType, nullable=False, default=dict)

    status = Column(Text, nullable=False, default='assigned')
    user_note = Column(Text, nullable=False, default='')
    admin_note = Column(Text, nullable=False, default='')

    assigned_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    started_at = Column(TIMESTAMP(timezone=True))
    completed_at = Column(TIMESTAMP(timezone=True))
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="assignments")
    task = relationship("Task", back_populates="assignments")

    __table_args__ = (
        Index('idx_assignment_user', 'user_id'),
        Index('idx_assignment_task', 'task_id'),
        Index('idx_assignment_status', 'status'),
        Index('idx_assignment_created', 'created_at'),
    )
