import uuid

from sqlalchemy import Column, Text, Integer, TIMESTAMP, Index, Uuid
from sqlalchemy.orm import relationship

from .base import Base, JSONType, utcnow


class Task(Base):
    """
    Household task definition and its assignment status.
    """
    __tablename__ = 'task'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    task_code = Column(Text, nullable=False, unique=True)

    # Name doubles as the skill identity used by matching
    name = Column(Text, nullable=False)
    level = Column(Integer, nullable=False)  # 1-5
    time_slots = Column(JSONType, nullable=False, default=list)
    environment = Column(JSONType, nullable=False, default=list)
    tags = Column(JSONType, nullable=False, default=list)
    urgency = Column(Integer, nullable=False)  # 1-5
    duration = Column(Integer, nullable=False)  # minutes
    description = Column(Text, nullable=False, default='')

    status = Column(Text, nullable=False, default='unassigned')

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    assignments = relationship("Assignment", back_populates="task", passive_deletes=True)

    __table_args__ = (
        Index('idx_task_status', 'status'),
        Index('idx_task_code', 'task_code'),
    )
