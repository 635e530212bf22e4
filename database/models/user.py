import uuid

from sqlalchemy import Column, Text, Integer, TIMESTAMP, ForeignKey, Table, Index, Uuid
from sqlalchemy.orm import relationship

from .base import Base, JSONType, utcnow

DEFAULT_ENVIRONMENT_VALUE = 50

# Active task list: assignments a user currently holds in a non-terminal status
user_active_task = Table(
    'user_active_task',
    Base.metadata,
    Column('user_id', Uuid, ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    Column('assignment_id', Uuid, ForeignKey('assignment.id', ondelete='CASCADE'), primary_key=True),
)


class User(Base):
    """
    Household member with the profile used for task matching.
    """
    __tablename__ = 'users'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    member_id = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=False)
    email = Column(Text)
    password_hash = Column(Text)
    role = Column(Text, nullable=False, default='user')  # user|admin

    # Matching profile
    skills = Column(JSONType, nullable=False, default=list)
    preferences = Column(JSONType, nullable=False, default=list)
    time_slots = Column(JSONType, nullable=False, default=list)

    # Environment tolerances (0-100); absent values are stored as the neutral default
    noise_tolerance = Column(Integer, nullable=False, default=DEFAULT_ENVIRONMENT_VALUE)
    space_requirement = Column(Integer, nullable=False, default=DEFAULT_ENVIRONMENT_VALUE)
    social_density = Column(Integer, nullable=False, default=DEFAULT_ENVIRONMENT_VALUE)
    urgency_acceptance = Column(Integer, nullable=False, default=DEFAULT_ENVIRONMENT_VALUE)
    multitask_capability = Column(Integer, nullable=False, default=DEFAULT_ENVIRONMENT_VALUE)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    assignments = relationship("Assignment", back_populates="user", cascade="all, delete-orphan")
    active_tasks = relationship("Assignment", secondary=user_active_task, viewonly=True)

    __table_args__ = (
        Index('idx_users_member_id', 'member_id'),
    )
