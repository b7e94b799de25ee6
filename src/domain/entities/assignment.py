"""
Assignment Entity

Coursework created by a lecturer. Used as the owned resource guarded by
ownership checks.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow
from .enums import AssignmentStatus


class Assignment(SQLModel, table=True):
    """
    Assignment entity.

    Business Rules:
    - created_by is the owner; only the owner or an admin may modify it
    - Deleted together with its owner's account
    """

    __tablename__ = "assignments"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str = Field(max_length=100)
    description: str = Field(max_length=1000)
    total_points: int = Field(default=100, ge=0)
    status: AssignmentStatus = Field(default=AssignmentStatus.draft)
    due_date: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    created_by: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_assignment_status", "status"),)
