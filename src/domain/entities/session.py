"""
Session Entity

One logged-in device. Every issued access token carries the id of its session.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class Session(SQLModel, table=True):
    """
    Session entity - bookkeeping for an active login.

    Business Rules:
    - Created on login, registration, 2FA step-up, password change and reset
    - Never mutated after creation
    - Deleted individually (logout / revoke) or in bulk (revoke all, password change)
    - A token whose session row is gone is rejected by the authorization guard
    """

    __tablename__ = "sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    user_agent: Optional[str] = Field(default=None, max_length=255)
    ip_address: Optional[str] = Field(default=None, max_length=45)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_session_created_at", "created_at"),)
