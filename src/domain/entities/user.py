"""
User Entity

One account on the platform (student, lecturer or admin).
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow
from .enums import UserRole


class User(SQLModel, table=True):
    """
    User entity - the identity record behind every session.

    Business Rules:
    - Email and username are unique across all users
    - Password stored as bcrypt hash, never returned to clients
    - Confirmation/reset tokens are stored as SHA-256 hashes and cleared after use
    - reset_password_token_hash is set only together with reset_password_expires_at
    - password_changed_at invalidates every token issued before it
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    username: str = Field(unique=True, index=True, max_length=50)
    email: str = Field(unique=True, index=True, max_length=255)
    role: UserRole = Field(default=UserRole.student)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    # Email confirmation
    email_confirmed: bool = Field(default=False)
    confirm_email_token_hash: Optional[str] = Field(
        default=None, index=True, max_length=64
    )

    # Password reset
    reset_password_token_hash: Optional[str] = Field(
        default=None, index=True, max_length=64
    )
    reset_password_expires_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    # Two-factor authentication (TOTP)
    two_factor_secret: Optional[str] = Field(default=None, max_length=64)
    two_factor_enabled: bool = Field(default=False)
    two_factor_failed_attempts: int = Field(default=0)

    # Timestamps
    password_changed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_user_role", "role"),)
