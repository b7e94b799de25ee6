from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from src.domain.entities import User, UserRole


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def list(self, role: Optional[UserRole] = None) -> List[User]:
        """List users, optionally filtered by role"""
        pass

    @abstractmethod
    async def search(self, query: str, role: Optional[UserRole] = None) -> List[User]:
        """Case-insensitive substring match on username or email"""
        pass

    @abstractmethod
    async def count_by_role(self) -> Dict[UserRole, int]:
        """Number of users per role; roles without users are absent"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user"""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user"""
        pass

    @abstractmethod
    async def delete(self, user: User) -> None:
        """Delete a user"""
        pass

    @abstractmethod
    async def get_by_confirmation_token_hash(self, token_hash: str) -> Optional[User]:
        """Get an unconfirmed user by email confirmation token hash"""
        pass

    @abstractmethod
    async def get_by_reset_token_hash(
        self, token_hash: str, now: datetime
    ) -> Optional[User]:
        """Get user by password reset token hash whose reset window is still open"""
        pass

    @abstractmethod
    async def consume_confirmation_token(self, user_id: UUID, token_hash: str) -> bool:
        """
        Atomically mark the email confirmed and clear the confirmation hash.

        Returns False when the hash was already consumed by someone else.
        """
        pass

    @abstractmethod
    async def consume_reset_token(
        self, user_id: UUID, token_hash: str, now: datetime
    ) -> bool:
        """
        Atomically clear the reset token fields if they still match and are unexpired.

        Returns False when the token was already used or has expired.
        """
        pass

    @abstractmethod
    async def claim_two_factor_attempt(self, user_id: UUID, max_attempts: int) -> bool:
        """
        Atomically count one two-factor login attempt.

        Returns False once max_attempts have been used since the last password check.
        """
        pass
