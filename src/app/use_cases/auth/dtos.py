"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Provides type safety and clear contracts between layers.
"""

from dataclasses import dataclass
from typing import Literal, Optional

from pydantic import BaseModel

from src.domain.entities import User, UserRole


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(BaseModel):
    """
    Register command - represents validated registration intent

    Created by API layer after request validation passes.
    """

    username: str
    email: str
    password: str
    role: UserRole = UserRole.student


@dataclass(frozen=True)
class ClientInfo:
    """Device metadata recorded on the session created at login"""

    user_agent: Optional[str] = None
    ip_address: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class UserInfo(BaseModel):
    """Public projection of a user - never carries hashes or secrets"""

    id: str
    username: str
    email: str
    role: str

    @classmethod
    def from_user(cls, user: User) -> "UserInfo":
        return cls(
            id=str(user.id),
            username=user.username,
            email=user.email,
            role=UserRole(user.role).value,
        )


class AuthResponse(BaseModel):
    """Successful authentication: a session token plus the public user"""

    success: bool = True
    token: str
    user: UserInfo


class RegisterResponse(AuthResponse):
    """Response for registration use case"""

    confirmation_email_sent: bool


class TwoFactorRequiredResponse(BaseModel):
    """Credentials were correct but a TOTP code is still needed; no token issued"""

    success: bool = True
    two_factor_required: Literal[True] = True
    user_id: str
    challenge_token: str


class MessageResponse(BaseModel):
    """Generic success response with a human-readable message"""

    success: bool = True
    message: str


class UserResponse(BaseModel):
    """Response wrapping the public user projection"""

    success: bool = True
    user: UserInfo
