from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

TWO_FACTOR_CHALLENGE = "2fa"


@dataclass(frozen=True)
class TokenClaims:
    """Verified content of a session or challenge token"""

    subject_id: UUID
    issued_at: int  # epoch seconds
    session_id: Optional[UUID] = None
    purpose: Optional[str] = None


class TokenCodec(ABC):
    """Signs and verifies compact, time-bounded bearer tokens"""

    @abstractmethod
    def issue(
        self,
        subject_id: UUID,
        issued_at: Optional[datetime] = None,
        session_id: Optional[UUID] = None,
    ) -> str:
        pass

    @abstractmethod
    def verify(self, token: str) -> Optional[TokenClaims]:
        """Decoded session claims, or None if the signature, expiry or shape is invalid"""
        pass

    @abstractmethod
    def issue_challenge(self, subject_id: UUID, purpose: str) -> str:
        """Short-lived token proving one step of a multi-step flow was passed"""
        pass

    @abstractmethod
    def verify_challenge(self, token: str, purpose: str) -> Optional[TokenClaims]:
        """Decoded challenge claims, or None unless valid and issued for `purpose`"""
        pass
