from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt

from src.app.services.token_codec import TokenClaims, TokenCodec
from src.domain.base import to_epoch_seconds, utcnow


class JoseTokenCodec(TokenCodec):
    """
    HS256 JWT session and challenge tokens.

    Session payload: sub (user id), sid (session id), iat, exp.
    Challenge payload: sub, purpose, iat, exp; never accepted as a session.
    Rotating the secret invalidates every previously issued token.
    """

    algorithm = "HS256"

    def __init__(
        self,
        secret: str,
        expires_in: timedelta,
        challenge_expires_in: timedelta = timedelta(minutes=5),
    ):
        self.secret = secret
        self.expires_in = expires_in
        self.challenge_expires_in = challenge_expires_in

    def _encode(self, payload: dict, issued_at: datetime, expires_in: timedelta) -> str:
        iat = to_epoch_seconds(issued_at)
        payload.update(iat=iat, exp=iat + int(expires_in.total_seconds()))
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def _decode(self, token: str) -> Optional[dict]:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError:
            return None

    def issue(
        self,
        subject_id: UUID,
        issued_at: Optional[datetime] = None,
        session_id: Optional[UUID] = None,
    ) -> str:
        """
        Generate a signed session token

        Args:
            subject_id: User UUID
            issued_at: Issue time (defaults to now, naive UTC)
            session_id: Session record the token belongs to

        Returns:
            JWT token string
        """
        payload = {"sub": str(subject_id)}
        if session_id is not None:
            payload["sid"] = str(session_id)
        return self._encode(payload, issued_at or utcnow(), self.expires_in)

    def verify(self, token: str) -> Optional[TokenClaims]:
        """
        Verify and decode a session token

        Returns:
            TokenClaims or None if invalid, expired, malformed or a challenge
        """
        payload = self._decode(token)
        if payload is None or "purpose" in payload:
            return None

        try:
            subject_id = UUID(payload["sub"])
            issued_at = int(payload["iat"])
            session_id = UUID(payload["sid"]) if payload.get("sid") else None
        except (KeyError, TypeError, ValueError):
            return None

        return TokenClaims(
            subject_id=subject_id, issued_at=issued_at, session_id=session_id
        )

    def issue_challenge(self, subject_id: UUID, purpose: str) -> str:
        payload = {"sub": str(subject_id), "purpose": purpose}
        return self._encode(payload, utcnow(), self.challenge_expires_in)

    def verify_challenge(self, token: str, purpose: str) -> Optional[TokenClaims]:
        payload = self._decode(token)
        if payload is None or payload.get("purpose") != purpose:
            return None

        try:
            subject_id = UUID(payload["sub"])
            issued_at = int(payload["iat"])
        except (KeyError, TypeError, ValueError):
            return None

        return TokenClaims(subject_id=subject_id, issued_at=issued_at, purpose=purpose)
