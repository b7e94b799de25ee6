"""Password and token hashing backed by bcrypt and SHA-256."""

import hashlib
import logging
import secrets

import bcrypt

from src.app.services.password_hasher import PasswordHasher

logger = logging.getLogger(__name__)


class BcryptPasswordHasher(PasswordHasher):
    """
    bcrypt for passwords (tunable cost factor), SHA-256 for random tokens.

    bcrypt only looks at the first 72 bytes of its input; passwords are
    validated well below that at the API layer.
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        # Hash compared against when the account does not exist
        self._dummy_hash = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(rounds))

    def hash_password(self, password: str) -> str:
        hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(self.rounds))
        return hashed.decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError as e:
            logger.error(f"Password verification error: {e}")
            return False

    def dummy_verify(self, password: str) -> None:
        bcrypt.checkpw(password.encode("utf-8"), self._dummy_hash)

    def hash_token(self, token: str) -> str:
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    def generate_token(self) -> str:
        return secrets.token_hex(20)
