from abc import ABC, abstractmethod


class PasswordHasher(ABC):
    """
    One-way hashing of secrets.

    Passwords get a salted, slow hash; random tokens (reset, confirmation)
    get a fast unsalted digest since they are already high-entropy and must
    be looked up by their hash.
    """

    @abstractmethod
    def hash_password(self, password: str) -> str:
        pass

    @abstractmethod
    def verify_password(self, password: str, password_hash: str) -> bool:
        pass

    @abstractmethod
    def dummy_verify(self, password: str) -> None:
        """Burn the same time as a real verification (unknown-account path)."""
        pass

    @abstractmethod
    def hash_token(self, token: str) -> str:
        pass

    @abstractmethod
    def generate_token(self) -> str:
        """Fresh random token to be shown to the user once."""
        pass
