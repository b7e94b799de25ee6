from abc import ABC, abstractmethod


class TwoFactorProvider(ABC):
    """Time-based one-time password (TOTP) primitives"""

    @abstractmethod
    def generate_secret(self) -> str:
        pass

    @abstractmethod
    def provisioning_uri(self, secret: str, account_name: str) -> str:
        pass

    @abstractmethod
    def qr_code_base64(self, uri: str) -> str:
        pass

    @abstractmethod
    def verify(self, secret: str, code: str) -> bool:
        """Check a code allowing one step of clock drift on each side"""
        pass
