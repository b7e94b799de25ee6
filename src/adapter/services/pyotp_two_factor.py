"""TOTP two-factor provider using pyotp and qrcode."""

import base64
from io import BytesIO

import pyotp
import qrcode

from src.app.services.two_factor import TwoFactorProvider


class PyOtpTwoFactorProvider(TwoFactorProvider):
    def __init__(self, issuer_name: str):
        self.issuer_name = issuer_name

    def generate_secret(self) -> str:
        """Generate a new TOTP secret (base32 encoded, 32 characters)."""
        return pyotp.random_base32()

    def provisioning_uri(self, secret: str, account_name: str) -> str:
        """Get otpauth:// URI for QR code scanning."""
        return pyotp.TOTP(secret).provisioning_uri(
            name=account_name, issuer_name=self.issuer_name
        )

    def qr_code_base64(self, uri: str) -> str:
        """Generate QR code as base64 PNG for embedding in responses."""
        image = qrcode.make(uri)
        buffer = BytesIO()
        image.save(buffer, format="PNG")
        return base64.b64encode(buffer.getvalue()).decode()

    def verify(self, secret: str, code: str) -> bool:
        """Verify TOTP code. Allows 1 window of drift (30 seconds each side)."""
        return pyotp.TOTP(secret).verify(code, valid_window=1)
