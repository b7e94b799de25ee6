from pydantic import BaseModel


class TwoFactorSetupResponse(BaseModel):
    """Secret and provisioning data for an authenticator app (shown once)"""

    success: bool = True
    secret: str
    otpauth_url: str
    qr_code: str  # base64 PNG


class TwoFactorStatusResponse(BaseModel):
    success: bool = True
    two_factor_enabled: bool
