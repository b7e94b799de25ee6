"""
Two-Factor Authentication Use Cases

TOTP setup, login step-up and removal.
"""

from .generate_two_factor_secret_use_case import GenerateTwoFactorSecretUseCase
from .verify_two_factor_use_case import VerifyTwoFactorUseCase
from .disable_two_factor_use_case import DisableTwoFactorUseCase
from .dtos import TwoFactorSetupResponse, TwoFactorStatusResponse

__all__ = [
    # Use Cases
    "GenerateTwoFactorSecretUseCase",
    "VerifyTwoFactorUseCase",
    "DisableTwoFactorUseCase",
    # DTOs
    "TwoFactorSetupResponse",
    "TwoFactorStatusResponse",
]
