"""
Authentication Use Cases

All authentication-related business logic.
"""

from .register_use_case import RegisterUseCase
from .login_use_case import LoginUseCase
from .confirm_email_use_case import ConfirmEmailUseCase
from .resend_confirmation_use_case import ResendConfirmationUseCase
from .forgot_password_use_case import ForgotPasswordUseCase
from .reset_password_use_case import ResetPasswordUseCase
from .update_password_use_case import UpdatePasswordUseCase
from .update_details_use_case import UpdateDetailsUseCase
from .session_issuer import open_session
from .dtos import (
    AuthResponse,
    ClientInfo,
    MessageResponse,
    RegisterCommand,
    RegisterResponse,
    TwoFactorRequiredResponse,
    UserInfo,
    UserResponse,
)

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "LoginUseCase",
    "ConfirmEmailUseCase",
    "ResendConfirmationUseCase",
    "ForgotPasswordUseCase",
    "ResetPasswordUseCase",
    "UpdatePasswordUseCase",
    "UpdateDetailsUseCase",
    "open_session",
    # DTOs - Commands
    "RegisterCommand",
    "ClientInfo",
    # DTOs - Responses
    "AuthResponse",
    "RegisterResponse",
    "TwoFactorRequiredResponse",
    "MessageResponse",
    "UserResponse",
    # DTOs - Nested Models
    "UserInfo",
]
