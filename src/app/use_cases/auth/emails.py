"""Email bodies for confirmation and password reset messages."""

from typing import Tuple


def confirmation_email(frontend_url: str, token: str) -> Tuple[str, str]:
    confirm_url = f"{frontend_url}/confirm-email?token={token}"
    html = f"""
    <h2>Confirm Your Email</h2>
    <p>Click the link below to confirm your email address:</p>
    <p><a href="{confirm_url}">{confirm_url}</a></p>
    <p>If you didn't create an account, you can ignore this email.</p>
    """
    return "Confirm your email", html


def password_reset_email(frontend_url: str, token: str, ttl_minutes: int) -> Tuple[str, str]:
    reset_url = f"{frontend_url}/reset-password?token={token}"
    html = f"""
    <h2>Reset Your Password</h2>
    <p>You are receiving this email because you (or someone else) requested
    a password reset. Click the link below to choose a new password:</p>
    <p><a href="{reset_url}">{reset_url}</a></p>
    <p>This link expires in {ttl_minutes} minutes.</p>
    <p>If you didn't request this, you can ignore this email.</p>
    """
    return "Password Reset", html
