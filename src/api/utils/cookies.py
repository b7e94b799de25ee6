from fastapi import Response


def set_auth_cookie(response: Response, config, token: str) -> None:
    """Mirror the session token into an HttpOnly cookie with the token's lifetime"""
    response.set_cookie(
        key=config.AUTH_COOKIE_NAME,
        value=token,
        max_age=config.JWT_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=config.AUTH_COOKIE_SECURE,
        samesite="lax",
    )


def clear_auth_cookie(response: Response, config) -> None:
    response.delete_cookie(
        key=config.AUTH_COOKIE_NAME,
        httponly=True,
        secure=config.AUTH_COOKIE_SECURE,
        samesite="lax",
    )
