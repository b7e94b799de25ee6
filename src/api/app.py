import logging
import time
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.bcrypt_password_hasher import BcryptPasswordHasher
from src.adapter.services.jose_token_codec import JoseTokenCodec
from src.adapter.services.notification_sinks import (
    LoggingNotificationSink,
    SendGridNotificationSink,
)
from src.adapter.services.pyotp_two_factor import PyOtpTwoFactorProvider
from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error = exc.base_error
    logger.warning(f"Client error: {error.code} {error.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "code": error.code, "message": error.message},
    )


async def handle_server_error(request: Request, exc: ServerError):
    error = exc.base_error
    logger.error(f"Server error: {error.code} {error.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "code": error.code,
            "message": "Internal server error",
        },
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part != "body"),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    logger.warning(f"Validation failed on {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "success": False,
            "code": "VALIDATION_FAILED",
            "message": "Invalid input",
            "errors": errors,
        },
    )


def build_notification_sink(ApplicationConfig):
    if ApplicationConfig.NOTIFICATION_BACKEND == "sendgrid":
        return SendGridNotificationSink(
            api_key=ApplicationConfig.SENDGRID_API_KEY,
            from_address=ApplicationConfig.EMAIL_FROM_ADDRESS,
            from_name=ApplicationConfig.EMAIL_FROM_NAME,
        )
    return LoggingNotificationSink()


def create_app(ApplicationConfig) -> FastAPI:
    engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await engine.dispose()

    app = FastAPI(title="LearnHub Auth API", version="0.1.0", lifespan=lifespan)

    app.state.config = ApplicationConfig
    app.state.engine = engine
    app.state.session_factory = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    app.state.password_hasher = BcryptPasswordHasher(
        rounds=ApplicationConfig.BCRYPT_ROUNDS
    )
    app.state.token_codec = JoseTokenCodec(
        secret=ApplicationConfig.JWT_SECRET,
        expires_in=timedelta(minutes=ApplicationConfig.JWT_EXPIRE_MINUTES),
        challenge_expires_in=timedelta(
            minutes=ApplicationConfig.TWO_FACTOR_CHALLENGE_EXPIRE_MINUTES
        ),
    )
    app.state.notification_sink = build_notification_sink(ApplicationConfig)
    app.state.two_factor = PyOtpTwoFactorProvider(
        issuer_name=ApplicationConfig.TWO_FACTOR_ISSUER
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if ApplicationConfig.ENABLE_LOGGING_MIDDLEWARE:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            started = time.perf_counter()
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"({elapsed_ms:.1f}ms)"
            )
            return response

    from src.api.routes import assignment, auth, health_check, sessions, two_factor, user

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(two_factor.router, tags=["Two-Factor"])
    app.include_router(sessions.router, tags=["Sessions"])
    app.include_router(user.router, tags=["User"])
    app.include_router(assignment.router, tags=["Assignments"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    return app
