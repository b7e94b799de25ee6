import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_EXPIRE_MINUTES = int(data.get("JWT_EXPIRE_MINUTES", 1440))
    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 12))
    RESET_TOKEN_EXPIRE_MINUTES = int(data.get("RESET_TOKEN_EXPIRE_MINUTES", 10))
    AUTH_COOKIE_NAME = data.get("AUTH_COOKIE_NAME", "token")
    AUTH_COOKIE_SECURE = bool(data.get("AUTH_COOKIE_SECURE", False))
    NOTIFICATION_BACKEND = data.get("NOTIFICATION_BACKEND", "log")
    SENDGRID_API_KEY = data.get("SENDGRID_API_KEY", "")
    EMAIL_FROM_ADDRESS = data.get("EMAIL_FROM_ADDRESS", "noreply@learnhub.local")
    EMAIL_FROM_NAME = data.get("EMAIL_FROM_NAME", "LearnHub")
    FRONTEND_URL = data.get("FRONTEND_URL", "http://localhost:3000")
    TWO_FACTOR_ISSUER = data.get("TWO_FACTOR_ISSUER", "LearnHub")
    TWO_FACTOR_CHALLENGE_EXPIRE_MINUTES = int(
        data.get("TWO_FACTOR_CHALLENGE_EXPIRE_MINUTES", 5)
    )
    TWO_FACTOR_MAX_ATTEMPTS = int(data.get("TWO_FACTOR_MAX_ATTEMPTS", 5))
