# app/core/config.py
import logging
import os
import secrets

from dotenv import load_dotenv, find_dotenv

load_dotenv(find_dotenv())

logger = logging.getLogger(__name__)


class Settings:
    # Without a secret, tokens are signed with a throwaway key and die with the process
    JWT_SECRET = os.getenv("JWT_SECRET")
    if not JWT_SECRET:
        JWT_SECRET = secrets.token_urlsafe(32)
        logger.warning("JWT_SECRET not set, using a temporary secret")

    JWT_ALG = "HS256"
    JWT_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRE_MINUTES", "129600"))

    # In-memory SQLite unless a real database is configured
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite://")
    ALLOWED_ORIGINS = os.getenv(
        "ALLOWED_ORIGINS",
        "http://localhost:5173,http://localhost:3000",
    )

    DEMO_USER_NAME = os.getenv("DEMO_USER_NAME", "Alex")
    DEMO_USER_EMAIL = os.getenv("DEMO_USER_EMAIL", "alex@example.com")

    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY") or os.getenv("OPENAI_API_KEY_ENV_VAR")
    OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")
    OPENAI_ANALYSIS_TEMPERATURE = float(os.getenv("OPENAI_ANALYSIS_TEMPERATURE", "0.3"))
    OPENAI_CHAT_TEMPERATURE = float(os.getenv("OPENAI_CHAT_TEMPERATURE", "0.7"))
    OPENAI_MAX_TOKENS = int(os.getenv("OPENAI_MAX_TOKENS", "500"))
    if not OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY not set, analysis and chat will use fallback responses")

    PORT = int(os.getenv("PORT", "5000"))


settings = Settings()
