"""Production-safe logging helpers for authentication events.

Outside production these include emails and raw error text to ease debugging.
In production emails are dropped and error messages that look like they
carry credentials are hidden.
"""

from __future__ import annotations

import logging

from config import settings

logger = logging.getLogger("alacarte.auth")

SENSITIVE_PATTERNS = (
    "password",
    "token",
    "secret",
    "key",
    "authorization",
    "bearer",
    "oauth",
)


def contains_sensitive_data(text: str) -> bool:
    lowered = str(text or "").lower()
    return any(pattern in lowered for pattern in SENSITIVE_PATTERNS)


def sanitize_token(token: str) -> str:
    if len(token or "") < 10:
        return "[invalid-token]"
    return f"{token[:4]}...{token[-4:]}"


def log_auth_success(email: str) -> None:
    if settings.is_production:
        logger.info("🔐 User authentication successful")
    else:
        logger.info("🔐 User authentication successful: %s", email)


def log_auth_failure(reason: str) -> None:
    logger.warning("🚫 Authentication failed: %s", reason)


def log_oauth_error(exc: BaseException) -> None:
    if settings.is_production:
        logger.warning("🔍 OAuth validation error (check server logs)")
    else:
        logger.warning("🔍 OAuth validation error: %s", exc)


def log_error(context: str, exc: BaseException) -> None:
    message = str(exc)
    if settings.is_production and contains_sensitive_data(message):
        logger.error("❌ %s: [sensitive error hidden in production]", context)
    else:
        logger.error("❌ %s: %s", context, message)
