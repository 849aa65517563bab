"""Centralized logging configuration with Pydantic Logfire integration."""

import logging
from typing import Any

import logfire
from fastapi import FastAPI

from fbmessenger.config import get_settings

SENSITIVE_KEYS = (
    "token",
    "access_token",
    "verify_token",
    "facebook_page_access_token",
    "facebook_verify_token",
    "logfire_token",
    "sentry_dsn",
    "secret",
    "password",
    "authorization",
)


def setup_logfire(app: FastAPI) -> None:
    """
    Initialize and configure Pydantic Logfire for observability.

    Sets up:
    - FastAPI instrumentation (request/response tracing)
    - Pydantic instrumentation (model validation logging)
    - Environment-aware Python logging format
    """
    settings = get_settings()

    logfire_config: dict[str, Any] = {
        "environment": settings.env,
        "send_to_logfire": "if-token-present",
    }
    if settings.logfire_token:
        logfire_config["token"] = settings.logfire_token

    logfire.configure(**logfire_config)
    logfire.instrument_fastapi(app)
    logfire.instrument_pydantic()

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    if settings.env == "local":
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    else:
        # Logfire handles structured formatting in deployed environments
        logging.basicConfig(level=level, format="%(message)s")


def mask_pii(value: str | None, mask_char: str = "*") -> str:
    """
    Mask potentially sensitive data in logs.

    Shows the first and last two characters, masking the rest.
    """
    if not value:
        return ""

    if len(value) <= 4:
        return mask_char * len(value)

    return f"{value[:2]}{mask_char * (len(value) - 4)}{value[-2:]}"


def redact_tokens(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``data`` with token-like values masked, recursing into dicts."""
    redacted = data.copy()
    for key, value in redacted.items():
        if isinstance(value, dict):
            redacted[key] = redact_tokens(value)
        elif key.lower() in SENSITIVE_KEYS and isinstance(value, str):
            redacted[key] = mask_pii(value)
    return redacted
