"""Shared utilities for FastAPI routes."""

from collections.abc import Mapping

from fastapi import HTTPException, status

from models.errors import InputValidationError


def bad_request(error: InputValidationError) -> HTTPException:
    """Map a pipeline input error to a 400 response."""
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


def redact_api_keys(api_keys: Mapping[str, str] | None) -> dict[str, str]:
    """
    Replace caller-supplied keys with a marker before logging.
    """
    redacted: dict[str, str] = {}
    for provider, value in (api_keys or {}).items():
        redacted[provider] = "[REDACTED]" if value else ""
    return redacted
