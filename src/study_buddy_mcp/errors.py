"""Structured error handling — exception types, diagnostic categories, tool error model."""

from __future__ import annotations

import json
from enum import Enum

import httpx
from google.genai import errors as genai_errors
from pydantic import BaseModel, ValidationError

ANALYSIS_FAILED_MESSAGE = (
    "I couldn't analyze that content. Please try again or check your connection."
)


class InvalidInputError(ValueError):
    """A command was rejected because its input or the session phase does not allow it.

    Raising this never changes session state.
    """


class AnalysisError(Exception):
    """The external analysis call failed.

    Every cause (transport, API status, malformed or non-conforming JSON)
    collapses into this one type. ``str(err)`` is always the user-facing
    message; the original exception is kept on ``__cause__`` for operators.
    """

    def __init__(self, message: str = ANALYSIS_FAILED_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


class ErrorCategory(str, Enum):
    """Categories of errors for diagnostics."""

    API_PERMISSION_DENIED = "API_PERMISSION_DENIED"
    API_QUOTA_EXCEEDED = "API_QUOTA_EXCEEDED"
    API_INVALID_ARGUMENT = "API_INVALID_ARGUMENT"
    API_UNAVAILABLE = "API_UNAVAILABLE"
    NETWORK_ERROR = "NETWORK_ERROR"
    RESPONSE_NOT_JSON = "RESPONSE_NOT_JSON"
    SCHEMA_VALIDATION_FAILED = "SCHEMA_VALIDATION_FAILED"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    FILE_UNSUPPORTED = "FILE_UNSUPPORTED"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    INVALID_INPUT = "INVALID_INPUT"
    UNKNOWN = "UNKNOWN"


class ToolError(BaseModel):
    """Structured error returned from any tool."""

    error: str
    category: str
    hint: str
    retryable: bool = False


def _categorize_api_error(error: genai_errors.APIError) -> tuple[ErrorCategory, str]:
    code = error.code or 0
    if code in (401, 403):
        return (
            ErrorCategory.API_PERMISSION_DENIED,
            "API key rejected or lacks permission — check GEMINI_API_KEY",
        )
    if code == 429:
        return (
            ErrorCategory.API_QUOTA_EXCEEDED,
            "Rate limit hit — wait and resubmit, or switch preset with infra_configure(preset='fast')",
        )
    if code >= 500:
        return (
            ErrorCategory.API_UNAVAILABLE,
            "Gemini is temporarily unavailable — resubmit later",
        )
    return (
        ErrorCategory.API_INVALID_ARGUMENT,
        "Request rejected — check image type/size and model name",
    )


def _is_json_failure(error: ValidationError) -> bool:
    return any(e.get("type") == "json_invalid" for e in error.errors())


def categorize_error(error: BaseException) -> tuple[ErrorCategory, str]:
    """Map an exception to an ErrorCategory + human-readable hint.

    Chained ``AnalysisError`` instances are categorized by their cause.
    """
    if isinstance(error, AnalysisError) and error.__cause__ is not None:
        return categorize_error(error.__cause__)

    if isinstance(error, genai_errors.APIError):
        return _categorize_api_error(error)
    if isinstance(error, ValueError) and "invalid thinking level" in str(error).lower():
        return (ErrorCategory.API_INVALID_ARGUMENT, "Invalid thinking level — use minimal, low, medium or high")
    if isinstance(error, (TimeoutError, httpx.TimeoutException)):
        return (
            ErrorCategory.NETWORK_ERROR,
            "Request timed out — try again or check connectivity",
        )
    if isinstance(error, (ConnectionError, httpx.TransportError)):
        return (
            ErrorCategory.NETWORK_ERROR,
            "Network failure reaching Gemini — check connectivity",
        )
    if isinstance(error, json.JSONDecodeError):
        return (ErrorCategory.RESPONSE_NOT_JSON, "Gemini returned a body that is not JSON")
    if isinstance(error, ValidationError):
        if _is_json_failure(error):
            return (ErrorCategory.RESPONSE_NOT_JSON, "Gemini returned a body that is not JSON")
        return (
            ErrorCategory.SCHEMA_VALIDATION_FAILED,
            "Gemini response did not match the study-guide schema",
        )
    if isinstance(error, FileNotFoundError):
        return (ErrorCategory.FILE_NOT_FOUND, "File not found — check the path")

    s = str(error).lower()
    if isinstance(error, InvalidInputError):
        if "too large" in s:
            return (ErrorCategory.FILE_TOO_LARGE, "Image exceeds STUDY_MAX_IMAGE_BYTES — shrink it first")
        if "not an image" in s or "mime" in s:
            return (ErrorCategory.FILE_UNSUPPORTED, "Only image files (png, jpeg, webp, heic, ...) are accepted")
        return (ErrorCategory.INVALID_INPUT, str(error))

    return (ErrorCategory.UNKNOWN, str(error))


def make_tool_error(error: Exception) -> dict:
    """Create a serialisable ToolError dict from an exception."""
    cat, hint = categorize_error(error)
    retryable = cat in {
        ErrorCategory.API_QUOTA_EXCEEDED,
        ErrorCategory.API_UNAVAILABLE,
        ErrorCategory.NETWORK_ERROR,
    }
    return ToolError(
        error=str(error),
        category=cat.value,
        hint=hint,
        retryable=retryable,
    ).model_dump(mode="json")
