"""
Error types shared by the context-window core and the provider glue.

The core only ever raises ConfigurationError. Everything else here is raised
by ChatService when talking to a provider.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    AI_API_ERROR = "AI_API_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


class ChatWindowError(Exception):
    code: ErrorCode = ErrorCode.INVALID_INPUT

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = dict(details) if details else {}
        self.original_error = original_error

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.details:
            out["details"] = dict(self.details)
        return out


class ConfigurationError(ChatWindowError, ValueError):
    """Token budget or settings resolve to something unusable (e.g. reserve >= window)."""

    code = ErrorCode.CONFIGURATION_ERROR


class InvalidInputError(ChatWindowError, ValueError):
    code = ErrorCode.INVALID_INPUT


class ProviderError(ChatWindowError):
    """The AI provider call failed or could not be made."""

    code = ErrorCode.AI_API_ERROR
