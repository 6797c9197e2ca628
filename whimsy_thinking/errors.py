"""Centralized error codes and helper utilities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

__all__ = [
    "MISSING_FIELD",
    "TYPE_MISMATCH",
    "OUT_OF_RANGE",
    "EMPTY_CONTENT",
    "SEQUENCE_OVERFLOW",
    "UNKNOWN_TOOL",
    "SOURCE_UNAVAILABLE",
    "EMPTY_STRATEGY_SET",
    "CONFIG_ERROR",
    "INTERNAL_ERROR",
    "WhimsyThinkingError",
    "error_payload",
]

MISSING_FIELD = "MISSING_FIELD"
TYPE_MISMATCH = "TYPE_MISMATCH"
OUT_OF_RANGE = "OUT_OF_RANGE"
EMPTY_CONTENT = "EMPTY_CONTENT"
SEQUENCE_OVERFLOW = "SEQUENCE_OVERFLOW"
UNKNOWN_TOOL = "UNKNOWN_TOOL"
SOURCE_UNAVAILABLE = "SOURCE_UNAVAILABLE"
EMPTY_STRATEGY_SET = "EMPTY_STRATEGY_SET"
CONFIG_ERROR = "CONFIG_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass(slots=True)
class WhimsyThinkingError(Exception):
    """Domain-specific exception carrying an error code and message."""

    code: str
    message: str
    details: Mapping[str, Any] | None = None

    def __str__(self) -> str:  # pragma: no cover - delegation to message
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return error_payload(self.code, self.message, details=self.details)


def error_payload(code: str, message: str, *, details: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Build a structured error payload used in logs and metrics."""

    payload: dict[str, Any] = {
        "code": code,
        "message": message,
    }
    if details:
        payload["details"] = dict(details)
    return payload
