"""Argument validation for whimsy tools backed by the shared schema registry."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Mapping

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from .errors import (
    EMPTY_CONTENT,
    MISSING_FIELD,
    OUT_OF_RANGE,
    SEQUENCE_OVERFLOW,
    TYPE_MISMATCH,
    UNKNOWN_TOOL,
    WhimsyThinkingError,
)
from .logging import get_logger
from .models import GuidanceRequest, Seriousness, SetLevelRequest, ThoughtRecord, WhimsyLevel
from .schemas import (
    AUTO_WHIMSY,
    GET_GUIDANCE,
    OBLIQUE_STRATEGY,
    SET_LEVEL,
    TOOL_SCHEMAS,
    WHIMSICAL_THINKING,
    plain_schema,
)

__all__ = [
    "EMPTY_CONTENT_MESSAGE",
    "SEQUENCE_OVERFLOW_MESSAGE",
    "ValidatedArguments",
    "check_sequence",
    "validate_arguments",
]

logger = get_logger(__name__)

EMPTY_CONTENT_MESSAGE = "A whimsy must contain some delightful content!"
SEQUENCE_OVERFLOW_MESSAGE = (
    "Our whimsy number has wandered beyond our planned journey - perhaps we need more whimsies?"
)

ValidatedArguments = SetLevelRequest | GuidanceRequest | ThoughtRecord | None

_KEYWORD_CODES = {
    "required": MISSING_FIELD,
    "type": TYPE_MISMATCH,
    "minimum": OUT_OF_RANGE,
    "maximum": OUT_OF_RANGE,
    "enum": OUT_OF_RANGE,
}
_CODE_PRIORITY = {MISSING_FIELD: 0, TYPE_MISMATCH: 1, OUT_OF_RANGE: 2}

_TYPE_NAMES = {
    "string": "a string",
    "integer": "an integer",
    "number": "a number",
    "boolean": "a boolean",
    "array": "an array",
    "object": "an object",
}


@lru_cache(maxsize=None)
def _validator_for(tool_name: str) -> Draft202012Validator:
    schema = plain_schema(tool_name)
    Draft202012Validator.check_schema(schema)
    return Draft202012Validator(schema)


def validate_arguments(
    tool_name: str,
    raw_arguments: Any,
    *,
    default_style: str = "playful",
) -> ValidatedArguments:
    """Validate a raw argument payload and decode it into the tool's typed model.

    Raises ``WhimsyThinkingError`` with one of ``MISSING_FIELD``,
    ``TYPE_MISMATCH``, ``OUT_OF_RANGE``, ``EMPTY_CONTENT`` or ``UNKNOWN_TOOL``.
    The sequence invariant is not checked here; see ``check_sequence``.
    """

    if tool_name not in TOOL_SCHEMAS:
        raise WhimsyThinkingError(UNKNOWN_TOOL, f"Unknown tool: {tool_name}", details={"tool": tool_name})

    if raw_arguments is None:
        arguments: Mapping[str, Any] = {}
    elif isinstance(raw_arguments, Mapping):
        # null means unset, for required and optional arguments alike
        arguments = {key: value for key, value in raw_arguments.items() if value is not None}
    else:
        raise WhimsyThinkingError(
            TYPE_MISMATCH,
            "Tool arguments must be an object",
            details={"tool": tool_name, "received": type(raw_arguments).__name__},
        )

    _check_schema(tool_name, arguments)

    if tool_name == SET_LEVEL:
        return SetLevelRequest(
            level=WhimsyLevel(int(arguments["level"])),
            style=arguments.get("style") or default_style,
        )
    if tool_name == GET_GUIDANCE:
        seriousness = arguments.get("seriousness")
        return GuidanceRequest(
            context=arguments["context"],
            seriousness=Seriousness(seriousness) if seriousness is not None else None,
        )
    if tool_name == OBLIQUE_STRATEGY:
        return None
    if tool_name in (WHIMSICAL_THINKING, AUTO_WHIMSY):
        if not arguments["whimsy"].strip():
            raise WhimsyThinkingError(EMPTY_CONTENT, EMPTY_CONTENT_MESSAGE, details={"field": "whimsy"})
        return ThoughtRecord.from_arguments(arguments)

    raise WhimsyThinkingError(UNKNOWN_TOOL, f"Unknown tool: {tool_name}")  # pragma: no cover - registry drift


def check_sequence(record: ThoughtRecord) -> None:
    """Reject a whimsy number past the declared total unless more whimsies were requested."""

    if record.whimsy_number > record.total_whimsies and not record.needs_more_whimsies:
        raise WhimsyThinkingError(
            SEQUENCE_OVERFLOW,
            SEQUENCE_OVERFLOW_MESSAGE,
            details={"whimsyNumber": record.whimsy_number, "totalWhimsies": record.total_whimsies},
        )


def _check_schema(tool_name: str, arguments: Mapping[str, Any]) -> None:
    validator = _validator_for(tool_name)
    failures = [_to_failure(error) for error in validator.iter_errors(arguments)]
    if not failures:
        return
    failures.sort(key=lambda failure: (_CODE_PRIORITY.get(failure.code, 3), str((failure.details or {}).get("field", ""))))
    failure = failures[0]
    logger.debug(
        "validation.rejected",
        extra={"context": {"tool": tool_name, "code": failure.code, "failures": len(failures)}},
    )
    raise failure


def _to_failure(error: ValidationError) -> WhimsyThinkingError:
    keyword = str(error.validator)
    code = _KEYWORD_CODES.get(keyword, TYPE_MISMATCH)
    field = _field_name(error)
    details = {"field": field, "keyword": keyword}

    if keyword == "required":
        return WhimsyThinkingError(code, f"Missing required argument '{field}'", details=details)
    if keyword == "type":
        expected = _TYPE_NAMES.get(str(error.validator_value), str(error.validator_value))
        received = type(error.instance).__name__
        return WhimsyThinkingError(code, f"Argument '{field}' must be {expected} (got {received})", details=details)
    if keyword == "minimum":
        return WhimsyThinkingError(code, f"Argument '{field}' must be >= {error.validator_value}", details=details)
    if keyword == "maximum":
        return WhimsyThinkingError(code, f"Argument '{field}' must be <= {error.validator_value}", details=details)
    if keyword == "enum":
        allowed = ", ".join(str(value) for value in error.validator_value)
        return WhimsyThinkingError(code, f"Argument '{field}' must be one of: {allowed}", details=details)
    return WhimsyThinkingError(code, f"Argument '{field}' is invalid: {error.message}", details=details)


def _field_name(error: ValidationError) -> str:
    if error.validator == "required":
        instance = error.instance if isinstance(error.instance, Mapping) else {}
        missing = [name for name in error.validator_value if name not in instance]
        # jsonschema reports one error per missing property; recover which one from the message
        for name in missing:
            if repr(name) in error.message:
                return name
        return missing[0] if missing else "arguments"
    if error.path:
        return ".".join(str(part) for part in error.path)
    return "arguments"
