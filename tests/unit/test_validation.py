from __future__ import annotations

from typing import Any

import pytest

from whimsy_thinking.errors import (
    EMPTY_CONTENT,
    MISSING_FIELD,
    OUT_OF_RANGE,
    SEQUENCE_OVERFLOW,
    TYPE_MISMATCH,
    UNKNOWN_TOOL,
    WhimsyThinkingError,
)
from whimsy_thinking.models import GuidanceRequest, Seriousness, SetLevelRequest, ThoughtRecord, WhimsyLevel
from whimsy_thinking.validation import (
    EMPTY_CONTENT_MESSAGE,
    SEQUENCE_OVERFLOW_MESSAGE,
    check_sequence,
    validate_arguments,
)


def _thought(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "whimsy": "What if stairs were just very patient slides?",
        "nextWhimsyNeeded": True,
        "whimsyNumber": 1,
        "totalWhimsies": 3,
    }
    payload.update(overrides)
    return payload


def _error_for(tool: str, arguments: Any) -> WhimsyThinkingError:
    with pytest.raises(WhimsyThinkingError) as excinfo:
        validate_arguments(tool, arguments)
    return excinfo.value


def test_set_level_defaults_style() -> None:
    request = validate_arguments("set_level", {"level": 2}, default_style="wonder")

    assert request == SetLevelRequest(level=WhimsyLevel.OVERT, style="wonder")


def test_set_level_rejects_out_of_range_level() -> None:
    error = _error_for("set_level", {"level": 5})

    assert error.code == OUT_OF_RANGE
    assert "level" in error.message


def test_set_level_rejects_boolean_level() -> None:
    error = _error_for("set_level", {"level": True})

    assert error.code == TYPE_MISMATCH


def test_get_guidance_decodes_seriousness() -> None:
    request = validate_arguments("get_guidance", {"context": "a eulogy", "seriousness": "high"})

    assert request == GuidanceRequest(context="a eulogy", seriousness=Seriousness.HIGH)


def test_get_guidance_requires_context() -> None:
    error = _error_for("get_guidance", {})

    assert error.code == MISSING_FIELD
    assert error.message == "Missing required argument 'context'"


def test_oblique_strategy_accepts_empty_arguments() -> None:
    assert validate_arguments("oblique_strategy", None) is None
    assert validate_arguments("oblique_strategy", {}) is None


def test_thinking_arguments_decode_to_record() -> None:
    record = validate_arguments("whimsical_thinking", _thought(delightLevel=9, connectionStyle="poetic"))

    assert isinstance(record, ThoughtRecord)
    assert record.delight_level == 9
    assert record.connection_style == "poetic"


def test_unknown_argument_keys_are_ignored() -> None:
    record = validate_arguments("auto_whimsy", _thought(mood="sunny"))

    assert isinstance(record, ThoughtRecord)


def test_missing_field_reported_before_type_mismatch() -> None:
    arguments = _thought(whimsyNumber="one")
    del arguments["totalWhimsies"]

    error = _error_for("whimsical_thinking", arguments)

    assert error.code == MISSING_FIELD
    assert error.message == "Missing required argument 'totalWhimsies'"


def test_type_mismatch_names_field() -> None:
    error = _error_for("whimsical_thinking", _thought(whimsyNumber="one"))

    assert error.code == TYPE_MISMATCH
    assert error.message == "Argument 'whimsyNumber' must be an integer (got str)"


@pytest.mark.parametrize(
    ("overrides", "field"),
    [
        ({"whimsyNumber": 0}, "whimsyNumber"),
        ({"delightLevel": 11}, "delightLevel"),
        ({"tonalShift": "grumpy"}, "tonalShift"),
        ({"connectionStyle": "literal"}, "connectionStyle"),
    ],
)
def test_out_of_range_values(overrides: dict[str, Any], field: str) -> None:
    error = _error_for("whimsical_thinking", _thought(**overrides))

    assert error.code == OUT_OF_RANGE
    assert field in error.message


def test_whitespace_whimsy_is_empty_content() -> None:
    error = _error_for("auto_whimsy", _thought(whimsy="   \n\t"))

    assert error.code == EMPTY_CONTENT
    assert error.message == EMPTY_CONTENT_MESSAGE


def test_non_mapping_arguments_rejected() -> None:
    error = _error_for("whimsical_thinking", ["not", "an", "object"])

    assert error.code == TYPE_MISMATCH


def test_unknown_tool() -> None:
    error = _error_for("nope", {})

    assert error.code == UNKNOWN_TOOL


def test_check_sequence_allows_overflow_only_when_more_needed() -> None:
    within = ThoughtRecord(whimsy="a", next_whimsy_needed=True, whimsy_number=3, total_whimsies=3)
    extended = ThoughtRecord(
        whimsy="a", next_whimsy_needed=True, whimsy_number=4, total_whimsies=3, needs_more_whimsies=True
    )
    overflow = ThoughtRecord(whimsy="a", next_whimsy_needed=True, whimsy_number=4, total_whimsies=3)

    check_sequence(within)
    check_sequence(extended)
    with pytest.raises(WhimsyThinkingError) as excinfo:
        check_sequence(overflow)
    assert excinfo.value.code == SEQUENCE_OVERFLOW
    assert excinfo.value.message == SEQUENCE_OVERFLOW_MESSAGE


def test_null_optional_arguments_are_unset() -> None:
    request = validate_arguments("set_level", {"level": 1, "style": None}, default_style="wonder")
    record = validate_arguments("whimsical_thinking", _thought(delightLevel=None, branchId=None, adjacentPaths=None))

    assert request == SetLevelRequest(level=WhimsyLevel.SUBTLE, style="wonder")
    assert isinstance(record, ThoughtRecord)
    assert record.delight_level is None
    assert record.branch_id is None
    assert record.adjacent_paths == ()


def test_null_required_argument_is_missing() -> None:
    error = _error_for("get_guidance", {"context": None})

    assert error.code == MISSING_FIELD
    assert error.message == "Missing required argument 'context'"
