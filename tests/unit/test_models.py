from __future__ import annotations

import dataclasses

import pytest

from whimsy_thinking.models import BranchLine, MainLine, ThoughtRecord, ToolCallRequest, ToolResponse


def test_thought_record_from_wire_arguments() -> None:
    record = ThoughtRecord.from_arguments(
        {
            "whimsy": "Clouds are slow-motion sheep",
            "nextWhimsyNeeded": True,
            "whimsyNumber": 1,
            "totalWhimsies": 3,
            "delightLevel": 7,
            "adjacentPaths": ["wool", "weather"],
            "tonalShift": "wonder",
        }
    )

    assert record.whimsy_number == 1
    assert record.total_whimsies == 3
    assert record.delight_level == 7
    assert record.adjacent_paths == ("wool", "weather")
    assert record.tonal_shift == "wonder"
    assert record.is_revision is False
    assert record.branch_id is None


def test_thought_record_to_dict_uses_wire_names_and_omits_unset() -> None:
    record = ThoughtRecord(whimsy="hi", next_whimsy_needed=False, whimsy_number=2, total_whimsies=2)

    assert record.to_dict() == {
        "whimsy": "hi",
        "nextWhimsyNeeded": False,
        "whimsyNumber": 2,
        "totalWhimsies": 2,
    }


def test_thought_record_is_immutable() -> None:
    record = ThoughtRecord(whimsy="hi", next_whimsy_needed=True, whimsy_number=1, total_whimsies=1)

    with pytest.raises(dataclasses.FrozenInstanceError):
        record.whimsy = "changed"  # type: ignore[misc]


def test_placement_requires_branch_id_and_origin() -> None:
    base = {"whimsy": "x", "next_whimsy_needed": True, "whimsy_number": 1, "total_whimsies": 2}

    assert ThoughtRecord(**base).placement == MainLine()
    assert ThoughtRecord(**base, branch_id="b").placement == MainLine()
    assert ThoughtRecord(**base, branch_from_whimsy=1).placement == MainLine()
    assert ThoughtRecord(**base, branch_id="b", branch_from_whimsy=1).placement == BranchLine("b", 1)


def test_tool_call_request_arguments_are_read_only() -> None:
    source = {"level": 1}
    request = ToolCallRequest(name="set_level", arguments=source)
    source["level"] = 2

    assert request.arguments["level"] == 1
    with pytest.raises(TypeError):
        request.arguments["level"] = 0  # type: ignore[index]


def test_tool_response_envelope_shape() -> None:
    ok = ToolResponse.success("done")
    failed = ToolResponse.failure("nope")

    assert ok.to_dict() == {"content": [{"type": "text", "text": "done"}], "isError": False}
    assert failed.to_dict() == {"content": [{"type": "text", "text": "nope"}], "isError": True}
    assert failed.text == "nope"


def test_from_arguments_treats_none_as_unset() -> None:
    record = ThoughtRecord.from_arguments(
        {
            "whimsy": "Puddles are sky samples",
            "nextWhimsyNeeded": False,
            "whimsyNumber": 1,
            "totalWhimsies": 1,
            "tonalShift": None,
            "adjacentPaths": None,
        }
    )

    assert record.tonal_shift is None
    assert record.adjacent_paths == ()
