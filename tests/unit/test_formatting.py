from __future__ import annotations

from whimsy_thinking.formatting import (
    AUTO_ADJACENT_PATHS,
    AUTO_INSIGHT,
    AUTO_RESONANCE,
    COMPLETE_FOOTER,
    CONTINUE_FOOTER,
    delight_indicator,
    render_auto_thought,
    render_level_change,
    render_thought,
    tone_emoji,
    whimsical_prefix,
)
from whimsy_thinking.models import ThoughtRecord, WhimsyLevel


def _record(**overrides: object) -> ThoughtRecord:
    values: dict[str, object] = {
        "whimsy": "A teapot is a tiny weather system",
        "next_whimsy_needed": True,
        "whimsy_number": 2,
        "total_whimsies": 4,
    }
    values.update(overrides)
    return ThoughtRecord(**values)  # type: ignore[arg-type]


def test_prefix_prefers_revision_over_branch() -> None:
    assert whimsical_prefix(_record()) == "💫 Whimsical Exploration"
    assert whimsical_prefix(_record(branch_id="alt")) == "🌿 Branching into new delights"
    assert whimsical_prefix(_record(branch_id="alt", is_revision=True)) == "🔄 Revisiting with fresh wonder"


def test_delight_indicator_and_tone() -> None:
    assert delight_indicator(None) == ""
    assert delight_indicator(3) == "(Delight: ⭐⭐⭐)"
    assert tone_emoji("curiosity") == "🔍"
    assert tone_emoji(None) == "✨"


def test_minimal_thought_has_header_content_and_footer() -> None:
    text = render_thought(_record(next_whimsy_needed=False))

    lines = text.splitlines()
    assert lines[0] == "💫 Whimsical Exploration ✨"
    assert lines[1] == "Whimsy 2/4"
    assert "A teapot is a tiny weather system" in text
    assert text.endswith(COMPLETE_FOOTER)
    assert "Delightful Discovery" not in text
    assert "Adjacent Wonders" not in text


def test_full_thought_sections_appear_in_order() -> None:
    record = _record(
        delight_level=2,
        tonal_shift="playful",
        unexpected_insight="Steam is a cloud in a hurry",
        adjacent_paths=("kettles", "fog"),
        emotional_resonance="cosy",
        spark_direction="breakfast meteorology",
        connection_style="metaphorical",
    )

    text = render_thought(record)

    assert text.splitlines()[0] == "💫 Whimsical Exploration 🎈"
    assert "Whimsy 2/4 (Delight: ⭐⭐)" in text
    assert "  1. kettles\n  2. fog\n" in text
    markers = [
        "A teapot is a tiny weather system",
        "✨ Delightful Discovery: Steam is a cloud in a hurry",
        "🌟 Adjacent Wonders to Explore:",
        "💫 This might make you feel: cosy",
        "🎯 Where this spark leads: breakfast meteorology",
        "Connection style: metaphorical",
        CONTINUE_FOOTER,
    ]
    positions = [text.index(marker) for marker in markers]
    assert positions == sorted(positions)


def test_auto_thought_uses_fixed_fragments_deterministically() -> None:
    record = _record(unexpected_insight="ignored")

    first = render_auto_thought(record)
    second = render_auto_thought(record)

    assert first == second
    assert AUTO_INSIGHT in first
    assert "ignored" not in first
    assert AUTO_RESONANCE in first
    for number, path in enumerate(AUTO_ADJACENT_PATHS, start=1):
        assert f"  {number}. {path}" in first


def test_plain_output_has_no_ansi() -> None:
    assert "\x1b[" not in render_thought(_record(delight_level=1))


def test_color_output_contains_ansi_and_same_words() -> None:
    colored = render_thought(_record(), color=True)

    assert "\x1b[" in colored
    assert "A teapot is a tiny weather system" in colored
    assert CONTINUE_FOOTER in colored


def test_level_change_message() -> None:
    assert render_level_change(WhimsyLevel.SUBTLE, "playful") == "🎚️ Whimsy level set to SUBTLE (1), style: playful"
