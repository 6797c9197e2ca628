"""Text rendering for whimsy tool responses.

Rendering is pure and never fails: optional sections are simply omitted when
the record leaves them unset. Output is plain text by default; with
``color=True`` the same styled text is exported as ANSI escape sequences.
"""

from __future__ import annotations

import io

from rich.console import Console
from rich.text import Text

from .models import ThoughtRecord, WhimsyLevel

TONE_EMOJIS = {
    "playful": "🎈",
    "wonder": "🌟",
    "curiosity": "🔍",
    "gentle-humor": "😊",
}
DEFAULT_TONE_EMOJI = "✨"

AUTO_INSIGHT = "Every idea has a more delightful neighbour just one step to the side."
AUTO_ADJACENT_PATHS = (
    "What would a curious child ask next?",
    "Where does this idea already show up in nature?",
    "How would this sound told as a bedtime story?",
)
AUTO_RESONANCE = "A small spark of wonder"

CONTINUE_FOOTER = "🌈 Ready for the next whimsical exploration!"
COMPLETE_FOOTER = "✨ Our delightful journey feels complete... for now!"


def whimsical_prefix(record: ThoughtRecord) -> str:
    if record.is_revision:
        return "🔄 Revisiting with fresh wonder"
    if record.branch_id:
        return "🌿 Branching into new delights"
    return "💫 Whimsical Exploration"


def delight_indicator(delight_level: int | None) -> str:
    if not delight_level:
        return ""
    stars = "⭐" * min(delight_level, 10)
    return f"(Delight: {stars})"


def tone_emoji(tone: str | None) -> str:
    if not tone:
        return DEFAULT_TONE_EMOJI
    return TONE_EMOJIS.get(tone, DEFAULT_TONE_EMOJI)


def render_thought(record: ThoughtRecord, *, color: bool = False) -> str:
    """Render a full whimsical thought with every section the record provides."""

    return _export(_build_thought(record), color=color)


def render_auto_thought(record: ThoughtRecord, *, color: bool = False) -> str:
    """Render a thought using the fixed insight, tangent, and feeling fragments."""

    enriched = _build_thought(
        record,
        insight=AUTO_INSIGHT,
        adjacent_paths=AUTO_ADJACENT_PATHS,
        resonance=AUTO_RESONANCE,
    )
    return _export(enriched, color=color)


def render_level_change(level: WhimsyLevel, style: str, *, color: bool = False) -> str:
    text = Text()
    text.append("🎚️ Whimsy level set to ")
    text.append(f"{level.name} ({int(level)})", style="cyan")
    text.append(", style: ")
    text.append(style, style="magenta")
    return _export(text, color=color)


def _build_thought(
    record: ThoughtRecord,
    *,
    insight: str | None = None,
    adjacent_paths: tuple[str, ...] | None = None,
    resonance: str | None = None,
) -> Text:
    insight = insight if insight is not None else record.unexpected_insight
    adjacent_paths = adjacent_paths if adjacent_paths is not None else record.adjacent_paths
    resonance = resonance if resonance is not None else record.emotional_resonance

    text = Text()
    text.append(f"{whimsical_prefix(record)} {tone_emoji(record.tonal_shift)}\n")
    text.append(f"Whimsy {record.whimsy_number}/{record.total_whimsies}", style="cyan")
    indicator = delight_indicator(record.delight_level)
    if indicator:
        text.append(f" {indicator}")
    text.append("\n\n")

    text.append(record.whimsy, style="magenta")
    text.append("\n\n")

    if insight:
        text.append("✨ Delightful Discovery: ", style="yellow")
        text.append(insight, style="white")
        text.append("\n\n")

    if adjacent_paths:
        text.append("🌟 Adjacent Wonders to Explore:\n", style="green")
        for number, path in enumerate(adjacent_paths, start=1):
            text.append(f"  {number}. {path}\n", style="green")
        text.append("\n")

    if resonance:
        text.append("💫 This might make you feel: ", style="blue")
        text.append(resonance, style="white")
        text.append("\n\n")

    if record.spark_direction:
        text.append("🎯 Where this spark leads: ", style="red")
        text.append(record.spark_direction, style="white")
        text.append("\n\n")

    if record.connection_style:
        text.append(f"Connection style: {record.connection_style}\n", style="bright_black")

    if record.next_whimsy_needed:
        text.append(CONTINUE_FOOTER, style="green")
    else:
        text.append(COMPLETE_FOOTER, style="yellow")
    return text


def _export(text: Text, *, color: bool) -> str:
    if not color:
        return text.plain
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        force_terminal=True,
        color_system="standard",
        width=10_000,
        soft_wrap=True,
        highlight=False,
        emoji=False,
        markup=False,
    )
    console.print(text, end="")
    return buffer.getvalue()
