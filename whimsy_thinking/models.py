"""Domain models for whimsy thoughts, session requests, and tool responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Any, Mapping, Union

STYLES: tuple[str, ...] = ("playful", "wonder", "curiosity", "gentle-humor")
CONNECTION_STYLES: tuple[str, ...] = ("metaphorical", "serendipitous", "childlike", "poetic")


class WhimsyLevel(IntEnum):
    OFF = 0
    SUBTLE = 1
    OVERT = 2


class Seriousness(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True, slots=True)
class ToolCallRequest:
    """A decoded tool call as delivered by the transport."""

    name: str
    arguments: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        arguments = self.arguments
        if isinstance(arguments, Mapping):
            # Frozen dataclass: bypass __setattr__ to store the read-only copy.
            object.__setattr__(self, "arguments", MappingProxyType(dict(arguments)))


@dataclass(frozen=True, slots=True)
class MainLine:
    """Placement of a thought appended to the main history."""


@dataclass(frozen=True, slots=True)
class BranchLine:
    """Placement of a thought appended to a named branch."""

    branch_id: str
    origin_index: int


Placement = Union[MainLine, BranchLine]


# wire name -> attribute name, in declaration order
_THOUGHT_WIRE_FIELDS: tuple[tuple[str, str], ...] = (
    ("whimsy", "whimsy"),
    ("nextWhimsyNeeded", "next_whimsy_needed"),
    ("whimsyNumber", "whimsy_number"),
    ("totalWhimsies", "total_whimsies"),
    ("delightLevel", "delight_level"),
    ("unexpectedInsight", "unexpected_insight"),
    ("adjacentPaths", "adjacent_paths"),
    ("tonalShift", "tonal_shift"),
    ("emotionalResonance", "emotional_resonance"),
    ("connectionStyle", "connection_style"),
    ("sparkDirection", "spark_direction"),
    ("isRevision", "is_revision"),
    ("revisesWhimsy", "revises_whimsy"),
    ("branchFromWhimsy", "branch_from_whimsy"),
    ("branchId", "branch_id"),
    ("needsMoreWhimsies", "needs_more_whimsies"),
)


@dataclass(frozen=True, slots=True)
class ThoughtRecord:
    """One validated step of a whimsical exploration."""

    whimsy: str
    next_whimsy_needed: bool
    whimsy_number: int
    total_whimsies: int
    delight_level: int | None = None
    unexpected_insight: str | None = None
    adjacent_paths: tuple[str, ...] = ()
    tonal_shift: str | None = None
    emotional_resonance: str | None = None
    connection_style: str | None = None
    spark_direction: str | None = None
    is_revision: bool = False
    revises_whimsy: int | None = None
    branch_from_whimsy: int | None = None
    branch_id: str | None = None
    needs_more_whimsies: bool = False

    @property
    def placement(self) -> Placement:
        if self.branch_id and self.branch_from_whimsy:
            return BranchLine(branch_id=self.branch_id, origin_index=self.branch_from_whimsy)
        return MainLine()

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any]) -> "ThoughtRecord":
        """Build a record from already schema-checked wire arguments."""

        values: dict[str, Any] = {}
        for wire_name, attribute in _THOUGHT_WIRE_FIELDS:
            value = arguments.get(wire_name)
            if value is None:
                continue
            values[attribute] = value

        for attribute in ("whimsy_number", "total_whimsies", "delight_level", "revises_whimsy", "branch_from_whimsy"):
            if attribute in values:
                values[attribute] = int(values[attribute])
        for attribute in ("next_whimsy_needed", "is_revision", "needs_more_whimsies"):
            if attribute in values:
                values[attribute] = bool(values[attribute])
        if "adjacent_paths" in values:
            values["adjacent_paths"] = tuple(str(path) for path in values["adjacent_paths"])
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for wire_name, attribute in _THOUGHT_WIRE_FIELDS:
            value = getattr(self, attribute)
            if value is None:
                continue
            if attribute == "adjacent_paths":
                if not value:
                    continue
                value = list(value)
            elif attribute in ("is_revision", "needs_more_whimsies") and not value:
                continue
            payload[wire_name] = value
        return payload


@dataclass(frozen=True, slots=True)
class SetLevelRequest:
    level: WhimsyLevel
    style: str


@dataclass(frozen=True, slots=True)
class GuidanceRequest:
    context: str
    seriousness: Seriousness | None = None


@dataclass(frozen=True, slots=True)
class TextContent:
    text: str
    type: str = "text"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True, slots=True)
class ToolResponse:
    """Fixed-shape envelope returned for every tool call."""

    content: tuple[TextContent, ...]
    is_error: bool = False

    @classmethod
    def success(cls, text: str) -> "ToolResponse":
        return cls(content=(TextContent(text=text),), is_error=False)

    @classmethod
    def failure(cls, text: str) -> "ToolResponse":
        return cls(content=(TextContent(text=text),), is_error=True)

    @property
    def text(self) -> str:
        return "\n".join(item.text for item in self.content)

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": [item.to_dict() for item in self.content],
            "isError": self.is_error,
        }
