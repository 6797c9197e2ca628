"""Declarative tool schemas shared by tool listing and argument validation."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from .models import CONNECTION_STYLES, STYLES

__all__ = [
    "SET_LEVEL",
    "GET_GUIDANCE",
    "OBLIQUE_STRATEGY",
    "WHIMSICAL_THINKING",
    "AUTO_WHIMSY",
    "PROFILES",
    "TOOL_SCHEMAS",
    "ToolSpec",
    "list_tool_specs",
    "plain_schema",
    "tool_listing",
]

SET_LEVEL = "set_level"
GET_GUIDANCE = "get_guidance"
OBLIQUE_STRATEGY = "oblique_strategy"
WHIMSICAL_THINKING = "whimsical_thinking"
AUTO_WHIMSY = "auto_whimsy"


@dataclass(frozen=True, slots=True)
class ToolSpec:
    name: str
    description: str
    input_schema: Mapping[str, Any]

    def to_listing(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": _thaw(self.input_schema),
        }


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    """Return a plain JSON-compatible copy of a frozen schema."""

    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


_SEQUENCE_PROPERTIES: dict[str, Any] = {
    "whimsy": {
        "type": "string",
        "description": "Your current whimsical thought or delightful observation",
    },
    "nextWhimsyNeeded": {
        "type": "boolean",
        "description": "Whether another whimsical exploration is needed",
    },
    "whimsyNumber": {
        "type": "integer",
        "minimum": 1,
        "description": "Current whimsy number in the delightful journey",
    },
    "totalWhimsies": {
        "type": "integer",
        "minimum": 1,
        "description": "Estimated total whimsies needed for this exploration",
    },
}

_BRANCH_PROPERTIES: dict[str, Any] = {
    "branchFromWhimsy": {
        "type": "integer",
        "minimum": 1,
        "description": "Branching point whimsy number for exploring alternative delights",
    },
    "branchId": {
        "type": "string",
        "description": "Branch identifier for tracking different whimsical paths",
    },
    "needsMoreWhimsies": {
        "type": "boolean",
        "description": "If more whimsical exploration is needed",
    },
}

_SEQUENCE_REQUIRED = ["whimsy", "nextWhimsyNeeded", "whimsyNumber", "totalWhimsies"]

_RAW_SCHEMAS: dict[str, tuple[str, dict[str, Any]]] = {
    SET_LEVEL: (
        "Set how much whimsy to bring into responses: 0 turns it off, 1 keeps it subtle, "
        "2 lets it be overt. Optionally choose the style of whimsy.",
        {
            "type": "object",
            "properties": {
                "level": {
                    "type": "integer",
                    "enum": [0, 1, 2],
                    "description": "Whimsy level: 0 off, 1 subtle, 2 overt",
                },
                "style": {
                    "type": "string",
                    "enum": list(STYLES),
                    "description": "Preferred style of whimsy",
                },
            },
            "required": ["level"],
        },
    ),
    GET_GUIDANCE: (
        "Get guidance on how whimsical to be for the given context, honouring the current "
        "level and capping exuberance for serious topics.",
        {
            "type": "object",
            "properties": {
                "context": {
                    "type": "string",
                    "description": "What you are about to respond to",
                },
                "seriousness": {
                    "type": "string",
                    "enum": ["low", "medium", "high"],
                    "description": "How serious the topic is",
                },
            },
            "required": ["context"],
        },
    ),
    OBLIQUE_STRATEGY: (
        "Draw a random oblique strategy card to nudge thinking sideways.",
        {
            "type": "object",
            "properties": {},
        },
    ),
    WHIMSICAL_THINKING: (
        "A delightful tool for exploring adjacent thoughts and unexpected insights through "
        "whimsical reasoning. Creates joyful connections and sparks wonder through playful "
        "exploration of ideas.",
        {
            "type": "object",
            "properties": {
                **_SEQUENCE_PROPERTIES,
                "delightLevel": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": 10,
                    "description": "Joy quotient of this whimsical thought (1-10)",
                },
                "unexpectedInsight": {
                    "type": "string",
                    "description": "The surprising connection or delightful realization",
                },
                "adjacentPaths": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Suggested tangent explorations that might spark joy",
                },
                "tonalShift": {
                    "type": "string",
                    "enum": list(STYLES),
                    "description": "The emotional tone of this whimsical exploration",
                },
                "emotionalResonance": {
                    "type": "string",
                    "description": "How this whimsy might make someone feel",
                },
                "connectionStyle": {
                    "type": "string",
                    "enum": list(CONNECTION_STYLES),
                    "description": "The style of connection being made",
                },
                "sparkDirection": {
                    "type": "string",
                    "description": "Where this delightful insight might lead next",
                },
                "isRevision": {
                    "type": "boolean",
                    "description": "Whether this revises previous whimsical thinking",
                },
                "revisesWhimsy": {
                    "type": "integer",
                    "minimum": 1,
                    "description": "Which whimsy number is being reconsidered with fresh delight",
                },
                **_BRANCH_PROPERTIES,
            },
            "required": list(_SEQUENCE_REQUIRED),
        },
    ),
    AUTO_WHIMSY: (
        "A lighter whimsical thinking tool: share the thought and progress, and a fixed "
        "sprinkle of insight, tangents, and feeling is added for you.",
        {
            "type": "object",
            "properties": {
                **_SEQUENCE_PROPERTIES,
                **_BRANCH_PROPERTIES,
            },
            "required": list(_SEQUENCE_REQUIRED),
        },
    ),
}

TOOL_SCHEMAS: Mapping[str, ToolSpec] = MappingProxyType(
    {
        name: ToolSpec(name=name, description=description, input_schema=_freeze(schema))
        for name, (description, schema) in _RAW_SCHEMAS.items()
    }
)

PROFILES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "full": (SET_LEVEL, GET_GUIDANCE, OBLIQUE_STRATEGY, WHIMSICAL_THINKING, AUTO_WHIMSY),
        "thinking": (WHIMSICAL_THINKING,),
        "auto": (AUTO_WHIMSY,),
    }
)


def list_tool_specs(profile: str = "full") -> list[ToolSpec]:
    """Return the tool specs enabled by a profile, in registration order."""

    try:
        names = PROFILES[profile]
    except KeyError as exc:
        raise ValueError(f"Unknown tool profile '{profile}'") from exc
    return [TOOL_SCHEMAS[name] for name in names]


def tool_listing(profile: str = "full") -> list[dict[str, Any]]:
    return [spec.to_listing() for spec in list_tool_specs(profile)]


def plain_schema(name: str) -> dict[str, Any]:
    """Return a mutable JSON Schema copy for a registered tool."""

    return _thaw(TOOL_SCHEMAS[name].input_schema)
