"""Process-wide whimsy session: level, style, thought history, and branches."""

from __future__ import annotations

from typing import Any

from .logging import get_logger
from .models import BranchLine, Seriousness, ThoughtRecord, WhimsyLevel

logger = get_logger(__name__)

OFF_GUIDANCE = (
    "Whimsy is off. Stay functional: answer clearly and directly, without playful "
    "asides, metaphors, or emoji."
)

GUIDANCE_TEMPLATES: dict[WhimsyLevel, str] = {
    WhimsyLevel.SUBTLE: (
        "Keep whimsy subtle. Let a light touch of delight show through word choice or a "
        "single gentle image, but keep the substance front and centre and never at the "
        "expense of accuracy."
    ),
    WhimsyLevel.OVERT: (
        "Be openly whimsical. Follow adjacent paths, reach for surprising metaphors, and "
        "let curiosity and play lead the way, while still delivering what was asked."
    ),
}


class SessionState:
    """Mutable session shared by every tool call in the process.

    Callers are expected to serialize access; the dispatcher holds a single
    lock around each call.
    """

    def __init__(
        self,
        *,
        initial_level: WhimsyLevel | int = WhimsyLevel.SUBTLE,
        default_style: str = "playful",
    ) -> None:
        self.current_level = WhimsyLevel(initial_level)
        self.current_style: str | None = None
        self.default_style = default_style
        self._history: list[ThoughtRecord] = []
        self._branches: dict[str, list[ThoughtRecord]] = {}

    def set_level(self, level: WhimsyLevel | int, style: str | None = None) -> None:
        self.current_level = WhimsyLevel(level)
        self.current_style = style
        logger.debug(
            "session.level.set",
            extra={"context": {"level": self.current_level.name, "style": style}},
        )

    @property
    def resolved_style(self) -> str:
        return self.current_style or self.default_style

    def get_guidance(self, context: str, seriousness: Seriousness | str | None = None) -> str:
        if self.current_level == WhimsyLevel.OFF:
            return OFF_GUIDANCE

        effective = self.effective_level(seriousness)
        lines = [
            GUIDANCE_TEMPLATES[effective],
            f"Style: {self.resolved_style}",
            f"Context: {context}",
        ]
        return "\n".join(lines)

    def effective_level(self, seriousness: Seriousness | str | None = None) -> WhimsyLevel:
        """Return the level actually applied once serious topics cap exuberance."""

        if seriousness is not None and Seriousness(seriousness) is Seriousness.HIGH:
            return min(self.current_level, WhimsyLevel.SUBTLE)
        return self.current_level

    def record_thought(self, record: ThoughtRecord) -> None:
        placement = record.placement
        if isinstance(placement, BranchLine):
            branch = self._branches.get(placement.branch_id)
            if branch is None:
                branch = list(self._history[: placement.origin_index])
                self._branches[placement.branch_id] = branch
                logger.debug(
                    "session.branch.created",
                    extra={
                        "context": {
                            "branch_id": placement.branch_id,
                            "origin_index": placement.origin_index,
                            "seeded": len(branch),
                        }
                    },
                )
            branch.append(record)
        else:
            self._history.append(record)

    def history(self) -> tuple[ThoughtRecord, ...]:
        return tuple(self._history)

    def branch(self, branch_id: str) -> tuple[ThoughtRecord, ...]:
        return tuple(self._branches.get(branch_id, ()))

    def branch_ids(self) -> list[str]:
        return list(self._branches)

    def snapshot(self) -> dict[str, Any]:
        return {
            "level": int(self.current_level),
            "style": self.current_style,
            "history_length": len(self._history),
            "branches": {branch_id: len(records) for branch_id, records in self._branches.items()},
        }
