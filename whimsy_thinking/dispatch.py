"""Tool-call dispatch: lookup, validation, handling, and envelope wrapping."""

from __future__ import annotations

import threading
from typing import Any, Callable, Mapping

from . import metrics
from .errors import INTERNAL_ERROR, UNKNOWN_TOOL, WhimsyThinkingError
from .formatting import render_auto_thought, render_level_change, render_thought
from .logging import get_logger, tool_context
from .models import GuidanceRequest, SetLevelRequest, ThoughtRecord, ToolCallRequest, ToolResponse
from .schemas import (
    AUTO_WHIMSY,
    GET_GUIDANCE,
    OBLIQUE_STRATEGY,
    PROFILES,
    SET_LEVEL,
    WHIMSICAL_THINKING,
    tool_listing,
)
from .session import SessionState
from .strategies import StrategyDeck
from .validation import ValidatedArguments, check_sequence, validate_arguments

logger = get_logger(__name__)

SNAG_PREFIX = "Oh dear! Our whimsical journey hit a small snag: "

Handler = Callable[[ValidatedArguments], str]


class ToolDispatcher:
    """Route tool calls to handlers and always answer with a ``ToolResponse``.

    A single re-entrant lock serializes every call, so the shared session is
    never mutated by two calls at once even under a threaded transport.
    """

    def __init__(
        self,
        session: SessionState,
        deck: StrategyDeck,
        *,
        profile: str = "full",
        color: bool = False,
    ) -> None:
        if profile not in PROFILES:
            raise ValueError(f"Unknown tool profile '{profile}'")
        self.session = session
        self.deck = deck
        self.profile = profile
        self.color = color
        self._lock = threading.RLock()
        available: dict[str, Handler] = {
            SET_LEVEL: self._handle_set_level,
            GET_GUIDANCE: self._handle_get_guidance,
            OBLIQUE_STRATEGY: self._handle_oblique_strategy,
            WHIMSICAL_THINKING: self._handle_whimsical_thinking,
            AUTO_WHIMSY: self._handle_auto_whimsy,
        }
        self._handlers = {name: available[name] for name in PROFILES[profile]}

    @property
    def tool_names(self) -> tuple[str, ...]:
        return tuple(self._handlers)

    def list_tools(self) -> list[dict[str, Any]]:
        return tool_listing(self.profile)

    def call(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolResponse:
        return self.handle(ToolCallRequest(name=name, arguments=arguments if arguments is not None else {}))

    def handle(self, request: ToolCallRequest) -> ToolResponse:
        handler = self._handlers.get(request.name)
        metrics.record_operation(request.name)
        if handler is None:
            metrics.record_error(UNKNOWN_TOOL)
            logger.info("dispatch.unknown_tool", extra=tool_context(request.name))
            return ToolResponse.failure(f"Unknown tool: {request.name}")

        try:
            with self._lock:
                validated = validate_arguments(
                    request.name,
                    request.arguments,
                    default_style=self.session.default_style,
                )
                text = handler(validated)
        except WhimsyThinkingError as exc:
            metrics.record_error(exc.code)
            logger.info("dispatch.tool_failed", extra=tool_context(request.name, **exc.to_dict()))
            return ToolResponse.failure(self._failure_text(request.name, exc.message))
        except Exception as exc:
            metrics.record_error(INTERNAL_ERROR)
            logger.exception("dispatch.tool_crashed", extra=tool_context(request.name))
            return ToolResponse.failure(self._failure_text(request.name, str(exc) or type(exc).__name__))

        return ToolResponse.success(text)

    def _failure_text(self, tool_name: str, message: str) -> str:
        if tool_name in (WHIMSICAL_THINKING, AUTO_WHIMSY):
            return f"{SNAG_PREFIX}{message}"
        return message

    def _handle_set_level(self, request: SetLevelRequest) -> str:
        self.session.set_level(request.level, request.style)
        return render_level_change(self.session.current_level, self.session.resolved_style, color=self.color)

    def _handle_get_guidance(self, request: GuidanceRequest) -> str:
        return self.session.get_guidance(request.context, request.seriousness)

    def _handle_oblique_strategy(self, _request: None) -> str:
        return self.deck.pick()

    def _handle_whimsical_thinking(self, record: ThoughtRecord) -> str:
        check_sequence(record)
        self.session.record_thought(record)
        return render_thought(record, color=self.color)

    def _handle_auto_whimsy(self, record: ThoughtRecord) -> str:
        check_sequence(record)
        self.session.record_thought(record)
        return render_auto_thought(record, color=self.color)
