"""FastMCP server entrypoint for the Whimsy Thinking MCP service."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from fastmcp import FastMCP
from fastmcp.exceptions import NotFoundError, ToolError
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from . import metrics
from .config import Config, ConfigError, load_config
from .dispatch import ToolDispatcher
from .errors import CONFIG_ERROR, WhimsyThinkingError
from .logging import configure_logging, get_logger, tool_context
from .schemas import list_tool_specs, plain_schema
from .session import SessionState
from .strategies import StrategyDeck
from .transports import HttpTransportConfig, run_http, run_stdio
from .transports.http import normalise_path

LOGGER = get_logger(__name__)
SERVER = FastMCP(name="whimsy-thinking")


@dataclass(slots=True)
class AppState:
    config: Config
    session: SessionState
    deck: StrategyDeck
    dispatcher: ToolDispatcher
    tools: dict[str, Tool] = field(default_factory=dict)


APP_STATE: AppState | None = None
_METRICS_ROUTE_NAME = "__whimsy_thinking_metrics__"


class DispatchedTool(Tool):
    """FastMCP tool whose arguments and execution are owned by the dispatcher.

    Error envelopes are raised as ``ToolError`` so FastMCP answers with an
    ``isError`` result carrying the same text.
    """

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        try:
            dispatcher = get_dispatcher()
        except WhimsyThinkingError as exc:
            raise ToolError(exc.message) from exc
        response = dispatcher.call(self.name, arguments)
        if response.is_error:
            raise ToolError(response.text)
        return ToolResult(content=[TextContent(type="text", text=item.text) for item in response.content])


def get_dispatcher() -> ToolDispatcher:
    if APP_STATE is None:
        raise WhimsyThinkingError(CONFIG_ERROR, "Server is not initialised")
    return APP_STATE.dispatcher


def get_session() -> SessionState:
    if APP_STATE is None:
        raise WhimsyThinkingError(CONFIG_ERROR, "Server is not initialised")
    return APP_STATE.session


def _register_tools(profile: str) -> dict[str, Tool]:
    registered: dict[str, Tool] = {}
    for spec in list_tool_specs(profile):
        tool = DispatchedTool(
            name=spec.name,
            description=spec.description,
            parameters=plain_schema(spec.name),
        )
        SERVER.add_tool(tool)
        registered[spec.name] = tool
    return registered


def _unregister_tools(names: list[str]) -> None:
    for name in names:
        try:
            SERVER.remove_tool(name)
        except NotFoundError:  # pragma: no cover - already removed
            LOGGER.debug("tool.unregister.missing", extra=tool_context(name))


def _remove_metrics_route() -> None:
    routes = getattr(SERVER, "_additional_http_routes", None)
    if not routes:
        return
    routes[:] = [route for route in routes if getattr(route, "name", None) != _METRICS_ROUTE_NAME]


def _register_metrics_route(path: str) -> None:
    cleaned = normalise_path(path, default="/metrics")
    _remove_metrics_route()

    @SERVER.custom_route(cleaned, methods=["GET"], name=_METRICS_ROUTE_NAME, include_in_schema=False)
    async def metrics_endpoint(_request: Request) -> Response:
        registry = metrics.get_registry_optional()
        if registry is None or APP_STATE is None:
            return PlainTextResponse("metrics unavailable\n", status_code=503)
        snapshot = APP_STATE.session.snapshot()
        body = metrics.format_prometheus(
            registry.snapshot(),
            history_current=snapshot["history_length"],
            branches_current=len(snapshot["branches"]),
        )
        return PlainTextResponse(body, media_type="text/plain; version=0.0.4")


def initialize_app(config: Config) -> None:
    """Initialise the session, dispatcher, and tool registrations."""

    global APP_STATE
    if APP_STATE is not None:
        shutdown_app()

    session = SessionState(initial_level=config.initial_level, default_style=config.default_style)
    deck = StrategyDeck(config.strategies_file)
    dispatcher = ToolDispatcher(session, deck, profile=config.tool_profile, color=config.color)
    metrics.install_registry(metrics.MetricsRegistry())
    tools = _register_tools(config.tool_profile)
    if config.enable_metrics:
        _register_metrics_route(config.metrics_path)
    else:
        _remove_metrics_route()
    APP_STATE = AppState(config=config, session=session, deck=deck, dispatcher=dispatcher, tools=tools)
    LOGGER.info(
        "app.initialized",
        extra={
            "context": {
                "tool_profile": config.tool_profile,
                "tools": list(tools),
                "level": session.current_level.name,
                "strategies_file": str(config.strategies_file),
            }
        },
    )


def shutdown_app() -> None:
    """Unregister tools and clear application state."""

    global APP_STATE
    if APP_STATE is None:
        return
    _unregister_tools(list(APP_STATE.tools))
    metrics.install_registry(None)
    _remove_metrics_route()
    APP_STATE = None


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for running the Whimsy Thinking server."""

    configure_logging()
    try:
        config = load_config(argv)
    except ConfigError as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        raise SystemExit(2) from exc

    configure_logging(config.log_level)
    LOGGER.info(
        "Configuration loaded",
        extra={
            "context": {
                "tool_profile": config.tool_profile,
                "initial_level": config.initial_level,
                "enable_stdio": config.enable_stdio,
                "enable_http": config.enable_http,
                "enable_metrics": config.enable_metrics,
            }
        },
    )

    initialize_app(config)
    try:
        if config.enable_stdio:
            run_stdio(SERVER)
        else:
            LOGGER.info("Stdio transport disabled")

        if config.enable_http:
            http_config = HttpTransportConfig(
                host=config.http_host,
                port=config.http_port,
                path=config.http_path,
            )
            run_http(SERVER, http_config)
        else:
            LOGGER.info("HTTP transport disabled")
    except KeyboardInterrupt:
        LOGGER.info("Interrupted; shutting down")
    finally:
        shutdown_app()


if __name__ == "__main__":  # pragma: no cover - manual invocation only
    main()
