"""Package loggers for the whimsy server.

Everything logs under ``whimsy_thinking.*`` through FastMCP's rich handler,
which writes to stderr; stdout belongs to the stdio JSON-RPC stream. Records
carry a dotted event name and an ``extra={"context": {...}}`` payload.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from fastmcp.utilities.logging import configure_logging as _fastmcp_configure_logging

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_PACKAGE_LOGGER_NAME = "whimsy_thinking"
_CONFIGURED = False


def _qualify(name: str | None) -> str:
    if not name or name == "__main__":
        return _PACKAGE_LOGGER_NAME
    if name == _PACKAGE_LOGGER_NAME or name.startswith(f"{_PACKAGE_LOGGER_NAME}."):
        return name
    return f"{_PACKAGE_LOGGER_NAME}.{name}"


def configure_logging(level: LogLevel | int = "INFO", **rich_kwargs: Any) -> logging.Logger:
    """Attach FastMCP's stderr handler to the ``whimsy_thinking`` logger.

    Called once with the default level before configuration is parsed, so
    config errors are reported, and again with the configured ``log_level``.
    """

    global _CONFIGURED

    logger = logging.getLogger(_PACKAGE_LOGGER_NAME)
    _fastmcp_configure_logging(level=level, logger=logger, **rich_kwargs)

    _CONFIGURED = True
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a child of the package logger, configuring defaults on first use."""

    if not _CONFIGURED:
        configure_logging()
    return logging.getLogger(_qualify(name))


def tool_context(tool: str, **fields: Any) -> dict[str, Any]:
    """Build the ``extra`` mapping for a record about one tool call."""

    return {"context": {"tool": tool, **fields}}
