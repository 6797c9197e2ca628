"""Stdio transport: the default way MCP clients launch the whimsy server."""

from __future__ import annotations

from fastmcp import FastMCP

from ..logging import get_logger

logger = get_logger(__name__)


def run_stdio(server: FastMCP, *, show_banner: bool = True) -> None:
    """Serve JSON-RPC over stdin/stdout until the client closes the stream.

    Blocks for the lifetime of the session. ``KeyboardInterrupt`` is logged
    and re-raised so ``main`` can shut the app down and exit with status 0.
    """

    context = {"server": getattr(server, "name", None), "show_banner": bool(show_banner)}
    logger.info("transport.stdio.start", extra={"context": context})
    try:
        server.run(transport="stdio", show_banner=show_banner)
    except KeyboardInterrupt:
        logger.info("transport.stdio.interrupted", extra={"context": context})
        raise
    except Exception:
        logger.exception("transport.stdio.failed", extra={"context": context})
        raise
    logger.info("transport.stdio.closed", extra={"context": context})
