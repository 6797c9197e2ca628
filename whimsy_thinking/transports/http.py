"""Streamable HTTP transport wiring."""

from __future__ import annotations

from dataclasses import dataclass

from fastmcp import FastMCP

from ..logging import get_logger

logger = get_logger(__name__)


@dataclass(slots=True)
class HttpTransportConfig:
    """Configuration for the HTTP transport layer."""

    host: str
    port: int
    path: str
    show_banner: bool = True


def normalise_path(path: str, *, default: str = "/mcp") -> str:
    if not path:
        return default
    normalised = path if path.startswith("/") else f"/{path}"
    if len(normalised) > 1 and normalised.endswith("/"):
        normalised = normalised.rstrip("/")
    return normalised or default


def run_http(server: FastMCP, config: HttpTransportConfig) -> None:
    """Serve MCP over streamable HTTP using FastMCP's uvicorn runner."""

    path = normalise_path(config.path)
    context = {"host": config.host, "port": config.port, "path": path}
    logger.info("transport.http.start", extra={"context": context})
    try:
        server.run(
            transport="http",
            host=config.host,
            port=config.port,
            path=path,
            show_banner=config.show_banner,
        )
    except KeyboardInterrupt:
        logger.info("transport.http.interrupted", extra={"context": context})
        raise
    except Exception:  # pragma: no cover
        logger.exception("transport.http.failed", extra={"context": context})
        raise
    else:
        logger.info("transport.http.stop", extra={"context": context})
