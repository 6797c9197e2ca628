from __future__ import annotations

import httpx
import pytest

from whimsy_thinking import load_config
from whimsy_thinking.server import SERVER, get_dispatcher, initialize_app, shutdown_app


@pytest.mark.asyncio
async def test_metrics_endpoint_reports_tool_calls() -> None:
    argv = ["--enable-stdio", "false", "--enable-http", "true", "--enable-metrics", "true"]
    config = load_config(argv=argv, environ={})
    initialize_app(config)
    try:
        dispatcher = get_dispatcher()
        dispatcher.call("set_level", {"level": 2})
        dispatcher.call("set_level", {"level": 42})

        app = SERVER.http_app(path=config.http_path)
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            response = await client.get(config.metrics_path)

        assert response.status_code == 200
        assert 'whimsy_thinking_ops_total{tool="set_level"} 2' in response.text
        assert 'whimsy_thinking_errors_total{code="OUT_OF_RANGE"} 1' in response.text
        assert "whimsy_thinking_history_current 0" in response.text
    finally:
        shutdown_app()


@pytest.mark.asyncio
async def test_metrics_route_absent_when_disabled() -> None:
    config = load_config(argv=["--enable-stdio", "false", "--enable-http", "true"], environ={})
    initialize_app(config)
    try:
        app = SERVER.http_app(path=config.http_path)
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            response = await client.get("/metrics")

        assert response.status_code == 404
    finally:
        shutdown_app()
