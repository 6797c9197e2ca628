from __future__ import annotations

from typing import Any

from whimsy_thinking.transports.http import HttpTransportConfig, normalise_path, run_http


class _DummyServer:
    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []

    def run(self, **kwargs: Any) -> None:
        self.calls.append(kwargs)


def test_normalise_path() -> None:
    assert normalise_path("") == "/mcp"
    assert normalise_path("rpc") == "/rpc"
    assert normalise_path("/rpc/") == "/rpc"
    assert normalise_path("/") == "/"
    assert normalise_path("", default="/metrics") == "/metrics"


def test_run_http_invokes_fastmcp() -> None:
    dummy = _DummyServer()

    run_http(dummy, HttpTransportConfig(host="0.0.0.0", port=9001, path="whimsy/", show_banner=False))

    assert dummy.calls == [
        {"transport": "http", "host": "0.0.0.0", "port": 9001, "path": "/whimsy", "show_banner": False}
    ]
