"""Configuration loading utilities for the Whimsy Thinking MCP server."""

from __future__ import annotations

import argparse
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Sequence

from .models import STYLES

ENV_PREFIX = "WHIMSY_THINKING_"

BOOL_TRUE = {"1", "true", "t", "yes", "y", "on"}
BOOL_FALSE = {"0", "false", "f", "no", "n", "off"}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
TOOL_PROFILES = ("full", "thinking", "auto")

DEFAULT_STRATEGIES_FILE = Path(__file__).resolve().parent / "data" / "oblique_strategies.txt"
DEFAULT_INITIAL_LEVEL = 1
DEFAULT_STYLE = "playful"
DEFAULT_TOOL_PROFILE = "full"
DEFAULT_HTTP_HOST = "127.0.0.1"
DEFAULT_HTTP_PORT = 8766
DEFAULT_HTTP_PATH = "/mcp"
DEFAULT_METRICS_PATH = "/metrics"
DEFAULT_LOG_LEVEL = "INFO"

ENV_FIELD_MAP = {
    "config_file": f"{ENV_PREFIX}CONFIG_FILE",
    "strategies_file": f"{ENV_PREFIX}STRATEGIES_FILE",
    "initial_level": f"{ENV_PREFIX}INITIAL_LEVEL",
    "default_style": f"{ENV_PREFIX}DEFAULT_STYLE",
    "tool_profile": f"{ENV_PREFIX}TOOL_PROFILE",
    "color": f"{ENV_PREFIX}COLOR",
    "enable_stdio": f"{ENV_PREFIX}ENABLE_STDIO",
    "enable_http": f"{ENV_PREFIX}ENABLE_HTTP",
    "enable_metrics": f"{ENV_PREFIX}ENABLE_METRICS",
    "http_host": f"{ENV_PREFIX}HTTP_HOST",
    "http_port": f"{ENV_PREFIX}HTTP_PORT",
    "http_path": f"{ENV_PREFIX}HTTP_PATH",
    "metrics_path": f"{ENV_PREFIX}METRICS_PATH",
    "log_level": f"{ENV_PREFIX}LOG_LEVEL",
}

DEFAULT_VALUES: dict[str, Any] = {
    "config_file": None,
    "strategies_file": str(DEFAULT_STRATEGIES_FILE),
    "initial_level": DEFAULT_INITIAL_LEVEL,
    "default_style": DEFAULT_STYLE,
    "tool_profile": DEFAULT_TOOL_PROFILE,
    "color": False,
    "enable_stdio": True,
    "enable_http": False,
    "enable_metrics": False,
    "http_host": DEFAULT_HTTP_HOST,
    "http_port": DEFAULT_HTTP_PORT,
    "http_path": DEFAULT_HTTP_PATH,
    "metrics_path": DEFAULT_METRICS_PATH,
    "log_level": DEFAULT_LOG_LEVEL,
}


class ConfigError(ValueError):
    """Raised when configuration values are invalid."""


@dataclass(slots=True)
class Config:
    """Configuration model for the Whimsy Thinking MCP server."""

    strategies_file: Path
    initial_level: int
    default_style: str
    tool_profile: str
    color: bool
    enable_stdio: bool
    enable_http: bool
    enable_metrics: bool
    http_host: str
    http_port: int
    http_path: str
    metrics_path: str
    log_level: str
    config_file: Path | None = None


def load_config(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Load configuration from CLI arguments, environment variables, and optional file."""

    parser = _build_arg_parser()
    parsed = parser.parse_args(argv)
    cli_values = {k: v for k, v in vars(parsed).items() if v is not None}

    env_values = _extract_env_values(environ if environ is not None else os.environ)

    config_path_value = cli_values.get("config_file") or env_values.get("config_file")
    file_values = _load_config_file(config_path_value)

    merged: dict[str, Any] = {}
    _merge_layer(merged, DEFAULT_VALUES)
    _merge_layer(merged, file_values)
    _merge_layer(merged, env_values)
    _merge_layer(merged, cli_values)

    config = _normalize_values(merged, config_path_value)

    _maybe_write_config_file(config)
    return config


def hot_reload_config(*_args: Any, **_kwargs: Any) -> None:
    """Explicitly prevent runtime configuration reloading."""

    raise ConfigError("Configuration can only be loaded during startup. Restart the server to apply changes.")


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="whimsy-thinking",
        description="Whimsy Thinking MCP server configuration flags.",
        add_help=False,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("-h", "--help", action="help", help="Show this help message and exit.")
    parser.add_argument(
        "--config-file",
        dest="config_file",
        metavar="PATH",
        help="Path to a JSON configuration file (created on first run). Default: none.",
    )
    parser.add_argument(
        "--strategies-file",
        dest="strategies_file",
        metavar="PATH",
        help="Newline-delimited oblique strategy list (default: bundled list).",
    )
    parser.add_argument(
        "--initial-level",
        dest="initial_level",
        metavar="INT",
        help=f"Whimsy level at startup: 0 off, 1 subtle, 2 overt (default: {DEFAULT_INITIAL_LEVEL}).",
    )
    parser.add_argument(
        "--default-style",
        dest="default_style",
        metavar="STYLE",
        help=f"Style used when set_level omits one ({', '.join(STYLES)}; default: {DEFAULT_STYLE}).",
    )
    parser.add_argument(
        "--tool-profile",
        dest="tool_profile",
        metavar="PROFILE",
        help=f"Tool surface to register ({', '.join(TOOL_PROFILES)}; default: {DEFAULT_TOOL_PROFILE}).",
    )
    parser.add_argument(
        "--color",
        dest="color",
        metavar="BOOL",
        help="Emit ANSI colour in rendered tool output (default: false).",
    )

    parser.add_argument(
        "--enable-stdio",
        dest="enable_stdio",
        metavar="BOOL",
        help="Enable the MCP stdio transport (default: true).",
    )
    parser.add_argument(
        "--enable-http",
        dest="enable_http",
        metavar="BOOL",
        help="Enable the MCP streamable HTTP endpoint (default: false).",
    )
    parser.add_argument(
        "--enable-metrics",
        dest="enable_metrics",
        metavar="BOOL",
        help="Expose Prometheus metrics (requires --enable-http true; default: false).",
    )
    parser.add_argument(
        "--http-host",
        dest="http_host",
        metavar="HOST",
        help=f"HTTP listener host (default: {DEFAULT_HTTP_HOST}).",
    )
    parser.add_argument(
        "--http-port",
        dest="http_port",
        metavar="PORT",
        help=f"HTTP listener port (default: {DEFAULT_HTTP_PORT}).",
    )
    parser.add_argument(
        "--http-path",
        dest="http_path",
        metavar="PATH",
        help=f"HTTP RPC path for MCP requests (default: {DEFAULT_HTTP_PATH}).",
    )
    parser.add_argument(
        "--metrics-path",
        dest="metrics_path",
        metavar="PATH",
        help=f"Metrics endpoint path (default: {DEFAULT_METRICS_PATH}).",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        metavar="LEVEL",
        help=f"Log level ({', '.join(LOG_LEVELS)}; default: {DEFAULT_LOG_LEVEL}).",
    )

    return parser


def _extract_env_values(env: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for field, env_name in ENV_FIELD_MAP.items():
        if env_name in env:
            values[field] = env[env_name]
    return values


def _load_config_file(path_value: str | Path | None) -> dict[str, Any]:
    if not path_value:
        return {}
    path = _parse_path(path_value, field="config_file")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file is not valid JSON: {path}") from exc
    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a JSON object")
    result: dict[str, Any] = {k: v for k, v in data.items() if k in DEFAULT_VALUES}
    result["config_file"] = str(path)
    return result


def _merge_layer(base: MutableMapping[str, Any], overrides: Mapping[str, Any]) -> None:
    for key, value in overrides.items():
        if value is None:
            continue
        base[key] = value


def _normalize_values(values: Mapping[str, Any], config_path_value: str | Path | None) -> Config:
    strategies_file = _parse_path(values["strategies_file"], field="strategies_file")

    initial_level = _parse_int(values.get("initial_level", DEFAULT_VALUES["initial_level"]), field="initial_level", minimum=0, maximum=2)
    default_style = _parse_choice(values.get("default_style", DEFAULT_VALUES["default_style"]), field="default_style", choices=STYLES)
    tool_profile = _parse_choice(values.get("tool_profile", DEFAULT_VALUES["tool_profile"]), field="tool_profile", choices=TOOL_PROFILES)
    color = _parse_bool(values.get("color"), default=DEFAULT_VALUES["color"])

    enable_stdio = _parse_bool(values.get("enable_stdio"), default=DEFAULT_VALUES["enable_stdio"])
    enable_http = _parse_bool(values.get("enable_http"), default=DEFAULT_VALUES["enable_http"])
    enable_metrics = _parse_bool(values.get("enable_metrics"), default=DEFAULT_VALUES["enable_metrics"])
    if enable_metrics and not enable_http:
        raise ConfigError("enable_metrics requires enable_http to be true")

    http_host = str(values.get("http_host", DEFAULT_VALUES["http_host"]))
    http_port = _parse_int(values.get("http_port", DEFAULT_VALUES["http_port"]), field="http_port", minimum=0, maximum=65535)
    http_path = str(values.get("http_path", DEFAULT_VALUES["http_path"]))
    metrics_path = str(values.get("metrics_path", DEFAULT_VALUES["metrics_path"]))
    if http_path == metrics_path:
        raise ConfigError("http_path and metrics_path must be distinct")

    log_level = str(values.get("log_level", DEFAULT_VALUES["log_level"])).strip().upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(f"log_level must be one of: {', '.join(LOG_LEVELS)}")

    config_file_path = _parse_optional_path(config_path_value, field="config_file")

    return Config(
        strategies_file=strategies_file,
        initial_level=initial_level,
        default_style=default_style,
        tool_profile=tool_profile,
        color=color,
        enable_stdio=enable_stdio,
        enable_http=enable_http,
        enable_metrics=enable_metrics,
        http_host=http_host,
        http_port=http_port,
        http_path=http_path,
        metrics_path=metrics_path,
        log_level=log_level,
        config_file=config_file_path,
    )


def _maybe_write_config_file(config: Config) -> None:
    path = config.config_file
    if path is None:
        return

    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists():
        return

    payload = _serialize_config(config)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def _serialize_config(config: Config) -> dict[str, Any]:
    return {
        "config_file": str(config.config_file) if config.config_file else None,
        "strategies_file": str(config.strategies_file),
        "initial_level": config.initial_level,
        "default_style": config.default_style,
        "tool_profile": config.tool_profile,
        "color": config.color,
        "enable_stdio": config.enable_stdio,
        "enable_http": config.enable_http,
        "enable_metrics": config.enable_metrics,
        "http_host": config.http_host,
        "http_port": config.http_port,
        "http_path": config.http_path,
        "metrics_path": config.metrics_path,
        "log_level": config.log_level,
    }


def _parse_bool(value: Any, *, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in BOOL_TRUE:
            return True
        if lowered in BOOL_FALSE:
            return False
    raise ConfigError(f"Invalid boolean value: {value!r}")


def _parse_int(value: Any, *, field: str, minimum: int | None = None, maximum: int | None = None) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"Invalid integer for {field}: {value!r}")
    try:
        if isinstance(value, (int, float)):
            int_value = int(value)
        else:
            int_value = int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid integer for {field}: {value!r}") from exc

    if minimum is not None and int_value < minimum:
        raise ConfigError(f"{field} must be >= {minimum}")
    if maximum is not None and int_value > maximum:
        raise ConfigError(f"{field} must be <= {maximum}")
    return int_value


def _parse_choice(value: Any, *, field: str, choices: Sequence[str]) -> str:
    normalized = str(value).strip().lower()
    if normalized not in choices:
        raise ConfigError(f"{field} must be one of: {', '.join(choices)}")
    return normalized


def _parse_path(value: Any, *, field: str) -> Path:
    if isinstance(value, Path):
        return value.expanduser().resolve()
    if not isinstance(value, str):
        raise ConfigError(f"Invalid path for {field}: {value!r}")
    stripped = value.strip()
    if not stripped:
        raise ConfigError(f"{field} may not be empty")
    return Path(stripped).expanduser().resolve()


def _parse_optional_path(value: Any, *, field: str) -> Path | None:
    if value in (None, ""):
        return None
    return _parse_path(value, field=field)
