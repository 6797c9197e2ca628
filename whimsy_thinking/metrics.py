from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from threading import RLock
from time import monotonic
from typing import Mapping

_DEFAULT_OPERATIONS = ("set_level", "get_guidance", "oblique_strategy", "whimsical_thinking", "auto_whimsy")

_registry_lock = RLock()
_registry: "MetricsRegistry | None" = None


@dataclass(frozen=True)
class MetricsSnapshot:
    """Immutable snapshot of the current metrics state."""

    operations: Mapping[str, int]
    errors: Mapping[str, int]
    uptime_seconds: float


class MetricsRegistry:
    """Thread-safe registry storing tool-call counters for Prometheus export."""

    __slots__ = ("_operations", "_errors", "_lock", "_started_at")

    def __init__(self) -> None:
        self._operations: Counter[str] = Counter()
        self._errors: Counter[str] = Counter()
        self._lock = RLock()
        self._started_at = monotonic()

    def record_operation(self, name: str, *, count: int = 1) -> None:
        if count <= 0:
            return
        key = name.strip().lower()
        if not key:
            return
        with self._lock:
            self._operations[key] += count

    def record_error(self, code: str, *, count: int = 1) -> None:
        if count <= 0:
            return
        key = code.strip().upper()
        if not key:
            return
        with self._lock:
            self._errors[key] += count

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            operations: dict[str, int] = {name: int(self._operations.get(name, 0)) for name in _DEFAULT_OPERATIONS}
            for name, value in self._operations.items():
                if name not in operations:
                    operations[name] = int(value)
            errors = {code: int(value) for code, value in self._errors.items()}
            uptime = max(monotonic() - self._started_at, 0.0)
        return MetricsSnapshot(operations=operations, errors=errors, uptime_seconds=uptime)


def install_registry(registry: MetricsRegistry | None) -> None:
    """Install the active metrics registry (or disable metrics when None)."""

    with _registry_lock:
        global _registry
        _registry = registry


def get_registry_optional() -> MetricsRegistry | None:
    with _registry_lock:
        return _registry


def record_operation(name: str, *, count: int = 1) -> None:
    registry = get_registry_optional()
    if registry is not None:
        registry.record_operation(name, count=count)


def record_error(code: str, *, count: int = 1) -> None:
    registry = get_registry_optional()
    if registry is not None:
        registry.record_error(code, count=count)


def format_prometheus(snapshot: MetricsSnapshot, *, history_current: int, branches_current: int) -> str:
    """Render metrics using Prometheus exposition format (text, version 0.0.4)."""

    lines: list[str] = []

    lines.append("# HELP whimsy_thinking_ops_total Total tool calls handled by tool name.")
    lines.append("# TYPE whimsy_thinking_ops_total counter")
    for name in sorted(snapshot.operations):
        value = snapshot.operations[name]
        lines.append(f'whimsy_thinking_ops_total{{tool="{name}"}} {value}')

    lines.append("# HELP whimsy_thinking_errors_total Total error responses, grouped by error code.")
    lines.append("# TYPE whimsy_thinking_errors_total counter")
    if snapshot.errors:
        for code in sorted(snapshot.errors):
            value = snapshot.errors[code]
            lines.append(f'whimsy_thinking_errors_total{{code="{code}"}} {value}')
    else:
        lines.append('whimsy_thinking_errors_total{code="none"} 0')

    lines.append("# HELP whimsy_thinking_history_current Thoughts recorded on the main line.")
    lines.append("# TYPE whimsy_thinking_history_current gauge")
    lines.append(f"whimsy_thinking_history_current {history_current}")

    lines.append("# HELP whimsy_thinking_branches_current Branches created in this session.")
    lines.append("# TYPE whimsy_thinking_branches_current gauge")
    lines.append(f"whimsy_thinking_branches_current {branches_current}")

    lines.append("# HELP whimsy_thinking_uptime_seconds Server uptime in seconds.")
    lines.append("# TYPE whimsy_thinking_uptime_seconds gauge")
    lines.append(f"whimsy_thinking_uptime_seconds {snapshot.uptime_seconds:.6f}")

    return "\n".join(lines) + "\n"
