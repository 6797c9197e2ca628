"""Oblique strategy deck read from a newline-delimited text file."""

from __future__ import annotations

import random
from pathlib import Path

from .errors import EMPTY_STRATEGY_SET, SOURCE_UNAVAILABLE, WhimsyThinkingError
from .logging import get_logger

logger = get_logger(__name__)


class StrategyDeck:
    """Draw strategies uniformly at random from an external list.

    The file is re-read on every draw so edits take effect without a restart.
    Every non-blank line, trimmed, is one strategy.
    """

    def __init__(self, path: Path | str, *, rng: random.Random | None = None) -> None:
        self.path = Path(path)
        self._rng = rng or random.Random()

    def load(self) -> list[str]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise WhimsyThinkingError(
                SOURCE_UNAVAILABLE,
                f"Oblique strategies file not found: {self.path}",
                details={"path": str(self.path)},
            ) from exc
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(
                "strategies.read_failed",
                extra={"context": {"path": str(self.path), "error": str(exc)}},
            )
            raise WhimsyThinkingError(
                SOURCE_UNAVAILABLE,
                f"Oblique strategies file could not be read: {self.path}",
                details={"path": str(self.path)},
            ) from exc

        strategies = []
        for line in text.splitlines():
            candidate = line.strip()
            if candidate:
                strategies.append(candidate)
        return strategies

    def pick(self) -> str:
        strategies = self.load()
        if not strategies:
            raise WhimsyThinkingError(
                EMPTY_STRATEGY_SET,
                f"Oblique strategies file has no strategies: {self.path}",
                details={"path": str(self.path)},
            )
        return self._rng.choice(strategies)
