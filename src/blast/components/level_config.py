from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from blast.constants import (
    GRID_COLS,
    GRID_ROWS,
    MAX_MOVES,
    MAX_PALETTE_SIZE,
    MIN_BOARD_CELLS,
    MIN_GRID_SIZE,
    MIN_PALETTE_SIZE,
    PALETTE_SIZE,
)
from blast.errors import ConfigError


@dataclass(frozen=True, slots=True)
class LevelConfig:
    """Immutable level parameters: grid size, palette size and move budget."""

    rows: int = GRID_ROWS
    cols: int = GRID_COLS
    palette_size: int = PALETTE_SIZE
    max_moves: int = MAX_MOVES

    def __post_init__(self) -> None:
        for name in ("rows", "cols"):
            value = getattr(self, name)
            if value < MIN_GRID_SIZE:
                raise ConfigError(f"{name} must be at least {MIN_GRID_SIZE}, got {value}")
        if self.rows * self.cols < MIN_BOARD_CELLS:
            raise ConfigError(f"board needs at least {MIN_BOARD_CELLS} cells, got {self.rows}x{self.cols}")
        if not MIN_PALETTE_SIZE <= self.palette_size <= MAX_PALETTE_SIZE:
            raise ConfigError(
                f"palette_size must be between {MIN_PALETTE_SIZE} and {MAX_PALETTE_SIZE}, got {self.palette_size}"
            )
        if self.max_moves < 1:
            raise ConfigError(f"max_moves must be positive, got {self.max_moves}")

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "LevelConfig":
        try:
            return cls(
                rows=int(payload.get("rows", GRID_ROWS)),
                cols=int(payload.get("cols", GRID_COLS)),
                palette_size=int(payload.get("palette_size", PALETTE_SIZE)),
                max_moves=int(payload.get("max_moves", MAX_MOVES)),
            )
        except (TypeError, ValueError) as exc:
            if isinstance(exc, ConfigError):
                raise
            raise ConfigError(f"invalid level definition: {exc}") from exc


def load_level_config(path: Path | str) -> LevelConfig:
    """Read a level definition from a JSON file."""
    with Path(path).open("r", encoding="utf-8") as handle:
        try:
            payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"{path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"{path}: expected a JSON object")
    return LevelConfig.from_dict(payload)
