"""
Configuration management for the Cricket Scoring Engine.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


class MatchFormat(Enum):
    T20 = "t20"
    ODI = "odi"
    T10 = "t10"


@dataclass(frozen=True)
class StorageConfig:
    """Where match snapshots are persisted."""
    data_dir: Path = field(default_factory=lambda: Path("data/matches"))


@dataclass(frozen=True)
class ScoringConfig:
    """Top-level scoring service configuration."""
    storage: StorageConfig = field(default_factory=StorageConfig)
    history_limit: Optional[int] = None  # None = unbounded undo history
    log_level: str = "INFO"
    default_format: MatchFormat = MatchFormat.T20

    @classmethod
    def from_env(cls) -> "ScoringConfig":
        """Load configuration from environment variables."""
        limit = int(os.getenv("CRICKET_HISTORY_LIMIT", "0") or 0)
        return cls(
            storage=StorageConfig(
                data_dir=Path(os.getenv("CRICKET_DATA_DIR", "data/matches")),
            ),
            history_limit=limit if limit > 0 else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            default_format=MatchFormat(
                os.getenv("CRICKET_DEFAULT_FORMAT", "t20").lower()
            ),
        )


# Laws-of-the-game defaults
DEFAULT_BALLS_PER_OVER = 6
DEFAULT_PLAYERS_PER_SIDE = 11
MIN_PLAYERS_PER_SIDE = 2
MAX_PLAYERS_PER_SIDE = 11

BOUNDARY_FOUR = 4
BOUNDARY_SIX = 6

# Format-specific constants
FORMAT_OVERS: dict[MatchFormat, int] = {
    MatchFormat.T20: 20,
    MatchFormat.ODI: 50,
    MatchFormat.T10: 10,
}
