"""
Match snapshot persistence.

Keeps the latest full MatchState per match id as a JSON document on
disk. Every snapshot is complete, so resuming a match is a single load
with no action replay.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from cricket_scoring.state.codec import state_from_dict, state_to_dict
from cricket_scoring.state.match_state import MatchState

logger = logging.getLogger(__name__)


class SnapshotStore:
    """One JSON file per match under ``data_dir``."""

    def __init__(self, data_dir: Path | str):
        self._dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._dir

    def _path(self, match_id: str) -> Path:
        return self._dir / f"{match_id}.json"

    def save(self, state: MatchState) -> Path:
        """Write the snapshot atomically, replacing any previous one."""
        if not state.match_id:
            raise ValueError("Cannot persist a match state without a match_id")

        self._dir.mkdir(parents=True, exist_ok=True)
        path = self._path(state.match_id)
        fd, tmp = tempfile.mkstemp(dir=self._dir, prefix=f".{state.match_id}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(state_to_dict(state), f, indent=2)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

        logger.debug(
            "Saved %s: %d/%d",
            state.match_id,
            state.current.score,
            state.current.wickets,
        )
        return path

    def load(self, match_id: str) -> Optional[MatchState]:
        path = self._path(match_id)
        if not path.exists():
            logger.warning("No snapshot for match %s in %s", match_id, self._dir)
            return None
        with open(path, "r", encoding="utf-8") as f:
            state = state_from_dict(json.load(f))
        logger.info("Loaded match %s", match_id)
        return state

    def exists(self, match_id: str) -> bool:
        return self._path(match_id).exists()

    def delete(self, match_id: str) -> bool:
        path = self._path(match_id)
        if not path.exists():
            return False
        path.unlink()
        logger.info("Deleted match %s", match_id)
        return True

    def list_matches(self) -> list[str]:
        if not self._dir.exists():
            return []
        return sorted(p.stem for p in self._dir.glob("*.json"))
