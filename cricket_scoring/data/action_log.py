"""
Match config and action log loader.

A scored match can be stored as a JSON config plus a JSON-lines file of
actions, one per line in the order they were applied, e.g.:

    {"type": "BALL_EVENT", "runs": 4}
    {"type": "BALL_EVENT", "runs": 1, "is_extra": true, "extra_type": "wd"}
    {"type": "WICKET", "dismissal_type": "Caught", "new_batsman_id": "t1p3", "fielder_id": "t2p5"}
    {"type": "CHANGE_BOWLER", "new_bowler_id": "t2p9"}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable

from cricket_scoring.data.match_config import MatchConfig
from cricket_scoring.state.actions import Action
from cricket_scoring.state.codec import action_from_dict, action_to_dict, config_from_dict

logger = logging.getLogger(__name__)


def load_match_config(path: Path) -> MatchConfig:
    """Load a MatchConfig from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    config = config_from_dict(data)
    logger.info(
        "Loaded config %s: %s vs %s, %d overs",
        Path(path).name, config.team1.name, config.team2.name, config.overs_per_innings,
    )
    return config


def load_actions(path: Path) -> list[Action]:
    """Load actions from a JSON-lines file.

    Blank lines and lines starting with ``#`` are skipped.

    Raises:
        ValueError: a line is not valid JSON or not a known action
    """
    actions: list[Action] = []
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            try:
                actions.append(action_from_dict(json.loads(line)))
            except ValueError as e:
                raise ValueError(f"{Path(path).name}:{lineno}: {e}") from e

    logger.info("Loaded %d actions from %s", len(actions), Path(path).name)
    return actions


def dump_actions(actions: Iterable[Action], path: Path) -> int:
    """Write actions as JSON lines. Returns the number written."""
    count = 0
    with open(path, "w", encoding="utf-8") as f:
        for action in actions:
            f.write(json.dumps(action_to_dict(action)) + "\n")
            count += 1
    return count
