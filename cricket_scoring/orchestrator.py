"""
Cricket Scoring Engine Orchestrator.

Command line entry point around the scoring session:
Match Config → Actions → Match Engine → Snapshot Store → Scorecard

Supports three modes:
1. Demo: score a synthetic match with seeded random outcomes
2. Replay: apply a JSON-lines action log to a match config
3. Show: print the scorecard of a persisted match

Usage:
    python -m cricket_scoring.orchestrator --demo --seed 7
    python -m cricket_scoring.orchestrator --replay match.json actions.jsonl --save
    python -m cricket_scoring.orchestrator --show final_2024
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from cricket_scoring.config import FORMAT_OVERS, ScoringConfig

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("cricket_scoring.orchestrator")


def run_demo(config: ScoringConfig, seed: Optional[int] = None, save: bool = False) -> int:
    """Score a synthetic match and print the scorecard."""
    from cricket_scoring.data.snapshot_store import SnapshotStore
    from cricket_scoring.reporting.scorecard import render_scorecard
    from cricket_scoring.simulation import demo_config, simulate_match

    logger.info("=" * 60)
    logger.info("CRICKET SCORING ENGINE - DEMO MODE")
    logger.info("=" * 60)
    logger.info("Format: %s | Seed: %s", config.default_format.value, seed)

    store = SnapshotStore(config.storage.data_dir) if save else None
    match_id = f"demo_{seed}" if seed is not None else "demo"
    session = simulate_match(
        demo_config(overs=FORMAT_OVERS[config.default_format]),
        seed=seed,
        match_id=match_id,
        store=store,
    )

    print("\n" + render_scorecard(session.state))
    if store is not None:
        logger.info("Saved %s to %s", match_id, store.data_dir)
    return 0


def run_replay(
    config: ScoringConfig,
    config_path: str,
    actions_path: str,
    save: bool = False,
) -> int:
    """Apply an action log to a match config and print the scorecard."""
    from cricket_scoring.data.action_log import load_actions, load_match_config
    from cricket_scoring.data.snapshot_store import SnapshotStore
    from cricket_scoring.reporting.scorecard import render_scorecard
    from cricket_scoring.session import ScoringSession
    from cricket_scoring.state.match_state import initial_state
    from cricket_scoring.validation import ActionRejected

    logger.info("=" * 60)
    logger.info("CRICKET SCORING ENGINE - REPLAY MODE")
    logger.info("=" * 60)

    try:
        match_config = load_match_config(Path(config_path))
        actions = load_actions(Path(actions_path))
    except (OSError, ValueError) as e:
        logger.error("Cannot load match: %s", e)
        return 1

    match_id = Path(config_path).stem
    store = SnapshotStore(config.storage.data_dir) if save else None
    session = ScoringSession(
        initial_state(match_config, match_id=match_id),
        store=store,
        history_limit=config.history_limit,
    )

    for i, action in enumerate(actions, start=1):
        try:
            session.dispatch(action)
        except ActionRejected as e:
            logger.error("Action %d (%s) rejected: %s", i, action.type, e)
            return 1

    state = session.state
    logger.info(
        "Replayed %d actions: %d/%d, %s",
        len(actions), state.current.score, state.current.wickets, state.result_text,
    )
    print("\n" + render_scorecard(state))
    return 0


def run_show(config: ScoringConfig, match_id: str) -> int:
    """Print the scorecard of a saved match."""
    from cricket_scoring.data.snapshot_store import SnapshotStore
    from cricket_scoring.reporting.scorecard import render_scorecard

    store = SnapshotStore(config.storage.data_dir)
    state = store.load(match_id)
    if state is None:
        saved = store.list_matches()
        logger.error("Match %s not found. Saved matches: %s", match_id, ", ".join(saved) or "none")
        return 1

    print(render_scorecard(state))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Cricket Scoring Engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m cricket_scoring.orchestrator --demo --seed 7
  python -m cricket_scoring.orchestrator --replay match.json actions.jsonl --save
  python -m cricket_scoring.orchestrator --show final_2024
        """,
    )

    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--demo", action="store_true", help="Score a synthetic match")
    mode.add_argument("--replay", nargs=2, metavar=("CONFIG", "ACTIONS"), help="Replay an action log")
    mode.add_argument("--show", metavar="MATCH_ID", help="Print a saved match scorecard")

    parser.add_argument("--seed", type=int, help="Random seed for --demo")
    parser.add_argument("--save", action="store_true", help="Persist snapshots to the data directory")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    config = ScoringConfig.from_env()
    logging.getLogger().setLevel(logging.DEBUG if args.verbose else config.log_level.upper())

    if args.demo:
        return run_demo(config, seed=args.seed, save=args.save)
    if args.replay:
        return run_replay(config, args.replay[0], args.replay[1], save=args.save)
    return run_show(config, args.show)


if __name__ == "__main__":
    sys.exit(main())
