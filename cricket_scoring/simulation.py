"""
Synthetic match driver.

Plays a whole match through a ScoringSession with random ball outcomes,
making the decisions a scorer would (next bowler, next batsman, second
innings openers). Seeded for deterministic replay; used by the demo mode
and by the engine's conservation tests.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from cricket_scoring.config import DEFAULT_PLAYERS_PER_SIDE, FORMAT_OVERS, MatchFormat
from cricket_scoring.data.ball_event import ExtrasType, WicketType
from cricket_scoring.data.match_config import MatchConfig, Opening, Player, Team
from cricket_scoring.data.snapshot_store import SnapshotStore
from cricket_scoring.session import ScoringSession
from cricket_scoring.state.actions import (
    Action,
    BallAction,
    ChangeBowler,
    SetupNextInnings,
    WicketAction,
)
from cricket_scoring.state.match_state import MatchState, initial_state
from cricket_scoring.validation import eligible_batsmen

logger = logging.getLogger(__name__)

# (weight, outcome, runs)
BALL_OUTCOMES = [
    (30, "dot", 0),
    (28, "runs", 1),
    (10, "runs", 2),
    (2, "runs", 3),
    (10, "runs", 4),
    (5, "runs", 6),
    (4, "wd", 0),
    (2, "nb", 0),
    (1, "by", 1),
    (2, "lb", 1),
    (6, "wicket", 0),
]

DISMISSALS = [
    WicketType.BOWLED,
    WicketType.CAUGHT,
    WicketType.CAUGHT,
    WicketType.LBW,
    WicketType.RUN_OUT,
    WicketType.STUMPED,
]


def demo_config(
    overs: int = FORMAT_OVERS[MatchFormat.T20],
    team_a: str = "Thunder",
    team_b: str = "Strikers",
    players_per_side: int = DEFAULT_PLAYERS_PER_SIDE,
) -> MatchConfig:
    """Two synthetic sides; team1 wins the toss and bats."""

    def squad(name: str, prefix: str) -> Team:
        players = tuple(
            Player(id=f"{prefix}{i}", name=f"{name} {i + 1}")
            for i in range(players_per_side)
        )
        return Team(
            name=name,
            players=players,
            captain_id=players[0].id,
            wicket_keeper_id=players[min(4, players_per_side - 1)].id,
        )

    team1 = squad(team_a, "a")
    team2 = squad(team_b, "b")
    return MatchConfig(
        team1=team1,
        team2=team2,
        overs_per_innings=overs,
        players_per_side=players_per_side,
        opening=Opening(
            striker_id=team1.players[0].id,
            non_striker_id=team1.players[1].id,
            bowler_id=team2.players[-1].id,
        ),
        venue="Demo Stadium",
    )


def random_delivery(state: MatchState, rng: random.Random) -> Action:
    """Pick a plausible outcome for the next ball."""
    weights = [w for w, _, _ in BALL_OUTCOMES]
    _, outcome, runs = rng.choices(BALL_OUTCOMES, weights=weights)[0]

    if outcome == "wicket":
        return _random_wicket(state, rng)
    if outcome == "wd" and state.config.wide_ball.enabled:
        return BallAction(runs=runs, is_extra=True, extra_type=ExtrasType.WIDE)
    if outcome == "nb" and state.config.no_ball.enabled:
        return BallAction(runs=rng.choice([0, 0, 1, 4]), is_extra=True, extra_type=ExtrasType.NO_BALL)
    if outcome == "by":
        return BallAction(runs=runs, is_extra=True, extra_type=ExtrasType.BYE)
    if outcome == "lb":
        return BallAction(runs=runs, is_extra=True, extra_type=ExtrasType.LEG_BYE)
    if outcome in ("wd", "nb"):
        return BallAction(runs=0)
    return BallAction(runs=runs)


def _random_wicket(state: MatchState, rng: random.Random) -> WicketAction:
    dismissal = rng.choice(DISMISSALS)
    fielder = None
    if dismissal.involves_fielder:
        fielder = rng.choice(state.bowling_team.player_ids)

    last_wicket = state.current.wickets + 1 >= state.max_wickets
    waiting = eligible_batsmen(state)
    new_batsman = "" if last_wicket or not waiting else waiting[0]
    return WicketAction(dismissal_type=dismissal, new_batsman_id=new_batsman, fielder_id=fielder)


def next_innings_openers(state: MatchState) -> SetupNextInnings:
    """Top two in the chasing side's order, first name in the other side's roster bowls."""
    batting = state.config.team(state.innings1.bowling_team)
    bowling = state.config.team(state.innings1.batting_team)
    return SetupNextInnings(
        striker_id=batting.players[0].id,
        non_striker_id=batting.players[1].id,
        bowler_id=bowling.players[-1].id,
    )


def simulate_match(
    config: MatchConfig,
    seed: Optional[int] = None,
    match_id: Optional[str] = None,
    store: Optional[SnapshotStore] = None,
) -> ScoringSession:
    """Score a complete synthetic match and return the session."""
    rng = random.Random(seed)
    session = ScoringSession(initial_state(config, match_id), store=store)

    # Upper bound on actions: every ball plus extras, bowler changes and setup
    max_actions = config.balls_per_innings * 2 * 4 + 10

    for _ in range(max_actions):
        state = session.state
        if state.match_over:
            break
        if state.is_end_of_innings:
            session.dispatch(next_innings_openers(state))
        elif state.is_bowler_change_required:
            session.dispatch(ChangeBowler(rng.choice(session.eligible_bowlers())))
        else:
            session.dispatch(random_delivery(state, rng))
    else:
        logger.warning("Simulation stopped after %d actions without a result", max_actions)

    state = session.state
    logger.info("Simulated match %s: %s", match_id or "(unsaved)", state.result_text)
    return session
