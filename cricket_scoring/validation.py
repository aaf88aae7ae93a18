"""
Pre-validation of scoring actions.

The engine trusts its input; a scorer's client checks each action here
first, the way the scoring screen's dialogs only offer eligible players.
"""

from __future__ import annotations

from typing import Optional

from cricket_scoring.data.ball_event import ExtrasType
from cricket_scoring.state.actions import (
    Action,
    BallAction,
    ChangeBowler,
    RetireBatsman,
    SetupNextInnings,
    WicketAction,
)
from cricket_scoring.state.match_state import InningsKey, MatchState


class ActionRejected(ValueError):
    """Raised when an action is not allowed in the current state."""


def eligible_batsmen(state: MatchState) -> list[str]:
    """Batting-side players who can come in next, in batting order."""
    at_crease = {state.on_strike_id, state.non_strike_id}
    return [
        pid for pid in state.batting_team.player_ids
        if pid not in at_crease and not _is_out(state, pid)
    ]


def last_over_bowler(state: MatchState) -> Optional[str]:
    """Bowler of the over just completed, until a legal ball of the next one is bowled."""
    inn = state.current
    if inn.balls == 0 or inn.balls % state.config.balls_per_over != 0:
        return None
    for event in reversed(inn.timeline):
        if event.is_legal:
            return event.bowler_id
    return None


def eligible_bowlers(state: MatchState) -> list[str]:
    """Bowling-side players who may bowl the next over."""
    excluded = {last_over_bowler(state)}
    if state.is_bowler_change_required:
        excluded.add(state.current_bowler_id)
    return [pid for pid in state.bowling_team.player_ids if pid not in excluded]


def _is_out(state: MatchState, player_id: str) -> bool:
    batsman = state.current.batsmen.get(player_id)
    return batsman is not None and batsman.is_out


def _check_can_bowl(state: MatchState) -> None:
    if state.is_end_of_innings:
        raise ActionRejected("Innings is complete; set up the next innings first")
    if state.is_bowler_change_required:
        raise ActionRejected("Over complete; choose the next bowler first")
    if not state.bowling_team.has_player(state.current_bowler_id):
        raise ActionRejected(f"Unknown bowler: {state.current_bowler_id!r}")


def _check_new_batsman(state: MatchState, player_id: str) -> None:
    if player_id not in eligible_batsmen(state):
        raise ActionRejected(f"{player_id!r} cannot come in to bat")


def _validate_ball(state: MatchState, action: BallAction) -> None:
    _check_can_bowl(state)
    if action.runs < 0:
        raise ActionRejected(f"Runs cannot be negative: {action.runs}")
    if action.extra_type is not None and not action.is_extra:
        raise ActionRejected("extra_type given for a delivery not marked as an extra")
    if action.extra_type is ExtrasType.WIDE and not state.config.wide_ball.enabled:
        raise ActionRejected("Wides are disabled for this match")
    if action.extra_type is ExtrasType.NO_BALL and not state.config.no_ball.enabled:
        raise ActionRejected("No-balls are disabled for this match")


def _validate_wicket(state: MatchState, action: WicketAction) -> None:
    _check_can_bowl(state)
    if not state.on_strike_id:
        raise ActionRejected("No batsman on strike")
    last_wicket = state.current.wickets + 1 >= state.max_wickets
    if not last_wicket:
        if not eligible_batsmen(state):
            raise ActionRejected(
                "No batsman left to come in; end the innings manually (EndInningsManually)"
            )
        if not action.new_batsman_id:
            raise ActionRejected("A new batsman is required")
        _check_new_batsman(state, action.new_batsman_id)
    if action.fielder_id and not state.bowling_team.has_player(action.fielder_id):
        raise ActionRejected(f"Unknown fielder: {action.fielder_id!r}")


def _validate_change_bowler(state: MatchState, action: ChangeBowler) -> None:
    if action.new_bowler_id not in eligible_bowlers(state):
        raise ActionRejected(f"{action.new_bowler_id!r} cannot bowl the next over")


def _validate_setup(state: MatchState, action: SetupNextInnings) -> None:
    if state.current_innings is not InningsKey.FIRST or not state.is_end_of_innings:
        raise ActionRejected("The first innings has not finished")
    batting = state.config.team(state.innings1.bowling_team)
    bowling = state.config.team(state.innings1.batting_team)
    if action.striker_id == action.non_striker_id:
        raise ActionRejected("Striker and non-striker must be different players")
    for pid in (action.striker_id, action.non_striker_id):
        if not batting.has_player(pid):
            raise ActionRejected(f"{pid!r} is not in {batting.name}")
    if not bowling.has_player(action.bowler_id):
        raise ActionRejected(f"{action.bowler_id!r} is not in {bowling.name}")
    if action.revised_overs is not None and action.revised_overs < 1:
        raise ActionRejected("Revised overs must be positive")
    if action.revised_target is not None and action.revised_target < 1:
        raise ActionRejected("Revised target must be positive")


def _validate_retire(state: MatchState, action: RetireBatsman) -> None:
    if state.is_end_of_innings:
        raise ActionRejected("Innings is complete")
    if action.retiring_batsman_id not in (state.on_strike_id, state.non_strike_id):
        raise ActionRejected(f"{action.retiring_batsman_id!r} is not at the crease")
    _check_new_batsman(state, action.new_batsman_id)


_VALIDATORS = {
    BallAction: _validate_ball,
    WicketAction: _validate_wicket,
    ChangeBowler: _validate_change_bowler,
    SetupNextInnings: _validate_setup,
    RetireBatsman: _validate_retire,
}


def validate_action(state: MatchState, action: Action) -> None:
    """Raise ActionRejected if ``action`` is not allowed now."""
    if state.match_over:
        return
    validator = _VALIDATORS.get(type(action))
    if validator is not None:
        validator(state, action)
