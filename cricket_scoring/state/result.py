"""
Innings transition and match completion.

Run after every delivery. In the first innings the only outcome is the
end-of-innings flag; in the second innings the chase is settled in
priority order: target reached, then all out or overs exhausted.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from cricket_scoring.state.match_state import InningsKey, MatchState, Winner

logger = logging.getLogger(__name__)

TIE_TEXT = "Match Tied."


def _plural(n: int, word: str) -> str:
    return f"{n} {word}{'s' if n != 1 else ''}"


def is_all_out(state: MatchState) -> bool:
    return state.current.wickets >= state.max_wickets


def is_overs_exhausted(state: MatchState) -> bool:
    return state.current.balls >= state.balls_for_current_innings


def _declare(state: MatchState, winner: Winner, text: str) -> MatchState:
    logger.info("Match over: %s", text)
    return replace(
        state,
        match_over=True,
        winner=winner,
        result_text=text,
        is_bowler_change_required=False,
    )


def win_by_wickets(state: MatchState) -> MatchState:
    inn = state.current
    margin = state.max_wickets - inn.wickets
    team = state.config.team(inn.batting_team)
    return _declare(
        state,
        Winner.for_side(inn.batting_team),
        f"{team.name} won by {_plural(margin, 'wicket')}.",
    )


def resolve_on_runs(state: MatchState) -> MatchState:
    """Settle a finished second innings by comparing score with target."""
    inn = state.current
    target = state.target if state.target is not None else state.innings1.score + 1
    if inn.score >= target:
        return win_by_wickets(state)
    if inn.score == target - 1:
        return _declare(state, Winner.DRAW, TIE_TEXT)
    margin = target - 1 - inn.score
    team = state.config.team(inn.bowling_team)
    return _declare(
        state,
        Winner.for_side(inn.bowling_team),
        f"{team.name} won by {_plural(margin, 'run')}.",
    )


def end_first_innings(state: MatchState) -> MatchState:
    inn = state.innings1
    logger.info(
        "End of first innings: %s %d/%d",
        state.config.team(inn.batting_team).name,
        inn.score,
        inn.wickets,
    )
    return replace(state, is_end_of_innings=True, is_bowler_change_required=False)


def check_completion(state: MatchState) -> MatchState:
    """Apply end-of-innings and end-of-match rules after a delivery."""
    if state.current_innings is InningsKey.FIRST:
        if is_all_out(state) or is_overs_exhausted(state):
            return end_first_innings(state)
        return state

    if state.target is not None and state.current.score >= state.target:
        return win_by_wickets(state)
    if is_all_out(state) or is_overs_exhausted(state):
        return resolve_on_runs(state)
    return state
