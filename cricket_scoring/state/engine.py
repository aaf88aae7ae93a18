"""
Match Engine - the scoring state machine.

``apply(state, action)`` is a pure transition: it never mutates its input
and returns a new MatchState (or the same object when the action is a
no-op). Callers serialize actions, persist each resulting snapshot and
keep their own undo history; ``reset_to`` is the primitive undo uses.

Domain errors are not raised here. Anything arriving after the match is
over, scoring while an innings is complete, and unknown actions all come
back as the unchanged input state. Payload validation belongs to the
caller (see ``cricket_scoring.validation``).
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Optional

from cricket_scoring.data.ball_event import BallEvent, ExtrasType, WicketType
from cricket_scoring.data.match_config import MatchConfig
from cricket_scoring.state.actions import (
    Action,
    BallAction,
    ChangeBowler,
    EndInningsManually,
    ResetState,
    RetireBatsman,
    SCORING_ACTIONS,
    SetupNextInnings,
    SwapStriker,
    ToggleTicker,
    TriggerBowlerChange,
    WicketAction,
)
from cricket_scoring.state.match_state import (
    FallOfWicket,
    InningsKey,
    MatchState,
    OutInfo,
    Partnership,
    create_innings,
)
from cricket_scoring.state.result import (
    check_completion,
    end_first_innings,
    resolve_on_runs,
)

logger = logging.getLogger(__name__)


def is_legal_delivery(config: MatchConfig, extra_type: Optional[ExtrasType]) -> bool:
    """Whether a delivery counts toward the over."""
    if extra_type is ExtrasType.WIDE:
        return not config.wide_ball.reball
    if extra_type is ExtrasType.NO_BALL:
        return not config.no_ball.reball
    return True


def penalty_runs(config: MatchConfig, extra_type: Optional[ExtrasType]) -> int:
    if extra_type is ExtrasType.WIDE:
        return config.wide_ball.run
    if extra_type is ExtrasType.NO_BALL:
        return config.no_ball.run
    return 0


def _swap_strike(state: MatchState) -> MatchState:
    return replace(
        state,
        on_strike_id=state.non_strike_id,
        non_strike_id=state.on_strike_id,
    )


def over_events(timeline: tuple[BallEvent, ...], balls_per_over: int) -> list[BallEvent]:
    """Deliveries of the over that ends with the last legal ball of the timeline."""
    events: list[BallEvent] = []
    legal = 0
    for event in reversed(timeline):
        if event.is_legal:
            if legal == balls_per_over:
                break
            legal += 1
        events.append(event)
    events.reverse()
    return events


def _complete_over(state: MatchState) -> MatchState:
    """End-of-over strike swap, maiden credit and bowler change."""
    state = _swap_strike(state)
    inn = state.current
    bowler_id = state.current_bowler_id
    over = over_events(inn.timeline, state.config.balls_per_over)

    bowler = inn.bowlers.get(bowler_id)
    if (
        bowler is not None
        and all(e.bowler_id == bowler_id for e in over)
        and sum(e.total_runs for e in over) == 0
    ):
        inn = inn.with_bowler(replace(bowler, maidens=bowler.maidens + 1))
        state = state.with_current(inn)
        logger.debug("Maiden over to %s", bowler.name)

    logger.debug(
        "Over %d complete: %d/%d",
        inn.balls // state.config.balls_per_over,
        inn.score,
        inn.wickets,
    )
    if inn.balls != state.balls_for_current_innings:
        state = replace(state, is_bowler_change_required=True)
    return state


def _over_completed(state: MatchState) -> bool:
    balls = state.current.balls
    return balls > 0 and balls % state.config.balls_per_over == 0


# ---------------------------------------------------------------------------
# Deliveries
# ---------------------------------------------------------------------------

def _score_ball(state: MatchState, action: BallAction) -> MatchState:
    config = state.config
    inn = state.current
    legal = is_legal_delivery(config, action.extra_type)
    event_runs = action.runs + penalty_runs(config, action.extra_type)
    balls = inn.balls + 1 if legal else inn.balls

    event = BallEvent(
        batsman_id=state.on_strike_id,
        bowler_id=state.current_bowler_id,
        runs=action.runs,
        is_extra=action.is_extra,
        extra_type=action.extra_type,
        ball_in_over=(balls - 1) % config.balls_per_over if legal else 0,
        is_legal=legal,
        total_runs=event_runs,
    )
    bat_runs = event.runs_off_bat
    faced = 1 if legal else 0

    partnership = inn.current_partnership
    inn = replace(
        inn,
        score=inn.score + event_runs,
        balls=balls,
        timeline=inn.timeline + (event,),
        current_partnership=replace(
            partnership,
            runs=partnership.runs + bat_runs,
            balls=partnership.balls + faced,
        ),
    )

    bowler = inn.bowlers.get(state.current_bowler_id)
    if bowler is not None:
        inn = inn.with_bowler(replace(
            bowler,
            balls=bowler.balls + faced,
            runs_conceded=bowler.runs_conceded + event_runs,
        ))

    striker = inn.batsmen.get(state.on_strike_id)
    if striker is not None:
        inn = inn.with_batsman(replace(
            striker,
            runs=striker.runs + bat_runs,
            balls=striker.balls + faced,
            fours=striker.fours + (1 if event.is_boundary_four else 0),
            sixes=striker.sixes + (1 if event.is_boundary_six else 0),
        ))

    state = state.with_current(inn)

    if bat_runs % 2 == 1:
        state = _swap_strike(state)
    if legal and _over_completed(state):
        state = _complete_over(state)

    return check_completion(state)


def _take_wicket(state: MatchState, action: WicketAction) -> MatchState:
    config = state.config
    inn = state.current
    if not state.on_strike_id or inn.wickets >= state.max_wickets:
        logger.debug("No batsman at the crease, ignoring wicket")
        return state

    striker_id = state.on_strike_id
    bowler_id = state.current_bowler_id
    balls = inn.balls + 1
    wickets = inn.wickets + 1

    event = BallEvent(
        batsman_id=striker_id,
        bowler_id=bowler_id,
        is_wicket=True,
        wicket_type=action.dismissal_type,
        fielder_id=action.fielder_id,
        ball_in_over=(balls - 1) % config.balls_per_over,
    )

    striker = inn.batsmen.get(striker_id)
    if striker is not None:
        inn = inn.with_batsman(replace(
            striker,
            balls=striker.balls + 1,
            is_out=True,
            out_info=OutInfo(
                method=action.dismissal_type,
                by=bowler_id,
                fielder_id=action.fielder_id,
            ),
        ))

    bowler = inn.bowlers.get(bowler_id)
    if bowler is not None:
        credit = 1 if action.dismissal_type.credited_to_bowler else 0
        inn = inn.with_bowler(replace(
            bowler,
            balls=bowler.balls + 1,
            wickets=bowler.wickets + credit,
        ))

    last_wicket = wickets >= state.max_wickets
    if last_wicket:
        partnership = Partnership()
        on_strike_id = ""
    else:
        partnership = Partnership(
            batsman1_id=state.non_strike_id,
            batsman2_id=action.new_batsman_id,
        )
        on_strike_id = action.new_batsman_id

    inn = replace(
        inn,
        balls=balls,
        wickets=wickets,
        timeline=inn.timeline + (event,),
        current_partnership=partnership,
        fall_of_wickets=inn.fall_of_wickets + (FallOfWicket(
            batsman_id=striker_id,
            score=inn.score,
            overs=balls // config.balls_per_over,
            balls=balls % config.balls_per_over,
        ),),
    )
    logger.info(
        "Wicket: %s %s, %d/%d",
        striker.name if striker is not None else striker_id,
        action.dismissal_type.value,
        inn.score,
        wickets,
    )

    state = replace(state.with_current(inn), on_strike_id=on_strike_id)
    if not last_wicket and _over_completed(state):
        state = _complete_over(state)

    return check_completion(state)


# ---------------------------------------------------------------------------
# Administrative actions
# ---------------------------------------------------------------------------

def _swap_striker(state: MatchState, action: SwapStriker) -> MatchState:
    return _swap_strike(state)


def _change_bowler(state: MatchState, action: ChangeBowler) -> MatchState:
    return replace(
        state,
        current_bowler_id=action.new_bowler_id,
        is_bowler_change_required=False,
    )


def _trigger_bowler_change(state: MatchState, action: TriggerBowlerChange) -> MatchState:
    return replace(state, is_bowler_change_required=True)


def _setup_next_innings(state: MatchState, action: SetupNextInnings) -> MatchState:
    if state.current_innings is InningsKey.SECOND:
        logger.debug("Second innings already set up")
        return state

    innings1 = state.innings1
    target = (
        action.revised_target
        if action.revised_target is not None
        else innings1.score + 1
    )
    innings2 = create_innings(
        state.config,
        innings1.bowling_team,
        action.striker_id,
        action.non_striker_id,
    )
    logger.info(
        "Second innings: %s need %d to win",
        state.config.team(innings2.batting_team).name,
        target,
    )
    return replace(
        state,
        innings2=innings2,
        current_innings=InningsKey.SECOND,
        on_strike_id=action.striker_id,
        non_strike_id=action.non_striker_id,
        current_bowler_id=action.bowler_id,
        target=target,
        revised_overs=(
            action.revised_overs
            if action.revised_overs is not None
            else state.revised_overs
        ),
        is_bowler_change_required=False,
        is_end_of_innings=False,
    )


def _toggle_ticker(state: MatchState, action: ToggleTicker) -> MatchState:
    ticker = None if state.active_ticker is action.ticker else action.ticker
    return replace(state, active_ticker=ticker)


def _retire_batsman(state: MatchState, action: RetireBatsman) -> MatchState:
    retiring_id = action.retiring_batsman_id
    if retiring_id == state.on_strike_id:
        other_id = state.non_strike_id
    elif retiring_id == state.non_strike_id:
        other_id = state.on_strike_id
    else:
        logger.debug("Batsman %s is not at the crease", retiring_id)
        return state

    inn = state.current
    retiree = inn.batsmen.get(retiring_id)
    if retiree is not None:
        inn = inn.with_batsman(replace(
            retiree,
            is_out=True,
            out_info=OutInfo(method=WicketType.RETIRED, by=""),
        ))
    inn = replace(
        inn,
        current_partnership=Partnership(
            batsman1_id=other_id,
            batsman2_id=action.new_batsman_id,
        ),
    )
    state = state.with_current(inn)
    if retiring_id == state.on_strike_id:
        return replace(state, on_strike_id=action.new_batsman_id)
    return replace(state, non_strike_id=action.new_batsman_id)


def _end_innings_manually(state: MatchState, action: EndInningsManually) -> MatchState:
    if state.current_innings is InningsKey.FIRST:
        if state.is_end_of_innings:
            return state
        return end_first_innings(state)
    return resolve_on_runs(state)


def _reset(state: MatchState, action: ResetState) -> MatchState:
    return reset_to(state, action.snapshot)


_HANDLERS: dict[type, Callable[[MatchState, Any], MatchState]] = {
    BallAction: _score_ball,
    WicketAction: _take_wicket,
    SwapStriker: _swap_striker,
    ChangeBowler: _change_bowler,
    TriggerBowlerChange: _trigger_bowler_change,
    SetupNextInnings: _setup_next_innings,
    ToggleTicker: _toggle_ticker,
    RetireBatsman: _retire_batsman,
    EndInningsManually: _end_innings_manually,
    ResetState: _reset,
}


def apply(state: MatchState, action: Action) -> MatchState:
    """Apply one scoring action and return the next state."""
    if state.match_over:
        logger.debug("Match over, ignoring %s", getattr(action, "type", action))
        return state

    handler = _HANDLERS.get(type(action))
    if handler is None:
        logger.warning("Ignoring unknown action: %r", action)
        return state

    if isinstance(action, SCORING_ACTIONS) and state.is_end_of_innings:
        logger.debug("Innings complete, ignoring %s", action.type)
        return state

    return handler(state, action)


def reset_to(state: MatchState, snapshot: MatchState) -> MatchState:
    """Replace the live state with an earlier snapshot (undo)."""
    logger.debug(
        "Reset to snapshot at %d/%d",
        snapshot.current.score,
        snapshot.current.wickets,
    )
    return snapshot


def replay(state: MatchState, actions) -> MatchState:
    """Apply a sequence of actions in order."""
    for action in actions:
        state = apply(state, action)
    return state
