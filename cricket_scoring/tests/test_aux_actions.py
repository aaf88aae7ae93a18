"""Tests for the non-delivery actions and engine dispatch."""

from __future__ import annotations

from dataclasses import replace

import pytest

from cricket_scoring.data.ball_event import WicketType
from cricket_scoring.state.actions import (
    ACTION_TYPES,
    BallAction,
    ChangeBowler,
    EndInningsManually,
    ResetState,
    RetireBatsman,
    SetupNextInnings,
    SwapStriker,
    ToggleTicker,
    TriggerBowlerChange,
    WicketAction,
)
from cricket_scoring.state.engine import _HANDLERS, apply, replay, reset_to
from cricket_scoring.state.match_state import MatchState, Partnership, Ticker, Winner


class TestStrikeAndBowler:
    def test_swap_striker(self, state: MatchState):
        new = apply(state, SwapStriker())
        assert new.on_strike_id == "t1p1"
        assert new.non_strike_id == "t1p0"
        assert apply(new, SwapStriker()) == state

    def test_trigger_bowler_change(self, state: MatchState):
        new = apply(state, TriggerBowlerChange())
        assert new.is_bowler_change_required
        assert new.current_bowler_id == "t2p10"

    def test_change_bowler_clears_flag(self, state: MatchState):
        new = apply(apply(state, TriggerBowlerChange()), ChangeBowler("t2p9"))
        assert new.current_bowler_id == "t2p9"
        assert not new.is_bowler_change_required

        new = apply(new, BallAction(runs=2))
        assert new.current.bowlers["t2p9"].runs_conceded == 2
        assert new.current.bowlers["t2p10"].runs_conceded == 0


class TestTicker:
    def test_toggle_on_and_off(self, state: MatchState):
        on = apply(state, ToggleTicker(Ticker.PARTNERSHIP))
        assert on.active_ticker is Ticker.PARTNERSHIP

        off = apply(on, ToggleTicker(Ticker.PARTNERSHIP))
        assert off.active_ticker is None

    def test_switch_ticker(self, state: MatchState):
        new = apply(apply(state, ToggleTicker(Ticker.SUMMARY)), ToggleTicker(Ticker.TARGET))
        assert new.active_ticker is Ticker.TARGET

    def test_ticker_touches_nothing_else(self, state: MatchState):
        new = apply(state, ToggleTicker(Ticker.BATTING_CARD))
        assert replace(new, active_ticker=None) == state


class TestRetireBatsman:
    def test_retire_striker(self, state: MatchState):
        state = apply(state, BallAction(runs=2))
        new = apply(state, RetireBatsman("t1p0", "t1p2"))

        inn = new.current
        retired = inn.batsmen["t1p0"]
        assert retired.is_out
        assert retired.out_info.method is WicketType.RETIRED
        assert retired.out_info.by == ""
        assert retired.runs == 2
        assert inn.wickets == 0
        assert inn.balls == 1
        assert inn.timeline == state.current.timeline
        assert inn.fall_of_wickets == ()
        assert inn.bowlers["t2p10"].wickets == 0
        assert new.on_strike_id == "t1p2"
        assert new.non_strike_id == "t1p1"
        assert inn.current_partnership == Partnership("t1p1", "t1p2")

    def test_retire_non_striker(self, state: MatchState):
        new = apply(state, RetireBatsman("t1p1", "t1p5"))
        assert new.on_strike_id == "t1p0"
        assert new.non_strike_id == "t1p5"

    def test_retire_player_not_at_crease_ignored(self, state: MatchState):
        assert apply(state, RetireBatsman("t1p7", "t1p2")) is state


class TestEndInningsManually:
    def test_first_innings(self, state: MatchState):
        state = apply(state, BallAction(runs=4))
        new = apply(state, EndInningsManually())

        assert new.is_end_of_innings
        assert not new.match_over
        assert apply(new, BallAction(runs=1)) is new

    def test_first_innings_already_ended(self, state: MatchState):
        ended = apply(state, EndInningsManually())
        assert apply(ended, EndInningsManually()) is ended

    def test_second_innings_resolves_on_runs(self, state: MatchState):
        state = apply(state, BallAction(runs=4))
        state = apply(state, EndInningsManually())
        state = apply(state, SetupNextInnings("t2p0", "t2p1", "t1p10"))
        state = apply(state, BallAction(runs=1))
        new = apply(state, EndInningsManually())

        assert new.match_over
        assert new.winner is Winner.TEAM1
        assert new.result_text == "Thunder won by 3 runs."


class TestResetAndDispatch:
    def test_reset_state_returns_snapshot(self, state: MatchState):
        later = apply(state, BallAction(runs=6))
        assert apply(later, ResetState(state)) is state
        assert reset_to(later, state) is state

    def test_unknown_action_ignored(self, state: MatchState):
        class Celebrate:
            type = "CELEBRATE"

        assert apply(state, Celebrate()) is state

    def test_handler_table_covers_every_action(self):
        assert set(_HANDLERS) == set(ACTION_TYPES.values())

    def test_replay(self, state: MatchState):
        new = replay(state, [BallAction(runs=1), BallAction(runs=4), SwapStriker()])
        assert new.current.score == 5
        assert new.on_strike_id == "t1p0"

    @pytest.mark.parametrize("action", [
        BallAction(runs=4),
        WicketAction(WicketType.BOWLED, "t2p5"),
        SwapStriker(),
        ChangeBowler("t1p3"),
        TriggerBowlerChange(),
        SetupNextInnings("t2p0", "t2p1", "t1p10"),
        ToggleTicker(Ticker.SUMMARY),
        RetireBatsman("t2p0", "t2p5"),
        EndInningsManually(),
    ])
    def test_every_action_ignored_after_match_over(self, state: MatchState, action):
        over = replace(state, match_over=True, winner=Winner.TEAM1, result_text="Thunder won by 5 runs.")
        assert apply(over, action) is over
        assert apply(over, ResetState(state)) is over
