"""Tests for the scoring session: validation, undo, observers and persistence."""

from __future__ import annotations

import pytest

from cricket_scoring.data.ball_event import ExtrasType, WicketType
from cricket_scoring.data.match_config import ExtraRule
from cricket_scoring.data.snapshot_store import SnapshotStore
from cricket_scoring.session import ScoringSession
from cricket_scoring.state.actions import (
    BallAction,
    ChangeBowler,
    EndInningsManually,
    RetireBatsman,
    SetupNextInnings,
    SwapStriker,
    TriggerBowlerChange,
    WicketAction,
)
from cricket_scoring.state.match_state import initial_state
from cricket_scoring.validation import ActionRejected


def bowl_over(session: ScoringSession, runs: int = 0) -> None:
    for _ in range(session.state.config.balls_per_over):
        session.dispatch(BallAction(runs=runs))


class TestDispatchAndUndo:
    def test_dispatch_records_history(self, session: ScoringSession):
        assert not session.can_undo
        new = session.dispatch(BallAction(runs=4))

        assert session.state is new
        assert len(session.history) == 2
        assert session.can_undo

    def test_undo_restores_previous_snapshot(self, session: ScoringSession):
        start = session.state
        session.dispatch(BallAction(runs=4))
        session.dispatch(WicketAction(WicketType.BOWLED, "t1p2"))

        restored = session.undo()
        assert restored.current.score == 4
        assert restored.current.wickets == 0
        assert restored.on_strike_id == "t1p0"

        assert session.undo() is start
        assert session.undo() is start

    def test_engine_noop_not_recorded(self, session: ScoringSession):
        class Celebrate:
            type = "CELEBRATE"

        before = session.state
        assert session.dispatch(Celebrate()) is before
        assert len(session.history) == 1

    def test_repeated_manual_end_not_recorded(self, session: ScoringSession):
        ended = session.dispatch(EndInningsManually())
        count = len(session.history)

        assert session.dispatch(EndInningsManually()) is ended
        assert len(session.history) == count

    def test_history_limit(self, config):
        session = ScoringSession(initial_state(config), history_limit=3)
        for _ in range(5):
            session.dispatch(SwapStriker())

        assert len(session.history) == 3

    def test_ignored_after_match_over(self, make_config):
        session = ScoringSession(initial_state(make_config(players_per_side=2, overs=1)))
        session.dispatch(BallAction(runs=6))
        session.dispatch(EndInningsManually())
        session.dispatch(SetupNextInnings("t2p0", "t2p1", "t1p1"))
        final = session.dispatch(WicketAction(WicketType.BOWLED))
        assert final.match_over

        count = len(session.history)
        assert session.dispatch(BallAction(runs=-1)) is final
        assert len(session.history) == count


class TestValidation:
    def test_negative_runs(self, session: ScoringSession):
        with pytest.raises(ActionRejected):
            session.dispatch(BallAction(runs=-1))
        assert len(session.history) == 1

    def test_extra_type_requires_is_extra(self, session: ScoringSession):
        with pytest.raises(ActionRejected):
            session.dispatch(BallAction(runs=1, extra_type=ExtrasType.BYE))

    def test_disabled_extra(self, make_config):
        config = make_config(wide_ball=ExtraRule(enabled=False))
        session = ScoringSession(initial_state(config))
        with pytest.raises(ActionRejected, match="Wides"):
            session.dispatch(BallAction(is_extra=True, extra_type=ExtrasType.WIDE))

    def test_scoring_while_bowler_change_pending(self, session: ScoringSession):
        bowl_over(session)
        with pytest.raises(ActionRejected, match="next bowler"):
            session.dispatch(BallAction(runs=1))

    def test_same_bowler_twice(self, session: ScoringSession):
        bowl_over(session)
        assert "t2p10" not in session.eligible_bowlers()
        with pytest.raises(ActionRejected):
            session.dispatch(ChangeBowler("t2p10"))

        session.dispatch(ChangeBowler("t2p9"))
        assert session.state.current_bowler_id == "t2p9"

    def test_changing_back_to_last_over_bowler(self, session: ScoringSession):
        bowl_over(session)
        session.dispatch(ChangeBowler("t2p0"))

        assert "t2p10" not in session.eligible_bowlers()
        with pytest.raises(ActionRejected):
            session.dispatch(ChangeBowler("t2p10"))

        session.dispatch(ChangeBowler("t2p9"))
        session.dispatch(BallAction())
        assert session.state.current.timeline[-1].bowler_id == "t2p9"

    def test_previous_bowler_eligible_after_first_legal_ball(self, session: ScoringSession):
        bowl_over(session)
        session.dispatch(ChangeBowler("t2p9"))
        session.dispatch(BallAction())
        session.dispatch(TriggerBowlerChange())

        assert "t2p10" in session.eligible_bowlers()
        assert "t2p9" not in session.eligible_bowlers()

    def test_bowler_from_batting_side(self, session: ScoringSession):
        bowl_over(session)
        with pytest.raises(ActionRejected):
            session.dispatch(ChangeBowler("t1p5"))

    def test_wicket_needs_new_batsman(self, session: ScoringSession):
        with pytest.raises(ActionRejected, match="new batsman"):
            session.dispatch(WicketAction(WicketType.BOWLED))

    def test_new_batsman_already_out(self, session: ScoringSession):
        session.dispatch(WicketAction(WicketType.BOWLED, "t1p2"))
        assert "t1p0" not in session.eligible_batsmen()
        with pytest.raises(ActionRejected):
            session.dispatch(WicketAction(WicketType.BOWLED, "t1p0"))

    def test_no_batsman_left_after_retirement(self, make_config):
        session = ScoringSession(initial_state(make_config(players_per_side=4)))
        session.dispatch(RetireBatsman("t1p0", "t1p2"))
        session.dispatch(WicketAction(WicketType.BOWLED, "t1p3"))
        assert session.eligible_batsmen() == []

        with pytest.raises(ActionRejected, match="end the innings manually"):
            session.dispatch(WicketAction(WicketType.BOWLED))

        assert session.dispatch(EndInningsManually()).is_end_of_innings

    def test_new_batsman_at_crease(self, session: ScoringSession):
        with pytest.raises(ActionRejected):
            session.dispatch(WicketAction(WicketType.BOWLED, "t1p1"))

    def test_unknown_fielder(self, session: ScoringSession):
        with pytest.raises(ActionRejected):
            session.dispatch(WicketAction(WicketType.CAUGHT, "t1p2", fielder_id="t1p5"))

    def test_setup_before_first_innings_ends(self, session: ScoringSession):
        with pytest.raises(ActionRejected):
            session.dispatch(SetupNextInnings("t2p0", "t2p1", "t1p10"))

    def test_setup_same_openers(self, session: ScoringSession):
        session.dispatch(EndInningsManually())
        with pytest.raises(ActionRejected):
            session.dispatch(SetupNextInnings("t2p0", "t2p0", "t1p10"))

    def test_setup_bad_revision(self, session: ScoringSession):
        session.dispatch(EndInningsManually())
        with pytest.raises(ActionRejected):
            session.dispatch(SetupNextInnings("t2p0", "t2p1", "t1p10", revised_overs=0))

    def test_retire_needs_batsman_at_crease(self, session: ScoringSession):
        with pytest.raises(ActionRejected):
            session.dispatch(RetireBatsman("t1p6", "t1p2"))

    def test_eligible_batsmen_in_roster_order(self, session: ScoringSession):
        assert session.eligible_batsmen() == [f"t1p{i}" for i in range(2, 11)]

    def test_rejected_is_value_error(self):
        assert issubclass(ActionRejected, ValueError)


class TestObservers:
    def test_observer_receives_each_snapshot(self, session: ScoringSession):
        seen = []
        session.subscribe(seen.append)
        session.dispatch(BallAction(runs=1))
        session.dispatch(BallAction(runs=2))
        session.undo()

        assert [s.current.score for s in seen] == [1, 3, 1]

    def test_unsubscribe(self, session: ScoringSession):
        seen = []
        session.subscribe(seen.append)
        session.unsubscribe(seen.append)
        session.dispatch(BallAction(runs=1))
        assert seen == []

    def test_failing_observer_does_not_break_session(self, session: ScoringSession):
        seen = []

        def broken(state):
            raise RuntimeError("display offline")

        session.subscribe(broken)
        session.subscribe(seen.append)
        new = session.dispatch(BallAction(runs=4))

        assert session.state is new
        assert seen == [new]


class TestPersistence:
    def test_each_snapshot_saved(self, config, tmp_path):
        store = SnapshotStore(tmp_path)
        session = ScoringSession(initial_state(config, match_id="m1"), store=store)
        session.dispatch(BallAction(runs=4))

        assert store.load("m1") == session.state

        session.undo()
        assert store.load("m1").current.score == 0

    def test_resume(self, config, tmp_path):
        store = SnapshotStore(tmp_path)
        session = ScoringSession(initial_state(config, match_id="m2"), store=store)
        session.dispatch(BallAction(runs=6))
        session.dispatch(BallAction(runs=1))

        resumed = ScoringSession.resume(store, "m2")
        assert resumed is not None
        assert resumed.state == session.state
        assert not resumed.can_undo

    def test_resume_missing_match(self, tmp_path):
        assert ScoringSession.resume(SnapshotStore(tmp_path), "nope") is None

    def test_unsaved_match_not_persisted(self, config, tmp_path):
        store = SnapshotStore(tmp_path)
        session = ScoringSession(initial_state(config), store=store)
        session.dispatch(BallAction(runs=1))
        assert store.list_matches() == []
