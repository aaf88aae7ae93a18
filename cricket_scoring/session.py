"""
Scoring session.

The single writer for one match: validates each action, runs it through
the engine, keeps a linear history of snapshots for undo, persists every
new snapshot and publishes it to read-only observers (live ticker,
scorecard viewers).
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from cricket_scoring.data.snapshot_store import SnapshotStore
from cricket_scoring.state.actions import Action
from cricket_scoring.state.engine import apply, reset_to
from cricket_scoring.state.match_state import MatchState
from cricket_scoring.validation import (
    ActionRejected,
    eligible_batsmen,
    eligible_bowlers,
    validate_action,
)

logger = logging.getLogger(__name__)

Observer = Callable[[MatchState], None]


class ScoringSession:
    """Owns the live state of one match for the duration of a scoring session."""

    def __init__(
        self,
        initial_state: MatchState,
        store: Optional[SnapshotStore] = None,
        history_limit: Optional[int] = None,
    ):
        self._store = store
        self._history_limit = history_limit
        self._history: list[MatchState] = [initial_state]
        self._observers: list[Observer] = []

    @classmethod
    def resume(
        cls,
        store: SnapshotStore,
        match_id: str,
        history_limit: Optional[int] = None,
    ) -> Optional["ScoringSession"]:
        """Pick up a match from its last persisted snapshot."""
        state = store.load(match_id)
        if state is None:
            return None
        logger.info("Resuming match %s", match_id)
        return cls(state, store=store, history_limit=history_limit)

    @property
    def state(self) -> MatchState:
        return self._history[-1]

    @property
    def history(self) -> tuple[MatchState, ...]:
        return tuple(self._history)

    @property
    def can_undo(self) -> bool:
        return len(self._history) > 1

    def subscribe(self, callback: Observer) -> None:
        if callback not in self._observers:
            self._observers.append(callback)

    def unsubscribe(self, callback: Observer) -> None:
        if callback in self._observers:
            self._observers.remove(callback)

    def eligible_batsmen(self) -> list[str]:
        return eligible_batsmen(self.state)

    def eligible_bowlers(self) -> list[str]:
        return eligible_bowlers(self.state)

    def dispatch(self, action: Action) -> MatchState:
        """Apply one action.

        Raises:
            ActionRejected: the action is not allowed in the current state
        """
        current = self.state
        if current.match_over:
            logger.debug("Match over, ignoring %s", getattr(action, "type", action))
            return current

        try:
            validate_action(current, action)
        except ActionRejected as e:
            logger.warning("Rejected %s: %s", getattr(action, "type", action), e)
            raise

        new_state = apply(current, action)
        if new_state is current:
            return current

        self._history.append(new_state)
        if self._history_limit and len(self._history) > self._history_limit:
            del self._history[: len(self._history) - self._history_limit]
        self._publish(new_state)
        return new_state

    def undo(self) -> MatchState:
        """Discard the latest snapshot and go back to the one before it."""
        if not self.can_undo:
            return self.state
        discarded = self._history.pop()
        restored = reset_to(discarded, self._history[-1])
        logger.info(
            "Undo: back to %d/%d",
            restored.current.score,
            restored.current.wickets,
        )
        self._publish(restored)
        return restored

    def _publish(self, state: MatchState) -> None:
        if self._store is not None and state.match_id:
            self._store.save(state)
        for callback in list(self._observers):
            try:
                callback(state)
            except Exception as e:
                logger.error("Observer %r failed: %s", callback, e)
