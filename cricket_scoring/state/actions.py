"""
Scoring actions.

The closed set of things a scorer can do to a match. Each action is a
frozen dataclass tagged with the wire name used in action logs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from cricket_scoring.data.ball_event import ExtrasType, WicketType
from cricket_scoring.state.match_state import MatchState, Ticker


@dataclass(frozen=True)
class BallAction:
    """A delivery with no dismissal: runs, extras, or a dot."""
    type: ClassVar[str] = "BALL_EVENT"
    runs: int = 0
    is_extra: bool = False
    extra_type: Optional[ExtrasType] = None


@dataclass(frozen=True)
class WicketAction:
    type: ClassVar[str] = "WICKET"
    dismissal_type: WicketType
    new_batsman_id: str = ""  # empty on the last wicket
    fielder_id: Optional[str] = None


@dataclass(frozen=True)
class SwapStriker:
    type: ClassVar[str] = "SWAP_STRIKER"


@dataclass(frozen=True)
class ChangeBowler:
    type: ClassVar[str] = "CHANGE_BOWLER"
    new_bowler_id: str


@dataclass(frozen=True)
class TriggerBowlerChange:
    type: ClassVar[str] = "TRIGGER_BOWLER_CHANGE"


@dataclass(frozen=True)
class SetupNextInnings:
    type: ClassVar[str] = "SETUP_NEXT_INNINGS"
    striker_id: str
    non_striker_id: str
    bowler_id: str
    revised_target: Optional[int] = None
    revised_overs: Optional[int] = None


@dataclass(frozen=True)
class ToggleTicker:
    type: ClassVar[str] = "TOGGLE_TICKER"
    ticker: Ticker


@dataclass(frozen=True)
class RetireBatsman:
    type: ClassVar[str] = "RETIRE_BATSMAN"
    retiring_batsman_id: str
    new_batsman_id: str


@dataclass(frozen=True)
class EndInningsManually:
    type: ClassVar[str] = "END_INNINGS_MANUALLY"


@dataclass(frozen=True)
class ResetState:
    type: ClassVar[str] = "RESET_STATE"
    snapshot: MatchState


Action = Union[
    BallAction,
    WicketAction,
    SwapStriker,
    ChangeBowler,
    TriggerBowlerChange,
    SetupNextInnings,
    ToggleTicker,
    RetireBatsman,
    EndInningsManually,
    ResetState,
]

ACTION_TYPES: dict[str, type] = {
    cls.type: cls
    for cls in (
        BallAction,
        WicketAction,
        SwapStriker,
        ChangeBowler,
        TriggerBowlerChange,
        SetupNextInnings,
        ToggleTicker,
        RetireBatsman,
        EndInningsManually,
        ResetState,
    )
}

# Actions that deliver a ball and so are blocked once an innings is complete
SCORING_ACTIONS = (BallAction, WicketAction)
