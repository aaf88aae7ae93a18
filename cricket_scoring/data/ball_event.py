"""
Ball-by-ball event data model.

Defines the canonical delivery record appended to an innings timeline.
Every aggregate on a scorecard can be rebuilt from these events.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cricket_scoring.config import BOUNDARY_FOUR, BOUNDARY_SIX


class WicketType(Enum):
    BOWLED = "Bowled"
    CAUGHT = "Caught"
    LBW = "LBW"
    RUN_OUT = "Run out"
    STUMPED = "Stumped"
    HIT_WICKET = "Hit wicket"
    OBSTRUCTING = "Obstructing the field"
    HANDLED_BALL = "Handled the ball"
    TIMED_OUT = "Timed out"
    RETIRED = "Retired"

    @property
    def credited_to_bowler(self) -> bool:
        return self not in (WicketType.RUN_OUT, WicketType.RETIRED)

    @property
    def involves_fielder(self) -> bool:
        return self in (WicketType.CAUGHT, WicketType.RUN_OUT, WicketType.STUMPED)


# Dismissals a scorer can record on a delivery
DISMISSAL_TYPES = tuple(w for w in WicketType if w is not WicketType.RETIRED)


class ExtrasType(Enum):
    WIDE = "wd"
    NO_BALL = "nb"
    BYE = "by"
    LEG_BYE = "lb"


@dataclass(frozen=True)
class BallEvent:
    """A single delivery in an innings."""

    batsman_id: str  # striker when the ball was bowled
    bowler_id: str

    runs: int = 0  # runs taken (off the bat, or as the extra's run count)
    is_extra: bool = False
    extra_type: Optional[ExtrasType] = None

    is_wicket: bool = False
    wicket_type: Optional[WicketType] = None
    fielder_id: Optional[str] = None

    ball_in_over: int = 0  # 0-indexed; only meaningful for legal deliveries
    is_legal: bool = True
    total_runs: int = 0  # runs added to the team score, penalty included

    @property
    def runs_off_bat(self) -> int:
        if not self.is_extra or self.extra_type is ExtrasType.NO_BALL:
            return self.runs
        return 0

    @property
    def extras(self) -> int:
        return self.total_runs - self.runs_off_bat

    @property
    def is_boundary_four(self) -> bool:
        return self.runs_off_bat == BOUNDARY_FOUR

    @property
    def is_boundary_six(self) -> bool:
        return self.runs_off_bat == BOUNDARY_SIX

    @property
    def is_dot_ball(self) -> bool:
        return self.total_runs == 0 and not self.is_wicket
