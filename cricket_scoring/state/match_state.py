"""
Match State - scoring data model.

Immutable snapshot of a match at any point during play. Snapshots are
produced by the engine one per action and are never modified afterwards;
every update goes through ``dataclasses.replace`` and copies only the
structures it touches.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from cricket_scoring.data.ball_event import BallEvent, WicketType
from cricket_scoring.data.match_config import MatchConfig, Team, TeamSide

logger = logging.getLogger(__name__)

IN_PROGRESS_TEXT = "Match in progress..."


class InningsKey(Enum):
    FIRST = "innings1"
    SECOND = "innings2"


class Winner(Enum):
    TEAM1 = "team1"
    TEAM2 = "team2"
    DRAW = "draw"

    @classmethod
    def for_side(cls, side: TeamSide) -> "Winner":
        return cls(side.value)


class Ticker(Enum):
    """Broadcast overlays. Display state only."""
    ON_STRIKE = "onStrike"
    NON_STRIKE = "nonStrike"
    BOWLER = "bowler"
    SUMMARY = "summary"
    PARTNERSHIP = "partnership"
    TOUR_NAME = "tourName"
    BATTING_CARD = "battingCard"
    BOWLING_CARD = "bowlingCard"
    TARGET = "target"


@dataclass(frozen=True)
class OutInfo:
    method: WicketType
    by: str  # bowler id, empty for retirements
    fielder_id: Optional[str] = None


@dataclass(frozen=True)
class Batsman:
    id: str
    name: str
    runs: int = 0
    balls: int = 0  # legal balls faced
    fours: int = 0
    sixes: int = 0
    is_out: bool = False
    out_info: Optional[OutInfo] = None

    @property
    def strike_rate(self) -> float:
        return (self.runs / self.balls * 100) if self.balls > 0 else 0.0


@dataclass(frozen=True)
class Bowler:
    id: str
    name: str
    balls: int = 0  # legal balls bowled
    runs_conceded: int = 0
    wickets: int = 0
    maidens: int = 0


@dataclass(frozen=True)
class Partnership:
    """Current batting partnership."""
    batsman1_id: str = ""
    batsman2_id: str = ""
    runs: int = 0
    balls: int = 0


@dataclass(frozen=True)
class FallOfWicket:
    batsman_id: str
    score: int
    overs: int
    balls: int


@dataclass(frozen=True)
class Innings:
    """State for a single innings."""

    batting_team: TeamSide
    bowling_team: TeamSide
    score: int = 0
    wickets: int = 0
    balls: int = 0  # legal deliveries only

    timeline: tuple[BallEvent, ...] = ()
    batsmen: dict[str, Batsman] = field(default_factory=dict)
    bowlers: dict[str, Bowler] = field(default_factory=dict)
    current_partnership: Partnership = field(default_factory=Partnership)
    fall_of_wickets: tuple[FallOfWicket, ...] = ()

    @property
    def extras(self) -> int:
        return sum(e.extras for e in self.timeline)

    def with_batsman(self, batsman: Batsman) -> "Innings":
        return replace(self, batsmen={**self.batsmen, batsman.id: batsman})

    def with_bowler(self, bowler: Bowler) -> "Innings":
        return replace(self, bowlers={**self.bowlers, bowler.id: bowler})


@dataclass(frozen=True)
class MatchState:
    """Complete match state after some number of scoring actions."""

    config: MatchConfig
    innings1: Innings
    innings2: Optional[Innings] = None
    current_innings: InningsKey = InningsKey.FIRST

    on_strike_id: str = ""
    non_strike_id: str = ""
    current_bowler_id: str = ""

    target: Optional[int] = None
    revised_overs: Optional[int] = None

    match_over: bool = False
    winner: Optional[Winner] = None
    result_text: str = IN_PROGRESS_TEXT

    is_bowler_change_required: bool = False
    is_end_of_innings: bool = False
    active_ticker: Optional[Ticker] = None

    match_id: Optional[str] = None

    @property
    def current(self) -> Innings:
        if self.current_innings is InningsKey.SECOND and self.innings2 is not None:
            return self.innings2
        return self.innings1

    def with_current(self, innings: Innings) -> "MatchState":
        if self.current_innings is InningsKey.SECOND:
            return replace(self, innings2=innings)
        return replace(self, innings1=innings)

    @property
    def batting_team(self) -> Team:
        return self.config.team(self.current.batting_team)

    @property
    def bowling_team(self) -> Team:
        return self.config.team(self.current.bowling_team)

    @property
    def overs_for_current_innings(self) -> int:
        """Overs available, honouring a rain-revised second innings."""
        if self.current_innings is InningsKey.SECOND and self.revised_overs:
            return self.revised_overs
        return self.config.overs_per_innings

    @property
    def balls_for_current_innings(self) -> int:
        return self.overs_for_current_innings * self.config.balls_per_over

    @property
    def balls_remaining(self) -> int:
        return max(0, self.balls_for_current_innings - self.current.balls)

    @property
    def runs_needed(self) -> Optional[int]:
        if self.target is None or self.current_innings is not InningsKey.SECOND:
            return None
        return max(0, self.target - self.current.score)

    @property
    def max_wickets(self) -> int:
        return self.config.players_per_side - 1


def create_innings(
    config: MatchConfig,
    batting_team: TeamSide,
    striker_id: str,
    non_striker_id: str,
) -> Innings:
    """Fresh innings with zeroed stats for every roster player."""
    batters = config.team(batting_team)
    fielders = config.team(batting_team.other)
    return Innings(
        batting_team=batting_team,
        bowling_team=batting_team.other,
        batsmen={p.id: Batsman(id=p.id, name=p.name) for p in batters.players},
        bowlers={p.id: Bowler(id=p.id, name=p.name) for p in fielders.players},
        current_partnership=Partnership(
            batsman1_id=striker_id,
            batsman2_id=non_striker_id,
        ),
    )


def initial_state(config: MatchConfig, match_id: Optional[str] = None) -> MatchState:
    """Build the opening MatchState from a config and its opening players."""
    opening = config.opening
    state = MatchState(
        config=config,
        innings1=create_innings(
            config, config.batting_first, opening.striker_id, opening.non_striker_id
        ),
        current_innings=InningsKey.FIRST,
        on_strike_id=opening.striker_id,
        non_strike_id=opening.non_striker_id,
        current_bowler_id=opening.bowler_id,
        match_id=match_id,
    )
    logger.info(
        "New match %s: %s vs %s, %d overs, %s bat first",
        match_id or "(unsaved)",
        config.team1.name,
        config.team2.name,
        config.overs_per_innings,
        config.team(config.batting_first).name,
    )
    return state
