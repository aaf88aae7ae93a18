"""
Pre-match configuration data model.

Teams, toss, opening players and the extras rules a match is scored
under. Immutable once the match starts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from cricket_scoring.config import (
    DEFAULT_BALLS_PER_OVER,
    MAX_PLAYERS_PER_SIDE,
    MIN_PLAYERS_PER_SIDE,
)


class TeamSide(Enum):
    TEAM1 = "team1"
    TEAM2 = "team2"

    @property
    def other(self) -> "TeamSide":
        return TeamSide.TEAM2 if self is TeamSide.TEAM1 else TeamSide.TEAM1


class TossDecision(Enum):
    BAT = "bat"
    BOWL = "bowl"


@dataclass(frozen=True)
class Player:
    id: str
    name: str


@dataclass(frozen=True)
class Team:
    """A named side with a fixed roster. Roster order is batting order."""

    name: str
    players: tuple[Player, ...] = ()
    captain_id: Optional[str] = None
    wicket_keeper_id: Optional[str] = None

    @property
    def player_ids(self) -> list[str]:
        return [p.id for p in self.players]

    def player(self, player_id: str) -> Optional[Player]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def has_player(self, player_id: str) -> bool:
        return self.player(player_id) is not None


@dataclass(frozen=True)
class Toss:
    winner: TeamSide = TeamSide.TEAM1
    decision: TossDecision = TossDecision.BAT


@dataclass(frozen=True)
class Opening:
    striker_id: str
    non_striker_id: str
    bowler_id: str


@dataclass(frozen=True)
class ExtraRule:
    """How a wide or no-ball is scored."""
    enabled: bool = True
    reball: bool = True  # re-bowled deliveries do not count toward the over
    run: int = 1  # penalty run added on top of any runs taken


@dataclass(frozen=True)
class MatchConfig:
    """Everything fixed at the toss."""

    team1: Team
    team2: Team
    overs_per_innings: int
    players_per_side: int
    opening: Opening
    toss: Toss = field(default_factory=Toss)
    balls_per_over: int = DEFAULT_BALLS_PER_OVER
    no_ball: ExtraRule = field(default_factory=ExtraRule)
    wide_ball: ExtraRule = field(default_factory=ExtraRule)

    match_format: Optional[str] = None
    venue: str = ""
    match_date: str = ""
    tournament_id: Optional[str] = None
    tournament_stage: Optional[str] = None

    def __post_init__(self) -> None:
        if not MIN_PLAYERS_PER_SIDE <= self.players_per_side <= MAX_PLAYERS_PER_SIDE:
            raise ValueError(
                f"players_per_side must be between {MIN_PLAYERS_PER_SIDE} and "
                f"{MAX_PLAYERS_PER_SIDE}, got {self.players_per_side}"
            )
        if self.overs_per_innings < 1:
            raise ValueError(f"overs_per_innings must be >= 1, got {self.overs_per_innings}")
        if self.balls_per_over < 1:
            raise ValueError(f"balls_per_over must be >= 1, got {self.balls_per_over}")
        for label, rule in (("no_ball", self.no_ball), ("wide_ball", self.wide_ball)):
            if rule.run < 0:
                raise ValueError(f"{label}.run must be >= 0, got {rule.run}")

    def team(self, side: TeamSide) -> Team:
        return self.team1 if side is TeamSide.TEAM1 else self.team2

    @property
    def batting_first(self) -> TeamSide:
        """Side that bats in the first innings, decided by the toss."""
        if self.toss.decision is TossDecision.BAT:
            return self.toss.winner
        return self.toss.winner.other

    @property
    def balls_per_innings(self) -> int:
        return self.overs_per_innings * self.balls_per_over
