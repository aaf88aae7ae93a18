"""Shared test fixtures for cricket scoring engine tests."""

from __future__ import annotations

import pytest

from cricket_scoring.data.match_config import MatchConfig, Opening, Player, Team
from cricket_scoring.session import ScoringSession
from cricket_scoring.state.match_state import MatchState, initial_state


def build_team(name: str, prefix: str, size: int = 11) -> Team:
    return Team(
        name=name,
        players=tuple(Player(id=f"{prefix}{i}", name=f"{name} {i}") for i in range(size)),
        captain_id=f"{prefix}0",
        wicket_keeper_id=f"{prefix}4" if size > 4 else None,
    )


@pytest.fixture
def make_config():
    """Factory for T20-style configs: Thunder (t1p*) bat first, Strikers (t2p*) bowl."""

    def _make(players_per_side: int = 11, overs: int = 20, **kwargs) -> MatchConfig:
        team1 = build_team("Thunder", "t1p", players_per_side)
        team2 = build_team("Strikers", "t2p", players_per_side)
        kwargs.setdefault(
            "opening",
            Opening(striker_id="t1p0", non_striker_id="t1p1", bowler_id=f"t2p{players_per_side - 1}"),
        )
        return MatchConfig(
            team1=team1,
            team2=team2,
            overs_per_innings=overs,
            players_per_side=players_per_side,
            **kwargs,
        )

    return _make


@pytest.fixture
def config(make_config) -> MatchConfig:
    """Standard 20-over, 11-a-side match."""
    return make_config()


@pytest.fixture
def short_config(make_config) -> MatchConfig:
    """Two-over match for innings and result scenarios."""
    return make_config(overs=2)


@pytest.fixture
def state(config: MatchConfig) -> MatchState:
    return initial_state(config)


@pytest.fixture
def short_state(short_config: MatchConfig) -> MatchState:
    return initial_state(short_config)


@pytest.fixture
def session(config: MatchConfig) -> ScoringSession:
    return ScoringSession(initial_state(config, match_id="test_001"))
