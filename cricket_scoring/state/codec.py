"""
JSON-safe conversion of match configs, states and actions.

Used by the snapshot store and the action log. Enums are written as
their values and tuples as lists; reading reverses both so that
``state_from_dict(state_to_dict(s)) == s``.
"""

from __future__ import annotations

from dataclasses import asdict, fields
from typing import Any, Optional

from cricket_scoring.data.ball_event import BallEvent, ExtrasType, WicketType
from cricket_scoring.data.match_config import (
    ExtraRule,
    MatchConfig,
    Opening,
    Player,
    Team,
    TeamSide,
    Toss,
    TossDecision,
)
from cricket_scoring.state.actions import (
    ACTION_TYPES,
    Action,
    BallAction,
    ResetState,
    SetupNextInnings,
    ToggleTicker,
    WicketAction,
)
from cricket_scoring.state.match_state import (
    Batsman,
    Bowler,
    FallOfWicket,
    Innings,
    InningsKey,
    MatchState,
    OutInfo,
    Partnership,
    Ticker,
    Winner,
)


def _enum_value(value) -> Optional[str]:
    return value.value if value is not None else None


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

def config_to_dict(config: MatchConfig) -> dict[str, Any]:
    def team(t: Team) -> dict[str, Any]:
        return {
            "name": t.name,
            "players": [{"id": p.id, "name": p.name} for p in t.players],
            "captain_id": t.captain_id,
            "wicket_keeper_id": t.wicket_keeper_id,
        }

    return {
        "team1": team(config.team1),
        "team2": team(config.team2),
        "overs_per_innings": config.overs_per_innings,
        "players_per_side": config.players_per_side,
        "toss": {
            "winner": config.toss.winner.value,
            "decision": config.toss.decision.value,
        },
        "opening": asdict(config.opening),
        "balls_per_over": config.balls_per_over,
        "no_ball": asdict(config.no_ball),
        "wide_ball": asdict(config.wide_ball),
        "match_format": config.match_format,
        "venue": config.venue,
        "match_date": config.match_date,
        "tournament_id": config.tournament_id,
        "tournament_stage": config.tournament_stage,
    }


def config_from_dict(d: dict[str, Any]) -> MatchConfig:
    def team(t: dict[str, Any]) -> Team:
        return Team(
            name=t["name"],
            players=tuple(Player(id=p["id"], name=p["name"]) for p in t.get("players", [])),
            captain_id=t.get("captain_id"),
            wicket_keeper_id=t.get("wicket_keeper_id"),
        )

    toss = d.get("toss", {})
    return MatchConfig(
        team1=team(d["team1"]),
        team2=team(d["team2"]),
        overs_per_innings=int(d["overs_per_innings"]),
        players_per_side=int(d["players_per_side"]),
        opening=Opening(**d["opening"]),
        toss=Toss(
            winner=TeamSide(toss.get("winner", "team1")),
            decision=TossDecision(toss.get("decision", "bat")),
        ),
        balls_per_over=int(d.get("balls_per_over", 6)),
        no_ball=ExtraRule(**d.get("no_ball", {})),
        wide_ball=ExtraRule(**d.get("wide_ball", {})),
        match_format=d.get("match_format"),
        venue=d.get("venue", ""),
        match_date=d.get("match_date", ""),
        tournament_id=d.get("tournament_id"),
        tournament_stage=d.get("tournament_stage"),
    )


# ---------------------------------------------------------------------------
# Innings / state
# ---------------------------------------------------------------------------

def _ball_to_dict(e: BallEvent) -> dict[str, Any]:
    d = asdict(e)
    d["extra_type"] = _enum_value(e.extra_type)
    d["wicket_type"] = _enum_value(e.wicket_type)
    return d


def _ball_from_dict(d: dict[str, Any]) -> BallEvent:
    d = dict(d)
    d["extra_type"] = ExtrasType(d["extra_type"]) if d.get("extra_type") else None
    d["wicket_type"] = WicketType(d["wicket_type"]) if d.get("wicket_type") else None
    return BallEvent(**d)


def _batsman_to_dict(b: Batsman) -> dict[str, Any]:
    d = asdict(b)
    if b.out_info is not None:
        d["out_info"]["method"] = b.out_info.method.value
    return d


def _batsman_from_dict(d: dict[str, Any]) -> Batsman:
    d = dict(d)
    out = d.get("out_info")
    if out:
        d["out_info"] = OutInfo(
            method=WicketType(out["method"]),
            by=out.get("by", ""),
            fielder_id=out.get("fielder_id"),
        )
    return Batsman(**d)


def innings_to_dict(inn: Innings) -> dict[str, Any]:
    return {
        "batting_team": inn.batting_team.value,
        "bowling_team": inn.bowling_team.value,
        "score": inn.score,
        "wickets": inn.wickets,
        "balls": inn.balls,
        "timeline": [_ball_to_dict(e) for e in inn.timeline],
        "batsmen": {pid: _batsman_to_dict(b) for pid, b in inn.batsmen.items()},
        "bowlers": {pid: asdict(b) for pid, b in inn.bowlers.items()},
        "current_partnership": asdict(inn.current_partnership),
        "fall_of_wickets": [asdict(f) for f in inn.fall_of_wickets],
    }


def innings_from_dict(d: dict[str, Any]) -> Innings:
    return Innings(
        batting_team=TeamSide(d["batting_team"]),
        bowling_team=TeamSide(d["bowling_team"]),
        score=d.get("score", 0),
        wickets=d.get("wickets", 0),
        balls=d.get("balls", 0),
        timeline=tuple(_ball_from_dict(e) for e in d.get("timeline", [])),
        batsmen={pid: _batsman_from_dict(b) for pid, b in d.get("batsmen", {}).items()},
        bowlers={pid: Bowler(**b) for pid, b in d.get("bowlers", {}).items()},
        current_partnership=Partnership(**d.get("current_partnership", {})),
        fall_of_wickets=tuple(FallOfWicket(**f) for f in d.get("fall_of_wickets", [])),
    )


def state_to_dict(state: MatchState) -> dict[str, Any]:
    return {
        "match_id": state.match_id,
        "config": config_to_dict(state.config),
        "innings1": innings_to_dict(state.innings1),
        "innings2": innings_to_dict(state.innings2) if state.innings2 else None,
        "current_innings": state.current_innings.value,
        "on_strike_id": state.on_strike_id,
        "non_strike_id": state.non_strike_id,
        "current_bowler_id": state.current_bowler_id,
        "target": state.target,
        "revised_overs": state.revised_overs,
        "match_over": state.match_over,
        "winner": _enum_value(state.winner),
        "result_text": state.result_text,
        "is_bowler_change_required": state.is_bowler_change_required,
        "is_end_of_innings": state.is_end_of_innings,
        "active_ticker": _enum_value(state.active_ticker),
    }


def state_from_dict(d: dict[str, Any]) -> MatchState:
    return MatchState(
        config=config_from_dict(d["config"]),
        innings1=innings_from_dict(d["innings1"]),
        innings2=innings_from_dict(d["innings2"]) if d.get("innings2") else None,
        current_innings=InningsKey(d.get("current_innings", "innings1")),
        on_strike_id=d.get("on_strike_id", ""),
        non_strike_id=d.get("non_strike_id", ""),
        current_bowler_id=d.get("current_bowler_id", ""),
        target=d.get("target"),
        revised_overs=d.get("revised_overs"),
        match_over=d.get("match_over", False),
        winner=Winner(d["winner"]) if d.get("winner") else None,
        result_text=d.get("result_text", ""),
        is_bowler_change_required=d.get("is_bowler_change_required", False),
        is_end_of_innings=d.get("is_end_of_innings", False),
        active_ticker=Ticker(d["active_ticker"]) if d.get("active_ticker") else None,
        match_id=d.get("match_id"),
    )


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

def action_to_dict(action: Action) -> dict[str, Any]:
    if isinstance(action, ResetState):
        return {"type": action.type, "snapshot": state_to_dict(action.snapshot)}
    d: dict[str, Any] = {"type": action.type}
    for f in fields(action):
        value = getattr(action, f.name)
        d[f.name] = value.value if hasattr(value, "value") else value
    return d


def action_from_dict(d: dict[str, Any]) -> Action:
    """Build an action from its dict form.

    Raises:
        ValueError: unknown action type or missing payload fields
    """
    payload = dict(d)
    kind = payload.pop("type", None)
    cls = ACTION_TYPES.get(kind)
    if cls is None:
        raise ValueError(f"Unknown action type: {kind!r}")

    try:
        if cls is BallAction and payload.get("extra_type"):
            payload["extra_type"] = ExtrasType(payload["extra_type"])
        elif cls is WicketAction:
            payload["dismissal_type"] = WicketType(payload.get("dismissal_type"))
        elif cls is ToggleTicker:
            payload["ticker"] = Ticker(payload.get("ticker"))
        elif cls is ResetState:
            payload["snapshot"] = state_from_dict(payload["snapshot"])
        elif cls is SetupNextInnings:
            for key in ("revised_target", "revised_overs"):
                if payload.get(key) is not None:
                    payload[key] = int(payload[key])
        return cls(**payload)
    except (TypeError, KeyError) as e:
        raise ValueError(f"Bad payload for {kind}: {e}") from e
