"""
Scorecard and ticker views.

Everything here is derived from the stored MatchState fields and the
ball timeline; nothing is written back. Batting order comes from the
team roster, never from map insertion order.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import pandas as pd

from cricket_scoring.data.ball_event import BallEvent, ExtrasType, WicketType
from cricket_scoring.state.match_state import Batsman, Innings, InningsKey, MatchState
from cricket_scoring.utils.overs import (
    economy,
    format_overs,
    required_run_rate,
    run_rate,
    strike_rate,
)

logger = logging.getLogger(__name__)

_EXTRA_SUFFIX = {
    ExtrasType.WIDE: "wd",
    ExtrasType.NO_BALL: "nb",
    ExtrasType.BYE: "b",
    ExtrasType.LEG_BYE: "lb",
}

DOT = "·"

BATTING_COLUMNS = ["player_id", "batsman", "dismissal", "runs", "balls", "fours", "sixes", "strike_rate"]
BOWLING_COLUMNS = ["player_id", "bowler", "overs", "maidens", "runs", "wickets", "economy"]
FOW_COLUMNS = ["wicket", "batsman", "score", "overs"]
OVER_COLUMNS = ["over", "bowler", "runs", "wickets", "extras"]


def innings_for(state: MatchState, key: InningsKey) -> Optional[Innings]:
    return state.innings1 if key is InningsKey.FIRST else state.innings2


def _player_name(state: MatchState, player_id: Optional[str]) -> str:
    if not player_id:
        return ""
    for team in (state.config.team1, state.config.team2):
        player = team.player(player_id)
        if player is not None:
            return player.name
    return player_id


# ---------------------------------------------------------------------------
# Ticker
# ---------------------------------------------------------------------------

def ball_label(event: BallEvent) -> str:
    """Short label for a delivery: '4', '1wd', 'nb', '2lb', 'W', '·' for a dot."""
    if event.is_wicket:
        return "W"
    if event.is_extra and event.extra_type is not None:
        runs = str(event.runs) if event.runs > 0 else ""
        return f"{runs}{_EXTRA_SUFFIX[event.extra_type]}"
    return str(event.runs) if event.runs > 0 else DOT


def recent_balls(innings: Innings, n: int = 6) -> list[str]:
    return [ball_label(e) for e in innings.timeline[-n:]] if n > 0 else []


def current_over(innings: Innings, balls_per_over: int) -> list[str]:
    """Labels for the over in progress (empty right after an over ends)."""
    in_over = innings.balls % balls_per_over
    labels: list[str] = []
    legal = 0
    for event in reversed(innings.timeline):
        if event.is_legal:
            if legal == in_over:
                break
            legal += 1
        labels.append(ball_label(event))
    labels.reverse()
    return labels


def extras_breakdown(innings: Innings) -> dict[str, int]:
    totals = {"wd": 0, "nb": 0, "b": 0, "lb": 0}
    for event in innings.timeline:
        if event.extra_type is not None and event.extras:
            totals[_EXTRA_SUFFIX[event.extra_type]] += event.extras
    totals["total"] = sum(totals.values())
    return totals


# ---------------------------------------------------------------------------
# Scorecard tables
# ---------------------------------------------------------------------------

def dismissal_text(state: MatchState, batsman: Batsman) -> str:
    if not batsman.is_out or batsman.out_info is None:
        return "not out"

    info = batsman.out_info
    bowler = _player_name(state, info.by)
    fielder = _player_name(state, info.fielder_id)
    method = info.method

    if method is WicketType.CAUGHT:
        if fielder and info.fielder_id == info.by:
            return f"c & b {bowler}"
        return f"c {fielder} b {bowler}"
    if method is WicketType.BOWLED:
        return f"b {bowler}"
    if method is WicketType.LBW:
        return f"lbw b {bowler}"
    if method is WicketType.STUMPED:
        return f"st {fielder} b {bowler}"
    if method is WicketType.RUN_OUT:
        return f"run out ({fielder})" if fielder else "run out"
    if method is WicketType.HIT_WICKET:
        return f"hit wicket b {bowler}"
    if method is WicketType.RETIRED:
        return "retired hurt"
    return method.value.lower()


def batting_card(state: MatchState, key: InningsKey = InningsKey.FIRST) -> pd.DataFrame:
    """Batsmen who have batted, in batting order."""
    inn = innings_for(state, key)
    if inn is None:
        return pd.DataFrame(columns=BATTING_COLUMNS)

    live = key is state.current_innings and not state.match_over
    at_crease = {state.on_strike_id, state.non_strike_id} if live else set()

    rows = []
    for player_id in state.config.team(inn.batting_team).player_ids:
        b = inn.batsmen.get(player_id)
        if b is None:
            continue
        if not (b.balls > 0 or b.is_out or player_id in at_crease):
            continue
        rows.append({
            "player_id": b.id,
            "batsman": b.name,
            "dismissal": dismissal_text(state, b),
            "runs": b.runs,
            "balls": b.balls,
            "fours": b.fours,
            "sixes": b.sixes,
            "strike_rate": round(strike_rate(b.runs, b.balls), 2),
        })
    return pd.DataFrame(rows, columns=BATTING_COLUMNS)


def did_not_bat(state: MatchState, key: InningsKey = InningsKey.FIRST) -> list[str]:
    inn = innings_for(state, key)
    if inn is None:
        return []
    batted = set(batting_card(state, key)["player_id"])
    return [
        p.name for p in state.config.team(inn.batting_team).players
        if p.id not in batted
    ]


def bowling_card(state: MatchState, key: InningsKey = InningsKey.FIRST) -> pd.DataFrame:
    """Bowlers in the order they first bowled."""
    inn = innings_for(state, key)
    if inn is None:
        return pd.DataFrame(columns=BOWLING_COLUMNS)

    bpo = state.config.balls_per_over
    order = list(dict.fromkeys(e.bowler_id for e in inn.timeline))
    rows = []
    for bowler_id in order:
        b = inn.bowlers.get(bowler_id)
        if b is None:
            continue
        rows.append({
            "player_id": b.id,
            "bowler": b.name,
            "overs": format_overs(b.balls, bpo),
            "maidens": b.maidens,
            "runs": b.runs_conceded,
            "wickets": b.wickets,
            "economy": round(economy(b.runs_conceded, b.balls, bpo), 2),
        })
    return pd.DataFrame(rows, columns=BOWLING_COLUMNS)


def fall_of_wickets_table(state: MatchState, key: InningsKey = InningsKey.FIRST) -> pd.DataFrame:
    inn = innings_for(state, key)
    if inn is None:
        return pd.DataFrame(columns=FOW_COLUMNS)
    rows = [
        {
            "wicket": i,
            "batsman": _player_name(state, f.batsman_id),
            "score": f"{i}-{f.score}",
            "overs": f"{f.overs}.{f.balls}",
        }
        for i, f in enumerate(inn.fall_of_wickets, start=1)
    ]
    return pd.DataFrame(rows, columns=FOW_COLUMNS)


def over_summary(state: MatchState, key: InningsKey = InningsKey.FIRST) -> pd.DataFrame:
    """Runs, wickets and extras per over (1-based), with the over's bowler."""
    inn = innings_for(state, key)
    if inn is None or not inn.timeline:
        return pd.DataFrame(columns=OVER_COLUMNS)

    bpo = state.config.balls_per_over
    records = []
    legal = 0
    for event in inn.timeline:
        records.append({
            "over": legal // bpo + 1,
            "bowler": _player_name(state, event.bowler_id),
            "runs": event.total_runs,
            "wickets": 1 if event.is_wicket else 0,
            "extras": event.extras,
        })
        if event.is_legal:
            legal += 1

    df = pd.DataFrame(records)
    summary = df.groupby("over", sort=True).agg(
        bowler=("bowler", "first"),
        runs=("runs", "sum"),
        wickets=("wickets", "sum"),
        extras=("extras", "sum"),
    ).reset_index()
    return summary[OVER_COLUMNS]


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------

def innings_summary(state: MatchState, key: InningsKey = InningsKey.FIRST) -> str:
    """e.g. 'Thunder 150/8 (20.0 ov)'."""
    inn = innings_for(state, key)
    if inn is None:
        return ""
    team = state.config.team(inn.batting_team)
    overs = format_overs(inn.balls, state.config.balls_per_over)
    return f"{team.name} {inn.score}/{inn.wickets} ({overs} ov)"


def chase_equation(state: MatchState) -> Optional[str]:
    """e.g. 'Need 12 runs from 8 balls'; None outside a live chase."""
    if state.match_over or state.current_innings is not InningsKey.SECOND:
        return None
    needed = state.runs_needed
    if needed is None:
        return None
    balls = state.balls_remaining
    return (
        f"Need {needed} run{'s' if needed != 1 else ''} "
        f"from {balls} ball{'s' if balls != 1 else ''}"
    )


def match_summary(state: MatchState) -> dict[str, Any]:
    """Flat summary for tickers and logs."""
    inn = state.current
    bpo = state.config.balls_per_over
    summary: dict[str, Any] = {
        "match_id": state.match_id,
        "innings": state.current_innings.value,
        "batting": state.batting_team.name,
        "bowling": state.bowling_team.name,
        "score": inn.score,
        "wickets": inn.wickets,
        "overs": format_overs(inn.balls, bpo),
        "run_rate": round(run_rate(inn.score, inn.balls, bpo), 2),
        "extras": inn.extras,
        "partnership_runs": inn.current_partnership.runs,
        "partnership_balls": inn.current_partnership.balls,
        "recent": recent_balls(inn),
        "target": state.target,
        "required_run_rate": None,
        "equation": chase_equation(state),
        "match_over": state.match_over,
        "winner": state.winner.value if state.winner else None,
        "result": state.result_text,
    }
    if state.target is not None and state.current_innings is InningsKey.SECOND:
        rrr = required_run_rate(state.runs_needed or 0, state.balls_remaining, bpo)
        summary["required_run_rate"] = round(rrr, 2) if rrr is not None else None
    return summary


def render_scorecard(state: MatchState) -> str:
    """Plain-text scorecard for both innings."""
    lines: list[str] = []
    for key in (InningsKey.FIRST, InningsKey.SECOND):
        inn = innings_for(state, key)
        if inn is None:
            continue
        extras = extras_breakdown(inn)
        lines.append(innings_summary(state, key))
        lines.append(batting_card(state, key).drop(columns="player_id").to_string(index=False))
        lines.append(
            f"Extras {extras['total']} (wd {extras['wd']}, nb {extras['nb']}, "
            f"b {extras['b']}, lb {extras['lb']})"
        )
        dnb = did_not_bat(state, key)
        if dnb:
            lines.append("Did not bat: " + ", ".join(dnb))
        fow = fall_of_wickets_table(state, key)
        if not fow.empty:
            lines.append(
                "Fall of wickets: "
                + ", ".join(f"{r.score} ({r.batsman}, {r.overs} ov)" for r in fow.itertuples())
            )
        lines.append(bowling_card(state, key).drop(columns="player_id").to_string(index=False))
        lines.append("")
    lines.append(state.result_text)
    return "\n".join(lines)
