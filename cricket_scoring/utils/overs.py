"""
Overs and rate utility functions.

Converts legal-ball counts to the overs notation used on scorecards and
computes the standard batting/bowling rates.
"""

from __future__ import annotations

from typing import Optional

from cricket_scoring.config import DEFAULT_BALLS_PER_OVER


def format_overs(balls: int, balls_per_over: int = DEFAULT_BALLS_PER_OVER) -> str:
    """Legal balls to 'overs.balls', e.g. 38 -> '6.2'."""
    return f"{balls // balls_per_over}.{balls % balls_per_over}"


def overs_as_float(balls: int, balls_per_over: int = DEFAULT_BALLS_PER_OVER) -> float:
    """Overs as a true fraction for rate maths, e.g. 38 -> 6.333."""
    return balls / balls_per_over


def run_rate(runs: int, balls: int, balls_per_over: int = DEFAULT_BALLS_PER_OVER) -> float:
    """Runs per over."""
    if balls <= 0:
        return 0.0
    return runs / overs_as_float(balls, balls_per_over)


def economy(runs_conceded: int, balls: int, balls_per_over: int = DEFAULT_BALLS_PER_OVER) -> float:
    return run_rate(runs_conceded, balls, balls_per_over)


def strike_rate(runs: int, balls: int) -> float:
    """Runs per 100 balls faced."""
    if balls <= 0:
        return 0.0
    return runs / balls * 100


def required_run_rate(
    runs_needed: int,
    balls_remaining: int,
    balls_per_over: int = DEFAULT_BALLS_PER_OVER,
) -> Optional[float]:
    """Runs per over needed; None once no balls remain."""
    if balls_remaining <= 0:
        return None
    return max(0, runs_needed) / overs_as_float(balls_remaining, balls_per_over)
