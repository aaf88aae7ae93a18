"""
Cricket Scoring Engine

Scores a cricket match ball-by-ball through a pure state-transition
function and derives live tickers, scorecards and summaries from the
resulting append-only ball log.
"""

__version__ = "0.1.0"
