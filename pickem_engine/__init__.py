"""Election pick'em outcome simulation and scoring engine."""

from .types import Region, Portfolio, BLUE, RED
from .scoring import payout, score_portfolio, rank_standings
from .simulation import simulate_population, profile_player
from .explorer import explore, explore_shift, uniform_shift_outcomes

__version__ = "0.1.0"

__all__ = [
    "Region",
    "Portfolio",
    "BLUE",
    "RED",
    "payout",
    "score_portfolio",
    "rank_standings",
    "simulate_population",
    "profile_player",
    "explore",
    "explore_shift",
    "uniform_shift_outcomes",
]
