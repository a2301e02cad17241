"""
Risk metrics for a single player's simulated returns.

- Volatility: root-mean-square of net winnings (risk of loss from zero,
  not dispersion around the mean)
- Win frequency: % of universes with strictly positive net winnings
- Average winning picks: mean correct picks over net-winning universes
- Risk rating: banded on win frequency
"""

import math

from ..types import RiskMetrics
from ..config import RISK_RATING_BANDS, RISK_RATING_FLOOR


def classify_risk(win_frequency: float) -> str:
    """
    Risk rating from win frequency (%).

    Bands are exclusive lower bounds evaluated from the top:
    >40 Conservative, >25 Balanced, >15 Aggressive, else Highly Speculative.
    """
    for lower_bound, rating in RISK_RATING_BANDS:
        if win_frequency > lower_bound:
            return rating
    return RISK_RATING_FLOOR


def compute_risk_metrics(
    iterations: int,
    sum_squared_returns: float,
    winning_rounds: int,
    winning_picks: int,
) -> RiskMetrics:
    """
    Compute risk metrics from profiler accumulators.

    Args:
        iterations: Universes simulated (> 0)
        sum_squared_returns: Sum of squared net winnings
        winning_rounds: Universes with positive net winnings
        winning_picks: Correct picks summed over winning universes

    Returns:
        RiskMetrics
    """
    volatility = math.sqrt(sum_squared_returns / iterations)
    win_frequency = winning_rounds / iterations * 100
    avg_winning_picks = winning_picks / winning_rounds if winning_rounds > 0 else 0.0

    return RiskMetrics(
        volatility=volatility,
        win_frequency=win_frequency,
        avg_winning_picks=avg_winning_picks,
        risk_rating=classify_risk(win_frequency),
    )
