"""
Fair-odds payout computation.

A winning pick returns round(STAKE / p) on a fixed stake (stake included);
a losing pick forfeits the stake. No house margin.
"""

import math
from typing import Dict, Optional

from ..types import Region, Portfolio, STAKE


def payout(probability_pct: float) -> int:
    """
    Total return (stake + profit) on a 100-unit stake at fair odds.

    Args:
        probability_pct: Win probability in percent, (0, 100]

    Returns:
        round(100 / (p / 100)), halves rounded up

    Raises:
        ValueError: If probability is not in (0, 100]
    """
    if not 0.0 < probability_pct <= 100.0:
        raise ValueError(
            f"Probability must be in (0, 100] to price a payout (got {probability_pct})"
        )
    return int(math.floor(STAKE / (probability_pct / 100.0) + 0.5))


def win_profit(probability_pct: float) -> int:
    """Net profit of a winning pick."""
    return payout(probability_pct) - STAKE


LOSS = -STAKE


def potential_winnings(portfolio: Portfolio, regions: Dict[str, Region]) -> int:
    """
    Maximum net the portfolio can win (every pick correct).

    Unscorable entries (unknown region, zero probability) contribute nothing.
    """
    total = 0
    for region_name, side in portfolio.selections.items():
        region = regions.get(region_name)
        if region is None or not region.is_scorable(side):
            continue
        total += win_profit(region.probability_for(side))
    return total


def realized_returns(
    portfolio: Portfolio,
    regions: Dict[str, Region],
    results: Dict[str, Optional[str]],
) -> int:
    """
    Gross return (stake included) over picks that match declared results.

    Losing picks and regions without a declared result add nothing.
    """
    total = 0
    for region_name, side in portfolio.selections.items():
        region = regions.get(region_name)
        if region is None or not region.is_scorable(side):
            continue
        if results.get(region_name) != side:
            continue
        total += payout(region.probability_for(side))
    return total
