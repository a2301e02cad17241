"""Leaderboard standings by potential or realized returns."""

from typing import List, Dict, Optional, Sequence

from ..types import Region, Portfolio, StandingsEntry
from .payout import potential_winnings, realized_returns


def rank_standings(
    portfolios: Sequence[Portfolio],
    regions: Sequence[Region],
    results: Optional[Dict[str, Optional[str]]] = None,
) -> List[StandingsEntry]:
    """
    Rank players for the leaderboard.

    Before results are declared, players are ordered by potential winnings.
    Once results exist, by realized returns floored at zero. Ties keep
    input order.
    """
    by_name = {r.name: r for r in regions}
    has_results = bool(results)

    entries = []
    for portfolio in portfolios:
        entries.append(StandingsEntry(
            display_name=portfolio.display_name,
            n_picks=portfolio.n_picks,
            potential_winnings=potential_winnings(portfolio, by_name),
            realized_returns=realized_returns(portfolio, by_name, results) if has_results else None,
        ))

    if has_results:
        entries.sort(key=lambda e: -max(0, e.realized_returns))
    else:
        entries.sort(key=lambda e: -e.potential_winnings)

    return entries
