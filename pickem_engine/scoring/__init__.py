"""Payout and portfolio scoring."""

from .payout import payout, win_profit, potential_winnings, realized_returns
from .portfolio import PickMatrix, score_portfolio, count_correct_picks
from .standings import rank_standings

__all__ = [
    "payout",
    "win_profit",
    "potential_winnings",
    "realized_returns",
    "PickMatrix",
    "score_portfolio",
    "count_correct_picks",
    "rank_standings",
]
