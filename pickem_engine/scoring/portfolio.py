"""
Portfolio scoring.

Scalar scoring of one portfolio against one universe, plus a vectorized
PickMatrix that scores every portfolio against a block of universes at once.
"""

import numpy as np
from dataclasses import dataclass
from typing import List, Dict, Tuple, Sequence
import logging

from ..types import Region, Portfolio, BLUE
from ..config import SimulationConfigError
from .payout import win_profit, LOSS

logger = logging.getLogger(__name__)


def require_unique_names(portfolios: Sequence[Portfolio]) -> None:
    """
    Results are keyed by display name, so every portfolio needs its own.

    Raises:
        SimulationConfigError: If two portfolios share a display name
    """
    seen = set()
    duplicates = []
    for portfolio in portfolios:
        if portfolio.display_name in seen and portfolio.display_name not in duplicates:
            duplicates.append(portfolio.display_name)
        seen.add(portfolio.display_name)

    if duplicates:
        raise SimulationConfigError(
            "Duplicate display names: " + ", ".join(duplicates)
        )


def scorable_entries(
    portfolio: Portfolio,
    regions: Dict[str, Region]
) -> List[Tuple[str, str, Region]]:
    """
    Portfolio entries that can be priced, in selection order.

    Entries referencing an unknown region or a side with zero/invalid
    probability are excluded.
    """
    entries = []
    for region_name, side in portfolio.selections.items():
        region = regions.get(region_name)
        if region is None or not region.is_scorable(side):
            continue
        entries.append((region_name, side, region))
    return entries


def score_portfolio(
    portfolio: Portfolio,
    universe: Dict[str, bool],
    regions: Dict[str, Region]
) -> int:
    """
    Net winnings of a portfolio in one universe.

    Args:
        portfolio: Player picks
        universe: region name -> True if blue won. May be partial.
        regions: region name -> Region

    Returns:
        Sum of win profit / -STAKE over determined, scorable entries.
        Undetermined regions contribute zero.
    """
    total = 0
    for region_name, side, region in scorable_entries(portfolio, regions):
        if region_name not in universe:
            continue
        if (side == BLUE) == bool(universe[region_name]):
            total += win_profit(region.probability_for(side))
        else:
            total += LOSS
    return total


def count_correct_picks(
    portfolio: Portfolio,
    universe: Dict[str, bool],
    regions: Dict[str, Region]
) -> int:
    """Number of scorable, determined picks that matched the universe."""
    return sum(
        1
        for region_name, side, _ in scorable_entries(portfolio, regions)
        if region_name in universe and (side == BLUE) == bool(universe[region_name])
    )


@dataclass
class PickMatrix:
    """
    Vectorized portfolio representation for fast scoring.

    Use this instead of per-portfolio dict walks in simulation hot paths.
    Excluded entries are zero in every array.
    """
    player_names: List[str]
    region_names: List[str]
    if_blue: np.ndarray     # [n_players, n_regions] int64 contribution if region goes blue
    if_red: np.ndarray      # [n_players, n_regions] int64 contribution if region goes red
    pick_side: np.ndarray   # [n_players, n_regions] int8: +1 blue, -1 red, 0 no pick
    n_excluded: int = 0

    def __len__(self) -> int:
        return len(self.player_names)

    @property
    def n_regions(self) -> int:
        return len(self.region_names)

    @classmethod
    def from_portfolios(
        cls,
        portfolios: Sequence[Portfolio],
        regions: Sequence[Region]
    ) -> 'PickMatrix':
        """Build from portfolios against an ordered region list."""
        region_names = [r.name for r in regions]
        region_index = {name: i for i, name in enumerate(region_names)}
        by_name = {r.name: r for r in regions}

        n_players = len(portfolios)
        n_regions = len(region_names)
        if_blue = np.zeros((n_players, n_regions), dtype=np.int64)
        if_red = np.zeros((n_players, n_regions), dtype=np.int64)
        pick_side = np.zeros((n_players, n_regions), dtype=np.int8)

        n_excluded = 0
        for j, portfolio in enumerate(portfolios):
            entries = scorable_entries(portfolio, by_name)
            n_excluded += portfolio.n_picks - len(entries)
            for region_name, side, region in entries:
                i = region_index[region_name]
                profit = win_profit(region.probability_for(side))
                if side == BLUE:
                    if_blue[j, i] = profit
                    if_red[j, i] = LOSS
                    pick_side[j, i] = 1
                else:
                    if_blue[j, i] = LOSS
                    if_red[j, i] = profit
                    pick_side[j, i] = -1

        if n_excluded:
            logger.warning(
                "Excluded %d portfolio entries with unknown regions or invalid probabilities",
                n_excluded
            )

        return cls(
            player_names=[p.display_name for p in portfolios],
            region_names=region_names,
            if_blue=if_blue,
            if_red=if_red,
            pick_side=pick_side,
            n_excluded=n_excluded,
        )

    def score(self, outcomes: np.ndarray) -> np.ndarray:
        """
        Score every portfolio in every universe.

        Args:
            outcomes: [n_regions, n_sims] bool, True = blue won

        Returns:
            winnings: [n_players, n_sims] int64 net winnings
        """
        blue = outcomes.astype(np.int64)
        return self.if_blue @ blue + self.if_red @ (1 - blue)

    def flip_delta(self, region_idx: int, outcome_row: np.ndarray) -> np.ndarray:
        """
        Change in every player's winnings if one region's outcome is flipped.

        Args:
            region_idx: Region to flip
            outcome_row: [n_sims] bool actual outcomes of that region

        Returns:
            [n_players, n_sims] int64 delta
        """
        diff = (self.if_red[:, region_idx] - self.if_blue[:, region_idx])[:, np.newaxis]
        sign = np.where(outcome_row, 1, -1)[np.newaxis, :]
        return diff * sign

    def correct_picks(self, outcomes: np.ndarray) -> np.ndarray:
        """[n_players, n_sims] count of picks that matched the outcomes."""
        blue = outcomes.astype(np.int64)
        picked_blue = (self.pick_side == 1).astype(np.int64)
        picked_red = (self.pick_side == -1).astype(np.int64)
        return picked_blue @ blue + picked_red @ (1 - blue)
