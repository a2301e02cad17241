"""
Deterministic what-if exploration.

Re-scores every portfolio against one fixed (possibly partial) outcome
assignment, either supplied directly or derived from a uniform national
shift of every region's probability.
"""

from typing import Dict, List, Optional, Sequence
import logging

from .types import Region, Portfolio, ExplorerResult, BLUE, RED, SIDES
from .config import MAX_NATIONAL_SHIFT, SimulationConfigError
from .scoring.portfolio import score_portfolio, require_unique_names

logger = logging.getLogger(__name__)


def explore(
    portfolios: Sequence[Portfolio],
    regions: Sequence[Region],
    outcomes: Dict[str, Optional[str]]
) -> ExplorerResult:
    """
    Score every portfolio against a fixed outcome assignment.

    Args:
        portfolios: Player portfolios, in tie-break order
        regions: Region probabilities
        outcomes: region name -> 'red' | 'blue'. Regions that are missing
                  (or map to anything else) are undetermined and score zero.

    Returns:
        ExplorerResult with the strictly-best player (earliest on ties) and
        every player's net winnings

    Raises:
        SimulationConfigError: If two portfolios share a display name
    """
    require_unique_names(portfolios)
    by_name = {r.name: r for r in regions}
    universe = {
        region_name: side == BLUE
        for region_name, side in outcomes.items()
        if side in SIDES
    }

    winnings: Dict[str, int] = {}
    winner = None
    best = None
    for portfolio in portfolios:
        total = score_portfolio(portfolio, universe, by_name)
        winnings[portfolio.display_name] = total
        if best is None or total > best:
            best = total
            winner = portfolio.display_name

    return ExplorerResult(winner=winner, winnings=winnings)


def shift_regions(regions: Sequence[Region], shift: float) -> List[Region]:
    """
    Apply a uniform national shift to every region.

    p_inc becomes clamp(p_inc + shift, 0, 100) and p_chal becomes 100 - p_inc.
    Positive shifts favour blue.

    Raises:
        SimulationConfigError: If shift is NaN or |shift| > MAX_NATIONAL_SHIFT
    """
    # NaN fails this check
    if not -MAX_NATIONAL_SHIFT <= shift <= MAX_NATIONAL_SHIFT:
        raise SimulationConfigError(
            f"National shift must be within +/-{MAX_NATIONAL_SHIFT} points (got {shift})"
        )

    shifted = []
    for region in regions:
        p_inc = min(max(region.p_inc + shift, 0.0), 100.0)
        shifted.append(Region(
            name=region.name,
            p_inc=p_inc,
            p_chal=100.0 - p_inc,
            evs=region.evs,
        ))
    return shifted


def uniform_shift_outcomes(regions: Sequence[Region], shift: float) -> Dict[str, str]:
    """
    Outcome assignment implied by a uniform national shift.

    Each region goes to whichever side's shifted probability exceeds 50;
    an exact 50/50 goes red.
    """
    return {
        region.name: BLUE if region.p_inc > 50.0 else RED
        for region in shift_regions(regions, shift)
    }


def explore_shift(
    portfolios: Sequence[Portfolio],
    regions: Sequence[Region],
    shift: float
) -> ExplorerResult:
    """Explore the outcome assignment implied by a uniform national shift."""
    outcomes = uniform_shift_outcomes(regions, shift)
    n_blue = sum(1 for side in outcomes.values() if side == BLUE)
    logger.info(
        "National shift %+.1f: %d blue, %d red",
        shift, n_blue, len(outcomes) - n_blue
    )
    return explore(portfolios, regions, outcomes)
