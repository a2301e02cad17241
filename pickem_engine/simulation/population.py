"""
Population simulation: who is most likely to finish with the best portfolio.

For every simulated universe, all portfolios are scored, the winner is the
portfolio with the strictly greatest net winnings (ties go to the earliest
portfolio in input order), and every region is re-scored with its outcome
flipped to find where a single region decided the winner.
"""

import numpy as np
from dataclasses import dataclass
from typing import List, Optional, Sequence
import logging

from ..types import Region, Portfolio, RankedPlayer, RegionImpact, PopulationResult
from ..config import (
    SimulationConfig, SimulationConfigError, DEFAULT_ITERATIONS, IMPACT_THRESHOLD,
)
from ..scoring.portfolio import PickMatrix, require_unique_names
from .engine import Sampler, make_sampler
from .parallel import run_chunked, iter_blocks

logger = logging.getLogger(__name__)

# Outcome axis of the helps/hurts arrays
BLUE_IDX = 0
RED_IDX = 1


@dataclass
class PopulationTally:
    """
    Mergeable accumulator for a population run.

    Attributes:
        win_counts: [n_players] universes won
        decisive_counts: [n_regions] universes where flipping the region changed the winner
        helps: [n_regions, 2, n_players] times the actual outcome (blue/red) made the player the winner
        hurts: [n_regions, 2, n_players] times the actual outcome cost the player the win
        iterations: Universes accumulated
    """
    win_counts: np.ndarray
    decisive_counts: np.ndarray
    helps: np.ndarray
    hurts: np.ndarray
    iterations: int = 0

    @classmethod
    def empty(cls, n_players: int, n_regions: int) -> 'PopulationTally':
        return cls(
            win_counts=np.zeros(n_players, dtype=np.int64),
            decisive_counts=np.zeros(n_regions, dtype=np.int64),
            helps=np.zeros((n_regions, 2, n_players), dtype=np.int64),
            hurts=np.zeros((n_regions, 2, n_players), dtype=np.int64),
        )

    def merge(self, other: 'PopulationTally') -> 'PopulationTally':
        return PopulationTally(
            win_counts=self.win_counts + other.win_counts,
            decisive_counts=self.decisive_counts + other.decisive_counts,
            helps=self.helps + other.helps,
            hurts=self.hurts + other.hurts,
            iterations=self.iterations + other.iterations,
        )


def tally_universes(matrix: PickMatrix, outcomes: np.ndarray, tally: PopulationTally) -> None:
    """
    Accumulate winners and decisive regions for a block of universes.

    Args:
        matrix: Vectorized portfolios
        outcomes: [n_regions, n_sims] bool, True = blue won
        tally: Accumulator updated in place
    """
    n_sims = outcomes.shape[1]
    winnings = matrix.score(outcomes)                  # [n_players, n_sims]

    # argmax returns the first maximum: ties go to input order
    winners = np.argmax(winnings, axis=0)
    tally.win_counts += np.bincount(winners, minlength=len(matrix))
    tally.iterations += n_sims

    for i in range(matrix.n_regions):
        if not matrix.pick_side[:, i].any():
            continue

        row = outcomes[i]
        flipped_winners = np.argmax(winnings + matrix.flip_delta(i, row), axis=0)
        changed = flipped_winners != winners
        n_changed = int(changed.sum())
        if n_changed == 0:
            continue

        tally.decisive_counts[i] += n_changed
        side = np.where(row[changed], BLUE_IDX, RED_IDX)
        np.add.at(tally.helps[i], (side, winners[changed]), 1)
        np.add.at(tally.hurts[i], (side, flipped_winners[changed]), 1)


def _names_over_threshold(counts: np.ndarray, names: List[str], threshold: float) -> List[str]:
    """Player names with count > threshold, most frequent first."""
    order = sorted(range(len(names)), key=lambda j: -counts[j])
    return [names[j] for j in order if counts[j] > threshold]


def summarize_population(
    matrix: PickMatrix,
    tally: PopulationTally,
    impact_threshold: float = IMPACT_THRESHOLD
) -> PopulationResult:
    """Turn a finished tally into ranked players and region impacts."""
    iterations = tally.iterations
    names = matrix.player_names
    threshold = iterations * impact_threshold

    impacts = []
    for i, region_name in enumerate(matrix.region_names):
        impacts.append(RegionImpact(
            state=region_name,
            blue_helps=_names_over_threshold(tally.helps[i, BLUE_IDX], names, threshold),
            blue_hurts=_names_over_threshold(tally.hurts[i, BLUE_IDX], names, threshold),
            red_helps=_names_over_threshold(tally.helps[i, RED_IDX], names, threshold),
            red_hurts=_names_over_threshold(tally.hurts[i, RED_IDX], names, threshold),
            importance=float(tally.decisive_counts[i] / iterations),
        ))
    impacts.sort(key=lambda r: -r.importance)

    players = []
    for j, name in enumerate(names):
        players.append(RankedPlayer(
            display_name=name,
            win_probability=float(tally.win_counts[j] / iterations * 100),
            win_count=int(tally.win_counts[j]),
            needs_blue=[r.state for r in impacts if name in r.blue_helps],
            needs_red=[r.state for r in impacts if name in r.red_helps],
        ))
    players.sort(key=lambda p: -p.win_probability)

    return PopulationResult(players=players, region_impacts=impacts, iterations=iterations)


def simulate_population(
    portfolios: Sequence[Portfolio],
    regions: Sequence[Region],
    iterations: int = DEFAULT_ITERATIONS,
    seed: Optional[int] = None,
    n_workers: int = 1,
    swing_correlation: float = 0.0,
    impact_threshold: float = IMPACT_THRESHOLD,
    sampler: Optional[Sampler] = None
) -> PopulationResult:
    """
    Estimate each player's probability of finishing with the best portfolio.

    Args:
        portfolios: Player portfolios, in tie-break order
        regions: Region probabilities
        iterations: Number of simulated universes
        seed: Random seed for reproducibility
        n_workers: Number of iteration ranges run concurrently
        swing_correlation: National-swing correlation for the default sampler
        impact_threshold: Minimum decisive fraction for helped/hurt lists
        sampler: Optional replacement sampler (regions, n_sims, rng) -> outcomes

    Returns:
        PopulationResult with players ranked by win probability and region
        impacts ranked by importance

    Raises:
        SimulationConfigError: If iterations <= 0, there are no portfolios,
            or two portfolios share a display name
    """
    config = SimulationConfig(
        iterations=iterations,
        seed=seed,
        n_workers=n_workers,
        swing_correlation=swing_correlation,
        impact_threshold=impact_threshold,
    )
    if len(portfolios) == 0:
        raise SimulationConfigError("Population simulation needs at least one portfolio")
    require_unique_names(portfolios)

    if sampler is None:
        sampler = make_sampler(config.swing_correlation)

    regions = list(regions)
    matrix = PickMatrix.from_portfolios(portfolios, regions)

    logger.info(
        "Simulating %d universes for %d players over %d regions",
        config.iterations, len(matrix), matrix.n_regions
    )

    def run_range(n_iterations: int, offset: int, rng: np.random.Generator) -> PopulationTally:
        tally = PopulationTally.empty(len(matrix), matrix.n_regions)
        for _, size in iter_blocks(n_iterations):
            outcomes = sampler(regions, size, rng)
            tally_universes(matrix, outcomes, tally)
        return tally

    tally = run_chunked(
        run_range,
        PopulationTally.merge,
        iterations=config.iterations,
        seed=config.seed,
        n_workers=config.n_workers,
    )

    result = summarize_population(matrix, tally, config.impact_threshold)

    leader = result.players[0]
    logger.info(
        "Population run complete: leader %s at %.1f%%",
        leader.display_name, leader.win_probability
    )

    return result
