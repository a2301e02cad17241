"""
Single-player risk profiling.

Simulates only the regions a portfolio actually picks, records the net
return of every universe, and groups universes by their exact outcome
combination to find the most frequent scenarios.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
import logging

from ..types import Region, Portfolio, RiskProfile, WinningScenario
from ..config import SimulationConfig, DEFAULT_ITERATIONS, TOP_SCENARIOS
from ..scoring.portfolio import PickMatrix, scorable_entries
from ..metrics.risk import compute_risk_metrics
from .engine import Sampler, make_sampler
from .parallel import run_chunked, iter_blocks

logger = logging.getLogger(__name__)


@dataclass
class ScenarioCount:
    """Occurrences of one outcome combination."""
    frequency: int
    win_amount: int
    first_seen: int


@dataclass
class ProfileTally:
    """
    Mergeable accumulator for a profiler run.

    Scenarios are keyed by a bit signature: bit i set = region i went blue.
    """
    iterations: int = 0
    sum_squared_returns: float = 0.0
    winning_rounds: int = 0
    winning_picks: int = 0
    scenarios: Dict[int, ScenarioCount] = field(default_factory=dict)

    def merge(self, other: 'ProfileTally') -> 'ProfileTally':
        scenarios = {
            code: ScenarioCount(s.frequency, s.win_amount, s.first_seen)
            for code, s in self.scenarios.items()
        }
        for code, s in other.scenarios.items():
            if code in scenarios:
                existing = scenarios[code]
                existing.frequency += s.frequency
                existing.first_seen = min(existing.first_seen, s.first_seen)
            else:
                scenarios[code] = ScenarioCount(s.frequency, s.win_amount, s.first_seen)

        return ProfileTally(
            iterations=self.iterations + other.iterations,
            sum_squared_returns=self.sum_squared_returns + other.sum_squared_returns,
            winning_rounds=self.winning_rounds + other.winning_rounds,
            winning_picks=self.winning_picks + other.winning_picks,
            scenarios=scenarios,
        )


def scenario_codes(outcomes: np.ndarray) -> np.ndarray:
    """[n_regions, n_sims] bool -> [n_sims] int64 bit signatures."""
    n_regions = outcomes.shape[0]
    weights = (np.int64(1) << np.arange(n_regions, dtype=np.int64))
    return weights @ outcomes.astype(np.int64)


def tally_profile(
    matrix: PickMatrix,
    outcomes: np.ndarray,
    tally: ProfileTally,
    offset: int = 0
) -> None:
    """
    Accumulate returns and scenario counts for a block of universes.

    Args:
        matrix: Single-portfolio PickMatrix over the portfolio's regions
        outcomes: [n_regions, n_sims] bool
        tally: Accumulator updated in place
        offset: Global index of the block's first universe
    """
    winnings = matrix.score(outcomes)[0]          # [n_sims]
    correct = matrix.correct_picks(outcomes)[0]   # [n_sims]
    winning = winnings > 0

    tally.iterations += outcomes.shape[1]
    tally.sum_squared_returns += float(np.sum(winnings.astype(np.float64) ** 2))
    tally.winning_rounds += int(winning.sum())
    tally.winning_picks += int(correct[winning].sum())

    codes = scenario_codes(outcomes)
    unique_codes, first_idx, counts = np.unique(codes, return_index=True, return_counts=True)
    for code, idx, count in zip(unique_codes, first_idx, counts):
        code = int(code)
        existing = tally.scenarios.get(code)
        if existing is None:
            tally.scenarios[code] = ScenarioCount(
                frequency=int(count),
                win_amount=int(winnings[idx]),
                first_seen=offset + int(idx),
            )
        else:
            existing.frequency += int(count)


def top_scenarios(
    tally: ProfileTally,
    region_names: List[str],
    n: int = TOP_SCENARIOS
) -> List[WinningScenario]:
    """Most frequent outcome combinations; ties keep first-seen order."""
    ranked = sorted(
        tally.scenarios.items(),
        key=lambda item: (-item[1].frequency, item[1].first_seen)
    )
    scenarios = []
    for code, count in ranked[:n]:
        outcomes = {name: bool((code >> i) & 1) for i, name in enumerate(region_names)}
        scenarios.append(WinningScenario(
            win_amount=count.win_amount,
            frequency=count.frequency,
            outcomes=outcomes,
        ))
    return scenarios


def profile_player(
    portfolio: Portfolio,
    regions: Sequence[Region],
    iterations: int = DEFAULT_ITERATIONS,
    seed: Optional[int] = None,
    n_workers: int = 1,
    swing_correlation: float = 0.0,
    n_scenarios: int = TOP_SCENARIOS,
    sampler: Optional[Sampler] = None
) -> RiskProfile:
    """
    Characterize one portfolio's return distribution.

    Only the portfolio's scorable regions are sampled.

    Args:
        portfolio: Player picks
        regions: Region probabilities (may include regions not picked)
        iterations: Number of simulated universes
        seed: Random seed for reproducibility
        n_workers: Number of iteration ranges run concurrently
        swing_correlation: National-swing correlation for the default sampler
        n_scenarios: Number of top scenarios to return
        sampler: Optional replacement sampler (regions, n_sims, rng) -> outcomes

    Returns:
        RiskProfile with top scenarios and risk metrics

    Raises:
        SimulationConfigError: If iterations <= 0
    """
    config = SimulationConfig(
        iterations=iterations,
        seed=seed,
        n_workers=n_workers,
        swing_correlation=swing_correlation,
        top_scenarios=n_scenarios,
    )
    if sampler is None:
        sampler = make_sampler(config.swing_correlation)

    by_name = {r.name: r for r in regions}
    picked_regions = [region for _, _, region in scorable_entries(portfolio, by_name)]
    matrix = PickMatrix.from_portfolios([portfolio], picked_regions)

    logger.info(
        "Profiling %s: %d universes over %d picked regions",
        portfolio.display_name, config.iterations, len(picked_regions)
    )

    def run_range(n_iterations: int, offset: int, rng: np.random.Generator) -> ProfileTally:
        tally = ProfileTally()
        for start, size in iter_blocks(n_iterations):
            outcomes = sampler(picked_regions, size, rng)
            tally_profile(matrix, outcomes, tally, offset=offset + start)
        return tally

    tally = run_chunked(
        run_range,
        ProfileTally.merge,
        iterations=config.iterations,
        seed=config.seed,
        n_workers=config.n_workers,
    )

    metrics = compute_risk_metrics(
        tally.iterations,
        tally.sum_squared_returns,
        tally.winning_rounds,
        tally.winning_picks,
    )

    logger.info(
        "Profile complete: win frequency %.1f%%, volatility %.1f, rating %s",
        metrics.win_frequency, metrics.volatility, metrics.risk_rating
    )

    return RiskProfile(
        winning_scenarios=top_scenarios(tally, matrix.region_names, config.top_scenarios),
        risk_metrics=metrics,
        iterations=tally.iterations,
    )
