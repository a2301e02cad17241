"""
Monte Carlo sampler for region outcomes.

Each region resolves blue with probability p_inc / 100. By default regions
are independent. An optional Gaussian copula with one shared national factor
correlates regions while preserving each region's marginal probability.
"""

import numpy as np
from scipy import stats
from functools import partial
from typing import List, Dict, Optional, Callable, Sequence
import logging

from ..types import Region

logger = logging.getLogger(__name__)


# (regions, n_sims, rng) -> [n_regions, n_sims] bool, True = blue won
Sampler = Callable[[Sequence[Region], int, np.random.Generator], np.ndarray]


def sample_region(p_inc: float, draw: float) -> bool:
    """One region outcome from a uniform draw in [0, 1). True = blue won."""
    return draw < p_inc / 100.0


def blue_probabilities(regions: Sequence[Region]) -> np.ndarray:
    """[n_regions] blue win probability in [0, 1]."""
    if not regions:
        return np.zeros(0, dtype=np.float64)
    p = np.array([r.p_inc for r in regions], dtype=np.float64) / 100.0
    return np.clip(p, 0.0, 1.0)


def sample_outcomes(
    regions: Sequence[Region],
    n_sims: int,
    rng: Optional[np.random.Generator] = None,
    swing_correlation: float = 0.0
) -> np.ndarray:
    """
    Sample region outcomes for a block of universes.

    Args:
        regions: Regions to sample, in output row order
        n_sims: Number of universes
        rng: NumPy Generator instance for reproducibility
        swing_correlation: Correlation of every region with a shared national
                           factor. 0 = independent regions.

    Returns:
        outcomes: [n_regions, n_sims] bool, True = blue won
    """
    if rng is None:
        rng = np.random.default_rng()

    n_regions = len(regions)
    if n_regions == 0:
        return np.zeros((0, n_sims), dtype=bool)

    p = blue_probabilities(regions)

    if swing_correlation <= 0.0:
        draws = rng.random((n_regions, n_sims))
    else:
        draws = _national_swing_uniforms(n_regions, n_sims, swing_correlation, rng)

    return draws < p[:, np.newaxis]


def _national_swing_uniforms(
    n_regions: int,
    n_sims: int,
    swing_correlation: float,
    rng: np.random.Generator
) -> np.ndarray:
    """
    Correlated uniforms via a one-factor Gaussian copula.

    z_i = sqrt(rho) * g + sqrt(1 - rho) * e_i, where g is the national factor
    shared by every region in a universe. u_i = Phi(z_i) stays uniform, so
    marginal win probabilities are unchanged.
    """
    national = rng.standard_normal(n_sims)                  # [n_sims]
    local = rng.standard_normal((n_regions, n_sims))        # [n_regions, n_sims]

    z = (
        np.sqrt(swing_correlation) * national[np.newaxis, :]
        + np.sqrt(1.0 - swing_correlation) * local
    )
    u = stats.norm.cdf(z)

    # Clip to avoid exact 0 or 1
    return np.clip(u, 1e-12, 1 - 1e-12)


def make_sampler(swing_correlation: float = 0.0) -> Sampler:
    """Sampler with a fixed national-swing correlation."""
    return partial(sample_outcomes, swing_correlation=swing_correlation)


def sample_universe(
    regions: Sequence[Region],
    rng: Optional[np.random.Generator] = None
) -> Dict[str, bool]:
    """Sample one independent universe as region name -> blue won."""
    outcomes = sample_outcomes(regions, 1, rng=rng)
    return {r.name: bool(outcomes[i, 0]) for i, r in enumerate(regions)}


def decode_outcomes(region_names: List[str], column: np.ndarray) -> Dict[str, bool]:
    """Convert one outcomes column into a region name -> blue won mapping."""
    return {name: bool(column[i]) for i, name in enumerate(region_names)}
