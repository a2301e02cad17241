"""Monte Carlo simulation engine."""

from .engine import sample_outcomes, sample_universe, make_sampler
from .population import simulate_population
from .profiler import profile_player

__all__ = [
    "sample_outcomes",
    "sample_universe",
    "make_sampler",
    "simulate_population",
    "profile_player",
]
