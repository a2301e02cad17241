"""
Configuration management for the pick'em simulation engine.

Game constants, simulation presets, and JSON loading utilities.
"""

import json
from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional

from .types import STAKE, MAX_PICKS  # noqa: F401 (re-exported)


# =============================================================================
# Game Constants
# =============================================================================

DEFAULT_ITERATIONS = 10000

# A player is listed as helped/hurt by a region outcome only if that outcome
# decided the winner for/against them in more than this fraction of iterations.
IMPACT_THRESHOLD = 0.10

TOP_SCENARIOS = 3

# Uniform national shift bounds (percentage points)
MAX_NATIONAL_SHIFT = 20

# Risk rating bands on win frequency (%), exclusive lower bounds, checked in order
RISK_RATING_BANDS = (
    (40.0, "Conservative"),
    (25.0, "Balanced"),
    (15.0, "Aggressive"),
)
RISK_RATING_FLOOR = "Highly Speculative"


class SimulationConfigError(ValueError):
    """Raised for degenerate run parameters (no iterations, no players, ...)."""


# =============================================================================
# Simulation Config
# =============================================================================

@dataclass
class SimulationConfig:
    """
    Parameters for a Monte Carlo run.

    Attributes:
        iterations: Number of simulated universes
        seed: Random seed (None = fresh entropy)
        n_workers: Number of iteration ranges run concurrently
        swing_correlation: Shared national-swing correlation between regions.
                           0 = independent regions.
        impact_threshold: Minimum decisive fraction for helped/hurt lists
        top_scenarios: Number of scenarios returned by the profiler
    """
    iterations: int = DEFAULT_ITERATIONS
    seed: Optional[int] = None
    n_workers: int = 1
    swing_correlation: float = 0.0
    impact_threshold: float = IMPACT_THRESHOLD
    top_scenarios: int = TOP_SCENARIOS

    def __post_init__(self) -> None:
        if self.iterations <= 0:
            raise SimulationConfigError(
                f"iterations must be a positive integer (got {self.iterations})"
            )
        if self.n_workers < 1:
            raise SimulationConfigError(
                f"n_workers must be at least 1 (got {self.n_workers})"
            )
        if not 0.0 <= self.swing_correlation < 1.0:
            raise SimulationConfigError(
                f"swing_correlation must be in [0, 1) (got {self.swing_correlation})"
            )
        if not 0.0 <= self.impact_threshold <= 1.0:
            raise SimulationConfigError(
                f"impact_threshold must be in [0, 1] (got {self.impact_threshold})"
            )
        if self.top_scenarios < 1:
            raise SimulationConfigError(
                f"top_scenarios must be at least 1 (got {self.top_scenarios})"
            )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# =============================================================================
# Presets
# =============================================================================

SIMULATION_PRESETS: Dict[str, SimulationConfig] = {
    'quick': SimulationConfig(iterations=1000),
    'standard': SimulationConfig(iterations=DEFAULT_ITERATIONS),
    # Large runs are split across workers
    'thorough': SimulationConfig(iterations=100000, n_workers=4),
}


# =============================================================================
# JSON Loading Utilities
# =============================================================================

def load_simulation_config_from_json(path: str) -> SimulationConfig:
    """
    Load simulation config from JSON file.

    Expected format (all keys optional):
    {
        "iterations": 10000,
        "seed": 42,
        "n_workers": 1,
        "swing_correlation": 0.0,
        "impact_threshold": 0.1,
        "top_scenarios": 3
    }
    """
    with open(path, 'r') as f:
        data = json.load(f)

    return SimulationConfig(
        iterations=data.get('iterations', DEFAULT_ITERATIONS),
        seed=data.get('seed'),
        n_workers=data.get('n_workers', 1),
        swing_correlation=data.get('swing_correlation', 0.0),
        impact_threshold=data.get('impact_threshold', IMPACT_THRESHOLD),
        top_scenarios=data.get('top_scenarios', TOP_SCENARIOS),
    )


def save_simulation_config(config: SimulationConfig, path: str):
    """Save simulation config to JSON file."""
    with open(path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)


def resolve_config(
    preset: Optional[str] = None,
    path: Optional[str] = None,
    **overrides: Any,
) -> SimulationConfig:
    """
    Build a config from a preset or JSON file, then apply non-None overrides.

    A JSON file takes precedence over a preset.
    """
    if path is not None:
        base = load_simulation_config_from_json(path)
    elif preset is not None:
        if preset not in SIMULATION_PRESETS:
            raise SimulationConfigError(
                f"Unknown preset '{preset}'. Choose from: {', '.join(SIMULATION_PRESETS)}"
            )
        base = SIMULATION_PRESETS[preset]
    else:
        base = SimulationConfig()

    values = base.to_dict()
    for key, value in overrides.items():
        if value is not None:
            values[key] = value

    return SimulationConfig(**values)
