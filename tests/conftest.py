"""Shared fixtures for engine tests."""

import json

import numpy as np
import pytest

from pickem_engine.types import Region, Portfolio


@pytest.fixture
def battleground():
    """Five regions with a mix of lean-blue, lean-red and toss-up probabilities."""
    return [
        Region("Arizona", 35.0, 65.0, 11),
        Region("Georgia", 45.0, 55.0, 16),
        Region("Michigan", 70.0, 30.0, 15),
        Region("Nevada", 50.0, 50.0, 6),
        Region("Pennsylvania", 60.0, 40.0, 19),
    ]


@pytest.fixture
def players():
    return [
        Portfolio("Alice", {"Arizona": "red", "Michigan": "blue", "Pennsylvania": "blue"}),
        Portfolio("Bob", {"Georgia": "blue", "Nevada": "blue", "Arizona": "blue"}),
        Portfolio("Cara", {"Michigan": "red", "Pennsylvania": "red"}),
    ]


def _fixed_sampler(columns):
    """
    Sampler stub that replays fixed universes.

    columns: list of per-universe tuples of bools (one per region passed in),
    cycled to fill n_sims.
    """
    pattern = np.array(columns, dtype=bool).T  # [n_regions, n_patterns]

    def sampler(regions, n_sims, rng):
        reps = -(-n_sims // pattern.shape[1])
        return np.tile(pattern, reps)[:, :n_sims]

    return sampler


@pytest.fixture
def fixed_sampler():
    """Factory for samplers that replay fixed universes."""
    return _fixed_sampler


@pytest.fixture
def projections_csv(tmp_path):
    path = tmp_path / "projections.csv"
    path.write_text(
        "state_full,winstate_inc,winstate_chal,evs\n"
        "Arizona,35,65,11\n"
        "Georgia,45,55,16\n"
        "Michigan,70,30,15\n"
        "Nevada,50,50,6\n"
        "Pennsylvania,60,40,19\n"
    )
    return str(path)


@pytest.fixture
def picks_json(tmp_path):
    path = tmp_path / "picks.json"
    records = [
        {"displayName": "Alice", "email": "alice@example.com",
         "selections": {"Arizona": "red", "Michigan": "blue", "Pennsylvania": "blue"}},
        {"email": "bob@example.com",
         "selections": {"Georgia": "blue", "Nevada": "blue", "Ohio": "none"}},
        {"displayName": "Cara",
         "selections": {"Michigan": "red", "Pennsylvania": "red"}},
    ]
    path.write_text(json.dumps(records))
    return str(path)
