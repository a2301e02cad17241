"""
Tests for the single-player risk profiler.

Run with: pytest tests/test_profiler.py -v
"""

import math

import numpy as np
import pytest

from pickem_engine.types import Region, Portfolio
from pickem_engine.config import SimulationConfigError
from pickem_engine.metrics.risk import classify_risk, compute_risk_metrics
from pickem_engine.simulation.profiler import profile_player


def _coin_flip_sampler(n_wins):
    """One region; the first n_wins universes of every block go blue."""
    def sampler(regions, n_sims, rng):
        outcomes = np.zeros((len(regions), n_sims), dtype=bool)
        outcomes[:, :n_wins] = True
        return outcomes

    return sampler


class TestRiskRating:

    @pytest.mark.parametrize("win_frequency, rating", [
        (41.0, "Conservative"),
        (40.0, "Balanced"),
        (26.0, "Balanced"),
        (25.0, "Aggressive"),
        (16.0, "Aggressive"),
        (15.0, "Highly Speculative"),
        (10.0, "Highly Speculative"),
        (0.0, "Highly Speculative"),
    ])
    def test_bands(self, win_frequency, rating):
        assert classify_risk(win_frequency) == rating

    @pytest.mark.parametrize("n_wins, rating", [
        (41, "Conservative"),
        (26, "Balanced"),
        (16, "Aggressive"),
        (10, "Highly Speculative"),
    ])
    def test_profiler_boundaries(self, n_wins, rating):
        """Stubbed sampling forces exact win frequencies."""
        regions = [Region("Nevada", 50.0, 50.0)]
        portfolio = Portfolio("X", {"Nevada": "blue"})

        profile = profile_player(
            portfolio, regions, iterations=100, seed=0,
            sampler=_coin_flip_sampler(n_wins),
        )

        metrics = profile.risk_metrics
        assert metrics.win_frequency == pytest.approx(n_wins)
        assert metrics.risk_rating == rating
        # Every universe is +100 or -100
        assert metrics.volatility == pytest.approx(100.0)
        assert metrics.avg_winning_picks == pytest.approx(1.0)


class TestRiskMetrics:

    def test_no_winning_rounds(self):
        metrics = compute_risk_metrics(
            iterations=10, sum_squared_returns=10 * 100 ** 2,
            winning_rounds=0, winning_picks=0,
        )
        assert metrics.avg_winning_picks == 0.0
        assert metrics.win_frequency == 0.0
        assert metrics.volatility == pytest.approx(100.0)


class TestProfilePlayer:

    def test_exact_scenarios_and_metrics(self, fixed_sampler):
        regions = [Region("A", 60.0, 40.0), Region("B", 25.0, 75.0)]
        portfolio = Portfolio("X", {"A": "blue", "B": "blue"})
        columns = [(True, True)] * 5 + [(True, False)] * 3 + [(False, False)] * 2

        profile = profile_player(
            portfolio, regions, iterations=10, seed=0, sampler=fixed_sampler(columns),
        )

        both = (167 - 100) + (400 - 100)
        only_a = (167 - 100) - 100
        scenarios = profile.winning_scenarios
        assert [s.frequency for s in scenarios] == [5, 3, 2]
        assert [s.win_amount for s in scenarios] == [both, only_a, -200]
        assert scenarios[0].outcomes == {"A": True, "B": True}
        assert scenarios[1].outcomes == {"A": True, "B": False}

        metrics = profile.risk_metrics
        assert metrics.win_frequency == pytest.approx(50.0)
        assert metrics.avg_winning_picks == pytest.approx(2.0)
        expected_vol = math.sqrt((5 * both ** 2 + 3 * only_a ** 2 + 2 * 200 ** 2) / 10)
        assert metrics.volatility == pytest.approx(expected_vol)

    def test_returns_at_most_three_scenarios(self, battleground, players):
        profile = profile_player(players[0], battleground, iterations=2000, seed=4)

        assert len(profile.winning_scenarios) == 3
        freqs = [s.frequency for s in profile.winning_scenarios]
        assert freqs == sorted(freqs, reverse=True)
        assert sum(freqs) <= 2000

    def test_samples_only_picked_regions(self, battleground):
        seen = []

        def recording_sampler(regions, n_sims, rng):
            seen.append([r.name for r in regions])
            return np.ones((len(regions), n_sims), dtype=bool)

        portfolio = Portfolio("X", {"Michigan": "blue", "Atlantis": "red", "Georgia": "red"})
        profile = profile_player(
            portfolio, battleground, iterations=50, seed=0, sampler=recording_sampler,
        )

        assert seen == [["Michigan", "Georgia"]]
        assert set(profile.winning_scenarios[0].outcomes) == {"Michigan", "Georgia"}

    def test_safer_picks_win_more_often(self):
        regions = [Region(f"R{i}", 90.0, 10.0) for i in range(3)]
        safe = Portfolio("Safe", {r.name: "blue" for r in regions})
        risky = Portfolio("Risky", {r.name: "red" for r in regions})

        safe_profile = profile_player(safe, regions, iterations=20000, seed=8)
        risky_profile = profile_player(risky, regions, iterations=20000, seed=8)

        # Safe needs all three (0.9^3); risky needs any one (1 - 0.9^3)
        assert safe_profile.risk_metrics.win_frequency == pytest.approx(72.9, abs=1.5)
        assert risky_profile.risk_metrics.win_frequency == pytest.approx(27.1, abs=1.5)
        assert safe_profile.risk_metrics.win_frequency > risky_profile.risk_metrics.win_frequency

    def test_parallel_run_accounts_for_every_iteration(self, battleground, players):
        profile = profile_player(
            players[1], battleground, iterations=5001, seed=12, n_workers=4,
        )
        assert profile.iterations == 5001

    def test_parallel_run_repeats_with_same_seed(self, battleground, players):
        a = profile_player(players[2], battleground, iterations=3000, seed=6, n_workers=3)
        b = profile_player(players[2], battleground, iterations=3000, seed=6, n_workers=3)
        assert a.to_dict() == b.to_dict()

    def test_empty_portfolio(self, battleground):
        profile = profile_player(Portfolio("Nobody", {}), battleground, iterations=100, seed=0)

        assert profile.risk_metrics.win_frequency == 0.0
        assert profile.risk_metrics.volatility == 0.0
        assert profile.risk_metrics.risk_rating == "Highly Speculative"
        assert profile.winning_scenarios[0].frequency == 100

    def test_rejects_zero_iterations(self, battleground, players):
        with pytest.raises(SimulationConfigError):
            profile_player(players[0], battleground, iterations=0)

    def test_to_dict_shape(self, battleground, players):
        data = profile_player(players[0], battleground, iterations=200, seed=1).to_dict()

        assert set(data['riskMetrics']) == {
            'volatility', 'winFrequency', 'avgWinningPicks', 'riskRating'
        }
        assert set(data['winningScenarios'][0]) == {'winAmount', 'frequency', 'picks'}
