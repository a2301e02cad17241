"""
Tests for the pickem command-line interface.

Run with: pytest tests/test_cli.py -v
"""

import json

import pytest
from click.testing import CliRunner

from pickem_engine.cli import main


@pytest.fixture
def runner():
    return CliRunner()


class TestSimulateCommand:

    def test_prints_win_probabilities(self, runner, projections_csv, picks_json):
        result = runner.invoke(
            main, ['--quiet', 'simulate', projections_csv, picks_json, '-n', '500', '--seed', '1']
        )

        assert result.exit_code == 0, result.output
        assert "WIN PROBABILITIES (500 simulations)" in result.output
        for name in ("Alice", "bob", "Cara"):
            assert name in result.output

    def test_writes_json(self, runner, projections_csv, picks_json, tmp_path):
        output = str(tmp_path / "out.json")
        result = runner.invoke(
            main, ['--quiet', 'simulate', projections_csv, picks_json,
                   '-n', '400', '--seed', '2', '-w', '2', '-o', output]
        )

        assert result.exit_code == 0, result.output
        with open(output) as f:
            data = json.load(f)
        assert data['iterations'] == 400
        assert sum(u['winCount'] for u in data['users']) == 400
        assert len(data['stateImpacts']) == 5

    def test_rejects_zero_iterations(self, runner, projections_csv, picks_json):
        result = runner.invoke(
            main, ['--quiet', 'simulate', projections_csv, picks_json, '-n', '0']
        )
        assert result.exit_code != 0

    def test_rejects_empty_picks_file(self, runner, projections_csv, tmp_path):
        picks = tmp_path / "empty.json"
        picks.write_text("[]")

        result = runner.invoke(
            main, ['--quiet', 'simulate', projections_csv, str(picks), '-n', '100']
        )
        assert result.exit_code == 1
        assert "Error" in result.output


class TestProfileCommand:

    def test_profiles_named_player(self, runner, projections_csv, picks_json):
        result = runner.invoke(
            main, ['--quiet', 'profile', projections_csv, picks_json,
                   '--player', 'bob', '-n', '1000', '--seed', '3']
        )

        assert result.exit_code == 0, result.output
        assert "RISK PROFILE: bob" in result.output
        assert "Risk Rating:" in result.output

    def test_unknown_player(self, runner, projections_csv, picks_json):
        result = runner.invoke(
            main, ['--quiet', 'profile', projections_csv, picks_json, '--player', 'Zed']
        )
        assert result.exit_code == 2
        assert "Zed" in result.output


class TestExploreCommand:

    def test_shift(self, runner, projections_csv, picks_json):
        result = runner.invoke(
            main, ['--quiet', 'explore', projections_csv, picks_json, '--shift', '0']
        )

        assert result.exit_code == 0, result.output
        assert "Winner: Alice" in result.output

    def test_outcomes_file(self, runner, projections_csv, picks_json, tmp_path):
        outcomes = tmp_path / "outcomes.json"
        outcomes.write_text(json.dumps({"Michigan": "red", "Pennsylvania": "red"}))
        output = str(tmp_path / "explore.json")

        result = runner.invoke(
            main, ['--quiet', 'explore', projections_csv, picks_json,
                   '--outcomes', str(outcomes), '-o', output]
        )

        assert result.exit_code == 0, result.output
        with open(output) as f:
            data = json.load(f)
        assert data['winner'] == "Cara"
        assert data['winnings']['bob'] == 0
        assert data['winnings']['Alice'] == -200

    def test_requires_exactly_one_source(self, runner, projections_csv, picks_json):
        result = runner.invoke(main, ['--quiet', 'explore', projections_csv, picks_json])
        assert result.exit_code == 2

    @pytest.mark.parametrize("shift", ['25', 'nan'])
    def test_rejects_invalid_shift(self, runner, projections_csv, picks_json, shift):
        result = runner.invoke(
            main, ['--quiet', 'explore', projections_csv, picks_json, '--shift', shift]
        )
        assert result.exit_code == 2


class TestStandingsCommand:

    def test_potential_standings(self, runner, projections_csv, picks_json):
        result = runner.invoke(main, ['--quiet', 'standings', projections_csv, picks_json])

        assert result.exit_code == 0, result.output
        assert "potential" in result.output
        assert "returns" not in result.output

    def test_realized_standings(self, runner, projections_csv, picks_json, tmp_path):
        results = tmp_path / "results.json"
        results.write_text(json.dumps({"results": {"Georgia": "blue", "Nevada": "blue"}}))

        result = runner.invoke(
            main, ['--quiet', 'standings', projections_csv, picks_json,
                   '--results', str(results)]
        )

        assert result.exit_code == 0, result.output
        first_line = result.output.strip().splitlines()[0]
        assert "bob" in first_line
        assert "returns $422" in first_line
