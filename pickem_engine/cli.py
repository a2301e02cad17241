"""
Command-line interface for the election pick'em simulation engine.
"""

import click
import json
import logging

from .config import SIMULATION_PRESETS, SimulationConfigError, resolve_config, MAX_NATIONAL_SHIFT
from .data import load_regions, load_portfolios, load_outcomes, find_portfolio
from .simulation import simulate_population, profile_player
from .explorer import explore, explore_shift
from .scoring import rank_standings


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )


def _load_inputs(projections, picks):
    try:
        regions = load_regions(projections)
        portfolios = load_portfolios(picks)
    except ValueError as e:
        raise click.ClickException(str(e))
    return regions, portfolios


def _write_json(data, output):
    with open(output, 'w') as f:
        json.dump(data, f, indent=2)
    click.echo(f"\nResults saved to {output}")


def _run_options(func):
    """Options shared by the Monte Carlo commands."""
    options = [
        click.option('--iterations', '-n', type=int, default=None,
                     help='Number of simulated universes (default: preset or 10000)'),
        click.option('--seed', type=int, default=None,
                     help='Random seed for reproducibility'),
        click.option('--workers', '-w', type=int, default=None,
                     help='Iteration ranges run concurrently (default: 1)'),
        click.option('--correlation', type=float, default=None,
                     help='National-swing correlation between regions, 0 <= c < 1 (default: 0)'),
        click.option('--preset', '-p', type=click.Choice(list(SIMULATION_PRESETS.keys())),
                     default=None, help='Use a preset simulation configuration'),
        click.option('--config', 'config_path', type=click.Path(exists=True), default=None,
                     help='Simulation config JSON (overrides --preset)'),
        click.option('--output', '-o', type=click.Path(), default=None,
                     help='Output file for results JSON'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _resolve(preset, config_path, iterations, seed, workers, correlation):
    try:
        return resolve_config(
            preset=preset,
            path=config_path,
            iterations=iterations,
            seed=seed,
            n_workers=workers,
            swing_correlation=correlation,
        )
    except SimulationConfigError as e:
        raise click.BadParameter(str(e))


@click.group()
@click.option('--verbose/--quiet', '-v/-q', default=True, help='Verbose output')
@click.pass_context
def main(ctx, verbose):
    """Election pick'em outcome simulator."""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    _setup_logging(verbose)


@main.command()
@click.argument('projections', type=click.Path(exists=True))
@click.argument('picks', type=click.Path(exists=True))
@_run_options
@click.option('--top-regions', type=int, default=10, help='Region impacts to display (default: 10)')
def simulate(projections, picks, iterations, seed, workers, correlation, preset,
             config_path, output, top_regions):
    """
    Estimate every player's chance of finishing first.

    PROJECTIONS: projections CSV. PICKS: player picks JSON.
    """
    config = _resolve(preset, config_path, iterations, seed, workers, correlation)
    regions, portfolios = _load_inputs(projections, picks)

    try:
        result = simulate_population(
            portfolios, regions,
            iterations=config.iterations,
            seed=config.seed,
            n_workers=config.n_workers,
            swing_correlation=config.swing_correlation,
            impact_threshold=config.impact_threshold,
        )
    except SimulationConfigError as e:
        raise click.ClickException(str(e))

    click.echo("\n" + "=" * 60)
    click.echo(f"WIN PROBABILITIES ({result.iterations} simulations)")
    click.echo("=" * 60)
    for i, player in enumerate(result.players):
        click.echo(f"  {i+1}. {player.display_name}: {player.win_probability:.1f}%")
        if player.needs_blue:
            click.echo(f"       needs blue: {', '.join(player.needs_blue)}")
        if player.needs_red:
            click.echo(f"       needs red:  {', '.join(player.needs_red)}")

    click.echo("\nMost decisive regions:")
    for impact in result.region_impacts[:top_regions]:
        click.echo(f"  {impact.state}: {impact.importance:.1%}")

    if output:
        _write_json(result.to_dict(), output)


@main.command()
@click.argument('projections', type=click.Path(exists=True))
@click.argument('picks', type=click.Path(exists=True))
@click.option('--player', required=True, help='Display name of the player to profile')
@_run_options
def profile(projections, picks, player, iterations, seed, workers, correlation, preset,
            config_path, output):
    """
    Risk profile for one player's picks.

    PROJECTIONS: projections CSV. PICKS: player picks JSON.
    """
    config = _resolve(preset, config_path, iterations, seed, workers, correlation)
    regions, portfolios = _load_inputs(projections, picks)

    portfolio = find_portfolio(portfolios, player)
    if portfolio is None:
        raise click.BadParameter(f"No picks found for '{player}'", param_hint="'--player'")

    result = profile_player(
        portfolio, regions,
        iterations=config.iterations,
        seed=config.seed,
        n_workers=config.n_workers,
        swing_correlation=config.swing_correlation,
        n_scenarios=config.top_scenarios,
    )

    metrics = result.risk_metrics
    click.echo("\n" + "=" * 60)
    click.echo(f"RISK PROFILE: {portfolio.display_name}")
    click.echo("=" * 60)
    click.echo(f"  Risk Rating:        {metrics.risk_rating}")
    click.echo(f"  Win Frequency:      {metrics.win_frequency:.1f}%")
    click.echo(f"  Volatility:         ${metrics.volatility:.2f}")
    click.echo(f"  Avg Winning Picks:  {metrics.avg_winning_picks:.2f}")

    click.echo("\nMost common scenarios:")
    for scenario in result.winning_scenarios:
        blue = [name for name, won in scenario.outcomes.items() if won]
        click.echo(
            f"  {scenario.frequency / result.iterations:.1%}: ${scenario.win_amount:+d}"
            f" (blue: {', '.join(blue) if blue else 'none'})"
        )

    if output:
        _write_json(result.to_dict(), output)


@main.command(name='explore')
@click.argument('projections', type=click.Path(exists=True))
@click.argument('picks', type=click.Path(exists=True))
@click.option('--outcomes', 'outcomes_path', type=click.Path(exists=True),
              help='Outcome assignment JSON (region -> red/blue/none)')
@click.option('--shift', type=float, default=None,
              help=f'Uniform national shift in points, -{MAX_NATIONAL_SHIFT} to {MAX_NATIONAL_SHIFT} (positive favours blue)')
@click.option('--output', '-o', type=click.Path(), default=None,
              help='Output file for results JSON')
def explore_command(projections, picks, outcomes_path, shift, output):
    """
    Deterministic what-if scoring of every player.

    PROJECTIONS: projections CSV. PICKS: player picks JSON.
    """
    if (outcomes_path is None) == (shift is None):
        raise click.UsageError("Provide exactly one of --outcomes or --shift")

    regions, portfolios = _load_inputs(projections, picks)

    if shift is not None:
        try:
            result = explore_shift(portfolios, regions, shift)
        except SimulationConfigError as e:
            raise click.BadParameter(str(e), param_hint="'--shift'")
    else:
        try:
            outcomes = load_outcomes(outcomes_path)
        except ValueError as e:
            raise click.ClickException(str(e))
        result = explore(portfolios, regions, outcomes)

    click.echo(f"\nWinner: {result.winner if result.winner is not None else '-'}")
    for name, amount in sorted(result.winnings.items(), key=lambda item: -item[1]):
        click.echo(f"  {name}: ${amount:+d}")

    if output:
        _write_json(result.to_dict(), output)


@main.command()
@click.argument('projections', type=click.Path(exists=True))
@click.argument('picks', type=click.Path(exists=True))
@click.option('--results', 'results_path', type=click.Path(exists=True),
              help='Declared results JSON (region -> red/blue)')
def standings(projections, picks, results_path):
    """
    Leaderboard by potential winnings, or by actual returns once results exist.

    PROJECTIONS: projections CSV. PICKS: player picks JSON.
    """
    regions, portfolios = _load_inputs(projections, picks)
    try:
        results = load_outcomes(results_path) if results_path else None
    except ValueError as e:
        raise click.ClickException(str(e))

    entries = rank_standings(portfolios, regions, results)

    for i, entry in enumerate(entries):
        line = f"  {i+1}. {entry.display_name} ({entry.n_picks} picks): potential ${entry.potential_winnings}"
        if entry.realized_returns is not None:
            line += f", returns ${entry.realized_returns}, net ${entry.net_result:+d}"
        click.echo(line)


if __name__ == '__main__':
    main()
