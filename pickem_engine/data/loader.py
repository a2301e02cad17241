"""
Loaders for projections CSV, player picks and declared outcomes.

Turns external data into Region / Portfolio records. The tri-state
'none' selection used by pick-entry screens is dropped here.
"""

import json
import logging
import pandas as pd
from typing import List, Dict, Any, Optional

from ..types import Region, Portfolio, SIDES, NO_PICK

logger = logging.getLogger(__name__)


REQUIRED_COLUMNS = ['state_full', 'winstate_inc', 'winstate_chal']
PROBABILITY_COLUMNS = ['winstate_inc', 'winstate_chal']


def load_regions(csv_path: str) -> List[Region]:
    """
    Load region projections from CSV.

    Required columns: state_full, winstate_inc, winstate_chal.
    Optional: evs.

    Args:
        csv_path: Path to the projections CSV

    Returns:
        Regions in file order
    """
    df = pd.read_csv(csv_path)

    missing_cols = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing_cols:
        raise ValueError(
            "Missing required columns in projections CSV: "
            + ", ".join(missing_cols)
        )

    df = _filter_valid_regions(df)

    if 'evs' in df.columns:
        df['evs'] = pd.to_numeric(df['evs'], errors='coerce').fillna(0.0)
    else:
        df['evs'] = 0.0

    regions = [Region.from_record(row) for row in df.to_dict('records')]

    names = [r.name for r in regions]
    if len(set(names)) != len(names):
        raise ValueError("Duplicate state_full values in projections CSV")

    logger.info("Loaded %d regions from %s", len(regions), csv_path)
    return regions


def _filter_valid_regions(df: pd.DataFrame) -> pd.DataFrame:
    """Drop rows without a name or with missing probabilities."""
    for col in PROBABILITY_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors='coerce')

    mask = df['state_full'].notna()
    for col in PROBABILITY_COLUMNS:
        mask &= df[col].notna()

    n_dropped = int((~mask).sum())
    if n_dropped > 0:
        logger.warning("Dropped %d projection rows with missing data", n_dropped)

    filtered = df[mask].copy()
    if len(filtered) == 0:
        raise ValueError("No valid regions found in projections CSV")

    return filtered


def normalize_selections(selections: Dict[str, Any]) -> Dict[str, str]:
    """Drop 'none' (and empty) selections; reject any other unknown side."""
    normalized = {}
    for region_name, side in selections.items():
        if side is None or side == NO_PICK or side == '':
            continue
        if side not in SIDES:
            raise ValueError(f"Invalid selection '{side}' for {region_name}")
        normalized[str(region_name)] = side
    return normalized


def _display_name(record: Dict[str, Any]) -> str:
    """displayName, else the email local part, else 'Anonymous'."""
    name = record.get('displayName')
    if name:
        return str(name)
    email = record.get('email')
    if email:
        return str(email).split('@')[0]
    return 'Anonymous'


def portfolio_from_record(record: Dict[str, Any]) -> Portfolio:
    """Build a Portfolio from a persisted picks record."""
    return Portfolio(
        display_name=_display_name(record),
        selections=normalize_selections(record.get('selections') or {}),
        player_id=record.get('uid') or record.get('email'),
    )


def load_portfolios(json_path: str) -> List[Portfolio]:
    """
    Load player picks from JSON.

    Expected format:
    [
        {"displayName": "Alice", "email": "alice@example.com",
         "selections": {"Arizona": "red", "Georgia": "blue", "Ohio": "none"}},
        ...
    ]
    A {"picks": [...]} wrapper is also accepted.
    """
    with open(json_path, 'r') as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get('picks', [])
    if not isinstance(data, list):
        raise ValueError(f"Picks file {json_path} must contain a list of records")

    portfolios = _dedupe_display_names(
        [portfolio_from_record(record) for record in data]
    )
    logger.info("Loaded %d portfolios from %s", len(portfolios), json_path)
    return portfolios


def _dedupe_display_names(portfolios: List[Portfolio]) -> List[Portfolio]:
    """
    Give repeated display names a numeric suffix ("Anonymous", "Anonymous (2)", ...).

    Later records are renamed; the first keeps its name.
    """
    taken = {p.display_name for p in portfolios}
    seen = set()
    result = []
    for portfolio in portfolios:
        name = portfolio.display_name
        if name in seen:
            n = 2
            while f"{name} ({n})" in taken:
                n += 1
            new_name = f"{name} ({n})"
            logger.warning("Duplicate display name '%s' renamed to '%s'", name, new_name)
            taken.add(new_name)
            portfolio = Portfolio(
                display_name=new_name,
                selections=portfolio.selections,
                player_id=portfolio.player_id,
            )
        seen.add(portfolio.display_name)
        result.append(portfolio)
    return result


def load_outcomes(json_path: str) -> Dict[str, str]:
    """
    Load a region -> 'red' | 'blue' | 'none' outcome mapping.

    'none' entries are dropped (undetermined). A {"results": {...}} wrapper
    is also accepted.
    """
    with open(json_path, 'r') as f:
        data = json.load(f)

    if isinstance(data, dict) and isinstance(data.get('results'), dict):
        data = data['results']
    if not isinstance(data, dict):
        raise ValueError(f"Outcomes file {json_path} must contain an object")

    return normalize_selections(data)


def find_portfolio(portfolios: List[Portfolio], name: str) -> Optional[Portfolio]:
    """Find a portfolio by display name."""
    for portfolio in portfolios:
        if portfolio.display_name == name:
            return portfolio
    return None
