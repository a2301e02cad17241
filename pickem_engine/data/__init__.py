"""Data loading for projections, picks and outcomes."""

from .loader import (
    load_regions,
    load_portfolios,
    load_outcomes,
    normalize_selections,
    portfolio_from_record,
    find_portfolio,
)

__all__ = [
    "load_regions",
    "load_portfolios",
    "load_outcomes",
    "normalize_selections",
    "portfolio_from_record",
    "find_portfolio",
]
