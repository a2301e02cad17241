"""Risk metrics for single-player profiles."""

from .risk import classify_risk, compute_risk_metrics

__all__ = ['classify_risk', 'compute_risk_metrics']
