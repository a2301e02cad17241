"""
Core data structures for the election pick'em simulation engine.

Regions and portfolios are read-only inputs; everything else is a derived
result record with a to_dict() matching the presentation-layer field names.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any


# Sides a player can pick. NO_PICK only exists at the loader boundary.
BLUE = "blue"
RED = "red"
NO_PICK = "none"

SIDES = (BLUE, RED)

# Fixed stake per pick and maximum picks per portfolio
STAKE = 100
MAX_PICKS = 10


@dataclass(frozen=True)
class Region:
    """
    A contested region with two modeled win probabilities.

    Attributes:
        name: Full region name (state_full), unique
        p_inc: Incumbent (blue) win probability, 0-100
        p_chal: Challenger (red) win probability, 0-100
        evs: Elector count, carried for display only
    """
    name: str
    p_inc: float
    p_chal: float
    evs: float = 0.0

    def probability_for(self, side: str) -> float:
        """Win probability (percent) for the given side."""
        if side == BLUE:
            return self.p_inc
        if side == RED:
            return self.p_chal
        raise ValueError(f"Unknown side '{side}' (expected 'red' or 'blue')")

    @property
    def is_valid(self) -> bool:
        """Both probabilities lie in [0, 100]."""
        return 0.0 <= self.p_inc <= 100.0 and 0.0 <= self.p_chal <= 100.0

    def is_scorable(self, side: str) -> bool:
        """True if a pick on this side can be priced (valid region, side probability > 0)."""
        return self.is_valid and self.probability_for(side) > 0.0

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'Region':
        """Build from a projections row (state_full / winstate_inc / winstate_chal / evs)."""
        return cls(
            name=str(record['state_full']),
            p_inc=float(record['winstate_inc']),
            p_chal=float(record['winstate_chal']),
            evs=float(record.get('evs', 0.0) or 0.0),
        )


@dataclass
class Portfolio:
    """
    One player's picks.

    A region absent from selections means "no pick"; a present key always
    carries 'red' or 'blue'.
    """
    display_name: str
    selections: Dict[str, str]
    player_id: Optional[str] = None

    def __post_init__(self) -> None:
        for region_name, side in self.selections.items():
            if side not in SIDES:
                raise ValueError(
                    f"Portfolio '{self.display_name}': invalid side '{side}' "
                    f"for {region_name} (expected 'red' or 'blue')"
                )
        if len(self.selections) > MAX_PICKS:
            raise ValueError(
                f"Portfolio '{self.display_name}' has {len(self.selections)} picks; "
                f"the maximum is {MAX_PICKS}"
            )

    @property
    def n_picks(self) -> int:
        return len(self.selections)

    @property
    def total_risk(self) -> int:
        """Total stake across all picks."""
        return self.n_picks * STAKE


@dataclass
class RankedPlayer:
    """A player's population-simulation result."""
    display_name: str
    win_probability: float
    win_count: int
    needs_blue: List[str] = field(default_factory=list)
    needs_red: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'displayName': self.display_name,
            'winProbability': self.win_probability,
            'winCount': self.win_count,
            'criticalStates': {
                'needsBlue': list(self.needs_blue),
                'needsRed': list(self.needs_red),
            },
        }


@dataclass
class RegionImpact:
    """
    How often a region's outcome decided the winner, and for whom.

    Attributes:
        state: Region name
        blue_helps: Players who won because the region went blue
        blue_hurts: Players who lost because the region went blue
        red_helps: Players who won because the region went red
        red_hurts: Players who lost because the region went red
        importance: Fraction of iterations where flipping this region changed the winner
    """
    state: str
    blue_helps: List[str]
    blue_hurts: List[str]
    red_helps: List[str]
    red_hurts: List[str]
    importance: float

    def to_dict(self) -> Dict:
        return {
            'state': self.state,
            'blueOutcome': {'helps': list(self.blue_helps), 'hurts': list(self.blue_hurts)},
            'redOutcome': {'helps': list(self.red_helps), 'hurts': list(self.red_hurts)},
            'importance': self.importance,
        }


@dataclass
class PopulationResult:
    """Output of a population simulation run."""
    players: List[RankedPlayer]
    region_impacts: List[RegionImpact]
    iterations: int

    @property
    def win_tally(self) -> Dict[str, int]:
        return {p.display_name: p.win_count for p in self.players}

    def to_dict(self) -> Dict:
        return {
            'users': [p.to_dict() for p in self.players],
            'stateImpacts': [r.to_dict() for r in self.region_impacts],
            'iterations': self.iterations,
        }


@dataclass
class WinningScenario:
    """An outcome combination seen during profiling (outcomes: region -> True if blue won)."""
    win_amount: int
    frequency: int
    outcomes: Dict[str, bool]

    def to_dict(self) -> Dict:
        return {
            'winAmount': self.win_amount,
            'frequency': self.frequency,
            'picks': dict(self.outcomes),
        }


@dataclass
class RiskMetrics:
    volatility: float
    win_frequency: float
    avg_winning_picks: float
    risk_rating: str

    def to_dict(self) -> Dict:
        return {
            'volatility': self.volatility,
            'winFrequency': self.win_frequency,
            'avgWinningPicks': self.avg_winning_picks,
            'riskRating': self.risk_rating,
        }


@dataclass
class RiskProfile:
    """Single-player risk profile."""
    winning_scenarios: List[WinningScenario]
    risk_metrics: RiskMetrics
    iterations: int

    def to_dict(self) -> Dict:
        return {
            'winningScenarios': [s.to_dict() for s in self.winning_scenarios],
            'riskMetrics': self.risk_metrics.to_dict(),
            'iterations': self.iterations,
        }


@dataclass
class ExplorerResult:
    """Deterministic what-if result. winner is None when there are no players."""
    winner: Optional[str]
    winnings: Dict[str, int]

    def to_dict(self) -> Dict:
        return {'winner': self.winner, 'winnings': dict(self.winnings)}


@dataclass
class StandingsEntry:
    display_name: str
    n_picks: int
    potential_winnings: int
    realized_returns: Optional[int] = None

    @property
    def net_result(self) -> Optional[int]:
        """Realized gross return minus total stake, or None before results exist."""
        if self.realized_returns is None:
            return None
        return self.realized_returns - self.n_picks * STAKE

    def to_dict(self) -> Dict:
        return {
            'displayName': self.display_name,
            'numPicks': self.n_picks,
            'potentialWinnings': self.potential_winnings,
            'actualReturns': self.realized_returns,
            'netResult': self.net_result,
        }
