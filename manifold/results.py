"""
Immutable result types produced by the simulation engine.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .config import Archetype, OutcomeBucket, PathCategory, SimulationParams, WealthTier
from .milestones import Milestone
from .state import StateVector


def frozen_mapping(data) -> Mapping:
    """Read-only view over a private copy of ``data``."""
    return MappingProxyType(dict(data))


@dataclass(frozen=True)
class SimulatedPath:
    """One ensemble member; index t of ``states`` is year offset t."""

    id: str
    index: int  # position in the ensemble
    states: Tuple[StateVector, ...]
    probability: float
    risk_score: float
    min_resilience: float
    category: PathCategory
    milestones: Tuple[Milestone, ...]
    net_worth_by_year: Mapping[int, float]
    wealth_tier_by_year: Mapping[int, WealthTier] = field(default_factory=lambda: frozen_mapping({}))
    active_archetypes_by_year: Mapping[int, Tuple[Archetype, ...]] = field(
        default_factory=lambda: frozen_mapping({})
    )

    @property
    def final_state(self) -> StateVector:
        return self.states[-1]

    @property
    def final_year(self) -> int:
        return max(self.net_worth_by_year)

    @property
    def final_net_worth(self) -> float:
        return self.net_worth_by_year[self.final_year]

    @property
    def final_magnitude(self) -> float:
        return self.final_state.magnitude()

    def net_worth_at(self, year: int) -> float:
        """Net worth in ``year``, or the final net worth when outside the window."""
        return self.net_worth_by_year.get(year, self.final_net_worth)


@dataclass(frozen=True)
class SimulationStatistics:
    mean_final_net_worth: float
    median_final_net_worth: float
    std_final_net_worth: float
    success_probability: float
    burnout_probability: float
    wealthy_probability: float
    mean_risk: float
    mean_final_magnitude: float


@dataclass(frozen=True)
class BucketTally:
    count: int
    probability: Optional[float]  # None when the ensemble is empty


@dataclass(frozen=True)
class SimulationResult:
    """Aggregate over one ensemble. Rebuilt on every run, never mutated."""

    params: SimulationParams
    start_state: StateVector
    paths: Tuple[SimulatedPath, ...]
    mean_path: Tuple[StateVector, ...]
    statistics: Optional[SimulationStatistics]
    outcome_buckets: Mapping[OutcomeBucket, BucketTally]
    golden_path: Optional[SimulatedPath]
    milestone_probabilities: Mapping[str, float]
    category_counts: Mapping[PathCategory, int]

    @property
    def is_empty(self) -> bool:
        return not self.paths

    def path_by_id(self, path_id: str) -> Optional[SimulatedPath]:
        return next((p for p in self.paths if p.id == path_id), None)
