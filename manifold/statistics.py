"""
Ensemble statistics.

Reduces a list of simulated paths to the figures the dashboard shows. An
empty ensemble is valid input: summaries come back as None and bucket
tallies as zero counts with no probability, so "nothing computed" can be
told apart from "computed and zero".
"""

from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from .config import OutcomeBucket, PathCategory, SimulationParams
from .milestones import dimension_balance
from .results import BucketTally, SimulatedPath, SimulationStatistics
from .state import StateVector, Vitality

WEALTHY_SCORE = 0.6  # mean of final Wl and We
BALANCED_VARIANCE = 0.05  # variance of the six final dimensions
HIGH_VITALITY = 0.7

SuccessPredicate = Callable[[SimulatedPath], bool]


def mean_path(paths: Sequence[SimulatedPath]) -> List[StateVector]:
    """Elementwise mean state per year offset, up to the shortest path."""
    if not paths:
        return []
    horizon = min(len(p.states) for p in paths)
    # columns: Wl, We, body, mind, appearance, I, S, R
    stacked = np.array([
        [[s.Wl, s.We, s.vitality.body, s.vitality.mind, s.vitality.appearance, s.I, s.S, s.R]
         for s in p.states[:horizon]]
        for p in paths
    ])
    means = stacked.mean(axis=0)
    return [
        StateVector(Wl=row[0], We=row[1], vitality=Vitality(row[2], row[3], row[4]),
                    I=row[5], S=row[6], R=row[7])
        for row in means
    ]


def final_net_worths(paths: Sequence[SimulatedPath]) -> np.ndarray:
    return np.array([p.final_net_worth for p in paths], dtype=float)


def goal_predicate(params: SimulationParams) -> SuccessPredicate:
    """Net worth at the goal year reaches params.success_net_worth."""
    def reached(path: SimulatedPath) -> bool:
        return path.net_worth_at(params.goal_year) >= params.success_net_worth
    return reached


def is_burnout(path: SimulatedPath, threshold: float = 0.3) -> bool:
    return path.min_resilience < threshold


def summarize(
    paths: Sequence[SimulatedPath],
    params: SimulationParams,
    success: Optional[SuccessPredicate] = None,
) -> Optional[SimulationStatistics]:
    """Headline statistics, or None for an empty ensemble."""
    if not paths:
        return None
    n = len(paths)
    success = success or goal_predicate(params)

    finals = final_net_worths(paths)
    wealthy = tally(paths, lambda p: _wealth_score(p.final_state) > WEALTHY_SCORE)

    return SimulationStatistics(
        mean_final_net_worth=float(np.mean(finals)),
        median_final_net_worth=float(np.median(finals)),
        std_final_net_worth=float(np.std(finals)),
        success_probability=sum(1 for p in paths if success(p)) / n,
        burnout_probability=sum(1 for p in paths if is_burnout(p, params.burnout_threshold)) / n,
        wealthy_probability=wealthy.probability,
        mean_risk=float(np.mean([p.risk_score for p in paths])),
        mean_final_magnitude=float(np.mean([p.final_magnitude for p in paths])),
    )


def tally(paths: Sequence[SimulatedPath], predicate: SuccessPredicate) -> BucketTally:
    count = sum(1 for p in paths if predicate(p))
    return BucketTally(count, count / len(paths) if paths else None)


def _wealth_score(state: StateVector) -> float:
    return (state.Wl + state.We) / 2


def _is_balanced(state: StateVector) -> bool:
    return dimension_balance(state)[1] < BALANCED_VARIANCE


def outcome_buckets(
    paths: Sequence[SimulatedPath],
    burnout_threshold: float = 0.3,
) -> Dict[OutcomeBucket, BucketTally]:
    """Independent, possibly overlapping outcome predicates."""
    return {
        OutcomeBucket.WEALTHY: tally(paths, lambda p: _wealth_score(p.final_state) > WEALTHY_SCORE),
        OutcomeBucket.BALANCED: tally(paths, lambda p: _is_balanced(p.final_state)),
        OutcomeBucket.HIGH_VITALITY: tally(paths, lambda p: p.final_state.V > HIGH_VITALITY),
        OutcomeBucket.BURNOUT_RISK: tally(paths, lambda p: is_burnout(p, burnout_threshold)),
    }


def milestone_probabilities(paths: Sequence[SimulatedPath]) -> Dict[str, float]:
    """Fraction of paths that reach each milestone id."""
    if not paths:
        return {}
    counts: Dict[str, int] = {}
    for path in paths:
        for milestone_id in {m.id for m in path.milestones}:
            counts[milestone_id] = counts.get(milestone_id, 0) + 1
    return {k: v / len(paths) for k, v in sorted(counts.items())}


def category_counts(paths: Sequence[SimulatedPath]) -> Dict[PathCategory, int]:
    counts = {c: 0 for c in PathCategory}
    for path in paths:
        counts[path.category] += 1
    return counts
