"""
Golden path selection and representative sampling.
"""

import math
from typing import List, Optional, Sequence

import numpy as np

from .config import NET_WORTH_MAX, NET_WORTH_MIN, ScoringWeights
from .results import SimulatedPath, SimulationResult


def wealth_score(net_worth: float) -> float:
    """Log-scaled position of net worth inside the representable range, in [0, 1]."""
    shifted = max(0.0, net_worth - NET_WORTH_MIN)
    return min(1.0, math.log1p(shifted) / math.log1p(NET_WORTH_MAX - NET_WORTH_MIN))


def score_path(path: SimulatedPath, weights: ScoringWeights = ScoringWeights()) -> float:
    mean_v = float(np.mean([s.V for s in path.states]))
    mean_r = float(np.mean([s.R for s in path.states]))
    return (
        weights.net_worth * wealth_score(path.final_net_worth)
        + weights.vitality * mean_v
        + weights.resilience * mean_r
        + weights.low_risk * (1.0 - path.risk_score)
    )


def select_golden_path(
    paths: Sequence[SimulatedPath],
    weights: ScoringWeights = ScoringWeights(),
) -> Optional[SimulatedPath]:
    """Highest score; ties go to the lower risk score, then the earlier path."""
    if not paths:
        return None
    ranked = min(
        enumerate(paths),
        key=lambda item: (-score_path(item[1], weights), item[1].risk_score, item[0]),
    )
    return ranked[1]


def best_outcome_path(paths: Sequence[SimulatedPath]) -> Optional[SimulatedPath]:
    return max(paths, key=lambda p: p.final_magnitude, default=None)


def worst_outcome_path(paths: Sequence[SimulatedPath]) -> Optional[SimulatedPath]:
    return min(paths, key=lambda p: p.final_magnitude, default=None)


def highest_probability_path(paths: Sequence[SimulatedPath]) -> Optional[SimulatedPath]:
    """Largest likelihood weight; ties go to the earlier path."""
    if not paths:
        return None
    return min(paths, key=lambda p: (-p.probability, p.index))


def most_likely_path(paths: Sequence[SimulatedPath]) -> Optional[SimulatedPath]:
    """The path whose final magnitude sits closest to the ensemble mean."""
    if not paths:
        return None
    mean = float(np.mean([p.final_magnitude for p in paths]))
    return min(paths, key=lambda p: abs(p.final_magnitude - mean))


def sample_representative_paths(result: SimulationResult, num_samples: int = 50) -> List[SimulatedPath]:
    """A display-sized subset: the special paths plus a stride through the
    magnitude-sorted ensemble."""
    paths = list(result.paths)
    if len(paths) <= num_samples:
        return paths

    special = [result.golden_path, highest_probability_path(paths), best_outcome_path(paths),
               worst_outcome_path(paths), most_likely_path(paths)]
    special_ids = {p.id for p in special if p is not None}
    sampled = [p for p in paths if p.id in special_ids]

    remaining = num_samples - len(sampled)
    if remaining <= 0:
        return sampled[:num_samples]

    ordered = sorted(paths, key=lambda p: p.final_magnitude)
    step = max(1, len(ordered) // remaining)
    for path in ordered[::step]:
        if len(sampled) >= num_samples:
            break
        if path.id not in special_ids:
            sampled.append(path)
    return sampled
