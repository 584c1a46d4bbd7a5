"""
Monte Carlo life-trajectory engine.

Each run rolls an ensemble of independent yearly trajectories from one
starting state, then reduces them:

1. Rollout
   For every path and year: resolve the active archetypes, draw shocks from
   the path's private random stream, apply the transition model, record net
   worth and wealth tier.

2. Path scoring
   Realized risk (volatility of yearly net-worth returns), minimum
   resilience, milestones and a single category per path.

3. Likelihood weights
   Risky paths are down-weighted unless the user is risk tolerant; weights
   are normalized across the ensemble.

4. Aggregation
   Mean path, net-worth statistics, outcome buckets, milestone
   probabilities and the golden path.

Reproducibility: every path gets its own generator spawned from
``SeedSequence(params.seed)``, so a fixed seed reproduces the ensemble
exactly and ``seed=None`` draws fresh entropy.
"""

import copy
import dataclasses
import logging
import threading
from typing import Callable, List, Optional, Sequence

import numpy as np

from .config import ScheduleEntry, SimulationParams
from .golden import select_golden_path
from .milestones import categorize_path, scan_milestones
from .results import SimulatedPath, SimulationResult, frozen_mapping
from .state import StateVector, get_preset, wealth_tier
from .statistics import (
    SuccessPredicate,
    category_counts,
    mean_path,
    milestone_probabilities,
    outcome_buckets,
    summarize,
)
from .transition import Controls, archetypes_for_year, draw_shocks, transition

logger = logging.getLogger(__name__)

# Net worth below this magnitude counts as this much when computing returns
RETURN_BASE_FLOOR = 50_000.0

ProgressCallback = Callable[[int, int], None]


class SimulationCancelled(Exception):
    """Raised when a run is cancelled before the ensemble is complete."""


def realized_risk(net_worths: Sequence[float], risk_scale: float) -> float:
    """Map the std of yearly relative net-worth changes into [0, 1)."""
    nw = np.asarray(net_worths, dtype=float)
    if len(nw) < 2:
        return 0.0
    base = np.maximum(np.abs(nw[:-1]), RETURN_BASE_FLOOR)
    returns = np.diff(nw) / base
    return float(1.0 - np.exp(-np.std(returns) / risk_scale))


def likelihood_weights(risks: Sequence[float], risk_tolerance: float, penalty: float) -> np.ndarray:
    """Normalized path weights; tolerance 1 makes them uniform."""
    risks = np.asarray(risks, dtype=float)
    if len(risks) == 0:
        return risks
    raw = np.exp(-penalty * risks * (1.0 - risk_tolerance))
    return raw / raw.sum()


class ManifoldSimulator:
    """Ensemble simulator for one starting state and parameter set."""

    def __init__(
        self,
        start_state: Optional[StateVector] = None,
        params: Optional[SimulationParams] = None,
    ):
        self.start_state = start_state if start_state is not None else get_preset("founder")
        self.params = params or SimulationParams()

    @property
    def controls(self) -> Controls:
        return Controls(self.params.effort_multiplier, self.params.risk_tolerance)

    def _rollout(self, index: int, rng: np.random.Generator) -> SimulatedPath:
        p = self.params
        controls = self.controls
        start_year = p.current_year

        state = self.start_state
        states = [state]
        net_worths = [state.net_worth()]
        min_resilience = state.R
        archetypes_by_year = {start_year: tuple(archetypes_for_year(p.schedule, start_year))}

        for t in range(1, p.years + 1):
            year = start_year + t
            archetypes = archetypes_for_year(p.schedule, year)
            archetypes_by_year[year] = tuple(archetypes)

            state = transition(state, controls, archetypes, draw_shocks(rng), p)
            states.append(state)
            net_worths.append(state.net_worth())
            min_resilience = min(min_resilience, state.R)

        years = range(start_year, start_year + len(states))
        return SimulatedPath(
            id=f"path-{index:04d}",
            index=index,
            states=tuple(states),
            probability=1.0,
            risk_score=realized_risk(net_worths, p.risk_scale),
            min_resilience=min_resilience,
            category=categorize_path(states[-1], min_resilience, p.burnout_threshold),
            milestones=tuple(scan_milestones(states, net_worths, start_year)),
            net_worth_by_year=frozen_mapping(zip(years, net_worths)),
            wealth_tier_by_year=frozen_mapping((y, wealth_tier(nw)) for y, nw in zip(years, net_worths)),
            active_archetypes_by_year=frozen_mapping(archetypes_by_year),
        )

    def simulate(
        self,
        cancel_event: Optional[threading.Event] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> List[SimulatedPath]:
        """Roll the full ensemble.

        The loop checks ``cancel_event`` every chunk of paths and raises
        SimulationCancelled when it is set; no partial ensemble is returned.
        """
        p = self.params
        n = p.num_paths
        logger.info(
            "Simulating %d paths over %d years (effort=%.2f, risk=%.2f, seed=%s)",
            n, p.years, p.effort_multiplier, p.risk_tolerance, p.seed,
        )

        streams = np.random.SeedSequence(p.seed).spawn(n)
        callback_interval = max(1, n // 100)

        paths = []
        for i, child in enumerate(streams):
            if cancel_event is not None and i % callback_interval == 0 and cancel_event.is_set():
                logger.debug("Cancellation requested at path %d/%d", i, n)
                raise SimulationCancelled(f"cancelled after {i} of {n} paths")

            paths.append(self._rollout(i, np.random.default_rng(child)))

            if progress_callback is not None and (i + 1) % callback_interval == 0:
                progress_callback(i + 1, n)

        weights = likelihood_weights(
            [path.risk_score for path in paths], p.risk_tolerance, p.risk_weight_penalty
        )
        return [
            dataclasses.replace(path, probability=float(w))
            for path, w in zip(paths, weights)
        ]

    def run(
        self,
        cancel_event: Optional[threading.Event] = None,
        progress_callback: Optional[ProgressCallback] = None,
        success: Optional[SuccessPredicate] = None,
    ) -> SimulationResult:
        p = self.params
        paths = self.simulate(cancel_event, progress_callback)

        result = SimulationResult(
            params=copy.deepcopy(p),
            start_state=self.start_state,
            paths=tuple(paths),
            mean_path=tuple(mean_path(paths)),
            statistics=summarize(paths, p, success),
            outcome_buckets=frozen_mapping(outcome_buckets(paths, p.burnout_threshold)),
            golden_path=select_golden_path(paths, p.scoring),
            milestone_probabilities=frozen_mapping(milestone_probabilities(paths)),
            category_counts=frozen_mapping(category_counts(paths)),
        )

        if result.statistics is not None:
            logger.info(
                "Simulation finished: median net worth %.0f, success %.1f%%, burnout %.1f%%",
                result.statistics.median_final_net_worth,
                result.statistics.success_probability * 100,
                result.statistics.burnout_probability * 100,
            )
        else:
            logger.info("Simulation finished with an empty ensemble")
        return result


def simulate(
    start_state: StateVector,
    years: int,
    controls: Controls,
    schedule: Sequence[ScheduleEntry],
    ensemble_size: int,
    seed: Optional[int] = None,
    start_year: Optional[int] = None,
) -> List[SimulatedPath]:
    """Roll ``ensemble_size`` paths of ``years`` years from ``start_state``."""
    params = SimulationParams(num_paths=ensemble_size, seed=seed, schedule=list(schedule),
                              effort_multiplier=controls.effort_multiplier,
                              risk_tolerance=controls.risk_tolerance)
    if start_year is not None:
        params.current_year = start_year
    params.goal_year = params.current_year + max(0, int(years))
    return ManifoldSimulator(start_state, params).simulate()


def run_simulation(
    start_state: StateVector,
    params: SimulationParams,
    cancel_event: Optional[threading.Event] = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> SimulationResult:
    return ManifoldSimulator(start_state, params).run(cancel_event, progress_callback)
