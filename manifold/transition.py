"""
Yearly stochastic transition model.

One step moves every dimension by a deterministic drift plus a noise term:

    next[d] = clip(state[d] + drift[d] + sigma[d] * shock[d] - c[d] * shock[d]**2, 0, 1)

Drift comes from the passive drift plus the active archetypes. Effort
amplifies positive wealth / intelligence / status drift and costs vitality
and resilience through a stress penalty. Risk tolerance only scales sigma,
so it widens the spread of outcomes without moving their expectation.

The wealth curves are convex, so noise that is symmetric in normalized
units would raise expected dollars with every bump in risk. For Wl and We
the correction c keeps a step's expected dollar value at its noise-free
value; c is zero for the other dimensions.

Two couplings from the archetype's CouplingTable bend the drift:

1. Compounding burnout
   Low vitality -> resilience losses accelerate

2. Status ceiling
   Very low intelligence -> status growth is dampened
"""

from dataclasses import dataclass, fields
from typing import Iterable, List, Sequence

import numpy as np

from .config import (
    ARCHETYPE_PROFILES,
    DEFAULT_COUPLING,
    DIMENSIONS,
    EFFORT_DIMENSIONS,
    EQUITY_CURVE,
    LIQUID_CURVE,
    WE,
    WL,
    I,
    R,
    S,
    V,
    Archetype,
    CouplingTable,
    ScheduleEntry,
    SimulationParams,
    WealthCurve,
)
from .state import StateVector, clamp_unit

# For these coupling fields the smaller value is the stronger effect
_WEAKER_IS_LARGER = {"status_ceiling_damping"}

# Cap on the convexity correction, as a fraction of sigma; keeps the noise
# term increasing in the shock out to three standard deviations
MAX_CORRECTION_RATIO = 1 / 6

_WEALTH_CURVES = ((WL, LIQUID_CURVE), (WE, EQUITY_CURVE))


@dataclass(frozen=True)
class Controls:
    """User-controlled effort and risk appetite, both clamped into [0, 1]."""

    effort_multiplier: float = 0.7
    risk_tolerance: float = 0.5

    def __post_init__(self):
        object.__setattr__(self, "effort_multiplier", clamp_unit(self.effort_multiplier))
        object.__setattr__(self, "risk_tolerance", clamp_unit(self.risk_tolerance))


def archetypes_for_year(schedule: Iterable[ScheduleEntry], year: int) -> List[Archetype]:
    """Archetypes whose window contains ``year``, in schedule order, without repeats."""
    active = []
    for entry in schedule:
        if entry.active_in(year) and entry.archetype not in active:
            active.append(entry.archetype)
    return active


def combined_coupling(archetypes: Sequence[Archetype]) -> CouplingTable:
    """Strongest value of each coupling field across the active archetypes."""
    if not archetypes:
        return DEFAULT_COUPLING
    tables = [ARCHETYPE_PROFILES[a].coupling for a in archetypes]
    merged = {}
    for f in fields(CouplingTable):
        values = [getattr(t, f.name) for t in tables]
        merged[f.name] = min(values) if f.name in _WEAKER_IS_LARGER else max(values)
    return CouplingTable(**merged)


def archetype_drift(archetypes: Sequence[Archetype]) -> np.ndarray:
    """Summed per-dimension drift of the active archetypes."""
    drift = np.zeros(len(DIMENSIONS))
    for a in archetypes:
        for dim, value in ARCHETYPE_PROFILES[a].drift.items():
            drift[DIMENSIONS.index(dim)] += value
    return drift


def archetype_volatility(archetypes: Sequence[Archetype]) -> np.ndarray:
    """Multiplied per-dimension volatility scale of the active archetypes."""
    vol = np.ones(len(DIMENSIONS))
    for a in archetypes:
        for dim, value in ARCHETYPE_PROFILES[a].volatility.items():
            vol[DIMENSIONS.index(dim)] *= value
    return vol


def yearly_drift(
    state: np.ndarray,
    controls: Controls,
    archetypes: Sequence[Archetype],
    params: SimulationParams,
) -> np.ndarray:
    """Deterministic part of one year's change, as a [Wl, We, V, I, S, R] array."""
    coupling = combined_coupling(archetypes)
    effort = controls.effort_multiplier

    passive = np.array([params.passive_drift.get(d, 0.0) for d in DIMENSIONS])
    chosen = archetype_drift(archetypes)

    # Effort scales gains only; costs (tuition, networking spend) are paid regardless
    mask = np.zeros(len(DIMENSIONS), dtype=bool)
    mask[list(EFFORT_DIMENSIONS)] = True
    gains = mask & (chosen > 0)
    chosen[gains] *= effort * coupling.effort_amplification

    drift = passive + chosen

    # Stress grows with the square of effort
    stress = effort ** 2
    drift[V] -= stress * coupling.stress_vitality_penalty
    drift[R] -= stress * coupling.stress_resilience_penalty

    if state[I] < coupling.low_intelligence_threshold and drift[S] > 0:
        drift[S] *= coupling.status_ceiling_damping
    if state[V] < coupling.low_vitality_threshold and drift[R] < 0:
        drift[R] *= coupling.burnout_acceleration

    return drift


def noise_scale(
    controls: Controls,
    archetypes: Sequence[Archetype],
    params: SimulationParams,
) -> np.ndarray:
    """Per-dimension std of the yearly noise term."""
    risk = params.risk_floor + controls.risk_tolerance * (params.risk_ceiling - params.risk_floor)
    return params.base_volatility * archetype_volatility(archetypes) * risk


def curve_curvature(n: float, curve: WealthCurve) -> float:
    """f''(n) / f'(n) for the normalized -> USD curve; zero on the linear debt segment."""
    above = n - curve.zero_point
    if above <= 0:
        return 0.0
    return (curve.exponent - 1.0) / above


def centred_noise(target: np.ndarray, sigma: np.ndarray, shocks: np.ndarray) -> np.ndarray:
    """Noise term for a step whose noise-free value is ``target``.

    ``sigma * e - c * e**2`` with ``c = sigma**2 * f'' / (2 f')`` on the wealth
    dimensions, so E[f(target + noise)] matches f(target) to second order.
    Zero shocks give zero noise. ``shocks`` may be one draw or a stack of
    draws along the first axis.
    """
    shocks = np.asarray(shocks, dtype=float)
    correction = np.zeros(len(DIMENSIONS))
    for dim, curve in _WEALTH_CURVES:
        c = 0.5 * sigma[dim] ** 2 * curve_curvature(target[dim], curve)
        correction[dim] = min(c, MAX_CORRECTION_RATIO * sigma[dim])
    return sigma * shocks - correction * shocks ** 2


def draw_shocks(rng: np.random.Generator) -> np.ndarray:
    """One year's standard-normal shocks, one per dimension."""
    return rng.standard_normal(len(DIMENSIONS))


def transition(
    state: StateVector,
    controls: Controls,
    archetypes: Sequence[Archetype],
    shocks: np.ndarray,
    params: SimulationParams,
) -> StateVector:
    """Advance ``state`` by one year.

    Pure: the randomness is the ``shocks`` argument, so identical inputs
    give identical output. The result is clamped into [0, 1].
    """
    x = state.to_array()
    target = x + yearly_drift(x, controls, archetypes, params)
    sigma = noise_scale(controls, archetypes, params)
    nxt = np.clip(target + centred_noise(target, sigma, shocks), 0.0, 1.0)
    return StateVector.from_array(nxt, state.vitality)
