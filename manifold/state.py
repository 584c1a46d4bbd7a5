"""
State vector for a simulated life.

Six normalized dimensions, each in [0, 1]:

- Wl: liquid wealth (USD via LIQUID_CURVE, may be negative)
- We: equity (USD via EQUITY_CURVE, never negative)
- V:  vitality, the mean of the body / mind / appearance breakdown
- I:  intelligence
- S:  status
- R:  resilience

Wealth maps to dollars on a power curve so that mid-range values land on
middle-class outcomes while the tails reach deep debt or extreme wealth.
Every dimension also maps to one of six qualitative tiers.
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

import numpy as np

from .config import (
    APPEARANCE_LABELS,
    BODY_LABELS,
    EQUITY_CURVE,
    INTELLIGENCE_LABELS,
    LIQUID_CURVE,
    MIND_LABELS,
    RESILIENCE_LABELS,
    STATUS_LABELS,
    TIER_COUNT,
    VITALITY_LABELS,
    WEALTH_TIERS,
    WealthCurve,
    WealthTier,
)


def clamp_unit(value) -> float:
    """Coerce into [0, 1]; NaN becomes 0."""
    value = float(value)
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


# ── Wealth conversion ────────────────────────────────────────────────
def normalized_to_usd(normalized: float, curve: WealthCurve) -> float:
    n = clamp_unit(normalized)
    if n < curve.zero_point:
        return curve.minimum + (n / curve.zero_point) * (0.0 - curve.minimum)
    span = 1.0 - curve.zero_point
    return ((n - curve.zero_point) / span) ** curve.exponent * curve.maximum


def usd_to_normalized(usd: float, curve: WealthCurve) -> float:
    usd = max(curve.minimum, min(curve.maximum, float(usd)))
    if usd < 0:
        return clamp_unit((usd - curve.minimum) / (0.0 - curve.minimum) * curve.zero_point)
    ratio = usd / curve.maximum
    return clamp_unit(curve.zero_point + ratio ** (1.0 / curve.exponent) * (1.0 - curve.zero_point))


def normalized_to_liquid_usd(normalized: float) -> float:
    return normalized_to_usd(normalized, LIQUID_CURVE)


def liquid_usd_to_normalized(usd: float) -> float:
    return usd_to_normalized(usd, LIQUID_CURVE)


def normalized_to_equity_usd(normalized: float) -> float:
    return normalized_to_usd(normalized, EQUITY_CURVE)


def equity_usd_to_normalized(usd: float) -> float:
    return usd_to_normalized(usd, EQUITY_CURVE)


def net_worth(wl: float, we: float) -> float:
    return normalized_to_liquid_usd(wl) + normalized_to_equity_usd(we)


def wealth_tier(amount: float) -> WealthTier:
    for tier, upper, _, _ in WEALTH_TIERS:
        if amount < upper:
            return tier
    return WealthTier.RICH


def wealth_tier_info(amount: float) -> Dict[str, str]:
    tier = wealth_tier(amount)
    label, color = next((lbl, col) for t, _, lbl, col in WEALTH_TIERS if t is tier)
    return {"tier": tier.value, "label": label, "color": color}


def format_usd(amount: float, compact: bool = True) -> str:
    """Format dollars: $150K / -$1.2M, or the full figure with separators."""
    sign = "-" if amount < 0 else ""
    a = abs(amount)
    if not compact:
        return f"{sign}${a:,.0f}"
    if a >= 1_000_000:
        return f"{sign}${a / 1_000_000:.1f}M"
    if a >= 1_000:
        return f"{sign}${a / 1_000:.0f}K"
    return f"{sign}${a:.0f}"


# ── Tier labels ──────────────────────────────────────────────────────
def tier_index(value: float) -> int:
    return min(int(clamp_unit(value) * TIER_COUNT), TIER_COUNT - 1)


def tier_label(value: float, labels: Sequence[str]) -> str:
    return labels[tier_index(value)]


# ── Data types ───────────────────────────────────────────────────────
@dataclass(frozen=True)
class Vitality:
    body: float = 0.5
    mind: float = 0.5
    appearance: float = 0.5

    def __post_init__(self):
        object.__setattr__(self, "body", clamp_unit(self.body))
        object.__setattr__(self, "mind", clamp_unit(self.mind))
        object.__setattr__(self, "appearance", clamp_unit(self.appearance))

    @property
    def level(self) -> float:
        return (self.body + self.mind + self.appearance) / 3

    @classmethod
    def uniform(cls, level: float) -> "Vitality":
        return cls(level, level, level)

    def shifted(self, delta: float) -> "Vitality":
        return Vitality(self.body + delta, self.mind + delta, self.appearance + delta)


@dataclass(frozen=True)
class RealUnits:
    liquid_wealth: float
    equity: float
    net_worth: float
    wealth_tier: WealthTier
    body: float
    body_label: str
    mind: float
    mind_label: str
    appearance: float
    appearance_label: str
    vitality: float
    vitality_label: str
    intelligence: float
    intelligence_label: str
    status: float
    status_label: str
    resilience: float
    resilience_label: str


@dataclass(frozen=True)
class StateVector:
    """A point in the normalized life-state space.

    Construction clamps every scalar into [0, 1]. Instances are immutable;
    the ``with_*`` / ``shifted`` helpers return new vectors.
    """

    Wl: float = 0.5
    We: float = 0.5
    vitality: Vitality = Vitality()
    I: float = 0.5
    S: float = 0.5
    R: float = 0.5

    def __post_init__(self):
        for name in ("Wl", "We", "I", "S", "R"):
            object.__setattr__(self, name, clamp_unit(getattr(self, name)))
        vit = self.vitality
        if not isinstance(vit, Vitality):
            vit = Vitality(*vit) if isinstance(vit, (tuple, list)) else Vitality.uniform(vit)
        object.__setattr__(self, "vitality", vit)

    @property
    def V(self) -> float:
        return self.vitality.level

    # ── Constructors ──
    @classmethod
    def from_dimensions(cls, Wl=0.5, We=0.5, V=0.5, I=0.5, S=0.5, R=0.5,
                        vitality: Optional[Vitality] = None) -> "StateVector":
        """Build from the six scalars; V seeds a uniform breakdown unless one is given."""
        if vitality is None:
            vitality = Vitality.uniform(V)
        return cls(Wl=Wl, We=We, vitality=vitality, I=I, S=S, R=R)

    @classmethod
    def from_array(cls, arr: Sequence[float], vitality: Optional[Vitality] = None) -> "StateVector":
        """Build from [Wl, We, V, I, S, R].

        With a previous ``vitality`` breakdown, the change in V is spread
        evenly over body, mind and appearance instead of flattening them.
        """
        wl, we, v, i, s, r = (float(x) for x in arr)
        if vitality is not None:
            vitality = vitality.shifted(clamp_unit(v) - vitality.level)
        return cls.from_dimensions(wl, we, v, i, s, r, vitality=vitality)

    @classmethod
    def from_real_units(cls, liquid_wealth: float, equity: float,
                        vitality: Vitality, intelligence: float,
                        status: float, resilience: float) -> "StateVector":
        """Invert the wealth curves; out-of-range dollars are clamped."""
        if not isinstance(vitality, Vitality):
            vitality = Vitality(**vitality)
        return cls(
            Wl=liquid_usd_to_normalized(liquid_wealth),
            We=equity_usd_to_normalized(equity),
            vitality=vitality,
            I=intelligence,
            S=status,
            R=resilience,
        )

    @staticmethod
    def lerp(a: "StateVector", b: "StateVector", t: float) -> "StateVector":
        t = clamp_unit(t)
        va, vb = a.vitality, b.vitality
        return StateVector(
            Wl=a.Wl + (b.Wl - a.Wl) * t,
            We=a.We + (b.We - a.We) * t,
            vitality=Vitality(
                va.body + (vb.body - va.body) * t,
                va.mind + (vb.mind - va.mind) * t,
                va.appearance + (vb.appearance - va.appearance) * t,
            ),
            I=a.I + (b.I - a.I) * t,
            S=a.S + (b.S - a.S) * t,
            R=a.R + (b.R - a.R) * t,
        )

    # ── Derivations ──
    def clone(self) -> "StateVector":
        return StateVector(self.Wl, self.We, Vitality(
            self.vitality.body, self.vitality.mind, self.vitality.appearance
        ), self.I, self.S, self.R)

    def with_vitality(self, body=None, mind=None, appearance=None) -> "StateVector":
        vit = self.vitality
        return StateVector(self.Wl, self.We, Vitality(
            vit.body if body is None else body,
            vit.mind if mind is None else mind,
            vit.appearance if appearance is None else appearance,
        ), self.I, self.S, self.R)

    def shifted(self, delta: Sequence[float]) -> "StateVector":
        """Apply a [Wl, We, V, I, S, R] delta, clamping the result."""
        return StateVector.from_array(self.to_array() + np.asarray(delta, dtype=float), self.vitality)

    def to_array(self) -> np.ndarray:
        return np.array([self.Wl, self.We, self.V, self.I, self.S, self.R])

    def to_dict(self) -> Dict[str, float]:
        return {
            "Wl": self.Wl, "We": self.We, "V": self.V,
            "I": self.I, "S": self.S, "R": self.R,
            "body": self.vitality.body,
            "mind": self.vitality.mind,
            "appearance": self.vitality.appearance,
        }

    def distance_to(self, other: "StateVector") -> float:
        return float(np.linalg.norm(self.to_array() - other.to_array()))

    def magnitude(self) -> float:
        """Overall life quality in [0, 1]."""
        return float(np.linalg.norm(self.to_array()) / math.sqrt(6))

    def net_worth(self) -> float:
        return net_worth(self.Wl, self.We)

    def to_real_units(self) -> RealUnits:
        liquid = normalized_to_liquid_usd(self.Wl)
        equity = normalized_to_equity_usd(self.We)
        total = liquid + equity
        vit = self.vitality
        return RealUnits(
            liquid_wealth=liquid,
            equity=equity,
            net_worth=total,
            wealth_tier=wealth_tier(total),
            body=vit.body,
            body_label=tier_label(vit.body, BODY_LABELS),
            mind=vit.mind,
            mind_label=tier_label(vit.mind, MIND_LABELS),
            appearance=vit.appearance,
            appearance_label=tier_label(vit.appearance, APPEARANCE_LABELS),
            vitality=self.V,
            vitality_label=tier_label(self.V, VITALITY_LABELS),
            intelligence=self.I,
            intelligence_label=tier_label(self.I, INTELLIGENCE_LABELS),
            status=self.S,
            status_label=tier_label(self.S, STATUS_LABELS),
            resilience=self.R,
            resilience_label=tier_label(self.R, RESILIENCE_LABELS),
        )


# ── Presets ──────────────────────────────────────────────────────────
PRESET_STATES: Dict[str, StateVector] = {
    # Low cash, some equity, good health, high intelligence
    "founder": StateVector(Wl=0.08, We=0.35, vitality=Vitality(0.65, 0.75, 0.70), I=0.8, S=0.4, R=0.9),
    # Student loans, minimal equity, young and healthy
    "student": StateVector(Wl=0.05, We=0.05, vitality=Vitality(0.85, 0.70, 0.85), I=0.6, S=0.3, R=0.95),
    # Stable income, savings and a retirement account
    "professional": StateVector(Wl=0.35, We=0.25, vitality=Vitality(0.55, 0.55, 0.70), I=0.7, S=0.5, R=0.6),
    # Debt, poor health, isolated
    "homeless": StateVector(Wl=0.02, We=0.0, vitality=Vitality(0.20, 0.15, 0.40), I=0.4, S=0.1, R=0.2),
    # High wealth, comfortable life
    "rich": StateVector(Wl=0.75, We=0.7, vitality=Vitality(0.65, 0.70, 0.75), I=0.75, S=0.8, R=0.7),
}

PRESET_DESCRIPTIONS: Dict[str, str] = {
    "founder": "Low cash, equity potential",
    "student": "Loans, learning, young",
    "professional": "Stable income, savings",
    "homeless": "Debt, poor health",
    "rich": "High wealth, comfortable",
}


def get_preset(name: str) -> StateVector:
    try:
        return PRESET_STATES[name].clone()
    except KeyError:
        raise ValueError(f"Unknown preset: {name!r}") from None
