"""
Configuration for the Manifold life-trajectory simulator.

Defines the real-unit wealth curves, the qualitative tier tables, the life
archetypes that drive the yearly transition model, the path categories and
outcome buckets shown to the user, and the tunable simulation parameters.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Tuple

# Array order of the normalized state dimensions
DIMENSIONS: Tuple[str, ...] = ("Wl", "We", "V", "I", "S", "R")
WL, WE, V, I, S, R = range(6)

# Dimensions whose positive drift is amplified by effort
EFFORT_DIMENSIONS: Tuple[int, ...] = (WL, WE, I, S)


# ── Real-unit wealth curves ──────────────────────────────────────────
@dataclass(frozen=True)
class WealthCurve:
    """Monotonic normalized -> USD mapping.

    Below ``zero_point`` the curve is linear from ``minimum`` up to $0;
    above it, USD grows as a power of the remaining normalized range.
    """

    minimum: float
    maximum: float
    zero_point: float = 0.0
    exponent: float = 2.5


LIQUID_CURVE = WealthCurve(minimum=-100_000.0, maximum=10_000_000.0, zero_point=0.1, exponent=2.5)
EQUITY_CURVE = WealthCurve(minimum=0.0, maximum=50_000_000.0, zero_point=0.0, exponent=3.0)

NET_WORTH_MIN = LIQUID_CURVE.minimum + EQUITY_CURVE.minimum
NET_WORTH_MAX = LIQUID_CURVE.maximum + EQUITY_CURVE.maximum


# ── Qualitative tiers ────────────────────────────────────────────────
TIER_COUNT = 6

# Colors for tier index 0..5, worst to best
TIER_COLORS: List[str] = ["#ef4444", "#f97316", "#eab308", "#22c55e", "#3b82f6", "#fbbf24"]

BODY_LABELS = ["Frail", "Weak", "Average", "Fit", "Athletic", "Peak"]
MIND_LABELS = ["Burned Out", "Stressed", "Coping", "Calm", "Sharp", "Zen"]
APPEARANCE_LABELS = ["Neglected", "Plain", "Presentable", "Attractive", "Striking", "Stunning"]
VITALITY_LABELS = ["Depleted", "Drained", "Steady", "Energetic", "Vibrant", "Radiant"]
INTELLIGENCE_LABELS = ["Struggling", "Below Average", "Average", "Smart", "Brilliant", "Genius"]
STATUS_LABELS = ["Unknown", "Obscure", "Known", "Respected", "Influential", "Elite"]
RESILIENCE_LABELS = ["Broken", "Fragile", "Vulnerable", "Stable", "Resilient", "Unshakeable"]


@dataclass(frozen=True)
class DimensionInfo:
    name: str
    labels: Tuple[str, ...]
    color: str


DIMENSION_INFO: Dict[str, DimensionInfo] = {
    "Wl": DimensionInfo("Liquid Wealth", (), "#fbbf24"),
    "We": DimensionInfo("Equity", (), "#f59e0b"),
    "V": DimensionInfo("Vitality", tuple(VITALITY_LABELS), "#22c55e"),
    "I": DimensionInfo("Intelligence", tuple(INTELLIGENCE_LABELS), "#3b82f6"),
    "S": DimensionInfo("Status", tuple(STATUS_LABELS), "#a855f7"),
    "R": DimensionInfo("Resilience", tuple(RESILIENCE_LABELS), "#14b8a6"),
}


class WealthTier(str, Enum):
    DEBT = "debt"
    STRUGGLING = "struggling"
    COMFORTABLE = "comfortable"
    WEALTHY = "wealthy"
    RICH = "rich"


# (tier, exclusive upper bound on net worth, label, color)
WEALTH_TIERS: List[Tuple[WealthTier, float, str, str]] = [
    (WealthTier.DEBT, 0.0, "In Debt", "#ef4444"),
    (WealthTier.STRUGGLING, 100_000.0, "Struggling", "#f97316"),
    (WealthTier.COMFORTABLE, 1_000_000.0, "Comfortable", "#22c55e"),
    (WealthTier.WEALTHY, 10_000_000.0, "Wealthy", "#3b82f6"),
    (WealthTier.RICH, float("inf"), "Rich", "#fbbf24"),
]


# ── Archetypes ───────────────────────────────────────────────────────
class Archetype(str, Enum):
    FOUNDER = "founder"
    CS_STUDENT = "cs_student"
    FITNESS_ENTHUSIAST = "fitness_enthusiast"
    NETWORKER = "networker"
    GRINDER = "grinder"
    INVESTOR = "investor"


@dataclass(frozen=True)
class CouplingTable:
    """Cross-dimension multipliers applied by the transition model."""

    effort_amplification: float = 1.5  # positive Wl/We/I/S drift at full effort
    stress_vitality_penalty: float = 0.015  # V lost per year at full effort
    stress_resilience_penalty: float = 0.02  # R lost per year at full effort
    low_vitality_threshold: float = 0.35  # below this, resilience loss compounds
    burnout_acceleration: float = 1.8
    low_intelligence_threshold: float = 0.25  # below this, status growth stalls
    status_ceiling_damping: float = 0.4


DEFAULT_COUPLING = CouplingTable()


@dataclass(frozen=True)
class ScheduleEntry:
    """An archetype active from start_year through end_year (inclusive)."""

    archetype: Archetype
    start_year: int
    end_year: int

    def __post_init__(self):
        # Accepts archetype ids; unknown ids raise ValueError
        object.__setattr__(self, "archetype", Archetype(self.archetype))

    def active_in(self, year: int) -> bool:
        return self.start_year <= year <= self.end_year


@dataclass(frozen=True)
class ArchetypeProfile:
    """A life strategy: yearly drift and volatility scale per dimension."""

    name: str
    description: str
    color: str
    drift: Dict[str, float] = field(default_factory=dict)
    volatility: Dict[str, float] = field(default_factory=dict)  # missing = 1.0
    coupling: CouplingTable = DEFAULT_COUPLING


ARCHETYPE_PROFILES: Dict[Archetype, ArchetypeProfile] = {
    Archetype.FOUNDER: ArchetypeProfile(
        "Founder",
        "High risk, high reward. Equity potential explodes but resilience drains.",
        "#f59e0b",
        drift={"We": 0.02, "R": -0.02, "S": 0.01, "I": 0.005},
        volatility={"We": 2.0, "Wl": 1.5, "R": 1.2},
        coupling=CouplingTable(burnout_acceleration=2.2, stress_resilience_penalty=0.025),
    ),
    Archetype.CS_STUDENT: ArchetypeProfile(
        "CS Student",
        "Steady skill growth with moderate stability.",
        "#3b82f6",
        drift={"I": 0.015, "R": 0.01, "Wl": -0.005, "S": 0.005},
        volatility={"I": 0.5, "We": 0.8, "R": 0.6},
    ),
    Archetype.FITNESS_ENTHUSIAST: ArchetypeProfile(
        "Fitness Enthusiast",
        "Boosts vitality and resilience with consistent effort.",
        "#10b981",
        drift={"V": 0.02, "R": 0.015, "S": 0.005},
        volatility={"V": 0.4, "R": 0.5},
        coupling=CouplingTable(stress_vitality_penalty=0.008, burnout_acceleration=1.4),
    ),
    Archetype.NETWORKER: ArchetypeProfile(
        "Networker",
        "Focuses on building social capital and status.",
        "#8b5cf6",
        drift={"S": 0.025, "R": -0.005, "Wl": -0.005},
        volatility={"S": 1.5},
        coupling=CouplingTable(status_ceiling_damping=0.3),
    ),
    Archetype.GRINDER: ArchetypeProfile(
        "Grinder",
        "Maximum effort, trades health for wealth and skills.",
        "#ef4444",
        drift={"Wl": 0.02, "I": 0.01, "V": -0.015, "R": -0.025},
        volatility={"Wl": 1.2, "R": 1.5},
        coupling=CouplingTable(
            effort_amplification=1.8,
            stress_vitality_penalty=0.025,
            stress_resilience_penalty=0.03,
            burnout_acceleration=2.5,
        ),
    ),
    Archetype.INVESTOR: ArchetypeProfile(
        "Investor",
        "Compounds existing capital; little effort, market-driven swings.",
        "#eab308",
        drift={"We": 0.01, "Wl": 0.005, "S": 0.003},
        volatility={"We": 1.6, "Wl": 1.3},
        coupling=CouplingTable(effort_amplification=1.0, stress_resilience_penalty=0.01),
    ),
}


# ── Path categories ──────────────────────────────────────────────────
class PathCategory(str, Enum):
    BURNOUT_RISK = "burnout_risk"
    HEALTH_FIRST = "health_first"
    BALANCED = "balanced"
    WEALTH_DOMINANT = "wealth_dominant"
    GROWTH_FOCUSED = "growth_focused"
    OTHER = "other"


@dataclass(frozen=True)
class CategoryInfo:
    label: str
    color: str
    description: str


PATH_CATEGORY_INFO: Dict[PathCategory, CategoryInfo] = {
    PathCategory.BURNOUT_RISK: CategoryInfo(
        "Burnout Risk", "#ef4444", "Resilience drops below safe levels"
    ),
    PathCategory.HEALTH_FIRST: CategoryInfo(
        "Health First", "#22c55e", "Maintains high vitality throughout"
    ),
    PathCategory.BALANCED: CategoryInfo(
        "Balanced", "#14b8a6", "Even growth across all life dimensions"
    ),
    PathCategory.WEALTH_DOMINANT: CategoryInfo(
        "Wealth Dominant", "#fbbf24", "Financial success is the primary outcome"
    ),
    PathCategory.GROWTH_FOCUSED: CategoryInfo(
        "Growth Focused", "#a855f7", "Prioritizes skills and social capital"
    ),
    PathCategory.OTHER: CategoryInfo(
        "Unremarkable", "#9ca3af", "No dimension stands out by the goal year"
    ),
}


class OutcomeBucket(str, Enum):
    WEALTHY = "wealthy_outcome"
    BALANCED = "balanced_outcome"
    HIGH_VITALITY = "high_vitality"
    BURNOUT_RISK = "burnout_risk"


# (label, icon, color) per bucket
OUTCOME_BUCKET_INFO: Dict[OutcomeBucket, Tuple[str, str, str]] = {
    OutcomeBucket.WEALTHY: ("Wealthy", "💰", "#fbbf24"),
    OutcomeBucket.BALANCED: ("Balanced", "⚖️", "#14b8a6"),
    OutcomeBucket.HIGH_VITALITY: ("Healthy", "💪", "#22c55e"),
    OutcomeBucket.BURNOUT_RISK: ("Burnout", "🔥", "#ef4444"),
}


# ── Milestones ───────────────────────────────────────────────────────
@dataclass(frozen=True)
class MilestoneSpec:
    id: str
    label: str
    icon: str
    description: str


# (net worth threshold, spec), ascending
NET_WORTH_MILESTONES: List[Tuple[float, MilestoneSpec]] = [
    (0.0, MilestoneSpec("nw-0", "Break Even", "scale", "No longer in debt")),
    (100_000.0, MilestoneSpec("nw-100k", "$100K", "money-stack", "First $100K saved")),
    (500_000.0, MilestoneSpec("nw-500k", "$500K", "house", "House money")),
    (1_000_000.0, MilestoneSpec("nw-1m", "$1M", "mansion", "Millionaire status")),
    (10_000_000.0, MilestoneSpec("nw-10m", "$10M", "yacht", "Wealthy elite")),
]

LIFE_EVENT_MILESTONES: Dict[str, MilestoneSpec] = {
    "burnout": MilestoneSpec("burnout", "Burnout", "storm-cloud", "Mental health crisis"),
    "recovery": MilestoneSpec("recovery", "Recovery", "sunrise", "Bouncing back"),
    "peak-health": MilestoneSpec("peak-health", "Peak Health", "running", "Physical prime"),
    "frail": MilestoneSpec("frail", "Frail", "crutch", "Health has collapsed"),
    "elite-status": MilestoneSpec("elite-status", "Elite Status", "crown", "Top of the social ladder"),
    "homeless": MilestoneSpec("homeless", "Homeless", "cardboard-box", "Lost everything"),
}

# Most significant first; orders milestones that land in the same year
MILESTONE_PRIORITY: List[str] = [
    "homeless", "burnout", "nw-10m", "nw-1m", "nw-500k", "nw-100k", "nw-0",
    "recovery", "peak-health", "elite-status", "frail",
]

BURNOUT_EVENT_RESILIENCE = 0.25
RECOVERY_LOW_RESILIENCE = 0.40
RECOVERY_HIGH_RESILIENCE = 0.60
PEAK_HEALTH_VITALITY = 0.85
FRAIL_VITALITY = 1 / 6
ELITE_STATUS = 5 / 6
HOMELESS_NET_WORTH = -50_000.0
HOMELESS_RESILIENCE = 0.30


# ── Simulation parameters ────────────────────────────────────────────
@dataclass(frozen=True)
class ScoringWeights:
    """Golden-path score weights."""

    net_worth: float = 0.4
    vitality: float = 0.2
    resilience: float = 0.2
    low_risk: float = 0.2


@dataclass
class SimulationParams:
    """All tunable parameters for a simulation run."""

    # --- Window ---
    current_year: int = field(default_factory=lambda: date.today().year)
    goal_year: Optional[int] = None  # defaults to current_year + 10
    user_age: int = 19

    # --- Ensemble ---
    num_paths: int = 200
    seed: Optional[int] = 42  # None = fresh entropy every run

    # --- User controls ---
    effort_multiplier: float = 0.7
    risk_tolerance: float = 0.5

    # --- Archetype timeline; years with no active entry get passive drift and default coupling stress ---
    schedule: List[ScheduleEntry] = field(default_factory=list)

    # --- Noise ---
    base_volatility: float = 0.04  # yearly std of a normalized dimension at volatility 1.0
    risk_floor: float = 0.3  # noise scale at risk_tolerance = 0
    risk_ceiling: float = 2.0  # noise scale at risk_tolerance = 1

    # --- Passive drift, applied every year regardless of effort ---
    passive_drift: Dict[str, float] = field(default_factory=lambda: {
        "Wl": 0.002,
        "We": 0.002,
        "V": -0.002,  # aging
    })

    # --- Outcome thresholds ---
    success_net_worth: float = 1_000_000.0
    burnout_threshold: float = 0.3
    risk_scale: float = 0.25  # realized return std mapping to risk ~0.63
    risk_weight_penalty: float = 5.0  # path probability weight exp(-k * risk * (1 - tolerance))

    scoring: ScoringWeights = field(default_factory=ScoringWeights)

    def __post_init__(self):
        if self.goal_year is None:
            self.goal_year = self.current_year + 10
        self.goal_year = max(self.current_year, int(self.goal_year))
        self.num_paths = max(0, int(self.num_paths))
        self.user_age = max(0, min(120, int(self.user_age)))
        self.effort_multiplier = max(0.0, min(1.0, float(self.effort_multiplier)))
        self.risk_tolerance = max(0.0, min(1.0, float(self.risk_tolerance)))
        self.schedule = [
            e if isinstance(e, ScheduleEntry) else ScheduleEntry(*e)
            for e in self.schedule
        ]

    @property
    def years(self) -> int:
        return self.goal_year - self.current_year

    @property
    def goal_age(self) -> int:
        return self.user_age + self.years


# Named scenario presets (state preset name, parameter overrides)
SCENARIO_PRESETS: Dict[str, Tuple[str, Dict]] = {
    "Bootstrapped Founder": ("founder", dict(
        effort_multiplier=0.8, risk_tolerance=0.8,
    )),
    "Student to Engineer": ("student", dict(
        effort_multiplier=0.7, risk_tolerance=0.4,
    )),
    "Steady Professional": ("professional", dict(
        effort_multiplier=0.5, risk_tolerance=0.3,
    )),
    "Climbing Out": ("homeless", dict(
        effort_multiplier=0.9, risk_tolerance=0.2,
    )),
    "Old Money": ("rich", dict(
        effort_multiplier=0.1, risk_tolerance=0.5,
    )),
}

# Default archetype timelines per scenario, as (archetype, start offset, end offset) in years
SCENARIO_TIMELINES: Dict[str, List[Tuple[Archetype, int, int]]] = {
    "Bootstrapped Founder": [(Archetype.FOUNDER, 0, 10), (Archetype.CS_STUDENT, 0, 2)],
    "Student to Engineer": [(Archetype.CS_STUDENT, 0, 4), (Archetype.GRINDER, 5, 10)],
    "Steady Professional": [(Archetype.INVESTOR, 0, 10), (Archetype.FITNESS_ENTHUSIAST, 0, 10)],
    "Climbing Out": [(Archetype.FITNESS_ENTHUSIAST, 0, 3), (Archetype.GRINDER, 2, 10)],
    "Old Money": [(Archetype.INVESTOR, 0, 10), (Archetype.NETWORKER, 0, 10)],
}


def scenario_schedule(name: str, current_year: int, goal_year: int) -> List[ScheduleEntry]:
    """Anchor a scenario's relative timeline at current_year, cut at goal_year."""
    if name not in SCENARIO_TIMELINES:
        raise ValueError(f"Unknown scenario: {name!r}")
    entries = []
    for archetype, start, end in SCENARIO_TIMELINES[name]:
        if current_year + start > goal_year:
            continue
        entries.append(ScheduleEntry(
            archetype, current_year + start, min(goal_year, current_year + end)
        ))
    return entries


def year_labels(num_years: int, start_year: int) -> List[str]:
    """Generate labels like '2026', '2027', ... for year offsets 0..num_years."""
    return [str(start_year + t) for t in range(num_years + 1)]
