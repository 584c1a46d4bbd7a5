"""
Decision outcomes supplied by the decision-tree generator.

The generator itself lives outside this package; the simulator only reads
the numeric fields of a PathOutcome when seeding a starting state.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .state import StateVector, clamp_unit


class WorkLifeBalance(str, Enum):
    POOR = "poor"
    AVERAGE = "average"
    GOOD = "good"
    EXCELLENT = "excellent"


class CareerGrowth(str, Enum):
    STAGNANT = "stagnant"
    SLOW = "slow"
    MODERATE = "moderate"
    FAST = "fast"
    EXPLOSIVE = "explosive"


class Fulfillment(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class StressLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"


@dataclass(frozen=True)
class PathOutcome:
    """Snapshot of one year after a decision."""

    salary: float  # annual USD
    net_worth: float
    lifestyle: str
    work_life_balance: WorkLifeBalance
    career_growth: CareerGrowth
    fulfillment: Fulfillment
    stress: StressLevel
    narrative: str = ""
    monthly_burn: float = 0.0
    savings_rate: float = 0.0  # 0-1
    equity: Optional[float] = None  # USD value or potential
    job_title: Optional[str] = None
    company: Optional[str] = None
    company_type: Optional[str] = None
    location: Optional[str] = None
    key_events: List[str] = field(default_factory=list)

    def __post_init__(self):
        object.__setattr__(self, "salary", max(0.0, float(self.salary)))
        object.__setattr__(self, "monthly_burn", max(0.0, float(self.monthly_burn)))
        object.__setattr__(self, "savings_rate", clamp_unit(self.savings_rate))
        if self.equity is not None:
            object.__setattr__(self, "equity", max(0.0, float(self.equity)))
        object.__setattr__(self, "work_life_balance", WorkLifeBalance(self.work_life_balance))
        object.__setattr__(self, "career_growth", CareerGrowth(self.career_growth))
        object.__setattr__(self, "fulfillment", Fulfillment(self.fulfillment))
        object.__setattr__(self, "stress", StressLevel(self.stress))


@dataclass(frozen=True)
class DecisionOption:
    """A choice at a decision point, with its outcome once materialized."""

    id: str
    label: str
    description: str = ""
    probability: float = 1.0
    tradeoffs: List[str] = field(default_factory=list)
    outcome: Optional[PathOutcome] = None

    @property
    def is_materialized(self) -> bool:
        return self.outcome is not None


def seed_state_from_outcome(outcome: PathOutcome, base: StateVector) -> StateVector:
    """Starting state whose wealth matches the outcome's reported finances.

    Equity comes from ``outcome.equity`` (0 when unknown) and liquid wealth
    is the remainder of the reported net worth. Non-wealth dimensions are
    taken from ``base``. Dollar amounts beyond the curve bounds are clamped.
    """
    equity = outcome.equity or 0.0
    real = base.to_real_units()
    return StateVector.from_real_units(
        liquid_wealth=outcome.net_worth - equity,
        equity=equity,
        vitality=base.vitality,
        intelligence=real.intelligence,
        status=real.status,
        resilience=real.resilience,
    )
