"""
Milestone detection and path categorization.

A trajectory is scanned year by year. Each milestone id fires at most once
per path, at the first year its threshold is crossed. Thresholds crossed in
the same year are all recorded, most significant first (MILESTONE_PRIORITY).
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from .config import (
    BURNOUT_EVENT_RESILIENCE,
    ELITE_STATUS,
    FRAIL_VITALITY,
    HOMELESS_NET_WORTH,
    HOMELESS_RESILIENCE,
    LIFE_EVENT_MILESTONES,
    MILESTONE_PRIORITY,
    NET_WORTH_MILESTONES,
    PEAK_HEALTH_VITALITY,
    RECOVERY_HIGH_RESILIENCE,
    RECOVERY_LOW_RESILIENCE,
    MilestoneSpec,
    PathCategory,
)
from .state import StateVector

NET_WORTH_KIND = "net-worth"
LIFE_EVENT_KIND = "life-event"


@dataclass(frozen=True)
class Milestone:
    id: str
    icon: str
    label: str
    description: str
    year: int
    kind: str = LIFE_EVENT_KIND
    net_worth: Optional[float] = None  # threshold, for net-worth milestones

    @classmethod
    def from_spec(cls, spec: MilestoneSpec, year: int, kind: str,
                  net_worth: Optional[float] = None) -> "Milestone":
        return cls(spec.id, spec.icon, spec.label, spec.description, year, kind, net_worth)


_NW_BY_ID = {spec.id: (threshold, spec) for threshold, spec in NET_WORTH_MILESTONES}


def _build(milestone_id: str, year: int) -> Milestone:
    if milestone_id in _NW_BY_ID:
        threshold, spec = _NW_BY_ID[milestone_id]
        return Milestone.from_spec(spec, year, NET_WORTH_KIND, threshold)
    return Milestone.from_spec(LIFE_EVENT_MILESTONES[milestone_id], year, LIFE_EVENT_KIND)


def scan_milestones(
    states: Sequence[StateVector],
    net_worths: Sequence[float],
    start_year: int,
) -> List[Milestone]:
    """Milestones along a trajectory, in non-decreasing year order.

    ``states[t]`` and ``net_worths[t]`` describe calendar year
    ``start_year + t``; year 0 is the starting point and never fires.
    """
    milestones = []
    milestone_flags = set()
    been_low = states[0].R < RECOVERY_LOW_RESILIENCE if states else False

    for t in range(1, len(states)):
        prev, cur = states[t - 1], states[t]
        prev_nw, cur_nw = net_worths[t - 1], net_worths[t]
        hits = []

        for threshold, spec in NET_WORTH_MILESTONES:
            if prev_nw < threshold <= cur_nw:
                hits.append(spec.id)

        if prev.R >= BURNOUT_EVENT_RESILIENCE > cur.R:
            hits.append("burnout")
        if been_low and prev.R < RECOVERY_HIGH_RESILIENCE <= cur.R:
            hits.append("recovery")
        if prev.V < PEAK_HEALTH_VITALITY <= cur.V:
            hits.append("peak-health")
        if prev.V >= FRAIL_VITALITY > cur.V:
            hits.append("frail")
        if prev.S < ELITE_STATUS <= cur.S:
            hits.append("elite-status")
        if cur_nw < HOMELESS_NET_WORTH and cur.R < HOMELESS_RESILIENCE:
            hits.append("homeless")

        if cur.R < RECOVERY_LOW_RESILIENCE:
            been_low = True

        fresh = [h for h in hits if h not in milestone_flags]
        milestone_flags.update(fresh)
        for milestone_id in sorted(fresh, key=MILESTONE_PRIORITY.index):
            milestones.append(_build(milestone_id, start_year + t))

    return milestones


def dimension_balance(state: StateVector):
    """(mean, population variance) of the six dimensions."""
    values = state.to_array()
    return float(values.mean()), float(values.var())


def categorize_path(
    final: StateVector,
    min_resilience: float,
    burnout_threshold: float = 0.3,
) -> PathCategory:
    """Single category per path; the first matching rule wins."""
    if min_resilience < burnout_threshold:
        return PathCategory.BURNOUT_RISK

    if final.V > 0.75 and final.R > 0.6:
        return PathCategory.HEALTH_FIRST

    avg, variance = dimension_balance(final)
    if variance < 0.04 and avg > 0.5:
        return PathCategory.BALANCED

    if (final.Wl + final.We) / 2 > 0.65:
        return PathCategory.WEALTH_DOMINANT

    if (final.I + final.S) / 2 > 0.65:
        return PathCategory.GROWTH_FOCUSED

    return PathCategory.OTHER
