import pytest

from manifold.config import LIFE_EVENT_MILESTONES, MILESTONE_PRIORITY, NET_WORTH_MILESTONES, PathCategory
from manifold.milestones import NET_WORTH_KIND, categorize_path, scan_milestones
from manifold.state import StateVector


def flat(n, **dims):
    return [StateVector.from_dimensions(**dims) for _ in range(n)]


def test_every_net_worth_crossing_is_recorded():
    states = flat(4)
    net_worths = [-10_000, 50_000, 150_000, 2_000_000]
    milestones = scan_milestones(states, net_worths, 2026)

    assert [m.id for m in milestones] == ["nw-0", "nw-100k", "nw-1m", "nw-500k"]
    assert [m.year for m in milestones] == [2027, 2028, 2029, 2029]
    assert all(m.kind == NET_WORTH_KIND for m in milestones)
    assert milestones[2].net_worth == 1_000_000
    assert milestones[3].net_worth == 500_000


def test_jump_over_several_thresholds():
    milestones = scan_milestones(flat(2), [150_000, 2_000_000], 2026)
    assert [(m.id, m.year) for m in milestones] == [("nw-1m", 2027), ("nw-500k", 2027)]


def test_starting_point_never_fires():
    assert scan_milestones(flat(2), [2_000_000, 2_000_000], 2026) == []
    assert scan_milestones(flat(1), [2_000_000], 2026) == []


def test_burnout_then_recovery():
    states = [
        StateVector.from_dimensions(R=0.5),
        StateVector.from_dimensions(R=0.2),
        StateVector.from_dimensions(R=0.7),
        StateVector.from_dimensions(R=0.2),
    ]
    milestones = scan_milestones(states, [50_000] * 4, 2026)
    assert [(m.id, m.year) for m in milestones] == [("burnout", 2027), ("recovery", 2028)]


def test_same_year_events_are_ordered_by_significance():
    states = [StateVector.from_dimensions(R=0.5), StateVector.from_dimensions(R=0.2)]
    milestones = scan_milestones(states, [0, -60_000], 2026)
    assert [(m.id, m.year) for m in milestones] == [("homeless", 2027), ("burnout", 2027)]


def test_years_never_decrease_and_ids_unique():
    states = [
        StateVector.from_dimensions(V=0.5, S=0.5, R=0.5),
        StateVector.from_dimensions(V=0.9, S=0.9, R=0.5),
        StateVector.from_dimensions(V=0.9, S=0.9, R=0.2),
        StateVector.from_dimensions(V=0.1, S=0.9, R=0.7),
    ]
    milestones = scan_milestones(states, [-10_000, 200_000, 600_000, 20_000_000], 2026)
    years = [m.year for m in milestones]
    ids = [m.id for m in milestones]
    assert years == sorted(years)
    assert len(ids) == len(set(ids))
    assert ids == [
        "nw-100k", "nw-0", "peak-health", "elite-status",
        "burnout", "nw-500k",
        "nw-10m", "nw-1m", "recovery", "frail",
    ]


def test_priority_covers_every_milestone():
    ids = {spec.id for _, spec in NET_WORTH_MILESTONES} | set(LIFE_EVENT_MILESTONES)
    assert set(MILESTONE_PRIORITY) == ids


@pytest.mark.parametrize("state, min_resilience, expected", [
    (StateVector.from_dimensions(V=0.9, R=0.9), 0.2, PathCategory.BURNOUT_RISK),
    (StateVector.from_dimensions(V=0.8, R=0.7), 0.7, PathCategory.HEALTH_FIRST),
    (StateVector.from_dimensions(0.6, 0.6, 0.6, 0.6, 0.6, 0.6), 0.6, PathCategory.BALANCED),
    (StateVector.from_dimensions(Wl=0.9, We=0.9, V=0.3, I=0.3, S=0.3, R=0.5), 0.5, PathCategory.WEALTH_DOMINANT),
    (StateVector.from_dimensions(Wl=0.2, We=0.2, V=0.2, I=0.9, S=0.9, R=0.5), 0.5, PathCategory.GROWTH_FOCUSED),
    (StateVector.from_dimensions(0.3, 0.3, 0.3, 0.3, 0.3, 0.4), 0.4, PathCategory.OTHER),
])
def test_categorize_path(state, min_resilience, expected):
    assert categorize_path(state, min_resilience) is expected
