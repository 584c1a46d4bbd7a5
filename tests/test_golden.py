import pytest

from manifold.config import NET_WORTH_MAX, NET_WORTH_MIN, SimulationParams
from manifold.engine import ManifoldSimulator
from manifold.golden import (
    best_outcome_path,
    highest_probability_path,
    most_likely_path,
    sample_representative_paths,
    score_path,
    select_golden_path,
    wealth_score,
    worst_outcome_path,
)
from manifold.results import SimulatedPath, frozen_mapping
from manifold.state import StateVector, get_preset


def make_path(index, state, risk=0.1, probability=1.0):
    return SimulatedPath(
        id=f"path-{index:04d}",
        index=index,
        states=(state, state),
        probability=probability,
        risk_score=risk,
        min_resilience=state.R,
        category=None,
        milestones=(),
        net_worth_by_year=frozen_mapping({2026: state.net_worth(), 2027: state.net_worth()}),
    )


@pytest.fixture(scope="module")
def result():
    params = SimulationParams(current_year=2026, num_paths=120, seed=11)
    return ManifoldSimulator(get_preset("professional"), params).run()


def test_wealth_score_bounds():
    assert wealth_score(NET_WORTH_MIN) == 0.0
    assert wealth_score(NET_WORTH_MAX) == pytest.approx(1.0)
    assert wealth_score(10_000) < wealth_score(1_000_000) < wealth_score(20_000_000)


def test_empty_ensemble_has_no_golden_path():
    assert select_golden_path([]) is None
    assert best_outcome_path([]) is None
    assert most_likely_path([]) is None
    assert highest_probability_path([]) is None


def test_highest_score_wins():
    poor = make_path(0, StateVector.from_dimensions(Wl=0.1, We=0.0, V=0.3, R=0.3))
    rich = make_path(1, StateVector.from_dimensions(Wl=0.7, We=0.6, V=0.8, R=0.8))
    assert score_path(rich) > score_path(poor)
    assert select_golden_path([poor, rich]) is rich


def test_ties_and_risk_ordering():
    state = StateVector()
    calm = make_path(0, state, risk=0.1)
    twin = make_path(1, state, risk=0.1)
    assert select_golden_path([calm, twin]) is calm
    assert select_golden_path([make_path(2, state, risk=0.5), calm]) is calm


def test_golden_path_is_stable(result):
    again = select_golden_path(result.paths)
    assert result.golden_path is not None
    assert again.id == result.golden_path.id
    assert result.path_by_id(again.id) is not None


def test_best_and_worst(result):
    best = best_outcome_path(result.paths)
    worst = worst_outcome_path(result.paths)
    assert best.final_magnitude >= worst.final_magnitude
    assert all(worst.final_magnitude <= p.final_magnitude <= best.final_magnitude for p in result.paths)


def test_representative_sample(result):
    sample = sample_representative_paths(result, 50)
    ids = [p.id for p in sample]
    assert len(sample) == 50
    assert len(set(ids)) == 50
    assert result.golden_path.id in ids
    assert highest_probability_path(result.paths).id in ids


def test_small_ensemble_is_returned_whole(result):
    assert len(sample_representative_paths(result, 500)) == len(result.paths)


def test_highest_probability_path_breaks_ties_by_index():
    state = StateVector()
    low = make_path(0, state, probability=0.2)
    high = make_path(1, state, probability=0.4)
    twin = make_path(2, state, probability=0.4)
    assert highest_probability_path([low, twin, high]) is high
    assert highest_probability_path([low]) is low
