import dataclasses
import threading

import numpy as np
import pytest

from manifold.config import Archetype, OutcomeBucket, ScheduleEntry, SimulationParams
from manifold.engine import (
    ManifoldSimulator,
    SimulationCancelled,
    likelihood_weights,
    realized_risk,
    run_simulation,
    simulate,
)
from manifold.state import get_preset
from manifold.transition import Controls, archetypes_for_year, transition

YEAR = 2026


def make_params(**overrides):
    fields = dict(current_year=YEAR, goal_year=YEAR + 10, num_paths=60, seed=42)
    fields.update(overrides)
    return SimulationParams(**fields)


@pytest.fixture(scope="module")
def founder_run():
    params = make_params(schedule=[ScheduleEntry(Archetype.FOUNDER, YEAR, YEAR + 5)])
    return ManifoldSimulator(get_preset("founder"), params).run()


def final_net_worths(result):
    return np.array([p.final_net_worth for p in result.paths])


def test_path_shape(founder_run):
    assert len(founder_run.paths) == 60
    for path in founder_run.paths:
        assert len(path.states) == 11
        assert list(path.net_worth_by_year) == list(range(YEAR, YEAR + 11))
        for t, state in enumerate(path.states):
            assert path.net_worth_by_year[YEAR + t] == pytest.approx(state.net_worth())
            assert np.all((state.to_array() >= 0) & (state.to_array() <= 1))
        assert path.min_resilience == pytest.approx(min(s.R for s in path.states))
        assert 0.0 <= path.risk_score < 1.0
    assert len(founder_run.mean_path) == 11


def test_starting_state_is_year_zero(founder_run):
    start = founder_run.start_state
    assert all(p.states[0] == start for p in founder_run.paths)


def test_active_archetypes_follow_schedule(founder_run):
    path = founder_run.paths[0]
    assert path.active_archetypes_by_year[YEAR + 3] == (Archetype.FOUNDER,)
    assert path.active_archetypes_by_year[YEAR + 8] == ()


def test_milestones_are_ordered_within_window(founder_run):
    for path in founder_run.paths:
        years = [m.year for m in path.milestones]
        ids = [m.id for m in path.milestones]
        assert years == sorted(years)
        assert len(ids) == len(set(ids))
        assert all(YEAR < y <= YEAR + 10 for y in years)


def test_probabilities_are_normalized(founder_run):
    total = sum(p.probability for p in founder_run.paths)
    assert total == pytest.approx(1.0)
    assert all(p.probability > 0 for p in founder_run.paths)


def test_full_risk_tolerance_gives_uniform_weights():
    weights = likelihood_weights([0.1, 0.5, 0.9], risk_tolerance=1.0, penalty=5.0)
    np.testing.assert_allclose(weights, [1 / 3] * 3)
    cautious = likelihood_weights([0.1, 0.9], risk_tolerance=0.0, penalty=5.0)
    assert cautious[0] > cautious[1]


def test_realized_risk():
    assert realized_risk([100_000], 0.25) == 0.0
    assert realized_risk([100_000, 100_000, 100_000], 0.25) == 0.0
    assert realized_risk([100_000, 300_000, 50_000, 400_000], 0.25) > realized_risk([100_000, 110_000, 120_000, 130_000], 0.25)


def test_same_seed_reproduces_ensemble():
    a = ManifoldSimulator(get_preset("student"), make_params(seed=7)).run()
    b = ManifoldSimulator(get_preset("student"), make_params(seed=7)).run()
    np.testing.assert_array_equal(final_net_worths(a), final_net_worths(b))
    assert a.golden_path.id == b.golden_path.id


def test_different_seeds_differ():
    a = ManifoldSimulator(get_preset("student"), make_params(seed=1)).run()
    b = ManifoldSimulator(get_preset("student"), make_params(seed=2)).run()
    assert not np.array_equal(final_net_worths(a), final_net_worths(b))


def test_unseeded_runs_draw_fresh_entropy():
    a = ManifoldSimulator(get_preset("student"), make_params(seed=None)).run()
    b = ManifoldSimulator(get_preset("student"), make_params(seed=None)).run()
    assert not np.array_equal(final_net_worths(a), final_net_worths(b))


def test_empty_ensemble():
    result = ManifoldSimulator(get_preset("founder"), make_params(num_paths=0)).run()
    assert result.is_empty
    assert result.statistics is None
    assert result.golden_path is None
    assert result.mean_path == ()
    assert all(t.probability is None for t in result.outcome_buckets.values())
    assert set(result.outcome_buckets) == set(OutcomeBucket)


def test_zero_year_horizon():
    result = ManifoldSimulator(get_preset("founder"), make_params(goal_year=YEAR, num_paths=5)).run()
    for path in result.paths:
        assert len(path.states) == 1
        assert path.milestones == ()
        assert path.risk_score == 0.0


def test_results_are_read_only(founder_run):
    with pytest.raises(dataclasses.FrozenInstanceError):
        founder_run.golden_path = None
    with pytest.raises(TypeError):
        founder_run.paths[0].net_worth_by_year[YEAR] = 0.0


def test_result_keeps_its_own_params():
    params = make_params(num_paths=5)
    result = ManifoldSimulator(get_preset("founder"), params).run()
    params.num_paths = 999
    assert result.params.num_paths == 5


def test_cancelled_run_raises():
    event = threading.Event()
    event.set()
    with pytest.raises(SimulationCancelled):
        ManifoldSimulator(get_preset("founder"), make_params()).run(cancel_event=event)


def test_progress_reaches_total():
    calls = []
    ManifoldSimulator(get_preset("founder"), make_params(num_paths=250)).simulate(
        progress_callback=lambda done, total: calls.append((done, total))
    )
    assert calls[-1] == (250, 250)
    assert [done for done, _ in calls] == sorted(done for done, _ in calls)


def test_effort_raises_wealth():
    schedule = [ScheduleEntry(Archetype.INVESTOR, YEAR, YEAR + 10)]
    idle = run_simulation(get_preset("rich"), make_params(num_paths=300, seed=5, effort_multiplier=0.0, schedule=schedule))
    busy = run_simulation(get_preset("rich"), make_params(num_paths=300, seed=5, effort_multiplier=1.0, schedule=schedule))
    assert np.mean(final_net_worths(busy) >= final_net_worths(idle)) > 0.95
    assert busy.statistics.mean_final_net_worth > idle.statistics.mean_final_net_worth


def passive_rollout(start, params):
    """Noise-free trajectory under the same controls and schedule."""
    controls = Controls(params.effort_multiplier, params.risk_tolerance)
    state = start
    for t in range(1, params.years + 1):
        archetypes = archetypes_for_year(params.schedule, params.current_year + t)
        state = transition(state, controls, archetypes, np.zeros(6), params)
    return state


def test_idle_wealth_grows_no_faster_than_passive_drift():
    start = get_preset("rich")
    params = make_params(num_paths=500, seed=5, effort_multiplier=0.0)
    passive = passive_rollout(start, params).net_worth()
    assert passive > start.net_worth()

    result = run_simulation(start, params)
    finals = final_net_worths(result)
    sampling_error = finals.std() / np.sqrt(len(finals))
    assert result.statistics.mean_final_net_worth <= passive + 3 * sampling_error


def test_risk_tolerance_raises_founder_burnout():
    schedule = [ScheduleEntry(Archetype.FOUNDER, YEAR, YEAR + 10)]
    common = dict(num_paths=500, seed=3, effort_multiplier=0.8, schedule=schedule)
    cautious = run_simulation(get_preset("founder"), make_params(risk_tolerance=0.2, **common))
    reckless = run_simulation(get_preset("founder"), make_params(risk_tolerance=0.8, **common))
    assert reckless.statistics.burnout_probability > cautious.statistics.burnout_probability


def test_module_level_simulate():
    paths = simulate(get_preset("student"), years=5, controls=Controls(), schedule=[],
                     ensemble_size=10, seed=1, start_year=2030)
    assert len(paths) == 10
    assert all(len(p.states) == 6 for p in paths)
    assert min(paths[0].net_worth_by_year) == 2030
    assert sum(p.probability for p in paths) == pytest.approx(1.0)
