import pytest

from manifold.config import (
    ARCHETYPE_PROFILES,
    OUTCOME_BUCKET_INFO,
    PATH_CATEGORY_INFO,
    SCENARIO_PRESETS,
    Archetype,
    OutcomeBucket,
    PathCategory,
    ScheduleEntry,
    SimulationParams,
    scenario_schedule,
    year_labels,
)
from manifold.state import PRESET_STATES


def test_every_enum_member_has_metadata():
    assert set(ARCHETYPE_PROFILES) == set(Archetype)
    assert set(PATH_CATEGORY_INFO) == set(PathCategory)
    assert set(OUTCOME_BUCKET_INFO) == set(OutcomeBucket)


def test_params_defaults():
    params = SimulationParams(current_year=2026)
    assert params.goal_year == 2036
    assert params.years == 10
    assert params.goal_age == 29
    assert params.num_paths == 200
    assert params.seed == 42


def test_params_are_clamped():
    params = SimulationParams(current_year=2026, goal_year=2020, num_paths=-5,
                              effort_multiplier=2.0, risk_tolerance=-1.0)
    assert params.goal_year == 2026
    assert params.years == 0
    assert params.num_paths == 0
    assert params.effort_multiplier == 1.0
    assert params.risk_tolerance == 0.0


def test_schedule_tuples_become_entries():
    params = SimulationParams(current_year=2026, schedule=[("grinder", 2027, 2030)])
    assert params.schedule == [ScheduleEntry(Archetype.GRINDER, 2027, 2030)]


def test_scenarios_reference_known_presets():
    for name, (preset, overrides) in SCENARIO_PRESETS.items():
        assert preset in PRESET_STATES
        SimulationParams(**overrides)
        for entry in scenario_schedule(name, 2026, 2031):
            assert 2026 <= entry.start_year <= entry.end_year <= 2031


def test_unknown_scenario():
    with pytest.raises(ValueError):
        scenario_schedule("Astronaut", 2026, 2036)


def test_year_labels():
    assert year_labels(2, 2026) == ["2026", "2027", "2028"]
