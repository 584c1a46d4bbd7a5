import pytest

from manifold.outcome import (
    CareerGrowth,
    DecisionOption,
    PathOutcome,
    StressLevel,
    seed_state_from_outcome,
)
from manifold.state import get_preset


def make_outcome(**overrides):
    fields = dict(
        salary=120_000,
        net_worth=250_000,
        lifestyle="comfortable",
        work_life_balance="good",
        career_growth="fast",
        fulfillment="high",
        stress="medium",
        equity=200_000,
        job_title="Software Engineer",
    )
    fields.update(overrides)
    return PathOutcome(**fields)


def test_outcome_coerces_vocabulary_and_clamps():
    outcome = make_outcome(savings_rate=1.5, salary=-10)
    assert outcome.career_growth is CareerGrowth.FAST
    assert outcome.stress is StressLevel.MEDIUM
    assert outcome.savings_rate == 1.0
    assert outcome.salary == 0.0


def test_unknown_vocabulary_raises():
    with pytest.raises(ValueError):
        make_outcome(stress="meh")


def test_seed_matches_reported_net_worth():
    base = get_preset("student")
    state = seed_state_from_outcome(make_outcome(), base)
    real = state.to_real_units()
    assert real.net_worth == pytest.approx(250_000, rel=1e-6)
    assert real.equity == pytest.approx(200_000, rel=1e-6)
    assert state.vitality == base.vitality
    assert state.I == pytest.approx(base.I)
    assert state.S == pytest.approx(base.S)
    assert state.R == pytest.approx(base.R)


def test_missing_equity_puts_everything_in_liquid():
    state = seed_state_from_outcome(make_outcome(equity=None, net_worth=-20_000), get_preset("founder"))
    real = state.to_real_units()
    assert real.equity == 0.0
    assert real.liquid_wealth == pytest.approx(-20_000, rel=1e-6)


def test_decision_option_materialization():
    option = DecisionOption("take-offer", "Take the offer")
    assert not option.is_materialized
    assert DecisionOption("take-offer", "Take the offer", outcome=make_outcome()).is_materialized
