from manifold.config import SimulationParams
from manifold.runner import SimulationRunner
from manifold.state import get_preset


def test_submit_publishes_result():
    with SimulationRunner() as runner:
        future = runner.submit(get_preset("student"), SimulationParams(current_year=2026, num_paths=20))
        result = future.result(timeout=30)
        assert result is not None
        assert runner.latest_result is result


def test_newer_submission_wins():
    slow = SimulationParams(current_year=2026, goal_year=2066, num_paths=20_000)
    fast = SimulationParams(current_year=2026, num_paths=10)
    with SimulationRunner() as runner:
        first = runner.submit(get_preset("founder"), slow)
        second = runner.submit(get_preset("founder"), fast)

        assert first.result(timeout=60) is None
        latest = second.result(timeout=60)
        assert latest is not None
        assert runner.latest_result is latest
        assert latest.params.num_paths == 10
