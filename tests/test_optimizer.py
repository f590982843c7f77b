"""Tests for the multi-seed optimizer and the engine entry points."""
import pytest

from roster.models.constraints import SolverConfig, Strategy
from roster.models.schedule import FrozenScheduleError, Schedule
from roster.solver.engine import run, solve
from roster.solver.greedy import GreedySolver
from roster.solver.optimizer import _seeds, optimize
from roster.solver.validation import ValidationReport


class TestOptimize:
    """Tests for optimize()."""

    def test_single_try_matches_plain_greedy(self, sample_problem):
        """One unseeded try is the deterministic default."""
        best, best_seed, score = optimize(sample_problem, SolverConfig(), tries=1)
        plain = GreedySolver(sample_problem, SolverConfig()).solve()

        assert best_seed is None
        assert best.assignments == plain.assignments
        assert best.stats["tries"] == 1
        assert score == best.score

    def test_keeps_lowest_score(self, sample_problem, monkeypatch):
        from roster.solver import optimizer

        scores = iter([5.0, 2.0, 9.0])

        def fake_try(problem, config, seed):
            return Schedule(stats={}), next(scores)

        monkeypatch.setattr(optimizer, "_solve_single_try", fake_try)
        _, best_seed, best_score = optimize(sample_problem, SolverConfig(), tries=3, seed=10)

        assert best_seed == 11
        assert best_score == 2.0

    def test_never_worse_than_first_try(self, sample_problem):
        _, _, single = optimize(sample_problem, SolverConfig(), tries=1)
        _, _, multi = optimize(sample_problem, SolverConfig(), tries=4)
        assert multi <= single

    def test_seeds(self):
        assert _seeds(3, 7) == [7, 8, 9]
        assert _seeds(3, None) == [None, 1, 2]


class TestEngine:
    """Tests for solve() and run()."""

    def test_run_returns_frozen_schedule_and_report(self, sample_problem):
        schedule, report = run(sample_problem, SolverConfig())

        assert isinstance(report, ValidationReport)
        assert report.all_hard_constraints_satisfied
        assert schedule.frozen
        with pytest.raises(FrozenScheduleError):
            schedule.add(schedule.assignments[0])

    def test_run_scores_schedule(self, sample_problem):
        schedule, _ = run(sample_problem, SolverConfig())
        assert schedule.score >= 0
        assert {"spread", "std", "repeats"} <= set(schedule.stats)

    def test_solve_dispatches_to_cpsat(self, small_problem):
        schedule = solve(small_problem, SolverConfig(strategy=Strategy.CPSAT, time_limit_seconds=5, num_workers=1))
        assert schedule.strategy == "cpsat"

    def test_solve_with_tries_uses_optimizer(self, sample_problem):
        schedule = solve(sample_problem, SolverConfig(tries=2, seed=3))
        assert schedule.stats["tries"] == 2
        assert schedule.stats["best_seed"] in (3, 4)

    def test_default_config(self, small_problem):
        schedule, report = run(small_problem)
        assert report.per_person_total_days == {"Ann": 3, "Ben": 2}
