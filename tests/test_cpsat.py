"""Tests for the CP-SAT strategy."""
from datetime import date

import pytest

from roster.models.constraints import MandatoryOverflow, SolverConfig, Strategy
from roster.models.period import Period
from roster.models.person import Person
from roster.models.problem import RosterProblem
from roster.models.workstation import Workstation
from roster.solver.base import SolverStatus
from roster.solver.cpsat import CpSatSolver
from roster.solver.validation import validate_schedule


@pytest.fixture
def cpsat_config():
    return SolverConfig(strategy=Strategy.CPSAT, time_limit_seconds=5, num_workers=1, seed=1)


class TestCpSatSolver:
    """Tests for CpSatSolver on the sample problem."""

    @pytest.fixture
    def solved(self, sample_problem, cpsat_config):
        solver = CpSatSolver(sample_problem, cpsat_config)
        return solver, solver.solve()

    def test_finds_solution(self, solved):
        solver, schedule = solved
        assert solver.get_status() in (SolverStatus.OPTIMAL, SolverStatus.FEASIBLE)
        assert schedule.status in ("optimal", "feasible")
        assert schedule.strategy == "cpsat"
        assert len(schedule.assignments) > 0

    def test_hard_constraints(self, solved, sample_problem, cpsat_config):
        _, schedule = solved
        report = validate_schedule(schedule, sample_problem, cpsat_config)
        assert report.all_hard_constraints_satisfied, report.violations
        assert report.shortfalls == []

    def test_blanket_deny_never_assigned(self, solved):
        _, schedule = solved
        assert "Eve" not in {a.person for a in schedule.assignments}

    def test_mandatory(self, solved, sample_problem):
        _, schedule = solved
        for day in sample_problem.working_days():
            if day != date(2024, 3, 20):
                assert schedule.workstation_of("Diana", day) == "Lab"

    def test_idle_recorded(self, solved):
        _, schedule = solved
        assert "Eve" in schedule.idle[date(2024, 3, 1)]


class TestCpSatScenarios:

    def test_balanced_totals(self, small_problem, cpsat_config):
        schedule = CpSatSolver(small_problem, cpsat_config).solve()
        totals = schedule.person_totals(small_problem.person_names)

        assert sum(totals.values()) == 5
        assert abs(totals["Ann"] - totals["Ben"]) <= 1

    def test_shortfall_recorded(self, cpsat_config):
        problem = RosterProblem.build(
            Period(2024, 3, days=[4, 5]),
            [Person("Ann", eligibility="allow:Desk")],
            [Workstation("Desk"), Workstation("Xray")],
        )
        schedule = CpSatSolver(problem, cpsat_config).solve()

        assert [(s.date, s.workstation) for s in schedule.shortfalls] == [
            (date(2024, 3, 4), "Xray"),
            (date(2024, 3, 5), "Xray"),
        ]
        assert all(s.cause == "insufficient eligible pool" for s in schedule.shortfalls)
        assert validate_schedule(schedule, problem, cpsat_config).all_hard_constraints_satisfied

    def test_mandatory_overflow_idle(self, cpsat_config):
        problem = RosterProblem.build(
            Period(2024, 3, days=[4]),
            [Person("Pia", mandatory_workstation="Lab"), Person("Quinn", mandatory_workstation="Lab")],
            [Workstation("Lab"), Workstation("Desk", 0, 1)],
        )
        cpsat_config.mandatory_overflow = MandatoryOverflow.IDLE
        schedule = CpSatSolver(problem, cpsat_config).solve()

        assert schedule.count(date(2024, 3, 4), "Lab") == 1
        assert schedule.count(date(2024, 3, 4), "Desk") == 0
        assert len(schedule.idle[date(2024, 3, 4)]) == 1

    def test_mandatory_seat_not_taken_by_others(self, cpsat_config):
        """A non-mandatory person never takes the seat of a mandatory one."""
        problem = RosterProblem.build(
            Period(2024, 3, days=[4, 5, 6]),
            [Person("Amy"), Person("Zed", mandatory_workstation="Lab")],
            [Workstation("Lab"), Workstation("Desk", 0, 1)],
        )
        schedule = CpSatSolver(problem, cpsat_config).solve()

        for day in problem.working_days():
            assert schedule.workstation_of("Zed", day) == "Lab"
