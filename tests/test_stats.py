"""Tests for person statistics and capacity analysis."""
from datetime import date

import pytest

from roster.models.constraints import SolverConfig
from roster.models.period import Period
from roster.models.person import Person
from roster.models.problem import RosterProblem
from roster.models.schedule import Assignment, Schedule
from roster.models.workstation import Workstation
from roster.solver.capacity import calculate_capacity, capacity_to_dict
from roster.solver.greedy import GreedySolver
from roster.solver.stats import calculate_person_stats, stats_to_dict_list


@pytest.fixture
def week_problem():
    return RosterProblem.build(
        Period(2024, 3, days=[4, 5, 6, 11]),
        [Person("Ann"), Person("Ben", eligibility="none"), Person("Cat")],
        [Workstation("Desk", 1, 1), Workstation("Phone", 0, 1)],
        vacations={"Cat": [date(2024, 3, 6)]},
    )


@pytest.fixture
def week_schedule(week_problem):
    s = Schedule(days=week_problem.working_days(), workstations=week_problem.workstation_names)
    for day, person, ws in [
        (date(2024, 3, 4), "Ann", "Desk"),
        (date(2024, 3, 4), "Cat", "Phone"),
        (date(2024, 3, 5), "Ann", "Desk"),
        (date(2024, 3, 6), "Ann", "Desk"),
        (date(2024, 3, 11), "Cat", "Desk"),
    ]:
        s.add(Assignment(day, person, ws))
    return s


class TestPersonStats:
    """Tests for calculate_person_stats."""

    def test_totals_and_breakdown(self, week_problem, week_schedule):
        stats = {s.name: s for s in calculate_person_stats(week_schedule, week_problem)}

        assert stats["Ann"].total == 3
        assert stats["Ann"].by_workstation == {"Desk": 3, "Phone": 0}
        assert stats["Ann"].distinct_workstations == 1
        assert stats["Ann"].max_weekly_repeat == 3
        assert stats["Ann"].busiest_week == 3

        assert stats["Cat"].total == 2
        assert stats["Cat"].distinct_workstations == 2
        assert stats["Cat"].available_days == 3

    def test_blanket_deny_flagged(self, week_problem, week_schedule):
        ben = calculate_person_stats(week_schedule, week_problem)[1]
        assert ben.name == "Ben"
        assert ben.total == 0
        assert ben.never_assignable

    def test_declaration_order(self, week_problem, week_schedule):
        assert [s.name for s in calculate_person_stats(week_schedule, week_problem)] == ["Ann", "Ben", "Cat"]

    def test_stats_to_dict_list(self, week_problem, week_schedule):
        rows = stats_to_dict_list(calculate_person_stats(week_schedule, week_problem))
        assert rows[0]["Name"] == "Ann"
        assert rows[0]["Desk"] == 3
        assert rows[0]["Total"] == 3


class TestCapacity:
    """Tests for calculate_capacity."""

    def test_capacity_numbers(self, week_problem, week_schedule):
        analysis = calculate_capacity(week_schedule, week_problem)

        # Ann 4 days + Cat 3 days; Ben is never assignable
        assert analysis.total_available_person_days == 7
        assert analysis.total_required_person_days == 4
        assert analysis.total_maximum_person_days == 8
        assert analysis.total_assigned_person_days == 5
        assert analysis.unfilled_person_days == 0
        assert analysis.capacity_balance == 3
        assert analysis.tight_days == []
        assert analysis.by_workstation["Desk"]["assigned"] == 4
        assert analysis.utilization_percent == pytest.approx(5 / 7 * 100)

    def test_tight_days(self):
        problem = RosterProblem.build(
            Period(2024, 3, days=[4, 5]),
            [Person("Ann"), Person("Ben")],
            [Workstation("Desk", 1, 1), Workstation("Phone", 1, 1)],
            vacations={"Ben": [date(2024, 3, 5)]},
        )
        schedule = GreedySolver(problem, SolverConfig()).solve()
        analysis = calculate_capacity(schedule, problem)

        assert analysis.tight_days == [date(2024, 3, 5)]
        assert analysis.unfilled_person_days == 1

    def test_capacity_to_dict(self, week_problem, week_schedule):
        d = capacity_to_dict(calculate_capacity(week_schedule, week_problem))
        assert d["tight_days"] == []
        assert d["utilization_percent"] == round(5 / 7 * 100, 1)
