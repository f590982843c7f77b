"""Tests for I/O modules."""
import io
import json
from datetime import date

import pandas as pd
import pytest
from openpyxl import load_workbook

from roster.errors import ConfigError
from roster.io.config_loader import load_roster, load_roster_dict
from roster.io.csv_loader import load_people, people_to_dataframe, save_people
from roster.io.excel_export import export_to_csv, export_to_excel
from roster.io.results_export import build_results, export_results
from roster.models.constraints import SolverConfig, Strategy
from roster.models.period import Period
from roster.models.person import EligibilityKind, Person
from roster.models.validated import validate_solver_config
from roster.solver.engine import run


class TestConfigLoader:
    """Tests for JSON roster documents."""

    def test_load_roster_dict(self, roster_document):
        problem, config = load_roster_dict(roster_document)

        assert problem.period.label == "2024-03"
        assert problem.workstation_names == ["Desk", "Phone"]
        assert problem.workstation("Phone").max_staff == 1
        assert date(2024, 3, 8) in problem.holidays
        assert len(problem.working_days()) == 9
        assert config.strategy == Strategy.GREEDY

    def test_vacations_merged(self, roster_document):
        problem, _ = load_roster_dict(roster_document)

        assert date(2024, 3, 12) in problem.person("Ann").unavailable_dates
        assert date(2024, 3, 5) in problem.person("Ben").unavailable_dates

    def test_eligibility_forms(self, roster_document):
        problem, _ = load_roster_dict(roster_document)

        assert problem.person("Ben").eligibility.kind == EligibilityKind.ALLOW_LIST
        assert problem.person("Cat").eligibility.kind == EligibilityKind.DENY_LIST
        assert problem.person("Dan").eligibility.is_blanket_deny

    def test_load_roster_file(self, roster_document, tmp_path):
        path = tmp_path / "roster.json"
        path.write_text(json.dumps(roster_document))

        problem, _ = load_roster(path)
        assert len(problem.people) == 4

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_roster(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_roster(path)

    def test_min_above_max_rejected(self, roster_document):
        roster_document["workstations"][0] = {"name": "Desk", "min_staff": 3, "max_staff": 1}
        with pytest.raises(ConfigError):
            load_roster_dict(roster_document)

    def test_unknown_field_rejected(self, roster_document):
        roster_document["people"][0]["shoe_size"] = 42
        with pytest.raises(ConfigError):
            load_roster_dict(roster_document)

    def test_bad_month_rejected(self, roster_document):
        roster_document["period"]["month"] = 13
        with pytest.raises(ConfigError):
            load_roster_dict(roster_document)

    def test_unknown_mandatory_rejected(self, roster_document):
        roster_document["people"][0]["mandatory_workstation"] = "Kitchen"
        with pytest.raises(ConfigError, match="unknown mandatory"):
            load_roster_dict(roster_document)

    def test_vacation_for_unknown_person(self, roster_document):
        roster_document["vacations"]["Zoe"] = [4]
        with pytest.raises(ConfigError, match="unknown people"):
            load_roster_dict(roster_document)

    def test_solver_section_ranges(self, roster_document):
        roster_document["solver"] = {"tries": 0}
        with pytest.raises(ConfigError):
            load_roster_dict(roster_document)

    def test_period_day_outside_month(self, roster_document):
        roster_document["period"] = {"year": 2024, "month": 2, "days": [30]}
        roster_document["holidays"] = []
        roster_document["vacations"] = {}
        roster_document["people"][1].pop("vacations")
        with pytest.raises(ConfigError, match="outside 2024-02"):
            load_roster_dict(roster_document)

    def test_validate_solver_config(self):
        assert validate_solver_config(SolverConfig(tries=3)).tries == 3
        with pytest.raises(ConfigError, match="Invalid solver settings"):
            validate_solver_config(SolverConfig(time_limit_seconds=0))

    def test_not_an_object(self):
        with pytest.raises(ConfigError):
            load_roster_dict([1, 2, 3])


class TestCsvLoader:
    """Tests for people CSV loading."""

    def test_load_from_dataframe(self):
        df = pd.DataFrame([
            {"name": "Ann", "eligibility": "", "mandatory": "", "vacations": ""},
            {"name": "Ben", "eligibility": "allow:Desk|Phone", "mandatory": "Desk", "vacations": "2024-03-04;2024-03-05"},
            {"name": "", "eligibility": "none", "mandatory": "", "vacations": ""},
        ])
        people = load_people(df)

        assert [p.name for p in people] == ["Ann", "Ben"]
        assert people[0].eligibility.kind == EligibilityKind.ALLOW_ALL
        assert people[1].eligibility.workstations == frozenset({"Desk", "Phone"})
        assert people[1].mandatory_workstation == "Desk"
        assert people[1].unavailable_dates == {date(2024, 3, 4), date(2024, 3, 5)}
        assert [p.id for p in people] == [0, 1]

    def test_day_numbers_need_period(self):
        df = pd.DataFrame([{"name": "Ann", "vacations": "4;5"}])

        assert load_people(df, period=Period(2024, 3))[0].unavailable_dates == {date(2024, 3, 4), date(2024, 3, 5)}
        with pytest.raises(ConfigError):
            load_people(df)

    def test_missing_name_column(self):
        with pytest.raises(ConfigError, match="name"):
            load_people(pd.DataFrame([{"who": "Ann"}]))

    def test_save_and_reload(self, tmp_path):
        people = [
            Person("Ann", eligibility="deny:Phone"),
            Person("Ben", eligibility="none", unavailable_dates={date(2024, 3, 4)}),
            Person("Cat", mandatory_workstation="Desk"),
        ]
        path = tmp_path / "people.csv"
        save_people(people, path)
        reloaded = load_people(path)

        assert [p.name for p in reloaded] == ["Ann", "Ben", "Cat"]
        assert reloaded[0].eligibility == people[0].eligibility
        assert reloaded[1].eligibility.is_blanket_deny
        assert reloaded[1].unavailable_dates == {date(2024, 3, 4)}
        assert reloaded[2].mandatory_workstation == "Desk"

    def test_save_empty(self, tmp_path):
        path = tmp_path / "empty.csv"
        save_people([], path)
        assert list(pd.read_csv(path).columns) == ["name", "eligibility", "mandatory", "vacations"]

    def test_people_to_dataframe(self):
        df = people_to_dataframe([Person("Ann", eligibility="allow:A|B")])
        assert df.iloc[0]["eligibility"] == "allow:A|B"


class TestExports:
    """Tests for JSON and Excel exports."""

    @pytest.fixture
    def solved(self, sample_problem, default_config):
        schedule, report = run(sample_problem, default_config)
        return sample_problem, default_config, schedule, report

    def test_build_results(self, solved):
        problem, config, schedule, report = solved
        result = build_results(schedule, report, problem, config)

        assert result["solver"]["strategy"] == "greedy"
        assert result["validation"]["all_hard_constraints_satisfied"] is True
        assert len(result["schedule"]) == len(problem.working_days())
        assert result["schedule"][0]["workstations"]["Lab"] == ["Diana"]
        assert {ps["name"] for ps in result["person_stats"]} == set(problem.person_names)
        assert "capacity" in result

    def test_build_results_without_problem(self, solved):
        _, _, schedule, report = solved
        result = build_results(schedule, report)
        assert "person_stats" not in result
        assert result["config"] is None

    def test_export_results(self, solved, tmp_path):
        problem, config, schedule, report = solved
        path = export_results(schedule, report, tmp_path / "out" / "run.json", problem=problem, config=config)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["meta"]["run_name"] == "run"
        assert data["config"]["strategy"] == "greedy"
        assert data["validation"]["never_assigned"] == ["Eve"]

    def test_export_to_excel(self, solved):
        problem, _, schedule, report = solved
        buffer = io.BytesIO()
        export_to_excel(schedule, report, buffer, problem=problem)

        buffer.seek(0)
        wb = load_workbook(buffer)
        assert wb.sheetnames == ["Planning", "Totals", "Issues"]
        plan = wb["Planning"]
        assert [c.value for c in plan[1]] == ["Date", "Day", "Reception", "Lab", "Triage", "Idle"]
        assert plan.cell(row=2, column=1).value == "2024-03-01"
        assert plan.cell(row=2, column=4).value == "Diana"

    def test_export_to_excel_file(self, solved, tmp_path):
        _, _, schedule, report = solved
        path = tmp_path / "roster.xlsx"
        export_to_excel(schedule, report, path)
        assert path.exists()

    def test_export_to_csv(self, solved):
        _, _, schedule, _ = solved
        buffer = io.StringIO()
        export_to_csv(schedule, buffer)
        assert buffer.getvalue().splitlines()[0] == "date,person,workstation"
