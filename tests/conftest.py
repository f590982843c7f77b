"""Pytest configuration and fixtures."""
import sys
from datetime import date
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from roster.models.constraints import SolverConfig
from roster.models.period import Period
from roster.models.person import Eligibility, Person
from roster.models.problem import RosterProblem
from roster.models.workstation import Workstation


@pytest.fixture
def march_2024():
    """March 2024: 31 listed days, the 1st is a Friday."""
    return Period(year=2024, month=3)


@pytest.fixture
def sample_workstations():
    return [
        Workstation(name="Reception", min_staff=1, max_staff=2),
        Workstation(name="Lab", min_staff=1, max_staff=1),
        Workstation(name="Triage", min_staff=1, max_staff=2),
    ]


@pytest.fixture
def sample_people():
    """Create a sample team for testing."""
    return [
        Person(name="Alice"),
        Person(name="Bob", eligibility=Eligibility.allow_only(["Lab", "Triage"])),
        Person(name="Charlie", eligibility=Eligibility.deny_only(["Lab"])),
        Person(name="Diana", mandatory_workstation="Lab"),
        Person(name="Eve", eligibility=Eligibility.deny_all()),
        Person(name="Frank"),
    ]


@pytest.fixture
def sample_problem(march_2024, sample_people, sample_workstations):
    """A checked problem with one holiday and a few vacations."""
    return RosterProblem.build(
        march_2024,
        sample_people,
        sample_workstations,
        holidays=[date(2024, 3, 8)],
        vacations={
            "Alice": [date(2024, 3, 11), date(2024, 3, 12)],
            "Diana": [date(2024, 3, 20)],
        },
    )


@pytest.fixture
def small_problem():
    """Two people, one desk, one working week."""
    period = Period(year=2024, month=3, days=[4, 5, 6, 7, 8])
    people = [Person(name="Ann"), Person(name="Ben")]
    return RosterProblem.build(period, people, [Workstation(name="Desk", min_staff=1, max_staff=1)])


@pytest.fixture
def default_config():
    """Default solver configuration."""
    return SolverConfig()


@pytest.fixture
def roster_document():
    """A raw JSON roster document."""
    return {
        "period": {"year": 2024, "month": 3, "days": ["4-8", "11-15"]},
        "holidays": [8],
        "workstations": [
            {"name": "Desk", "min_staff": 1, "max_staff": 2},
            {"name": "Phone", "min_staff": 1},
        ],
        "people": [
            {"name": "Ann", "eligibility": "all"},
            {"name": "Ben", "eligibility": {"allow": ["Phone"]}, "vacations": [5]},
            {"name": "Cat", "eligibility": "deny:Phone", "mandatory_workstation": "Desk"},
            {"name": "Dan", "eligibility": "none"},
        ],
        "vacations": {"Ann": ["2024-03-12"]},
        "solver": {"strategy": "greedy", "fill_to_max": True},
    }
