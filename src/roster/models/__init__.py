# roster/models - Data models for the roster engine
from .constraints import MandatoryOverflow, ScoreWeights, SolverConfig, Strategy
from .period import CalendarDay, Period
from .person import Eligibility, EligibilityKind, Person
from .problem import RosterProblem
from .schedule import Assignment, FrozenScheduleError, Schedule, Shortfall
from .workstation import Workstation

__all__ = [
    "Person", "Eligibility", "EligibilityKind",
    "Workstation",
    "Period", "CalendarDay",
    "RosterProblem",
    "Schedule", "Assignment", "Shortfall", "FrozenScheduleError",
    "SolverConfig", "Strategy", "MandatoryOverflow", "ScoreWeights",
]
