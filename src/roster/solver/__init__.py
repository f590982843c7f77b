# roster/solver - Greedy and CP-SAT roster solvers
from .base import BaseSolver, SolverStatus
from .cpsat import CpSatSolver
from .demand import DemandModel, NeedStatus, remaining_need
from .eligibility import EligibilityModel
from .engine import run, solve
from .fairness import FairnessCounters, FairnessOptimizer
from .greedy import DayOutcome, DayState, GreedySolver, solve_day
from .optimizer import optimize
from .validation import (
    FairnessMetrics,
    ValidationReport,
    ValidationViolation,
    calculate_fairness,
    score_solution,
    validate_schedule,
)

__all__ = [
    "run",
    "solve",
    "optimize",
    "BaseSolver",
    "SolverStatus",
    "GreedySolver",
    "CpSatSolver",
    "solve_day",
    "DayOutcome",
    "DayState",
    "EligibilityModel",
    "DemandModel",
    "NeedStatus",
    "remaining_need",
    "FairnessCounters",
    "FairnessOptimizer",
    "validate_schedule",
    "calculate_fairness",
    "score_solution",
    "ValidationReport",
    "ValidationViolation",
    "FairnessMetrics",
]
