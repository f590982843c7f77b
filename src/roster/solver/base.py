"""
Abstract Base Solver
====================
Interface shared by the greedy and CP-SAT strategies, so the engine and
the optimizer can drive either one.
"""
from abc import ABC, abstractmethod
from enum import Enum

from roster.models.constraints import SolverConfig
from roster.models.problem import RosterProblem
from roster.models.schedule import Schedule


class SolverStatus(Enum):
    """Status of solver execution."""
    COMPLETE = "complete"    # Greedy: every minimum met
    SHORTFALL = "shortfall"  # Greedy: best effort, some minima unmet
    OPTIMAL = "optimal"
    FEASIBLE = "feasible"
    INFEASIBLE = "infeasible"
    UNKNOWN = "unknown"


class BaseSolver(ABC):
    """Base class for roster strategies."""

    def __init__(self, problem: RosterProblem, config: SolverConfig):
        self.problem = problem
        self.config = config
        self._status = SolverStatus.UNKNOWN
        self._solve_time = 0.0

    @abstractmethod
    def solve(self) -> Schedule:
        """Run the strategy and return the populated (unfrozen) schedule."""

    def get_status(self) -> SolverStatus:
        return self._status

    def get_solve_time(self) -> float:
        return self._solve_time
