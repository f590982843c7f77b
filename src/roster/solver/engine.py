"""
Roster Engine
=============
Entry points tying the solver strategies, the optimizer and the validator
together.

    schedule, report = run(problem, config)
"""
import time
from typing import Optional, Tuple

from roster.models.constraints import SolverConfig, Strategy
from roster.models.problem import RosterProblem
from roster.models.schedule import Schedule
from roster.solver.cpsat import CpSatSolver
from roster.solver.greedy import GreedySolver
from roster.solver.optimizer import optimize
from roster.solver.validation import (
    ValidationReport,
    calculate_fairness,
    score_solution,
    validate_schedule,
)
from roster.utils.logging_setup import get_logger, log_function_call
from roster.utils.structured_logging import get_structured_logger

logger = get_logger("roster.solver.engine")
events = get_structured_logger("roster.solver.engine")


@log_function_call
def solve(problem: RosterProblem, config: Optional[SolverConfig] = None) -> Schedule:
    """
    Produce an (unfrozen) schedule with the configured strategy.

    Greedy runs go through the multi-seed optimizer when ``config.tries > 1``.
    """
    config = config or SolverConfig()
    events.info(
        "solve_started",
        period=problem.period.label,
        strategy=config.strategy.value,
        people=len(problem.people),
        workstations=len(problem.workstations),
        seed=config.seed,
        tries=config.tries,
    )
    start = time.time()

    if config.strategy == Strategy.CPSAT:
        schedule = CpSatSolver(problem, config).solve()
    elif config.tries > 1:
        schedule, _, _ = optimize(problem, config, tries=config.tries, seed=config.seed)
    else:
        schedule = GreedySolver(problem, config).solve()

    events.info(
        "solve_finished",
        status=schedule.status,
        assignments=len(schedule.assignments),
        shortfalls=len(schedule.shortfalls),
        seconds=round(time.time() - start, 3),
    )
    return schedule


def run(problem: RosterProblem, config: Optional[SolverConfig] = None) -> Tuple[Schedule, ValidationReport]:
    """
    Solve, validate and freeze.

    Returns:
        (schedule, report); the schedule is read-only afterwards
    """
    config = config or SolverConfig()
    schedule = solve(problem, config)

    report = validate_schedule(schedule, problem, config)
    fairness = calculate_fairness(schedule, problem)
    schedule.score = score_solution(report, fairness, config.weights)
    schedule.stats.update({
        "spread": fairness.spread,
        "std": round(fairness.std, 3),
        "repeats": fairness.repeats,
    })

    events.info(
        "validation_finished",
        ok=report.all_hard_constraints_satisfied,
        violations=len(report.violations),
        shortfalls=len(report.shortfalls),
        never_assigned=len(report.never_assigned),
        score=round(schedule.score, 2),
    )
    if not report.all_hard_constraints_satisfied:
        logger.error(f"Schedule breaks hard constraints: {report.violations_by_rule()}")

    schedule.freeze()
    return schedule, report
