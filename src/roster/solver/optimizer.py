"""
Multi-Seed Optimizer
====================
Runs the greedy solver with several tie-break seeds and keeps the best.
"""
from dataclasses import replace
from typing import List, Optional, Tuple

from roster.models.constraints import SolverConfig
from roster.models.problem import RosterProblem
from roster.models.schedule import Schedule
from roster.solver.greedy import GreedySolver
from roster.solver.validation import calculate_fairness, score_solution, validate_schedule
from roster.utils.logging_setup import SolverLogger, get_logger

logger = get_logger("roster.solver.optimizer")
slog = SolverLogger("roster.solver.optimizer")


def _seeds(tries: int, seed: Optional[int]) -> List[Optional[int]]:
    """Consecutive seeds from ``seed``; without one the first try keeps the alphabetical tie-break."""
    if seed is not None:
        return [seed + t for t in range(tries)]
    return [None] + list(range(1, tries))


def _solve_single_try(problem: RosterProblem, config: SolverConfig, seed: Optional[int]) -> Tuple[Schedule, float]:
    schedule = GreedySolver(problem, replace(config, seed=seed)).solve()
    report = validate_schedule(schedule, problem, config)
    fairness = calculate_fairness(schedule, problem)
    score = score_solution(report, fairness, config.weights)
    schedule.score = score
    return schedule, score


def optimize(
    problem: RosterProblem,
    config: SolverConfig,
    tries: int = 1,
    seed: Optional[int] = None,
) -> Tuple[Schedule, Optional[int], float]:
    """
    Run multiple greedy attempts and keep the best.

    Args:
        problem: The roster problem
        config: Solver configuration
        tries: Number of attempts with sequential seeds
        seed: Base seed; None starts from the deterministic tie-break

    Returns:
        (best_schedule, best_seed, best_score); ties keep the earliest try
    """
    tries = max(1, tries)
    slog.phase(f"Multi-Seed Optimization ({tries} tries)")

    best_schedule: Optional[Schedule] = None
    best_seed: Optional[int] = None
    best_score = float("inf")

    for i, cur_seed in enumerate(_seeds(tries, seed), start=1):
        schedule, score = _solve_single_try(problem, config, cur_seed)
        slog.step(f"Try {i}/{tries} (seed={cur_seed}) finished. Score: {score:.2f}")
        if score < best_score:
            if best_schedule is not None:
                slog.step(f"New best: seed={cur_seed}, score={score:.2f}")
            best_schedule, best_seed, best_score = schedule, cur_seed, score

    slog.phase(f"Optimization complete. Best: {best_score:.2f}")
    best_schedule.stats["best_seed"] = best_seed
    best_schedule.stats["tries"] = tries
    return best_schedule, best_seed, best_score
