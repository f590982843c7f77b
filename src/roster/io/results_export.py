"""
Results Export for Analysis
============================
Exports a solved roster and its validation report to JSON for scripts
and downstream tools.
"""
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

from roster.models.constraints import SolverConfig
from roster.models.problem import RosterProblem
from roster.models.schedule import Schedule
from roster.solver.capacity import calculate_capacity, capacity_to_dict
from roster.solver.stats import calculate_person_stats
from roster.solver.validation import ValidationReport, calculate_fairness
from roster.utils.logging_setup import get_logger

logger = get_logger("roster.io.results_export")


def build_results(
    schedule: Schedule,
    report: ValidationReport,
    problem: Optional[RosterProblem] = None,
    config: Optional[SolverConfig] = None,
    run_name: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Assemble the JSON-ready result object.

    Person statistics, fairness and capacity need ``problem``; without it
    only the schedule and the report are included.
    """
    result: Dict[str, Any] = {
        "meta": {
            "timestamp": datetime.now().isoformat(),
            "run_name": run_name,
        },
        "config": config.to_dict() if config else None,
        "solver": {
            "strategy": schedule.strategy,
            "status": schedule.status,
            "solve_time_seconds": schedule.solve_time_seconds,
            "score": schedule.score,
            "stats": schedule.stats,
        },
        "validation": report.as_dict(),
        "schedule": [
            {
                "date": day.isoformat(),
                "workstations": {ws: people for ws, people in rows},
                "idle": list(schedule.idle.get(day, [])),
            }
            for day, rows in schedule.by_date()
        ],
    }

    if problem is not None:
        fairness = calculate_fairness(schedule, problem)
        result["period"] = problem.period.to_dict()
        result["fairness"] = {
            "spread": fairness.spread,
            "std": fairness.std,
            "repeats": fairness.repeats,
        }
        result["person_stats"] = [
            {
                "name": ps.name,
                "total": ps.total,
                "available_days": ps.available_days,
                "by_workstation": ps.by_workstation,
                "max_weekly_repeat": ps.max_weekly_repeat,
                "never_assignable": ps.never_assignable,
            }
            for ps in calculate_person_stats(schedule, problem)
        ]
        result["capacity"] = capacity_to_dict(calculate_capacity(schedule, problem))

    return result


def export_results(
    schedule: Schedule,
    report: ValidationReport,
    path: Union[str, Path],
    problem: Optional[RosterProblem] = None,
    config: Optional[SolverConfig] = None,
    run_name: Optional[str] = None,
) -> Path:
    """
    Export complete results to a JSON file.

    Returns:
        Path to the exported JSON file
    """
    output_path = Path(path)
    if output_path.parent and not output_path.parent.exists():
        output_path.parent.mkdir(parents=True, exist_ok=True)

    result = build_results(schedule, report, problem, config, run_name or output_path.stem)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(result, f, indent=2, ensure_ascii=False, default=str)

    logger.info(f"Results exported to {output_path}")

    return output_path
