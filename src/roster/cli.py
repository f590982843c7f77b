from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict

from roster.errors import ConfigError
from roster.io.config_loader import load_roster
from roster.io.csv_loader import load_people
from roster.io.excel_export import export_to_excel
from roster.io.results_export import build_results, export_results
from roster.models.constraints import MandatoryOverflow, SolverConfig, Strategy
from roster.models.problem import RosterProblem
from roster.models.validated import validate_solver_config
from roster.solver.engine import run
from roster.utils.logging_setup import TRACE, setup_logging
from roster.utils.structured_logging import bind_context, configure_structlog

VERBOSITY = {0: "WARNING", 1: "INFO", 2: "DEBUG"}


def _apply_overrides(config: SolverConfig, args: argparse.Namespace) -> SolverConfig:
    """Command-line flags win over the document's solver section."""
    overrides: Dict[str, Any] = {}
    if args.strategy:
        overrides["strategy"] = Strategy(args.strategy)
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.tries is not None:
        overrides["tries"] = max(1, args.tries)
    if args.no_fill:
        overrides["fill_to_max"] = False
    if args.mandatory_overflow:
        overrides["mandatory_overflow"] = MandatoryOverflow(args.mandatory_overflow)
    if args.time_limit is not None:
        overrides["time_limit_seconds"] = args.time_limit
    for key, value in overrides.items():
        setattr(config, key, value)
    return config


def _render(schedule, report) -> str:
    lines = []
    for day, rows in schedule.by_date():
        cells = [f"{ws}: {', '.join(people) or '-'}" for ws, people in rows]
        lines.append(f"{day.isoformat()} {day.strftime('%a')}  " + " | ".join(cells))
    lines.append("")
    lines.append("Totals:")
    for name, total in report.per_person_total_days.items():
        lines.append(f" - {name}: {total}")
    if report.never_assigned:
        lines.append(f"Never assigned: {', '.join(report.never_assigned)}")
    if report.shortfalls:
        lines.append(f"Shortfalls ({len(report.shortfalls)}):")
        for s in report.shortfalls:
            lines.append(f" - {s.date.isoformat()} {s.workstation}: {s.available}/{s.needed} ({s.cause})")
    if report.violations:
        lines.append(f"Violations ({len(report.violations)}):")
        for v in report.violations:
            lines.append(f" - {v.date} {v.rule}: {v.detail}")
    lines.append(f"Status: {schedule.status}, score: {schedule.score:.2f}")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="roster-solve", description="Monthly workstation roster solver")
    p.add_argument("--config", required=True, help="JSON roster document")
    p.add_argument("--people", help="CSV of people replacing the document's people")
    p.add_argument("--strategy", choices=[s.value for s in Strategy])
    p.add_argument("--seed", type=int, help="Seeded tie-break (default: alphabetical)")
    p.add_argument("--tries", type=int, help="Greedy attempts with consecutive seeds, best kept")
    p.add_argument("--no-fill", action="store_true", help="Stop at minimum staffing")
    p.add_argument("--mandatory-overflow", choices=[m.value for m in MandatoryOverflow])
    p.add_argument("--time-limit", type=int, help="CP-SAT time limit in seconds")
    p.add_argument("--json", dest="json_out", action="store_true", help="JSON output on stdout")
    p.add_argument("--export", help="Write full JSON results to this path")
    p.add_argument("--excel", help="Write an Excel workbook to this path")
    p.add_argument("--log-file", help="Also log to this file (rotating)")
    p.add_argument("-v", "--verbose", action="count", default=0)
    args = p.parse_args(argv)

    level = VERBOSITY.get(args.verbose, "TRACE")
    setup_logging(level="TRACE" if args.log_file else level, log_file=args.log_file, console_level=level)
    configure_structlog(
        json_output=args.json_out,
        level=TRACE if args.verbose >= 3 else getattr(logging, level),
    )

    try:
        problem, config = load_roster(args.config)
        if args.people:
            people = load_people(args.people, period=problem.period)
            problem = RosterProblem.build(
                problem.period, people, problem.workstations, holidays=problem.holidays,
            )
        config = validate_solver_config(_apply_overrides(config, args))
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    bind_context(period=problem.period.label, strategy=config.strategy.value)
    schedule, report = run(problem, config)

    if args.export:
        export_results(schedule, report, args.export, problem=problem, config=config)
    if args.excel:
        export_to_excel(schedule, report, args.excel, problem=problem)

    if args.json_out:
        print(json.dumps(build_results(schedule, report, problem, config), ensure_ascii=False, indent=2, default=str))
    else:
        print(_render(schedule, report))

    return 0 if report.all_hard_constraints_satisfied else 1


if __name__ == "__main__":
    raise SystemExit(main())
