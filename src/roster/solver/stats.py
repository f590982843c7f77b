"""
Centralized Person Statistics
==============================
Single source of truth for per-person statistics.
Used by the CLI summary, Excel and JSON exports.
"""
from dataclasses import dataclass, field
from typing import Dict, List

from roster.models.problem import RosterProblem
from roster.models.schedule import Schedule
from roster.solver.fairness import FairnessCounters, totals_by_week
from roster.utils.logging_setup import get_logger

logger = get_logger("roster.solver.stats")


@dataclass
class PersonStats:
    """Statistics for a single person."""
    name: str
    total: int                  # Worked days
    available_days: int         # Working days the person was present
    by_workstation: Dict[str, int] = field(default_factory=dict)
    distinct_workstations: int = 0
    max_weekly_repeat: int = 0  # Most days at one workstation within one ISO week
    busiest_week: int = 0       # Most days worked within one ISO week
    never_assignable: bool = False


def calculate_person_stats(schedule: Schedule, problem: RosterProblem) -> List[PersonStats]:
    """
    Calculate statistics for all people, in declaration order.

    Args:
        schedule: The solved schedule
        problem: The problem it was solved for

    Returns:
        List of PersonStats, one per person
    """
    counters = FairnessCounters.for_people(problem.person_names)
    for a in schedule.assignments:
        counters.record(a.person, a.workstation, a.date)
    weekly_totals = totals_by_week(counters)
    days = problem.working_days()

    stats = []
    for p in problem.people:
        name = p.name
        by_ws = {ws: 0 for ws in problem.workstation_names}
        max_repeat = 0
        for people in counters.weekly.values():
            for ws, count in people.get(name, {}).items():
                by_ws[ws] = by_ws.get(ws, 0) + count
                max_repeat = max(max_repeat, count)

        stats.append(PersonStats(
            name=name,
            total=counters.total(name),
            available_days=sum(1 for d in days if d not in p.unavailable_dates),
            by_workstation=by_ws,
            distinct_workstations=sum(1 for c in by_ws.values() if c),
            max_weekly_repeat=max_repeat,
            busiest_week=max((w.get(name, 0) for w in weekly_totals.values()), default=0),
            never_assignable=p.eligibility.is_blanket_deny,
        ))

    logger.debug(f"Calculated stats for {len(stats)} people, {len(days)} days")
    return stats


def stats_to_dict_list(stats: List[PersonStats]) -> List[Dict]:
    """Convert stats to list of dicts for DataFrame or export."""
    rows = []
    for s in stats:
        row = {"Name": s.name, "Total": s.total, "Available": s.available_days}
        row.update(s.by_workstation)
        row.update({
            "Distinct": s.distinct_workstations,
            "Max weekly repeat": s.max_weekly_repeat,
            "Busiest week": s.busiest_week,
        })
        rows.append(row)
    return rows
