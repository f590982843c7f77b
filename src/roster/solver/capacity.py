"""
Capacity Analysis
=================
Compare team availability with workstation demand to tell whether a period
is short-staffed before looking at individual shortfalls.
"""
from dataclasses import dataclass
from datetime import date
from typing import Dict, List

from roster.models.problem import RosterProblem
from roster.models.schedule import Schedule
from roster.solver.eligibility import EligibilityModel


@dataclass
class CapacityAnalysis:
    """Results of capacity analysis."""

    # Team capacity
    total_available_person_days: int   # Present, assignable people summed over working days

    # Requirements
    total_required_person_days: int    # Sum of minima over working days
    total_maximum_person_days: int     # Sum of maxima over working days
    total_assigned_person_days: int
    unfilled_person_days: int          # Minima left unmet

    # Summary
    capacity_balance: int              # Available - required (positive = excess)
    tight_days: List[date]             # Days whose minima exceed the available pool

    # Per-workstation breakdown
    by_workstation: Dict[str, Dict]    # {"A": {"required": x, "maximum": y, "assigned": z, "gap": g}}

    utilization_percent: float         # Assigned / available


def calculate_capacity(schedule: Schedule, problem: RosterProblem) -> CapacityAnalysis:
    """
    Analyze team capacity vs. requirements.

    Args:
        schedule: Solved schedule
        problem: The problem it was solved for

    Returns:
        CapacityAnalysis with all metrics
    """
    eligibility = EligibilityModel(problem.people, problem.workstations, problem.holidays)
    days = problem.working_days()
    total_min = sum(w.min_staff for w in problem.workstations)

    # === Team capacity ===
    total_available = 0
    tight_days = []
    for d in days:
        present = sum(1 for p in eligibility.candidates(d) if not p.eligibility.is_blanket_deny)
        total_available += present
        if present < total_min:
            tight_days.append(d)

    # === Requirements and assignments ===
    by_ws: Dict[str, Dict] = {}
    for w in problem.workstations:
        by_ws[w.name] = {
            "required": w.min_staff * len(days),
            "maximum": w.max_staff * len(days),
            "assigned": 0,
            "gap": 0,
        }
    for a in schedule.assignments:
        if a.workstation in by_ws:
            by_ws[a.workstation]["assigned"] += 1

    unfilled = 0
    for w in problem.workstations:
        gap = sum(max(0, w.min_staff - schedule.count(d, w.name)) for d in days)
        by_ws[w.name]["gap"] = gap
        unfilled += gap

    total_required = total_min * len(days)
    total_assigned = len(schedule.assignments)

    return CapacityAnalysis(
        total_available_person_days=total_available,
        total_required_person_days=total_required,
        total_maximum_person_days=sum(w.max_staff for w in problem.workstations) * len(days),
        total_assigned_person_days=total_assigned,
        unfilled_person_days=unfilled,
        capacity_balance=total_available - total_required,
        tight_days=tight_days,
        by_workstation=by_ws,
        utilization_percent=(total_assigned / total_available * 100) if total_available > 0 else 0.0,
    )


def capacity_to_dict(analysis: CapacityAnalysis) -> Dict:
    """Convert analysis to dict for export."""
    return {
        "total_available_person_days": analysis.total_available_person_days,
        "total_required_person_days": analysis.total_required_person_days,
        "total_maximum_person_days": analysis.total_maximum_person_days,
        "total_assigned_person_days": analysis.total_assigned_person_days,
        "unfilled_person_days": analysis.unfilled_person_days,
        "capacity_balance": analysis.capacity_balance,
        "tight_days": [d.isoformat() for d in analysis.tight_days],
        "by_workstation": analysis.by_workstation,
        "utilization_percent": round(analysis.utilization_percent, 1),
    }
