"""
Validation and Scoring
======================
Re-check a finished schedule against every hard rule, straight from its raw
assignments, and compute the weighted score used to compare schedules.
"""
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import date
from statistics import pstdev
from typing import Dict, List, Optional, Set, Tuple

from roster.models.constraints import MandatoryOverflow, ScoreWeights, SolverConfig
from roster.models.problem import RosterProblem
from roster.models.schedule import Schedule, Shortfall
from roster.solver.calendar import week_key
from roster.solver.eligibility import EligibilityModel
from roster.solver.greedy import shortfall_cause
from roster.utils.logging_setup import get_logger, log_constraint

logger = get_logger("roster.solver.validation")


@dataclass
class ValidationViolation:
    """Single hard-rule violation with details."""
    date: Optional[date]
    rule: str  # "unavailable", "ineligible", "mandatory", "duplicate", "over_max", "unreported_shortfall", ...
    detail: str
    person: str = ""
    workstation: str = ""

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat() if self.date else None,
            "rule": self.rule,
            "detail": self.detail,
            "person": self.person,
            "workstation": self.workstation,
        }


@dataclass
class ValidationReport:
    """Outcome of :func:`validate_schedule`."""
    per_person_total_days: Dict[str, int] = field(default_factory=dict)
    violations: List[ValidationViolation] = field(default_factory=list)
    shortfalls: List[Shortfall] = field(default_factory=list)
    never_assigned: List[str] = field(default_factory=list)

    @property
    def all_hard_constraints_satisfied(self) -> bool:
        return not self.violations

    def add_violation(self, v: ValidationViolation):
        self.violations.append(v)

    def violations_by_rule(self) -> Dict[str, int]:
        return dict(Counter(v.rule for v in self.violations))

    @property
    def total_deficit(self) -> int:
        return sum(s.deficit for s in self.shortfalls)

    def as_dict(self) -> dict:
        return {
            "all_hard_constraints_satisfied": self.all_hard_constraints_satisfied,
            "per_person_total_days": dict(self.per_person_total_days),
            "violations": [v.to_dict() for v in self.violations],
            "shortfalls": [s.to_dict() for s in self.shortfalls],
            "never_assigned": list(self.never_assigned),
        }


@dataclass
class FairnessMetrics:
    """Workload balance among people who can be assigned at all."""
    spread: int = 0          # Max minus min total days
    std: float = 0.0         # Population std-dev of total days
    repeats: int = 0         # Same workstation again within an ISO week
    totals: Dict[str, int] = field(default_factory=dict)


def validate_schedule(
    schedule: Schedule,
    problem: RosterProblem,
    config: Optional[SolverConfig] = None,
) -> ValidationReport:
    """
    Validate a schedule against the problem's hard rules.

    Only reads the schedule, so running it twice gives the same report.

    Args:
        schedule: The schedule to check (frozen or not)
        problem: The problem it was solved for
        config: Solver settings; only ``mandatory_overflow`` is consulted

    Returns:
        ValidationReport; ``all_hard_constraints_satisfied`` is True when no
        violation was found. Recorded shortfalls are not violations.
    """
    config = config or SolverConfig()
    eligibility = EligibilityModel(problem.people, problem.workstations, problem.holidays)
    ws_map = problem.workstation_map()
    known_people = set(problem.person_names)
    working = problem.working_days()
    working_set = set(working)

    report = ValidationReport(
        per_person_total_days=schedule.person_totals(problem.person_names),
        never_assigned=eligibility.blanket_denied(),
    )

    by_day: Dict[date, Dict[str, List[str]]] = defaultdict(lambda: defaultdict(list))
    for a in schedule.assignments:
        by_day[a.date][a.workstation].append(a.person)

    # 1. References, calendar, availability, eligibility
    for a in schedule.assignments:
        if a.person not in known_people or a.workstation not in ws_map:
            report.add_violation(ValidationViolation(
                date=a.date, rule="unknown_reference", person=a.person, workstation=a.workstation,
                detail=f"{a.person} at {a.workstation}: not part of the problem",
            ))
            continue
        if a.date not in working_set:
            report.add_violation(ValidationViolation(
                date=a.date, rule="non_working_day", person=a.person, workstation=a.workstation,
                detail=f"{a.date} is not a working day of {problem.period.label}",
            ))
        if not eligibility.is_available(a.person, a.date):
            report.add_violation(ValidationViolation(
                date=a.date, rule="unavailable", person=a.person, workstation=a.workstation,
                detail=f"{a.person} is unavailable on {a.date}",
            ))
        if not eligibility.is_eligible(a.person, a.workstation):
            report.add_violation(ValidationViolation(
                date=a.date, rule="ineligible", person=a.person, workstation=a.workstation,
                detail=f"{a.person} is not eligible for {a.workstation}",
            ))

    # 2. One workstation per person per day
    for day in sorted(by_day):
        people = Counter(n for names in by_day[day].values() for n in names)
        for name, times in sorted(people.items()):
            if times > 1:
                report.add_violation(ValidationViolation(
                    date=day, rule="duplicate", person=name,
                    detail=f"{name} assigned {times} times on {day}",
                ))

    # 3. Staffing range and shortfalls
    recorded: Set[Tuple[date, str]] = {(s.date, s.workstation) for s in schedule.shortfalls}
    for day in working:
        for ws in problem.workstation_names:
            w = ws_map[ws]
            count = len(by_day[day][ws]) if day in by_day else 0
            if count > w.max_staff:
                report.add_violation(ValidationViolation(
                    date=day, rule="over_max", workstation=ws,
                    detail=f"{ws}: {count} assigned, maximum {w.max_staff}",
                ))
            if count < w.min_staff:
                eligible = [p.name for p in eligibility.eligible_candidates(day, ws)]
                assigned_today = {n for names in by_day[day].values() for n in names} if day in by_day else set()
                report.shortfalls.append(Shortfall(
                    date=day, workstation=ws, needed=w.min_staff, available=count,
                    cause=shortfall_cause(eligible, w.min_staff, assigned_today),
                ))
                if (day, ws) not in recorded:
                    report.add_violation(ValidationViolation(
                        date=day, rule="unreported_shortfall", workstation=ws,
                        detail=f"{ws}: {count} assigned, minimum {w.min_staff}, no shortfall recorded",
                    ))

    # 4. Mandatory workstations, whenever satisfiable
    for p in problem.people:
        m = p.mandatory_workstation
        if m is None:
            continue
        for day in working:
            if not eligibility.is_available(p, day):
                continue
            at = by_day[day] if day in by_day else {}
            seated = at.get(m, [])
            if p.name in seated:
                continue
            displaced_by = [n for n in seated if n in known_people and problem.person(n).mandatory_workstation != m]
            if len(seated) < ws_map[m].max_staff or displaced_by:
                report.add_violation(ValidationViolation(
                    date=day, rule="mandatory", person=p.name, workstation=m,
                    detail=f"{p.name} not placed at mandatory {m} ({len(seated)}/{ws_map[m].max_staff})",
                ))
            elif config.mandatory_overflow == MandatoryOverflow.IDLE:
                elsewhere = [ws for ws, names in at.items() if p.name in names]
                if elsewhere:
                    report.add_violation(ValidationViolation(
                        date=day, rule="mandatory_overflow", person=p.name, workstation=elsewhere[0],
                        detail=f"{p.name} overflowed from {m} but was assigned to {elsewhere[0]}",
                    ))

    for rule, count in sorted(report.violations_by_rule().items()):
        log_constraint(logger, rule, False, f"{count} violation(s)")
    log_constraint(logger, "hard_constraints", report.all_hard_constraints_satisfied,
                   f"{len(report.violations)} violations, {len(report.shortfalls)} shortfalls")

    logger.info(
        f"Validation: violations={len(report.violations)}, shortfalls={len(report.shortfalls)}, "
        f"never_assigned={len(report.never_assigned)}"
    )
    return report


def calculate_fairness(schedule: Schedule, problem: RosterProblem) -> FairnessMetrics:
    """
    Calculate workload balance.

    People with a blanket ``none`` eligibility are left out, since their
    zero total is structural.
    """
    denied = {p.name for p in problem.people if p.eligibility.is_blanket_deny}
    names = [n for n in problem.person_names if n not in denied]
    all_totals = schedule.person_totals(names)
    totals = {n: all_totals.get(n, 0) for n in names}

    weekly = Counter((week_key(a.date), a.person, a.workstation) for a in schedule.assignments)
    repeats = sum(c - 1 for c in weekly.values() if c > 1)

    values = list(totals.values())
    return FairnessMetrics(
        spread=(max(values) - min(values)) if values else 0,
        std=pstdev(values) if len(values) > 1 else 0.0,
        repeats=repeats,
        totals=totals,
    )


def score_solution(
    report: ValidationReport,
    fairness: FairnessMetrics,
    weights: Optional[ScoreWeights] = None,
) -> float:
    """
    Calculate weighted score (lower is better).
    """
    weights = weights or ScoreWeights()
    score = (
        weights.violation * len(report.violations) +
        weights.shortfall * report.total_deficit +
        weights.spread * fairness.spread +
        weights.repeats * fairness.repeats
    )

    logger.info(f"Score: {score:.2f} (V={len(report.violations)}, S={report.total_deficit}, "
                f"spread={fairness.spread}, repeats={fairness.repeats}, σ={fairness.std:.2f})")
    return float(score)
