"""
Greedy Day-by-Day Solver
========================
Constructs the roster one working day at a time, in calendar order.

Per day:
    1. Candidate pool = available people
    2. Mandatory placements
    3. Fill minima, most constrained workstation first
    4. Optional fill up to maximum (if enabled and it cannot starve a minimum)
    5. DAY_COMPLETE, or DAY_SHORTFALL when a minimum stayed unmet

Days never reopen; the only state carried between days is the
FairnessCounters object, passed in and returned explicitly.
"""
import time
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Collection, Dict, List, Optional

from roster.errors import InfeasibleDayError
from roster.models.constraints import MandatoryOverflow, SolverConfig
from roster.models.problem import RosterProblem
from roster.models.schedule import Assignment, Schedule, Shortfall
from roster.solver.base import BaseSolver, SolverStatus
from roster.solver.calendar import week_key
from roster.solver.demand import DemandModel, NeedStatus
from roster.solver.eligibility import EligibilityModel
from roster.solver.fairness import FairnessCounters, FairnessOptimizer
from roster.utils.logging_setup import SolverLogger, get_logger

logger = get_logger("roster.solver.greedy")
slog = SolverLogger("roster.solver.greedy")

CAUSE_POOL = "insufficient eligible pool"
CAUSE_ELSEWHERE = "eligible staff assigned elsewhere"
CAUSE_IDLE = "eligible staff left idle"


def shortfall_cause(eligible: List[str], minimum: int, working: Collection[str]) -> str:
    """
    Why a minimum stayed unmet.

    Args:
        eligible: Available people eligible for the workstation that day
        minimum: The workstation's min_staff
        working: Everyone assigned to some workstation that day
    """
    if len(eligible) < minimum:
        return CAUSE_POOL
    if any(name not in working for name in eligible):
        return CAUSE_IDLE
    return CAUSE_ELSEWHERE


class DayState(str, Enum):
    """Construction phases of one day."""
    PENDING = "PENDING"
    MANDATORY_PLACED = "MANDATORY_PLACED"
    MINIMA_FILLED = "MINIMA_FILLED"
    OPTIONAL_FILLED = "OPTIONAL_FILLED"
    DAY_COMPLETE = "DAY_COMPLETE"
    DAY_SHORTFALL = "DAY_SHORTFALL"


@dataclass
class DayOutcome:
    """Result of constructing one day."""
    day: date
    placements: Dict[str, List[str]]  # {workstation: [person, ...]} in placement order
    shortfalls: List[Shortfall]
    idle: List[str]
    counters: FairnessCounters
    states: List[DayState] = field(default_factory=lambda: [DayState.PENDING])

    @property
    def state(self) -> DayState:
        return self.states[-1]

    @property
    def assignments(self) -> List[Assignment]:
        return [
            Assignment(date=self.day, person=name, workstation=ws)
            for ws, names in self.placements.items()
            for name in names
        ]


class _DayBuilder:
    """Mutable working state for a single day."""

    def __init__(self, day, eligibility, demand, fairness, counters, config):
        self.day = day
        self.week = week_key(day)
        self.eligibility: EligibilityModel = eligibility
        self.demand: DemandModel = demand
        self.fairness: FairnessOptimizer = fairness
        self.counters: FairnessCounters = counters
        self.config: SolverConfig = config

        self.ws_order = list(demand.workstations)
        self.pool: List[str] = [p.name for p in eligibility.candidates(day)]
        self.held: List[str] = []  # Mandatory overflow kept idle
        self.placements: Dict[str, List[str]] = {ws: [] for ws in self.ws_order}
        self.shortfalls: List[Shortfall] = []
        self.states: List[DayState] = [DayState.PENDING]

    def count(self, ws: str) -> int:
        return len(self.placements[ws])

    def need(self, ws: str) -> NeedStatus:
        return self.demand.remaining_need(ws, self.day, self.count(ws))

    def advance(self, state: DayState):
        self.states.append(state)
        slog.transition(self.day.isoformat(), state.value)

    def place(self, name: str, ws: str, reason: str):
        self.placements[ws].append(name)
        self.pool.remove(name)
        self.counters.record(name, ws, self.day)
        logger.debug(f"{self.day} {ws} ← {name} ({reason})")

    def eligible_in_pool(self, ws: str) -> List[str]:
        return [n for n in self.pool if self.eligibility.is_eligible(n, ws)]

    # --- phase 2 ----------------------------------------------------------

    def place_mandatory(self):
        by_ws: Dict[str, List[str]] = {}
        for name in list(self.pool):
            ws = self.eligibility.mandatory_for(name)
            if ws is not None and ws in self.placements and self.eligibility.is_eligible(name, ws):
                by_ws.setdefault(ws, []).append(name)

        for ws in self.ws_order:
            for name in self.fairness.rank(by_ws.get(ws, []), ws, self.week, self.counters):
                if self.need(ws) != NeedStatus.AT_MAX:
                    self.place(name, ws, "mandatory")
                elif self.config.mandatory_overflow == MandatoryOverflow.IDLE:
                    self.pool.remove(name)
                    self.held.append(name)
                    logger.debug(f"{self.day} {ws} full: mandatory {name} held idle")
                else:
                    logger.debug(f"{self.day} {ws} full: mandatory {name} freed")
        self.advance(DayState.MANDATORY_PLACED)

    # --- phase 3 ----------------------------------------------------------

    def _slack(self, ws: str) -> int:
        return len(self.eligible_in_pool(ws)) - self.demand.still_needed(ws, self.count(ws))

    def _harm(self, name: str, ws: str, unresolved: List[str]) -> int:
        """Other unmet workstations that would be starved by taking ``name``."""
        return sum(
            1 for other in unresolved
            if other != ws and self.eligibility.is_eligible(name, other) and self._slack(other) <= 0
        )

    def fill_minima(self):
        unresolved = [ws for ws in self.ws_order if self.need(ws) == NeedStatus.BELOW_MIN]
        while unresolved:
            # Most constrained first; ties keep declaration order
            ws = min(unresolved, key=lambda w: (self._slack(w), self.ws_order.index(w)))
            try:
                name = self._pick_for_minimum(ws, unresolved)
            except InfeasibleDayError as e:
                logger.warning(f"Shortfall: {e}")
                self.shortfalls.append(e.to_shortfall())
                unresolved.remove(ws)
                continue

            self.place(name, ws, "minimum")
            if self.need(ws) != NeedStatus.BELOW_MIN:
                unresolved.remove(ws)
        self.advance(DayState.MINIMA_FILLED)

    def _pick_for_minimum(self, ws: str, unresolved: List[str]) -> str:
        eligible = self.eligible_in_pool(ws)
        if not eligible:
            raise self._infeasible(ws)
        # Fairness order, but never starve another unmet minimum if avoidable
        return min(
            eligible,
            key=lambda n: (
                self._harm(n, ws, unresolved) > 0,
                self.fairness.priority_score(n, ws, self.week, self.counters),
            ),
        )

    def _infeasible(self, ws: str) -> InfeasibleDayError:
        minimum = self.demand.workstations[ws].min_staff
        eligible = [p.name for p in self.eligibility.eligible_candidates(self.day, ws)]
        working = {n for names in self.placements.values() for n in names}
        cause = shortfall_cause(eligible, minimum, working)
        return InfeasibleDayError(self.day, ws, needed=minimum, available=self.count(ws), cause=cause)

    # --- phase 4 ----------------------------------------------------------

    def extension_is_safe(self) -> bool:
        """Feasibility pre-check: unmet minima must still fit in the remaining pool."""
        short = {s.workstation for s in self.shortfalls}
        pending = sum(
            self.demand.still_needed(ws, self.count(ws))
            for ws in self.ws_order if ws not in short
        )
        return pending <= len(self.pool) - 1

    def fill_optional(self):
        if self.config.fill_to_max:
            self._extend_to_max()
        self.advance(DayState.OPTIONAL_FILLED)

    def _extend_to_max(self):
        while self.pool and self.extension_is_safe():
            open_ws = [
                ws for ws in self.ws_order
                if self.need(ws) != NeedStatus.AT_MAX and self.eligible_in_pool(ws)
            ]
            if not open_ws:
                break
            # Least filled relative to capacity first
            ws = min(
                open_ws,
                key=lambda w: (self.count(w) / self.demand.workstations[w].max_staff, self.ws_order.index(w)),
            )
            best = self.fairness.rank(self.eligible_in_pool(ws), ws, self.week, self.counters)[0]
            self.place(best, ws, "optional")

    def finish(self) -> DayOutcome:
        self.advance(DayState.DAY_SHORTFALL if self.shortfalls else DayState.DAY_COMPLETE)
        return DayOutcome(
            day=self.day,
            placements=self.placements,
            shortfalls=self.shortfalls,
            idle=sorted(self.pool + self.held),
            counters=self.counters,
            states=self.states,
        )


def solve_day(
    day: date,
    eligibility: EligibilityModel,
    demand: DemandModel,
    fairness: FairnessOptimizer,
    counters: FairnessCounters,
    config: Optional[SolverConfig] = None,
) -> DayOutcome:
    """
    Build one day's assignments.

    ``counters`` is not modified; the updated copy is returned in the outcome.
    """
    config = config or SolverConfig()
    fairness.begin_day(day)
    builder = _DayBuilder(day, eligibility, demand, fairness, counters.copy(), config)
    builder.place_mandatory()
    builder.fill_minima()
    builder.fill_optional()
    return builder.finish()


class GreedySolver(BaseSolver):
    """Sequential constructive heuristic over the working days."""

    def solve(self) -> Schedule:
        start_time = time.time()
        problem: RosterProblem = self.problem
        days = problem.working_days()

        slog.phase("Greedy Construction")
        logger.info(
            f"Solving {problem.period.label}: {len(problem.people)} people, "
            f"{len(problem.workstations)} workstations, {len(days)} working days"
        )

        eligibility = EligibilityModel(problem.people, problem.workstations, problem.holidays)
        demand = DemandModel(problem.workstations)
        fairness = FairnessOptimizer(problem.person_names, seed=self.config.seed)
        counters = FairnessCounters.for_people(problem.person_names)

        denied = eligibility.blanket_denied()
        if denied:
            slog.step(f"Never assignable (eligibility 'none'): {', '.join(denied)}")

        schedule = Schedule(days=days, workstations=problem.workstation_names, strategy="greedy")
        shortfall_days = 0
        for day in days:
            outcome = solve_day(day, eligibility, demand, fairness, counters, self.config)
            counters = outcome.counters
            for a in outcome.assignments:
                schedule.add(a)
            for s in outcome.shortfalls:
                schedule.add_shortfall(s)
            schedule.set_idle(day, outcome.idle)
            if outcome.state == DayState.DAY_SHORTFALL:
                shortfall_days += 1

        self._status = SolverStatus.SHORTFALL if schedule.shortfalls else SolverStatus.COMPLETE
        self._solve_time = time.time() - start_time

        schedule.status = self._status.value
        schedule.solve_time_seconds = self._solve_time
        schedule.stats = {
            "seed": self.config.seed,
            "shortfall_days": shortfall_days,
            "total_spread": counters.spread([p.name for p in problem.people if p.name not in denied]),
            "weekly_repeats": counters.repeats(),
        }
        logger.info(
            f"Greedy complete: status={schedule.status}, {len(schedule.assignments)} assignments, "
            f"{len(schedule.shortfalls)} shortfalls, time={self._solve_time:.3f}s"
        )
        return schedule
