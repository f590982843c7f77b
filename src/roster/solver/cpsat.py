"""
CP-SAT Roster Solver
====================
Whole-period alternative to the greedy constructor, using OR-Tools CP-SAT.

Key model:
- Variables: x[person, day, workstation] = 1 if the person works there that
  day; created only for available and eligible triples
- Hard: at most one workstation per person per day, count <= max_staff,
  mandatory people placed at their workstation unless it is full
- Soft (objective, by weight): unmet minima, unused capacity (when filling
  to max), spread of totals, repeated workstation within a week
"""
import time
from collections import defaultdict
from typing import Dict, List, Tuple

from ortools.sat.python import cp_model

from roster.models.constraints import MandatoryOverflow
from roster.models.schedule import Assignment, Schedule, Shortfall
from roster.solver.base import BaseSolver, SolverStatus
from roster.solver.calendar import week_key
from roster.solver.eligibility import EligibilityModel
from roster.solver.greedy import shortfall_cause
from roster.utils.logging_setup import SolverLogger, get_logger

logger = get_logger("roster.solver.cpsat")
slog = SolverLogger("roster.solver.cpsat")

W_SHORTFALL = 100000
W_UNUSED = 1000
W_SPREAD = 100
W_REPEAT = 1

_STATUS = {
    cp_model.OPTIMAL: SolverStatus.OPTIMAL,
    cp_model.FEASIBLE: SolverStatus.FEASIBLE,
    cp_model.INFEASIBLE: SolverStatus.INFEASIBLE,
    cp_model.MODEL_INVALID: SolverStatus.INFEASIBLE,
    cp_model.UNKNOWN: SolverStatus.UNKNOWN,
}


class CpSatSolver(BaseSolver):
    """Exact (time-limited) roster optimization."""

    def solve(self) -> Schedule:
        start_time = time.time()
        problem = self.problem
        config = self.config
        days = problem.working_days()
        ws_map = problem.workstation_map()
        ws_names = problem.workstation_names

        slog.phase("Building CP-SAT Model")
        logger.info(f"Solving: {len(problem.people)} people, {len(ws_names)} workstations, {len(days)} days")

        schedule = Schedule(days=days, workstations=ws_names, strategy="cpsat")
        eligibility = EligibilityModel(problem.people, problem.workstations, problem.holidays)

        model = cp_model.CpModel()

        # ========== Variables ==========
        slog.step("Creating person-day-workstation variables")
        x: Dict[Tuple[str, int, str], cp_model.IntVar] = {}
        for d_idx, day in enumerate(days):
            for p in eligibility.candidates(day):
                for ws in ws_names:
                    if eligibility.is_eligible(p, ws):
                        x[(p.name, d_idx, ws)] = model.NewBoolVar(f"x_{p.name}_{d_idx}_{ws}")
        logger.debug(f"Created {len(x)} assignment variables")

        by_person_day: Dict[Tuple[str, int], List] = defaultdict(list)
        by_day_ws: Dict[Tuple[int, str], List] = defaultdict(list)
        by_person: Dict[str, List] = defaultdict(list)
        by_week: Dict[Tuple[str, Tuple[int, int], str], List] = defaultdict(list)
        for (name, d_idx, ws), var in x.items():
            by_person_day[(name, d_idx)].append(var)
            by_day_ws[(d_idx, ws)].append(var)
            by_person[name].append(var)
            by_week[(name, week_key(days[d_idx]), ws)].append(var)

        # ========== Hard Constraints ==========
        slog.phase("Adding Hard Constraints")

        slog.step("Constraint: One workstation per person per day")
        for vars_ in by_person_day.values():
            model.Add(sum(vars_) <= 1)

        slog.step("Constraint: Staffing range (minimum soft)")
        short_vars: Dict[Tuple[int, str], cp_model.IntVar] = {}
        unused_terms = []
        for d_idx in range(len(days)):
            for ws in ws_names:
                w = ws_map[ws]
                count = sum(by_day_ws[(d_idx, ws)])
                if by_day_ws[(d_idx, ws)]:
                    model.Add(count <= w.max_staff)
                if w.min_staff > 0:
                    short = model.NewIntVar(0, w.min_staff, f"short_{d_idx}_{ws}")
                    model.Add(count + short >= w.min_staff)
                    short_vars[(d_idx, ws)] = short
                if config.fill_to_max and by_day_ws[(d_idx, ws)]:
                    unused = model.NewIntVar(0, w.max_staff, f"unused_{d_idx}_{ws}")
                    model.Add(count + unused == w.max_staff)
                    unused_terms.append(unused)

        slog.step(f"Constraint: Mandatory workstations (overflow={config.mandatory_overflow.value})")
        for p in problem.people:
            m = p.mandatory_workstation
            if m is None:
                continue
            for d_idx in range(len(days)):
                var = x.get((p.name, d_idx, m))
                if var is None:
                    continue
                # Not placed at the mandatory workstation only if it is full
                # of people who are mandatory there too
                model.Add(sum(by_day_ws[(d_idx, m)]) >= ws_map[m].max_staff).OnlyEnforceIf(var.Not())
                for q in problem.people:
                    seat = x.get((q.name, d_idx, m))
                    if q.mandatory_workstation != m and seat is not None:
                        model.Add(seat == 0).OnlyEnforceIf(var.Not())
                if config.mandatory_overflow == MandatoryOverflow.IDLE:
                    for ws in ws_names:
                        other = x.get((p.name, d_idx, ws))
                        if ws != m and other is not None:
                            model.Add(other == 0).OnlyEnforceIf(var.Not())

        # ========== Soft Constraints (Objective) ==========
        slog.phase("Adding Soft Constraints")
        objective_terms = []

        if short_vars:
            total_short = model.NewIntVar(0, sum(ws_map[ws].min_staff for _, ws in short_vars), "total_short")
            model.Add(total_short == sum(short_vars.values()))
            objective_terms.append((total_short, W_SHORTFALL))

        if unused_terms:
            slog.step("Soft: Fill to maximum")
            objective_terms.append((sum(unused_terms), W_UNUSED))

        assignable = [name for name in problem.person_names if by_person.get(name)]
        horizon = len(days)
        if len(assignable) > 1:
            slog.step(f"Soft: Total spread over {len(assignable)} assignable people")
            totals = []
            for name in assignable:
                t = model.NewIntVar(0, horizon, f"total_{name}")
                model.Add(t == sum(by_person[name]))
                totals.append(t)
            max_t = model.NewIntVar(0, horizon, "max_total")
            min_t = model.NewIntVar(0, horizon, "min_total")
            model.AddMaxEquality(max_t, totals)
            model.AddMinEquality(min_t, totals)
            spread = model.NewIntVar(0, horizon, "spread")
            model.Add(spread == max_t - min_t)
            objective_terms.append((spread, W_SPREAD))

        slog.step("Soft: Weekly workstation repeats")
        for key, vars_ in by_week.items():
            if len(vars_) > 1:
                rep = model.NewIntVar(0, len(vars_), f"rep_{key[0]}_{key[1][1]}_{key[2]}")
                model.Add(rep >= sum(vars_) - 1)
                objective_terms.append((rep, W_REPEAT))

        if objective_terms:
            model.Minimize(sum(var * weight for var, weight in objective_terms))

        # ========== Solve ==========
        slog.phase("Solving")
        solver = cp_model.CpSolver()
        solver.parameters.max_time_in_seconds = config.time_limit_seconds
        solver.parameters.num_workers = config.num_workers
        solver.parameters.random_seed = config.seed or 0
        solver.parameters.log_search_progress = False

        status = solver.Solve(model)
        self._status = _STATUS.get(status, SolverStatus.UNKNOWN)
        self._solve_time = time.time() - start_time
        logger.info(f"Solve complete: status={self._status.value}, time={self._solve_time:.2f}s")

        schedule.status = self._status.value
        schedule.solve_time_seconds = self._solve_time
        if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
            return schedule

        # ========== Extract Solution ==========
        slog.phase("Extracting Solution")
        assigned_on: Dict[int, set] = defaultdict(set)
        for (name, d_idx, ws), var in sorted(x.items(), key=lambda kv: (kv[0][1], ws_names.index(kv[0][2]), kv[0][0])):
            if solver.Value(var) == 1:
                schedule.add(Assignment(date=days[d_idx], person=name, workstation=ws))
                assigned_on[d_idx].add(name)

        for (d_idx, ws), short in sorted(short_vars.items(), key=lambda kv: (kv[0][0], ws_names.index(kv[0][1]))):
            if solver.Value(short) > 0:
                minimum = ws_map[ws].min_staff
                eligible = [p.name for p in eligibility.eligible_candidates(days[d_idx], ws)]
                schedule.add_shortfall(Shortfall(
                    date=days[d_idx],
                    workstation=ws,
                    needed=minimum,
                    available=minimum - solver.Value(short),
                    cause=shortfall_cause(eligible, minimum, assigned_on[d_idx]),
                ))

        for d_idx, day in enumerate(days):
            present = [p.name for p in eligibility.candidates(day)]
            schedule.set_idle(day, [n for n in present if n not in assigned_on[d_idx]])

        schedule.score = solver.ObjectiveValue() if objective_terms else 0.0
        schedule.stats = {"seed": config.seed, "objective": schedule.score, "variables": len(x)}
        logger.info(f"Extracted {len(schedule.assignments)} assignments, {len(schedule.shortfalls)} shortfalls")
        return schedule
