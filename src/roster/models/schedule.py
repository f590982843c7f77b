"""Schedule, assignment and shortfall models."""
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd


@dataclass(frozen=True)
class Assignment:
    """One person working one workstation on one date."""
    date: date
    person: str
    workstation: str


@dataclass(frozen=True)
class Shortfall:
    """A workstation minimum left unmet on a date."""
    date: date
    workstation: str
    needed: int      # min_staff
    available: int   # People actually placed
    cause: str = "insufficient eligible pool"

    @property
    def deficit(self) -> int:
        return max(0, self.needed - self.available)

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "workstation": self.workstation,
            "needed": self.needed,
            "available": self.available,
            "cause": self.cause,
        }


class FrozenScheduleError(RuntimeError):
    """Raised when mutating a schedule after validation froze it."""


@dataclass
class Schedule:
    """
    Complete schedule produced by a solver.

    The solver owns it while populating it day by day; ``freeze()`` is called
    once the validator has run, after which it is read-only.
    """

    days: List[date] = field(default_factory=list)
    workstations: List[str] = field(default_factory=list)  # Declaration order
    assignments: List[Assignment] = field(default_factory=list)
    shortfalls: List[Shortfall] = field(default_factory=list)
    idle: Dict[date, List[str]] = field(default_factory=dict)  # Available but unassigned

    # Solver metrics
    strategy: str = "greedy"
    status: str = "unknown"  # complete, shortfall, optimal, feasible, infeasible
    score: float = 0.0
    solve_time_seconds: float = 0.0
    stats: Dict[str, Any] = field(default_factory=dict)

    _frozen: bool = field(default=False, repr=False, compare=False)

    # --- mutation -------------------------------------------------------

    def _check_mutable(self):
        if self._frozen:
            raise FrozenScheduleError("Schedule is frozen and can no longer be modified")

    def add(self, assignment: Assignment) -> None:
        self._check_mutable()
        self.assignments.append(assignment)

    def add_shortfall(self, shortfall: Shortfall) -> None:
        self._check_mutable()
        self.shortfalls.append(shortfall)

    def set_idle(self, day: date, names: List[str]) -> None:
        self._check_mutable()
        self.idle[day] = sorted(names)

    def freeze(self) -> "Schedule":
        """Make the schedule read-only."""
        if not self._frozen:
            self.assignments = tuple(self.assignments)
            self.shortfalls = tuple(self.shortfalls)
            self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    # --- queries --------------------------------------------------------

    def on(self, day: date) -> List[Assignment]:
        """All assignments for a date."""
        return [a for a in self.assignments if a.date == day]

    def people_on(self, day: date) -> List[str]:
        return [a.person for a in self.assignments if a.date == day]

    def count(self, day: date, workstation: str) -> int:
        return sum(1 for a in self.assignments if a.date == day and a.workstation == workstation)

    def workstation_of(self, person: str, day: date) -> Optional[str]:
        for a in self.assignments:
            if a.date == day and a.person == person:
                return a.workstation
        return None

    def person_totals(self, names: Optional[List[str]] = None) -> Dict[str, int]:
        """Total assigned days per person (zero-filled for ``names``)."""
        totals: Dict[str, int] = {n: 0 for n in (names or [])}
        for a in self.assignments:
            totals[a.person] = totals.get(a.person, 0) + 1
        return totals

    def by_date(self) -> List[Tuple[date, List[Tuple[str, List[str]]]]]:
        """
        Renderer view: ``[(date, [(workstation, [person, ...]), ...]), ...]``.

        Workstations keep declaration order; people are sorted by name.
        """
        grid: Dict[date, Dict[str, List[str]]] = defaultdict(lambda: defaultdict(list))
        for a in self.assignments:
            grid[a.date][a.workstation].append(a.person)

        ordered_days = list(self.days) or sorted(grid)
        ws_order = list(self.workstations)
        for day_map in grid.values():
            for ws in day_map:
                if ws not in ws_order:
                    ws_order.append(ws)

        result = []
        for d in ordered_days:
            day_map = grid.get(d, {})
            result.append((d, [(ws, sorted(day_map.get(ws, []))) for ws in ws_order]))
        return result

    def to_dataframe(self) -> pd.DataFrame:
        """Convert assignments to a DataFrame."""
        if not self.assignments:
            return pd.DataFrame(columns=["date", "person", "workstation"])
        rows = [
            {"date": a.date, "person": a.person, "workstation": a.workstation}
            for a in self.assignments
        ]
        return pd.DataFrame(rows).sort_values(["date", "workstation", "person"]).reset_index(drop=True)

    def to_matrix(self) -> pd.DataFrame:
        """Person × date matrix of workstation names (empty string when off)."""
        df = self.to_dataframe()
        if df.empty:
            return pd.DataFrame()
        piv = df.pivot_table(
            index="person",
            columns="date",
            values="workstation",
            aggfunc=lambda x: "/".join(sorted(set(str(v) for v in x))),
            fill_value="",
        )
        return piv

    def summary(self) -> Dict[str, Any]:
        """Get summary dictionary for display."""
        return {
            "days": len(self.days),
            "assignments": len(self.assignments),
            "shortfalls": len(self.shortfalls),
            "strategy": self.strategy,
            "status": self.status,
            "score": round(self.score, 2),
            "solve_time": round(self.solve_time_seconds, 3),
        }
