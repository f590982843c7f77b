"""
Fairness Optimizer
==================
Running tallies used to rank candidates during greedy construction.

This is a heuristic pass, not an exact balancing algorithm: counters are
updated right after each placement and never re-optimized globally. It only
orders candidates; it never overrides a hard constraint.
"""
import random
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from roster.solver.calendar import week_key

WeekKey = Tuple[int, int]


@dataclass
class FairnessCounters:
    """Per-person totals and per-week workstation counts, period to date."""

    totals: Dict[str, int] = field(default_factory=dict)
    # {week: {person: {workstation: count}}}
    weekly: Dict[WeekKey, Dict[str, Dict[str, int]]] = field(default_factory=dict)

    @classmethod
    def for_people(cls, names: Iterable[str]) -> "FairnessCounters":
        return cls(totals={n: 0 for n in names})

    def record(self, person: str, workstation: str, day: date) -> None:
        """Count one placement."""
        self.totals[person] = self.totals.get(person, 0) + 1
        week = self.weekly.setdefault(week_key(day), {})
        per_ws = week.setdefault(person, {})
        per_ws[workstation] = per_ws.get(workstation, 0) + 1

    def total(self, person: str) -> int:
        return self.totals.get(person, 0)

    def week_count(self, person: str, workstation: str, week: WeekKey) -> int:
        return self.weekly.get(week, {}).get(person, {}).get(workstation, 0)

    def copy(self) -> "FairnessCounters":
        return FairnessCounters(
            totals=dict(self.totals),
            weekly={
                w: {p: dict(ws) for p, ws in people.items()}
                for w, people in self.weekly.items()
            },
        )

    def spread(self, names: Optional[Iterable[str]] = None) -> int:
        """Max minus min total over ``names`` (all tracked people by default)."""
        values = [self.total(n) for n in names] if names is not None else list(self.totals.values())
        return max(values) - min(values) if values else 0

    def repeats(self) -> int:
        """Placements beyond the first of each (week, person, workstation)."""
        return sum(
            max(0, c - 1)
            for people in self.weekly.values()
            for per_ws in people.values()
            for c in per_ws.values()
        )


class FairnessOptimizer:
    """
    Candidate ranking from :class:`FairnessCounters`.

    Tie-break is alphabetical unless a seed is given, in which case each day
    draws a fresh shuffle from a seeded ``random.Random``. Same seed, same
    schedule.
    """

    def __init__(self, names: Iterable[str], seed: Optional[int] = None):
        self.names: List[str] = sorted(names)
        self.seed = seed
        self._rng = random.Random(seed) if seed is not None else None
        self._order: Dict[str, int] = {n: i for i, n in enumerate(self.names)}

    def begin_day(self, day: date) -> None:
        """Fix the tie-break order for a day."""
        if self._rng is None:
            return
        shuffled = list(self.names)
        self._rng.shuffle(shuffled)
        self._order = {n: i for i, n in enumerate(shuffled)}

    def priority_score(
        self,
        person: str,
        workstation: str,
        week: WeekKey,
        counters: FairnessCounters,
    ) -> Tuple[int, int, int]:
        """Sort key, lowest first: (total days, days at this workstation this week, tie-break)."""
        return (
            counters.total(person),
            counters.week_count(person, workstation, week),
            self._order.get(person, len(self._order)),
        )

    def rank(
        self,
        people: Iterable[str],
        workstation: str,
        week: WeekKey,
        counters: FairnessCounters,
    ) -> List[str]:
        return sorted(people, key=lambda n: self.priority_score(n, workstation, week, counters))


def totals_by_week(counters: FairnessCounters) -> Dict[WeekKey, Dict[str, int]]:
    """{week: {person: days worked that week}}"""
    result: Dict[WeekKey, Dict[str, int]] = defaultdict(dict)
    for week, people in counters.weekly.items():
        for person, per_ws in people.items():
            result[week][person] = sum(per_ws.values())
    return dict(result)
