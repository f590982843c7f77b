"""The in-memory roster problem handed to the solver by a config loader."""
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Set

from roster.errors import ConfigError
from roster.models.period import Period
from roster.models.person import EligibilityKind, Person
from roster.models.workstation import Workstation


@dataclass
class RosterProblem:
    """People, workstations and the calendar for one run.

    Use :meth:`build` to get a checked instance with holidays and vacations
    already folded into each person's ``unavailable_dates``.
    """

    period: Period
    people: List[Person]
    workstations: List[Workstation]
    holidays: Set[date] = field(default_factory=set)

    @classmethod
    def build(
        cls,
        period: Period,
        people: Iterable[Person],
        workstations: Iterable[Workstation],
        holidays: Iterable[date] = (),
        vacations: Optional[Mapping[str, Iterable[date]]] = None,
    ) -> "RosterProblem":
        """
        Assemble and check a problem.

        Raises:
            ConfigError: duplicate names, unknown references, or a mandatory
                workstation forbidden by the person's own eligibility.
        """
        people = list(people)
        workstations = list(workstations)
        holidays = set(holidays)
        vacations = dict(vacations or {})

        known = {p.name for p in people}
        unknown_people = sorted(set(vacations) - known)
        if unknown_people:
            raise ConfigError(f"Vacations given for unknown people: {', '.join(unknown_people)}")

        resolved = []
        for i, p in enumerate(people):
            unavailable = set(p.unavailable_dates) | holidays | set(vacations.get(p.name, ()))
            resolved.append(replace(p, unavailable_dates=unavailable, id=i))

        problem = cls(period=period, people=resolved, workstations=workstations, holidays=holidays)
        problem.check()
        return problem

    def check(self) -> None:
        """Validate cross references. Raises ConfigError on the first problem found."""
        from roster.solver.calendar import calendar_days

        # Days outside the month fail here, not in the solver
        calendar_days(self.period)

        ws_names = [w.name for w in self.workstations]
        dup_ws = sorted({n for n in ws_names if ws_names.count(n) > 1})
        if dup_ws:
            raise ConfigError(f"Duplicate workstation names: {', '.join(dup_ws)}")

        names = [p.name for p in self.people]
        dup_people = sorted({n for n in names if names.count(n) > 1})
        if dup_people:
            raise ConfigError(f"Duplicate person names: {', '.join(dup_people)}")

        known_ws = set(ws_names)
        for p in self.people:
            if p.eligibility.kind in (EligibilityKind.ALLOW_LIST, EligibilityKind.DENY_LIST):
                unknown = sorted(p.eligibility.workstations - known_ws)
                if unknown:
                    raise ConfigError(
                        f"{p.name}: eligibility references unknown workstations {', '.join(unknown)}"
                    )
            if p.mandatory_workstation is not None:
                if p.mandatory_workstation not in known_ws:
                    raise ConfigError(
                        f"{p.name}: unknown mandatory workstation {p.mandatory_workstation!r}"
                    )
                if not p.eligibility.allows(p.mandatory_workstation):
                    raise ConfigError(
                        f"{p.name}: mandatory workstation {p.mandatory_workstation!r} "
                        f"is excluded by eligibility '{p.eligibility.kind.value}'"
                    )

    # --- lookups --------------------------------------------------------

    @property
    def person_names(self) -> List[str]:
        return [p.name for p in self.people]

    @property
    def workstation_names(self) -> List[str]:
        return [w.name for w in self.workstations]

    def person(self, name: str) -> Person:
        for p in self.people:
            if p.name == name:
                return p
        raise KeyError(name)

    def workstation(self, name: str) -> Workstation:
        for w in self.workstations:
            if w.name == name:
                return w
        raise KeyError(name)

    def workstation_map(self) -> Dict[str, Workstation]:
        return {w.name: w for w in self.workstations}

    def working_days(self) -> List[date]:
        """Ordered working days of the period."""
        from roster.solver.calendar import working_days
        return working_days(self.period, self.holidays)
