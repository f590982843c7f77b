"""
Eligibility Model
=================
Answers who may work where, who must work where, and who is present.
"""
from datetime import date
from typing import Dict, Iterable, List, Optional, Set

from roster.models.person import Person
from roster.models.workstation import Workstation


class EligibilityModel:
    """Per-person, per-workstation rule lookups for one problem."""

    def __init__(
        self,
        people: Iterable[Person],
        workstations: Iterable[Workstation],
        holidays: Iterable[date] = (),
    ):
        self.people: List[Person] = list(people)
        self.workstations: List[Workstation] = list(workstations)
        self.holidays: Set[date] = set(holidays)
        self._by_name: Dict[str, Person] = {p.name: p for p in self.people}

    def _person(self, person) -> Person:
        return self._by_name[person] if isinstance(person, str) else person

    def is_eligible(self, person, workstation: str) -> bool:
        """True if the person's rule allows this workstation."""
        return self._person(person).eligibility.allows(workstation)

    def is_mandatory(self, person, workstation: str) -> bool:
        return self._person(person).mandatory_workstation == workstation

    def mandatory_for(self, person) -> Optional[str]:
        return self._person(person).mandatory_workstation

    def is_available(self, person, day: date) -> bool:
        """False on holidays and on any of the person's exception dates."""
        p = self._person(person)
        return day not in self.holidays and day not in p.unavailable_dates

    def candidates(self, day: date) -> List[Person]:
        """Available people for a date, in declaration order."""
        return [p for p in self.people if self.is_available(p, day)]

    def eligible_candidates(self, day: date, workstation: str) -> List[Person]:
        return [p for p in self.candidates(day) if self.is_eligible(p, workstation)]

    def eligible_workstations(self, person) -> List[str]:
        p = self._person(person)
        return [w.name for w in self.workstations if p.eligibility.allows(w.name)]

    def blanket_denied(self) -> List[str]:
        """People who can never be assigned (reported, not an error)."""
        return [p.name for p in self.people if p.eligibility.is_blanket_deny]
