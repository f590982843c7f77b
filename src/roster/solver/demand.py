"""
Demand Model
============
Daily staffing requirements per workstation. Ranges are constant across the
period, so ``day`` only matters to callers that log or report.
"""
from datetime import date
from enum import Enum
from typing import Dict, Iterable, Mapping

from roster.models.workstation import Workstation


class NeedStatus(str, Enum):
    """Where a workstation's current headcount sits in its range."""
    BELOW_MIN = "below_min"
    SATISFIED = "satisfied"
    AT_MAX = "at_max"


def remaining_need(workstation: Workstation, day: date, current_count: int) -> NeedStatus:
    """
    Classify a headcount against a workstation's range.

    ``at_max`` wins when min == max and the minimum is met, so a solver
    never assigns past the maximum.
    """
    if current_count < workstation.min_staff:
        return NeedStatus.BELOW_MIN
    if current_count >= workstation.max_staff:
        return NeedStatus.AT_MAX
    return NeedStatus.SATISFIED


class DemandModel:
    """Demand lookups for every workstation of a problem."""

    def __init__(self, workstations: Iterable[Workstation]):
        self.workstations: Dict[str, Workstation] = {w.name: w for w in workstations}

    def remaining_need(self, workstation: str, day: date, current_count: int) -> NeedStatus:
        return remaining_need(self.workstations[workstation], day, current_count)

    def still_needed(self, workstation: str, current_count: int) -> int:
        """People still required to reach the minimum."""
        return max(0, self.workstations[workstation].min_staff - current_count)

    def open_capacity(self, workstation: str, current_count: int) -> int:
        """People that can still be added before the maximum."""
        return max(0, self.workstations[workstation].max_staff - current_count)

    def total_minimum(self) -> int:
        return sum(w.min_staff for w in self.workstations.values())

    def total_maximum(self) -> int:
        return sum(w.max_staff for w in self.workstations.values())

    def unmet_minima(self, counts: Mapping[str, int]) -> Dict[str, int]:
        """{workstation: missing} for every workstation still below its minimum."""
        return {
            name: self.still_needed(name, counts.get(name, 0))
            for name in self.workstations
            if self.still_needed(name, counts.get(name, 0)) > 0
        }
