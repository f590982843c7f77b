"""Scheduling period and calendar day definitions."""
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

# ISO weekday names, Monday first
WEEKDAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


@dataclass
class Period:
    """
    Target period: one month of one year.

    ``days`` lists the day numbers to schedule; ``None`` means every day of
    the month. Range checks happen in :func:`roster.solver.calendar.working_days`.
    """
    year: int
    month: int
    days: Optional[List[int]] = None

    def __post_init__(self):
        self.year = int(self.year)
        self.month = int(self.month)
        if self.days is not None:
            self.days = sorted({int(d) for d in self.days})

    @property
    def label(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def to_dict(self) -> dict:
        return {"year": self.year, "month": self.month, "days": self.days}


@dataclass(frozen=True)
class CalendarDay:
    """One listed day of the period."""
    date: date
    is_working_day: bool = True

    @property
    def weekday_name(self) -> str:
        return WEEKDAY_NAMES[self.date.weekday()]
