"""Exception taxonomy for the roster engine."""
from datetime import date


class RosterError(Exception):
    """Base class for every error raised by the roster engine."""


class ConfigError(RosterError):
    """Malformed input detected before solving starts.

    Raised for an invalid period, an unknown workstation or person reference,
    ``min_staff > max_staff`` and similar problems. Aborts the run.
    """


class InfeasibleDayError(RosterError):
    """A workstation minimum cannot be met on a given day.

    Raised inside a single day's construction step and caught there: the
    solver turns it into a :class:`~roster.models.schedule.Shortfall` record and
    keeps going with the remaining workstations and days.
    """

    def __init__(self, day: date, workstation: str, needed: int, available: int, cause: str):
        self.day = day
        self.workstation = workstation
        self.needed = needed
        self.available = available
        self.cause = cause
        super().__init__(
            f"{day.isoformat()} {workstation}: needs {needed}, got {available} ({cause})"
        )

    def to_shortfall(self):
        from roster.models.schedule import Shortfall

        return Shortfall(
            date=self.day,
            workstation=self.workstation,
            needed=self.needed,
            available=self.available,
            cause=self.cause,
        )
