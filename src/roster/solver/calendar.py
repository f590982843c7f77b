"""
Calendar
========
Enumerates the working days of a period. Pure functions, no side effects.
"""
import calendar
from datetime import date
from typing import Iterable, List, Set, Tuple, Union

from roster.errors import ConfigError
from roster.models.period import CalendarDay, Period


def days_in_month(year: int, month: int) -> int:
    if not 1 <= month <= 12:
        raise ConfigError(f"Invalid month {month} (expected 1-12)")
    return calendar.monthrange(year, month)[1]


def calendar_days(period: Period, holidays: Iterable[date] = ()) -> List[CalendarDay]:
    """
    Every listed day of the period, flagged as working or holiday.

    Raises:
        ConfigError: month out of range, or a listed day outside the month.
    """
    last = days_in_month(period.year, period.month)
    requested = period.days if period.days is not None else list(range(1, last + 1))

    bad = [d for d in requested if not 1 <= d <= last]
    if bad:
        raise ConfigError(
            f"Day(s) {', '.join(str(d) for d in bad)} outside {period.label} (1-{last})"
        )

    holiday_set: Set[date] = set(holidays)
    result = []
    for d in sorted(set(requested)):
        day = date(period.year, period.month, d)
        result.append(CalendarDay(date=day, is_working_day=day not in holiday_set))
    return result


def working_days(period: Period, holidays: Iterable[date] = ()) -> List[date]:
    """Ordered working days: listed days of the period minus holidays."""
    return [cd.date for cd in calendar_days(period, holidays) if cd.is_working_day]


def parse_day_spec(spec: str) -> List[int]:
    """
    Expand a day specification such as ``"1-5, 8, 10-12"``.

    Month bounds are not checked here; :func:`calendar_days` does that.
    """
    days: List[int] = []
    for part in str(spec).replace(";", ",").split(","):
        part = part.strip()
        if not part:
            continue
        try:
            if "-" in part:
                lo, hi = (int(x) for x in part.split("-", 1))
                if lo > hi:
                    raise ConfigError(f"Empty day range {part!r}")
                days.extend(range(lo, hi + 1))
            else:
                days.append(int(part))
        except ValueError as e:
            raise ConfigError(f"Invalid day specification {part!r}") from e
    return sorted(set(days))


def resolve_date(value: Union[date, int, str], period: Period) -> date:
    """Turn an ISO date, a ``date`` or a day number of the period month into a date."""
    if isinstance(value, date):
        return value
    if isinstance(value, int):
        last = days_in_month(period.year, period.month)
        if not 1 <= value <= last:
            raise ConfigError(f"Day {value} outside {period.label} (1-{last})")
        return date(period.year, period.month, value)
    text = str(value).strip()
    if text.isdigit():
        return resolve_date(int(text), period)
    try:
        return date.fromisoformat(text)
    except ValueError as e:
        raise ConfigError(f"Invalid date {value!r}") from e


def week_key(day: date) -> Tuple[int, int]:
    """ISO (year, week) a date belongs to; fairness counters are grouped by it."""
    iso = day.isocalendar()
    return (iso[0], iso[1])
