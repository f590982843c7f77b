"""CSV loading and saving for people."""
from datetime import date
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from roster.errors import ConfigError
from roster.models.period import Period
from roster.models.person import Person
from roster.solver.calendar import resolve_date

PEOPLE_COLUMNS = ["name", "eligibility", "mandatory", "vacations"]


def _split(value) -> List[str]:
    """Split a ``;``-separated cell."""
    text = str(value).strip()
    if not text:
        return []
    return [part.strip() for part in text.split(";") if part.strip()]


def _parse_dates(value, period: Optional[Period]) -> List[date]:
    dates = []
    for part in _split(value):
        if period is not None:
            dates.append(resolve_date(part, period))
        else:
            try:
                dates.append(date.fromisoformat(part))
            except ValueError as e:
                raise ConfigError(f"Invalid date {part!r} (day numbers need a period)") from e
    return dates


def load_people(
    source: Union[str, Path, pd.DataFrame],
    period: Optional[Period] = None,
) -> List[Person]:
    """
    Load people from CSV file or DataFrame.

    Columns: ``name`` (required), ``eligibility`` (``all``, ``none``,
    ``allow:A|B``, ``deny:C``), ``mandatory`` and ``vacations``
    (``;``-separated ISO dates, or day numbers when ``period`` is given).

    Args:
        source: Path to CSV file or pandas DataFrame
        period: Resolves day-number vacations

    Returns:
        List of Person objects with vacations in ``unavailable_dates``
    """
    if isinstance(source, pd.DataFrame):
        df = source.copy()
    else:
        df = pd.read_csv(source, dtype=str, keep_default_na=False)

    df = df.fillna("")

    # Required column
    if "name" not in df.columns:
        raise ConfigError("CSV must have a 'name' column")

    people = []
    for idx, row in df.iterrows():
        name = str(row["name"]).strip()
        if not name:
            continue

        eligibility = str(row.get("eligibility", "")).strip() or "all"
        mandatory = str(row.get("mandatory", "")).strip() or None

        people.append(Person(
            name=name,
            eligibility=eligibility,
            mandatory_workstation=mandatory,
            unavailable_dates=set(_parse_dates(row.get("vacations", ""), period)),
        ))

    # Assign sequential IDs
    for i, p in enumerate(people):
        p.id = i

    return people


def _eligibility_cell(person: Person) -> str:
    value = person.eligibility.to_value()
    if isinstance(value, dict):
        ((kind, names),) = value.items()
        return f"{kind}:{'|'.join(names)}"
    return value


def save_people(people: List[Person], path: Union[str, Path]) -> None:
    """
    Save people to CSV file, in the format :func:`load_people` reads.

    Args:
        people: List of Person objects
        path: Output path
    """
    df = people_to_dataframe(people)
    if df.empty:
        df = pd.DataFrame(columns=PEOPLE_COLUMNS)
    df.to_csv(path, index=False)


def people_to_dataframe(people: List[Person]) -> pd.DataFrame:
    """Convert people to a DataFrame with the CSV columns."""
    if not people:
        return pd.DataFrame()
    return pd.DataFrame([
        {
            "name": p.name,
            "eligibility": _eligibility_cell(p),
            "mandatory": p.mandatory_workstation or "",
            "vacations": ";".join(d.isoformat() for d in sorted(p.unavailable_dates)),
        }
        for p in people
    ], columns=PEOPLE_COLUMNS)
