"""
Pydantic Validated Models
=========================
Strict validation layer for roster config documents and solver settings.
Used at the config-loading boundary; the engine itself works on the
dataclass models.

Usage:
    from roster.models.validated import RosterDocument

    doc = RosterDocument.model_validate(json.load(fh))
    problem = doc.to_problem()
"""
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from roster.errors import ConfigError

# A date may be given as ISO text or as a day number of the period month
DateLike = Union[date, int]


class StrategyEnum(str, Enum):
    GREEDY = "greedy"
    CPSAT = "cpsat"


class OverflowEnum(str, Enum):
    FREE = "free"
    IDLE = "idle"


class ValidatedSolverConfig(BaseModel):
    """
    Pydantic-validated solver configuration.

    Converted to the dataclass SolverConfig via ``to_dataclass``.
    """
    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    strategy: StrategyEnum = Field(default=StrategyEnum.GREEDY)
    fill_to_max: bool = Field(default=True)
    mandatory_overflow: OverflowEnum = Field(default=OverflowEnum.FREE)
    seed: Optional[int] = Field(default=None)
    tries: int = Field(default=1, ge=1, le=1000)
    time_limit_seconds: int = Field(default=10, ge=1, le=600)
    num_workers: int = Field(default=4, ge=1, le=32)

    def to_dataclass(self):
        from roster.models.constraints import MandatoryOverflow, SolverConfig, Strategy

        return SolverConfig(
            strategy=Strategy(self.strategy.value),
            fill_to_max=self.fill_to_max,
            mandatory_overflow=MandatoryOverflow(self.mandatory_overflow.value),
            seed=self.seed,
            tries=self.tries,
            time_limit_seconds=self.time_limit_seconds,
            num_workers=self.num_workers,
        )

    @classmethod
    def from_dataclass(cls, config) -> "ValidatedSolverConfig":
        return cls(
            strategy=StrategyEnum(config.strategy.value),
            fill_to_max=config.fill_to_max,
            mandatory_overflow=OverflowEnum(config.mandatory_overflow.value),
            seed=config.seed,
            tries=config.tries,
            time_limit_seconds=config.time_limit_seconds,
            num_workers=config.num_workers,
        )


class PeriodModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    year: int = Field(ge=1900, le=2200)
    month: int = Field(ge=1, le=12)
    # List of day numbers and/or range strings ("1-5"); None = whole month
    days: Optional[List[Union[int, str]]] = None


class WorkstationModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    min_staff: int = Field(default=1, ge=0)
    max_staff: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_range(self):
        if self.max_staff is None:
            self.max_staff = self.min_staff
        if self.min_staff > self.max_staff:
            raise ValueError(f"min_staff ({self.min_staff}) > max_staff ({self.max_staff})")
        return self


class PersonModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    eligibility: Any = "all"
    mandatory_workstation: Optional[str] = None
    vacations: List[DateLike] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be blank")
        return v


class RosterDocument(BaseModel):
    """A complete roster config document."""
    model_config = ConfigDict(extra="forbid")

    period: PeriodModel
    workstations: List[WorkstationModel] = Field(min_length=1)
    people: List[PersonModel] = Field(default_factory=list)
    holidays: List[DateLike] = Field(default_factory=list)
    vacations: Dict[str, List[DateLike]] = Field(default_factory=dict)
    solver: ValidatedSolverConfig = Field(default_factory=ValidatedSolverConfig)

    def to_problem(self):
        """Build a checked RosterProblem. Raises ConfigError."""
        from roster.models.period import Period
        from roster.models.person import Eligibility, Person
        from roster.models.problem import RosterProblem
        from roster.models.workstation import Workstation
        from roster.solver.calendar import parse_day_spec, resolve_date

        p = self.period
        days = None
        if p.days is not None:
            days = []
            for item in p.days:
                days.extend(parse_day_spec(str(item)) if isinstance(item, str) else [item])
        period = Period(year=p.year, month=p.month, days=days)

        holidays = {resolve_date(v, period) for v in self.holidays}

        vacations: Dict[str, set] = {}
        for name, values in self.vacations.items():
            vacations.setdefault(name.strip(), set()).update(resolve_date(v, period) for v in values)
        for pm in self.people:
            if pm.vacations:
                vacations.setdefault(pm.name, set()).update(resolve_date(v, period) for v in pm.vacations)

        people = [
            Person(
                name=pm.name,
                eligibility=Eligibility.parse(pm.eligibility),
                mandatory_workstation=pm.mandatory_workstation,
            )
            for pm in self.people
        ]
        workstations = [
            Workstation(name=w.name, min_staff=w.min_staff, max_staff=w.max_staff)
            for w in self.workstations
        ]
        return RosterProblem.build(period, people, workstations, holidays=holidays, vacations=vacations)


def parse_document(data: Dict[str, Any]) -> RosterDocument:
    """Validate a raw dict, turning pydantic errors into ConfigError."""
    try:
        return RosterDocument.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid roster config: {e}") from e


def validate_solver_config(config):
    """Re-check a dataclass SolverConfig (e.g. after CLI overrides) against the allowed ranges."""
    try:
        ValidatedSolverConfig.from_dataclass(config)
    except ValidationError as e:
        raise ConfigError(f"Invalid solver settings: {e}") from e
    return config
