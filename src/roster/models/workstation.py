"""Workstation model."""
from dataclasses import dataclass

from roster.errors import ConfigError


@dataclass(frozen=True)
class Workstation:
    """A post that needs between ``min_staff`` and ``max_staff`` people every working day."""

    name: str
    min_staff: int = 1
    max_staff: int = 1

    def __post_init__(self):
        name = str(self.name).strip()
        if not name:
            raise ConfigError("Workstation name cannot be empty")
        object.__setattr__(self, "name", name)
        if self.min_staff < 0:
            raise ConfigError(f"Workstation {name}: min_staff must be >= 0 (got {self.min_staff})")
        if self.min_staff > self.max_staff:
            raise ConfigError(
                f"Workstation {name}: min_staff ({self.min_staff}) > max_staff ({self.max_staff})"
            )

    def to_dict(self) -> dict:
        return {"name": self.name, "min_staff": self.min_staff, "max_staff": self.max_staff}

    @classmethod
    def from_dict(cls, d: dict) -> "Workstation":
        min_staff = int(d.get("min_staff", d.get("min", 1)))
        return cls(
            name=d.get("name", ""),
            min_staff=min_staff,
            max_staff=int(d.get("max_staff", d.get("max", min_staff))),
        )
