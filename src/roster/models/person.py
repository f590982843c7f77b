"""Person model and per-workstation eligibility rules."""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, FrozenSet, Iterable, Optional, Set

from roster.errors import ConfigError


class EligibilityKind(str, Enum):
    """The four mutually exclusive eligibility classifications."""
    ALLOW_ALL = "all"    # Eligible everywhere
    DENY_ALL = "none"    # Never assigned
    ALLOW_LIST = "allow"  # Only the listed workstations
    DENY_LIST = "deny"   # Everywhere except the listed workstations


@dataclass(frozen=True)
class Eligibility:
    """Tagged eligibility rule over workstation names."""

    kind: EligibilityKind = EligibilityKind.ALLOW_ALL
    workstations: FrozenSet[str] = frozenset()

    def __post_init__(self):
        object.__setattr__(self, "kind", EligibilityKind(self.kind))
        object.__setattr__(self, "workstations", frozenset(str(w).strip() for w in self.workstations))
        if self.kind in (EligibilityKind.ALLOW_ALL, EligibilityKind.DENY_ALL) and self.workstations:
            raise ConfigError(
                f"Blanket eligibility '{self.kind.value}' cannot carry a workstation list"
            )

    @classmethod
    def allow_all(cls) -> "Eligibility":
        return cls(EligibilityKind.ALLOW_ALL)

    @classmethod
    def deny_all(cls) -> "Eligibility":
        return cls(EligibilityKind.DENY_ALL)

    @classmethod
    def allow_only(cls, names: Iterable[str]) -> "Eligibility":
        return cls(EligibilityKind.ALLOW_LIST, frozenset(names))

    @classmethod
    def deny_only(cls, names: Iterable[str]) -> "Eligibility":
        return cls(EligibilityKind.DENY_LIST, frozenset(names))

    def allows(self, workstation: str) -> bool:
        """True if this rule lets the person work at ``workstation``."""
        if self.kind == EligibilityKind.ALLOW_ALL:
            return True
        if self.kind == EligibilityKind.DENY_ALL:
            return False
        if self.kind == EligibilityKind.ALLOW_LIST:
            return workstation in self.workstations
        return workstation not in self.workstations

    @property
    def is_blanket_deny(self) -> bool:
        return self.kind == EligibilityKind.DENY_ALL

    @classmethod
    def parse(cls, value: Any) -> "Eligibility":
        """
        Parse an eligibility rule from its config representation.

        Accepted forms:
            "all" / "none"
            {"allow": ["A", "B"]} / {"deny": ["C"]}
            "allow:A|B" / "deny:C"
            an existing Eligibility (returned unchanged)
        """
        if isinstance(value, Eligibility):
            return value
        if value is None:
            return cls.allow_all()
        if isinstance(value, dict):
            if len(value) != 1:
                raise ConfigError(f"Eligibility must have exactly one of 'allow'/'deny': {value!r}")
            key, names = next(iter(value.items()))
            return cls._from_parts(str(key), list(names or []))
        if isinstance(value, str):
            text = value.strip()
            if ":" in text:
                key, _, rest = text.partition(":")
                names = [n for n in (part.strip() for part in rest.split("|")) if n]
                return cls._from_parts(key, names)
            return cls._from_parts(text, [])
        raise ConfigError(f"Unsupported eligibility value: {value!r}")

    @classmethod
    def _from_parts(cls, key: str, names: list) -> "Eligibility":
        key = key.strip().lower()
        if key in ("", "all", "any", "*"):
            if names:
                raise ConfigError("'all' eligibility takes no workstation list")
            return cls.allow_all()
        if key in ("none", "never"):
            if names:
                raise ConfigError("'none' eligibility takes no workstation list")
            return cls.deny_all()
        if key in ("allow", "only"):
            return cls.allow_only(names)
        if key in ("deny", "except"):
            return cls.deny_only(names)
        raise ConfigError(f"Unknown eligibility kind: {key!r}")

    def to_value(self) -> Any:
        """Inverse of :meth:`parse` (dict form for list kinds)."""
        if self.kind in (EligibilityKind.ALLOW_ALL, EligibilityKind.DENY_ALL):
            return self.kind.value
        return {self.kind.value: sorted(self.workstations)}


@dataclass
class Person:
    """A team member with their eligibility and unavailability."""

    name: str
    eligibility: Eligibility = field(default_factory=Eligibility.allow_all)
    mandatory_workstation: Optional[str] = None

    # Holidays + vacations, folded in at load time
    unavailable_dates: Set[date] = field(default_factory=set)

    # Computed at runtime
    id: int = field(default=0, compare=False)

    def __post_init__(self):
        self.name = str(self.name).strip()
        if not self.name:
            raise ConfigError("Person name cannot be empty")
        self.eligibility = Eligibility.parse(self.eligibility)
        if self.mandatory_workstation is not None:
            self.mandatory_workstation = str(self.mandatory_workstation).strip() or None
        self.unavailable_dates = set(self.unavailable_dates)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "eligibility": self.eligibility.to_value(),
            "mandatory_workstation": self.mandatory_workstation,
            "unavailable_dates": [d.isoformat() for d in sorted(self.unavailable_dates)],
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Person":
        """Create from dictionary."""
        return cls(
            name=d.get("name", ""),
            eligibility=Eligibility.parse(d.get("eligibility", "all")),
            mandatory_workstation=d.get("mandatory_workstation"),
            unavailable_dates={date.fromisoformat(str(v)) for v in d.get("unavailable_dates", [])},
        )
