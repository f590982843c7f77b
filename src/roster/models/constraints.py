"""Solver configuration."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional


class Strategy(str, Enum):
    """Assignment strategies."""
    GREEDY = "greedy"  # Day-by-day constructive heuristic (default)
    CPSAT = "cpsat"    # Whole-period OR-Tools model


class MandatoryOverflow(str, Enum):
    """What happens to a mandatory person whose workstation is already full."""
    FREE = "free"  # Freed to work any other eligible workstation
    IDLE = "idle"  # Left unassigned for the day


@dataclass
class ScoreWeights:
    """Weights for :func:`roster.solver.validation.score_solution` (lower score is better)."""
    violation: float = 1000.0
    shortfall: float = 100.0
    spread: float = 10.0
    repeats: float = 1.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "violation": self.violation,
            "shortfall": self.shortfall,
            "spread": self.spread,
            "repeats": self.repeats,
        }


@dataclass
class SolverConfig:
    """Configuration for the roster solver."""

    strategy: Strategy = Strategy.GREEDY

    # Staff beyond the minimum, up to max_staff
    fill_to_max: bool = True
    mandatory_overflow: MandatoryOverflow = MandatoryOverflow.FREE

    # Tie-breaking: None keeps the alphabetical order, an int seeds a shuffle
    seed: Optional[int] = None
    tries: int = 1

    # CP-SAT only
    time_limit_seconds: int = 10
    num_workers: int = 4

    weights: ScoreWeights = field(default_factory=ScoreWeights)

    def __post_init__(self):
        self.strategy = Strategy(self.strategy)
        self.mandatory_overflow = MandatoryOverflow(self.mandatory_overflow)
        if self.tries < 1:
            self.tries = 1
        if isinstance(self.weights, dict):
            self.weights = ScoreWeights(**self.weights)

    def to_dict(self) -> Dict:
        """Serialize to dictionary."""
        return {
            "strategy": self.strategy.value,
            "fill_to_max": self.fill_to_max,
            "mandatory_overflow": self.mandatory_overflow.value,
            "seed": self.seed,
            "tries": self.tries,
            "time_limit_seconds": self.time_limit_seconds,
            "num_workers": self.num_workers,
            "weights": self.weights.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "SolverConfig":
        """Create from dictionary, ignoring unknown keys."""
        cfg = cls()
        for key, value in d.items():
            if not hasattr(cfg, key):
                continue
            if key == "strategy":
                value = Strategy(value) if value else Strategy.GREEDY
            elif key == "mandatory_overflow":
                value = MandatoryOverflow(value) if value else MandatoryOverflow.FREE
            elif key == "weights":
                value = ScoreWeights(**value) if isinstance(value, dict) else value
            setattr(cfg, key, value)
        return cfg
