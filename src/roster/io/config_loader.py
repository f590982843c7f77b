"""
Roster Config Loading
=====================
Reads a JSON roster document and returns the problem and solver settings.

Document shape::

    {
      "period": {"year": 2024, "month": 3, "days": ["1-15"]},
      "holidays": ["2024-03-08", 11],
      "workstations": [{"name": "Desk", "min_staff": 1, "max_staff": 2}],
      "people": [
        {"name": "Alice", "eligibility": {"allow": ["Desk"]}, "vacations": [4, 5]},
        {"name": "Bob", "eligibility": "all", "mandatory_workstation": "Desk"}
      ],
      "vacations": {"Bob": ["2024-03-12"]},
      "solver": {"strategy": "greedy", "seed": null}
    }
"""
import json
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from roster.errors import ConfigError
from roster.models.constraints import SolverConfig
from roster.models.problem import RosterProblem
from roster.models.validated import parse_document
from roster.utils.logging_setup import get_logger, log_function_call

logger = get_logger("roster.io.config_loader")


def load_roster_dict(data: Dict[str, Any]) -> Tuple[RosterProblem, SolverConfig]:
    """
    Build problem and config from an already parsed document.

    Raises:
        ConfigError: schema or cross-reference problems
    """
    if not isinstance(data, dict):
        raise ConfigError("Roster config must be a JSON object")
    doc = parse_document(data)
    problem = doc.to_problem()
    config = doc.solver.to_dataclass()
    logger.info(
        f"Loaded roster {problem.period.label}: {len(problem.people)} people, "
        f"{len(problem.workstations)} workstations, {len(problem.holidays)} holidays"
    )
    return problem, config


@log_function_call
def load_roster(path: Union[str, Path]) -> Tuple[RosterProblem, SolverConfig]:
    """
    Load a roster document from a JSON file.

    Args:
        path: Path to the JSON document

    Returns:
        (RosterProblem, SolverConfig)

    Raises:
        ConfigError: missing file, invalid JSON, or invalid content
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e

    logger.debug(f"Read config from {path}")
    return load_roster_dict(data)
