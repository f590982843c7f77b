"""
Roster Logging Infrastructure
=============================
Multi-level logging with optional file rotation and function tracing.

Levels:
    TRACE (5): Function entry/exit with arguments
    DEBUG (10): Candidate rankings, per-day placements
    INFO (20): Phases, per-run progress
    WARNING (30): Shortfalls, failed constraint checks
    ERROR (40): Configuration errors, exceptions
"""
import functools
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Optional

# Custom TRACE level (below DEBUG)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

ROOT_LOGGER = "roster"


class ColoredFormatter(logging.Formatter):
    """Formatter with ANSI colors for console output."""

    COLORS = {
        TRACE: "\033[90m",             # Gray
        logging.DEBUG: "\033[36m",     # Cyan
        logging.INFO: "\033[32m",      # Green
        logging.WARNING: "\033[33m",   # Yellow
        logging.ERROR: "\033[31m",     # Red
        logging.CRITICAL: "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record):
        color = self.COLORS.get(record.levelno, "")
        message = super().format(record)
        if color and sys.stderr.isatty():
            return f"{color}{message}{self.RESET}"
        return message


def _parse_level(level: str) -> int:
    if str(level).upper() == "TRACE":
        return TRACE
    return getattr(logging, str(level).upper(), logging.INFO)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    console_level: Optional[str] = None,
    max_bytes: int = 5 * 1024 * 1024,  # 5 MB
    backup_count: int = 3,
) -> logging.Logger:
    """
    Configure the ``roster`` logger tree.

    Args:
        level: Minimum log level for file output
        log_file: Path to a rotating log file (None = console only)
        console_level: Console log level (defaults to level)
        max_bytes: Max size before rotation
        backup_count: Number of backup files to keep

    Returns:
        The ``roster`` root logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(TRACE)  # Handlers do the filtering
    logger.handlers.clear()

    file_level = _parse_level(level)
    cons_level = _parse_level(console_level or level)

    # Console goes to stderr so --json output stays clean on stdout
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(cons_level)
    console_handler.setFormatter(ColoredFormatter(
        "[%(asctime)s] %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    ))
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(file_handler)

    logger.debug(
        f"Logging initialized: console={logging.getLevelName(cons_level)}, "
        f"file={logging.getLevelName(file_level) if log_file else 'disabled'}"
    )
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module, e.g. ``get_logger("roster.solver.greedy")``."""
    return logging.getLogger(name)


def log_function_call(func: Callable) -> Callable:
    """
    Decorator logging entry and exit of a function at TRACE level.

    Exceptions are logged at ERROR and re-raised.
    """
    logger = logging.getLogger(func.__module__)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        func_name = func.__name__
        args_str = ", ".join(repr(a)[:50] for a in args[:3])
        kwargs_str = ", ".join(f"{k}={repr(v)[:30]}" for k, v in list(kwargs.items())[:3])
        call_str = f"{args_str}, {kwargs_str}" if kwargs_str else args_str
        logger.log(TRACE, f"→ {func_name}({call_str})")

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.error(f"✖ {func_name} raised: {type(e).__name__}: {e}")
            raise
        logger.log(TRACE, f"← {func_name} returned: {repr(result)[:100]}")
        return result

    return wrapper


def log_constraint(
    logger: logging.Logger,
    name: str,
    satisfied: bool,
    details: str = "",
    level: int = logging.DEBUG,
):
    """Log a constraint check: ✓ at ``level`` when satisfied, ✗ at WARNING otherwise."""
    status = "✓" if satisfied else "✗"
    msg = f"[{status}] {name}"
    if details:
        msg += f" — {details}"

    if satisfied:
        logger.log(level, msg)
    else:
        logger.warning(msg)


class SolverLogger:
    """Phase/step logger for solver runs."""

    def __init__(self, name: str = "roster.solver"):
        self.logger = logging.getLogger(name)
        self.indent = 0

    def _prefix(self) -> str:
        return "  " * self.indent

    def phase(self, name: str):
        """Log start of a major phase."""
        self.logger.info(f"{'=' * 20} {name} {'=' * 20}")

    def step(self, description: str):
        """Log a step within a phase."""
        self.logger.info(f"{self._prefix()}▸ {description}")

    def detail(self, key: str, value: Any):
        """Log a detail at DEBUG level."""
        self.logger.debug(f"{self._prefix()}  {key}: {value}")

    def transition(self, context: str, state: str):
        """Log a state-machine transition at DEBUG level."""
        self.logger.debug(f"{self._prefix()}  {context} → {state}")

    def constraint(self, name: str, satisfied: bool, details: str = ""):
        log_constraint(self.logger, name, satisfied, details)

    def enter(self, context: str):
        """Enter a nested context."""
        self.logger.debug(f"{self._prefix()}┌─ {context}")
        self.indent += 1

    def exit(self, context: str = ""):
        """Exit a nested context."""
        self.indent = max(0, self.indent - 1)
        if context:
            self.logger.debug(f"{self._prefix()}└─ {context}")
